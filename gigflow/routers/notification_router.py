# gigflow/routers/notification_router.py

import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from gigflow.core.database import AsyncSessionLocal
from gigflow.core.exceptions import UnauthenticatedError
from gigflow.core.security import extract_token, resolve_user_from_token
from gigflow.core.websocket_manager import notification_hub

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


async def _send_error(websocket: WebSocket, message: str) -> None:
    await websocket.send_json({"event": "error", "data": {"message": message}})


@router.websocket("/ws")
async def notification_socket(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
):
    """
    即時通知端點。
    - 連線 URL: /ws?token=<JWT_TOKEN> (或帶 token cookie)
    - 連線後送出 {"event": "join", "userId": "<自己的 user id>"} 才會收到推播
    """
    await websocket.accept()

    # 只在驗證時使用 DB session，不佔用整個連線期間
    async with AsyncSessionLocal() as db:
        try:
            caller = await resolve_user_from_token(extract_token(websocket.cookies, token), db)
        except UnauthenticatedError as e:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)
            return
        caller_id = caller.user_id

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except (ValueError, KeyError):
                # 非 JSON 文字或二進位訊框
                await _send_error(websocket, "Malformed message")
                continue
            if not isinstance(data, dict):
                await _send_error(websocket, "Malformed message")
                continue

            event = data.get("event")
            user_id = str(data.get("userId") or "")

            if event == "join":
                # 只能訂閱自己的頻道
                if user_id != caller_id:
                    await _send_error(websocket, "You can only join your own channel")
                    continue
                await notification_hub.join(user_id, websocket)
                await websocket.send_json({"event": "joined", "data": {"userId": user_id}})
            elif event == "leave":
                await notification_hub.leave(caller_id, websocket)
                await websocket.send_json({"event": "left", "data": {"userId": caller_id}})
            else:
                await _send_error(websocket, f"Unknown event: {event}")
    except WebSocketDisconnect:
        logger.info(f"Socket of user {caller_id} disconnected")
    finally:
        await notification_hub.disconnect(websocket)
