# gigflow/core/websocket_manager.py

import asyncio
import logging
from typing import Dict, List, Optional

from fastapi import WebSocket, status

logger = logging.getLogger(__name__)

# 連線管理器：維護 user_id -> List[WebSocket] 的映射
class NotificationHub:
    """
    管理推播用的 WebSocket 連線。一位使用者可同時有多個連線 (多個分頁/裝置)。
    只保存在記憶體中，重啟後清空；不做任何持久化或補送。
    """

    def __init__(self):
        # 結構: {user_id: [WebSocket, ...]}
        self.active_connections: Dict[str, List[WebSocket]] = {}
        self._lock: Optional[asyncio.Lock] = None

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def startup(self) -> None:
        """在應用程式啟動時呼叫 (lifespan)"""
        self._lock = asyncio.Lock()
        self.active_connections = {}
        logger.info("Notification hub started")

    async def shutdown(self) -> None:
        """在應用程式關閉時呼叫：關閉所有連線並清空登記表"""
        async with self._get_lock():
            sockets = [ws for conns in self.active_connections.values() for ws in conns]
            self.active_connections = {}
        for websocket in sockets:
            try:
                await websocket.close(code=status.WS_1001_GOING_AWAY)
            except Exception as e:
                logger.debug(f"Ignoring error while closing socket on shutdown: {e}")
        logger.info(f"Notification hub stopped, closed {len(sockets)} connection(s)")

    async def join(self, user_id: str, websocket: WebSocket) -> None:
        async with self._get_lock():
            connections = self.active_connections.setdefault(user_id, [])
            if websocket not in connections:
                connections.append(websocket)
            total = len(connections)
        logger.info(f"User {user_id} joined notifications. Total connections: {total}")

    async def leave(self, user_id: str, websocket: WebSocket) -> None:
        async with self._get_lock():
            self._remove(user_id, websocket)
        logger.info(f"User {user_id} left notifications")

    async def disconnect(self, websocket: WebSocket) -> None:
        """連線中斷時，從所有使用者底下移除"""
        async with self._get_lock():
            for user_id in list(self.active_connections):
                self._remove(user_id, websocket)

    def _remove(self, user_id: str, websocket: WebSocket) -> None:
        connections = self.active_connections.get(user_id)
        if not connections:
            return
        if websocket in connections:
            connections.remove(websocket)
        if not connections:
            del self.active_connections[user_id]

    def connection_count(self, user_id: str) -> int:
        return len(self.active_connections.get(user_id, []))

    async def send_to_user(self, user_id: str, event: str, data: dict) -> int:
        """
        推送事件給該使用者目前所有連線 (at-most-once)，回傳成功送達的連線數。
        送不出去的連線會被移除。
        """
        async with self._get_lock():
            targets = list(self.active_connections.get(user_id, []))

        delivered = 0
        for websocket in targets:
            try:
                await websocket.send_json({"event": event, "data": data})
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping dead connection of user {user_id}: {e}")
                async with self._get_lock():
                    self._remove(user_id, websocket)
        return delivered

# 實例化管理器
notification_hub = NotificationHub()
