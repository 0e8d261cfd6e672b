# gigflow/services/notification_service.py

import logging

from gigflow.core.websocket_manager import NotificationHub, notification_hub
from gigflow.models.bid import Bid
from gigflow.models.gig import Gig

logger = logging.getLogger(__name__)

HIRED_EVENT = "hired"

class NotificationService:
    """即時推播；不寫資料庫，失敗只記錄不拋出"""

    def __init__(self, hub: NotificationHub = notification_hub):
        self.hub = hub

    @staticmethod
    def build_hired_payload(gig: Gig, bid: Bid) -> dict:
        return {
            "message": f'You have been hired for "{gig.title}"!',
            "gig": {"id": gig.gig_id, "title": gig.title},
            "bid": {"id": bid.bid_id, "price": bid.price},
        }

    async def notify_hired(self, gig: Gig, bid: Bid) -> int:
        """
        通知被錄取的工作者。回傳送達的連線數；任何錯誤都不往外拋。
        """
        try:
            payload = self.build_hired_payload(gig, bid)
            delivered = await self.hub.send_to_user(bid.freelancer_id, HIRED_EVENT, payload)
        except Exception as e:
            logger.error(f"Failed to dispatch hired notification for bid {bid.bid_id}: {e}", exc_info=True)
            return 0

        logger.info(
            f"Hired notification for bid {bid.bid_id} sent to user {bid.freelancer_id} "
            f"({delivered} connection(s))"
        )
        return delivered
