# gigflow/services/hiring_service.py
#
# 錄取 (hire) 流程：在單一交易中
#   1. 案件 open -> assigned (以 WHERE status='open' 的條件式 UPDATE 做 compare-and-swap)
#   2. 被選中的提案 pending -> hired
#   3. 同案件其他 pending 提案 -> rejected
# 兩個人同時錄取同一案件時，後到的 UPDATE 會等先到者 commit，
# 然後比對到 0 筆而失敗，整個交易 rollback。
# commit 之後才推播通知；推播失敗不影響已成立的錄取。

import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from gigflow.core.config import settings
from gigflow.core.exceptions import (
    AppError, ConflictError, InternalError, NotFoundError, StoreTimeoutError
)
from gigflow.core.permissions import require_gig_owner
from gigflow.models.bid import Bid
from gigflow.models.gig import GIG_STATUS_OPEN
from gigflow.models.user import User
from gigflow.repositories.bid_repo import BidRepository
from gigflow.repositories.gig_repo import GigRepository
from gigflow.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# MySQL: 1213 deadlock, 1205 lock wait timeout
TRANSIENT_MYSQL_ERRORS = {1205, 1213}
TRANSIENT_MESSAGES = ("deadlock", "database is locked", "lock wait timeout", "could not serialize")

ALREADY_ASSIGNED = "This gig has already been assigned to someone else"


def is_transient_conflict(exc: DBAPIError) -> bool:
    """判斷是否為可重試一次的交易衝突"""
    orig = getattr(exc, "orig", None)
    args = getattr(orig, "args", ())
    if args and args[0] in TRANSIENT_MYSQL_ERRORS:
        return True
    text = str(orig or exc).lower()
    return any(marker in text for marker in TRANSIENT_MESSAGES)


class HiringService:
    MAX_ATTEMPTS = 2 # 第一次 + 最多重試一次

    def __init__(self, db: AsyncSession, notifier: Optional[NotificationService] = None):
        self.db = db
        self.bid_repo = BidRepository(db)
        self.gig_repo = GigRepository(db)
        self.notifier = notifier or NotificationService()

    async def hire_bid(self, bid_id: str, caller: User) -> Bid:
        """
        (雇主) 錄取一個提案。成功回傳已錄取的提案 (含 gig 與 freelancer)。
        """
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            try:
                await asyncio.wait_for(
                    self._run_hire_transaction(bid_id, caller),
                    timeout=settings.DB_OPERATION_TIMEOUT_SECONDS,
                )
                break
            except AppError:
                await self.db.rollback()
                raise
            except asyncio.TimeoutError:
                await self.db.rollback()
                logger.error(f"Hire transaction for bid {bid_id} timed out")
                raise StoreTimeoutError()
            except DBAPIError as e:
                await self.db.rollback()
                if attempt < self.MAX_ATTEMPTS and is_transient_conflict(e):
                    logger.warning(f"Transient conflict while hiring bid {bid_id}, retrying: {e}")
                    continue
                logger.error(f"Hire transaction for bid {bid_id} failed: {e}", exc_info=True)
                raise InternalError()

        hired_bid = await self.bid_repo.get_bid_by_id(bid_id)
        logger.info(f"Bid {bid_id} hired on gig {hired_bid.gig_id} by user {caller.user_id}")

        await self.notifier.notify_hired(hired_bid.gig, hired_bid)
        return hired_bid

    async def _run_hire_transaction(self, bid_id: str, caller: User) -> None:
        # 前置檢查 (皆在同一交易內)
        bid = await self.bid_repo.get_bid_by_id(bid_id)
        if not bid:
            raise NotFoundError("Bid not found")

        gig = await self.gig_repo.get_gig_by_id(bid.gig_id)
        if not gig:
            raise NotFoundError("Gig not found")

        require_gig_owner(caller, gig, "hire for this gig")

        if gig.status != GIG_STATUS_OPEN:
            raise ConflictError(ALREADY_ASSIGNED)

        # 競態保護：只有一個交易能把 open 改成 assigned
        if not await self.gig_repo.assign_if_open(gig.gig_id, bid.bid_id):
            logger.info(f"Lost hire race on gig {gig.gig_id} for bid {bid_id}")
            raise ConflictError(ALREADY_ASSIGNED)

        if not await self.bid_repo.mark_hired_if_pending(bid.bid_id):
            raise ConflictError("Only a pending bid can be hired")

        rejected = await self.bid_repo.reject_pending_siblings(gig.gig_id, bid.bid_id)

        await self.db.commit()
        logger.info(f"Gig {gig.gig_id} assigned to bid {bid.bid_id}, rejected {rejected} other bid(s)")
