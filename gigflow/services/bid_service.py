# gigflow/services/bid_service.py

import logging
import uuid
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigflow.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from gigflow.core.permissions import owns_gig, require_bid_owner, require_gig_owner
from gigflow.models.user import User
from gigflow.models.bid import Bid, BID_STATUS_PENDING
from gigflow.models.gig import GIG_STATUS_OPEN
from gigflow.repositories.bid_repo import BidRepository
from gigflow.repositories.gig_repo import GigRepository
from gigflow.schemas.bid_schema import BidCreate, BidUpdate

logger = logging.getLogger(__name__)


class BidService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.bid_repo = BidRepository(db)
        self.gig_repo = GigRepository(db)

    async def _get_bid_or_404(self, bid_id: str) -> Bid:
        bid = await self.bid_repo.get_bid_by_id(bid_id)
        if not bid:
            raise NotFoundError("Bid not found")
        return bid

    async def create_bid(self, bid_data: BidCreate, freelancer: User) -> Bid:
        """
        工作者對案件提案。
        檢查順序：案件存在 -> 案件 open -> 不是自己的案件 -> 尚未提案過
        """
        gig = await self.gig_repo.get_gig_by_id(bid_data.gig_id)
        if not gig:
            raise NotFoundError("Gig not found")
        if gig.status != GIG_STATUS_OPEN:
            raise ConflictError("This gig is no longer accepting bids")
        if owns_gig(freelancer, gig):
            raise ForbiddenError("You cannot bid on your own gig")

        existing = await self.bid_repo.check_existing_bid(gig.gig_id, freelancer.user_id)
        if existing:
            raise ConflictError("You have already submitted a bid for this gig")

        new_bid = Bid(
            bid_id=str(uuid.uuid4()),
            gig_id=gig.gig_id,
            freelancer_id=freelancer.user_id,
            message=bid_data.message,
            price=bid_data.price,
            status=BID_STATUS_PENDING,
        )
        try:
            created = await self.bid_repo.create_bid_if_gig_open(new_bid)
        except IntegrityError:
            # 同一工作者的兩個請求同時通過上面的檢查，由唯一索引擋下
            await self.db.rollback()
            raise ConflictError("You have already submitted a bid for this gig")
        if created is None:
            # 上面檢查之後案件剛好被錄取
            raise ConflictError("This gig is no longer accepting bids")

        logger.info(f"Bid {created.bid_id} submitted on gig {gig.gig_id} by user {freelancer.user_id}")
        return created

    async def get_bids_for_gig(self, gig_id: str, user: User) -> List[Bid]:
        """
        (雇主) 檢視自己案件的所有提案
        """
        gig = await self.gig_repo.get_gig_by_id(gig_id)
        if not gig:
            raise NotFoundError("Gig not found")
        require_gig_owner(user, gig, "view bids for this gig")
        return await self.bid_repo.get_bids_by_gig_id(gig_id)

    async def get_my_bids(self, user: User) -> List[Bid]:
        return await self.bid_repo.get_bids_by_freelancer_id(user.user_id)

    async def update_bid(self, bid_id: str, data: BidUpdate, user: User) -> Bid:
        """
        (工作者) 修改自己 pending 狀態的提案；只覆寫有傳入的欄位
        """
        bid = await self._get_bid_or_404(bid_id)
        require_bid_owner(user, bid, "update this bid")
        if bid.status != BID_STATUS_PENDING:
            raise ConflictError("Cannot update a bid that is not pending")

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return bid

        updated = await self.bid_repo.update_pending_bid(bid_id, changes)
        if updated is None:
            raise ConflictError("Cannot update a bid that is not pending")
        logger.info(f"Bid {bid_id} updated by user {user.user_id}")
        return updated

    async def delete_bid(self, bid_id: str, user: User) -> None:
        """
        (工作者) 撤回自己 pending 狀態的提案
        """
        bid = await self._get_bid_or_404(bid_id)
        require_bid_owner(user, bid, "delete this bid")
        if bid.status != BID_STATUS_PENDING:
            raise ConflictError("Cannot delete a bid that is not pending")

        if not await self.bid_repo.delete_pending_bid(bid_id):
            raise ConflictError("Cannot delete a bid that is not pending")
        logger.info(f"Bid {bid_id} withdrawn by user {user.user_id}")
