# gigflow/repositories/bid_repo.py

from sqlalchemy import delete, insert, literal, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List, Optional

from gigflow.models.bid import Bid, BID_STATUS_HIRED, BID_STATUS_PENDING, BID_STATUS_REJECTED
from gigflow.models.gig import Gig, GIG_STATUS_OPEN

class BidRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_bid_by_id(self, bid_id: str) -> Optional[Bid]:
        """
        透過 ID 獲取單一提案 (gig、freelancer 由 lazy="joined" 一併載入)
        """
        stmt = (
            select(Bid)
            .where(Bid.bid_id == bid_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def check_existing_bid(self, gig_id: str, freelancer_id: str) -> Optional[Bid]:
        """
        檢查特定使用者是否已對特定案件提案 (唯一性檢查)
        """
        stmt = select(Bid).where(
            Bid.gig_id == gig_id,
            Bid.freelancer_id == freelancer_id
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_bids_by_gig_id(self, gig_id: str) -> List[Bid]:
        """
        獲取特定案件的所有提案 (雇主檢視用)
        """
        stmt = select(Bid).where(Bid.gig_id == gig_id).order_by(Bid.created_at.desc())
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_bids_by_freelancer_id(self, freelancer_id: str) -> List[Bid]:
        """
        獲取特定工作者的所有提案 (「我的提案」)
        """
        stmt = select(Bid).where(Bid.freelancer_id == freelancer_id).order_by(Bid.created_at.desc())
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def create_bid_if_gig_open(self, bid: Bid) -> Optional[Bid]:
        """
        新增 pending 提案，只有案件在寫入當下仍為 open 時才會插入 (INSERT ... SELECT)。
        回傳 None 表示案件已成交；唯一索引衝突 (IntegrityError) 交由呼叫端處理。
        """
        source = select(
            literal(bid.bid_id),
            Gig.gig_id,
            literal(bid.freelancer_id),
            literal(bid.message),
            literal(bid.price, Bid.price.type),
            literal(BID_STATUS_PENDING),
        ).where(Gig.gig_id == bid.gig_id, Gig.status == GIG_STATUS_OPEN)
        stmt = insert(Bid).from_select(
            ["bid_id", "gig_id", "freelancer_id", "message", "price", "status"], source
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            await self.db.rollback()
            return None
        await self.db.commit()
        return await self.get_bid_by_id(bid.bid_id)

    async def update_pending_bid(self, bid_id: str, values: dict) -> Optional[Bid]:
        """
        更新提案 (message / price)；只有仍為 pending 時才會寫入。
        回傳 None 表示提案已被處理 (例如剛好被 hire)。
        """
        stmt = (
            update(Bid)
            .where(Bid.bid_id == bid_id, Bid.status == BID_STATUS_PENDING)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            await self.db.rollback()
            return None
        await self.db.commit()
        return await self.get_bid_by_id(bid_id)

    async def delete_pending_bid(self, bid_id: str) -> bool:
        """
        刪除 (撤回) 提案；只有仍為 pending 時才會刪除
        """
        stmt = (
            delete(Bid)
            .where(Bid.bid_id == bid_id, Bid.status == BID_STATUS_PENDING)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            await self.db.rollback()
            return False
        await self.db.commit()
        return True

    # --- 以下供 HiringService 在單一交易中使用，不會 commit ---

    async def mark_hired_if_pending(self, bid_id: str) -> bool:
        stmt = (
            update(Bid)
            .where(Bid.bid_id == bid_id, Bid.status == BID_STATUS_PENDING)
            .values(status=BID_STATUS_HIRED)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def reject_pending_siblings(self, gig_id: str, hired_bid_id: str) -> int:
        """
        將同一案件中其他 pending 提案設為 rejected，回傳筆數
        """
        stmt = (
            update(Bid)
            .where(
                Bid.gig_id == gig_id,
                Bid.bid_id != hired_bid_id,
                Bid.status == BID_STATUS_PENDING,
            )
            .values(status=BID_STATUS_REJECTED)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount
