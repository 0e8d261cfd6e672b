# gigflow/repositories/gig_repo.py

import logging
from typing import List, Optional
from sqlalchemy import delete, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from gigflow.models.gig import Gig, GIG_STATUS_ASSIGNED, GIG_STATUS_OPEN
from gigflow.models.bid import Bid

logger = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    """讓搜尋字串中的 % 與 _ 以字面比對"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class GigRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_gig(self, gig: Gig) -> Gig:
        """
        建立新案件
        """
        self.db.add(gig)
        await self.db.commit()
        # 不使用 refresh()，重新查詢以取得含 owner 的完整物件
        return await self.get_gig_by_id(gig.gig_id)

    async def get_gig_by_id(self, gig_id: str) -> Optional[Gig]:
        """
        透過 ID 獲取單一案件 (owner 由 lazy="joined" 一併載入)
        """
        stmt = (
            select(Gig)
            .where(Gig.gig_id == gig_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_gigs(self, status: str = GIG_STATUS_OPEN, search: Optional[str] = None) -> List[Gig]:
        """
        依狀態篩選案件，並以不分大小寫的子字串比對 title 或 description
        """
        stmt = select(Gig).where(Gig.status == status)

        if search:
            pattern = f"%{_escape_like(search)}%"
            logger.info(f"Applying search filter: {search!r}")
            stmt = stmt.where(
                or_(
                    Gig.title.ilike(pattern, escape="\\"),
                    Gig.description.ilike(pattern, escape="\\"),
                )
            )

        stmt = stmt.order_by(Gig.created_at.desc())
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_gigs_by_owner_id(self, owner_id: str) -> List[Gig]:
        """
        查詢特定雇主的所有案件 (不限狀態)
        """
        stmt = select(Gig).where(Gig.owner_id == owner_id).order_by(Gig.created_at.desc())
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def update_open_gig(self, gig_id: str, values: dict) -> Optional[Gig]:
        """
        更新案件欄位；只有仍為 open 時才會寫入。
        回傳 None 表示案件已成交。
        """
        if values:
            stmt = (
                update(Gig)
                .where(Gig.gig_id == gig_id, Gig.status == GIG_STATUS_OPEN)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(stmt)
            if result.rowcount != 1:
                await self.db.rollback()
                return None
            await self.db.commit()
        # commit 後重新獲取，帶回 updated_at
        return await self.get_gig_by_id(gig_id)

    async def delete_gig(self, gig: Gig) -> int:
        """
        刪除案件及其所有提案 (同一交易)，回傳被刪除的提案數
        """
        result = await self.db.execute(
            delete(Bid)
            .where(Bid.gig_id == gig.gig_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.delete(gig)
        await self.db.commit()
        return result.rowcount

    async def assign_if_open(self, gig_id: str, bid_id: str) -> bool:
        """
        Compare-and-swap：只有在 status 仍為 open 時才改為 assigned。
        不會 commit；由呼叫端在同一交易中完成後續更新。
        回傳 False 表示已有其他人先成交。
        """
        stmt = (
            update(Gig)
            .where(Gig.gig_id == gig_id, Gig.status == GIG_STATUS_OPEN)
            .values(status=GIG_STATUS_ASSIGNED, hired_bid_id=bid_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1
