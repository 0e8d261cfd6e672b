# gigflow/services/gig_service.py
import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from gigflow.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from gigflow.core.permissions import require_gig_owner
from gigflow.models.user import User
from gigflow.models.gig import Gig, GIG_STATUS_ASSIGNED, GIG_STATUS_OPEN
from gigflow.schemas.gig_schema import GigCreate, GigUpdate
from gigflow.repositories.gig_repo import GigRepository

logger = logging.getLogger(__name__)

class GigService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.gig_repo = GigRepository(db)

    async def _get_gig_or_404(self, gig_id: str) -> Gig:
        gig = await self.gig_repo.get_gig_by_id(gig_id)
        if not gig:
            raise NotFoundError("Gig not found")
        return gig

    async def search_gigs(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Gig]:
        """
        業務邏輯：搜尋案件 (預設只看 open)
        """
        status = (status or "").strip() or GIG_STATUS_OPEN
        if status not in (GIG_STATUS_OPEN, GIG_STATUS_ASSIGNED):
            raise ValidationFailedError(errors=["status: must be one of open, assigned"])
        search = search.strip() if search else None
        return await self.gig_repo.list_gigs(status=status, search=search or None)

    async def get_gig_details(self, gig_id: str) -> Gig:
        return await self._get_gig_or_404(gig_id)

    async def get_my_gigs(self, user: User) -> List[Gig]:
        return await self.gig_repo.list_gigs_by_owner_id(user.user_id)

    async def create_gig(self, gig_data: GigCreate, user: User) -> Gig:
        """
        業務邏輯：建立案件，刊登者即為 owner
        """
        new_gig = Gig(
            gig_id=str(uuid.uuid4()),
            owner_id=user.user_id,
            title=gig_data.title,
            description=gig_data.description,
            budget=gig_data.budget,
            status=GIG_STATUS_OPEN,
        )
        created = await self.gig_repo.create_gig(new_gig)
        logger.info(f"Gig {created.gig_id} created by user {user.user_id}")
        return created

    async def update_gig(self, gig_id: str, data: GigUpdate, user: User) -> Gig:
        """
        業務邏輯：更新案件內容 (僅限 open)。
        只覆寫請求中有出現的欄位。
        """
        gig = await self._get_gig_or_404(gig_id)
        require_gig_owner(user, gig, "update this gig")
        if gig.status != GIG_STATUS_OPEN:
            raise ConflictError("Cannot update an assigned gig")

        updated = await self.gig_repo.update_open_gig(gig_id, data.model_dump(exclude_unset=True))
        if updated is None:
            raise ConflictError("Cannot update an assigned gig")
        logger.info(f"Gig {gig_id} updated by user {user.user_id}")
        return updated

    async def delete_gig(self, gig_id: str, user: User) -> None:
        """
        業務邏輯：刪除案件，連同所有提案
        """
        gig = await self._get_gig_or_404(gig_id)
        require_gig_owner(user, gig, "delete this gig")

        removed_bids = await self.gig_repo.delete_gig(gig)
        logger.info(f"Gig {gig_id} deleted by user {user.user_id} with {removed_bids} bid(s)")
