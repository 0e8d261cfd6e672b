# gigflow/routers/gig_router.py
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

# 匯入核心依賴
from gigflow.core.database import get_db
from gigflow.core.security import get_current_user
from gigflow.models.user import User

# 匯入 Service 和 Schemas
from gigflow.services.gig_service import GigService
from gigflow.schemas.base_schema import Envelope
from gigflow.schemas.gig_schema import (
    GigCreate, GigListResponse, GigResponse, GigUpdate
)

logger = logging.getLogger(__name__)

# 列表、搜尋、單筆查詢為公開 API；其餘端點個別要求登入
router = APIRouter(
    prefix="/gigs",
    tags=["Gigs"],
)

@router.get("", response_model=GigListResponse)
async def search_gigs(
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """
    搜尋/篩選案件 (公開)。

    - `status` 未提供或為空白時視為 open。
    - `search` 不分大小寫比對 title 或 description。
    """
    service = GigService(db)
    gigs = await service.search_gigs(status=status_filter, search=search)
    return {"success": True, "count": len(gigs), "gigs": gigs}

@router.post(
    "",
    response_model=GigResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_new_gig(
    gig_data: GigCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    刊登新案件，刊登者即為案件擁有者。
    """
    service = GigService(db)
    new_gig = await service.create_gig(gig_data=gig_data, user=current_user)
    return {"success": True, "message": "Gig created successfully", "gig": new_gig}

@router.get("/my/gigs", response_model=GigListResponse)
async def read_my_gigs(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    獲取當前登入者自己刊登的所有案件 (不限狀態)。
    """
    service = GigService(db)
    gigs = await service.get_my_gigs(current_user)
    return {"success": True, "count": len(gigs), "gigs": gigs}

@router.get("/{gig_id}", response_model=GigResponse)
async def get_gig_by_id(
    gig_id: str,
    db: AsyncSession = Depends(get_db)
):
    service = GigService(db)
    gig = await service.get_gig_details(gig_id)
    return {"success": True, "gig": gig}

@router.put("/{gig_id}", response_model=GigResponse)
async def update_gig_details(
    gig_id: str,
    gig_data: GigUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    (擁有者) 更新 open 案件的 title / description / budget。
    """
    service = GigService(db)
    updated_gig = await service.update_gig(gig_id=gig_id, data=gig_data, user=current_user)
    return {"success": True, "message": "Gig updated successfully", "gig": updated_gig}

@router.delete("/{gig_id}", response_model=Envelope)
async def delete_gig(
    gig_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    (擁有者) 刪除案件及其所有提案。
    """
    service = GigService(db)
    await service.delete_gig(gig_id, current_user)
    return {"success": True, "message": "Gig and associated bids deleted successfully"}
