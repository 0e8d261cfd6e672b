# gigflow/routers/bid_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from gigflow.core.database import get_db
from gigflow.core.security import get_current_user
from gigflow.models.user import User
from gigflow.services.bid_service import BidService
from gigflow.services.hiring_service import HiringService
from gigflow.schemas.base_schema import Envelope
from gigflow.schemas.bid_schema import BidCreate, BidListResponse, BidResponse, BidUpdate

# 建立 API Router
router = APIRouter(
    prefix="/bids",
    tags=["Bids"],
    dependencies=[Depends(get_current_user)] # 重要：此 router 下所有 API 都需要登入
)

# -----------------------------------------------------------------
# 1. (工作者) 提交提案
# -----------------------------------------------------------------
@router.post("", response_model=BidResponse, status_code=status.HTTP_201_CREATED)
async def submit_bid(
    bid_data: BidCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = BidService(db)
    new_bid = await service.create_bid(bid_data, current_user)
    return {"success": True, "message": "Bid submitted successfully", "bid": new_bid}

# -----------------------------------------------------------------
# 2. (工作者) 檢視自己提交的所有提案
#    必須註冊在 /{gig_id} 之前
# -----------------------------------------------------------------
@router.get("/my/bids", response_model=BidListResponse)
async def get_my_bids(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = BidService(db)
    bids = await service.get_my_bids(current_user)
    return {"success": True, "count": len(bids), "bids": bids}

# -----------------------------------------------------------------
# 3. (雇主) 檢視特定案件的所有提案
# -----------------------------------------------------------------
@router.get("/{gig_id}", response_model=BidListResponse)
async def get_bids_for_gig(
    gig_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = BidService(db)
    bids = await service.get_bids_for_gig(gig_id, current_user)
    return {"success": True, "count": len(bids), "bids": bids}

# -----------------------------------------------------------------
# 4. (雇主) 錄取提案
# -----------------------------------------------------------------
@router.patch("/{bid_id}/hire", response_model=BidResponse)
async def hire_bid(
    bid_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    錄取提案：案件改為 assigned、此提案改為 hired、其他 pending 提案改為 rejected。
    案件已被錄取時回 400。
    """
    service = HiringService(db)
    hired_bid = await service.hire_bid(bid_id, current_user)
    return {"success": True, "message": "Freelancer hired successfully", "bid": hired_bid}

# -----------------------------------------------------------------
# 5. (工作者) 修改 / 撤回 pending 提案
# -----------------------------------------------------------------
@router.put("/{bid_id}", response_model=BidResponse)
async def update_bid(
    bid_id: str,
    bid_data: BidUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = BidService(db)
    updated_bid = await service.update_bid(bid_id, bid_data, current_user)
    return {"success": True, "message": "Bid updated successfully", "bid": updated_bid}

@router.delete("/{bid_id}", response_model=Envelope)
async def withdraw_bid(
    bid_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = BidService(db)
    await service.delete_bid(bid_id, current_user)
    return {"success": True, "message": "Bid deleted successfully"}
