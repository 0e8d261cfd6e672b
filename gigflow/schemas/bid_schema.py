# gigflow/schemas/bid_schema.py
from pydantic import Field, StringConstraints, model_validator
from datetime import datetime
from typing import Annotated, List, Optional

from gigflow.schemas.base_schema import CamelModel, Envelope
from gigflow.schemas.gig_schema import GigBrief
from gigflow.schemas.user_schema import UserBrief

BidMessage = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=1000)]
BidPrice = Annotated[float, Field(ge=1, le=1_000_000, allow_inf_nan=False)]

# --- 建立 (Create) ---
class BidCreate(CamelModel):
    # freelancer_id 由 Token 取得
    gig_id: str = Field(..., min_length=1)
    message: BidMessage
    price: BidPrice

# --- 更新 (Update)，只有 pending 狀態可修改 ---
class BidUpdate(CamelModel):
    message: Optional[BidMessage] = None
    price: Optional[BidPrice] = None

    @model_validator(mode="after")
    def reject_explicit_null(self):
        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

# --- 讀取 (Read / Out) ---
class BidOut(CamelModel):
    bid_id: str
    gig_id: str
    freelancer_id: str
    message: str
    price: float
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# --- 包含關聯資料的完整輸出 ---
class BidOutWithRelations(BidOut):
    freelancer: Optional[UserBrief] = None
    gig: Optional[GigBrief] = None


class BidResponse(Envelope):
    bid: BidOutWithRelations


class BidListResponse(Envelope):
    count: int
    bids: List[BidOutWithRelations] = []
