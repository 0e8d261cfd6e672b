# gigflow/schemas/gig_schema.py
from pydantic import Field, StringConstraints, model_validator
from typing import Annotated, List, Optional
from datetime import datetime

from gigflow.schemas.base_schema import CamelModel, Envelope
from gigflow.schemas.user_schema import UserBrief

GigTitle = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
GigDescription = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)]

# Numeric(12, 2) 欄位可容納的範圍內
MAX_BUDGET = 1_000_000_000
GigBudget = Annotated[float, Field(gt=0, le=MAX_BUDGET, allow_inf_nan=False)]

# 1. 刊登案件時的 Request Body
class GigCreate(CamelModel):
    title: GigTitle
    description: GigDescription
    budget: GigBudget

# 2. 更新案件時的 Request Body (所有欄位皆可選)
class GigUpdate(CamelModel):
    title: Optional[GigTitle] = None
    description: Optional[GigDescription] = None
    budget: Optional[GigBudget] = None

    @model_validator(mode="after")
    def reject_explicit_null(self):
        # 沒傳的欄位保持不變；有傳就必須是合法值
        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

# 3. 嵌在提案中的案件摘要
class GigBrief(CamelModel):
    gig_id: str
    title: str
    description: str
    budget: float
    status: str

# 4. 回傳給前端的案件資料
class GigOut(CamelModel):
    gig_id: str
    title: str
    description: str
    budget: float
    status: str
    owner_id: str
    hired_bid_id: Optional[str] = None
    owner: Optional[UserBrief] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GigResponse(Envelope):
    gig: GigOut


class GigListResponse(Envelope):
    count: int
    gigs: List[GigOut] = []
