# gigflow/schemas/base_schema.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """API 的 JSON 欄位一律使用 camelCase (gigId, createdAt ...)"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True, # orm_mode = True
    )


class Envelope(CamelModel):
    """所有回應共用的外層格式"""
    success: bool = True
    message: Optional[str] = None


class ErrorEnvelope(Envelope):
    success: bool = False
    errors: Optional[List[str]] = None
