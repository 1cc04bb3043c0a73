from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from tastebuddy.schemas.enums import ComplimentType, PaymentStatus
from tastebuddy.schemas.user import MinimalUserRead


class ComplimentCreate(BaseModel):
    type: ComplimentType = ComplimentType.MESSAGE
    message: str = Field(..., min_length=1, max_length=500)
    tip_amount: Optional[float] = Field(default=None, gt=0)
    is_anonymous: bool = False
    to_user_id: str = Field(..., min_length=1)
    recipe_id: Optional[str] = None


class ComplimentUpdate(BaseModel):
    message: Optional[str] = Field(default=None, min_length=1, max_length=500)


class ComplimentRead(BaseModel):
    id: str
    type: ComplimentType
    message: str
    tip_amount: Optional[float] = None
    is_anonymous: bool
    from_user_id: Optional[str] = None
    to_user_id: str
    recipe_id: Optional[str] = None
    payment_status: PaymentStatus
    from_user: Optional[MinimalUserRead] = None
    created_at: datetime

    class Config:
        from_attributes = True


ANONYMOUS_SENDER = MinimalUserRead(id="anonymous", name="Anonymous", image=None)
