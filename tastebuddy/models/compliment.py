import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from tastebuddy.schemas.enums import ComplimentType, PaymentStatus
from tastebuddy.utils.dates import utcnow


class Compliment(SQLModel, table=True):
    """A private note (optionally with a tip) from one user to a chef"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    type: ComplimentType = Field(default=ComplimentType.MESSAGE)
    message: str = Field(..., max_length=500)
    tip_amount: Optional[float] = Field(default=None)
    is_anonymous: bool = Field(default=False)
    from_user_id: str = Field(foreign_key="user.id", index=True)
    to_user_id: str = Field(foreign_key="user.id", index=True)
    recipe_id: Optional[str] = Field(default=None, foreign_key="recipe.id")
    payment_status: PaymentStatus = Field(default=PaymentStatus.COMPLETED)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )
