import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field
from passlib.context import CryptContext

from tastebuddy.schemas.enums import EmailVisibility
from tastebuddy.utils.dates import utcnow

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def generate_uuid() -> str:
    return str(uuid.uuid4())


class UserBase(SQLModel):
    """Base fields shared across all user schemas"""
    name: Optional[str] = Field(default=None, max_length=100)
    email: str = Field(..., index=True, sa_column_kwargs={"unique": True})
    image: Optional[str] = Field(default=None)
    bio: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Short introduction shown on the profile"
    )
    instagram_url: Optional[str] = Field(default=None)
    website_url: Optional[str] = Field(default=None)


class User(UserBase, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    hashed_password: str

    email_visibility: EmailVisibility = Field(
        default=EmailVisibility.HIDDEN,
        description="Who may see this user's email"
    )
    is_active: bool = Field(default=True)
    is_admin: bool = Field(default=False)

    # notification preferences
    notify_on_new_follower: bool = Field(default=True)
    notify_on_recipe_comment: bool = Field(default=True)
    notify_on_compliment: bool = Field(default=True)
    notify_on_new_recipe_from_following: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )

    def set_password(self, password: str):
        """Hash and store password securely"""
        if len(password) < 6:
            raise ValueError("Password must be at least 6 characters")
        self.hashed_password = pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify password against stored hash"""
        return pwd_context.verify(password, self.hashed_password)
