from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.models.compliment import Compliment
from tastebuddy.models.user import User
from tastebuddy.schemas.compliment import ANONYMOUS_SENDER, ComplimentCreate
from tastebuddy.schemas.enums import ComplimentType, PaymentStatus


def as_read(compliment: Compliment, sender: Optional[User]) -> dict:
    """Serialize a compliment, masking the sender when it was sent anonymously"""
    if compliment.is_anonymous:
        from_user = ANONYMOUS_SENDER.model_dump()
        from_user_id = None
    else:
        from_user = {"id": sender.id, "name": sender.name, "image": sender.image} if sender else None
        from_user_id = compliment.from_user_id

    return {
        "id": compliment.id,
        "type": compliment.type,
        "message": compliment.message,
        "tip_amount": compliment.tip_amount,
        "is_anonymous": compliment.is_anonymous,
        "from_user_id": from_user_id,
        "to_user_id": compliment.to_user_id,
        "recipe_id": compliment.recipe_id,
        "payment_status": compliment.payment_status,
        "from_user": from_user,
        "created_at": compliment.created_at,
    }


async def create_compliment(db: AsyncSession, sender: User, data: ComplimentCreate) -> Compliment:
    compliment = Compliment(
        type=data.type,
        message=data.message,
        tip_amount=data.tip_amount if data.type == ComplimentType.TIP else None,
        is_anonymous=data.is_anonymous,
        from_user_id=sender.id,
        to_user_id=data.to_user_id,
        recipe_id=data.recipe_id,
        # tips stay pending until a payment is recorded against them
        payment_status=PaymentStatus.PENDING if data.type == ComplimentType.TIP else PaymentStatus.COMPLETED
    )
    db.add(compliment)
    await db.commit()
    await db.refresh(compliment)
    return compliment


async def get_compliment(db: AsyncSession, compliment_id: str) -> Optional[Compliment]:
    return await db.get(Compliment, compliment_id)


async def get_compliments_for_user(db: AsyncSession, to_user_id: str) -> List[dict]:
    result = await db.execute(
        select(Compliment, User)
        .join(User, User.id == Compliment.from_user_id)
        .where(Compliment.to_user_id == to_user_id)
        .order_by(Compliment.created_at.desc())
    )
    return [as_read(compliment, sender) for compliment, sender in result.all()]


async def update_compliment_message(db: AsyncSession, compliment: Compliment, message: str) -> Compliment:
    compliment.message = message
    db.add(compliment)
    await db.commit()
    await db.refresh(compliment)
    return compliment


async def delete_compliment(db: AsyncSession, compliment: Compliment) -> None:
    await db.delete(compliment)
    await db.commit()
