from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.models.comment import Comment
from tastebuddy.models.user import User
from tastebuddy.schemas.comment import CommentCreate, CommentUpdate


def _as_read(comment: Comment, user: Optional[User]) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "user_id": comment.user_id,
        "recipe_id": comment.recipe_id,
        "user": {"id": user.id, "name": user.name, "image": user.image} if user else None,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
    }


async def create_comment(db: AsyncSession, user: User, data: CommentCreate) -> dict:
    comment = Comment(user_id=user.id, recipe_id=data.recipe_id, content=data.content.strip())
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return _as_read(comment, user)


async def get_comment_by_id(db: AsyncSession, comment_id: str) -> Optional[Comment]:
    return await db.get(Comment, comment_id)


async def get_comments_for_recipe(db: AsyncSession, recipe_id: str) -> List[dict]:
    """Comments with their authors, newest first"""
    result = await db.execute(
        select(Comment, User)
        .join(User, User.id == Comment.user_id)
        .where(Comment.recipe_id == recipe_id)
        .order_by(Comment.created_at.desc())
    )
    return [_as_read(comment, user) for comment, user in result.all()]


async def update_comment(db: AsyncSession, comment: Comment, user: User, data: CommentUpdate) -> dict:
    comment.content = data.content.strip()
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return _as_read(comment, user)


async def delete_comment(db: AsyncSession, comment: Comment) -> None:
    await db.delete(comment)
    await db.commit()
