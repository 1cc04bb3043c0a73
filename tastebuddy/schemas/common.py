from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint: {success, data?, message?}"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


def ok(data=None, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    return body


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


def paginate(page: int, limit: int, total: int) -> Pagination:
    total_pages = (total + limit - 1) // limit if limit else 0
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_prev_page=page > 1
    )
