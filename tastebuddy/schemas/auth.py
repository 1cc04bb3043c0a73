from pydantic import BaseModel


class Token(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
