from pydantic import BaseModel

from .base import CamelModel


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminUserResponse(CamelModel):
    id: int
    email: str
    display_name: str
