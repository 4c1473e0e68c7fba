"""Authentication related schemas."""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6)


class Token(BaseModel):
    access_token: str
    token_type: str
    user_id: int
    username: str


class IdentityRead(BaseModel):
    user_id: int
    username: str
