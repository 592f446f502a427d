from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    token: str


class TokenClaims(BaseModel):
    sub: str
    email: Optional[str] = None
    role: str
    iat: int
    exp: int

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
