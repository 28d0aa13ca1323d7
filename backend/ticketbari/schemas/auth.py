from pydantic import BaseModel, EmailStr


class TokenRequest(BaseModel):
    email: EmailStr


class Token(BaseModel):
    token: str
