from pydantic import BaseModel, EmailStr, Field

from jobtracker.core.auth import Role


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    role: Role


class AuthResponse(BaseModel):
    message: str
    user: UserOut
    token: str
