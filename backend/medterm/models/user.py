from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class User(BaseModel):
    id: str
    username: str
    email: str
    role: Role
    created_at: str


class UserWithCounts(User):
    term_count: int = 0
    phrase_count: int = 0
    category_count: int = 0


class UserCreate(BaseModel):
    username: str = ""
    email: str = ""
    password: str = ""
    role: Role = Role.USER


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user: User
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    user_id: str
    username: str
    role: Role
