from pydantic import BaseModel

DEFAULT_COLOR = "#3B82F6"


class CategoryCreate(BaseModel):
    name: str = ""
    description: str | None = None
    color: str = DEFAULT_COLOR


class CategoryUpdate(BaseModel):
    name: str = ""
    description: str | None = None
    color: str | None = None


class Category(BaseModel):
    id: str
    name: str
    description: str | None = None
    color: str
    created_by: str
    created_at: str
    updated_at: str
