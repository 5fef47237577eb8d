from pydantic import AliasChoices, BaseModel, Field

from medterm.models.category import Category

_CATEGORY_IDS = AliasChoices("category_ids", "categoryIds", "categories")


class TermCreate(BaseModel):
    term: str = ""
    meaning: str = ""
    pronunciation: str | None = None
    category_ids: list[str] = Field(default_factory=list, validation_alias=_CATEGORY_IDS)


class TermUpdate(BaseModel):
    term: str = ""
    meaning: str = ""
    pronunciation: str | None = None
    # None keeps the current category links
    category_ids: list[str] | None = Field(default=None, validation_alias=_CATEGORY_IDS)


class MedicalTerm(BaseModel):
    id: str
    term: str
    meaning: str
    pronunciation: str | None = None
    categories: list[Category] = []
    created_by: str
    created_at: str
    updated_at: str
