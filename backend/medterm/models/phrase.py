from pydantic import AliasChoices, BaseModel, Field

from medterm.models.category import Category

_CATEGORY_IDS = AliasChoices("category_ids", "categoryIds", "categories")


class PhraseCreate(BaseModel):
    phrase: str = ""
    explanation: str = ""
    category_ids: list[str] = Field(default_factory=list, validation_alias=_CATEGORY_IDS)


class PhraseUpdate(BaseModel):
    phrase: str = ""
    explanation: str = ""
    category_ids: list[str] | None = Field(default=None, validation_alias=_CATEGORY_IDS)


class MedicalPhrase(BaseModel):
    id: str
    phrase: str
    explanation: str
    categories: list[Category] = []
    created_by: str
    created_at: str
    updated_at: str
