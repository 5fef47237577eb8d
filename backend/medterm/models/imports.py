from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from medterm.models.phrase import MedicalPhrase
from medterm.models.term import MedicalTerm


class ImportRequest(BaseModel):
    items: list[Any]
    global_categories: list[Any] | None = Field(
        default=None, validation_alias=AliasChoices("global_categories", "globalCategories")
    )


class ImportResult(BaseModel):
    imported: int
    skipped: int
    message: str
    items: list[MedicalTerm | MedicalPhrase]
