from medterm.models.category import Category, CategoryCreate, CategoryUpdate
from medterm.models.flashcard import (
    CategoryRef,
    FlashcardItem,
    SessionSnapshot,
    SessionState,
    SourceType,
)
from medterm.models.imports import ImportRequest, ImportResult
from medterm.models.phrase import MedicalPhrase, PhraseCreate, PhraseUpdate
from medterm.models.term import MedicalTerm, TermCreate, TermUpdate
from medterm.models.user import Role, TokenPayload, User, UserCreate, UserWithCounts

__all__ = [
    "Category",
    "CategoryCreate",
    "CategoryRef",
    "CategoryUpdate",
    "FlashcardItem",
    "ImportRequest",
    "ImportResult",
    "MedicalPhrase",
    "MedicalTerm",
    "PhraseCreate",
    "PhraseUpdate",
    "Role",
    "SessionSnapshot",
    "SessionState",
    "SourceType",
    "TermCreate",
    "TermUpdate",
    "TokenPayload",
    "User",
    "UserCreate",
    "UserWithCounts",
]
