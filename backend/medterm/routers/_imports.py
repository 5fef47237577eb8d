from typing import Any

from fastapi import HTTPException
from pydantic import ValidationError

from medterm.models.imports import ImportRequest


def parse_import_body(payload: Any) -> ImportRequest:
    """Accept either ``{items, globalCategories}`` or a bare list of items."""
    if isinstance(payload, list):
        return ImportRequest(items=payload)
    try:
        return ImportRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="Invalid JSON format") from e
