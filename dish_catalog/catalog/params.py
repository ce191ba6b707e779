from __future__ import annotations

import json
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from .models import SORTABLE_FIELDS, DishListQuery


def parse_json_array(name: str, raw: Optional[str]) -> list[str] | None:
    """
    Decode a JSON-encoded array of strings from a query parameter.

    Returns None when the parameter is absent or blank.
    """
    if raw is None or not raw.strip():
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(
            f"Invalid filter format for '{name}'. Arrays should be JSON strings, "
            f'e.g. ["dessert", "snack"].'
        ) from exc

    if not isinstance(value, list):
        raise ValidationError(f"Invalid filter format for '{name}': expected a JSON array.")
    if not all(isinstance(v, str) for v in value):
        raise ValidationError(f"Invalid filter format for '{name}': array items must be strings.")
    return value


def parse_list_query(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: Optional[str] = None,
    diet: Optional[str] = None,
    course: Optional[str] = None,
    flavor_profile: Optional[str] = None,
    max_limit: int = 100,
    default_limit: int = 10,
) -> DishListQuery:
    """Validate raw listing parameters into a DishListQuery."""
    sort_by = (sort_by or "name").strip()
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError(
            f"Invalid sortBy '{sort_by}'. Allowed: {', '.join(SORTABLE_FIELDS)}."
        )

    values = {
        "page": _parse_positive_int("page", page, 1),
        "limit": _parse_positive_int("limit", limit, default_limit),
        "sort_by": sort_by,
        "order": (order or "asc").strip().lower(),
        "diet": diet.strip() if diet and diet.strip() else None,
        "course": parse_json_array("course", course),
        "flavor_profile": parse_json_array("flavor_profile", flavor_profile),
    }
    if values["limit"] > max_limit:
        raise ValidationError(f"limit must not exceed {max_limit}.")

    try:
        return DishListQuery(**values)
    except PydanticValidationError as exc:
        raise ValidationError(describe_errors(exc.errors(), "Invalid query parameters")) from exc


def _parse_positive_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or not str(raw).strip():
        return default
    try:
        value = int(str(raw).strip())
    except ValueError as exc:
        raise ValidationError(f"{name} must be a positive integer.") from exc
    if value < 1:
        raise ValidationError(f"{name} must be a positive integer.")
    return value


def describe_errors(errors: list, prefix: str) -> str:
    """Flatten pydantic error dicts into one readable message."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return f"{prefix}: " + "; ".join(parts)
