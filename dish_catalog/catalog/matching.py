"""
Ingredient matcher.

Responsibilities:
- Normalize the caller's pantry (trim, lowercase, drop blanks).
- Score every dish by the share of its ingredients found in the pantry.
- Rank best-first with a name tie-break and keep the top results.
- Report matched/total counts and the ingredients still missing.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable

import pandas as pd

from ..errors import ValidationError
from .data_store import DishStore
from .models import MatchResult

logger = logging.getLogger(__name__)

DEFAULT_MATCH_LIMIT = 10


def normalize_pantry(ingredients: Iterable[str]) -> set[str]:
    """Trim and lowercase pantry entries; raise if nothing usable remains."""
    pantry = {str(i).strip().lower() for i in ingredients if i is not None}
    pantry.discard("")
    if not pantry:
        raise ValidationError("Please provide valid ingredients")
    return pantry


def round_percentage(value: float) -> int:
    """Round half up, so 12.5 becomes 13 rather than 12."""
    return int(math.floor(value + 0.5))


def _score_row(row: pd.Series, pantry: set[str]) -> pd.Series:
    """Compute match statistics for a single dish row."""
    dish_ingredients: list[str] = row["ingredients_lower"]
    total = len(row["ingredients"])
    if total == 0:
        return pd.Series({"_matched": 0, "_total": 0, "_pct": 0.0})

    matched = len(set(dish_ingredients) & pantry)
    return pd.Series({
        "_matched": matched,
        "_total": total,
        "_pct": matched / total * 100,
    })


def _missing(dish_ingredients: list[str], pantry: set[str]) -> list[str]:
    seen: set[str] = set()
    missing: list[str] = []
    for ing in dish_ingredients:
        if ing not in pantry and ing not in seen:
            seen.add(ing)
            missing.append(ing)
    return missing


def score_dishes(df: pd.DataFrame, pantry: set[str], limit: int = DEFAULT_MATCH_LIMIT) -> pd.DataFrame:
    """Return the top `limit` matching rows with unrounded scores attached."""
    candidates = df.loc[df["ingredients"].apply(len) > 0].copy()
    if candidates.empty:
        return candidates

    scores = candidates.apply(_score_row, axis=1, pantry=pantry)
    candidates = candidates.join(scores)
    candidates = candidates.loc[candidates["_matched"] > 0]

    # Rank on the unrounded percentage; lexsort keeps equal keys in catalog order
    ranked = candidates.sort_values(
        by=["_pct", "name"], ascending=[False, True], kind="mergesort"
    )
    return ranked.head(limit)


def find_dishes_by_ingredients(
    store: DishStore,
    ingredients: Iterable[str],
    limit: int = DEFAULT_MATCH_LIMIT,
) -> list[MatchResult]:
    """
    Rank catalog dishes by how much of each dish the pantry covers.

    Store failures propagate as StoreError; they never turn into an empty list.
    """
    pantry = normalize_pantry(ingredients)
    df = store.dataframe()

    top = score_dishes(df, pantry, limit=limit)
    records = store.to_records(top)

    results: list[MatchResult] = []
    for record, (_, row) in zip(records, top.iterrows()):
        results.append(MatchResult(
            **record,
            matchedIngredientsCount=int(row["_matched"]),
            totalIngredientsCount=int(row["_total"]),
            matchPercentage=round_percentage(float(row["_pct"])),
            missingIngredients=_missing(row["ingredients_lower"], pantry),
        ))

    logger.debug(
        "Matched %d dishes against a pantry of %d ingredients", len(results), len(pantry)
    )
    return results

