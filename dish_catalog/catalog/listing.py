from __future__ import annotations

import math
from typing import Any

import pandas as pd

from ..errors import NotFoundError
from .data_store import DishStore
from .models import DIETS, DishListQuery

# Filter options always expose both diets, whatever the catalog holds
STATIC_DIETS = list(DIETS)


def _filter_mask(df: pd.DataFrame, query: DishListQuery) -> pd.Series:
    mask = pd.Series(True, index=df.index)

    if query.diet:
        mask = mask & (df["diet"] == query.diet)

    if query.course:
        mask = mask & df["course"].isin(query.course)

    if query.flavor_profile:
        mask = mask & df["flavor_profile"].isin(query.flavor_profile)

    return mask


def _sort_key(column: pd.Series) -> pd.Series:
    """Import-assigned ids are sequence numbers; order them numerically."""
    if column.name == "id" and column.str.fullmatch(r"\d+").all():
        return column.astype("int64")
    return column


def list_dishes(store: DishStore, query: DishListQuery) -> dict[str, Any]:
    """Filter, sort and paginate the catalog."""
    df = store.dataframe()
    filtered = df.loc[_filter_mask(df, query)]
    total = len(filtered)

    ascending = query.order == "asc"
    ordered = filtered.sort_values(
        by=query.sort_by,
        ascending=ascending,
        kind="mergesort",
        na_position="first" if ascending else "last",
        key=_sort_key,
    )

    skip = (query.page - 1) * query.limit
    page_rows = ordered.iloc[skip:skip + query.limit]
    data = store.to_records(page_rows)

    return {
        "success": True,
        "count": len(data),
        "total": total,
        "totalPages": math.ceil(total / query.limit),
        "currentPage": query.page,
        "data": data,
    }


def get_dish(store: DishStore, dish_id: str) -> dict[str, Any]:
    dish = store.get(dish_id)
    if dish is None:
        raise NotFoundError("Dish not found")
    return dish


def get_filter_options(store: DishStore) -> dict[str, Any]:
    courses = sorted(store.distinct("course"))
    flavor_profiles = sorted(store.distinct("flavor_profile"))
    return {
        "success": True,
        "data": {
            "diets": STATIC_DIETS,
            "courses": courses,
            "flavor_profiles": flavor_profiles,
        },
    }


def list_ingredients(store: DishStore) -> dict[str, Any]:
    """Distinct, trimmed ingredient names across the catalog, sorted alphabetically."""
    cleaned = {str(i).strip() for i in store.distinct("ingredients") if i and str(i).strip()}
    ingredients = sorted(cleaned, key=lambda s: (s.lower(), s))
    return {
        "success": True,
        "count": len(ingredients),
        "data": ingredients,
    }
