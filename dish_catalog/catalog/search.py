from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from ..errors import ValidationError
from .data_store import DishStore

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10


def _build_text(row: pd.Series) -> str:
    parts: list[str] = [str(row["name"])]
    parts.extend(row["ingredients"])
    if pd.notna(row.get("region")):
        parts.append(str(row["region"]))
    if pd.notna(row.get("state")):
        parts.append(str(row["state"]))
    return " ".join(parts).strip().lower()


def _relevance_pass(df: pd.DataFrame, query: str, limit: int) -> pd.DataFrame:
    """Rank dishes by TF-IDF similarity of name, ingredients, region and state."""
    if df.empty:
        return df

    texts = df.apply(_build_text, axis=1).tolist()
    vectorizer = TfidfVectorizer(stop_words="english")
    try:
        doc_vecs = vectorizer.fit_transform(texts)
    except ValueError:
        # Raised when no document yields a usable token
        logger.debug("Text search skipped: catalog has an empty vocabulary")
        return df.iloc[0:0]

    query_vec = vectorizer.transform([query.lower()])
    scores = cosine_similarity(query_vec, doc_vecs).flatten()

    order = np.argsort(-scores, kind="stable")
    order = order[scores[order] > 0][:limit]
    return df.iloc[order]


def _substring_pass(df: pd.DataFrame, query: str, exclude_ids: set[str], limit: int) -> pd.DataFrame:
    """Dishes with an ingredient containing the query, case-insensitively, by name."""
    needle = query.lower()
    mask = df["ingredients_lower"].apply(lambda xs: any(needle in x for x in xs))
    mask = mask & ~df["id"].isin(exclude_ids)
    hits = df.loc[mask].sort_values(by="name", kind="mergesort")
    return hits.head(limit)


def search_dishes(store: DishStore, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> dict[str, Any]:
    """
    Free-text search over the catalog.

    A relevance-ranked pass comes first; when it yields fewer than `limit`
    dishes the rest is filled with ingredient substring matches.
    """
    query = (query or "").strip()
    if not query:
        raise ValidationError("Search query is required")

    df = store.dataframe()
    relevant = _relevance_pass(df, query, limit)

    if len(relevant) < limit:
        remaining = limit - len(relevant)
        extra = _substring_pass(df, query, set(relevant["id"]), remaining)
        combined = pd.concat([relevant, extra])
    else:
        combined = relevant

    data = store.to_records(combined)
    logger.debug("Search %r returned %d dishes (%d by relevance)", query, len(data), len(relevant))
    return {
        "success": True,
        "count": len(data),
        "data": data,
    }
