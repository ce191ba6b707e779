from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Iterable

import numpy as np
import pandas as pd

from ..config import AppConfig
from ..errors import StoreError
from .models import DISH_FIELDS

logger = logging.getLogger(__name__)

_INT_FIELDS = ("prep_time", "cook_time")


def _parse_ingredients(value: Any) -> list[str]:
    """Ingredients are stored comma-joined on disk and as lists in memory."""
    if isinstance(value, (list, tuple, np.ndarray)):
        items = [str(v) for v in value]
    elif value is None or (isinstance(value, float) and np.isnan(value)):
        items = []
    else:
        items = str(value).split(",")
    return [i.strip() for i in items if i and i.strip()]


def _clean_value(field: str, value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    if value is None or pd.isna(value):
        return None
    if field in _INT_FIELDS:
        return int(value)
    if isinstance(value, np.generic):
        return value.item()
    return value


def _prepare(df: pd.DataFrame) -> pd.DataFrame:
    missing = [c for c in DISH_FIELDS if c not in df.columns]
    if missing:
        raise StoreError(f"Catalog is missing columns: {', '.join(missing)}")

    df = df[DISH_FIELDS].copy().reset_index(drop=True)
    df["id"] = df["id"].astype(str)
    df["ingredients"] = df["ingredients"].apply(_parse_ingredients)

    for col in _INT_FIELDS:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    # Lowercase ingredients once for case-insensitive matching
    df["ingredients_lower"] = df["ingredients"].apply(lambda xs: [x.lower() for x in xs])
    return df


class DishStore:
    """
    Read-only dish collection held in a pandas DataFrame.

    The frame is loaded from the processed catalog CSV on first access. A
    failed load raises StoreError and is retried on the next access.
    """

    def __init__(self, data_path: Path | None = None, frame: pd.DataFrame | None = None) -> None:
        self.data_path = data_path
        self._df: pd.DataFrame | None = _prepare(frame) if frame is not None else None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: AppConfig) -> "DishStore":
        return cls(data_path=config.data_path)

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> "DishStore":
        rows = list(records)
        frame = pd.DataFrame(rows, columns=DISH_FIELDS)
        return cls(frame=frame)

    def _load(self) -> pd.DataFrame:
        if self.data_path is None:
            raise StoreError("Dish catalog has no data source configured")
        try:
            raw = pd.read_csv(self.data_path, dtype={"id": str})
        except (OSError, ValueError) as exc:
            raise StoreError(f"Could not read dish catalog at {self.data_path}: {exc}") from exc

        df = _prepare(raw)
        logger.info("Loaded %d dishes from %s", len(df), self.data_path)
        return df

    def dataframe(self) -> pd.DataFrame:
        """Return the catalog frame, loading it on first call."""
        if self._df is None:
            with self._lock:
                if self._df is None:
                    self._df = self._load()
        return self._df

    def count(self) -> int:
        return len(self.dataframe())

    def to_records(self, frame: pd.DataFrame) -> list[dict[str, Any]]:
        """Convert rows of the catalog frame to plain dish records."""
        records: list[dict[str, Any]] = []
        for row in frame[DISH_FIELDS].itertuples(index=False):
            records.append({f: _clean_value(f, v) for f, v in zip(DISH_FIELDS, row)})
        return records

    def all_dishes(self) -> list[dict[str, Any]]:
        """Full scan of the catalog, no pagination cutoff."""
        return self.to_records(self.dataframe())

    def get(self, dish_id: str) -> dict[str, Any] | None:
        df = self.dataframe()
        hits = df.loc[df["id"] == str(dish_id)]
        if hits.empty:
            return None
        return self.to_records(hits.head(1))[0]

    def distinct(self, field: str) -> list[Any]:
        """Distinct non-null values of a field; list fields are flattened."""
        df = self.dataframe()
        if field not in DISH_FIELDS:
            raise StoreError(f"Unknown dish field: {field}")
        column = df[field]
        if field == "ingredients":
            column = column.explode()
        values = column.dropna().unique().tolist()
        return [_clean_value(field, v) for v in values]
