from __future__ import annotations

import argparse
import json
import logging
import re
from pathlib import Path
from typing import Any, List

import pandas as pd

from ..catalog.data_store import DishStore
from ..catalog.models import COURSES, DISH_FIELDS, FLAVOR_PROFILES, REGIONS
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS: List[str] = list(DISH_FIELDS)

FLAVOR_MAP = {f: f for f in FLAVOR_PROFILES}
COURSE_MAP = {c: c for c in COURSES}
REGION_MAP = {r.lower(): r for r in REGIONS}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _safe_str(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    text = str(value).strip()
    # The raw dataset marks unknown values with -1
    return "" if text == "-1" else text


def _capitalize(value: Any) -> str | None:
    text = _safe_str(value)
    if not text:
        return None
    return text[0].upper() + text[1:].lower()


def _parse_time(value: Any) -> int | None:
    """Minutes as a non-negative int; blanks, -1 and garbage become None."""
    text = _safe_str(value)
    if not text:
        return None
    match = _LEADING_INT.match(text)
    if not match:
        return None
    minutes = int(match.group(1))
    return minutes if minutes >= 0 else None


def _split_ingredients(value: Any) -> list[str]:
    parts = (_capitalize(p) for p in _safe_str(value).split(","))
    return [p for p in parts if p]


def _map_diet(value: Any) -> str:
    return "vegetarian" if _safe_str(value).lower() == "vegetarian" else "non-vegetarian"


def _map_choice(value: Any, mapping: dict[str, str], default: str | None) -> str | None:
    return mapping.get(_safe_str(value).lower(), default)


def transform_records(df: pd.DataFrame) -> pd.DataFrame:
    """
    Map raw CSV rows onto the canonical Dish schema.

    Rows without a name are dropped; ids are assigned in row order.
    """

    def _first_present(columns: List[str]) -> str | None:
        for col in columns:
            if col in df.columns:
                return col
        return None

    def _column(candidates: List[str]) -> pd.Series:
        col = _first_present(candidates)
        if col is None:
            return pd.Series([""] * len(df), index=df.index, dtype=object)
        return df[col]

    canonical = pd.DataFrame(index=df.index)
    canonical["name"] = _column(["name", "dish_name"]).apply(_capitalize)
    canonical["ingredients"] = _column(["ingredients"]).apply(_split_ingredients)
    canonical["diet"] = _column(["diet"]).apply(_map_diet)
    canonical["prep_time"] = _column(["prep_time"]).apply(_parse_time)
    canonical["cook_time"] = _column(["cook_time"]).apply(_parse_time)
    canonical["flavor_profile"] = _column(["flavor_profile", "flavor"]).apply(
        _map_choice, mapping=FLAVOR_MAP, default=None
    )
    canonical["course"] = _column(["course"]).apply(
        _map_choice, mapping=COURSE_MAP, default="main course"
    )
    canonical["state"] = _column(["state"]).apply(_capitalize)
    canonical["region"] = _column(["region"]).apply(
        _map_choice, mapping=REGION_MAP, default=None
    )

    unnamed = canonical["name"].isna()
    if unnamed.any():
        logger.warning("Dropping %d rows without a dish name", int(unnamed.sum()))
        canonical = canonical.loc[~unnamed]

    canonical = canonical.reset_index(drop=True)
    canonical["id"] = canonical.index.astype(str)
    return canonical[CANONICAL_COLUMNS]


def _to_csv_frame(canonical: pd.DataFrame) -> pd.DataFrame:
    out = canonical.copy()
    out["ingredients"] = out["ingredients"].apply(",".join)
    for col in ("prep_time", "cook_time"):
        out[col] = pd.to_numeric(out[col], errors="coerce").astype("Int64")
    return out


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Execute the catalog import.

    Steps:
    - Read the raw dish CSV.
    - Map raw fields into the canonical Dish schema.
    - Replace the processed catalog CSV with the result.
    """
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    raw = pd.read_csv(
        config.raw_csv_path,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    logger.info("Read %d raw rows from %s", len(raw), config.raw_csv_path)

    canonical = transform_records(raw)

    output_path = config.processed_path
    if output_path.exists():
        output_path.unlink()
    _to_csv_frame(canonical).to_csv(output_path, index=False)
    logger.info("Wrote %d dishes to %s", len(canonical), output_path)
    return output_path


def export_json(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """Write the processed catalog as a JSON array of dish records."""
    store = DishStore(data_path=config.processed_path)
    records = store.all_dishes()

    output_path = config.json_path
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(records, f, ensure_ascii=False, indent=2)
    logger.info("Exported %d dishes to %s", len(records), output_path)
    return output_path


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Import the raw dish CSV into the catalog.")
    parser.add_argument("--raw", type=Path, help="Path to the raw dish CSV")
    parser.add_argument("--json", action="store_true", help="Also export the catalog as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    config = DEFAULT_INGESTION_CONFIG
    if args.raw:
        config = IngestionConfig(raw_csv_path=args.raw)

    path = run_ingestion(config)
    print(f"Import complete. Processed data saved to: {path}")
    if args.json:
        json_path = export_json(config)
        print(f"JSON export saved to: {json_path}")


if __name__ == "__main__":
    main()
