"""
Configuration for the dish catalog import.
"""

from dataclasses import dataclass
from pathlib import Path

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the catalog import pipeline.
    """

    raw_csv_path: Path = _DATA_DIR / "raw" / "indian_food.csv"
    processed_data_dir: Path = _DATA_DIR / "processed"
    processed_filename: str = "dishes.csv"
    json_filename: str = "dishes.json"

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename

    @property
    def json_path(self) -> Path:
        return self.processed_data_dir / self.json_filename


DEFAULT_INGESTION_CONFIG = IngestionConfig()
