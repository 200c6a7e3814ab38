import glob
import logging
import os
import re
from typing import Dict, Iterable, List, Optional, Sequence, Type, Union

import pandas as pd
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from .exceptions import LoadError
from .models import CharacterEntry, DatasetInfo, KanaEntry, KanjiEntry, QuizItem

logger = logging.getLogger(__name__)

DATASET_NAME = re.compile(r"^[A-Za-z0-9_-]+$")

DatasetEntry = Union[KanaEntry, KanjiEntry, QuizItem]


def detect_entry_model(columns: Iterable[str]) -> Optional[Type[BaseModel]]:
    """Pick the entry variant for a dataset from the keys its records carry."""
    columns = set(columns)
    if "romaji" in columns:
        return KanaEntry
    if "kanji" in columns and "meaning" in columns:
        return KanjiEntry
    if "kanji" in columns and "english" in columns:
        return QuizItem
    return None


class DataLoader:
    """Reads named JSON datasets from a directory.

    A dataset called ``name`` lives at ``{directory}/{name}.json`` and is a
    JSON array of objects. Every load either returns all requested datasets
    or raises :class:`LoadError`; there is no partial result and no cache.
    """

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, name: str) -> str:
        if not DATASET_NAME.match(name or ""):
            raise LoadError(f"Invalid dataset name: {name!r}")
        return os.path.join(self.directory, f"{name}.json")

    def read(self, name: str) -> List[DatasetEntry]:
        path = self.path_for(name)
        if not os.path.isfile(path):
            logger.error(f"Dataset {name} not found at {path}")
            raise LoadError(
                f"Failed to load {name}.json. Make sure the file exists in the data folder."
            )

        try:
            df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
        except ValueError as e:
            logger.error(f"Failed to parse {path}: {e}")
            raise LoadError(f"Failed to load {name}.json: malformed JSON.") from e

        if df.empty:
            logger.warning(f"Dataset {name} is empty")
            return []

        model = detect_entry_model(df.columns)
        if model is None:
            logger.error(f"Skipping {name}: unrecognised columns {list(df.columns)}")
            raise LoadError(f"Dataset {name} has an unrecognised format.")

        records = df.astype(object).where(pd.notna(df), None).to_dict("records")
        try:
            entries = [model.model_validate(record) for record in records]
        except SchemaError as e:
            logger.error(f"Invalid record in {name}: {e}")
            raise LoadError(f"Dataset {name} contains invalid entries.") from e

        logger.info(f"Loaded {len(entries)} entries from {name}")
        return entries

    def load(self, names: Iterable[str]) -> Dict[str, List[DatasetEntry]]:
        """Load each named dataset, keeping them separate."""
        names = list(dict.fromkeys(names))
        if not names:
            raise LoadError("Please select at least one card set.")
        return {name: self.read(name) for name in names}

    def load_entries(self, names: Iterable[str]) -> List[CharacterEntry]:
        """Load kana/kanji datasets and concatenate them in selection order."""
        entries: List[CharacterEntry] = []
        for name, dataset in self.load(names).items():
            if any(isinstance(entry, QuizItem) for entry in dataset):
                raise LoadError(f"Dataset {name} is not a character set.")
            entries.extend(dataset)
        return entries

    def load_quiz(self, name: str) -> List[QuizItem]:
        if not name:
            raise LoadError("No quiz specified. Example: quiz=N5-Lesson-01a")
        items = self.read(name)
        if any(not isinstance(item, QuizItem) for item in items):
            raise LoadError(f"Dataset {name} is not a quiz set.")
        return items


class DatasetCatalog:
    """Lists the datasets available in the data directory."""

    def __init__(self, directory: str, flashcard_sets: Sequence[str]):
        self.directory = directory
        self.flashcard_sets = tuple(flashcard_sets)
        self.datasets: Dict[str, DatasetInfo] = {}

    def refresh(self):
        self.datasets = {}
        if not os.path.isdir(self.directory):
            logger.warning(f"Data directory {self.directory} does not exist.")
            return

        for file_path in glob.glob(os.path.join(self.directory, "*.json")):
            key = os.path.splitext(os.path.basename(file_path))[0]
            if not DATASET_NAME.match(key):
                logger.warning(f"Skipping {file_path}: unsupported file name.")
                continue
            kind = "flashcard" if key in self.flashcard_sets else "quiz"
            name = key.replace("_", " ").replace("-", " ")
            if kind == "flashcard":
                name = name.title()
            self.datasets[key] = DatasetInfo(id=key, name=name, kind=kind)

        logger.info(f"Found {len(self.datasets)} datasets in {self.directory}")

    def get_datasets(self, kind: Optional[str] = None) -> List[DatasetInfo]:
        datasets = [d for d in self.datasets.values() if kind is None or d.kind == kind]
        datasets.sort(key=lambda d: d.name)
        return datasets
