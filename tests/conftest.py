import json
import logging
import random

import pytest
from fastapi.testclient import TestClient

from kanadrill.app import create_app
from kanadrill.config import Settings
from kanadrill.loader import DataLoader
from kanadrill.models import KanaEntry, QuizItem

HIRAGANA = [
    ("あ", "a"), ("い", "i"), ("う", "u"), ("え", "e"), ("お", "o"),
    ("か", "ka"), ("き", "ki"), ("く", "ku"), ("け", "ke"), ("こ", "ko"),
    ("や", "ya"), ("ゆ", "yu"), ("よ", "yo"),
    ("きゃ", "kya"), ("きゅ", "kyu"),
]

KANJI = [
    {"kanji": "山", "kana": "やま", "meaning": "mountain", "category": "Nature"},
    {"kanji": "一", "kana": "いち", "meaning": "one", "category": "Numbers"},
    {"kanji": "川", "kana": "かわ", "meaning": "river", "category": "Nature"},
    {"kanji": "人", "kana": "ひと", "meaning": "person"},
]

LESSON = [
    {"kanji": "学生", "kana": "がくせい", "english": "student"},
    {"kanji": "先生", "kana": "せんせい", "english": "teacher"},
    {"kanji": "医者", "kana": "いしゃ", "english": "doctor"},
    {"kanji": "大学", "kana": "だいがく", "english": "university"},
    {"kanji": "病院", "kana": "びょういん", "english": "hospital"},
    {"kanji": "名前", "kana": "なまえ", "english": "name"},
]

FEW_MEANINGS = [
    {"kanji": "一", "kana": "いち", "english": "number"},
    {"kanji": "二", "kana": "に", "english": "number"},
    {"kanji": "三", "kana": "さん", "english": "number"},
    {"kanji": "山", "kana": "やま", "english": "nature"},
    {"kanji": "川", "kana": "かわ", "english": "nature"},
    {"kanji": "木", "kana": "き", "english": "nature"},
]


def write_dataset(directory, name, records):
    path = directory / f"{name}.json"
    path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path):
    directory = tmp_path / "data"
    directory.mkdir()
    write_dataset(directory, "hiragana", [{"kana": k, "romaji": r} for k, r in HIRAGANA])
    write_dataset(directory, "katakana", [])
    write_dataset(directory, "kanji", KANJI)
    write_dataset(directory, "lesson", LESSON)
    write_dataset(directory, "tiny", LESSON[:3])
    write_dataset(directory, "few_meanings", FEW_MEANINGS)
    write_dataset(directory, "odd", [{"foo": "bar"}])
    write_dataset(directory, "partial", [{"kana": "あ", "romaji": "a"}, {"kana": "い"}])
    (directory / "broken.json").write_text("[{\"kana\": ", encoding="utf-8")
    return directory


@pytest.fixture
def loader(data_dir):
    return DataLoader(str(data_dir))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def kana_pool():
    return [KanaEntry(glyph=f"k{i}", romanization=f"r{i}") for i in range(100)]


@pytest.fixture
def quiz_pool():
    return [
        QuizItem(glyph=f"g{i}", reading=f"r{i}", meaning=f"meaning {i}")
        for i in range(12)
    ]


@pytest.fixture
def config(data_dir, tmp_path):
    config = Settings()
    config.DATA_DIR = str(data_dir)
    config.LOG_DIR = str(tmp_path / "log")
    config.RANDOM_SEED = 7
    return config


@pytest.fixture
def client(config):
    app = create_app(config)
    with TestClient(app) as client:
        yield client

    logger = logging.getLogger("kanadrill")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
