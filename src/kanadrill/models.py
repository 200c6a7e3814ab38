from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SessionState(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


# --- Dataset entries ---
# Field aliases match the keys used in the JSON datasets.
class KanaEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["kana"] = "kana"
    glyph: str = Field(alias="kana")
    romanization: str = Field(alias="romaji")

    @property
    def prompt(self) -> str:
        return self.glyph

    @property
    def expected_answer(self) -> str:
        return self.romanization


class KanjiEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["kanji"] = "kanji"
    glyph: str = Field(alias="kanji")
    reading: str = Field(alias="kana")
    meaning: str
    category: Optional[str] = None

    @property
    def prompt(self) -> str:
        return self.glyph

    @property
    def expected_answer(self) -> str:
        return self.reading


CharacterEntry = Union[KanaEntry, KanjiEntry]


class QuizItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    glyph: str = Field(alias="kanji")
    reading: str = Field(alias="kana")
    meaning: str = Field(alias="english")


# --- Flashcard payloads ---
class WrongAnswer(BaseModel):
    prompt: str
    expected: str
    answer: str


class AnswerFeedback(BaseModel):
    prompt: str
    expected: str
    answer: str
    is_correct: bool


class FlashcardStatus(BaseModel):
    state: SessionState
    prompt: Optional[str]
    position: int
    length: int
    adjusted: bool
    correct_count: int
    incorrect_count: int


class FlashcardResults(BaseModel):
    correct_count: int
    incorrect_count: int
    total: int
    wrong_answers: List[WrongAnswer]


# --- Multiple-choice payloads ---
class Question(BaseModel):
    number: int
    total: int
    glyph: str
    reading: Optional[str] = None
    options: List[str]


class QuizResultEntry(BaseModel):
    glyph: str
    reading: str
    correct_answer: str
    user_answer: str
    is_correct: bool


class QuizResults(BaseModel):
    results: List[QuizResultEntry]
    correct_count: int
    total: int

    @property
    def incorrect(self) -> List[QuizResultEntry]:
        return [r for r in self.results if not r.is_correct]

    @property
    def score_percentage(self) -> int:
        # Avoid division by zero for an empty quiz
        return round((self.correct_count / self.total) * 100) if self.total else 0


# --- Catalog and lists ---
class DatasetInfo(BaseModel):
    id: str
    name: str
    kind: Literal["flashcard", "quiz"]


class CharacterGroup(BaseModel):
    title: Optional[str] = None
    columns: int
    entries: List[CharacterEntry]


class CharacterList(BaseModel):
    list_type: str
    title: str
    groups: List[CharacterGroup]
    message: Optional[str] = None
