import logging
import random
from datetime import datetime
from typing import List, Optional, Sequence

from .exceptions import SessionStateError, ValidationError
from .models import (
    AnswerFeedback,
    CharacterEntry,
    FlashcardResults,
    FlashcardStatus,
    SessionState,
    WrongAnswer,
)

logger = logging.getLogger(__name__)

LENGTH_STEP = 10


def shuffle(items: list, rng: random.Random) -> list:
    """Fisher-Yates shuffle in place, driven by ``rng``."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def normalize_answer(text: str) -> str:
    return (text or "").strip().casefold()


def resolve_length(requested: int, available: int) -> int:
    """Return the session length for a requested quiz length.

    The request must be a positive multiple of ten. A request larger than
    the pool is clamped down to a multiple of ten, never below ten.
    """
    if requested is None or requested <= 0 or requested % LENGTH_STEP != 0:
        raise ValidationError(
            "Please enter a valid quiz length (a positive multiple of 10)."
        )
    if requested <= available:
        return requested
    if available == 0:
        raise ValidationError(
            "No cards selected for the quiz. Please select at least one type."
        )
    return max(available - available % LENGTH_STEP, LENGTH_STEP)


class FlashcardSession:
    """Free-text drill over kana and kanji cards.

    Each answer is compared with the card's romaji (kana) or kana reading
    (kanji) and the session advances by one card whether or not it was
    right. Once every card has been answered the session is complete.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.restart()

    def restart(self):
        self.state = SessionState.IDLE
        self.cards: List[CharacterEntry] = []
        self.position = 0
        self.correct_count = 0
        self.incorrect_count = 0
        self.wrong_answers: List[WrongAnswer] = []
        self.adjusted = False
        self.available = 0
        self.started_at: Optional[datetime] = None

    @property
    def length(self) -> int:
        return len(self.cards)

    def start(self, entries: Sequence[CharacterEntry], requested_length: int) -> int:
        """Shuffle the pool, take a sample of the resolved length and begin.

        Returns the session length. ``adjusted`` is set when the session is
        shorter than the requested length.
        """
        resolved = resolve_length(requested_length, len(entries))

        pool = shuffle(list(entries), self.rng)
        self.restart()
        self.cards = pool[:resolved]
        self.available = len(pool)
        self.adjusted = self.length != requested_length
        self.state = SessionState.IN_PROGRESS
        self.started_at = datetime.now()

        if self.adjusted:
            logger.info(
                f"Only {len(pool)} cards available. Quiz length adjusted to {self.length}."
            )
        logger.info(f"Flashcard session started with {self.length} cards")
        return self.length

    def current_card(self) -> Optional[CharacterEntry]:
        if self.state != SessionState.IN_PROGRESS:
            return None
        return self.cards[self.position]

    def current_prompt(self) -> Optional[str]:
        card = self.current_card()
        return card.prompt if card is not None else None

    def submit_answer(self, text: str) -> AnswerFeedback:
        card = self.current_card()
        if card is None:
            raise SessionStateError(self.state, "No flashcard is waiting for an answer.")

        answer = normalize_answer(text)
        expected = card.expected_answer
        is_correct = answer == normalize_answer(expected)

        if is_correct:
            self.correct_count += 1
        else:
            self.incorrect_count += 1
            self.wrong_answers.append(
                WrongAnswer(prompt=card.prompt, expected=expected, answer=answer)
            )

        self.position += 1
        if self.position >= self.length:
            self.state = SessionState.COMPLETE
            logger.info(
                f"Flashcard session complete: {self.correct_count}/{self.length} correct"
            )

        return AnswerFeedback(
            prompt=card.prompt, expected=expected, answer=answer, is_correct=is_correct
        )

    def status(self) -> FlashcardStatus:
        return FlashcardStatus(
            state=self.state,
            prompt=self.current_prompt(),
            position=self.position,
            length=self.length,
            adjusted=self.adjusted,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
        )

    def results(self) -> FlashcardResults:
        if self.state != SessionState.COMPLETE:
            raise SessionStateError(self.state, "The flashcard quiz is not finished yet.")
        return FlashcardResults(
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            total=self.length,
            wrong_answers=list(self.wrong_answers),
        )
