import logging
import random
from datetime import datetime
from typing import List, Optional, Sequence

from .exceptions import SessionStateError, ValidationError
from .flashcard import shuffle
from .models import Question, QuizItem, QuizResultEntry, QuizResults, SessionState

logger = logging.getLogger(__name__)

NUM_OPTIONS = 4
MIN_ITEMS = 5


def default_count(items: Sequence[QuizItem], default: int = 10) -> int:
    """Suggested number of questions for a freshly loaded quiz set."""
    return min(len(items), default)


def require_items(items: Sequence[QuizItem]):
    if len(items) < MIN_ITEMS:
        raise ValidationError(
            f"Quiz data must contain at least {MIN_ITEMS} items to generate options."
        )


def check_quiz_items(items: Sequence[QuizItem]):
    """Reject quiz sets that cannot produce four distinct options per question.

    Callers must run this before starting a session on untrusted data;
    ``generate_options`` does not terminate without enough distinct meanings.
    """
    require_items(items)
    if len({item.meaning for item in items}) < NUM_OPTIONS:
        raise ValidationError(
            f"Quiz data must contain at least {NUM_OPTIONS} different meanings."
        )


def generate_options(
    correct: str, pool: Sequence[QuizItem], rng: random.Random
) -> List[str]:
    """Return the correct meaning plus three distinct distractors, shuffled.

    Distractors are drawn uniformly from ``pool`` until enough unique
    meanings exist. The pool must hold at least three meanings other than
    ``correct`` or this never returns.
    """
    options = [correct]
    while len(options) < NUM_OPTIONS:
        meaning = rng.choice(pool).meaning
        if meaning != correct and meaning not in options:
            options.append(meaning)
    return shuffle(options, rng)


class MultipleChoiceSession:
    """Meaning quiz: pick the English meaning of a kanji from four options.

    ``next_question`` must be called explicitly after each answer; the
    session becomes complete when it is called with no questions left.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.restart()

    def restart(self):
        self.state = SessionState.IDLE
        self.pool: List[QuizItem] = []
        self.items: List[QuizItem] = []
        self.position = 0
        self.reveal_reading = True
        self.current_question: Optional[Question] = None
        self.current_result: Optional[QuizResultEntry] = None
        self.quiz_results: List[QuizResultEntry] = []
        self.started_at: Optional[datetime] = None

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def current_item(self) -> Optional[QuizItem]:
        if self.current_question is None:
            return None
        return self.items[self.position - 1]

    def start(
        self, items: Sequence[QuizItem], requested_count: int, reveal_reading: bool = True
    ) -> int:
        require_items(items)
        if requested_count is None or requested_count <= 0:
            raise ValidationError("Please enter a positive number of questions.")

        self.restart()
        self.pool = list(items)
        # First N in load order; only the presentation order is random.
        self.items = shuffle(self.pool[:requested_count], self.rng)
        self.reveal_reading = reveal_reading
        self.state = SessionState.IN_PROGRESS
        self.started_at = datetime.now()

        logger.info(
            f"Multiple-choice session started with {self.total} of {len(self.pool)} items"
        )
        return self.total

    def next_question(self) -> Optional[Question]:
        if self.state != SessionState.IN_PROGRESS:
            raise SessionStateError(self.state, "No quiz in progress.")
        if self.current_question is not None and self.current_result is None:
            raise SessionStateError(self.state, "Answer the current question first.")

        if self.position >= self.total:
            self.current_question = None
            self.current_result = None
            self.state = SessionState.COMPLETE
            logger.info(
                f"Multiple-choice session complete: "
                f"{sum(r.is_correct for r in self.quiz_results)}/{self.total} correct"
            )
            return None

        item = self.items[self.position]
        self.position += 1
        self.current_result = None
        self.current_question = Question(
            number=self.position,
            total=self.total,
            glyph=item.glyph,
            reading=item.reading if self.reveal_reading else None,
            options=generate_options(item.meaning, self.pool, self.rng),
        )
        return self.current_question

    def submit_answer(self, chosen: str) -> QuizResultEntry:
        item = self.current_item
        if self.state != SessionState.IN_PROGRESS or item is None:
            raise SessionStateError(self.state, "No question is waiting for an answer.")
        if self.current_result is not None:
            return self.current_result

        result = QuizResultEntry(
            glyph=item.glyph,
            reading=item.reading,
            correct_answer=item.meaning,
            user_answer=chosen,
            is_correct=chosen == item.meaning,
        )
        self.quiz_results.append(result)
        self.current_result = result
        return result

    def results(self) -> QuizResults:
        if self.state != SessionState.COMPLETE:
            raise SessionStateError(self.state, "The quiz is not finished yet.")
        return QuizResults(
            results=list(self.quiz_results),
            correct_count=sum(r.is_correct for r in self.quiz_results),
            total=len(self.quiz_results),
        )
