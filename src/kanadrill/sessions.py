import logging
import random
from datetime import datetime, timedelta
from typing import Optional, Union

from .flashcard import FlashcardSession
from .models import SessionState
from .multiple_choice import MultipleChoiceSession

logger = logging.getLogger(__name__)

Session = Union[FlashcardSession, MultipleChoiceSession]


class StudySessions:
    """Holds the one flashcard session and one quiz session of the app."""

    def __init__(self, timeout_minutes: int = 120, seed: Optional[int] = None):
        self.timeout = timedelta(minutes=timeout_minutes)
        self.rng = random.Random(seed)
        self.flashcard = FlashcardSession(self.rng)
        self.quiz = MultipleChoiceSession(self.rng)

    def _active(self, session: Session) -> Optional[Session]:
        if session.state == SessionState.IDLE:
            return None
        if datetime.now() - session.started_at > self.timeout:
            logger.info(f"{type(session).__name__} expired, discarding it")
            session.restart()
            return None
        return session

    def active_flashcard(self) -> Optional[FlashcardSession]:
        return self._active(self.flashcard)

    def active_quiz(self) -> Optional[MultipleChoiceSession]:
        return self._active(self.quiz)

    def reset(self):
        self.flashcard.restart()
        self.quiz.restart()
