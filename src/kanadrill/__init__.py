"""Japanese kana and kanji drills: flashcards, a multiple-choice quiz and character lists."""

__version__ = "0.1.0"
