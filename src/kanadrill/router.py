import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse

from .config import Settings
from .exceptions import KanaDrillError, SessionStateError
from .listing import build_list
from .loader import DataLoader, DatasetCatalog
from .multiple_choice import check_quiz_items, default_count
from .sessions import StudySessions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Dependencies ---
def get_config(request: Request) -> Settings:
    return request.app.state.config


def get_loader(request: Request) -> DataLoader:
    return request.app.state.loader


def get_catalog(request: Request) -> DatasetCatalog:
    return request.app.state.catalog


def get_sessions(request: Request) -> StudySessions:
    return request.app.state.sessions


def error_response(exc: KanaDrillError) -> JSONResponse:
    status_code = 409 if isinstance(exc, SessionStateError) else 400
    return JSONResponse({"error": exc.message}, status_code=status_code)


def no_session(kind: str) -> JSONResponse:
    return JSONResponse({"error": f"No active {kind} session"}, status_code=404)


# --- Datasets and lists ---
@router.get("/datasets")
async def get_datasets(
    kind: Optional[str] = None, catalog: DatasetCatalog = Depends(get_catalog)
):
    return [d.model_dump() for d in catalog.get_datasets(kind)]


@router.get("/lists/{list_type}")
async def get_character_list(list_type: str, loader: DataLoader = Depends(get_loader)):
    try:
        character_list = build_list(list_type, loader)
    except KanaDrillError as e:
        return error_response(e)
    return character_list.model_dump()


# --- Flashcards ---
@router.post("/flashcards/start")
async def start_flashcards(
    sets: List[str] = Form([]),
    length: Optional[int] = Form(None),
    config: Settings = Depends(get_config),
    loader: DataLoader = Depends(get_loader),
    sessions: StudySessions = Depends(get_sessions),
):
    if length is None:
        length = config.DEFAULT_FLASHCARD_LENGTH
    try:
        entries = loader.load_entries(sets)
        sessions.flashcard.start(entries, length)
    except KanaDrillError as e:
        logger.warning(f"Flashcard session not started: {e.message}")
        return error_response(e)
    return sessions.flashcard.status().model_dump()


@router.get("/flashcards/current")
async def get_flashcard(sessions: StudySessions = Depends(get_sessions)):
    session = sessions.active_flashcard()
    if not session:
        return no_session("flashcard")
    return session.status().model_dump()


@router.post("/flashcards/answer")
async def answer_flashcard(
    answer: str = Form(""), sessions: StudySessions = Depends(get_sessions)
):
    session = sessions.active_flashcard()
    if not session:
        return no_session("flashcard")
    try:
        feedback = session.submit_answer(answer)
    except KanaDrillError as e:
        return error_response(e)
    return {"feedback": feedback.model_dump(), "status": session.status().model_dump()}


@router.get("/flashcards/results")
async def get_flashcard_results(sessions: StudySessions = Depends(get_sessions)):
    session = sessions.active_flashcard()
    if not session:
        return no_session("flashcard")
    try:
        return session.results().model_dump()
    except KanaDrillError as e:
        return error_response(e)


# --- Multiple choice ---
@router.get("/quiz/{name}/setup")
async def get_quiz_setup(
    name: str,
    config: Settings = Depends(get_config),
    loader: DataLoader = Depends(get_loader),
):
    try:
        items = loader.load_quiz(name)
        check_quiz_items(items)
    except KanaDrillError as e:
        return error_response(e)
    return {
        "quiz": name,
        "title": f"{name} Quiz",
        "item_count": len(items),
        "default_count": default_count(items, config.DEFAULT_QUIZ_LENGTH),
    }


@router.post("/quiz/start")
async def start_quiz(
    quiz: str = Form(...),
    count: Optional[int] = Form(None),
    reveal_reading: bool = Form(True),
    config: Settings = Depends(get_config),
    loader: DataLoader = Depends(get_loader),
    sessions: StudySessions = Depends(get_sessions),
):
    try:
        items = loader.load_quiz(quiz)
        check_quiz_items(items)
        if count is None:
            count = default_count(items, config.DEFAULT_QUIZ_LENGTH)
        total = sessions.quiz.start(items, count, reveal_reading)
    except KanaDrillError as e:
        logger.warning(f"Quiz {quiz} not started: {e.message}")
        return error_response(e)

    question = sessions.quiz.next_question()
    return {
        "quiz": quiz,
        "total": total,
        "question": question.model_dump() if question else None,
    }


@router.post("/quiz/next")
async def next_quiz_question(sessions: StudySessions = Depends(get_sessions)):
    session = sessions.active_quiz()
    if not session:
        return no_session("quiz")
    try:
        question = session.next_question()
    except KanaDrillError as e:
        return error_response(e)
    return {
        "complete": question is None,
        "question": question.model_dump() if question else None,
    }


@router.post("/quiz/answer")
async def answer_quiz_question(
    answer: str = Form(...), sessions: StudySessions = Depends(get_sessions)
):
    session = sessions.active_quiz()
    if not session:
        return no_session("quiz")
    try:
        result = session.submit_answer(answer)
    except KanaDrillError as e:
        return error_response(e)
    return result.model_dump()


@router.get("/quiz/results")
async def get_quiz_results(sessions: StudySessions = Depends(get_sessions)):
    session = sessions.active_quiz()
    if not session:
        return no_session("quiz")
    try:
        results = session.results()
    except KanaDrillError as e:
        return error_response(e)
    return {
        **results.model_dump(),
        "score_percentage": results.score_percentage,
        "incorrect": [r.model_dump() for r in results.incorrect],
    }


@router.post("/reset")
async def reset_sessions(sessions: StudySessions = Depends(get_sessions)):
    sessions.reset()
    return {"status": "success"}
