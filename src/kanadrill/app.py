import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import Settings, settings
from .loader import DataLoader, DatasetCatalog
from .router import router
from .sessions import StudySessions


# --- Logging Setup ---
def setup_logging(config: Settings = settings):
    logger = logging.getLogger("kanadrill")
    logger.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)

    if not os.path.exists(config.LOG_DIR):
        os.makedirs(config.LOG_DIR, exist_ok=True)
    log_path = os.path.abspath(os.path.join(config.LOG_DIR, config.LOG_FILE))
    if not any(
        isinstance(h, RotatingFileHandler) and h.baseFilename == log_path
        for h in logger.handlers
    ):
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.catalog.refresh()
    yield
    app.state.sessions.reset()


# --- App Factory ---
def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or settings
    setup_logging(config)
    app = FastAPI(
        title=config.PROJECT_NAME,
        debug=config.DEBUG,
        lifespan=lifespan,
        root_path=config.ROOT_PATH,
    )

    app.state.config = config
    app.state.loader = DataLoader(config.DATA_DIR)
    app.state.catalog = DatasetCatalog(config.DATA_DIR, config.FLASHCARD_SETS)
    app.state.sessions = StudySessions(
        timeout_minutes=config.SESSION_TIMEOUT_MINUTES, seed=config.RANDOM_SEED
    )

    app.include_router(router)
    # Raw datasets, fetched as {DATA_URL_PATH}/{name}.json
    app.mount(
        config.DATA_URL_PATH,
        StaticFiles(directory=config.DATA_DIR, check_dir=False),
        name="data",
    )

    return app
