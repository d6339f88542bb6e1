import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Response, HTTPException
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware

from interview_coach.api.v1.interview import interview_router
from interview_coach.core.config import settings
from interview_coach.core.constants import APP_TITLE
from interview_coach.core.logger import setup_logger
from interview_coach.core.exceptions import (
    AppError,
    app_error_handler,
    global_exception_handler,
    http_exception_handler,
)

# Setup logger with fresh log file on startup
setup_logger(clear_log=True, log_level=logging.DEBUG if settings.DEBUG_MODE else logging.INFO)
logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
STATIC_DIR = PACKAGE_DIR / "static"
TEMPLATE_PATH = PACKAGE_DIR / "templates" / "index.html"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application startup: {APP_TITLE} (model={settings.GEMINI_MODEL})")
    if not settings.api_key_configured:
        logger.warning("GEMINI_API_KEY is not set; new sessions will open on the error screen")
    yield
    logger.info("Application shutdown")

app = FastAPI(
    title=APP_TITLE,
    description="Practice interviews with AI-generated questions and feedback.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

app.include_router(interview_router, prefix="/api/v1", tags=["interview"])

@app.get("/")
async def read_root():
    import time
    content = TEMPLATE_PATH.read_text(encoding='utf-8')
    # Dynamic cache busting: replace the static version with current timestamp
    content = content.replace('app.js?v=1', f'app.js?v={int(time.time())}')
    return HTMLResponse(content)

@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return FileResponse(STATIC_DIR / "favicon.ico") if (STATIC_DIR / "favicon.ico").exists() else Response(status_code=204)


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn
    uvicorn.run("interview_coach.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG_MODE)
