"""
Todo AI Assist Server
Turns free text into a structured todo and a todo list into a progress summary
"""
import logging
import os
from datetime import datetime
from typing import Callable, List

from anthropic import Anthropic
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from claude_client import build_client, parse_todo_text, summarize_todos
from config import Settings, load_settings
from errors import AssistError, ErrorKind, classify_provider_error, input_invalid
from models import ParseTodoRequest, SummarizeTodosRequest, Task
from preprocessing import normalize_text, validate_input
from repair import repair_draft
from stats import PERIODS, compute_statistics
from utils import get_current_time

logger = logging.getLogger(__name__)

app = FastAPI(title="Todo AI Assist")

_task_list = TypeAdapter(List[Task])


def get_settings() -> Settings:
    return load_settings()


def get_client_factory() -> Callable[[Settings], Anthropic]:
    """The client is built only after the input has been validated"""
    return build_client


def get_now(settings: Settings = Depends(get_settings)) -> datetime:
    return get_current_time(settings.timezone)


@app.exception_handler(AssistError)
async def assist_error_handler(request: Request, exc: AssistError):
    include_detail = exc.kind is ErrorKind.UNCLASSIFIED and load_settings().is_development
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(include_detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"⚠️  Malformed request body on {request.url.path}")
    error = input_invalid("The request body is malformed.")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def _call_model(settings: Settings, fn, *args):
    try:
        return fn(*args)
    except AssistError:
        raise
    except Exception as e:
        raise classify_provider_error(e, api_key=settings.api_key) from e


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "Todo AI Assist",
        "version": "1.0.0"
    }


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Detailed health check"""
    return {
        "status": "healthy",
        "claude_configured": bool(settings.api_key),
        "model": settings.model,
        "timezone": settings.timezone,
        "environment": settings.environment
    }


@app.post("/api/ai/parse-todo")
def parse_todo(
    body: ParseTodoRequest,
    settings: Settings = Depends(get_settings),
    client_factory: Callable[[Settings], Anthropic] = Depends(get_client_factory),
    now: datetime = Depends(get_now),
):
    """Natural-language sentence -> repaired todo draft"""
    if not body.text or not isinstance(body.text, str):
        raise input_invalid("Input text is required.")

    text = normalize_text(body.text)
    validation = validate_input(text, original_length=len(body.text))
    if not validation.valid:
        logger.info(f"ℹ️  Rejected parse input: {validation.error}")
        raise input_invalid(validation.error)

    client = client_factory(settings)
    raw = _call_model(settings, parse_todo_text, client, text, now, settings)

    draft = repair_draft(raw, now)
    logger.info(f"✅ Parsed todo: {draft.title}")
    return draft.model_dump()


@app.post("/api/ai/summarize-todos")
def summarize(
    body: SummarizeTodosRequest,
    settings: Settings = Depends(get_settings),
    client_factory: Callable[[Settings], Anthropic] = Depends(get_client_factory),
    now: datetime = Depends(get_now),
):
    """Todo list + period -> summary, urgent tasks, insights, recommendations"""
    if body.todos is None or not isinstance(body.todos, list):
        raise input_invalid("A list of todos is required.")

    if body.period not in PERIODS:
        raise input_invalid("period must be either 'today' or 'week'.")

    try:
        todos = _task_list.validate_python(body.todos)
    except ValidationError as e:
        logger.info(f"ℹ️  Rejected todo list: {e.error_count()} invalid field(s)")
        raise input_invalid("The todo list contains invalid entries.") from e

    report = compute_statistics(todos, body.period, now, settings.timezone)
    logger.info(
        f"📊 {report.total} todos, {report.completion_rate}% done, "
        f"{len(report.overdue)} overdue, {len(report.urgent)} urgent"
    )

    client = client_factory(settings)
    result = _call_model(settings, summarize_todos, client, todos, report, now, settings)

    # The model's answer is passed through as is
    return result.model_dump()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"🚀 Starting server on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
