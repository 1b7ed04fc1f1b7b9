import logging
from datetime import datetime
from typing import List, Type, TypeVar

from anthropic import Anthropic
from pydantic import BaseModel, ValidationError

from config import DEFAULT_MODEL, Settings
from errors import AssistError, ErrorKind
from models import StatisticsReport, SummaryOutput, Task, TodoDraftOutput
from prompts import (
    PARSE_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    build_parse_prompt,
    build_summary_prompt,
)

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


def build_client(settings: Settings) -> Anthropic:
    """Anthropic client with an explicit timeout and bounded retries"""
    return Anthropic(
        api_key=settings.require_api_key(),
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )


def generate_object(
    client: Anthropic,
    prompt: str,
    output_model: Type[OutputT],
    tool_name: str,
    system: str,
    model: str = DEFAULT_MODEL,
    max_tokens: int = 2048,
) -> OutputT:
    """Ask Claude for a structured object by forcing a single tool call"""
    response = client.messages.create(
        model=model,
        max_tokens=max_tokens,
        system=system,
        messages=[
            {"role": "user", "content": prompt}
        ],
        tools=[
            {
                "name": tool_name,
                "description": f"Return the {tool_name} result",
                "input_schema": output_model.model_json_schema()
            }
        ],
        tool_choice={"type": "tool", "name": tool_name}
    )

    # Extract the tool arguments from the response
    blocks = [b for b in response.content if getattr(b, "type", None) == "tool_use"]
    if not blocks:
        raise AssistError(
            ErrorKind.MODEL_OUTPUT_INVALID,
            "The AI response did not contain structured output.",
            detail=f"stop_reason={getattr(response, 'stop_reason', None)}"
        )

    try:
        return output_model.model_validate(blocks[0].input)
    except ValidationError as e:
        raise AssistError(
            ErrorKind.MODEL_OUTPUT_INVALID,
            "The AI response did not match the expected format.",
            detail=str(e)
        ) from e


def parse_todo_text(
    client: Anthropic, text: str, now: datetime, settings: Settings
) -> TodoDraftOutput:
    """Turn a normalized sentence into the raw, unrepaired draft"""
    logger.info(f"🤖 Parsing todo text ({len(text)} chars)")
    return generate_object(
        client,
        build_parse_prompt(text, now),
        TodoDraftOutput,
        tool_name="todo_draft",
        system=PARSE_SYSTEM_PROMPT,
        model=settings.model,
        max_tokens=settings.max_tokens,
    )


def summarize_todos(
    client: Anthropic,
    todos: List[Task],
    report: StatisticsReport,
    now: datetime,
    settings: Settings,
) -> SummaryOutput:
    logger.info(f"🤖 Summarizing {len(todos)} todos for period '{report.period}'")
    return generate_object(
        client,
        build_summary_prompt(todos, report, now, settings.timezone),
        SummaryOutput,
        tool_name="todo_summary",
        system=SUMMARY_SYSTEM_PROMPT,
        model=settings.model,
        max_tokens=settings.max_tokens,
    )
