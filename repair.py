"""
Post-processing of the model's parse output into a storage-ready draft.
"""
import logging
from datetime import datetime, time, timedelta
from typing import Optional

from models import ParsedTaskDraft, TodoDraftOutput

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Untitled task"
MAX_TITLE_LENGTH = 100
ELLIPSIS = "..."
DEFAULT_DUE_TIME = time(9, 0)
DEFAULT_PRIORITY = "medium"


def repair_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        return PLACEHOLDER_TITLE
    if len(title) > MAX_TITLE_LENGTH:
        return title[:MAX_TITLE_LENGTH - len(ELLIPSIS)] + ELLIPSIS
    return title


def _parse_time(value: Optional[str]) -> time:
    if not value or not value.strip():
        return DEFAULT_DUE_TIME
    value = value.strip()
    for fmt in ("%H:%M", "%H:%M:%S", "%H"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    logger.warning(f"⚠️  Unreadable due_time {value!r}, using default")
    return DEFAULT_DUE_TIME


def combine_due(due_date: Optional[str], due_time: Optional[str], now: datetime) -> Optional[str]:
    """
    Combine date and time into an ISO date-time string.
    Dates earlier than yesterday (relative to now) are dropped.
    """
    if not due_date or not due_date.strip():
        return None

    date_part = due_date.strip()
    # An already combined value carries its own time
    if "T" in date_part:
        date_part, embedded_time = date_part.split("T", 1)
        due_time = due_time or embedded_time

    try:
        day = datetime.strptime(date_part, "%Y-%m-%d").date()
    except ValueError:
        logger.warning(f"⚠️  Unreadable due_date {due_date!r}, dropping it")
        return None

    floor = (now - timedelta(days=1)).date()
    if day < floor:
        logger.info(f"ℹ️  Due date {day.isoformat()} is in the past, dropping it")
        return None

    return datetime.combine(day, _parse_time(due_time)).isoformat(timespec="seconds")


def repair_draft(raw: TodoDraftOutput, now: datetime) -> ParsedTaskDraft:
    """Fill every field of the model output with a safe value"""
    return ParsedTaskDraft(
        title=repair_title(raw.title),
        description=(raw.description or "").strip(),
        due_date=combine_due(raw.due_date, raw.due_time, now),
        priority=raw.priority or DEFAULT_PRIORITY,
        category=(raw.category or "").strip(),
        completed=False,
    )
