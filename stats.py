"""Task statistics used as grounding for the summary prompt."""

from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from models import GroupStats, PriorityStats, StatisticsReport, Task
from utils import calendar_date, to_local, weekday_name

PERIODS = ("today", "week")
PRIORITIES = ("high", "medium", "low")
UNCATEGORIZED = "uncategorized"

# (name, start hour inclusive, end hour exclusive)
TIME_SLOTS: Tuple[Tuple[str, int, int], ...] = (
    ("morning", 9, 12),
    ("afternoon", 12, 18),
    ("evening", 18, 21),
    ("night", 21, 24),
)
DEFAULT_SLOT = "morning"

TIME_SLOT_LABELS = {
    "morning": "Morning (09:00-12:00)",
    "afternoon": "Afternoon (12:00-18:00)",
    "evening": "Evening (18:00-21:00)",
    "night": "Night (21:00-24:00)",
}


def rate(part: int, whole: int) -> float:
    """Percentage rounded to one decimal, 0 when whole is 0"""
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 1)


def time_slot(hour: int) -> str:
    for name, start, end in TIME_SLOTS:
        if start <= hour < end:
            return name
    return DEFAULT_SLOT


def _completed_on_time(task: Task, tz_name: str) -> Optional[bool]:
    """True if done by the due day, False if done later, None when it does not apply"""
    if not task.completed or task.due_date is None or task.updated_at is None:
        return None
    return calendar_date(task.updated_at, tz_name) <= calendar_date(task.due_date, tz_name)


def _best(groups: Dict) -> Optional[str]:
    # max() keeps the first of equal keys, which is grouping order
    candidates = [(name, stats) for name, stats in groups.items() if stats.total > 0]
    if not candidates:
        return None
    return max(candidates, key=lambda item: item[1].completed / item[1].total)[0]


def _most_concentrated(slots: Dict[str, GroupStats]) -> Optional[str]:
    best_name, best_total = None, 0
    for name, _, _ in TIME_SLOTS:
        if slots[name].total > best_total:
            best_name, best_total = name, slots[name].total
    return best_name


def compute_statistics(
    todos: List[Task], period: str, now: datetime, tz_name: str = "UTC"
) -> StatisticsReport:
    """
    Aggregate a task collection into a StatisticsReport.

    `now` decides which tasks are overdue; aware datetimes on tasks are
    converted into tz_name before their calendar date is taken.
    """
    if period not in PERIODS:
        raise ValueError(f"period must be one of {PERIODS}, got {period!r}")

    today = now.date()

    total = len(todos)
    completed = sum(1 for t in todos if t.completed)

    priority_stats = {p: PriorityStats() for p in PRIORITIES}
    category_stats: Dict[str, GroupStats] = OrderedDict()
    time_slots = OrderedDict((name, GroupStats()) for name, _, _ in TIME_SLOTS)
    day_stats: Dict[str, GroupStats] = OrderedDict()

    with_due_date = 0
    on_time = 0
    overdue: List[Task] = []
    completed_after_due: List[Task] = []

    for task in todos:
        bucket = priority_stats[task.priority]
        bucket.total += 1
        if task.completed:
            bucket.completed += 1
        else:
            bucket.incomplete += 1

        category = task.category or UNCATEGORIZED
        group = category_stats.setdefault(category, GroupStats())
        group.total += 1
        group.completed += int(task.completed)

        if task.due_date is None:
            continue

        with_due_date += 1
        due_local = to_local(task.due_date, tz_name)

        finished = _completed_on_time(task, tz_name)
        if finished is True:
            on_time += 1
        elif finished is False:
            completed_after_due.append(task)

        if not task.completed and due_local.date() < today:
            overdue.append(task)

        slot = time_slots[time_slot(due_local.hour)]
        slot.total += 1
        slot.completed += int(task.completed)

        if period == "week":
            day = day_stats.setdefault(weekday_name(due_local.date()), GroupStats())
            day.total += 1
            day.completed += int(task.completed)

    for stats in priority_stats.values():
        stats.completion_rate = rate(stats.completed, stats.total)
    for groups in (category_stats, time_slots, day_stats):
        for stats in groups.values():
            stats.completion_rate = rate(stats.completed, stats.total)

    return StatisticsReport(
        period=period,
        total=total,
        completed=completed,
        incomplete=total - completed,
        completion_rate=rate(completed, total),
        priority_stats=priority_stats,
        category_stats=category_stats,
        with_due_date=with_due_date,
        on_time_completed=on_time,
        due_date_compliance_rate=rate(on_time, with_due_date),
        overdue=overdue,
        completed_after_due=completed_after_due,
        time_slots=time_slots,
        most_concentrated_slot=_most_concentrated(time_slots),
        day_stats=day_stats,
        best_category=_best(category_stats),
        best_priority=_best(priority_stats),
        urgent=[t for t in todos if t.priority == "high" and not t.completed],
    )
