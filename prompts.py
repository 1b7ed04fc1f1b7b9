"""Prompt text for the parse and summarize calls."""

from datetime import datetime
from typing import List

from models import StatisticsReport, Task
from stats import TIME_SLOT_LABELS, UNCATEGORIZED
from utils import get_formatted_date, to_local

PRIORITY_LABELS = {"high": "High", "medium": "Medium", "low": "Low"}

PARSE_SYSTEM_PROMPT = """You convert a single natural-language sentence into a structured to-do item.
Always answer by calling the provided tool with arguments that match its schema exactly."""

SUMMARY_SYSTEM_PROMPT = """You are a warm, data-driven productivity coach.
You analyze a user's to-do list and return a summary, urgent tasks, insights and recommendations.
Always answer by calling the provided tool with arguments that match its schema exactly."""


def build_parse_prompt(text: str, now: datetime) -> str:
    current_date, current_weekday, _ = get_formatted_date(now)
    return f"""Analyze the following sentence and convert it into structured to-do data.

Input sentence: "{text}"

=== Rules ===

1. title: extract only the core action, concisely (20 characters or fewer recommended)

2. description: a detailed description based on the original sentence (optional)

3. due_date - always convert to YYYY-MM-DD:
   - "today" or "by today" -> {current_date}
   - "tomorrow" or "by tomorrow" -> current date + 1 day
   - "the day after tomorrow" -> current date + 2 days
   - "this [weekday]" (e.g. "this Friday") -> the nearest such weekday
   - "next [weekday]" (e.g. "next Monday") -> that weekday in the following week
   - if no date is stated, leave it out
   - current date: {current_date} ({current_weekday})

4. due_time - always convert to 24-hour HH:mm:
   - "morning" -> 09:00
   - "noon" or "lunch" -> 12:00
   - "afternoon" -> 14:00 (only when no explicit time is given)
   - "evening" -> 18:00
   - "night" -> 21:00
   - "N am" -> 0N:00 (e.g. "10 am" -> 10:00)
   - "N pm" -> (N+12):00 (e.g. "3 pm" -> 15:00)
   - if no time is stated use 09:00
   - if only the hour is given, append ":00"

5. priority - always pick exactly one:
   - "high": urgent, important, asap, quickly, must, critical, required
   - "medium": normal, moderate, or no keyword at all
   - "low": relaxed, slowly, someday, later, whenever

6. category:
   - "work": meeting, report, project, presentation, document, client
   - "personal": shopping, friends, family, appointment, errand
   - "health": exercise, hospital, doctor, yoga, gym, checkup, medicine
   - "study": study, book, lecture, course, reading, exam
   - leave it out if nothing matches

Return every field in the format required by the schema."""


def _slot_line(name: str, total: int, completed: int, completion_rate: float) -> str:
    return f"- {TIME_SLOT_LABELS[name]}: {total} (completed {completed}, {completion_rate}%)"


def render_analysis(report: StatisticsReport) -> str:
    """Render the statistics block injected into the summary prompt"""
    p = report.priority_stats
    lines = [
        "=== Basic statistics ===",
        f"- Total tasks: {report.total}",
        f"- Completed: {report.completed} ({report.completion_rate}%)",
        f"- Incomplete: {report.incomplete}",
        "",
        "=== Priority analysis ===",
    ]
    for priority in ("high", "medium", "low"):
        s = p[priority]
        lines.append(
            f"- {PRIORITY_LABELS[priority]} priority: {s.total} total "
            f"(completed {s.completed}, {s.completion_rate}%)"
        )

    overdue = f"{len(report.overdue)}"
    if report.overdue:
        overdue += f" ({', '.join(t.title for t in report.overdue)})"
    lines += [
        "",
        "=== Time management ===",
        f"- Tasks with a due date: {report.with_due_date}",
        f"- Due date compliance: {report.due_date_compliance_rate}% "
        f"({report.on_time_completed}/{report.with_due_date})",
        f"- Currently overdue: {overdue}",
        f"- Completed after the due date: {len(report.completed_after_due)}",
        "",
        "=== Time-of-day concentration ===",
    ]
    for name, s in report.time_slots.items():
        lines.append(_slot_line(name, s.total, s.completed, s.completion_rate))
    if report.most_concentrated_slot:
        lines.append(f"- Most concentrated slot: {TIME_SLOT_LABELS[report.most_concentrated_slot]}")

    lines += ["", "=== Category analysis ==="]
    for category, s in report.category_stats.items():
        lines.append(f"- {category}: {s.total} total (completed {s.completed}, {s.completion_rate}%)")

    best_priority = PRIORITY_LABELS.get(report.best_priority, "none")
    lines += [
        "",
        "=== Productivity patterns ===",
        f"- Category with the highest completion rate: {report.best_category or 'none'}",
        f"- Priority with the highest completion rate: {best_priority}",
    ]
    if report.period == "week" and report.day_stats:
        lines.append("- Tasks by weekday:")
        for day, s in report.day_stats.items():
            lines.append(f"  - {day}: {s.total} (completed {s.completed})")

    urgent = f"{len(report.urgent)}"
    if report.urgent:
        urgent += f" ({', '.join(t.title for t in report.urgent)})"
    lines += ["", "=== Urgent tasks ===", f"- Incomplete high-priority tasks: {urgent}"]

    return "\n".join(lines)


def render_task_list(todos: List[Task], tz_name: str = "UTC") -> str:
    rows = []
    for i, t in enumerate(todos, start=1):
        due = to_local(t.due_date, tz_name).strftime("%Y-%m-%d %H:%M") if t.due_date else "no due date"
        status = "✅ done" if t.completed else "⏳ open"
        row = (
            f"{i}. {status} - {t.title} (priority: {PRIORITY_LABELS[t.priority]}, "
            f"category: {t.category or UNCATEGORIZED}, due: {due}"
        )
        if t.description:
            row += f", description: {t.description[:50]}"
        rows.append(row + ")")
    return "\n".join(rows)


TODAY_GUIDANCE = {
    "summary": """- Briefly summarize today's status (total, completed, completion rate)
- Highlight the remaining tasks and the number of urgent tasks
- Mention focus and productivity over the day""",
    "productivity": "",
    "recommendations": """- Concrete time management tips for the rest of today
- Suggestions for re-ordering the remaining tasks
- A strategy for handling urgent tasks
- Rescheduling ideas to reduce today's overload""",
}

WEEK_GUIDANCE = {
    "summary": """- Summarize the whole week (total, completed, completion rate)
- Describe the completion trend across the week where possible
- Mention the most productive weekday and patterns""",
    "productivity": """- Identify the most productive weekday from the weekday distribution
   - """,
    "recommendations": """- A plan for next week based on this week's patterns
- Concrete priority and schedule adjustments
- Ways to spread the load across times of day and weekdays
- Scheduling tips to raise productivity""",
}


def build_summary_prompt(
    todos: List[Task], report: StatisticsReport, now: datetime, tz_name: str = "UTC"
) -> str:
    period_text = "today's" if report.period == "today" else "this week's"
    guidance = TODAY_GUIDANCE if report.period == "today" else WEEK_GUIDANCE
    _, _, current_date = get_formatted_date(now)

    return f"""Analyze {period_text} to-do list in depth and give the user a useful summary, insights and actionable recommendations.

{render_analysis(report)}

=== Task details ===
{render_task_list(todos, tz_name)}

Current date: {current_date}

=== Guidelines ===

**1. summary**
{guidance["summary"]}

**2. urgentTasks**
- List only the titles of incomplete high-priority tasks (at most 5)
- Put tasks with the nearest due date first

**3. insights** - cover the following, woven together naturally:

a) Completion analysis
   - Overall completion rate and how it differs by priority and category

b) Time management
   - Interpret the due date compliance rate
   - How often tasks slip past their due date, and which kinds
   - Whether a time of day is overloaded

c) Productivity patterns
   {guidance["productivity"]}Which kinds of tasks are easiest to finish (category, priority)
   - Common traits of tasks that get postponed

d) Positive feedback
   - What the user is doing well, with encouragement

**4. recommendations** - 2 to 4 concrete, actionable suggestions:
{guidance["recommendations"]}

=== Principles ===
1. Plain, friendly language the user can act on immediately
2. An encouraging tone; frame problems as opportunities
3. Cite concrete numbers and patterns from the statistics above
4. Balance what went well with what can improve"""
