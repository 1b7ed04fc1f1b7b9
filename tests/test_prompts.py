from datetime import datetime

from models import Task
from prompts import build_parse_prompt, build_summary_prompt, render_analysis, render_task_list
from stats import compute_statistics

NOW = datetime.fromisoformat("2025-01-10T12:00:00")


def test_parse_prompt_carries_text_and_date():
    prompt = build_parse_prompt("dentist tomorrow 3pm", NOW)
    assert '"dentist tomorrow 3pm"' in prompt
    assert "2025-01-10 (Friday)" in prompt


def test_analysis_lists_urgent_titles_and_slot():
    todos = [
        Task(title="Pitch deck", priority="high", due_date=datetime(2025, 1, 10, 14)),
        Task(title="Laundry", priority="low", completed=True),
    ]
    text = render_analysis(compute_statistics(todos, "today", NOW))
    assert "Incomplete high-priority tasks: 1 (Pitch deck)" in text
    assert "Most concentrated slot: Afternoon (12:00-18:00)" in text
    assert "Priority with the highest completion rate: Low" in text
    assert "Tasks by weekday" not in text


def test_task_list_truncates_description():
    todos = [Task(title="Read", description="d" * 80, category="")]
    line = render_task_list(todos)
    assert line.startswith("1. ⏳ open - Read")
    assert "d" * 50 + ")" in line
    assert "uncategorized" in line


def test_week_prompt_asks_for_weekday_pattern():
    prompt = build_summary_prompt([], compute_statistics([], "week", NOW), NOW)
    assert "this week's" in prompt
    assert "most productive weekday" in prompt
    assert "Friday, January 10, 2025" in prompt


def test_task_list_shows_due_dates_in_configured_timezone():
    todos = [Task(title="Standup", due_date=datetime.fromisoformat("2025-01-10T01:00:00+00:00"))]
    assert "due: 2025-01-09 20:00" in render_task_list(todos, tz_name="America/New_York")
    assert "due: 2025-01-10 01:00" in render_task_list(todos)
