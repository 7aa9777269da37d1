from __future__ import annotations

from datetime import datetime

import pytest
from typer.testing import CliRunner

from dayplanner.app import create_app
from dayplanner.cli import app
from dayplanner.config import load_settings
from dayplanner.db import get_db

runner = CliRunner()


@pytest.fixture(autouse=True)
def use_temp_db(tmp_path, monkeypatch):
    """Use a temporary database for each test."""
    monkeypatch.chdir(tmp_path)
    test_db = tmp_path / "test.db"
    monkeypatch.setenv("DAYPLANNER_DB", str(test_db))
    monkeypatch.setenv("DAYPLANNER_WEEK_START", "0")
    return test_db


@pytest.fixture
def planner():
    """Direct repository access to the same database the CLI writes to."""
    return create_app(load_settings())


def invoke(*args):
    result = runner.invoke(app, list(args))
    assert result.exit_code == 0, result.output
    return result


def test_notes_empty():
    assert "No notes found" in invoke("notes", "list").output


def test_create_and_filter_notes(planner):
    invoke("notes", "new", "--title", "Groceries", "--tags", "home")
    invoke("notes", "new", "--title", "Report", "--tags", "work, q1")

    out = invoke("notes", "list", "--tag", "home").output
    assert "Groceries" in out
    assert "Report" not in out

    out = invoke("notes", "list", "--search", "REP").output
    assert "Report" in out
    assert "Groceries" not in out

    assert invoke("notes", "tags").output.split() == ["#home", "#q1", "#work"]
    assert {n.title for n in planner.notes.list()} == {"Groceries", "Report"}


def test_edit_and_delete_note_by_prefix(planner):
    note = planner.notes.create()
    prefix = note.id[:6]

    invoke("notes", "edit", prefix, "--title", "Renamed", "--content", "body")
    assert planner.notes.get(note.id).title == "Renamed"
    assert "body" in invoke("notes", "show", prefix).output

    invoke("notes", "rm", prefix)
    assert planner.notes.list() == []


def test_unknown_id_reports_error():
    result = runner.invoke(app, ["notes", "rm", "deadbeef"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_checklist_subtasks(planner):
    invoke("checklists", "add", "Trip")
    item = planner.checklists.list()[0]

    invoke("checklists", "sub-add", item.id[:8], "Book flight")
    invoke("checklists", "sub-add", item.id[:8], "Pack bag")
    first = planner.checklists.get(item.id).subtasks[0]
    invoke("checklists", "sub-done", item.id[:8], first.id[:8])

    stored = planner.checklists.get(item.id)
    assert [(s.title, s.is_completed) for s in stored.subtasks] == [
        ("Book flight", True),
        ("Pack bag", False),
    ]
    assert "1/2" in invoke("checklists", "list").output


def test_checklist_edit_and_hide_completed(planner):
    invoke("checklists", "add", "Taxes")
    item = planner.checklists.list()[0]
    invoke("checklists", "edit", item.id[:8], "--priority", "3", "--due", "2024-04-15")
    stored = planner.checklists.get(item.id)
    assert stored.priority == 3
    assert stored.due_date == datetime(2024, 4, 15)

    invoke("checklists", "done", item.id[:8])
    assert "No checklists" in invoke("checklists", "list", "--hide-completed").output


def test_checklist_priority_out_of_range(planner):
    invoke("checklists", "add", "Taxes")
    item = planner.checklists.list()[0]
    result = runner.invoke(app, ["checklists", "edit", item.id[:8], "--priority", "4"])
    assert result.exit_code != 0


def test_daily_write_twice_keeps_one_entry(planner):
    invoke("daily", "write", "first draft", "--date", "2024-03-15")
    invoke("daily", "write", "final", "--date", "2024-03-15", "--mood", "😊")

    entries = planner.daily.list()
    assert len(entries) == 1
    assert entries[0].content == "final"
    assert "final" in invoke("daily", "show", "--date", "2024-03-15").output


def test_daily_navigation():
    invoke("daily", "write", "yesterday", "--date", "2024-03-14")
    out = invoke("daily", "show", "--date", "2024-03-15", "--step", "-1").output
    assert "yesterday" in out
    out = invoke("daily", "show", "--date", "2024-03-15", "--step", "1").output
    assert "No entry yet" in out


def test_planner_week_view(planner):
    invoke("planner", "add", "Standup", "--date", "2024-03-15", "--start", "09:30", "--category", "work")
    invoke("planner", "add", "Holiday", "--date", "2024-03-11")
    invoke("planner", "add", "Later", "--date", "2024-03-25")

    out = invoke("planner", "show", "--mode", "week", "--date", "2024-03-13").output
    assert "Standup" in out
    assert "Holiday" in out
    assert "All Day" in out
    assert "Later" not in out

    out = invoke("planner", "show", "--mode", "week", "--date", "2024-03-13", "--step", "2").output
    assert "Later" in out

    item = next(i for i in planner.planner.list() if i.title == "Standup")
    assert item.start_time == datetime(2024, 3, 15, 9, 30)


def test_planner_bad_time():
    result = runner.invoke(app, ["planner", "add", "Oops", "--start", "25:99"])
    assert result.exit_code != 0


def test_favorites(planner):
    note = planner.notes.create()
    planner.notes.update(note.id, "Keeper", "", [])
    entry = planner.daily.save(datetime(2024, 3, 15), "sunny")
    planner.planner.create("Dentist", "", datetime(2024, 3, 15))

    invoke("notes", "fav", note.id[:8])
    invoke("daily", "fav", entry.id[:8])

    out = invoke("favorites", "show").output
    assert "Keeper" in out
    assert "sunny" in out
    assert "Dentist" not in out

    invoke("favorites", "remove", note.id[:8])
    assert "Keeper" not in invoke("favorites", "show", "--filter", "notes").output
    assert planner.notes.get(note.id).title == "Keeper"


def test_corrupt_row_reports_error(planner, use_temp_db):
    note = planner.notes.create()
    with get_db(use_temp_db) as db:
        db.execute("UPDATE notes SET updated_at = ? WHERE id = ?", ("garbage", note.id))

    result = runner.invoke(app, ["notes", "list"])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert isinstance(result.exception, SystemExit)


def test_planner_edit_date_moves_times(planner):
    invoke("planner", "add", "Standup", "--date", "2024-03-15", "--start", "09:30", "--end", "09:45")
    item = planner.planner.list()[0]

    invoke("planner", "edit", item.id[:8], "--date", "2024-03-18")

    moved = planner.planner.get(item.id)
    assert moved.date == datetime(2024, 3, 18)
    assert moved.start_time == datetime(2024, 3, 18, 9, 30)
    assert moved.end_time == datetime(2024, 3, 18, 9, 45)
    assert moved.is_all_day is False


def test_checklist_priority_bounds(planner):
    invoke("checklists", "add", "Taxes")
    item = planner.checklists.list()[0]
    invoke("checklists", "edit", item.id[:8], "--priority", "0")
    assert planner.checklists.get(item.id).priority == 0
    result = runner.invoke(app, ["checklists", "edit", item.id[:8], "--priority", "-1"])
    assert result.exit_code != 0
