from __future__ import annotations

import functools
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dayplanner.app import App, create_app
from dayplanner.config import load_settings
from dayplanner.dates import start_of_day
from dayplanner.errors import DayPlannerError, EntityNotFound
from dayplanner.models import CATEGORIES, MOODS, PRIORITY_LEVELS, ChecklistItem, DailyEntry, Note, PlannerItem
from dayplanner.repositories.favorites import FavoriteFilter
from dayplanner.repositories.notes import NoteSort
from dayplanner.repositories.planner import ViewMode

app = typer.Typer(help="Day Planner — notes, checklists, journal and calendar")
notes_app = typer.Typer(help="Notes with tags and search.")
checklists_app = typer.Typer(help="Checklists with subtasks.")
daily_app = typer.Typer(help="One journal entry per day.")
planner_app = typer.Typer(help="Calendar items by day, week or month.")
favorites_app = typer.Typer(help="Everything marked as favorite.")
app.add_typer(notes_app, name="notes")
app.add_typer(checklists_app, name="checklists")
app.add_typer(daily_app, name="daily")
app.add_typer(planner_app, name="planner")
app.add_typer(favorites_app, name="favorites")

console = Console()
err_console = Console(stderr=True)

state: dict[str, App] = {}

DATE_FORMATS = ["%Y-%m-%d"]
F = TypeVar("F", bound=Callable)
E = TypeVar("E")


def _app() -> App:
    return state["app"]


def reports_errors(func: F) -> F:
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DayPlannerError as exc:
            err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
            raise typer.Exit(code=1)

    return wrapper


def _resolve(items: Iterable[E], prefix: str, kind: str) -> E:
    matches = [i for i in items if i.id.startswith(prefix)]
    if not matches:
        raise EntityNotFound(kind, prefix)
    if len(matches) > 1:
        raise typer.BadParameter(f"{prefix!r} matches {len(matches)} {kind}s, use a longer prefix")
    return matches[0]


def _at(day: datetime, hhmm: str | None) -> datetime | None:
    if hhmm is None:
        return None
    try:
        t = datetime.strptime(hhmm, "%H:%M").time()
    except ValueError:
        raise typer.BadParameter(f"expected HH:MM, got {hhmm!r}") from None
    return datetime.combine(day.date(), t)


def _moved(value: datetime | None, day: datetime) -> datetime | None:
    """Keep the time of day of ``value`` but put it on ``day``."""
    if value is None:
        return None
    return datetime.combine(day.date(), value.time())


def _split_tags(raw: str) -> list[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


def _short(entity_id: str) -> str:
    return entity_id[:8]


def _day(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else "—"


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")) -> None:
    try:
        settings = load_settings()
    except ValueError as exc:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    try:
        state["app"] = create_app(settings)
    except DayPlannerError as exc:
        err_console.print(f"[red]Could not open store:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)


# --- notes ---

def _notes_table(notes: list[Note], title: str = "Notes") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("★")
    table.add_column("Title", style="cyan")
    table.add_column("Tags", style="magenta")
    table.add_column("Updated", style="yellow")
    for n in notes:
        table.add_row(
            _short(n.id),
            "★" if n.is_favorite else "",
            n.title or "Untitled",
            ", ".join(f"#{t}" for t in n.tags),
            n.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


@notes_app.command("list")
@reports_errors
def notes_list(
    search: str = typer.Option("", "--search", "-s", help="Match title or content"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", "-t", help="Show notes with any of these tags"),
    sort: NoteSort = typer.Option(NoteSort.NEWEST_FIRST, help="Sort order"),
) -> None:
    """List notes, filtered and sorted."""
    notes = _app().notes.filtered(search=search, tags=tag or (), sort=sort)
    if not notes:
        console.print("[dim]No notes found.[/dim]")
        return
    console.print(_notes_table(notes))


@notes_app.command("new")
@reports_errors
def notes_new(
    title: str = typer.Option("", help="Note title"),
    content: str = typer.Option("", help="Note body"),
    tags: str = typer.Option("", help="Comma separated tags"),
) -> None:
    """Create a note."""
    repo = _app().notes
    note = repo.create()
    if title or content or tags:
        note = repo.update(note.id, title, content, _split_tags(tags))
    console.print(f"Created note [cyan]{_short(note.id)}[/cyan]")


@notes_app.command("edit")
@reports_errors
def notes_edit(
    note_id: str = typer.Argument(..., help="Note id or prefix"),
    title: Optional[str] = typer.Option(None, help="New title"),
    content: Optional[str] = typer.Option(None, help="New body"),
    tags: Optional[str] = typer.Option(None, help="Comma separated tags"),
) -> None:
    """Change a note's title, content or tags."""
    repo = _app().notes
    note = _resolve(repo.list(), note_id, "note")
    repo.update(
        note.id,
        title if title is not None else note.title,
        content if content is not None else note.content,
        _split_tags(tags) if tags is not None else note.tags,
    )
    console.print(f"Updated note [cyan]{_short(note.id)}[/cyan]")


@notes_app.command("show")
@reports_errors
def notes_show(note_id: str = typer.Argument(..., help="Note id or prefix")) -> None:
    """Print a note."""
    note = _resolve(_app().notes.list(), note_id, "note")
    console.print(f"[bold]{note.title or 'Untitled'}[/bold]  {' '.join('#' + t for t in note.tags)}")
    console.print(note.content)


@notes_app.command("rm")
@reports_errors
def notes_rm(note_id: str = typer.Argument(..., help="Note id or prefix")) -> None:
    """Delete a note."""
    repo = _app().notes
    note = _resolve(repo.list(), note_id, "note")
    repo.delete(note.id)
    console.print(f"Deleted note [cyan]{_short(note.id)}[/cyan]")


@notes_app.command("fav")
@reports_errors
def notes_fav(note_id: str = typer.Argument(..., help="Note id or prefix")) -> None:
    """Toggle a note's favorite flag."""
    repo = _app().notes
    note = repo.toggle_favorite(_resolve(repo.list(), note_id, "note").id)
    console.print("★ favorite" if note.is_favorite else "☆ not favorite")


@notes_app.command("tags")
@reports_errors
def notes_tags() -> None:
    """List every tag in use."""
    for tag in _app().notes.all_tags():
        console.print(f"#{tag}")


# --- checklists ---

def _checklists_table(items: list[ChecklistItem], title: str = "Checklists") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Done")
    table.add_column("★")
    table.add_column("Title", style="cyan")
    table.add_column("Priority", style="red")
    table.add_column("Subtasks")
    table.add_column("Due", style="yellow")
    for c in items:
        table.add_row(
            _short(c.id),
            "✓" if c.is_completed else "",
            "★" if c.is_favorite else "",
            c.title,
            "!" * c.priority,
            f"{c.completed_subtasks}/{len(c.subtasks)}" if c.subtasks else "",
            _day(c.due_date),
        )
    return table


@checklists_app.command("list")
@reports_errors
def checklists_list(
    hide_completed: bool = typer.Option(False, "--hide-completed", help="Hide finished checklists"),
    by_priority: bool = typer.Option(False, "--by-priority", help="Sort by priority instead of creation time"),
) -> None:
    """List checklists."""
    items = _app().checklists.filtered(show_completed=not hide_completed, sort_by_priority=by_priority)
    if not items:
        console.print("[dim]No checklists.[/dim]")
        return
    console.print(_checklists_table(items))


@checklists_app.command("add")
@reports_errors
def checklists_add(title: str = typer.Argument(..., help="Checklist title")) -> None:
    """Create a checklist."""
    item = _app().checklists.create(title)
    console.print(f"Created checklist [cyan]{_short(item.id)}[/cyan]")


@checklists_app.command("show")
@reports_errors
def checklists_show(item_id: str = typer.Argument(..., help="Checklist id or prefix")) -> None:
    """Print a checklist with its subtasks."""
    item = _resolve(_app().checklists.list(), item_id, "checklist")
    console.print(f"[bold]{item.title}[/bold] {'!' * item.priority}")
    if item.notes:
        console.print(f"[dim]{item.notes}[/dim]")
    for sub in item.subtasks:
        mark = "[green]✓[/green]" if sub.is_completed else "○"
        console.print(f"  {mark} {sub.title} [dim]{_short(sub.id)}[/dim]")


@checklists_app.command("edit")
@reports_errors
def checklists_edit(
    item_id: str = typer.Argument(..., help="Checklist id or prefix"),
    title: Optional[str] = typer.Option(None, help="New title"),
    notes: Optional[str] = typer.Option(None, help="Free-form notes"),
    priority: Optional[int] = typer.Option(
        None, min=PRIORITY_LEVELS[0], max=PRIORITY_LEVELS[-1], help="0 (none) to 3 (high)"
    ),
    due: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Due date"),
) -> None:
    """Change a checklist's details."""
    repo = _app().checklists
    item = _resolve(repo.list(), item_id, "checklist")
    repo.update(
        item.id,
        title if title is not None else item.title,
        notes if notes is not None else item.notes,
        priority if priority is not None else item.priority,
        due if due is not None else item.due_date,
    )
    console.print(f"Updated checklist [cyan]{_short(item.id)}[/cyan]")


@checklists_app.command("done")
@reports_errors
def checklists_done(item_id: str = typer.Argument(..., help="Checklist id or prefix")) -> None:
    """Toggle a checklist's completion."""
    repo = _app().checklists
    item = repo.toggle_completion(_resolve(repo.list(), item_id, "checklist").id)
    console.print("✓ completed" if item.is_completed else "○ open")


@checklists_app.command("fav")
@reports_errors
def checklists_fav(item_id: str = typer.Argument(..., help="Checklist id or prefix")) -> None:
    """Toggle a checklist's favorite flag."""
    repo = _app().checklists
    item = repo.toggle_favorite(_resolve(repo.list(), item_id, "checklist").id)
    console.print("★ favorite" if item.is_favorite else "☆ not favorite")


@checklists_app.command("rm")
@reports_errors
def checklists_rm(item_id: str = typer.Argument(..., help="Checklist id or prefix")) -> None:
    """Delete a checklist and its subtasks."""
    repo = _app().checklists
    item = _resolve(repo.list(), item_id, "checklist")
    repo.delete(item.id)
    console.print(f"Deleted checklist [cyan]{_short(item.id)}[/cyan]")


@checklists_app.command("sub-add")
@reports_errors
def checklists_sub_add(
    item_id: str = typer.Argument(..., help="Checklist id or prefix"),
    title: str = typer.Argument(..., help="Subtask title"),
) -> None:
    """Append a subtask."""
    repo = _app().checklists
    item = repo.add_subtask(_resolve(repo.list(), item_id, "checklist").id, title)
    console.print(f"Added subtask [cyan]{_short(item.subtasks[-1].id)}[/cyan]")


@checklists_app.command("sub-done")
@reports_errors
def checklists_sub_done(
    item_id: str = typer.Argument(..., help="Checklist id or prefix"),
    subtask_id: str = typer.Argument(..., help="Subtask id or prefix"),
) -> None:
    """Toggle a subtask."""
    repo = _app().checklists
    item = _resolve(repo.list(), item_id, "checklist")
    sub = _resolve(item.subtasks, subtask_id, "subtask")
    repo.toggle_subtask(item.id, sub.id)
    console.print(f"Toggled [cyan]{sub.title}[/cyan]")


@checklists_app.command("sub-rm")
@reports_errors
def checklists_sub_rm(
    item_id: str = typer.Argument(..., help="Checklist id or prefix"),
    subtask_id: str = typer.Argument(..., help="Subtask id or prefix"),
) -> None:
    """Delete a subtask."""
    repo = _app().checklists
    item = _resolve(repo.list(), item_id, "checklist")
    sub = _resolve(item.subtasks, subtask_id, "subtask")
    repo.delete_subtask(item.id, sub.id)
    console.print(f"Deleted subtask [cyan]{sub.title}[/cyan]")


# --- daily ---

def _print_entry(day: datetime, entry: DailyEntry | None) -> None:
    console.print(f"[bold]{day.strftime('%A, %B %d, %Y')}[/bold]")
    if entry is None:
        console.print("[dim]No entry yet.[/dim]")
        return
    star = " ★" if entry.is_favorite else ""
    console.print(f"{entry.mood or ''}{star} [dim]{_short(entry.id)}[/dim]")
    console.print(entry.content)


@daily_app.command("show")
@reports_errors
def daily_show(
    date: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Day to show (default today)"),
    step: int = typer.Option(0, help="Move this many days from --date (negative goes back)"),
) -> None:
    """Show the entry for a day."""
    repo = _app().daily
    day = start_of_day(date or datetime.now())
    entry = repo.entry_for_date(day)
    for _ in range(abs(step)):
        day, entry = repo.next_day(day) if step > 0 else repo.previous_day(day)
    _print_entry(day, entry)


@daily_app.command("write")
@reports_errors
def daily_write(
    content: str = typer.Argument(..., help="What happened today"),
    date: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Day to write (default today)"),
    mood: Optional[str] = typer.Option(None, help=f"One of {' '.join(MOODS)}"),
) -> None:
    """Write the entry for a day, replacing what was there."""
    entry = _app().daily.save(date or datetime.now(), content, mood)
    console.print(f"Saved entry for [cyan]{_day(entry.date)}[/cyan]")


@daily_app.command("list")
@reports_errors
def daily_list() -> None:
    """List all entries, newest day first."""
    entries = _app().daily.list()
    if not entries:
        console.print("[dim]No entries yet.[/dim]")
        return
    table = Table(title="Daily Entries")
    table.add_column("ID", style="dim")
    table.add_column("Date", style="yellow")
    table.add_column("Mood")
    table.add_column("★")
    table.add_column("Entry", style="cyan")
    for e in entries:
        preview = e.content if len(e.content) <= 60 else e.content[:57] + "..."
        table.add_row(_short(e.id), _day(e.date), e.mood or "", "★" if e.is_favorite else "", preview)
    console.print(table)


@daily_app.command("rm")
@reports_errors
def daily_rm(entry_id: str = typer.Argument(..., help="Entry id or prefix")) -> None:
    """Delete an entry."""
    repo = _app().daily
    entry = _resolve(repo.list(), entry_id, "daily entry")
    repo.delete(entry.id)
    console.print(f"Deleted entry for [cyan]{_day(entry.date)}[/cyan]")


@daily_app.command("fav")
@reports_errors
def daily_fav(entry_id: str = typer.Argument(..., help="Entry id or prefix")) -> None:
    """Toggle an entry's favorite flag."""
    repo = _app().daily
    entry = repo.toggle_favorite(_resolve(repo.list(), entry_id, "daily entry").id)
    console.print("★ favorite" if entry.is_favorite else "☆ not favorite")


# --- planner ---

def _time_range(item: PlannerItem) -> str:
    if item.start_time is None:
        return "All Day"
    end = f"–{item.end_time:%H:%M}" if item.end_time else ""
    return f"{item.start_time:%H:%M}{end}"


@planner_app.command("show")
@reports_errors
def planner_show(
    mode: ViewMode = typer.Option(ViewMode.DAY, help="Range to show"),
    date: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Reference day (default today)"),
    step: int = typer.Option(0, help="Move this many periods from --date (negative goes back)"),
) -> None:
    """Show planner items for a day, week or month."""
    repo = _app().planner
    ref = start_of_day(date or datetime.now())
    for _ in range(abs(step)):
        ref = repo.next_period(mode, ref) if step > 0 else repo.previous_period(mode, ref)

    agenda = repo.agenda(mode, ref)
    if not agenda:
        console.print(f"[dim]Nothing planned ({mode.value} of {_day(ref)}).[/dim]")
        return
    for day in agenda:
        table = Table(title=day.day.strftime("%A, %B %d"))
        table.add_column("ID", style="dim")
        table.add_column("Time", style="yellow")
        table.add_column("Title", style="cyan")
        table.add_column("Category", style="magenta")
        table.add_column("Done")
        for item in [*day.all_day, *day.timed]:
            table.add_row(
                _short(item.id),
                _time_range(item),
                item.title,
                item.category.capitalize(),
                "✓" if item.is_completed else "",
            )
        console.print(table)


@planner_app.command("add")
@reports_errors
def planner_add(
    title: str = typer.Argument(..., help="What is planned"),
    detail: str = typer.Option("", help="Details"),
    date: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Day (default today)"),
    start: Optional[str] = typer.Option(None, help="Start time HH:MM (omit for all day)"),
    end: Optional[str] = typer.Option(None, help="End time HH:MM"),
    category: str = typer.Option("general", help=f"One of {', '.join(CATEGORIES)}"),
) -> None:
    """Add a planner item."""
    day = start_of_day(date or datetime.now())
    item = _app().planner.create(title, detail, day, _at(day, start), _at(day, end), category)
    console.print(f"Planned [cyan]{item.title}[/cyan] on {_day(item.date)}")


@planner_app.command("edit")
@reports_errors
def planner_edit(
    item_id: str = typer.Argument(..., help="Item id or prefix"),
    title: Optional[str] = typer.Option(None, help="New title"),
    detail: Optional[str] = typer.Option(None, help="New details"),
    date: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="New day"),
    start: Optional[str] = typer.Option(None, help="Start time HH:MM"),
    end: Optional[str] = typer.Option(None, help="End time HH:MM"),
    all_day: bool = typer.Option(False, "--all-day", help="Drop start and end times"),
    category: Optional[str] = typer.Option(None, help="New category"),
) -> None:
    """Change a planner item."""
    repo = _app().planner
    item = _resolve(repo.list(), item_id, "planner item")
    day = start_of_day(date) if date is not None else item.date
    if all_day:
        start_time = end_time = None
    else:
        start_time = _at(day, start) if start is not None else _moved(item.start_time, day)
        end_time = _at(day, end) if end is not None else _moved(item.end_time, day)
    repo.update(
        item.id,
        title if title is not None else item.title,
        detail if detail is not None else item.detail,
        day,
        start_time,
        end_time,
        start_time is None,
        category if category is not None else item.category,
    )
    console.print(f"Updated [cyan]{_short(item.id)}[/cyan]")


@planner_app.command("done")
@reports_errors
def planner_done(item_id: str = typer.Argument(..., help="Item id or prefix")) -> None:
    """Toggle a planner item's completion."""
    repo = _app().planner
    item = repo.toggle_completion(_resolve(repo.list(), item_id, "planner item").id)
    console.print("✓ completed" if item.is_completed else "○ open")


@planner_app.command("rm")
@reports_errors
def planner_rm(item_id: str = typer.Argument(..., help="Item id or prefix")) -> None:
    """Delete a planner item."""
    repo = _app().planner
    item = _resolve(repo.list(), item_id, "planner item")
    repo.delete(item.id)
    console.print(f"Deleted [cyan]{item.title}[/cyan]")


# --- favorites ---

@favorites_app.command("show")
@reports_errors
def favorites_show(
    kind: FavoriteFilter = typer.Option(FavoriteFilter.ALL, "--filter", help="Which favorites"),
) -> None:
    """Show favorites across notes, checklists and daily entries."""
    favorites = _app().favorites
    shown = False
    if kind in (FavoriteFilter.ALL, FavoriteFilter.NOTES) and (notes := favorites.notes()):
        console.print(_notes_table(notes, title="Favorite Notes"))
        shown = True
    if kind in (FavoriteFilter.ALL, FavoriteFilter.CHECKLISTS) and (items := favorites.checklists()):
        console.print(_checklists_table(items, title="Favorite Checklists"))
        shown = True
    if kind in (FavoriteFilter.ALL, FavoriteFilter.DAILY):
        for entry in favorites.daily_entries():
            _print_entry(entry.date, entry)
            shown = True
    if not shown:
        console.print("[dim]No favorites yet.[/dim]")


@favorites_app.command("remove")
@reports_errors
def favorites_remove(entity_id: str = typer.Argument(..., help="Favorite id or prefix")) -> None:
    """Unmark a favorite. The item itself is kept."""
    favorites = _app().favorites
    target = _resolve(favorites.all(), entity_id, "favorite")
    if isinstance(target, Note):
        favorites.remove_favorite_note(target.id)
    elif isinstance(target, ChecklistItem):
        favorites.remove_favorite_checklist(target.id)
    else:
        favorites.remove_favorite_daily_entry(target.id)
    console.print(f"Removed [cyan]{_short(target.id)}[/cyan] from favorites")
