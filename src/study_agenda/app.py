"""Interactive CLI application."""
import sys
from dataclasses import replace
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from study_agenda.completion import complete_task
from study_agenda.config import DEFAULT_DATA_PATH, DEFAULT_LOG_PATH
from study_agenda.dashboard import (
    get_agenda_stats, get_discipline_summaries, get_due_reviews,
    get_load_color, get_load_label, get_priority_ranking,
)
from study_agenda.dates import add_days, day_of_week, today_str
from study_agenda.errors import AgendaError
from study_agenda.importer import import_disciplines, load_state, save_state
from study_agenda.models import AgendaState
from study_agenda.priority import tier_color
from study_agenda.scheduler import reorganize_agenda
from study_agenda.seed import is_seeded, sample_state

console = Console()

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def configure_logging(log_path: str = DEFAULT_LOG_PATH) -> None:
    """Send logs to a file so they don't interleave with the console UI."""
    Path(log_path).parent.mkdir(parents=True, exist_ok=True)
    logger.remove()
    logger.add(log_path, level="INFO", rotation="1 MB", retention=3)


def show_welcome():
    console.print(Panel(
        "[bold]Study Agenda[/bold]\n[dim]Priority-driven study and review planner[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("today", "Today's tasks"),
        ("complete", "Mark a task of today as done"),
        ("plan", "View the next two weeks"),
        ("reorganize", "Rebuild the 90-day agenda"),
        ("dashboard", "Progress and agenda statistics"),
        ("priorities", "Most urgent units"),
        ("settings", "Show planner settings"),
        ("import", "Load disciplines from a JSON/YAML file"),
        ("export", "Save the agenda to a JSON file"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def render_day(state: AgendaState, date: str) -> Table:
    plan = state.plans.get(date)
    table = Table(title=f"{WEEKDAYS[day_of_week(date)]} {date}")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Unit", style="cyan")
    table.add_column("Discipline")
    table.add_column("Min", justify="right")
    table.add_column("Status")
    if plan is None:
        return table
    for i, task in enumerate(plan.tasks, 1):
        kind = "[magenta]review[/magenta]" if task.type == "review" else "study"
        status = f"[green]Done ({task.confidence}/5)[/green]" if task.completed else ""
        table.add_row(
            str(i), kind, f"{task.unit_name} [dim]({task.topic_name})[/dim]",
            task.discipline_name, str(task.duration), status,
        )
    return table


def cmd_today(state: AgendaState, today: str) -> None:
    plan = state.plans.get(today)
    if plan is None:
        console.print("[yellow]No plan for today. Use 'reorganize' to build one.[/yellow]")
        return
    if plan.is_rest_day:
        console.print("[green]Rest day. Nothing scheduled.[/green]")
        return
    if not plan.tasks:
        console.print("[yellow]Nothing scheduled for today.[/yellow]")
        return
    console.print(render_day(state, today))
    label = get_load_label(plan.minutes, state.settings.daily_study_minutes)
    console.print(
        f"  {plan.minutes}/{state.settings.daily_study_minutes} min  "
        f"[{get_load_color(label)}]{label}[/{get_load_color(label)}]"
    )


def cmd_complete(state: AgendaState, today: str) -> AgendaState:
    plan = state.plans.get(today)
    open_tasks = [t for t in plan.tasks if not t.completed] if plan else []
    if not open_tasks:
        console.print("[yellow]No open tasks today.[/yellow]")
        return state
    console.print(render_day(state, today))
    choices = [str(i) for i, t in enumerate(plan.tasks, 1) if not t.completed]
    number = IntPrompt.ask("Task number", choices=choices)
    task = plan.tasks[number - 1]
    confidence = IntPrompt.ask(
        "Confidence now (1=lost, 3=ok, 5=mastered)", choices=["1", "2", "3", "4", "5"], default=3,
    )
    notes = Prompt.ask("Notes (optional)", default="")
    new_state = complete_task(state, task.id, confidence, notes, today=today)
    console.print(f"[green]Completed {task.unit_name}![/green]")
    if new_state.last_reorganized == today and state.settings.auto_replan_on_complete:
        console.print("[dim]Agenda re-planned.[/dim]")
    return new_state


def cmd_plan(state: AgendaState, today: str, days: int = 14) -> None:
    if not state.plans:
        console.print("[yellow]No agenda yet. Use 'reorganize' to build one.[/yellow]")
        return
    table = Table(title=f"Next {days} days")
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Study", justify="right")
    table.add_column("Review", justify="right")
    table.add_column("Minutes", justify="right")
    table.add_column("Load")
    for offset in range(days):
        date = add_days(today, offset)
        plan = state.plans.get(date)
        if plan is None:
            continue
        weekday = WEEKDAYS[day_of_week(date)]
        marker = " ←" if date == today else ""
        if plan.is_rest_day:
            table.add_row(date + marker, weekday, "", "", "", "[dim]rest[/dim]")
            continue
        label = get_load_label(plan.minutes, state.settings.daily_study_minutes)
        color = get_load_color(label)
        table.add_row(
            date + marker, weekday,
            str(sum(1 for t in plan.tasks if t.type == "study")),
            str(sum(1 for t in plan.tasks if t.type == "review")),
            str(plan.minutes),
            f"[{color}]{label}[/{color}]",
        )
    console.print(table)


def cmd_reorganize(state: AgendaState, today: str) -> AgendaState:
    plans = reorganize_agenda(state.disciplines, state.settings, today)
    stats = get_agenda_stats(plans, today)
    console.print(
        f"[green]Agenda rebuilt:[/green] {stats['study_tasks']} study and "
        f"{stats['review_tasks']} review task(s) over {stats['study_days']} study days."
    )
    return replace(state, plans=plans, last_reorganized=today)


def cmd_dashboard(state: AgendaState, today: str) -> None:
    stats = get_agenda_stats(state.plans, today)
    header = f"Last reorganized: {state.last_reorganized or 'never'}"
    console.print(Panel(f"[bold]{header}[/bold]", title="Study Agenda Dashboard", border_style="blue"))

    table = Table(title="Disciplines")
    table.add_column("Discipline", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Units", justify="right")
    table.add_column("Studied", justify="right")
    table.add_column("Pending", justify="right")
    table.add_column("Avg conf.", justify="right")
    for ds in get_discipline_summaries(state.disciplines):
        table.add_row(
            ds["name"], f"{ds['weight']:g}", str(ds["units"]), str(ds["studied"]),
            str(ds["pending"]), f"{ds['avg_confidence']}",
        )
    console.print(table)

    console.print(f"\n  Scheduled: [bold]{stats['tasks_scheduled']}[/bold]  |  "
                  f"Completed: [bold]{stats['tasks_completed']}[/bold]  |  "
                  f"Reviews: [bold]{stats['review_tasks']}[/bold]  |  "
                  f"Today: [bold]{stats['today_tasks']}[/bold] task(s), {stats['today_minutes']} min")

    due = get_due_reviews(state.disciplines, state.settings, today)
    if due:
        console.print("\n[bold]Upcoming reviews:[/bold]")
        for r in due[:5]:
            flag = "[red]overdue[/red]" if r["overdue"] else r["due_date"]
            console.print(f"  {flag} - {r['unit_name']} ({r['discipline_name']})")


def cmd_priorities(state: AgendaState, today: str) -> None:
    ranking = get_priority_ranking(state.disciplines, state.settings, today, limit=15)
    if not ranking:
        console.print("[yellow]No units yet. Use 'import' to add disciplines.[/yellow]")
        return
    table = Table(title="Priority Ranking")
    table.add_column("Score", justify="right")
    table.add_column("Unit", style="cyan")
    table.add_column("Discipline")
    table.add_column("Tier")
    table.add_column("Last studied")
    for r in ranking:
        color = tier_color(r["tier"])
        table.add_row(
            f"{r['score']:.1f}", r["unit_name"], r["discipline_name"],
            f"[{color}]{r['tier']}[/{color}]", r["last_studied"] or "[dim]never[/dim]",
        )
    console.print(table)


def cmd_settings(state: AgendaState) -> None:
    s = state.settings
    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    rows = [
        ("Daily study minutes", str(s.daily_study_minutes)),
        ("Study days per week", str(s.study_days_per_week)),
        ("Max tasks per discipline/day", str(s.max_tasks_per_discipline_per_day)),
        ("Max reviews per day", str(s.max_reviews_per_day)),
        ("Re-plan on complete", "yes" if s.auto_replan_on_complete else "no"),
        ("Automatic reviews", "yes" if s.auto_review else "no"),
        ("Review cadence (days)", ", ".join(str(d) for d in s.base_cadence) or "-"),
        ("Confidence factors", f"low ×{s.confidence_factors.low:g}, high ×{s.confidence_factors.high:g}"),
    ]
    for phase in s.exam_phases:
        rows.append((f"Exam {phase.exam_date}", f"+{phase.boost_weight:g} for {', '.join(phase.boosted_discipline_ids)}"))
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


def cmd_import(state: AgendaState) -> AgendaState:
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return state
    new_state = import_disciplines(state, file_path)
    units = sum(len(t.units) for d in new_state.disciplines for t in d.topics)
    console.print(f"[green]Imported {len(new_state.disciplines)} discipline(s), {units} unit(s).[/green] "
                  "[dim]Use 'reorganize' to rebuild the agenda.[/dim]")
    return new_state


def cmd_export(state: AgendaState) -> None:
    file_path = Prompt.ask("Export to", default="agenda-export.json")
    save_state(file_path, state)
    console.print(f"[green]Agenda exported to {file_path}[/green]")


def main():
    data_path = DEFAULT_DATA_PATH
    configure_logging()
    today = today_str()
    try:
        state = load_state(data_path)
    except AgendaError as e:
        console.print(f"[red]Could not load {data_path}: {e}[/red]")
        sys.exit(1)

    if not is_seeded(state):
        console.print("[dim]Setting up for first use...[/dim]")
        state = sample_state()
        state = replace(state, plans=reorganize_agenda(state.disciplines, state.settings, today),
                        last_reorganized=today)
        save_state(data_path, state)
        console.print("[green]Ready![/green]\n")

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today").strip().lower()
        try:
            if choice == "today":
                cmd_today(state, today)
            elif choice == "complete":
                state = cmd_complete(state, today)
                save_state(data_path, state)
            elif choice == "plan":
                cmd_plan(state, today)
            elif choice == "reorganize":
                state = cmd_reorganize(state, today)
                save_state(data_path, state)
            elif choice == "dashboard":
                cmd_dashboard(state, today)
            elif choice == "priorities":
                cmd_priorities(state, today)
            elif choice == "settings":
                cmd_settings(state)
            elif choice == "import":
                state = cmd_import(state)
                save_state(data_path, state)
            elif choice == "export":
                cmd_export(state)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck with your studies![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command {} failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
