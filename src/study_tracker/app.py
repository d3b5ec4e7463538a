"""Interactive CLI application."""
import logging
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from study_tracker.advisor import generate_recommendations
from study_tracker.config import DEFAULT_SNAPSHOT_PATH, DEFAULT_WEEKS, LOG_LEVEL
from study_tracker.importer import SnapshotError, load_snapshot
from study_tracker.models import TIERS
from study_tracker.patterns import analyze_study_patterns
from study_tracker.planner import generate_study_plan, get_study_recommendation
from study_tracker.prediction import predict_performance
from study_tracker.progress import (
    bulletins_only_progress, global_progress, global_progress_with_bulletins, folder_totals,
)
from study_tracker.tracker import TrackerState
from study_tracker.weekly import generate_weekly_plan

console = Console()
logger = logging.getLogger(__name__)

TIER_COLORS = {"urgent": "red", "high": "dark_orange", "medium": "yellow", "low": "green"}
KIND_COLORS = {"warning": "red", "success": "green", "info": "blue", "tip": "cyan"}


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome(state: TrackerState):
    exam = state.exam_date.strftime("%Y-%m-%d") if state.exam_date else "not set"
    console.print(Panel(
        f"[bold]Study Tracker[/bold]\n[dim]{len(state.topics)} topics · "
        f"{len(state.bulletins)} bulletins · exam {exam}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("plan", "Priority plan + recommendation"),
        ("weekly", "Week-by-week calendar"),
        ("predict", "Will I finish on time?"),
        ("patterns", "Study habits"),
        ("advice", "Personalised tips"),
        ("progress", "Global and folder progress"),
        ("exam", "Set or clear the exam date"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def _bar(ratio: float, width: int = 20) -> str:
    filled = int(ratio * width)
    return f"{'█' * filled}{'░' * (width - filled)}"


def cmd_plan(state: TrackerState, now: datetime = None):
    plan = generate_study_plan(state.topics, state.bulletins, state.categories, state.exam_date, now)
    for tier in TIERS:
        items = plan.bucket(tier)
        if not items:
            continue
        color = TIER_COLORS[tier]
        table = Table(title=f"[{color}]{tier.upper()}[/{color}] ({len(items)})")
        table.add_column("Item", style="cyan")
        table.add_column("Type")
        table.add_column("Progress", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Why")
        for item in items:
            table.add_row(item.title, item.type, f"{item.progress:.0%}", str(item.score), item.reason)
        console.print(table)
    console.print(Panel(get_study_recommendation(plan), title="Recommendation", border_style="blue"))


def cmd_weekly(state: TrackerState, now: datetime = None):
    weeks = generate_weekly_plan(
        state.topics, state.bulletins, state.categories, state.exam_date, DEFAULT_WEEKS, now,
    )
    if not weeks:
        console.print("[green]Nothing left to schedule![/green]")
        return
    for week in weeks:
        table = Table(
            title=f"Week {week.week_number}: {week.start_date:%b %d} - {week.end_date:%b %d}"
            f" ({week.item_count} items)",
        )
        table.add_column("Item", style="cyan")
        table.add_column("Type")
        table.add_column("Progress", justify="right")
        table.add_column("Note")
        for item in week.items:
            title = f"🔄 {item.title}" if item.is_review else item.title
            table.add_row(title, item.type, f"{item.progress:.0%}", item.reason)
        console.print(table)


def cmd_predict(state: TrackerState, now: datetime = None):
    pattern = analyze_study_patterns(state.topics, state.bulletins, now)
    prediction = predict_performance(
        state.topics, state.bulletins, state.categories, state.exam_date, pattern, now,
    )
    color = "green" if prediction.will_finish_on_time else "red"
    status = "On track" if prediction.will_finish_on_time else "Behind schedule"
    console.print(Panel(
        f"[{color}][bold]{status}[/bold][/{color}]\n"
        f"Days needed: [bold]{prediction.days_needed}[/bold]  |  "
        f"Estimated finish: [bold]{prediction.estimated_completion_date:%Y-%m-%d}[/bold]  |  "
        f"Time coverage: [bold]{prediction.completion_percentage:.0f}%[/bold]  |  "
        f"Confidence: [bold]{prediction.confidence:.0%}[/bold]\n\n"
        f"{prediction.recommendation}",
        title="Prediction", border_style=color,
    ))


def cmd_patterns(state: TrackerState, now: datetime = None):
    pattern = analyze_study_patterns(state.topics, state.bulletins, now)
    table = Table(title="Study Patterns")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Progress per study day", f"{pattern.average_progress_per_day:.1f}")
    table.add_row("Study frequency", f"{pattern.study_frequency:.0%}")
    table.add_row("Consistency", f"{_bar(pattern.consistency_score, 10)} {pattern.consistency_score:.0%}")
    table.add_row("Session length (est.)", f"{pattern.average_session_duration:.0f} min")
    table.add_row("Preferred time", pattern.preferred_time_of_day or "-")
    console.print(table)


def cmd_advice(state: TrackerState, now: datetime = None):
    pattern = analyze_study_patterns(state.topics, state.bulletins, now)
    prediction = predict_performance(
        state.topics, state.bulletins, state.categories, state.exam_date, pattern, now,
    )
    cards = generate_recommendations(
        state.topics, state.bulletins, state.categories, pattern, prediction, state.exam_date, now,
    )
    if not cards:
        console.print("[green]No advice right now. Keep up the good work![/green]")
        return
    for card in cards:
        body = card.message + (f"\n[dim]→ {card.action}[/dim]" if card.action else "")
        console.print(Panel(body, title=card.title, border_style=KIND_COLORS.get(card.kind, "white")))


def cmd_progress(state: TrackerState):
    overall = global_progress_with_bulletins(state.topics, state.categories, state.bulletins)
    console.print(f"\n  Overall: [bold]{overall:.0%}[/bold] {_bar(overall)}")
    console.print(f"  Topics: [bold]{global_progress(state.topics, state.categories):.0%}[/bold]  |  "
                  f"Bulletins: [bold]{bulletins_only_progress(state.bulletins):.0%}[/bold]\n")

    table = Table(title="Folders")
    table.add_column("Folder", style="cyan")
    table.add_column("Done", justify="right")
    table.add_column("Progress")
    rows = [(f.name, f.id) for f in state.folders] + [("Unfiled", None)]
    for name, folder_id in rows:
        totals = folder_totals(
            state.topics, state.folder_categories_for(folder_id), folder_id, state.bulletins,
        )
        ratio = state.folder_view_progress(folder_id)
        table.add_row(name, f"{totals['done']}/{totals['total']}", f"{_bar(ratio, 10)} {ratio:.0%}")
    console.print(table)


def cmd_exam(state: TrackerState):
    raw = Prompt.ask("Exam date (YYYY-MM-DD, empty to clear)", default="").strip()
    if not raw:
        state.exam_date = None
        console.print("[dim]Exam date cleared.[/dim]")
        return
    try:
        state.exam_date = datetime.strptime(raw, "%Y-%m-%d")
    except ValueError:
        console.print(f"[red]Not a date: {raw}[/red]")
        return
    console.print(f"[green]Exam date set to {state.exam_date:%Y-%m-%d}[/green]")


def load_state(snapshot_path: str) -> TrackerState:
    if not Path(snapshot_path).exists():
        console.print(f"[yellow]No snapshot at {snapshot_path}, starting empty.[/yellow]")
        return TrackerState()
    return load_snapshot(snapshot_path)


def main():
    configure_logging()
    snapshot_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_SNAPSHOT_PATH
    try:
        state = load_state(snapshot_path)
    except SnapshotError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    show_welcome(state)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="plan").strip().lower()
        try:
            if choice == "plan":
                cmd_plan(state)
            elif choice == "weekly":
                cmd_weekly(state)
            elif choice == "predict":
                cmd_predict(state)
            elif choice == "patterns":
                cmd_patterns(state)
            elif choice == "advice":
                cmd_advice(state)
            elif choice == "progress":
                cmd_progress(state)
            elif choice == "exam":
                cmd_exam(state)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your exam![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.debug("command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
