"""senko CLI: study decks and inspect study statistics."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from senko.application.config import resolve_config
from senko.domain.errors import SenkoError
from senko.domain.questions import (
    FillInBlank,
    Matching,
    MultipleChoice,
    MultiSelect,
    Ordering,
    QuestionItem,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="senko: flashcard study sessions and analytics.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Manage senko configuration.")
app.add_typer(config_app, name="config")

HEATMAP_LEVELS = ((0, "·"), (1, "░"), (10, "▒"), (30, "▓"), (60, "█"))


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for senko."""
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Study
# ---------------------------------------------------------------------------


def _render_question(item: QuestionItem) -> list[str]:
    lines = [item.question]
    if isinstance(item, (MultipleChoice, MultiSelect)):
        lines += [f"  {chr(ord('a') + i)}) {opt}" for i, opt in enumerate(item.options)]
    elif isinstance(item, Ordering):
        lines += [f"  - {entry}" for entry in item.order_items]
    elif isinstance(item, Matching):
        lines += [f"  {pair.left}  ↔  ?" for pair in item.match_pairs]
    elif isinstance(item, FillInBlank) and item.blanks:
        lines.append(f"  ({len(item.blanks)} blank{'s' if len(item.blanks) != 1 else ''})")
    if item.image_url:
        lines.append(f"  [image: {item.image_url}]")
    return lines


def _render_answer(item: QuestionItem) -> list[str]:
    lines = [item.answer]
    if isinstance(item, Matching):
        lines += [f"  {pair.left}  ↔  {pair.right}" for pair in item.match_pairs]
    elif isinstance(item, MultiSelect) and item.correct_answers:
        lines.append(f"  Correct: {', '.join(item.correct_answers)}")
    elif isinstance(item, FillInBlank) and item.blanks:
        lines.append(f"  Blanks: {', '.join(item.blanks)}")
    return lines


def _keys(line: str) -> list[str]:
    """Turn one line of input into key names; an empty line is the space bar."""
    if not line.strip():
        return ["space"]
    return [ch for ch in line if not ch.isspace()]


@app.command()
def study(
    deck_file: Annotated[
        Path, typer.Argument(help="Deck file: markdown with frontmatter, JSON, or text.")
    ],
    data_dir: Annotated[
        Path | None, typer.Option(help="Where session history is stored.")
    ] = None,
):
    """[bold green]Study[/bold green] a deck until every card is mastered.

    Press Enter to flip a card, then rate it 1 (again) to 4 (easy).
    Type 'gr' to reshuffle and start over, or 'q' to quit without saving.
    """
    from senko.application.deck_service import load_deck
    from senko.application.factory import get_session_recorder
    from senko.application.key_sequence import (
        EventKind,
        InputMode,
        KeySequenceDispatcher,
        dispatch_event,
    )
    from senko.application.review_queue import ReviewQueueScheduler
    from senko.domain.review.models import QueueState

    config = resolve_config({"data_dir": data_dir})

    try:
        deck = load_deck(deck_file)
    except SenkoError as e:
        typer.secho(f"Error: {e}", fg="red")
        raise typer.Exit(1)

    scheduler = ReviewQueueScheduler(
        deck.id, deck.questions, recorder=get_session_recorder(config)
    )
    if scheduler.state is QueueState.EMPTY:
        typer.secho(f"Deck '{deck.name}' has no questions.", fg="yellow")
        return

    dispatcher = KeySequenceDispatcher(timeout=config.sequence_timeout)
    mode = InputMode.QUESTION
    typer.secho(f"Studying '{deck.name}' ({scheduler.total_cards} cards)", bold=True)

    while scheduler.state is QueueState.ACTIVE:
        card = scheduler.current_card
        if card is None:
            break

        if mode is InputMode.QUESTION:
            snap = scheduler.snapshot()
            typer.echo("")
            typer.secho(
                f"[{snap.cards_mastered}/{scheduler.total_cards} mastered]", fg="cyan"
            )
            typer.echo("\n".join(_render_question(card.question)))
            line = typer.prompt("Enter to flip", default="", show_default=False)
        else:
            typer.secho("\n".join(_render_answer(card.question)), fg="green")
            line = typer.prompt("Rate 1-4", default="", show_default=False)

        if line.strip().lower() == "q":
            typer.secho("Session abandoned; nothing was saved.", fg="yellow")
            return

        for key in _keys(line):
            event = dispatcher.feed(key, mode)
            if event is None:
                continue
            if event.kind is EventKind.FLIP:
                mode = InputMode.ANSWER
            else:
                dispatch_event(scheduler, event)
                if event.kind is EventKind.RESET:
                    typer.secho("Deck reshuffled.", fg="yellow")
                mode = InputMode.QUESTION
                break

    session = scheduler.last_session
    if session is None:
        return

    from senko.application.stats.analytics import format_duration
    from senko.domain.constants import MS_PER_MINUTE

    minutes = ((session.end_time or session.start_time) - session.start_time) / MS_PER_MINUTE
    typer.secho("\nSession complete!", fg="green", bold=True)
    typer.echo(f"Reviewed: {session.cards_reviewed}  Mastered: {session.cards_mastered}")
    typer.echo(
        "Ratings: " + "  ".join(f"{rating}={count}" for rating, count in session.ratings.items())
    )
    typer.echo(f"Time: {format_duration(minutes)}")


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@app.command()
def stats(
    data_dir: Annotated[
        Path | None, typer.Option(help="Where session history is stored.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
    deck: Annotated[
        str | None, typer.Option(help="Also show the average rating for this deck id.")
    ] = None,
):
    """Show streaks, study efficiency and the retention curve."""
    from senko.application.factory import get_stats_service
    from senko.application.stats.analytics import format_duration, format_hour

    config = resolve_config({"data_dir": data_dir})
    service = get_stats_service(config)
    dashboard = service.dashboard()
    difficulty = service.deck_difficulty(deck) if deck else None

    if json_output:
        payload = asdict(dashboard)
        if deck:
            payload["deck_difficulty"] = {"deck_id": deck, "average_rating": difficulty}
        typer.echo(json.dumps(payload, indent=2))
        return

    streak = dashboard.streak
    eff = dashboard.efficiency
    typer.echo(f"Sessions: {dashboard.total_sessions}")
    typer.echo(
        f"Current streak: {streak.current_streak} days  "
        f"Longest: {streak.longest_streak} days  "
        f"Last studied: {streak.last_study_date or 'never'}"
    )
    typer.echo(
        f"Study time: {format_duration(eff.total_study_time)}  "
        f"Cards/min: {eff.cards_per_minute:.2f}  "
        f"Avg per card: {eff.average_time_per_card:.0f}s"
    )
    typer.echo(
        f"Peak hour: {format_hour(eff.peak_hour) if eff.peak_hour is not None else '-'}"
    )
    if deck:
        typer.echo(f"Deck {deck}: average rating {difficulty:.2f} (lower is harder)")

    if dashboard.retention:
        typer.echo("\nRetention:")
        for point in dashboard.retention:
            typer.echo(
                f"  {point.days_since_review:>3}d  {point.retention_rate:6.1%}"
                f"  (n={point.sample_size})"
            )

    if dashboard.problem_cards:
        typer.secho(f"\nProblem cards: {len(dashboard.problem_cards)}", fg="yellow")
        for question in dashboard.problem_cards:
            typer.echo(f"  {question}")


def _heatmap_char(count: int) -> str:
    char = HEATMAP_LEVELS[0][1]
    for threshold, symbol in HEATMAP_LEVELS:
        if count >= threshold:
            char = symbol
    return char


@app.command()
def heatmap(
    days: Annotated[int | None, typer.Option(help="Days of history to show.")] = None,
    data_dir: Annotated[
        Path | None, typer.Option(help="Where session history is stored.")
    ] = None,
):
    """Print a week-by-week activity heatmap."""
    from senko.application.factory import get_stats_service

    config = resolve_config({"data_dir": data_dir, "heatmap_days": days})
    values = get_stats_service(config).heatmap(days_back=config.heatmap_days)

    for start in range(0, len(values), 7):
        week = values[start : start + 7]
        typer.echo(f"{week[0].date}  {''.join(_heatmap_char(v.count) for v in week)}")
    typer.echo(f"Total reviewed: {sum(v.count for v in values)}")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the read-only stats HTTP server."""
    import uvicorn

    config = resolve_config({"host": host, "port": port})
    uvicorn.run("senko.server:app", host=config.host, port=config.port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
