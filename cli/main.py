"""Poker Tracker CLI - Typer-based command line interface."""

from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from poker_tracker import config

app = typer.Typer(
    name="poker-tracker",
    help="Track poker sessions and hands",
    no_args_is_help=True,
)
console = Console()

state = {"db_path": None}


@app.callback()
def main(
    db: Optional[Path] = typer.Option(None, "--db", envvar="POKER_TRACKER_DB_PATH",
                                      help="Path to the database file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stdout"),
):
    """Track poker sessions and hands."""
    state["db_path"] = db
    if verbose:
        from poker_tracker.logging import setup_logging
        setup_logging(config.LOG_DIR, config.LOG_LEVEL)


def _get_tracker():
    from poker_tracker.errors import InitializationError
    from poker_tracker.tracker import PokerTracker
    try:
        return PokerTracker(state["db_path"])
    except InitializationError as e:
        console.print(f"[red]Could not open database:[/red] {e}")
        raise typer.Exit(1)


def _fail(message: str):
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _parse_cards(text: str) -> List:
    from poker_tracker.models import Card
    try:
        return [Card.parse(part) for part in text.replace(",", " ").split()]
    except ValueError as e:
        _fail(f"Invalid card: {e}")


@app.command()
def sessions():
    """List all sessions, most recent first."""
    from poker_tracker.formatters.table import TableFormatter

    with _get_tracker() as tracker:
        TableFormatter(console).print_sessions(tracker.sessions)
        if tracker.skipped_rows:
            console.print(f"[yellow]{len(tracker.skipped_rows)} unreadable rows skipped.[/yellow]")


@app.command()
def new_session(
    location: str = typer.Option(config.DEFAULT_LOCATION, help="Where the session is played"),
    blinds: str = typer.Option(config.DEFAULT_BLINDS, help="Blinds, e.g. 5/10"),
    currency: str = typer.Option(config.DEFAULT_CURRENCY),
    table_size: int = typer.Option(config.DEFAULT_TABLE_SIZE, "--table-size"),
    stack: float = typer.Option(config.DEFAULT_EFFECTIVE_STACK, "--stack", help="Effective stack"),
    buy_in: float = typer.Option(0.0, "--buy-in"),
    tag: str = typer.Option("None", help="Tag color"),
):
    """Start a new active session."""
    from poker_tracker.errors import PersistenceError
    from poker_tracker.models import PokerSession, SessionTag

    try:
        session_tag = SessionTag(tag.capitalize())
    except ValueError:
        _fail(f"Unknown tag: {tag}. Valid tags: {', '.join(t.value for t in SessionTag)}")

    try:
        session = PokerSession(
            location=location, blinds=blinds, currency=currency,
            table_size=table_size, effective_stack=stack,
            session_tag=session_tag, buy_in=buy_in, is_active=True,
        )
    except ValueError as e:
        _fail(str(e))

    with _get_tracker() as tracker:
        try:
            tracker.create_session(session)
        except PersistenceError as e:
            _fail(f"Could not create session: {e}")

    console.print("[green]Session started.[/green]")
    console.print(f"Session ID: [cyan]{session.id}[/cyan]")


@app.command()
def end_session(
    session_id: str = typer.Argument(..., help="Session ID"),
    cash_out: float = typer.Option(..., "--cash-out", help="Amount cashed out"),
):
    """Record the cash-out and mark a session inactive."""
    from poker_tracker.errors import PersistenceError

    with _get_tracker() as tracker:
        session = tracker.cache.get_session(session_id)
        if session is None:
            _fail(f"Session {session_id} not found.")
        try:
            updated = tracker.update_session(replace(session, cash_out=cash_out, is_active=False))
        except (ValueError, PersistenceError) as e:
            _fail(f"Could not update session: {e}")

    color = "green" if updated.profit >= 0 else "red"
    console.print(f"Session closed. Profit: [{color}]${updated.profit:+.2f}[/{color}]")


@app.command()
def delete_session(session_id: str = typer.Argument(..., help="Session ID")):
    """Delete a session. Its hands are kept."""
    from poker_tracker.errors import PersistenceError

    with _get_tracker() as tracker:
        try:
            removed = tracker.delete_session(session_id)
        except PersistenceError as e:
            _fail(f"Could not delete session: {e}")
    if not removed:
        console.print(f"[yellow]No session {session_id}.[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted session {session_id}.[/green]")


@app.command()
def record_hand(
    session_id: str = typer.Argument(..., help="Session the hand was played in"),
    position: str = typer.Option(..., "--position", "-p", help="UTG, UTG+1, MP, CO, BTN, SB or BB"),
    hole: str = typer.Option("", "--hole", help="Hole cards, e.g. 'As Kh'"),
    board: str = typer.Option("", "--board", help="Board cards, e.g. 'Ac Kd Qs'"),
    actions: str = typer.Option("", "--actions", help="Comma separated, e.g. raise,call"),
    result: str = typer.Option("Fold", "--result", "-r", help="Fold, Win, Lose or Chop"),
    pot: float = typer.Option(0.0, "--pot"),
    net: float = typer.Option(0.0, "--net"),
    notes: str = typer.Option("", "--notes"),
):
    """Record a hand."""
    from poker_tracker.errors import PersistenceError
    from poker_tracker.models import HandAction, HandResult, PokerHand, Position

    try:
        pos = Position(position.upper())
    except ValueError:
        _fail(f"Unknown position: {position}. "
              f"Valid positions: {', '.join(p.value for p in Position)}")
    try:
        action_list = [HandAction.from_name(a) for a in actions.split(",") if a.strip()]
        hand_result = HandResult.from_name(result)
    except ValueError as e:
        _fail(str(e))

    try:
        hand = PokerHand(
            session_id=session_id, position=pos,
            hole_cards=_parse_cards(hole), board_cards=_parse_cards(board),
            actions=action_list, result=hand_result,
            pot_size=pot, net_result=net, notes=notes,
        )
    except ValueError as e:
        _fail(str(e))

    with _get_tracker() as tracker:
        if tracker.cache.get_session(session_id) is None:
            console.print(f"[yellow]Warning: no session {session_id}; "
                          f"recording the hand anyway.[/yellow]")
        try:
            tracker.create_hand(hand)
        except PersistenceError as e:
            _fail(f"Could not record hand: {e}")

    console.print(f"[green]Hand recorded.[/green] ID: [cyan]{hand.id}[/cyan]")


@app.command()
def hands(
    session: Optional[str] = typer.Option(None, "--session", "-s",
                                          help="Filter by session ID"),
    search: str = typer.Option("", "--search", help="Match notes or position"),
    limit: int = typer.Option(20, "--limit", "-n", help="Max hands to show"),
):
    """List recorded hands."""
    from poker_tracker.formatters.table import TableFormatter

    with _get_tracker() as tracker:
        all_hands = tracker.hands_for_session(session) if session else tracker.search_hands(search)
        if session and search:
            matching = {h.id for h in tracker.search_hands(search)}
            all_hands = [h for h in all_hands if h.id in matching]

    if not all_hands:
        console.print("[yellow]No hands found.[/yellow]")
        raise typer.Exit(1)

    display = all_hands[:limit]
    TableFormatter(console).print_hands_list(display)

    if len(all_hands) > limit:
        console.print(f"\n[dim]Showing {limit} of {len(all_hands)} hands. "
                      f"Use --limit to see more.[/dim]")


@app.command()
def stats():
    """Show totals, win rate and results by position."""
    from poker_tracker.analysis.summary import SummaryCalculator
    from poker_tracker.formatters.table import TableFormatter

    with _get_tracker() as tracker:
        summary = SummaryCalculator().calculate(tracker.sessions, tracker.hands)
    TableFormatter(console).print_summary(summary)


@app.command()
def seed_demo():
    """Add a sample session and hand."""
    from poker_tracker.demo import seed_demo_data

    with _get_tracker() as tracker:
        session, hand = seed_demo_data(tracker)
    console.print(f"[green]Created demo session[/green] [cyan]{session.id}[/cyan] "
                  f"with hand [cyan]{hand.id}[/cyan]")


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", help="Skip confirmation")):
    """Delete all sessions, hands and settings."""
    from poker_tracker.errors import PersistenceError

    if not yes and not typer.confirm("Delete all data?"):
        raise typer.Exit(1)
    with _get_tracker() as tracker:
        try:
            tracker.clear_all()
        except PersistenceError as e:
            _fail(f"Could not clear data: {e}")
    console.print("[green]All data cleared.[/green]")


if __name__ == "__main__":
    app()
