"""Rich table formatting for terminal output."""

from typing import List

from rich.console import Console
from rich.table import Table

from poker_tracker.analysis.summary import TrackerSummary
from poker_tracker.models.action import HandResult
from poker_tracker.models.card import Card
from poker_tracker.models.hand import PokerHand
from poker_tracker.models.session import PokerSession


def _money(amount: float, signed: bool = False) -> str:
    if signed:
        return f"${amount:+.2f}"
    return f"${amount:.2f}"


def _colored(amount: float) -> str:
    color = "green" if amount >= 0 else "red"
    return f"[{color}]{_money(amount, signed=True)}[/{color}]"


def _cards(cards: List[Card]) -> str:
    """Cards as Rich markup, red suits in red."""
    if not cards:
        return "-"
    return " ".join(f"[red]{c}[/red]" if c.suit.is_red else str(c) for c in cards)


class TableFormatter:
    """Format sessions, hands and summaries as Rich tables."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def print_sessions(self, sessions: List[PokerSession]) -> None:
        if not sessions:
            self.console.print("[dim]No sessions found. Start one with new-session.[/dim]")
            return

        table = Table(title=f"Sessions ({len(sessions)})")
        table.add_column("Session ID", style="cyan", no_wrap=True)
        table.add_column("Date", style="dim")
        table.add_column("Location")
        table.add_column("Blinds")
        table.add_column("Tag")
        table.add_column("Buy-in", justify="right")
        table.add_column("Cash-out", justify="right")
        table.add_column("Profit", justify="right")
        table.add_column("Active", justify="center")

        for s in sessions:
            tag = s.session_tag
            table.add_row(
                s.id,
                s.date.strftime("%Y-%m-%d"),
                s.location,
                f"{s.blinds} {s.currency}",
                f"[{tag.color}]{tag.value}[/{tag.color}]",
                _money(s.buy_in),
                _money(s.cash_out),
                _colored(s.profit),
                "●" if s.is_active else "",
            )

        self.console.print(table)

    def print_hands_list(self, hands: List[PokerHand]) -> None:
        """Print a compact list of hands."""
        if not hands:
            self.console.print("[dim]No hands found.[/dim]")
            return

        table = Table(title=f"Hand History ({len(hands)} hands)")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Hand ID", style="cyan", no_wrap=True)
        table.add_column("Position")
        table.add_column("Cards")
        table.add_column("Board")
        table.add_column("Actions")
        table.add_column("Result")
        table.add_column("Pot", justify="right")
        table.add_column("Net", justify="right")

        for i, hand in enumerate(hands, 1):
            result = hand.result.value
            if hand.result is HandResult.WIN:
                result = f"[green]{result}[/green]"
            elif hand.result is HandResult.LOSE:
                result = f"[red]{result}[/red]"

            table.add_row(
                str(i),
                hand.id,
                hand.position.value,
                _cards(hand.hole_cards),
                _cards(hand.board_cards),
                hand.actions_str or "-",
                result,
                _money(hand.pot_size),
                _colored(hand.net_result),
            )

        self.console.print(table)

    def print_summary(self, summary: TrackerSummary) -> None:
        table = Table(title="Overview")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="green")

        table.add_row("Sessions", str(summary.total_sessions))
        table.add_row("Hands", str(summary.total_hands))
        table.add_row("Total Profit", _colored(summary.total_profit))
        table.add_row("Avg Session", _colored(summary.avg_session_profit))
        table.add_row("Win Rate", f"{summary.win_rate:.1f}%")
        self.console.print(table)

        pos_table = Table(title="By Position")
        pos_table.add_column("Position", style="cyan")
        pos_table.add_column("Group", style="dim")
        pos_table.add_column("Hands", justify="right")
        pos_table.add_column("Net", justify="right")
        for row in summary.by_position.values():
            pos_table.add_row(row.position.value, row.position.category,
                              str(row.hands), _colored(row.net_result))
        self.console.print(pos_table)

        if summary.recent_sessions:
            self.console.print()
            self.console.print("[bold]Recent sessions[/bold]")
            self.print_sessions(summary.recent_sessions)
