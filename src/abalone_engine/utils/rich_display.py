"""
Rich-based console display for games played from the command line.

Provides clean, formatted output with:
- Colored hex board panels
- Per-move log lines with push/eject counts
- Search statistics
"""

import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core import BLACK, WHITE, GameState, MoveResult, in_board
from ..core.game_state import PLAYER_NAMES

console = Console()
logger = logging.getLogger(__name__)

PIECE_STYLES = {
    WHITE: ("O", "bold white"),
    BLACK: ("@", "bold magenta"),
}


class GameDisplay:
    """
    Rich-based display for a running game.

    Shows:
    - The board after each move
    - What each move did (slide, push, ejection)
    - Search value and node counts
    """

    def __init__(self, show_board: bool = True):
        """
        Initialize game display.

        Args:
            show_board: Print the board after every move
        """
        self.show_board = show_board

    def log_info(self, message: str):
        """Log info message."""
        console.print(f"[blue]ℹ[/blue] {message}")

    def log_success(self, message: str):
        """Log success message."""
        console.print(f"[green]✓[/green] {message}")

    def log_warning(self, message: str):
        """Log warning message."""
        console.print(f"[yellow]⚠[/yellow]  {message}")

    def show_header(self, title: str, radius: int, depth: int, workers: Optional[int] = None):
        """Show game header."""
        console.rule(f"[bold blue]{title}[/bold blue]")
        console.print(f"Board radius: {radius}")
        console.print(f"Search depth: {depth}")
        if workers:
            console.print(f"Workers: {workers}")
        console.print()

    def render_board(self, state: GameState) -> Text:
        """Build a colored text rendering of the board."""
        text = Text()
        for r in range(-state.radius, state.radius + 1):
            text.append(" " * abs(r))
            for q in range(-state.radius, state.radius + 1):
                if not in_board(q, r, state.radius):
                    continue
                occupant = state.get((q, r))
                if occupant in PIECE_STYLES:
                    symbol, style = PIECE_STYLES[occupant]
                    text.append(symbol + " ", style=style)
                else:
                    text.append(". ", style="dim")
            text.append("\n")
        return text

    def show_state(self, state: GameState, title: str = ""):
        """Print the board inside a panel with the capture score."""
        if not self.show_board:
            return
        subtitle = (
            f"White {state.captured_by(WHITE)} | Black {state.captured_by(BLACK)} | "
            f"{PLAYER_NAMES[state.player]} to move"
        )
        console.print(Panel(self.render_board(state), title=title, subtitle=subtitle, expand=False))

    def show_move(self, ply: int, player: int, move, result: MoveResult, value: float, nodes: int):
        """Log a single applied move."""
        if result.ejected_count:
            effect = f"[red]ejects {result.ejected_count}[/red]"
        elif result.pushed_count:
            effect = f"[yellow]pushes {result.pushed_count}[/yellow]"
        else:
            effect = "[dim]slide[/dim]"

        self.log_info(
            f"[bold]Ply {ply}[/bold] | {PLAYER_NAMES[player]}: {move} | {effect} | "
            f"value {value:.1f} | {nodes:,} nodes"
        )

    def show_summary(self, state: GameState, plies: int, total_nodes: int) -> Table:
        """Print end-of-game statistics."""
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Plies", f"{plies}")
        table.add_row("White captured", f"{state.captured_by(WHITE)}")
        table.add_row("Black captured", f"{state.captured_by(BLACK)}")
        table.add_row("Pieces on board", f"{state.pieces_on_board}")
        table.add_row("Nodes searched", f"[bold]{total_nodes:,}[/bold]")

        console.print(table)
        return table


def setup_rich_logging(level: str = "INFO"):
    """Configure logging to work nicely with rich console."""
    from rich.logging import RichHandler

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add rich handler
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )
