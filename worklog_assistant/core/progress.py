"""
Spinner narration for a processing cycle.

The CLI attaches a rich status to the shared `reporter` for the duration of one
user turn; the pipeline narrates extraction, normalization and each tracker
submission through it. Outside a CLI turn (library use, tests, JSON output)
every call is a no-op.
"""

from typing import Optional

from rich.console import Console
from rich.status import Status


class ProgressReporter:
    """
    Narrates pipeline phases on a rich status spinner.

    A phase started with step() is printed with a check mark once the next
    phase begins or complete_step() is called. Per-ticket submissions are
    shown as sub-steps under the current phase.
    """

    def __init__(self):
        self._status: Optional[Status] = None
        self._console: Optional[Console] = None
        self._phase: Optional[str] = None

    def initialize(self, console: Console, initial_message: str = "Starting...") -> Status:
        """
        Attach to a console for one processing cycle.

        Args:
            console: Rich console the spinner and check marks are printed to
            initial_message: Text shown until the first phase starts

        Returns:
            The status spinner, to be entered as a context manager by the caller
        """
        self._console = console
        self._status = console.status(f"[dim]{initial_message}[/dim]")
        self._phase = initial_message
        return self._status

    def reset(self) -> None:
        """Detach from the console once a processing cycle has finished."""
        self._status = None
        self._console = None
        self._phase = None

    def _print_done(self, message: str, indent: str = "") -> None:
        if self._console is not None:
            self._console.print(f"{indent}[green]✓[/green] [dim]{message}[/dim]")

    def step(self, message: str) -> None:
        """Close the running phase and start a new one."""
        if self._status is None:
            return
        if self._phase is not None:
            self._print_done(self._phase)
        self._phase = message
        self._status.update(f"[dim]{message}[/dim]")

    def complete_step(self, message: Optional[str] = None) -> None:
        """Close the running phase without starting another."""
        if self._phase is not None:
            self._print_done(message or self._phase)
            self._phase = None

    def sub_step(self, message: str, current: int = 0, total: int = 0) -> None:
        """
        Show per-ticket progress inside the running phase.

        Args:
            message: What is being submitted right now
            current: 1-based position of the entry, 0 to omit the counter
            total: Number of entries in the batch
        """
        if self._status is None:
            return
        if current > 0 and total > 0:
            message = f"{message} ({current}/{total})"
        self._status.update(f"[dim]{message}[/dim]")

    def complete_sub_step(self, message: str) -> None:
        """Print a check mark for one finished submission."""
        self._print_done(message, indent="  ")


# Shared by the CLI and the pipeline
reporter = ProgressReporter()
