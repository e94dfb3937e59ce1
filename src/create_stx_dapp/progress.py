"""Busy indicator for long-running steps and a step tree for the doctor."""

from dataclasses import dataclass
from typing import Optional

from rich.markup import escape
from rich.status import Status
from rich.tree import Tree

from .config import SPINNER_NAME, Settings
from .utils import Logger


class Spinner:
    """Indeterminate spinner; plain start/outcome lines when not interactive."""

    def __init__(self, logger: Logger, settings: Settings):
        self.logger = logger
        self.interactive = settings.interactive
        self._status: Optional[Status] = None

    def start(self, text: str):
        if not self.interactive:
            self.logger.info(text)
            return
        self._status = self.logger.console.status(f"[cyan]{text}[/cyan]", spinner=SPINNER_NAME, spinner_style="cyan")
        self._status.start()

    def stop(self, final_text: Optional[str] = None, error: bool = False):
        if self._status is not None:
            # Stopping the live display clears the spinner line
            self._status.stop()
            self._status = None
        if final_text:
            if error:
                self.logger.error(final_text)
            else:
                self.logger.success(final_text)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        # Leave no live spinner behind when a step is interrupted
        if exc_type is not None:
            self.stop()
        return False


@dataclass
class Step:
    label: str
    status: str = "pending"
    detail: str = ""


_SYMBOLS = {
    "pending": "[green dim]○[/green dim]",
    "done": "[green]●[/green]",
    "error": "[red]●[/red]",
}


class StepTracker:
    """Named checks rendered as a tree; labels and details are plain text."""

    def __init__(self, title: str):
        self.title = title
        self.steps: dict[str, Step] = {}

    def add(self, key: str, label: str):
        self.steps.setdefault(key, Step(label))

    def complete(self, key: str, detail: str = ""):
        self._update(key, "done", detail)

    def error(self, key: str, detail: str = ""):
        self._update(key, "error", detail)

    def status_of(self, key: str) -> Optional[str]:
        step = self.steps.get(key)
        return step.status if step else None

    def _update(self, key: str, status: str, detail: str):
        step = self.steps[key]
        step.status = status
        if detail:
            step.detail = detail

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{escape(self.title)}[/cyan]", guide_style="grey50")
        for step in self.steps.values():
            label = escape(step.label)
            detail = escape(step.detail.strip())
            if step.status == "pending":
                text = f"{label} ({detail})" if detail else label
                line = f"[bright_black]{text}[/bright_black]"
            else:
                line = f"[white]{label}[/white]"
                if detail:
                    line += f" [bright_black]({detail})[/bright_black]"
            tree.add(f"{_SYMBOLS[step.status]} {line}")
        return tree
