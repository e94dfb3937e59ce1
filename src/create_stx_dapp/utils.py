"""Console logging, structured errors and the blocking command runner."""

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .config import ISSUES_URL, Settings

GENERAL_ERROR = "GENERAL_ERROR"


def make_console(settings: Settings) -> Console:
    """Build the console used for all output of a run."""
    return Console(
        no_color=not settings.use_color,
        highlight=False,
        force_terminal=settings.is_tty or None,
    )


class Logger:
    """Thin wrapper over a rich Console with the CLI's message levels."""

    def __init__(self, console: Console):
        self.console = console

    def info(self, message: str = "", style: Optional[str] = None):
        self.console.print(message, style=style)

    def success(self, message: str):
        self.info(f"✅ {message}", style="green")

    def error(self, message: str):
        self.info(f"❌ {message}", style="red")

    def warning(self, message: str):
        self.info(f"⚠️  {message}", style="yellow")

    def dim(self, message: str):
        self.info(message, style="bright_black")


class CLIError(Exception):
    """A user-facing failure that ends the run with ``exit_code``."""

    def __init__(self, message: str, code: str = GENERAL_ERROR, exit_code: int = 1, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.exit_code = exit_code
        self.hint = hint


def handle_error(error: BaseException, logger: Logger) -> int:
    """Report ``error`` and return the process exit code for it."""
    if isinstance(error, CLIError):
        logger.error(error.message)
        if error.hint:
            logger.warning(f"   {error.hint}")
        if error.code != GENERAL_ERROR:
            logger.dim(f"Error code: {error.code}")
        return error.exit_code
    logger.error(f"An unexpected error occurred: {escape(str(error))}")
    logger.dim(f"If this error persists, please report it at: {ISSUES_URL}")
    return 1


@dataclass
class CommandResult:
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None


class CommandRunner:
    """Run external commands synchronously and report success instead of raising."""

    def __call__(self, cmd: Sequence[str], cwd: Optional[Path] = None, silent: bool = True) -> CommandResult:
        return self.run(cmd, cwd=cwd, silent=silent)

    def run(self, cmd: Sequence[str], cwd: Optional[Path] = None, silent: bool = True) -> CommandResult:
        try:
            if silent:
                result = subprocess.run(list(cmd), cwd=cwd, check=True, capture_output=True, encoding="utf-8", errors="replace")
                return CommandResult(success=True, output=result.stdout)
            subprocess.run(list(cmd), cwd=cwd, check=True)
            return CommandResult(success=True)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"Command failed with exit code {e.returncode}: {' '.join(cmd)}"
            return CommandResult(success=False, output=e.stdout, error=detail)
        except OSError as e:
            # Missing executable or bad cwd
            return CommandResult(success=False, error=str(e))


def sanitize_project_name(name: str) -> str:
    name = re.sub(r"[^a-z0-9\-_]", "-", name.lower())
    name = re.sub(r"^[-_]+|[-_]+$", "", name)
    return re.sub(r"[-_]+", "-", name)


def format_duration(ms: int) -> str:
    if ms < 1000:
        return f"{ms}ms"
    seconds = ms // 1000
    if seconds < 60:
        return f"{seconds}s"
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes}m {remaining}s"
