from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Optional, Sequence

import pytest
from rich.console import Console

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from create_stx_dapp.config import Settings  # noqa: E402
from create_stx_dapp.requirements import ToolProbe  # noqa: E402
from create_stx_dapp.utils import CommandResult, Logger  # noqa: E402


class FakeDetector:
    def __init__(self, available: Sequence[str] = ("node", "git", "npm"), versions: Optional[dict] = None):
        self.available = set(available)
        self.versions = versions or {}
        self.probed: list[str] = []

    def probe(self, tool: str) -> ToolProbe:
        self.probed.append(tool)
        return ToolProbe(tool, tool in self.available, self.versions.get(tool))


class FakeRunner:
    """Records commands; ``git clone`` materializes ``files`` in the target."""

    def __init__(self, files: Optional[dict] = None, fail: Sequence[str] = ()):
        self.files = {".git/HEAD": "ref: refs/heads/main\n"} if files is None else files
        self.fail = tuple(fail)
        self.commands: list[tuple[list[str], Optional[Path]]] = []

    def __call__(self, cmd, cwd=None, silent=True) -> CommandResult:
        cmd = list(cmd)
        self.commands.append((cmd, cwd))
        joined = " ".join(cmd)
        if any(joined.startswith(prefix) for prefix in self.fail):
            return CommandResult(success=False, error=f"{cmd[0]} exploded")
        if cmd[:2] == ["git", "clone"]:
            target = Path(cmd[-1])
            target.mkdir(parents=True)
            for rel, content in self.files.items():
                path = target / rel
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
        return CommandResult(success=True, output="")

    def ran(self, prefix: str) -> bool:
        return any(" ".join(cmd).startswith(prefix) for cmd, _ in self.commands)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(cwd=tmp_path, is_tty=False, is_ci=True, no_color=True)


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), no_color=True, width=120)


@pytest.fixture
def logger(console: Console) -> Logger:
    return Logger(console)


def output_of(logger: Logger) -> str:
    return logger.console.file.getvalue()
