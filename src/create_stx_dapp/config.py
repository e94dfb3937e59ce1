"""Constants and the per-run configuration snapshot."""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, TextIO

__version__ = "1.0.0"

# CLI settings
CLI_NAME = "create-stx-dapp"
CLI_VERSION = __version__
ISSUES_URL = "https://github.com/leeroyanesu/create-stacks-dapp/issues"

# Git settings
DEFAULT_COMMIT_MESSAGE = f"Initial commit from {CLI_NAME}"
GIT_CLONE_DEPTH = 1

# Project validation
MAX_PROJECT_NAME_LENGTH = 214
RESERVED_NAMES = frozenset({"node_modules", "favicon.ico", "package.json", "index.js", "index.ts"})

# Manifest rewrite
MANIFEST_FILENAME = "package.json"
BASELINE_VERSION = "0.1.0"

# Spinner animation: rich's "dots" frames at 80ms
SPINNER_NAME = "dots"

# URLs
NODEJS_URL = "https://nodejs.org/"
GIT_URL = "https://git-scm.com/"

CI_ENV_VARS = ("CI", "CONTINUOUS_INTEGRATION", "BUILD_NUMBER", "RUN_ID")

# Doctor
HTTP_TIMEOUT = 10


@dataclass(frozen=True)
class Settings:
    cwd: Path
    is_tty: bool
    is_ci: bool
    no_color: bool
    github_token: Optional[str] = None

    @property
    def interactive(self) -> bool:
        return self.is_tty and not self.is_ci

    @property
    def use_color(self) -> bool:
        return self.is_tty and not self.no_color


def _github_token(environ: Mapping[str, str]) -> Optional[str]:
    """Return sanitized GitHub token or None."""
    return ((environ.get("GH_TOKEN") or environ.get("GITHUB_TOKEN") or "").strip()) or None


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    stdout: Optional[TextIO] = None,
    cwd: Optional[Path] = None,
) -> Settings:
    """Capture everything the run needs from the process environment, once."""
    environ = os.environ if environ is None else environ
    stdout = sys.stdout if stdout is None else stdout
    try:
        is_tty = stdout.isatty()
    except (AttributeError, ValueError):
        is_tty = False
    return Settings(
        cwd=Path(cwd) if cwd is not None else Path.cwd(),
        is_tty=is_tty,
        is_ci=any(environ.get(name) for name in CI_ENV_VARS),
        no_color=bool(environ.get("NO_COLOR")),
        github_token=_github_token(environ),
    )
