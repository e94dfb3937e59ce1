"""Project name and template descriptor validation."""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from .config import MAX_PROJECT_NAME_LENGTH, RESERVED_NAMES

PROJECT_NAME_RE = re.compile(r"[a-zA-Z0-9\-_]+")
_HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss", "ssh", "git"}


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reason: Optional[str] = None


OK = ValidationResult(True)


def validate_project_name(name: Optional[str]) -> ValidationResult:
    """Check ``name`` against the directory/package naming rules; first failure wins."""
    if not name or not name.strip():
        return ValidationResult(False, "Project name cannot be empty")

    if len(name) > MAX_PROJECT_NAME_LENGTH:
        return ValidationResult(False, f"Project name must be less than {MAX_PROJECT_NAME_LENGTH} characters")

    if name.startswith(".") or name.startswith("_"):
        return ValidationResult(False, "Project name cannot start with . or _")

    if not PROJECT_NAME_RE.fullmatch(name):
        return ValidationResult(False, "Project name can only contain letters, numbers, hyphens, and underscores")

    if name.lower() in RESERVED_NAMES:
        return ValidationResult(False, "Project name cannot be a reserved name")

    return OK


def is_valid_url(url: str) -> bool:
    """Syntactic check only: an absolute URL with a scheme and something after it."""
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    if not parts.scheme:
        return False
    if parts.scheme.lower() in _HOST_SCHEMES and not parts.hostname:
        return False
    return bool(url[len(parts.scheme) + 1:])


def validate_template(template) -> ValidationResult:
    name = getattr(template, "name", None)
    description = getattr(template, "description", None)
    repo_url = getattr(template, "repo_url", None)
    if not name or not description or not repo_url:
        return ValidationResult(False, "Template must have name, description, and repoUrl")

    if not is_valid_url(repo_url):
        return ValidationResult(False, "Template repoUrl must be a valid URL")

    return OK
