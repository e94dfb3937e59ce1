"""Detection of git, node and the preferred package manager."""

from dataclasses import dataclass
from typing import Optional, Protocol

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from .utils import CommandRunner


@dataclass
class PackageManager:
    name: str
    install_command: str = "install"
    run_command: str = ""
    available: bool = False

    def install_invocation(self) -> str:
        return f"{self.name} {self.install_command}"

    def run_invocation(self, script: str) -> str:
        parts = [self.name, self.run_command, script]
        return " ".join(part for part in parts if part)


def package_manager_candidates() -> list[PackageManager]:
    """Package managers in priority order, highest first."""
    return [
        PackageManager("bun"),
        PackageManager("pnpm"),
        PackageManager("yarn"),
        PackageManager("npm", run_command="run"),
    ]


@dataclass(frozen=True)
class ToolProbe:
    name: str
    available: bool
    version: Optional[str] = None


class ToolDetector(Protocol):
    def probe(self, tool: str) -> ToolProbe: ...


class CommandToolDetector:
    """Detect a tool by running ``<tool> --version``."""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    def probe(self, tool: str) -> ToolProbe:
        result = self.runner([tool, "--version"], silent=True)
        version = (result.output or "").strip().splitlines()[0] if result.success and result.output else None
        return ToolProbe(tool, result.success, version or None)


@dataclass
class ProbeResult:
    node: bool
    git: bool
    package_manager: Optional[PackageManager]
    node_version: Optional[str] = None


def probe_requirements(detector: ToolDetector) -> ProbeResult:
    """Probe git and node, then return the first available package manager."""
    node = detector.probe("node")
    git = detector.probe("git")

    selected = None
    for pm in package_manager_candidates():
        pm.available = detector.probe(pm.name).available
        if pm.available:
            selected = pm
            break

    return ProbeResult(
        node=node.available,
        git=git.available,
        package_manager=selected,
        node_version=node.version,
    )


def satisfies_node_requirement(version: Optional[str], specifier: Optional[str]) -> bool:
    """True unless both values parse and ``version`` falls outside ``specifier``."""
    if not version or not specifier:
        return True
    try:
        return Version(version.strip().lstrip("v")) in SpecifierSet(specifier)
    except (InvalidVersion, InvalidSpecifier):
        return True
