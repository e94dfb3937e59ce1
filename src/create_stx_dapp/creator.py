"""The project creation flow: checks, clone, manifest rewrite, install, git init."""

import json
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from rich.markup import escape

from .config import (
    BASELINE_VERSION,
    CLI_NAME,
    DEFAULT_COMMIT_MESSAGE,
    GIT_CLONE_DEPTH,
    GIT_URL,
    MANIFEST_FILENAME,
    NODEJS_URL,
    Settings,
)
from .progress import Spinner
from .prompts import Prompter
from .requirements import (
    CommandToolDetector,
    PackageManager,
    ProbeResult,
    ToolDetector,
    probe_requirements,
    satisfies_node_requirement,
)
from .templates import BUILT_IN_TEMPLATES, Template, load_templates, render_catalog
from .utils import CLIError, CommandRunner, Logger, format_duration, sanitize_project_name
from .validation import validate_project_name


@dataclass
class CreationReport:
    project_path: Optional[Path] = None
    template: Optional[Template] = None
    package_manager: Optional[PackageManager] = None
    listed: bool = False
    manifest_updated: bool = False
    dependencies_installed: bool = False
    git_initialized: bool = False


def update_package_json(project_path: Path, project_name: str, logger: Logger) -> bool:
    """Point the cloned manifest at the new project; problems are warnings only."""
    package_json_path = project_path / MANIFEST_FILENAME

    if not package_json_path.exists():
        logger.warning(f"No {MANIFEST_FILENAME} found in template")
        return False

    try:
        package_json = json.loads(package_json_path.read_text(encoding="utf-8"))
        if not isinstance(package_json, dict):
            raise ValueError(f"{MANIFEST_FILENAME} is not a JSON object")
        package_json["name"] = project_name
        package_json["version"] = BASELINE_VERSION

        # Template lifecycle hooks should not run in the new project
        scripts = package_json.get("scripts")
        if isinstance(scripts, dict):
            scripts.pop("postinstall", None)

        package_json_path.write_text(json.dumps(package_json, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to update {MANIFEST_FILENAME}: {escape(str(e))}")
        return False

    logger.success(f"Updated {MANIFEST_FILENAME}")
    return True


class ProjectCreator:
    """Runs one invocation of the scaffolding flow.

    Fatal problems raise :class:`CLIError`; everything after the clone is
    best effort and only reported.
    """

    def __init__(
        self,
        settings: Settings,
        logger: Logger,
        *,
        runner: Optional[CommandRunner] = None,
        detector: Optional[ToolDetector] = None,
        prompter: Optional[Prompter] = None,
        registry: Iterable[Template] = BUILT_IN_TEMPLATES,
    ):
        self.settings = settings
        self.logger = logger
        self.runner = runner or CommandRunner()
        self.detector = detector or CommandToolDetector(self.runner)
        self.prompter = prompter or Prompter(logger.console)
        self.registry = registry

    def spinner(self) -> Spinner:
        return Spinner(self.logger, self.settings)

    def run(self, project_name: Optional[str], *, force: bool = False, list_only: bool = False) -> CreationReport:
        started_at = time.monotonic()
        report = CreationReport()

        requirements = self.check_requirements()
        report.package_manager = requirements.package_manager

        templates = load_templates(self.registry, self.logger)

        if list_only:
            render_catalog(templates, self.logger.console)
            report.listed = True
            return report

        if not project_name:
            raise CLIError(
                "Please provide a project name",
                "MISSING_PROJECT_NAME",
                hint=f'Usage: {CLI_NAME} <project-name>  (run "{CLI_NAME} --help" for more information)',
            )

        name_validation = validate_project_name(project_name)
        if not name_validation.valid:
            suggestion = sanitize_project_name(project_name)
            hint = None
            if suggestion and suggestion != project_name and validate_project_name(suggestion).valid:
                hint = f"Try: {CLI_NAME} {suggestion}"
            raise CLIError(name_validation.reason, "INVALID_PROJECT_NAME", hint=hint)

        self.logger.info(f"\n🚀 Welcome to {CLI_NAME}!\n", style="bold cyan")

        project_path = self.settings.cwd / project_name
        report.project_path = project_path
        self.handle_existing_directory(project_path, project_name, force)

        try:
            template = self.prompter.select_template(templates)
        except EOFError:
            raise CLIError("Aborted", "NO_INPUT") from None
        report.template = template
        self.check_template_requirements(template, requirements)

        self.logger.info(f"\n✨ Creating project with: [green]{escape(template.name)}[/green]\n")

        self.clone_template(template, project_path)

        report.manifest_updated = update_package_json(project_path, project_name, self.logger)
        report.dependencies_installed = self.install_dependencies(project_path, requirements.package_manager)
        report.git_initialized = self.init_git_repo(project_path)

        self.print_summary(report, project_name, elapsed_ms=int((time.monotonic() - started_at) * 1000))
        return report

    def check_requirements(self) -> ProbeResult:
        spinner = self.spinner()
        spinner.start("Checking system requirements...")
        with spinner:
            requirements = probe_requirements(self.detector)
        spinner.stop("System requirements checked")

        if not requirements.node:
            raise CLIError("Node.js is required but not found", "MISSING_NODE", hint=f"Please install Node.js from {NODEJS_URL}")
        if not requirements.git:
            raise CLIError("Git is required but not found", "MISSING_GIT", hint=f"Please install Git from {GIT_URL}")
        if not requirements.package_manager:
            raise CLIError("No package manager found", "NO_PACKAGE_MANAGER", hint="Please install npm, yarn, pnpm, or bun")
        return requirements

    def handle_existing_directory(self, project_path: Path, project_name: str, force: bool):
        if not project_path.exists():
            return

        if not force:
            self.logger.error(f'Directory "{project_name}" already exists')
            try:
                should_continue = self.prompter.confirm("Do you want to remove it and continue?")
            except EOFError:
                should_continue = False
            if not should_continue:
                raise CLIError("Aborted", "ABORTED")

        if project_path.is_dir() and not project_path.is_symlink():
            shutil.rmtree(project_path)
        else:
            project_path.unlink()
        self.logger.success("Removed existing directory")

    def check_template_requirements(self, template: Template, requirements: ProbeResult):
        wanted = template.requirements
        if wanted is None or not wanted.node:
            return
        if not satisfies_node_requirement(requirements.node_version, wanted.node):
            self.logger.warning(
                f"{escape(template.name)} expects Node.js {escape(wanted.node)}, found {escape(str(requirements.node_version))}"
            )

    def clone_template(self, template: Template, project_path: Path):
        spinner = self.spinner()
        spinner.start("Cloning template repository...")

        with spinner:
            result = self.runner(
                ["git", "clone", "--depth", str(GIT_CLONE_DEPTH), template.repo_url, str(project_path)],
                cwd=self.settings.cwd,
                silent=True,
            )
        if not result.success:
            spinner.stop("Failed to clone repository", error=True)
            raise CLIError(
                f"Failed to clone repository: {escape(result.error or 'unknown error')}",
                "CLONE_FAILED",
                hint=f"Check if the repository exists: {escape(template.repo_url)}",
            )

        # Detach the new project from the template's history
        git_path = project_path / ".git"
        if git_path.exists():
            try:
                with spinner:
                    shutil.rmtree(git_path)
            except OSError as e:
                spinner.stop("Template cloned but failed to clean git history", error=True)
                self.logger.warning(f"   Remove {git_path} manually: {escape(str(e))}")
                return

        spinner.stop("Template cloned successfully")

    def install_dependencies(self, project_path: Path, package_manager: PackageManager) -> bool:
        self.logger.info("\n📥 Installing dependencies...")
        self.logger.dim(f"   Using {package_manager.name}...")

        spinner = self.spinner()
        spinner.start(f"Installing dependencies with {package_manager.name}...")

        with spinner:
            result = self.runner([package_manager.name, package_manager.install_command], cwd=project_path, silent=True)
        if not result.success:
            spinner.stop("Failed to install dependencies", error=True)
            self.logger.warning("   You can install them manually later")
            return False

        spinner.stop("Dependencies installed successfully")
        return True

    def init_git_repo(self, project_path: Path) -> bool:
        spinner = self.spinner()
        spinner.start("Initializing git repository...")

        commands = [
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", DEFAULT_COMMIT_MESSAGE],
        ]
        for command in commands:
            with spinner:
                result = self.runner(command, cwd=project_path, silent=True)
            if not result.success:
                spinner.stop("Failed to initialize git repository", error=True)
                self.logger.warning(f"   Failed at: {' '.join(command)}")
                return False

        spinner.stop("Git repository initialized")
        return True

    def print_summary(self, report: CreationReport, project_name: str, elapsed_ms: Optional[int] = None):
        pm = report.package_manager
        self.logger.info("\n🎉 Success! Your Stacks dapp is ready!\n", style="bold green")
        self.logger.info("Next steps:", style="cyan")
        self.logger.info(f"  [yellow]cd {project_name}[/yellow]")
        self.logger.info(f"  [yellow]{pm.run_invocation('dev')}[/yellow]")

        if not report.dependencies_installed:
            self.logger.warning("\n   Note: Dependencies failed to install. Run the following to install them manually:")
            self.logger.info(f"  [yellow]cd {project_name}[/yellow]")
            self.logger.info(f"  [yellow]{pm.install_invocation()}[/yellow]")

        self.logger.info(f"\n📚 Template: [magenta]{escape(report.template.name)}[/magenta]", style="cyan")
        if elapsed_ms is not None:
            self.logger.dim(f"Done in {format_duration(elapsed_ms)}")
        self.logger.info("Happy building! 🏗️\n", style="cyan")
