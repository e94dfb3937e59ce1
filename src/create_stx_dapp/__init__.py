#!/usr/bin/env python3
# /// script
# requires-python = ">=3.11"
# dependencies = [
#     "typer",
#     "click",
#     "rich",
#     "httpx",
#     "truststore",
#     "packaging",
# ]
# ///
"""
create-stx-dapp - Scaffold a Stacks dapp from a template

Usage:
    uvx create-stx-dapp <project-name>
    uvx create-stx-dapp --list

Or install globally:
    uv tool install create-stx-dapp
    create-stx-dapp my-dapp
    create-stx-dapp my-dapp --force
"""

from typing import Optional

import click
import typer
from rich.align import Align
from rich.text import Text
from typer.core import TyperCommand

from .config import CLI_NAME, CLI_VERSION, __version__, load_settings
from .creator import ProjectCreator
from .doctor import run_doctor
from .requirements import CommandToolDetector
from .utils import CommandRunner, Logger, handle_error, make_console

__all__ = ["__version__", "app", "main"]

BANNER = """
╔═╗╔╦╗═╗ ╦  ╔╦╗╔═╗╔═╗╔═╗
╚═╗ ║ ╔╩╦╝   ║║╠═╣╠═╝╠═╝
╚═╝ ╩ ╩ ╚═  ═╩╝╩ ╩╩  ╩
"""

TAGLINE = "Scaffold a Stacks dapp in seconds"


def show_banner(logger: Logger):
    """Display the ASCII art banner."""
    banner_lines = BANNER.strip("\n").split("\n")
    colors = ["bright_blue", "blue", "cyan"]

    styled_banner = Text()
    for i, line in enumerate(banner_lines):
        styled_banner.append(line + "\n", style=colors[i % len(colors)])

    logger.console.print(Align.center(styled_banner))
    logger.console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    logger.console.print()


class BannerCommand(TyperCommand):
    """Command that shows the banner before help and exits 1 on malformed command lines."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def format_help(self, ctx, formatter):
        show_banner(Logger(make_console(load_settings())))
        super().format_help(ctx, formatter)


app = typer.Typer(
    name=CLI_NAME,
    help="Scaffold a Stacks dapp from a template",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"{CLI_NAME} {CLI_VERSION}")
        raise typer.Exit()


@app.command(cls=BannerCommand)
def create(
    project_name: Optional[str] = typer.Argument(None, help="Name for your new project directory"),
    list_templates: bool = typer.Option(False, "--list", "-l", help="List all available templates"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing directory without prompting"),
    check: bool = typer.Option(False, "--check", help="Check required tools and template availability, then exit"),
    version: bool = typer.Option(
        False, "--version", "-V", help="Show the version and exit", callback=_version_callback, is_eager=True
    ),
):
    """
    Create a new Stacks dapp from a template.

    This command will:
    1. Check that Node.js, git and a package manager (bun, pnpm, yarn or npm) are installed
    2. Let you choose a template
    3. Clone the template into a new directory and drop its git history
    4. Rename the project in package.json
    5. Install dependencies and create an initial commit

    Examples:
        create-stx-dapp my-dapp
        create-stx-dapp --list
        create-stx-dapp my-dapp --force
    """
    settings = load_settings()
    logger = Logger(make_console(settings))
    runner = CommandRunner()
    detector = CommandToolDetector(runner)

    try:
        if check:
            show_banner(logger)
            exit_code = run_doctor(settings, logger, detector)
        else:
            creator = ProjectCreator(settings, logger, runner=runner, detector=detector)
            creator.run(project_name, force=force, list_only=list_templates)
            exit_code = 0
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        logger.warning("Cancelled")
        exit_code = 1
    except Exception as e:
        exit_code = handle_error(e, logger)

    if exit_code:
        raise typer.Exit(exit_code)


def main():
    app()


if __name__ == "__main__":
    main()
