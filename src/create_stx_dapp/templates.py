"""Built-in template registry."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape

from .utils import CLIError, Logger
from .validation import validate_template


@dataclass(frozen=True)
class TemplateRequirements:
    node: Optional[str] = None
    git: bool = False


@dataclass(frozen=True)
class Template:
    name: str
    description: str
    repo_url: str
    tags: tuple[str, ...] = field(default_factory=tuple)
    requirements: Optional[TemplateRequirements] = None


# Built-in templates - no external file needed
BUILT_IN_TEMPLATES: tuple[Template, ...] = (
    Template(
        name="Vite + React + Tailwind CSS",
        description="Modern stacks starter dapp with Vite, React 19, TypeScript, and Tailwind CSS",
        repo_url="https://github.com/leeroyanesu/vite-stacks-dapp-template.git",
        tags=("vite", "react", "tailwind", "typescript", "recommended"),
        requirements=TemplateRequirements(node=">=22.0.0", git=True),
    ),
)


def load_templates(registry: Iterable[Template] = BUILT_IN_TEMPLATES, logger: Optional[Logger] = None) -> list[Template]:
    """Return the registry entries that pass validation, in declaration order."""
    valid_templates = []
    for template in registry:
        validation = validate_template(template)
        if not validation.valid:
            if logger:
                logger.warning(f'Skipping invalid template "{escape(str(template.name))}": {validation.reason}')
            continue
        valid_templates.append(template)

    if not valid_templates:
        raise CLIError("No valid templates found", "NO_TEMPLATES")

    return valid_templates


def render_catalog(templates: list[Template], console: Console):
    console.print("\n📋 Available templates:\n", style="bold cyan")
    for index, template in enumerate(templates, start=1):
        console.print(f"{index}. [green]{escape(template.name)}[/green]")
        console.print(f"   {escape(template.description)}")
        if template.tags:
            console.print(f"   Tags: {escape(', '.join(template.tags))}")
        console.print()
