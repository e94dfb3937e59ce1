"""Line-based questions: template menu and yes/no confirmation."""

from typing import Optional, Sequence, TextIO

from rich.console import Console
from rich.markup import escape

from .templates import Template


class Prompter:
    """Ask questions on ``console``; answers come from stdin or ``stream``."""

    def __init__(self, console: Console, stream: Optional[TextIO] = None):
        self.console = console
        self.stream = stream

    def ask(self, question: str) -> str:
        if self.stream is None:
            return self.console.input(question)
        self.console.print(question, end="")
        line = self.stream.readline()
        if not line:
            raise EOFError("No more input")
        return line.rstrip("\r\n")

    def select_template(self, templates: Sequence[Template]) -> Template:
        """Show a numbered menu and keep asking until a listed number is entered."""
        self.console.print("\n📋 Select a template:\n", style="bold cyan")

        for index, template in enumerate(templates, start=1):
            self.console.print(f"  [bold]{index}.[/bold] [green]{escape(template.name)}[/green]")
            self.console.print(f"     [blue]{escape(template.description)}[/blue]")
            if template.tags:
                tag_str = " ".join(f"#{tag}" for tag in template.tags)
                self.console.print(f"     [bright_black]{escape(tag_str)}[/bright_black]")
            self.console.print()

        while True:
            answer = self.ask(f"[yellow]Enter your choice (1-{len(templates)}): [/yellow]")
            try:
                choice = int(answer.strip())
            except ValueError:
                choice = 0

            if 1 <= choice <= len(templates):
                return templates[choice - 1]

            self.console.print(
                f"❌ Invalid choice. Please enter a number between 1 and {len(templates)}",
                style="red",
            )

    def confirm(self, question: str) -> bool:
        answer = self.ask(f"[yellow]{question} (y/n): [/yellow]")
        return answer.strip().lower() in ("y", "yes")
