"""Interactive prompts."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from ..utils.errors import PromptCancelledError, ValidationError


@dataclass
class SelectItem:
    name: str
    description: Optional[str] = None


class Prompter(ABC):
    """Resolves values the user left out on the command line."""

    @abstractmethod
    def select(self, question: str, options: List[SelectItem]) -> SelectItem:
        """Pick a single option."""
        pass

    @abstractmethod
    def text(self, question: str) -> Optional[str]:
        """Free text input, None when left blank."""
        pass


class RichPrompter(Prompter):
    """Prompts on the terminal using rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def select(self, question: str, options: List[SelectItem]) -> SelectItem:
        if not options:
            raise ValidationError(f"Nothing to select for '{question}'")

        table = Table(show_header=False, box=None)
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Name", style="green")
        table.add_column("Description", style="italic")
        for index, option in enumerate(options, start=1):
            table.add_row(str(index), option.name, option.description or "")
        self.console.print(table)

        choices = [str(i) for i in range(1, len(options) + 1)]
        choices += [option.name for option in options]

        try:
            answer = Prompt.ask(
                question, console=self.console, choices=choices, show_choices=False
            )
        except (KeyboardInterrupt, EOFError) as e:
            raise PromptCancelledError() from e

        for option in options:
            if option.name == answer:
                return option
        return options[int(answer) - 1]

    def text(self, question: str) -> Optional[str]:
        try:
            answer = Prompt.ask(question, console=self.console, default="", show_default=False)
        except (KeyboardInterrupt, EOFError) as e:
            raise PromptCancelledError() from e

        return answer.strip() or None
