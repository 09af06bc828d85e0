"""Interactive selection of workspaces and files.

Commands that accept an omitted argument ask the user to pick one or more
options instead. The prompt lives behind an interface so command tests can
script the answers.
"""

from abc import ABC, abstractmethod

import click


class Picker(ABC):
    """Interface for choosing among options."""

    @abstractmethod
    def pick(self, prompt: str, options: list[str], *, multiple: bool) -> list[str]:
        """Return the selected options, possibly none.

        Args:
            prompt: Question shown to the user
            options: Candidates, in display order
            multiple: Whether more than one option may be chosen
        """
        ...


class ClickPicker(Picker):
    """Numbered-menu picker on top of click.prompt."""

    def pick(self, prompt: str, options: list[str], *, multiple: bool) -> list[str]:
        if not options:
            return []

        click.echo(prompt, err=True)
        for index, option in enumerate(options, start=1):
            click.echo(f"  {index}) {option}", err=True)

        hint = "numbers separated by spaces, empty for none" if multiple else "number"
        answer = click.prompt(f"Select ({hint})", default="", show_default=False, err=True)

        selected: list[str] = []
        for token in answer.replace(",", " ").split():
            if not token.isdigit() or not 1 <= int(token) <= len(options):
                raise click.BadParameter(f"'{token}' is not one of 1-{len(options)}")
            option = options[int(token) - 1]
            if option not in selected:
                selected.append(option)

        if not multiple and len(selected) > 1:
            raise click.BadParameter("Select a single option")

        return selected
