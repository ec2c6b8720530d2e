"""Tree-structured, colorized console output."""

from contextlib import contextmanager
from typing import Iterator

import click

INDENT_WIDTH = 4
LINE_WIDTH = 80
INFO_ICON = "ℹ"


class Formatter:
    """Writes indented report lines to stdout.

    A single depth counter drives indentation for every line type. Nested
    sections should use ``indented()`` so the depth is restored even when a
    section is abandoned by an exception.
    """

    def __init__(self):
        self._indent = 0

    @property
    def depth(self) -> int:
        return self._indent

    def indent(self) -> None:
        self._indent += 1

    def outdent(self) -> None:
        if self._indent > 0:
            self._indent -= 1

    @contextmanager
    def indented(self) -> Iterator["Formatter"]:
        self.indent()
        try:
            yield self
        finally:
            self.outdent()

    def _prefix(self) -> str:
        return " " * (INDENT_WIDTH * self._indent)

    def print_header(self, text: str) -> None:
        click.echo(click.style(text, fg="green"))

    def print_line(self) -> None:
        click.echo("-" * LINE_WIDTH)

    def print_success(self, text: str) -> None:
        click.echo(click.style(text, fg="green"))

    def print_error(self, text: str) -> None:
        click.echo(click.style(text, fg="red"))

    def print_text(self, text: str) -> None:
        click.echo(text)

    def print_section(self, title: str) -> None:
        click.echo(f"\n[{title}]")

    def print_resource(self, prefix: str, kind: str, name: str) -> None:
        click.echo(self._prefix() + click.style(f"{prefix} {kind}/{name}", fg="blue"))

    def print_info(self, icon: str, message: str, *args) -> None:
        text = message % args if args else message
        click.echo(self._prefix() + click.style(f"{icon or INFO_ICON} {text}", fg="cyan"))

    def print_status(self, label: str, ok: bool) -> None:
        if ok:
            line = click.style(f"✓ {label}", fg="green")
        else:
            line = click.style(f"✗ {label}", fg="red")
        click.echo(self._prefix() + line)

    def print_relation(self, kind: str, name: str, *details: str) -> None:
        prefix = self._prefix()
        click.echo(prefix + click.style(f"➜ {kind}/{name}", fg="yellow"))
        for detail in details:
            click.echo(f"{prefix}  {detail}")
