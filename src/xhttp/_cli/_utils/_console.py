from enum import Enum
from typing import Optional

import click


class LogLevel(Enum):
    """Prefixes and colors of the messages written to stderr."""

    WARNING = ("warning", "yellow")
    ERROR = ("error", "red")

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def color(self) -> str:
        return self.value[1]


class ConsoleLogger:
    """Writes user-facing notices to stderr, outside of the printed exchange."""

    _instance: Optional["ConsoleLogger"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "ConsoleLogger":
        return cls()

    def log(self, message: str, level: LogLevel, fg: Optional[str] = None) -> None:
        prefix = click.style(f"xhttp: {level.label}:", fg=fg or level.color, bold=True)
        click.echo(f"{prefix} {message}", err=True)

    def warning(self, message: str) -> None:
        self.log(message, LogLevel.WARNING)

    def raw(self, message: str) -> None:
        click.echo(message, err=True)

    def error(self, message: str, exit_code: int = 1) -> None:
        """Report a fatal error and stop the command with ``exit_code``."""
        self.log(message, LogLevel.ERROR)
        click.get_current_context().exit(exit_code)
