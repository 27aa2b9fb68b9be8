"""Notification sinks for ledger action outcomes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import click

from venueledger.domain.entities import Severity


class Notifier(ABC):
    """Fire-and-forget sink for user-facing messages."""

    @abstractmethod
    def notify(self, message: str, severity: Severity) -> None:
        """Surface ``message`` to the user."""
        pass


class NullNotifier(Notifier):
    """Notifier that drops every message."""

    def notify(self, message: str, severity: Severity) -> None:
        pass


_COLORS = {
    Severity.SUCCESS: "green",
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


class ConsoleNotifier(Notifier):
    """Echo notifications to the terminal."""

    def notify(self, message: str, severity: Severity) -> None:
        click.secho(message, fg=_COLORS.get(severity), err=severity == Severity.ERROR)


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity


class MemoryNotifier(Notifier):
    """Record notifications in order of arrival."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, message: str, severity: Severity) -> None:
        self.notifications.append(Notification(message=message, severity=severity))

    def messages(self, severity: Severity | None = None) -> list[str]:
        """Return recorded messages, optionally only those of ``severity``."""
        return [
            n.message
            for n in self.notifications
            if severity is None or n.severity == severity
        ]
