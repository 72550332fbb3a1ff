"""Status sink for merge runs.

Every step of a merge reports a success or failure line. The reporter keeps the
events for the final `MergeReport`, logs them, and optionally echoes them to the
terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import typer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusEvent:
    ok: bool
    message: str

    def __str__(self) -> str:
        return f"{'ok' if self.ok else 'FAILED'}: {self.message}"


@dataclass
class StatusReporter:
    echo: bool = True
    events: list[StatusEvent] = field(default_factory=list)

    def succeed(self, message: str) -> None:
        self._record(StatusEvent(ok=True, message=message))

    def fail(self, message: str) -> None:
        self._record(StatusEvent(ok=False, message=message))

    def info(self, message: str) -> None:
        logger.info(message)
        if self.echo:
            typer.echo(message)

    @property
    def failures(self) -> list[StatusEvent]:
        return [e for e in self.events if not e.ok]

    def _record(self, event: StatusEvent) -> None:
        self.events.append(event)
        if event.ok:
            logger.info(event.message)
        else:
            logger.warning(event.message)
        if self.echo:
            if event.ok:
                typer.secho(f"✔ {event.message}", fg=typer.colors.GREEN)
            else:
                typer.secho(f"✖ {event.message}", fg=typer.colors.RED, err=True)
