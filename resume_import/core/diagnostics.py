"""
Structured diagnostic events for the parsing core.

The core modules never write to a concrete logging channel. Each stage reports
what it decided through a sink: a plain callable receiving an event name and a
mapping of details. The default sink drops everything.

    sink("experience.flush", {"title": "SOFTWARE ENGINEER", "company": "ACME"})
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple


DiagnosticSink = Callable[[str, Mapping[str, Any]], None]


def null_sink(event: str, details: Mapping[str, Any]) -> None:
    return None


def resolve_sink(sink: Optional[DiagnosticSink]) -> DiagnosticSink:
    return sink if sink is not None else null_sink


class LoggingSink:
    """Render diagnostic events through a stdlib logger."""

    def __init__(self, logger: logging.Logger, level: int = logging.DEBUG):
        self.logger = logger
        self.level = level

    def __call__(self, event: str, details: Mapping[str, Any]) -> None:
        if not self.logger.isEnabledFor(self.level):
            return
        rendered = " ".join(f"{k}={v!r}" for k, v in details.items())
        self.logger.log(self.level, "%s %s", event, rendered)


class CollectingSink:
    """Keep every event in memory (handy for debugging a single parse)."""

    def __init__(self):
        self.events: List[Tuple[str, dict]] = []

    def __call__(self, event: str, details: Mapping[str, Any]) -> None:
        self.events.append((event, dict(details)))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]
