"""Syslog-style severities mapped onto stdlib logging levels."""

from __future__ import annotations

import logging
from enum import IntEnum


class Severity(IntEnum):
    """Totally ordered log severity.

    Values are stdlib logging levels so the enum can be handed straight to
    ``logging.Handler.setLevel`` and ``logging.Logger.log``.
    """

    DEBUG = logging.DEBUG
    INFORMATIONAL = logging.INFO
    NOTICE = 25
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
    ALERT = 60
    EMERGENCY = 70

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value: "str | int | Severity | None") -> "Severity":
        """Resolve a severity from a name, abbreviation or numeric level.

        Unknown names resolve to INFORMATIONAL.
        """
        if isinstance(value, Severity):
            return value
        if value is None:
            return cls.INFORMATIONAL
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return cls.INFORMATIONAL
        key = value.strip().lower()
        if key.isdigit():
            return cls.parse(int(key))
        return _ALIASES.get(key, cls.INFORMATIONAL)


_LABELS = {
    Severity.DEBUG: "DEBUG",
    Severity.INFORMATIONAL: "INFO",
    Severity.NOTICE: "NOTICE",
    Severity.WARNING: "WARNING",
    Severity.ERROR: "ERROR",
    Severity.CRITICAL: "CRITICAL",
    Severity.ALERT: "ALERT",
    Severity.EMERGENCY: "EMERGENCY",
}

_ALIASES = {
    "debug": Severity.DEBUG,
    "informational": Severity.INFORMATIONAL,
    "info": Severity.INFORMATIONAL,
    "notice": Severity.NOTICE,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "error": Severity.ERROR,
    "err": Severity.ERROR,
    "critical": Severity.CRITICAL,
    "crit": Severity.CRITICAL,
    "alert": Severity.ALERT,
    "emergency": Severity.EMERGENCY,
    "emerg": Severity.EMERGENCY,
}


def register_level_names() -> None:
    """Teach stdlib logging the names of the non-standard levels."""
    for severity in (Severity.NOTICE, Severity.ALERT, Severity.EMERGENCY):
        logging.addLevelName(int(severity), severity.label)


register_level_names()
