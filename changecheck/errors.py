from __future__ import annotations


class ChangeCheckError(Exception):
    """Base class for errors raised by changecheck."""


class StartupConfigError(ChangeCheckError):
    """The run cannot start: missing database path, no targets, bad config file."""


class UnknownStrategyError(StartupConfigError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown checking method name '{name}' specified.")
        self.name = name


class SnapshotFormatError(ChangeCheckError):
    """A snapshot file has the wrong magic tag or ends early."""
