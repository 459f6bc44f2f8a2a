"""Checking strategies and the name registry used to select one.

A strategy is anything with ``read_previous_state()``, ``check()`` and
``write_state()``. ``check()`` runs once per process: it scans the targets,
compares against what ``read_previous_state()`` loaded and returns whether
anything changed. ``changes`` lists what it noticed, for reporting only.
"""

from __future__ import annotations

from typing import Callable, Protocol

from rich.console import Console

from changecheck.config import CheckConfig
from changecheck.errors import UnknownStrategyError
from changecheck.models import ChangeRecord
from changecheck.strategy_dirsummary import DirSummaryStrategy
from changecheck.strategy_fast import FastStrategy
from changecheck.strategy_filestat import FileStatStrategy


class CheckingStrategy(Protocol):
    changes: list[ChangeRecord]

    def read_previous_state(self) -> None: ...

    def check(self) -> bool: ...

    def write_state(self) -> None: ...


StrategyFactory = Callable[..., CheckingStrategy]

_registry: dict[str, StrategyFactory] = {}


def register_strategy(names: tuple[str, ...], factory: StrategyFactory) -> None:
    for name in names:
        _registry[name] = factory


def register_default_strategies() -> None:
    register_strategy(("0", "fast"), FastStrategy)
    register_strategy(("1", "dirsummary"), DirSummaryStrategy)
    # The empty name is what an omitted -m resolves to.
    register_strategy(("2", "filestat", ""), FileStatStrategy)


def registered_names() -> list[str]:
    return sorted(name for name in _registry if name)


def create_strategy(
    name: str,
    config: CheckConfig,
    *,
    console: Console | None = None,
) -> CheckingStrategy:
    factory = _registry.get(name)
    if factory is None:
        raise UnknownStrategyError(name)
    return factory(config, console=console)
