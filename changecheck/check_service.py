from __future__ import annotations

import subprocess
from dataclasses import dataclass, field

from rich.console import Console

from changecheck.config import CheckConfig
from changecheck.diagnostics import warn
from changecheck.models import ChangeRecord
from changecheck.strategies import CheckingStrategy, create_strategy


@dataclass(slots=True)
class CheckResult:
    changed: bool
    method: str
    changes: list[ChangeRecord] = field(default_factory=list)
    command_returncode: int | None = None

    @property
    def command_ran(self) -> bool:
        return self.command_returncode is not None


def run_command(command: str, *, console: Console | None = None) -> int:
    completed = subprocess.run(command, shell=True, check=False)
    if completed.returncode != 0:
        warn(f"Command exited with status {completed.returncode}: {command}", console=console)
    return completed.returncode


def run_check(
    config: CheckConfig,
    *,
    console: Console | None = None,
    strategy: CheckingStrategy | None = None,
) -> CheckResult:
    """Load the previous snapshot, scan, and persist plus run the command on change.

    An unchanged run leaves the database untouched. Raises
    ``UnknownStrategyError`` before touching the filesystem when
    ``config.method`` names no registered strategy.
    """
    if strategy is None:
        strategy = create_strategy(config.method, config, console=console)

    strategy.read_previous_state()
    changed = strategy.check()
    result = CheckResult(changed=changed, method=config.method, changes=list(strategy.changes))
    if not changed:
        return result

    strategy.write_state()
    if config.command:
        result.command_returncode = run_command(config.command, console=console)
    return result
