from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console

from changecheck.config import CheckConfig
from changecheck.diagnostics import warn
from changecheck.models import DirectoryEntry, FileType
from changecheck.paths import normalize_for_compare


def _match_extension(name: str, extensions: tuple[str, ...]) -> bool:
    if not extensions:
        return True
    folded = name.casefold()
    return any(folded.endswith(extension) for extension in extensions)


@dataclass(slots=True)
class TargetMatcher:
    include_directories: bool = False
    extensions: tuple[str, ...] = ()
    excluded_path: str | None = None
    console: Console | None = field(default=None, compare=False)

    def matches(self, entry: DirectoryEntry) -> bool:
        if entry.file_type is FileType.ERROR:
            warn(f"Could not read metadata for '{entry.path}'.", console=self.console)
            return False
        if entry.is_directory:
            return self.include_directories
        if not _match_extension(entry.name, self.extensions):
            return False
        if self.excluded_path is not None and normalize_for_compare(entry.path) == self.excluded_path:
            return False
        return True


def build_target_matcher(config: CheckConfig, console: Console | None = None) -> TargetMatcher:
    extensions = tuple(extension.casefold() for extension in config.extensions)
    return TargetMatcher(
        include_directories=config.include_directories,
        extensions=extensions,
        excluded_path=normalize_for_compare(config.db_path),
        console=console,
    )
