from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import BinaryIO

from changecheck.errors import SnapshotFormatError


_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")

U32_MAX = 0xFFFFFFFF
U64_MAX = 0xFFFFFFFFFFFFFFFF
MAX_STRING_BYTES = 1 << 16


def make_magic(tag: bytes) -> int:
    """Pack a four-byte tag such as ``b"dfc1"`` into a little-endian u32."""
    if len(tag) != 4:
        raise ValueError(f"magic tag must be 4 bytes, got {tag!r}")
    return _U32.unpack(tag)[0]


class BinaryWriter:
    def __init__(self, fh: BinaryIO) -> None:
        self._fh = fh

    def write_u32(self, value: int) -> None:
        self._fh.write(_U32.pack(min(value, U32_MAX)))

    def write_u64(self, value: int) -> None:
        self._fh.write(_U64.pack(min(value, U64_MAX)))

    # size_t is stored as 64 bits regardless of the host.
    write_size = write_u64

    def write_string(self, value: str) -> None:
        data = os.fsencode(value)
        self.write_size(len(data))
        self._fh.write(data)


class BinaryReader:
    def __init__(self, fh: BinaryIO) -> None:
        self._fh = fh

    def _read_exact(self, size: int) -> bytes:
        data = self._fh.read(size)
        if len(data) != size:
            raise SnapshotFormatError(f"unexpected end of snapshot (wanted {size} bytes, got {len(data)})")
        return data

    def read_u32(self) -> int:
        return _U32.unpack(self._read_exact(_U32.size))[0]

    def read_u64(self) -> int:
        return _U64.unpack(self._read_exact(_U64.size))[0]

    read_size = read_u64

    def read_string(self) -> str:
        length = self.read_size()
        if length == 0:
            return ""
        if length > MAX_STRING_BYTES:
            raise SnapshotFormatError(f"string length {length} is larger than any path")
        return os.fsdecode(self._read_exact(length))

    def expect_magic(self, magic: int) -> None:
        try:
            found = self.read_u32()
        except SnapshotFormatError:
            raise SnapshotFormatError("snapshot has no magic tag") from None
        if found != magic:
            raise SnapshotFormatError(f"snapshot magic {found:#010x} does not match {magic:#010x}")


def open_snapshot_for_read(db_path: Path) -> BinaryIO | None:
    """Open a snapshot file, or return ``None`` when it does not exist yet."""
    try:
        return db_path.open("rb")
    except FileNotFoundError:
        return None


def open_snapshot_for_write(db_path: Path) -> BinaryIO:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path.open("wb")
