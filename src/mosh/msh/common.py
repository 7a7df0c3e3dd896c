"""
MSH header block: `$MeshFormat` ... `$EndMeshFormat`.

The header decides the format version, text or binary storage and, for
binary files, the byte order. Only little-endian binary files are accepted;
a big-endian marker is rejected explicitly instead of being misread.
"""
import re
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .._exceptions import (
    BigEndianError,
    CorruptEndiannessError,
    GrammarError,
    HeaderError,
)
from . import _grammar as g


class MshVersion(Enum):
    V2_2 = "2.2"
    V4_1 = "4.1"


class Storage(Enum):
    ASCII = "ascii"
    BINARY_LE = "binary-le"
    BINARY_BE = "binary-be"

    @property
    def is_binary(self):
        return self is not Storage.ASCII

    @property
    def byteorder(self):
        """numpy byte order prefix for binary storage."""
        return ">" if self is Storage.BINARY_BE else "<"


@dataclass(frozen=True)
class MeshHeader:
    version: MshVersion
    storage: Storage
    size_t: int = 8


_version = re.compile(rb"2\.2|4\.1")
_storage_flag = re.compile(rb"[01]")
_size_t_flag = re.compile(rb"[48]")

_LE_ONE = np.array([1], dtype="<i4").tobytes()
_BE_ONE = np.array([1], dtype=">i4").tobytes()


def _token(pattern, what, buf, pos):
    m = pattern.match(buf, pos)
    if m is None:
        raise g.fail(f"unsupported {what}", buf, pos)
    return m.group(), m.end()


def _endianness(buf, pos):
    sentinel = buf[pos : pos + 4]
    if sentinel == _LE_ONE:
        return Storage.BINARY_LE, pos + 4
    if sentinel == _BE_ONE:
        raise BigEndianError(
            "big-endian binary MSH files are not supported",
            pos,
            buf.count(b"\n", 0, pos) + 1,
            sentinel,
        )
    raise CorruptEndiannessError(
        f"corrupt endianness marker {sentinel!r}",
        pos,
        buf.count(b"\n", 0, pos) + 1,
        sentinel,
    )


def parse_header(buf, pos=0):
    """
    Parses a `$MeshFormat` block starting at `pos`.

    Parameters
    ----------
    buf : bytes
        Input holding at least the complete header block.
    pos : int, optional
        Offset of the `$MeshFormat` tag.

    Returns
    -------
    (MeshHeader, int)
        The header and the offset just past the `$EndMeshFormat` line.

    Raises
    ------
    HeaderError
        If the block is missing or malformed. `BigEndianError` and
        `CorruptEndiannessError` refine it for the binary marker.
    """
    try:
        pos = g.tag_line(buf, pos, b"$MeshFormat")
        version, pos = _token(_version, "format version", buf, pos)
        pos = g.hspace1(buf, pos)
        flag, pos = _token(_storage_flag, "storage flag", buf, pos)
        pos = g.hspace1(buf, pos)
        size_t, pos = _token(_size_t_flag, "size_t width", buf, pos)
        pos = g.end_of_line(buf, pos)
        storage = Storage.ASCII
        if flag == b"1":
            storage, pos = _endianness(buf, pos)
            pos = g.end_of_line(buf, pos)
        pos = g.tag_line(buf, pos, b"$EndMeshFormat")
    except HeaderError:
        raise
    except GrammarError as e:
        raise HeaderError.from_error(e, f"invalid MSH header: {e.message}") from e
    header = MeshHeader(MshVersion(version.decode()), storage, int(size_t))
    return header, pos


def header_to_bytes(header):
    flag = "1" if header.storage.is_binary else "0"
    out = f"$MeshFormat\n{header.version.value} {flag} 8\n".encode()
    if header.storage.is_binary:
        sentinel = np.array([1], dtype=f"{header.storage.byteorder}i4")
        out += sentinel.tobytes() + b"\n"
    return out + b"$EndMeshFormat\n"
