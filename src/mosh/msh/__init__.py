from .common import MeshHeader, MshVersion, Storage, parse_header
from .main import parse, read, read_buffer, read_header, write, write_buffer

__all__ = [
    "MeshHeader",
    "MshVersion",
    "Storage",
    "parse",
    "parse_header",
    "read",
    "read_buffer",
    "read_header",
    "write",
    "write_buffer",
]
