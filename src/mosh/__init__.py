from . import msh
from ._exceptions import (
    BigEndianError,
    CorruptEndiannessError,
    GrammarError,
    HeaderError,
    ReadError,
    SectionError,
    UnsupportedDialectError,
    WriteError,
)
from ._helpers import read, register_format, write
from ._mesh import Dim, Mesh, MeshElt, Node, PhysicalGroup, Shape

__version__ = "0.1.0"

__all__ = [
    "msh",
    "read",
    "write",
    "register_format",
    "Mesh",
    "Node",
    "MeshElt",
    "PhysicalGroup",
    "Shape",
    "Dim",
    "ReadError",
    "WriteError",
    "GrammarError",
    "HeaderError",
    "BigEndianError",
    "CorruptEndiannessError",
    "SectionError",
    "UnsupportedDialectError",
]
