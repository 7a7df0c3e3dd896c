"""
In-memory mesh model shared by the MSH reader and writer.

A `Mesh` holds three ordered collections: nodes, elements and physical
groups. Tags are the integers used in the file; they are kept as read and are
neither renumbered nor checked for uniqueness.

Optional element metadata (`physical_group`, `geometry`) is `None` when the
file carries the sentinel value 0.
"""
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional

import numpy as np

MAX_TAG = 2**64 - 1


@dataclass(frozen=True)
class Node:
    tag: int
    x: float
    y: float
    z: float


class Shape(Enum):
    """Element shapes, valued by their MSH element-type label and node count."""

    LINE = (1, 2)
    TRIANGLE = (2, 3)
    QUAD = (3, 4)
    TETRAHEDRON = (4, 4)
    HEXAHEDRON = (5, 8)
    PRISM = (6, 6)
    PYRAMID = (7, 5)
    LINE3 = (8, 3)
    TRIANGLE6 = (9, 6)
    QUAD9 = (10, 9)
    TETRAHEDRON10 = (11, 10)
    HEXAHEDRON27 = (12, 27)
    PRISM18 = (13, 18)
    PYRAMID14 = (14, 14)
    POINT = (15, 1)
    QUAD8 = (16, 8)
    HEXAHEDRON20 = (17, 20)
    PRISM15 = (18, 15)
    PYRAMID13 = (19, 13)

    def __init__(self, label, arity):
        self.label = label
        self.arity = arity

    @classmethod
    def from_label(cls, label):
        """Return the shape for an MSH element-type label, or None."""
        return _shapes_by_label.get(label)


_shapes_by_label = {shape.label: shape for shape in Shape}


class Dim(IntEnum):
    """Topological dimension. `Dim(4)` raises ValueError."""

    POINT = 0
    CURVE = 1
    SURFACE = 2
    VOLUME = 3


@dataclass
class MeshElt:
    tag: int
    shape: Shape
    nodes: List[int]
    physical_group: Optional[int] = None
    geometry: Optional[int] = None

    def __post_init__(self):
        self.nodes = list(self.nodes)
        if len(self.nodes) != self.shape.arity:
            raise ValueError(
                f"{self.shape.name.lower()} element {self.tag} needs "
                f"{self.shape.arity} nodes, got {len(self.nodes)}"
            )


@dataclass
class PhysicalGroup:
    dim: Dim
    tag: int
    name: str

    def __post_init__(self):
        self.dim = Dim(self.dim)


@dataclass
class Mesh:
    nodes: List[Node] = field(default_factory=list)
    elts: List[MeshElt] = field(default_factory=list)
    physical_groups: List[PhysicalGroup] = field(default_factory=list)

    def __repr__(self):
        lines = [
            "<mosh mesh object>",
            f"  Number of nodes: {len(self.nodes)}",
            f"  Number of elements: {len(self.elts)}",
        ]
        counts = {}
        for elt in self.elts:
            counts[elt.shape] = counts.get(elt.shape, 0) + 1
        for shape, num in counts.items():
            lines.append(f"    {shape.name.lower()}: {num}")
        if self.physical_groups:
            names = ", ".join(group.name for group in self.physical_groups)
            lines.append(f"  Physical groups: {names}")
        return "\n".join(lines)

    @property
    def points(self):
        """Node coordinates as an (n, 3) float array, in node order."""
        if not self.nodes:
            return np.empty((0, 3), dtype=float)
        return np.array([(n.x, n.y, n.z) for n in self.nodes], dtype=float)

    @property
    def node_tags(self):
        return np.array([n.tag for n in self.nodes], dtype=np.uint64)

    def write(self, path_or_buf, file_format=None, **kwargs):
        # avoid circular import
        from ._helpers import write

        write(path_or_buf, self, file_format, **kwargs)
