import io
import pathlib

from mosh import Dim, Mesh, MeshElt, Node, PhysicalGroup, Shape

MESHES_DIR = pathlib.Path(__file__).resolve().parent / "meshes"

empty_mesh = Mesh()

line_mesh = Mesh(
    nodes=[Node(1, 0.0, 0.0, 0.0), Node(2, 1.0, 0.0, 0.0), Node(3, 2.0, 0.0, 0.0)],
    elts=[
        MeshElt(1, Shape.LINE, [1, 2]),
        MeshElt(2, Shape.LINE, [2, 3], physical_group=5, geometry=1),
    ],
)

tri_mesh = Mesh(
    nodes=[
        Node(1, 0.0, 0.0, 0.0),
        Node(2, 1.0, 0.0, 0.0),
        Node(3, 1.0, 1.0, 0.0),
        Node(4, 0.0, 1.0, 0.0),
    ],
    elts=[
        MeshElt(1, Shape.TRIANGLE, [1, 2, 3], physical_group=1, geometry=1),
        MeshElt(2, Shape.TRIANGLE, [1, 3, 4], physical_group=1, geometry=1),
    ],
    physical_groups=[PhysicalGroup(Dim.SURFACE, 1, "plate")],
)

# non-contiguous tags, awkward coordinates and absent metadata
mixed_mesh = Mesh(
    nodes=[
        Node(10, 0.1, -2.5e-12, 1.0 / 3.0),
        Node(2, 1.0e20, 0.0, -0.0),
        Node(300, -7.25, 3.0e-300, 12345.678901234567),
        Node(4, 0.0, 0.0, 1.0),
        Node(5, 1.0, 1.0, 1.0),
    ],
    elts=[
        MeshElt(7, Shape.POINT, [10]),
        MeshElt(8, Shape.LINE, [10, 2], geometry=3),
        MeshElt(9, Shape.TETRAHEDRON, [10, 2, 300, 4], physical_group=2),
        MeshElt(11, Shape.PYRAMID, [10, 2, 300, 4, 5], physical_group=2, geometry=9),
        MeshElt(12, Shape.LINE, [4, 5], physical_group=1, geometry=1),
    ],
    physical_groups=[
        PhysicalGroup(Dim.CURVE, 1, "edge-1"),
        PhysicalGroup(Dim.VOLUME, 2, "Water cube"),
        PhysicalGroup(Dim.POINT, 3, "a point"),
    ],
)


def write_read(mesh, write, read, **kwargs):
    """Write `mesh` to an in-memory buffer and read it back."""
    buf = io.BytesIO()
    write(buf, mesh, **kwargs)
    buf.seek(0)
    return read(buf)
