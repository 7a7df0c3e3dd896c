import numpy as np
import pytest

from mosh import Dim, Mesh, MeshElt, Node, PhysicalGroup, Shape

from . import helpers


def test_new_mesh_is_empty():
    mesh = Mesh()
    assert mesh.nodes == []
    assert mesh.elts == []
    assert mesh.physical_groups == []
    assert mesh.points.shape == (0, 3)


def test_shape_table():
    assert [Shape.from_label(k).arity for k in (15, 1, 2, 3, 4)] == [1, 2, 3, 4, 4]
    assert Shape.from_label(17) is Shape.HEXAHEDRON20
    assert Shape.from_label(0) is None
    assert len({shape.label for shape in Shape}) == len(Shape)


def test_element_arity_is_checked():
    with pytest.raises(ValueError):
        MeshElt(1, Shape.TRIANGLE, [1, 2])


def test_dim_bounds():
    assert Dim(3) is Dim.VOLUME
    with pytest.raises(ValueError):
        Dim(4)
    with pytest.raises(ValueError):
        PhysicalGroup(4, 1, "nope")
    assert PhysicalGroup(2, 1, "ok").dim is Dim.SURFACE


def test_node_is_immutable():
    node = Node(1, 0.0, 0.0, 0.0)
    with pytest.raises(AttributeError):
        node.x = 1.0


def test_points_and_tags():
    mesh = helpers.mixed_mesh
    assert mesh.points.shape == (5, 3)
    np.testing.assert_array_equal(mesh.node_tags, [10, 2, 300, 4, 5])


def test_repr():
    text = repr(helpers.tri_mesh)
    assert "Number of nodes: 4" in text
    assert "triangle: 2" in text
    assert "plate" in text
