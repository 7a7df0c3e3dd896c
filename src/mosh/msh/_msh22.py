"""
I/O for the body of MSH 2.2 files, cf.
<https://gmsh.info/doc/texinfo/gmsh.html#MSH-file-format-version-2-_0028Legacy_0029>.

Reading is implemented for ASCII storage. Sections may come in any order;
sections other than `$Nodes`, `$Elements` and `$PhysicalNames` are skipped
unread. Declared record counts are advisory: a mismatch is reported as a
warning and the records actually present are kept.
"""
import itertools
import re
from enum import Enum

import numpy as np

from .._common import debug
from .._exceptions import GrammarError, SectionError, WriteError
from .._mesh import Dim, Mesh, MeshElt, Node, PhysicalGroup, Shape
from . import _grammar as g

_INT32_MAX = np.iinfo(np.int32).max

_section_open = re.compile(rb"\$([A-Za-z][A-Za-z0-9_]*)[ \t]*(?:\r?\n|\Z)")
_known_open = re.compile(
    rb"^[ \t]*\$(?:Nodes|Elements|PhysicalNames|MeshFormat)[ \t]*(?:\r?\n|\Z)",
    re.MULTILINE,
)
_dim_digit = re.compile(rb"[0-3]")


class Section(Enum):
    NODES = "Nodes"
    ELEMENTS = "Elements"
    PHYSICAL_NAMES = "PhysicalNames"
    UNKNOWN = None


# lookahead order: first match wins
_section_tags = [
    (Section.NODES, b"$Nodes"),
    (Section.ELEMENTS, b"$Elements"),
    (Section.PHYSICAL_NAMES, b"$PhysicalNames"),
]


def _meta(value):
    return value if value != 0 else None


def read_node(buf, pos, warnings=None):
    """`tag x y z` on one line."""
    pos = g.hspace(buf, pos)
    tag, pos = g.uint(buf, pos)
    coords = []
    for _ in range(3):
        pos = g.hspace1(buf, pos)
        value, pos = g.double(buf, pos)
        coords.append(value)
    pos = g.end_of_line(buf, pos)
    return Node(tag, *coords), pos


def read_element(buf, pos, warnings=None):
    """
    Decodes one element record: `tag type num_tags tag_1 .. tag_n node_1 .. node_k`.

    Only the first two metadata tags are kept, as physical group and
    elementary geometry; 0 decodes to None. Further tags (partitions, ghost
    elements, parents) are consumed and dropped with a warning. A record
    declaring fewer than two metadata tags leaves the missing ones as None.
    """
    pos = g.hspace(buf, pos)
    tag, pos = g.uint(buf, pos)
    pos = g.hspace1(buf, pos)
    label_pos = pos
    label, pos = g.uint(buf, pos)
    shape = Shape.from_label(label)
    if shape is None:
        raise g.fail(f"unknown element type {label}", buf, label_pos)

    pos = g.hspace1(buf, pos)
    num_tags, pos = g.uint(buf, pos)
    info = []
    for _ in range(num_tags):
        pos = g.hspace1(buf, pos)
        value, pos = g.uint(buf, pos)
        info.append(value)
    if num_tags > 2 and warnings is not None:
        warnings.append(
            f"element {tag}: keeping physical group and geometry, "
            f"skipping {num_tags - 2} further tags (partitions, ghost elements, ...)"
        )

    nodes = []
    for _ in range(shape.arity):
        pos = g.hspace1(buf, pos)
        value, pos = g.uint(buf, pos)
        nodes.append(value)
    pos = g.end_of_line(buf, pos)

    info += [0] * (2 - len(info))
    return MeshElt(tag, shape, nodes, _meta(info[0]), _meta(info[1])), pos


def read_physical_group(buf, pos, warnings=None):
    """`dim tag "name"` on one line; dim must be a single digit 0-3."""
    pos = g.hspace(buf, pos)
    m = _dim_digit.match(buf, pos)
    if m is None:
        raise g.fail("expected physical group dimension 0-3", buf, pos)
    dim = Dim(int(m.group()))
    pos = g.hspace1(buf, m.end())
    tag, pos = g.uint(buf, pos)
    pos = g.hspace1(buf, pos)
    name, pos = g.quoted(buf, pos)
    pos = g.end_of_line(buf, pos)
    return PhysicalGroup(dim, tag, name), pos


def _read_counted_section(buf, pos, name, read_record, warnings):
    open_tag = b"$" + name.encode()
    close_tag = b"$End" + name.encode()
    try:
        pos = g.tag_line(buf, pos, open_tag)
        num_declared, pos = g.uint(buf, g.hspace(buf, pos))
        pos = g.end_of_line(buf, pos)
        records = []
        while True:
            pos = g.hspace(buf, g.skip_blank_lines(buf, pos))
            if g.at_tag_line(buf, pos, close_tag):
                pos = g.tag_line(buf, pos, close_tag)
                break
            if pos >= len(buf):
                raise g.fail(f"unexpected end of input, missing {close_tag.decode()}", buf, pos)
            record, pos = read_record(buf, pos, warnings)
            records.append(record)
    except GrammarError as e:
        raise SectionError.from_error(e, f"${name}: {e.message}") from e

    if num_declared != len(records) and warnings is not None:
        warnings.append(
            f"${name} header declares {num_declared} records, but {len(records)} were read"
        )
    return records, pos


def read_nodes_section(buf, pos, warnings=None):
    return _read_counted_section(buf, pos, "Nodes", read_node, warnings)


def read_elements_section(buf, pos, warnings=None):
    return _read_counted_section(buf, pos, "Elements", read_element, warnings)


def read_physical_names_section(buf, pos, warnings=None):
    return _read_counted_section(
        buf, pos, "PhysicalNames", read_physical_group, warnings
    )


def _closing_line(name):
    return re.compile(
        rb"^[ \t]*\$End" + re.escape(name) + rb"[ \t]*(?:\r?\n|\Z)", re.MULTILINE
    )


def skip_unknown_section(buf, pos):
    """
    Skips `$Name` ... `$EndName` without interpreting the contents.

    Returns the section name and the offset after the closing line. Fails if
    the closing tag is missing, or if a known section opens before it.
    """
    m = _section_open.match(buf, pos)
    if m is None:
        raise SectionError.from_error(g.fail("expected section tag", buf, pos))
    name = m.group(1)
    end = _closing_line(name).search(buf, m.end())
    known = _known_open.search(buf, m.end(), end.start() if end else len(buf))
    if end is None or known is not None:
        raise SectionError.from_error(
            g.fail(f"unterminated section ${name.decode()}", buf, pos)
        )
    debug(f"skipping unknown section ${name.decode()}")
    return name.decode(), end.end()


def peek_section(buf, pos):
    """Classifies the section opening at `pos` without consuming it.

    Returns None when no section starts here, which ends the document body.
    """
    for section, tag in _section_tags:
        if g.at_tag_line(buf, pos, tag):
            return section
    m = _section_open.match(buf, pos)
    if m is None or m.group(1) == b"MeshFormat":
        return None
    name = m.group(1)
    # a stray closing tag has no `$End<name>` of its own further on
    if name.startswith(b"End") and _closing_line(name).search(buf, m.end()) is None:
        return None
    return Section.UNKNOWN


_readers = {
    Section.NODES: ("nodes", read_nodes_section),
    Section.ELEMENTS: ("elts", read_elements_section),
    Section.PHYSICAL_NAMES: ("physical_groups", read_physical_names_section),
}


def read_body(buf, pos, warnings=None):
    """
    Reads sections into a fresh Mesh until no section starts at the cursor.

    Returns
    -------
    (Mesh, int)
        The mesh and the offset of the first byte not belonging to it, e.g.
        the `$MeshFormat` of a following document.
    """
    mesh = Mesh()
    seen = set()
    while True:
        pos = g.skip_whitespace(buf, pos)
        section = peek_section(buf, pos)
        if section is None:
            break
        if section is Section.UNKNOWN:
            _, pos = skip_unknown_section(buf, pos)
            continue
        attr, reader = _readers[section]
        records, pos = reader(buf, pos, warnings)
        if section in seen and warnings is not None:
            warnings.append(f"repeated ${section.value} section replaces the earlier one")
        seen.add(section)
        setattr(mesh, attr, records)
    return mesh, pos


def _check_int32(values, what):
    values = np.asarray(values, dtype=np.uint64)
    if values.size and values.max() > _INT32_MAX:
        raise WriteError(f"{what} {int(values.max())} does not fit the binary int32 field")


def write_physical_names(fh, physical_groups):
    fh.write(b"$PhysicalNames\n")
    fh.write(f"{len(physical_groups)}\n".encode())
    for group in physical_groups:
        if any(c in group.name for c in '"\r\n'):
            raise WriteError(f"physical group name {group.name!r} cannot be quoted")
        fh.write(f'{int(group.dim)} {group.tag} "{group.name}"\n'.encode())
    fh.write(b"$EndPhysicalNames\n")


def write_nodes(fh, nodes, storage, float_fmt=".16e"):
    fh.write(b"$Nodes\n")
    fh.write(f"{len(nodes)}\n".encode())
    if storage.is_binary:
        tags = [node.tag for node in nodes]
        _check_int32(tags, "node tag")
        o = storage.byteorder
        data = np.empty(len(nodes), dtype=[("tag", f"{o}i4"), ("x", f"{o}f8", (3,))])
        if nodes:
            data["tag"] = tags
            data["x"] = [(node.x, node.y, node.z) for node in nodes]
        fh.write(data.tobytes())
        fh.write(b"\n")
    else:
        fmt = "{} " + " ".join(3 * ["{:" + float_fmt + "}"]) + "\n"
        for node in nodes:
            fh.write(fmt.format(node.tag, node.x, node.y, node.z).encode())
    fh.write(b"$EndNodes\n")


def _element_row(elt):
    return [elt.tag, elt.physical_group or 0, elt.geometry or 0, *elt.nodes]


def write_elements(fh, elts, storage):
    fh.write(b"$Elements\n")
    fh.write(f"{len(elts)}\n".encode())
    if storage.is_binary:
        dtype = np.dtype(f"{storage.byteorder}i4")
        for shape, group in itertools.groupby(elts, key=lambda elt: elt.shape):
            rows = [_element_row(elt) for elt in group]
            _check_int32(rows, "element field")
            fh.write(np.array([shape.label, len(rows), 2], dtype=dtype).tobytes())
            fh.write(np.array(rows, dtype=np.int64).astype(dtype).tobytes())
        fh.write(b"\n")
    else:
        for elt in elts:
            row = _element_row(elt)
            row.insert(1, elt.shape.label)
            row.insert(2, 2)
            fh.write((" ".join(str(v) for v in row) + "\n").encode())
    fh.write(b"$EndElements\n")
