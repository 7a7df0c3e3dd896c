"""
I/O for Gmsh's MSH format, cf.
<https://gmsh.info/doc/texinfo/gmsh.html#MSH-file-format>.

A file may hold several complete mesh documents back to back; reading returns
one Mesh per document. Bodies are decoded for ASCII 2.2 files only. Other
dialects are recognised from their header and rejected with
`UnsupportedDialectError`.
"""
from .._common import warn
from .._exceptions import UnsupportedDialectError, WriteError
from .._files import open_file
from .._helpers import register_format
from .._mesh import Mesh
from . import _grammar as g
from . import _msh22
from .common import MeshHeader, MshVersion, Storage, header_to_bytes, parse_header

# enough for `$MeshFormat`, the version line, the binary marker and `$EndMeshFormat`
_HEADER_LINES = 4


def _check_supported(header):
    if header.version is not MshVersion.V2_2 or header.storage is not Storage.ASCII:
        raise UnsupportedDialectError(header)


def parse(data, warnings=None):
    """
    Parses every mesh document in `data`.

    Parameters
    ----------
    data : bytes or str
        Complete file contents. `str` input is encoded as UTF-8.
    warnings : list, optional
        Receives one message per recoverable problem (count mismatches,
        dropped element tags, trailing content). Ignored when omitted.

    Returns
    -------
    list of Mesh
        The documents in input order; empty for empty input.

    Raises
    ------
    HeaderError
        If a document header is missing or malformed.
    UnsupportedDialectError
        If a header names a dialect whose body cannot be decoded.
    SectionError
        If a record inside a recognised section is malformed.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    meshes = []
    pos = 0
    while True:
        pos = g.skip_whitespace(data, pos)
        if pos >= len(data):
            break
        if meshes and not data.startswith(b"$MeshFormat", pos):
            if warnings is not None:
                lineno = data.count(b"\n", 0, pos) + 1
                warnings.append(
                    f"ignoring {len(data) - pos} bytes of trailing content at line {lineno}"
                )
            break
        header, pos = parse_header(data, pos)
        _check_supported(header)
        mesh, pos = _msh22.read_body(data, pos, warnings)
        meshes.append(mesh)
    return meshes


def _head(f):
    lines = []
    line = f.readline()
    # blank lines before `$MeshFormat` do not count against the limit
    while line and not line.strip():
        lines.append(line)
        line = f.readline()
    lines.append(line)
    lines += [f.readline() for _ in range(_HEADER_LINES - 1)]
    return b"".join(lines)


def read_header(filename):
    """Classifies a file from its first lines, without reading the body."""
    with open_file(filename, "rb") as f:
        head = _head(f)
    header, _ = parse_header(head, g.skip_whitespace(head, 0))
    return header


def read_buffer(f, warnings=None):
    """
    Reads all mesh documents from a binary buffer.

    The first lines are classified before the rest of the buffer is read, so
    unsupported files fail without loading their body. Warnings are logged
    unless a `warnings` list is passed to collect them.
    """
    head = _head(f)
    start = g.skip_whitespace(head, 0)
    if head.startswith(b"$MeshFormat", start):
        header, _ = parse_header(head, start)
        _check_supported(header)

    collected = [] if warnings is None else warnings
    meshes = parse(head + f.read(), collected)
    if warnings is None:
        for message in collected:
            warn(message)
    return meshes


def read(filename, warnings=None):
    """
    Reads a MSH file.

    Parameters
    ----------
    filename : str, pathlib.Path or binary buffer
    warnings : list, optional
        Collects warnings instead of logging them.

    Returns
    -------
    list of Mesh
    """
    with open_file(filename, "rb") as f:
        return read_buffer(f, warnings)


def write_buffer(fh, mesh, version=MshVersion.V2_2, storage=Storage.ASCII, float_fmt=".16e"):
    """
    Writes one mesh document to a binary buffer.

    Physical names are only written when the mesh has physical groups; nodes
    and elements are always written.
    """
    try:
        header = MeshHeader(MshVersion(version), Storage(storage))
    except ValueError as e:
        raise WriteError(str(e)) from e
    if header.version is MshVersion.V4_1:
        warn("MSH 4.1 entity blocks are not supported; writing 2.2 section layout")

    fh.write(header_to_bytes(header))
    if mesh.physical_groups:
        _msh22.write_physical_names(fh, mesh.physical_groups)
    _msh22.write_nodes(fh, mesh.nodes, header.storage, float_fmt)
    _msh22.write_elements(fh, mesh.elts, header.storage)


def write(filename, mesh, version=MshVersion.V2_2, storage=Storage.ASCII, float_fmt=".16e"):
    """
    Writes a MSH file.

    Parameters
    ----------
    filename : str, pathlib.Path or binary buffer
    mesh : Mesh or sequence of Mesh
        A sequence is written as concatenated documents.
    version : str or MshVersion, optional
        "2.2" (default) or "4.1".
    storage : str or Storage, optional
        "ascii" (default), "binary-le" or "binary-be".
    float_fmt : str, optional
        Format spec for ASCII coordinates (default ".16e", which round-trips
        exactly).
    """
    meshes = [mesh] if isinstance(mesh, Mesh) else list(mesh)
    with open_file(filename, "wb") as fh:
        for m in meshes:
            write_buffer(fh, m, version, storage, float_fmt)


register_format("gmsh", [".msh"], read, {"gmsh": write})
