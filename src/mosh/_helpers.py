from pathlib import Path

from ._common import warn
from ._exceptions import ReadError, WriteError
from ._files import is_buffer

extension_to_filetypes = {}
reader_map = {}
_writer_map = {}


def register_format(format_name, extensions, reader, writer_map):
    for ext in extensions:
        if ext not in extension_to_filetypes:
            extension_to_filetypes[ext] = []
        extension_to_filetypes[ext].append(format_name)

    if reader is not None:
        reader_map[format_name] = reader

    _writer_map.update(writer_map)


def _filetypes_from_path(path):
    ext = ""
    out = []
    for suffix in reversed(path.suffixes):
        ext = (suffix + ext).lower()
        try:
            out += extension_to_filetypes[ext]
        except KeyError:
            pass

    if not out:
        raise ReadError(f"Could not deduce file format from path '{path}'.")
    return out


def read(filename, file_format=None, **kwargs):
    """
    Reads all mesh documents from a file.

    Parameters
    ----------
    filename : str, pathlib.Path or file-like
        The file to read. Buffers need an explicit `file_format`.
    file_format : str, optional
        Format name; deduced from the extension when omitted.

    Returns
    -------
    list of Mesh
        One Mesh per document found in the file, in file order.
    """
    if is_buffer(filename, "r"):
        if file_format is None:
            raise ReadError("File format must be given if buffer is used")
        return reader_map[file_format](filename, **kwargs)

    path = Path(filename)
    if not path.exists():
        raise ReadError(f"File {path} not found.")

    possible_file_formats = (
        [file_format] if file_format is not None else _filetypes_from_path(path)
    )

    for fmt in possible_file_formats:
        if fmt not in reader_map:
            raise ReadError(f"Unknown file format '{fmt}' of '{path}'.")
        try:
            return reader_map[fmt](path, **kwargs)
        except ReadError as e:
            if len(possible_file_formats) == 1:
                raise
            warn(f"Reading '{path}' as {fmt} failed: {e}")

    raise ReadError(f"Couldn't read file {path} as any of {possible_file_formats}")


def write(filename, mesh, file_format=None, **kwargs):
    """Writes one mesh, or a sequence of meshes, to a file."""
    if is_buffer(filename, "w"):
        if file_format is None:
            raise WriteError("File format must be supplied if `filename` is a buffer")
    else:
        path = Path(filename)
        if file_format is None:
            try:
                file_format = _filetypes_from_path(path)[0]
            except ReadError as e:
                raise WriteError(str(e)) from e
        filename = path

    try:
        writer = _writer_map[file_format]
    except KeyError:
        formats = sorted(_writer_map)
        raise WriteError(f"Unknown format '{file_format}'. Pick one of {formats}")

    return writer(filename, mesh, **kwargs)
