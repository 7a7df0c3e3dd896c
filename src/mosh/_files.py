from contextlib import contextmanager
from pathlib import Path


def is_buffer(obj, mode):
    return ("r" in mode and hasattr(obj, "read")) or (
        "w" in mode and hasattr(obj, "write")
    )


@contextmanager
def open_file(path_or_buf, mode="r"):
    """Yield `path_or_buf` itself if it is an open buffer, else open the path."""
    if is_buffer(path_or_buf, mode):
        yield path_or_buf
    else:
        with open(Path(path_or_buf), mode) as f:
            yield f
