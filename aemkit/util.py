"""Console formatting, matrix checks, path helpers and list-file parsing."""

from __future__ import annotations

import enum
from pathlib import Path

import numpy as np

_SEPARATORS = ("/", "\\")
_WHITESPACE = frozenset(" \t\r\n")
_FLT_EPSILON = float(np.finfo(np.float32).eps)


def format_indent(indent_count: int, marker: str, last_marker: str | None = None) -> str:
    """Return ``indent_count`` markers, the last one replaced by ``last_marker`` if given."""
    if indent_count <= 0:
        return ""
    if last_marker is None:
        return marker * indent_count
    return marker * (indent_count - 1) + last_marker


def format_checkbox(title: str, condition: bool) -> str:
    """Return ``title`` followed by a ticked or empty checkbox."""
    return f"{title} [{'X' if condition else ' '}]"


def is_mat4_identity(mat) -> bool:
    """Tell whether a 4x4 matrix (16 values, any shape) is the identity within float epsilon."""
    values = np.asarray(mat, dtype=np.float64).ravel()
    if values.size != 16:
        raise ValueError(f"expected 16 matrix elements, got {values.size}")
    return bool(np.all(np.abs(values - np.eye(4).ravel()) <= _FLT_EPSILON))


def _last_separator(filepath: str) -> int:
    return max(filepath.rfind(sep) for sep in _SEPARATORS)


def filename_from_filepath(filepath: str) -> str:
    """Return the part of ``filepath`` after the last slash or backslash."""
    return filepath[_last_separator(filepath) + 1:]


def path_from_filepath(filepath: str) -> str:
    """Return the part of ``filepath`` before the last slash or backslash, or ''."""
    index = _last_separator(filepath)
    return filepath[:index] if index > 0 else ""


def basename_from_filename(filename: str) -> str:
    """Return ``filename`` up to its last dot, or '' if it has none."""
    index = filename.rfind(".")
    return filename[:index] if index > 0 else ""


def extension_from_filepath(filepath: str) -> str:
    """Return the text after the last dot, or the whole path if there is no dot."""
    index = filepath.rfind(".")
    return filepath[index + 1:] if index >= 0 else filepath


def load_text_file(filepath) -> str:
    """Read a whole text file; an empty file is an error."""
    content = Path(filepath).read_bytes()
    if not content:
        raise ValueError(f"file is empty: {filepath}")
    return content.decode("utf-8")


class _ListState(enum.Enum):
    NORMAL = enum.auto()
    QUOTED = enum.auto()
    COMMENT = enum.auto()


def parse_list_file(text: str) -> list[str]:
    """Split a list file into tokens.

    Whitespace separates tokens, double quotes keep whitespace inside a token,
    and ``#`` starts a comment that runs to the end of the line.
    """
    tokens: list[str] = []
    current: list[str] = []

    def flush() -> None:
        if current:
            tokens.append("".join(current))
            current.clear()

    state = _ListState.NORMAL
    for char in text:
        if state is _ListState.QUOTED:
            if char == '"':
                flush()
                state = _ListState.NORMAL
            else:
                current.append(char)
        elif state is _ListState.COMMENT:
            if char in "\r\n":
                state = _ListState.NORMAL
        elif char in _WHITESPACE:
            flush()
        elif char == '"':
            flush()
            state = _ListState.QUOTED
        elif char == "#":
            flush()
            state = _ListState.COMMENT
        else:
            current.append(char)
    flush()
    return tokens