import re

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def safe_file_stem(view_key: str, renderer: str | None = None, replacement_char: str = "_") -> str:
    """
    Build a filesystem-safe file stem for a view.

    Every character outside ``[A-Za-z0-9._-]`` is replaced, one for one.
    When ``renderer`` is given it is appended (``<view>-<renderer>``) so
    several renderers can share an output directory.
    """
    name = view_key if renderer is None else f"{view_key}-{renderer}"
    return _UNSAFE_FILENAME_CHARS.sub(replacement_char, name)
