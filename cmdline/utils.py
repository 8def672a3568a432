"""
cmdline utilities shared by the registry, parser and renderer.

Overview
- Unset: falsey singleton marking an argument the caller left out, so None,
  "" or 0 stay usable as real values. coalesce() swaps it for a default.
- rename("name"): decorator fixing __name__/__qualname__ of generated functions.
- mirror("attr"): read-only property over self._attr.
- textify(fragment, style=""): str/Text to rich Text, decoding embedded escapes.
- visual_width(line) / strip_styles(line): printable cell width and plain text
  of a line, escape sequences excluded.

Quick examples
    >>> visual_width("\\033[1;36m--file\\033[0m")
    6
    >>> strip_styles("\\033[35m*\\033[0m required")
    '* required'
"""
from collections.abc import Sequence, Mapping, Set
from typing import final

from rich.text import Text


@final
class UnsetType:
    """
    Type of the Unset marker. Only one instance ever exists; constructing the
    type again hands back that instance, and copies do too.

    The type joins PEP 604 unions so annotations-style checks such as
    isinstance(name, str | Unset) work.
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(value, default=None, /):
    """
    'default' when 'value' is Unset, else 'value' (None and other falsey values included).
    """
    if value is Unset:
        return default
    return value


def rename(name, /):
    """
    Decorator giving a generated function a readable name in reprs and tracebacks.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def apply(function):
        function.__name__ = function.__qualname__ = name
        return function

    return apply


def _freeze(value):
    # containers leave through mirror() as immutable snapshots
    match value:
        case str():
            return value
        case Mapping():
            return dict(value)
        case Set():
            return frozenset(value)
        case Sequence():
            return tuple(value)
    return value


def mirror(name, /):
    """
    Property reading self._<name>. Lists, sets and mappings are returned as
    snapshots so the backing field cannot be changed through it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


def textify(fragment, style="", /):
    """
    Normalize a fragment into a rich Text.

    Strings may carry raw ANSI escape sequences (hosts sometimes pre-color their
    descriptions); those are decoded into style spans so the resulting Text holds
    only printable characters. Existing Text objects are copied so callers can
    append to the result without touching the original.
    """
    if isinstance(fragment, Text):
        text = fragment.copy()
    elif isinstance(fragment, str):
        text = Text.from_ansi(fragment) if "\x1b" in fragment else Text(fragment)
    else:
        raise TypeError("textify() argument must be a string or a Text")
    if style:
        text.stylize(style)
    return text


def visual_width(line, /):
    """
    Return the number of terminal cells a line occupies when printed.

    Color/format escape sequences are zero-width: a line wrapped in them has the
    same visual width as the same line with them stripped. Wide characters count
    as two cells, following rich's cell measurement.
    """
    return textify(line).cell_len


def strip_styles(line, /):
    """
    Return the printable text of a line with every escape sequence removed.
    """
    return textify(line).plain


# Marks a parameter the caller did not pass.
Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "textify",
    "visual_width",
    "strip_styles",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
