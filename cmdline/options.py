"""
Render/parse options supplied by the host application.

RenderOptions is read-only once built. Every field is validated on construction
and exposed as a property; replace(**overrides) derives a modified copy.

Fields
- description: text shown above the argument list (str or rich Text, may be empty).
- name: display name used as the help title (defaults to basename of sys.argv[0]).
- sink: writable text stream receiving help/errors (defaults to sys.stderr).
- help: render help automatically when parsing fails.
- colors: attempt boxed, colored output when the terminal supports it.
- log_command: log the resolved invocation through the 'cmdline' logger.
- width: console width in cells used to wrap descriptions (defaults to the
  terminal width rich detects for the sink).
"""
import os.path
import sys

from rich.text import Text

from .utils import *


class RenderOptions:
    __introspectable__ = (
        "description",
        "name",
        "sink",
        "help",
        "colors",
        "log_command",
        "width",
    )

    def __init__(
            self,
            description="",
            name=Unset,
            sink=Unset,
            *,
            help=True,
            colors=True,
            log_command=False,
            width=Unset
    ):
        if not isinstance(description, str | Text):
            raise TypeError("render-options 'description' must be a string")
        if not isinstance(name, str | Unset):
            raise TypeError("render-options 'name' must be a string")
        if sink is not Unset and not callable(getattr(sink, "write", None)):
            raise TypeError("render-options 'sink' must be a writable text stream")
        for field, value in (("help", help), ("colors", colors), ("log_command", log_command)):
            if not isinstance(value, bool):
                raise TypeError(f"render-options {field!r} must be a boolean")
        if width is not Unset and (not isinstance(width, int) or isinstance(width, bool) or width < 1):
            raise TypeError("render-options 'width' must be a positive integer")

        self._description = description.strip() if isinstance(description, str) else description
        self._name = coalesce(name, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "")
        self._sink = sink
        self._help = help
        self._colors = colors
        self._log_command = log_command
        self._width = width

    description = mirror("description")
    name = mirror("name")
    help = mirror("help")
    colors = mirror("colors")
    log_command = mirror("log_command")
    width = mirror("width")

    @property
    def sink(self):
        # resolved lazily so redirections of sys.stderr made after construction apply
        return coalesce(self._sink, sys.stderr)

    def replace(self, **overrides):
        """
        Return a copy with the given fields replaced.
        """
        if unknown := set(overrides) - set(self.__introspectable__):
            raise TypeError(f"render-options got unexpected fields: {', '.join(sorted(unknown))}")
        fields = {field: getattr(self, "_" + field) for field in self.__introspectable__}
        fields |= overrides
        return type(self)(
            fields["description"],
            fields["name"],
            fields["sink"],
            help=fields["help"],
            colors=fields["colors"],
            log_command=fields["log_command"],
            width=fields["width"],
        )

    __replace__ = replace

    def __repr__(self):
        return f"render-options({', '.join('%s=%r' % (field, getattr(self, field)) for field in self.__introspectable__)})"


__all__ = (
    "RenderOptions",
)
