"""
Terminal capability probes consulted by the renderer.

The renderer only needs two answers: may it emit color/format escape sequences,
and may it emit UTF-8 box-drawing glyphs. Both are behind CapabilityProbe so the
renderer can be driven without a real terminal.

- TerminalProbe answers for a concrete stream through a rich Console: escape
  sequences need a terminal that is not 'dumb' (TERM) and not a legacy Windows
  console (rich switches modern Windows consoles to virtual-terminal mode on its
  own); glyphs need the stream encoding to be a UTF encoding.
- StaticProbe returns fixed answers (tests, forced plain/fancy output).
"""
import sys
from typing import Protocol, runtime_checkable

from rich.console import Console


@runtime_checkable
class CapabilityProbe(Protocol):
    def supports_ansi(self) -> bool: ...

    def supports_utf8(self) -> bool: ...


class TerminalProbe:
    """
    Probe the capabilities of a writable text stream (stderr by default).
    """

    def __init__(self, stream=None):
        self._console = Console(file=stream if stream is not None else sys.stderr)

    def supports_ansi(self):
        console = self._console
        return console.is_terminal and not console.is_dumb_terminal and not console.legacy_windows

    def supports_utf8(self):
        return self._console.encoding.replace("-", "").startswith("utf")

    def __repr__(self):
        return f"terminal-probe(ansi={self.supports_ansi()}, utf8={self.supports_utf8()})"


class StaticProbe:
    """
    Probe with fixed answers.
    """

    def __init__(self, ansi=False, utf8=False):
        self._ansi = bool(ansi)
        self._utf8 = bool(utf8)

    def supports_ansi(self):
        return self._ansi

    def supports_utf8(self):
        return self._utf8

    def __repr__(self):
        return f"static-probe(ansi={self._ansi}, utf8={self._utf8})"


__all__ = (
    "CapabilityProbe",
    "TerminalProbe",
    "StaticProbe",
)
