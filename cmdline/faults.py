"""
cmdline faults (runtime parse errors and programmer misuse) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- ParseFault and subclasses: runtime-recoverable problems found while scanning
  the argument vector. They are accumulated into the diagnostics and rendered,
  never raised mid-scan.
- DeclarationError and subclasses: programmer misuse at registration time
  (duplicate names, a flag bound to a string slot, ...). Raised immediately.

UX goals
- Short, technical messages naming the offending call form and the expected
  spelling, styled through the same palette as the help output.

Integration
- The parser appends faults to Diagnostics.additional_errors; the renderer asks
  each fault for its one-line Text via __rich__().
"""
from enum import IntEnum
from types import MappingProxyType

from rich.text import Text

from .styles import palette
from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - requirements (1110x)
      • MISSING_REQUIRED
    - syntax (1111x)
      • MALFORMED_OPTION, MALFORMED_FLAG_FORM
    - registration / programmer misuse (1120x)
      • DUPLICATE_DECLARATION, BINDING_MISMATCH

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired (e.g., to shorter labels).
    """
    # --- requirement errors (11xxx) ---
    MISSING_REQUIRED            = 11101

    # --- syntax errors (11xxx) ---
    MALFORMED_OPTION            = 11111
    MALFORMED_FLAG_FORM         = 11112

    # --- registration errors (11xxx) ---
    DUPLICATE_DECLARATION       = 11201
    BINDING_MISMATCH            = 11202

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseFault(Exception):
    """
    Base type for runtime-recoverable parse problems.

    Faults carry the offending declaration and token position, know their
    FaultCode, and render themselves as a single styled line. They subclass
    Exception so hosts may raise them (or group them) if they prefer that flow,
    but the parser itself only accumulates them.
    """
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def declaration(self):
        return self.options.get("declaration")

    @property
    def index(self):
        return self.options.get("index")

    def __str__(self):
        return self.__rich__().plain

    def __rich__(self):
        return Text(self.message)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedOptionFault(ParseFault):
    """
    An option token was the last token of the vector: its value is absent.
    """
    code = FaultCode.MALFORMED_OPTION

    def __rich__(self):
        styles = palette()
        form = self.declaration.form
        return Text.assemble(
            ("missing value for ", styles["error-message"]),
            (form, styles["error-name"]),
            (": expected '", styles["error-message"]),
            (form, styles["error-name"]),
            (" VALUE'", styles["error-message"]),
        )


class MalformedFlagFormFault(ParseFault):
    """
    A flag was spelled with the option prefix ('--name' instead of '-name').
    """
    code = FaultCode.MALFORMED_FLAG_FORM

    def __rich__(self):
        styles = palette()
        return Text.assemble(
            ("incorrect syntax for ", styles["error-message"]),
            ("--" + self.declaration.name, styles["error-name"]),
            (": flags only accept '", styles["error-message"]),
            (self.declaration.form, styles["error-name"]),
            ("'", styles["error-message"]),
        )


class DeclarationError(Exception):
    """
    Base type for programmer misuse detected at registration time.
    """
    code = Unset


class DuplicateDeclarationError(DeclarationError, ValueError):
    code = FaultCode.DUPLICATE_DECLARATION


class BindingMismatchError(DeclarationError, TypeError):
    code = FaultCode.BINDING_MISMATCH


__all__ = (
    "FaultCode",
    "ParseFault",
    "MalformedOptionFault",
    "MalformedFlagFormFault",
    "DeclarationError",
    "DuplicateDeclarationError",
    "BindingMismatchError",
)
