"""
Requirement resolution and parse diagnostics.

Requirements are resolved after the whole argument vector has been scanned: a
flag matched late in the vector can still waive an argument seen (or not seen)
earlier. The invalidation edges form a small directed graph (flag -> names it
waives) that is applied in one pass, so the scan itself never touches another
declaration's 'required' flag.
"""
import logging
from collections import Counter

from rich.text import Text

from .arguments import ArgKind
from .faults import FaultCode
from .styles import palette

logger = logging.getLogger(__name__)


class Diagnostics:
    """
    Result of one parse attempt: missing required declarations plus the
    syntax faults accumulated while scanning.

    Created fresh by every parse and discarded once rendered.
    """

    def __init__(self, missing=(), additional_errors=()):
        self._missing = tuple(missing)
        self.additional_errors = list(additional_errors)

    @property
    def missing(self):
        return self._missing

    @property
    def missing_count(self):
        return len(self._missing)

    @property
    def missing_arguments_message(self):
        """
        One line of the form 'Missing: [--a, -b]' in registry order.
        """
        styles = palette()
        return Text.assemble(
            "Missing: [",
            Text(", ").join(Text(declaration.form, styles["error-name"]) for declaration in self._missing),
            "]",
        )

    @property
    def code(self):
        return FaultCode.MISSING_REQUIRED if self._missing else None

    def __bool__(self):
        return bool(self._missing or self.additional_errors)

    def __repr__(self):
        return f"diagnostics(missing={[declaration.form for declaration in self._missing]!r}, additional_errors={[str(error) for error in self.additional_errors]!r})"


def invalidate(registry, matched, /):
    """
    Waive the requirement of every declaration named by a matched flag.

    'matched' holds the flag declarations seen during the scan (duplicates are
    harmless). A flag never waives itself; unknown names are ignored.
    """
    for flag in set(matched):
        if flag.kind is not ArgKind.FLAG:
            continue
        for name in flag.invalidates:
            if name == flag.name:
                continue
            if name not in registry:
                logger.debug("flag %s invalidates undeclared argument %r", flag.form, name)
                continue
            if registry[name].required:
                logger.debug("requirement of %s waived by %s", registry[name].form, flag.form)
            registry[name].waive()


def find_missing(found, registry, /, additional_errors=()):
    """
    Collect the declarations that are still required and were never found.

    'found' is any collection of declaration names (a Counter in practice);
    the result lists missing declarations in registry order.
    """
    found = Counter(found)
    missing = [
        declaration
        for declaration in registry
        if declaration.required and not found[declaration.name]
    ]
    return Diagnostics(missing, additional_errors)


__all__ = (
    "Diagnostics",
    "invalidate",
    "find_missing",
)
