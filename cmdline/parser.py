"""
cmdline parser: match an argument vector against a registry and bind results.

Phases
- setup
  • an empty registry is trivially satisfied (no help flag, no rendering).
  • the built-in help flag '-h' is appended (once per registry) and rebound.
- scan
  • every token, argv[0] included, is compared by exact equality against the
    call forms '--name' and '-name'; there is no prefix matching, so '-p' never
    stands for '-pt'.
  • options take the next token as their value and consume it; a trailing
    option records a MalformedOptionFault and leaves its slot untouched.
  • flags set their slot to True; spelling a flag '--name' records a
    MalformedFlagFormFault but still sets the slot.
  • unknown tokens are ignored.
- resolve
  • matched flags waive the requirements they name (one pass, after the scan).
  • help requested → render help, return False, report nothing missing.
  • otherwise missing declarations and faults form the diagnostics; on failure
    help is rendered with them when options.help is set.

Faults are accumulated, never raised: the scan always completes.
"""
import logging
import shlex
import sys
import time
from collections import Counter

from .arguments import ArgKind, HELP
from .faults import MalformedOptionFault, MalformedFlagFormFault
from .options import RenderOptions
from .render import render_help
from .resolver import find_missing, invalidate

logger = logging.getLogger(__name__)


class Scan:
    """
    Outcome of the token scan.

    - found: Counter of matched declaration names (multiset).
    - matched: flag declarations matched, in token order (may repeat).
    - faults: syntax faults, in token order.
    """

    def __init__(self):
        self.found = Counter()
        self.matched = []
        self.faults = []

    @property
    def help(self):
        return bool(self.found[HELP])

    def __repr__(self):
        return f"scan(found={dict(self.found)!r}, faults={[str(fault) for fault in self.faults]!r})"


def scan(registry, argv, /):
    """
    Scan 'argv' against 'registry', writing matched values into their slots.

    Requirements are not touched here; see cmdline.resolver.invalidate.
    """
    forms = {}
    for declaration in registry:
        forms["--" + declaration.name] = declaration
        forms["-" + declaration.name] = declaration

    result = Scan()
    tokens = list(argv)
    index = 0
    while index < len(tokens):
        token = tokens[index]
        try:
            declaration = forms[token]
        except KeyError:
            if index:
                logger.debug("ignoring unknown token %r at position %d", token, index)
            index += 1
            continue

        result.found[declaration.name] += 1

        match declaration.kind:
            case ArgKind.OPTION:
                if index + 1 < len(tokens):
                    declaration.binding.set(tokens[index + 1])
                    # the value is consumed and never matched itself
                    index += 1
                else:
                    result.faults.append(MalformedOptionFault(
                        "missing value for %s: expected '%s VALUE'" % (declaration.form, declaration.form),
                        declaration=declaration,
                        token=token,
                        index=index,
                    ))
            case ArgKind.FLAG:
                if token.startswith("--"):
                    result.faults.append(MalformedFlagFormFault(
                        "incorrect syntax for %s: flags only accept '%s'" % (token, declaration.form),
                        declaration=declaration,
                        token=token,
                        index=index,
                    ))
                declaration.binding.set(True)
                result.matched.append(declaration)
        index += 1

    return result


def _log_command(registry, argv, options, found):
    """
    Log the invocation as resolved: program name plus matched call forms and values.
    """
    words = [options.name or (argv[0] if argv else "")]
    for declaration in registry:
        if not found[declaration.name] or declaration.name == HELP:
            continue
        words.append(declaration.form)
        if declaration.kind is ArgKind.OPTION:
            words.append(declaration.binding.value)
    logger.info("invocation: %s", shlex.join(words))


def parse(registry, argv=None, options=None, /, *, probe=None):
    """
    Parse an argument vector against a registry.

    Returns True iff every required declaration was satisfied and no token
    produced a syntax fault. On False, help and diagnostics have been rendered
    to options.sink when options.help is set ('-h' always renders help).

    parameters
    - registry: Registry
    - argv: sequence of str (defaults to sys.argv; argv[0] is the program name)
    - options: RenderOptions (defaults to RenderOptions())
    - probe: CapabilityProbe used by the renderer (defaults to a TerminalProbe
      on options.sink)
    """
    argv = sys.argv if argv is None else argv
    options = RenderOptions() if options is None else options
    if isinstance(argv, str):
        raise TypeError("parse() 'argv' must be a sequence of strings")
    argv = list(argv)
    if not all(isinstance(token, str) for token in argv):
        raise TypeError("parse() 'argv' must be a sequence of strings")
    if not isinstance(options, RenderOptions):
        raise TypeError("parse() 'options' must be render-options")

    if not len(registry):
        logger.debug("empty registry, nothing to parse")
        return True

    started = time.perf_counter()
    try:
        registry._helper()
        result = scan(registry, argv)
        invalidate(registry, result.matched)

        if options.log_command:
            _log_command(registry, argv, options, result.found)

        if result.help:
            render_help(registry, options, probe=probe)
            return False

        diagnostics = find_missing(result.found, registry, result.faults)
        if diagnostics:
            logger.debug("parse failed: %r", diagnostics)
            if options.help:
                render_help(registry, options, diagnostics, probe=probe)
            return False
        return True
    finally:
        logger.debug(
            "parsed %d tokens against %d declarations in %.3f ms",
            len(argv), len(registry), (time.perf_counter() - started) * 1000
        )


__all__ = (
    "Scan",
    "scan",
    "parse",
)
