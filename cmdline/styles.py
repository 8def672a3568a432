"""
cmdline palette: style names for every piece of rendered output.

The help listing, the Errors section and the fault messages all read their
styles from palette(), so one host override reaches every one of them.

Palette keys (override through a __styles__ mapping in __main__)
- help-box, help-title, description
- required-mark, bracket, option-name, flag-name, argument-description
- errors-box, errors-title, error-name, error-message, error-code
"""
from collections import defaultdict


def palette():
    """
    Return the style mapping, merged with the host's __styles__ overrides.

    Unknown keys map to the empty style.
    """
    return defaultdict(str, {
        # === Help box ===
        "help-box": "green",
        "help-title": "bold yellow",
        "description": "underline",

        # === Arguments ===
        "required-mark": "magenta",
        "bracket": "white",
        "option-name": "bold cyan",
        "flag-name": "bold cyan",
        "argument-description": "bold bright_black",

        # === Errors box ===
        "errors-box": "red",
        "errors-title": "bold yellow",
        "error-name": "bold cyan",  # call form inside messages
        "error-message": "",  # inherits the box context color
        "error-code": "dim",
    } | getattr(__import__("__main__"), "__styles__", {}))


__all__ = (
    "palette",
)
