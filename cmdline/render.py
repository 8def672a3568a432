"""
cmdline renderer: help listing and error report, boxed or plain.

Layout
- optional description (two-space indent) followed by a blank spacer line.
- one line per declaration: required marker ('*' or blank), bracketed call form
  ('[--name]' / '[-name]'), then the description. Descriptions start at one
  shared column: the widest bracketed form plus a fixed gap.
- descriptions wrap at the console width; continuation lines start at the
  description column.
- an "Errors" section when the diagnostics report missing arguments or syntax
  faults: the missing-arguments line first, then each fault on its own line.

All lines are rich Text (plain characters plus style spans), so widths are
measured in printable cells; escape sequences embedded in host strings are
decoded by textify() before measuring and never shift a column or a border.

Capability gating
- boxed: the probe reports ANSI and UTF-8 support and options.colors is set.
  Each section is a rich Panel with rounded Unicode borders, colored title and
  styled content.
- plain: anything else. Same lines, no styles, no borders.

Styles come from cmdline.styles.palette().
"""
from rich.box import ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .arguments import ArgKind
from .capabilities import TerminalProbe
from .options import RenderOptions
from .styles import palette
from .utils import *

# Gap between the widest bracketed call form and the description column.
GAP = 2


def help_lines(registry, options, /, *, fancy=False, console=None):
    """
    Build the help listing as a list of Text lines (styled only when fancy).

    Descriptions are wrapped to the console width; continuation lines are
    indented to the shared description column. When fancy, four cells are
    kept for the panel borders and padding.
    """
    console = Console(width=coalesce(options.width, None)) if console is None else console
    styles = palette()

    def styler(style):
        return styles[style] if fancy else ""

    # panel border plus one cell of padding on each side
    available = console.width - 4 * fancy

    lines = []
    if description := textify(options.description):
        description = textify(description if fancy else description.plain, styler("description"))
        for part in description.wrap(console, max(available - 2, 1)):
            lines.append(Text("  ") + part)
        lines.append(Text(""))

    columns = []
    for declaration in registry:
        name = "option-name" if declaration.kind is ArgKind.OPTION else "flag-name"
        column = Text.assemble(
            " ",
            ("*", styler("required-mark")) if declaration.required else " ",
            " ",
            ("[", styler("bracket")),
            (declaration.form, styler(name)),
            ("]", styler("bracket")),
        )
        columns.append((column, declaration))

    indent = max((visual_width(column) for column, _ in columns), default=0) + GAP
    for column, declaration in columns:
        line = column + Text(" " * (indent - visual_width(column)))
        descr = textify(declaration.description)
        wrapped = textify(descr if fancy else descr.plain, styler("argument-description")).wrap(
            console, max(available - indent, 1)
        )
        try:
            line.append_text(wrapped.pop(0))
        except IndexError:
            pass
        lines.append(line)
        for part in wrapped:
            lines.append(Text(" " * indent) + part)
    return lines


def error_lines(diagnostics, /, *, fancy=False):
    """
    Build the error report as a list of Text lines (styled only when fancy).
    """
    lines = []
    if diagnostics.missing_count:
        lines.append(Text("  ") + diagnostics.missing_arguments_message)
    for error in diagnostics.additional_errors:
        lines.append(Text("  ") + textify(error.__rich__() if hasattr(error, "__rich__") else str(error)))
    if not fancy:
        lines = [Text(line.plain) for line in lines]
    return lines


def render_help(registry, options=None, diagnostics=None, /, *, probe=None):
    """
    Write help (and the errors section, if any) for 'registry' to options.sink.

    Nothing is returned; write failures of the sink propagate unchanged.
    """
    options = RenderOptions() if options is None else options
    sink = options.sink
    probe = TerminalProbe(sink) if probe is None else probe
    fancy = options.colors and probe.supports_ansi() and probe.supports_utf8()
    styles = palette()

    # the probe is the authority on escapes; rich's own detection would drop them for TERM=dumb
    console = Console(
        file=sink,
        width=coalesce(options.width, None),
        force_terminal=fancy,
        color_system="standard" if fancy else None,
        legacy_windows=False,
        highlight=False,
        emoji=False,
        markup=False,
    )

    def styler(style):
        return styles[style] if fancy else ""

    sections = [(options.name, help_lines(registry, options, fancy=fancy, console=console), "help")]
    if diagnostics:
        sections.append(("Errors", error_lines(diagnostics, fancy=fancy), "errors"))

    if not fancy:
        for title, lines, key in sections:
            if title:
                sink.write(f"{title}:\n" if key == "errors" else f"{title}\n")
            for line in lines:
                sink.write(line.plain.rstrip() + "\n")
        if hasattr(sink, "flush"):
            sink.flush()
        return

    for title, lines, key in sections:
        console.print(Panel(
            Group(*lines),
            title=Text(title, styler(key + "-title")) if title else None,
            title_align="left",
            box=ROUNDED,
            border_style=styler(key + "-box"),
            expand=False,
        ))


__all__ = (
    "help_lines",
    "error_lines",
    "render_help",
)
