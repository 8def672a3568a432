"""
Renderer behavioral tests (layout, capability gating, box alignment).

Scope
- Validate the plain layout: title, description spacer, shared description column,
  required markers and the Errors block.
- Validate capability gating: boxed output only when ANSI and UTF-8 are supported
  and colors are enabled.
- Validate that escape sequences never shift columns or box borders.
- Validate that wrapped descriptions continue at the shared description column.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering goes to io.StringIO sinks; the probe is always a StaticProbe.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from cmdline import (
    BoolSlot,
    Registry,
    RenderOptions,
    StaticProbe,
    StringSlot,
    find_missing,
    render_help,
    scan,
    strip_styles,
    visual_width,
)
from cmdline.render import error_lines, help_lines


def panels(output):
    """Split boxed output into lists of raw lines, one list per panel."""
    boxes, current = [], None
    for line in output.splitlines():
        plain = strip_styles(line)
        if plain.startswith("╭"):
            current = [line]
        elif current is not None:
            current.append(line)
            if plain.startswith("╰"):
                boxes.append(current)
                current = None
    return boxes


class RenderCase(TestCase):

    def setUp(self):
        self.registry = (
            Registry()
            .declare_option("file", "Font file to load", StringSlot(), required=True)
            .declare_option("pt", "Requested point size of font", StringSlot("12"))
            .declare_flag("verbose", "Enable verbose log messages", BoolSlot())
        )
        self.sink = io.StringIO()
        self.options = RenderOptions("Cmdline utility for font loading", "fonttool", self.sink, width=80)

    def render(self, diagnostics=None, *, ansi=False, utf8=False, options=None):
        render_help(self.registry, options or self.options, diagnostics, probe=StaticProbe(ansi, utf8))
        return self.sink.getvalue()


class TestPlainLayout(RenderCase):

    def testTitleAndDescription(self):
        lines = self.render().splitlines()
        self.assertEqual(lines[0], "fonttool")
        self.assertEqual(lines[1], "  Cmdline utility for font loading")
        self.assertEqual(lines[2], "")

    def testDescriptionsShareOneColumn(self):
        lines = self.render().splitlines()[3:]
        descriptions = ["Font file to load", "Requested point size of font", "Enable verbose log messages"]
        columns = {line.index(description) for line, description in zip(lines, descriptions)}
        self.assertEqual(len(columns), 1)
        self.assertEqual(columns.pop(), len("   [-verbose]") + 2)

    def testRequiredMarker(self):
        lines = self.render().splitlines()[3:]
        self.assertTrue(lines[0].startswith(" * [--file]"))
        self.assertTrue(lines[1].startswith("   [--pt]"))
        self.assertTrue(lines[2].startswith("   [-verbose]"))

    def testNoStylesOrBorders(self):
        output = self.render()
        self.assertNotIn("\x1b", output)
        self.assertNotIn("╭", output)

    def testColorsDisabledFallsBackToPlain(self):
        output = self.render(ansi=True, utf8=True, options=self.options.replace(colors=False))
        self.assertNotIn("\x1b", output)
        self.assertNotIn("╭", output)

    def testMissingUtf8FallsBackToPlain(self):
        self.assertNotIn("╭", self.render(ansi=True, utf8=False))

    def testMissingAnsiFallsBackToPlain(self):
        self.assertNotIn("╭", self.render(ansi=False, utf8=True))

    def testNoDescriptionNoSpacer(self):
        lines = self.render(options=self.options.replace(description="")).splitlines()
        self.assertEqual(lines[0], "fonttool")
        self.assertTrue(lines[1].startswith(" * [--file]"))

    def testErrorsBlock(self):
        result = scan(self.registry, ["prog", "--pt"])
        diagnostics = find_missing(result.found, self.registry, result.faults)
        lines = self.render(diagnostics).splitlines()
        index = lines.index("Errors:")
        self.assertEqual(lines[index + 1], "  Missing: [--file]")
        self.assertEqual(lines[index + 2], "  missing value for --pt: expected '--pt VALUE'")

    def testNoErrorsBlockWithoutDiagnostics(self):
        diagnostics = find_missing(["file"], self.registry)
        self.assertNotIn("Errors", self.render(diagnostics))

    def testEscapedDescriptionDoesNotShiftColumns(self):
        self.registry.declare_flag("color", "\x1b[1;32mColored\x1b[0m description", BoolSlot())
        lines = help_lines(self.registry, self.options)
        plain = [line.plain for line in lines[2:]]
        self.assertEqual(plain[-1].index("Colored"), plain[0].index("Font file to load"))
        self.assertNotIn("\x1b", plain[-1])


class TestBoxedLayout(RenderCase):

    def testBoxedWhenCapable(self):
        output = self.render(ansi=True, utf8=True)
        self.assertIn("╭", output)
        self.assertIn("\x1b[", output)
        self.assertIn("fonttool", strip_styles(output))

    def testBordersAlign(self):
        self.registry.declare_flag("color", "\x1b[1;32mColored\x1b[0m description", BoolSlot())
        output = self.render(ansi=True, utf8=True)
        boxes = panels(output)
        self.assertEqual(len(boxes), 1)
        widths = {visual_width(line) for line in boxes[0]}
        self.assertEqual(len(widths), 1)
        raw = {len(line) for line in boxes[0]}
        self.assertGreater(len(raw), 1)

    def testErrorsBoxAligned(self):
        result = scan(self.registry, ["prog", "--verbose"])
        diagnostics = find_missing(result.found, self.registry, result.faults)
        boxes = panels(self.render(diagnostics, ansi=True, utf8=True))
        self.assertEqual(len(boxes), 2)
        self.assertIn("Errors", strip_styles(boxes[1][0]))
        for box in boxes:
            self.assertEqual(len({visual_width(line) for line in box}), 1)
        body = "\n".join(strip_styles(line) for line in boxes[1])
        self.assertIn("Missing: [--file]", body)
        self.assertIn("incorrect syntax for --verbose", body)

    def testHostStylesOverridePalette(self):
        main = __import__("__main__")
        previous = getattr(main, "__styles__", None)
        main.__styles__ = {"option-name": "bold magenta"}
        try:
            lines = help_lines(self.registry, self.options, fancy=True)
        finally:
            if previous is None:
                del main.__styles__
            else:
                main.__styles__ = previous
        spans = [str(span.style) for span in lines[2].spans]
        self.assertIn("bold magenta", spans)

    def testErrorNameOverrideReachesEveryMessage(self):
        main = __import__("__main__")
        previous = getattr(main, "__styles__", None)
        main.__styles__ = {"error-name": "bold magenta"}
        try:
            result = scan(self.registry, ["prog", "--verbose", "--pt"])
            diagnostics = find_missing(result.found, self.registry, result.faults)
            lines = error_lines(diagnostics, fancy=True)
        finally:
            if previous is None:
                del main.__styles__
            else:
                main.__styles__ = previous
        self.assertEqual(len(lines), 3)
        for line in lines:
            self.assertIn("bold magenta", [str(span.style) for span in line.spans])


class TestWrapping(RenderCase):
    """Long descriptions wrap at the console width and keep their column."""

    long = "Directory to output cached png and binary glyph to (Default '.')"

    def setUp(self):
        super().setUp()
        self.registry.declare_option("cache_dir", self.long, StringSlot("."))
        self.options = self.options.replace(width=60)

    @staticmethod
    def continuation(lines):
        """Return the cache_dir line and the lines continuing its description."""
        start = next(index for index, line in enumerate(lines) if "[--cache_dir]" in line)
        rest = []
        for line in lines[start + 1:]:
            body = line.strip("│ ")
            if not body or "[" in body or body.startswith("╰"):
                break
            rest.append(line)
        return lines[start], rest

    def testPlainContinuationAtDescriptionColumn(self):
        lines = self.render().splitlines()
        first, rest = self.continuation(lines)
        column = first.index("Directory")
        self.assertEqual(column, lines[3].index("Font file to load"))
        self.assertTrue(rest)
        for line in rest:
            self.assertEqual(len(line) - len(line.lstrip()), column)
        self.assertIn("(Default '.')", rest[-1])
        self.assertLessEqual(max(len(line) for line in lines), 60)

    def testBoxedContinuationAtDescriptionColumn(self):
        boxes = panels(self.render(ansi=True, utf8=True))
        self.assertEqual(len(boxes), 1)
        lines = [strip_styles(line) for line in boxes[0]]
        first, rest = self.continuation(lines)
        column = first.index("Directory")
        self.assertTrue(rest)
        for line in rest:
            self.assertTrue(line.startswith("│"))
            self.assertEqual(len(line) - len(line[1:].lstrip()), column)
        self.assertIn("(Default '.')", rest[-1])
        self.assertEqual(len({visual_width(line) for line in boxes[0]}), 1)
        self.assertLessEqual(visual_width(boxes[0][0]), 60)

    def testShortDescriptionsDoNotWrap(self):
        lines = help_lines(self.registry, self.options.replace(width=200))
        self.assertEqual(len(lines), 2 + len(self.registry))


if __name__ == "__main__":
    unittest.main()
