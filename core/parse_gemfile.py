"""Gemfile `gem` line classification and parsing."""

import re

from .models import GemDeclaration, ManifestLine

ALT_SOURCE_KEYS = ("git", "github", "gitlab", "bitbucket", "path", "source")

_KEYS = "|".join(ALT_SOURCE_KEYS)
ALT_SOURCE_PATTERN = re.compile(rf"\b(?:{_KEYS}):(?!:)|:(?:{_KEYS})\s*=>")
KEYWORD_PATTERN = re.compile(r"gem\s")
NAME_PATTERN = re.compile(r"gem\s+(['\"])([^'\"]+)['\"]")
# Leading run of positional arguments after the name: , "x", 'y'
POSITIONAL_PATTERN = re.compile(r"\s*,\s*(['\"])([^'\"]*)\1")
VERSION_PATTERN = re.compile(r"^[~>=<]*\s*(\d+\.\d+(?:\.\d+)?(?:\.\d+)?)$")
INDENT_PATTERN = re.compile(r"^\s*")


class GemfileParser:
    """Parser for single-line Bundler `gem` declarations."""

    def is_declaration_line(self, line: str) -> bool:
        """Check whether a line starts with the `gem` keyword and is not commented out."""
        if not KEYWORD_PATTERN.match(line.lstrip()):
            return False
        if "#" in line and line.index("#") < line.index("gem"):
            return False
        return True

    def has_alt_source(self, line: str) -> bool:
        return ALT_SOURCE_PATTERN.search(line) is not None

    def positional_arguments(self, rest: str) -> list[str]:
        """Return the quoted positional arguments at the start of `rest`."""
        args = []
        pos = 0
        while True:
            match = POSITIONAL_PATTERN.match(rest, pos)
            if not match:
                return args
            args.append(match.group(2))
            pos = match.end()

    def parse_line(self, line: str) -> GemDeclaration | None:
        """Parse a single Gemfile line.

        Args:
            line: Raw line text

        Returns:
            GemDeclaration, or None if the line does not declare a gem
        """
        if not self.is_declaration_line(line):
            return None

        match = NAME_PATTERN.match(line.lstrip())
        if not match:
            return None

        name = match.group(2)
        args = self.positional_arguments(line.lstrip()[match.end():])

        # A constraint that is present but not a plain dotted version
        # (e.g. "~> 5", ">= 1.0.beta") counts as unpinned.
        current_version = None
        for arg in args:
            version_match = VERSION_PATTERN.match(arg.strip())
            if version_match:
                current_version = version_match.group(1)
                break

        return GemDeclaration(
            name=name,
            current_version=current_version,
            has_alt_source=self.has_alt_source(line),
            raw_constraint=args[0] if args else None,
        )

    def parse(self, content: str) -> list[ManifestLine]:
        """Split Gemfile content into classified lines.

        Splitting is on newline only, so joining the raw lines with "\\n"
        reproduces the input exactly.
        """
        lines = []
        for number, raw in enumerate(content.split("\n"), start=1):
            lines.append(
                ManifestLine(
                    raw=raw,
                    indent=INDENT_PATTERN.match(raw).group(0),
                    line_number=number,
                    declaration=self.parse_line(raw),
                )
            )
        return lines


def parse_line(line: str) -> GemDeclaration | None:
    """Parse a single Gemfile line into a GemDeclaration, or None."""
    return GemfileParser().parse_line(line)


def parse_gemfile(content: str) -> list[ManifestLine]:
    """Parse Gemfile content into ordered ManifestLine objects.

    Args:
        content: The Gemfile content

    Returns:
        One ManifestLine per physical line, in file order
    """
    parser = GemfileParser()
    return parser.parse(content)
