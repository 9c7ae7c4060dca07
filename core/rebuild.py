"""Rebuild a `gem` line around a new version constraint."""

import re

from .parse_gemfile import INDENT_PATTERN, POSITIONAL_PATTERN


def build_gem_line(original_line: str, gem_name: str, version: str) -> str:
    """Rewrite a declaration line to pin `~> version`.

    Indentation, the quote style of the gem name and everything after the
    version constraint (options, comments, trailing whitespace) are kept
    byte for byte.

    Args:
        original_line: The line as it appears in the Gemfile
        gem_name: Name of the declared gem
        version: Target version for the `~>` constraint

    Returns:
        The rebuilt line
    """
    indent = INDENT_PATTERN.match(original_line).group(0)

    # Gem names may contain regex metacharacters (e.g. "foo.rb")
    name_match = re.search(
        rf"gem\s+(['\"]){re.escape(gem_name)}['\"]", original_line
    )
    if name_match:
        quote = name_match.group(1)
        after_gem = original_line[name_match.end():]
    else:
        quote = '"'
        after_gem = ""

    # Drop every existing positional constraint, e.g. ">= 5", "< 7"
    pos = 0
    while True:
        constraint = POSITIONAL_PATTERN.match(after_gem, pos)
        if not constraint:
            break
        pos = constraint.end()
    after_gem = after_gem[pos:]

    return f"{indent}gem {quote}{gem_name}{quote}, {quote}~> {version}{quote}{after_gem}"
