"""Shared text helpers for message definition parsing."""

import re

# Separator emitted between the main definition and each sub-definition
SEPARATOR = "=" * 80 + "\n"

# Sub-definition header marker (e.g. "MSG: std_msgs/Header")
MSG_MARKER = "MSG:"

_COMMENT_PATTERN = re.compile(r"#.*")
# Fields are "<type> <name>"; "=" splits constants into three or more tokens
_TOKEN_SPLIT_PATTERN = re.compile(r"[\s=]+")


def split_message_definition(text: str) -> tuple[str, list[str]]:
    """Split a definition blob into the main definition and its sub-definitions.

    Sub-definitions are returned in declaration order.
    """
    main, *sub_definitions = text.replace("\r\n", "\n").split(SEPARATOR)
    return main, sub_definitions


def definition_lines(text: str) -> list[str]:
    """Return the lines of a definition body with comments and blank lines removed."""
    lines = []
    for line in text.split("\n"):
        stripped = _COMMENT_PATTERN.sub("", line).strip()
        if stripped:
            lines.append(stripped)
    return lines


def split_tokens(line: str) -> list[str]:
    """Split a definition line on whitespace and ``=``."""
    return [token for token in _TOKEN_SPLIT_PATTERN.split(line) if token]


def header_name(header_line: str) -> str | None:
    """Extract the sub-definition name from its ``MSG: pkg/Name`` header line."""
    tokens = header_line.split()
    if tokens and tokens[0] == MSG_MARKER:
        tokens = tokens[1:]
    if not tokens:
        return None
    return tokens[-1]
