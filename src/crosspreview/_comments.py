"""Remove single line comments before parsing.

The fallback parser has no real lexer, so comments are stripped from the
text before either parsing path sees it. A `//` only starts a comment when
an even number of `"` characters precede it on the same line, otherwise it
sits inside a string literal (an url, for example) and is kept.
"""

__all__ = ["strip_comments", "strip_line_comment"]


def strip_comments(source):
    """Strip `//` comments from every line of source.

    Line structure is preserved, so line numbers reported later still
    match the original text.

    Args:
        source: (str) Source text

    Returns:
        (str) Source with comments removed
    """
    lines = source.split("\n")
    return "\n".join(strip_line_comment(line) for line in lines)


def strip_line_comment(line):
    """Remove a trailing `//` comment from a single line."""
    quotes = 0
    index = 0
    end = len(line) - 1
    while index < end:
        char = line[index]
        if char == '"':
            quotes += 1
        elif char == "/" and line[index + 1] == "/" and quotes % 2 == 0:
            return line[:index]
        index += 1
    return line
