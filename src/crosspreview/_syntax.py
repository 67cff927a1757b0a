"""Syntax provider backed by a lark grammar.

The provider turns source text into a generic lark parse tree. It is a
handle owned by the caller: build it once with `SyntaxProvider.load()`,
reuse it for any number of unrelated sources, and drop it when done. It
keeps no state between parse calls.
"""

__all__ = [
    "SyntaxProvider",
    "grammar_path",
    "source_text",
    "tree_line",
    "tokens_of",
    "subtrees",
]

import logging
import os

import lark

from ._error import ProviderError, ProviderUnavailable


logger = logging.getLogger(__name__)

_LINE_OPENERS = ("_NL_LPAR", "_NL_LSQB", "_NL_LBRACE")


class SyntaxProvider:
    """Parse Swift source into lark trees.

    Args:
        parser: (lark.Lark) Prepared parser instance

    Attributes:
        grammar: (str) Name of the grammar file the parser was built from
    """

    def __init__(self, parser, grammar="swift"):
        self._parser = parser
        self.grammar = grammar

    @classmethod
    def load(cls, grammar="swift"):
        """Build the provider from a grammar file in the package lark/ dir.

        Args:
            grammar: (str) Name of the grammar file (without .lark)

        Returns:
            (SyntaxProvider) Ready provider

        Raises:
            ProviderUnavailable: The grammar is missing or does not build
        """
        path = f"lark/{grammar}.lark"
        try:
            parser = lark.Lark.open(
                path,
                rel_to=__file__,
                parser="earley",
                lexer="basic",
                propagate_positions=True,
                maybe_placeholders=False,
                lexer_callbacks=dict.fromkeys(_LINE_OPENERS, _line_opener),
            )
        except (OSError, lark.exceptions.LarkError) as err:
            raise ProviderUnavailable(f"Cannot build grammar {grammar!r}: {err}") from err
        logger.debug("Loaded grammar %s", path)
        return cls(parser, grammar)

    @classmethod
    def available(cls, grammar="swift"):
        """Check whether the grammar file for a provider is installed."""
        path = grammar_path(grammar)
        if not os.path.isfile(path):
            logger.info("Syntax provider unavailable, no grammar at %s", path)
            return False
        return True

    def parse(self, source):
        """Parse source into a lark tree.

        Args:
            source: (str) Swift source text

        Returns:
            (lark.Tree) Tree rooted at the `start` rule

        Raises:
            ProviderError: The text is outside the supported grammar
        """
        try:
            return self._parser.parse(source)
        except lark.exceptions.UnexpectedInput as err:
            detail = _describe(err)
            raise ProviderError(detail, err.line, err.column) from err
        except lark.exceptions.LarkError as err:
            raise ProviderError(str(err).splitlines()[0]) from err

    def __repr__(self):
        return f"SyntaxProvider<{self.grammar}>"


def _line_opener(token):
    """Trim the whitespace a line leading bracket token was lexed with.

    Positions then point at the bracket, so trees opened by it start on
    the bracket's own line.
    """
    value = token.value
    skipped = len(value) - 1
    line = token.line + value.count("\n")
    column = skipped - value.rfind("\n")
    return lark.Token(
        token.type,
        value[-1],
        token.start_pos + skipped,
        line,
        column,
        line,
        column + 1,
        token.end_pos,
    )


def _describe(err):
    """Short one line message for a lark input error."""
    if isinstance(err, lark.exceptions.UnexpectedCharacters):
        return f"Unexpected character {err.char!r}"
    if isinstance(err, lark.exceptions.UnexpectedToken):
        token = err.token
        if token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected token {token.value!r}"
    if isinstance(err, lark.exceptions.UnexpectedEOF):
        return "Unexpected end of input"
    return str(err).splitlines()[0]


def source_text(tree, source):
    """Original source text spanned by a lark tree or token."""
    if isinstance(tree, lark.Token):
        return str(tree)
    meta = tree.meta
    if getattr(meta, "empty", True):
        return ""
    return source[meta.start_pos:meta.end_pos]


def tree_line(tree):
    """Starting line of a lark tree or token, or None."""
    if isinstance(tree, lark.Token):
        return tree.line
    meta = tree.meta
    if getattr(meta, "empty", True):
        return None
    return meta.line


def tokens_of(tree, *types):
    """Direct token children of a tree, optionally filtered by type."""
    return [
        kid for kid in tree.children
        if isinstance(kid, lark.Token) and (not types or kid.type in types)
    ]


def subtrees(tree, *names):
    """Direct subtree children of a tree, optionally filtered by rule name."""
    return [
        kid for kid in tree.children
        if isinstance(kid, lark.Tree) and (not names or kid.data in names)
    ]


def grammar_path(grammar):
    """Filesystem path of a grammar file shipped with the package."""
    return os.path.join(os.path.dirname(__file__), "lark", f"{grammar}.lark")
