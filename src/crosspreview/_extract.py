"""Locate the View declaration and its body.

Two flavors share the same contract and error messages. The tree functions
work on lark trees from the syntax provider. The text functions scan raw
source for the fallback parser, using a brace counter that treats every
`{` and `}` the same (comments are already gone, string literals are not
special).
"""

__all__ = [
    "NO_VIEW",
    "BodyTarget",
    "extract_tree",
    "extract_text",
    "matching_brace",
    "is_view_conformance",
]

import logging
import re

import lark

from ._error import TranslationError
from ._syntax import source_text, subtrees, tokens_of, tree_line
from ._values import array_items, number_value


logger = logging.getLogger(__name__)

NO_VIEW = "No struct conforming to View found"

_DECL = re.compile(
    r"\b(?:struct|class|extension|enum|actor)\s+([A-Za-z_][\w.]*)\s*"
    r"(?:<[^>{]*>)?\s*:\s*([^{]*)\{"
)
_BODY = re.compile(r"\bvar\s+body\b")
_SOME_VIEW = re.compile(r"\bsome\s+View\b")
_CONSTANT = re.compile(
    r"\b(?:let|var)\s+([A-Za-z_]\w*)\s*(?::[^=\n{]+)?=\s*(\[[^\]\n]*\]|-?\d+(?:\.\d+)?)\s*$",
    re.MULTILINE,
)


class BodyTarget:
    """The located body of a View declaration.

    Args:
        name: (str) Name of the View type
        body: Statement trees (structural) or the body text (fallback)
        constants: (dict) Literal property values of the declaration
        line: (int | None) Line where the body content starts
    """

    __slots__ = ("name", "body", "constants", "line")

    def __init__(self, name, body, constants=None, line=None):
        self.name = name
        self.body = body
        self.constants = constants or {}
        self.line = line

    def __repr__(self):
        return f"BodyTarget<{self.name}>"


def is_view_conformance(names):
    """Check if a conformance name is `View` or a qualified `X.View`."""
    return names == "View" or names.endswith(".View")


# Structural flavor


def extract_tree(tree, source):
    """Find the first View declaration in a lark tree and its body.

    Args:
        tree: (lark.Tree) Tree rooted at `start`
        source: (str) Text the tree was parsed from

    Returns:
        (BodyTarget) Name, body statement trees and constants

    Raises:
        TranslationError: No declaration, no body, or an empty body
    """
    decl = _find_view_decl(tree)
    if decl is None:
        raise TranslationError(NO_VIEW)
    name = _decl_name(decl)
    logger.debug("Found View declaration %s", name)

    body = None
    for member in subtrees(decl, "var_decl"):
        names = tokens_of(member, "NAME")
        if names and names[0] == "body":
            body = member
            break
    if body is None:
        raise TranslationError(f"View '{name}' has no body property", tree_line(decl))

    statements = _getter_statements(body)
    if not statements:
        raise TranslationError(
            f"Could not isolate the body expression of '{name}'", tree_line(body)
        )
    return BodyTarget(
        name, statements, _tree_constants(decl, source), tree_line(statements[0])
    )


def _find_view_decl(tree):
    for decl in tree.iter_subtrees_topdown():
        if decl.data != "type_decl":
            continue
        for inherited in subtrees(decl, "inheritance"):
            for kind in subtrees(inherited, "type"):
                if _type_name(kind) and is_view_conformance(_type_name(kind)):
                    return decl
    return None


def _type_name(kind):
    """Dotted name of a plain type reference, None for other types."""
    idents = subtrees(kind, "type_ident")
    if not idents:
        return None
    return ".".join(str(tok) for tok in tokens_of(idents[0], "NAME"))


def _decl_name(decl):
    name = subtrees(decl, "type_name")[0]
    return ".".join(str(tok) for tok in tokens_of(name, "NAME"))


def _getter_statements(body):
    for accessor in subtrees(body, "getter", "accessors"):
        if accessor.data == "getter":
            return [kid for kid in accessor.children if isinstance(kid, lark.Tree)]
        for clause in subtrees(accessor, "accessor_clause"):
            if tokens_of(clause, "GET"):
                block = subtrees(clause, "block")
                if block:
                    return [kid for kid in block[0].children if isinstance(kid, lark.Tree)]
    for init in subtrees(body, "initializer"):
        return [kid for kid in init.children if isinstance(kid, lark.Tree)]
    return []


def _tree_constants(decl, source):
    """Literal array and number initializers of the declaration's properties."""
    constants = {}
    for member in subtrees(decl, "var_decl"):
        names = tokens_of(member, "NAME")
        inits = subtrees(member, "initializer")
        if not names or not inits:
            continue
        value = _literal(source_text(inits[0].children[0], source))
        if value is not None:
            constants[str(names[0])] = value
    return constants


def _literal(text):
    text = text.strip()
    items = array_items(text)
    if items is not None:
        return items
    if re.fullmatch(r"-?\d+(\.\d+)?", text):
        return number_value(text)
    return None


# Text flavor


def matching_brace(text, open_index):
    """Index of the `}` closing the `{` at `open_index`, or -1.

    Every brace counts, including braces inside string literals.
    """
    depth = 0
    for index in range(open_index, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def extract_text(source):
    """Find the first View declaration in raw text and its body text.

    Returns:
        (BodyTarget) Name, body text between the braces and constants

    Raises:
        TranslationError: No declaration, no body, or an empty body
    """
    for match in _DECL.finditer(source):
        conformances = [item.strip() for item in match.group(2).split(",")]
        if any(is_view_conformance(item.split("<")[0]) for item in conformances):
            break
    else:
        raise TranslationError(NO_VIEW)

    name = match.group(1)
    start = match.end() - 1
    end = matching_brace(source, start)
    if end < 0:
        end = len(source)
    decl = source[start:end]
    line_of = _line_counter(source)

    body = _BODY.search(decl)
    if body is None:
        raise TranslationError(f"View '{name}' has no body property", line_of(start))
    marker = _SOME_VIEW.search(decl, body.end())
    opening = decl.find("{", marker.end() if marker else body.end())
    closing = matching_brace(decl, opening) if opening >= 0 else -1
    if closing < 0 or not decl[opening + 1:closing].strip():
        raise TranslationError(
            f"Could not isolate the body expression of '{name}'",
            line_of(start + body.start()),
        )
    return BodyTarget(
        name,
        decl[opening + 1:closing],
        _text_constants(decl),
        line_of(start + opening),
    )


def _line_counter(source):
    def line_of(index):
        return source.count("\n", 0, index) + 1
    return line_of


def _text_constants(decl):
    constants = {}
    for match in _CONSTANT.finditer(decl):
        value = _literal(match.group(2))
        if value is not None:
            constants.setdefault(match.group(1), value)
    return constants
