"""Text based parsing used when the syntax provider is not available.

The fallback parser recognizes the canonical textual forms of view
constructors with regular expressions and brace matching, and feeds the
same constructor table and modifier rules as the structural parser. It
covers less: modifier chains are matched with `^\\.(name)\\(([^)]*)\\)`, so a
modifier whose arguments contain parentheses, or one written with a
trailing closure, is reported as unsupported instead of guessed at.
"""

__all__ = ["TextTranslator", "parse_text"]

import logging
import re

from ._error import ErrorCollector, TranslationError
from ._extract import extract_text, matching_brace
from ._modifiers import TRAILING
from ._translate import CONSTRUCTORS, Closure, ViewTranslator, snippet
from ._values import closing_index, split_arguments
from ._view import ParseResult, ViewNode


logger = logging.getLogger(__name__)

_NAME = re.compile(r"[A-Z]\w*")
_COLOR_MEMBER = re.compile(r"Color\s*\.\s*[A-Za-z_]\w*")
_MODIFIER = re.compile(r"\.([A-Za-z_]\w*)\(([^)]*)\)")
_MODIFIER_START = re.compile(r"\s*\.([A-Za-z_]\w*)")
_LABELED_CLOSURE = re.compile(r"\s*([A-Za-z_]\w*)\s*:\s*\{")
_PARAMS = re.compile(r"^\s*(\(?\s*[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*\s*\)?)\s+in\b")
_SKIPPED = re.compile(r"(?:let|var|@\w+)\b[^\n]*")
_IF = re.compile(r"if\b")
_ELSE = re.compile(r"\s*else\b")


class TextTranslator(ViewTranslator):
    """Translate view expressions from source text.

    Args:
        errors: (ErrorCollector | None) Collector for diagnostics
        constants: (dict | None) Literal property values of the view
    """

    def views(self, closure):
        return self.statements(closure.body, closure.line)

    def view(self, arg):
        text = arg.text
        if arg.label == TRAILING or text.startswith("{"):
            end = matching_brace(text, 0)
            inner = text[1:end] if end > 0 else text[1:]
            nodes = self.statements(inner, arg.line)
            if len(nodes) == 1:
                return nodes[0]
            return ViewNode("Group", {}, [], nodes) if nodes else None
        node, end = self.expression(text, 0, arg.line, report=False)
        if node is None or text[end:].strip():
            return None
        return node

    def statements(self, text, line=None):
        """Translate every view statement in a block of text."""
        line = line or 1
        nodes = []
        cursor = 0
        while True:
            cursor = _skip_space(text, cursor)
            if cursor >= len(text):
                break
            here = line + text.count("\n", 0, cursor)

            if text.startswith("return", cursor) and not _is_word(text, cursor + 6):
                cursor += 6
                continue
            match = _SKIPPED.match(text, cursor)
            if match:
                cursor = match.end()
                continue
            if _IF.match(text, cursor):
                node, cursor = self._if(text, cursor, line)
                if node is not None:
                    nodes.append(node)
                continue

            node, end = self.expression(text, cursor, line)
            if node is None:
                if end <= cursor:
                    end = _line_end(text, cursor)
                self.errors.add(
                    f"Unsupported view expression: {snippet(text[cursor:end])}", here
                )
                logger.debug("Fallback skipped text at line %s", here)
                cursor = end
                continue
            nodes.append(node)
            cursor = end
        return nodes

    def expression(self, text, cursor, line=1, report=True):
        """Translate one view expression starting at `cursor`.

        Returns:
            (tuple[ViewNode | None, int]) Node and the index after it
        """
        match = _COLOR_MEMBER.match(text, cursor)
        if match:
            node = self.color_view(match.group(0))
            return self._modifiers(node, text, match.end(), line, report)

        match = _NAME.match(text, cursor)
        if match is None:
            return None, cursor
        name = match.group(0)
        index = match.end()
        args = []
        called = False

        peek = _skip_space(text, index)
        if peek < len(text) and text[peek] == "(":
            close = closing_index(text, peek)
            if close >= len(text):
                return None, cursor
            args = split_arguments(text[peek + 1:close], line + text.count("\n", 0, peek))
            index = close + 1
            called = True

        index, closures = self._closures(text, index, line)
        if not called and not closures and name not in CONSTRUCTORS:
            return None, cursor

        node = self.build(name, args, closures, line + text.count("\n", 0, cursor))
        if node is None:
            return None, index
        return self._modifiers(node, text, index, line, report)

    def _closures(self, text, index, line):
        """Trailing closures after a call, first unlabeled then labeled."""
        closures = []
        peek = _skip_space(text, index)
        if peek < len(text) and text[peek] == "{":
            end = matching_brace(text, peek)
            if end < 0:
                return index, closures
            closures.append(self._closure(None, text, peek, end, line))
            index = end + 1
            while True:
                labeled = _LABELED_CLOSURE.match(text, index)
                if labeled is None:
                    break
                start = labeled.end() - 1
                end = matching_brace(text, start)
                if end < 0:
                    break
                closures.append(self._closure(labeled.group(1), text, start, end, line))
                index = end + 1
        return index, closures

    def _closure(self, label, text, start, end, line):
        inner = text[start + 1:end]
        params = []
        match = _PARAMS.match(inner)
        if match:
            params = re.findall(r"[A-Za-z_]\w*", match.group(1))
            inner = inner[match.end():]
        first_line = line + text.count("\n", 0, start)
        return Closure(label, params, inner, text[start:end + 1], first_line)

    def _modifiers(self, node, text, index, line, report):
        """Apply the modifier chain following a view expression."""
        while True:
            start = _MODIFIER_START.match(text, index)
            if start is None:
                return node, index
            dot = start.start(1) - 1
            here = line + text.count("\n", 0, dot)
            match = _MODIFIER.match(text, dot)
            peek = _skip_space(text, match.end()) if match else 0
            closure = match is not None and text[peek:peek + 1] == "{"
            if match and "(" not in match.group(2) and not closure:
                args = split_arguments(match.group(2), here)
                self.modify(node, match.group(1), args, here)
                index = match.end()
                continue

            # Arguments with parentheses or closures are out of reach
            end = _chain_end(text, start.end())
            if report:
                self.errors.add(
                    f"Unsupported view expression: {snippet(text[dot:end])}", here
                )
            index = end

    def _if(self, text, cursor, line):
        """`if` shows its first branch, `else` branches are skipped."""
        opening = text.find("{", cursor)
        if opening < 0:
            return None, len(text)
        closing = matching_brace(text, opening)
        if closing < 0:
            return None, len(text)
        inner = text[opening + 1:closing]
        node = ViewNode("Group", {}, [], self.statements(
            inner, line + text.count("\n", 0, opening)
        ))
        index = closing + 1
        while _ELSE.match(text, index):
            opening = text.find("{", index)
            closing = matching_brace(text, opening) if opening >= 0 else -1
            if closing < 0:
                return node, len(text)
            index = closing + 1
        return node, index


def _skip_space(text, index):
    while index < len(text) and (text[index].isspace() or text[index] == ";"):
        index += 1
    return index


def _is_word(text, index):
    return index < len(text) and (text[index].isalnum() or text[index] == "_")


def _line_end(text, index):
    end = text.find("\n", index)
    return len(text) if end < 0 else end


def _chain_end(text, index):
    """Skip one bracketed argument group or closure after a modifier name."""
    peek = _skip_space(text, index)
    if peek < len(text) and text[peek] == "(":
        index = closing_index(text, peek) + 1
        peek = _skip_space(text, index)
    if peek < len(text) and text[peek] == "{":
        end = matching_brace(text, peek)
        index = len(text) if end < 0 else end + 1
    return min(index, len(text))


def parse_text(source):
    """Parse comment stripped source with the fallback parser.

    Returns:
        (ParseResult) Result tagged with the `fallback` backend
    """
    errors = ErrorCollector()
    try:
        target = extract_text(source)
    except TranslationError as err:
        logger.debug("Fallback extraction failed at line %s: %s", err.line, err.message)
        errors.add(err.message)
        return ParseResult(None, errors.messages, "fallback")

    translator = TextTranslator(errors, target.constants)
    nodes = translator.statements(target.body, target.line)
    if not nodes:
        errors.add(f"Unsupported body expression: {snippet(target.body)}")
        return ParseResult(None, errors.messages, "fallback")
    root = nodes[0] if len(nodes) == 1 else ViewNode("Group", {}, [], nodes)
    return ParseResult(root, errors.messages, "fallback")
