"""Extraction of argument values from source text.

Both parsing paths describe call arguments as `Argument` objects holding
the label and the raw source text of the value. The helpers here turn that
text into python values. The two recurring rules are:

- enum values: `.token` gives `token`, `Type.token` gives `token`,
  anything else gives the last bare identifier in the text.
- numbers: the first floating point looking substring of the text.
"""

__all__ = [
    "Argument",
    "split_arguments",
    "enum_value",
    "number_value",
    "string_value",
    "unquote",
    "bool_value",
    "color_value",
    "range_value",
    "array_items",
    "closing_index",
    "find_argument",
    "positional",
]

import re


_LEADING_DOT = re.compile(r"^\.\s*([A-Za-z_]\w*)")
_TYPE_DOT = re.compile(r"^[A-Za-z_]\w*\s*\.\s*([A-Za-z_]\w*)")
_IDENT = re.compile(r"[A-Za-z_]\w*")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?")
_STRING = re.compile(r'"((?:\\.|[^"\\])*)"')
_OPACITY = re.compile(r"\.opacity\(\s*(-?\d+(?:\.\d+)?)\s*\)")
_RANGE = re.compile(
    r"^\s*(-?\d+)\s*(\.\.<|\.\.\.)\s*(-?\d+)\s*$"
)
_LABEL = re.compile(r"^\s*([A-Za-z_]\w*)\s*:(?!:)")
_STRING_KEY = re.compile(r'^"(?:\\.|[^"\\])*"\s*:')
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", '"': '"', "\\": "\\", "'": "'"}


class Argument:
    """One call argument.

    Args:
        label: (str | None) Argument label, None for unlabeled arguments
        text: (str) Source text of the value
        tree: Optional syntax tree of the value (structural path only)
        line: (int | None) Source line of the argument
    """

    __slots__ = ("label", "text", "tree", "line")

    def __init__(self, label, text, tree=None, line=None):
        self.label = label
        self.text = text.strip()
        self.tree = tree
        self.line = line

    def __repr__(self):
        if self.label:
            return f"Argument({self.label}: {self.text})"
        return f"Argument({self.text})"


def split_arguments(text, line=None):
    """Split the text between call parentheses into arguments.

    Commas nested inside parentheses, brackets, braces or string literals
    do not split.

    Args:
        text: (str) Argument list text without the enclosing parentheses
        line: (int | None) Line number to attach to each argument

    Returns:
        (list[Argument]) Arguments in order
    """
    pieces = []
    depth = 0
    start = 0
    quoted = False
    index = 0
    while index < len(text):
        char = text[index]
        if quoted:
            if char == "\\":
                index += 1
            elif char == '"':
                quoted = False
        elif char == '"':
            quoted = True
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        elif char == "," and depth == 0:
            pieces.append(text[start:index])
            start = index + 1
        index += 1
    pieces.append(text[start:])

    args = []
    for piece in pieces:
        if not piece.strip():
            continue
        match = _LABEL.match(piece)
        if match:
            args.append(Argument(match.group(1), piece[match.end():], line=line))
        else:
            args.append(Argument(None, piece, line=line))
    return args


def closing_index(text, open_index):
    """Index of the bracket closing the one at `open_index`.

    String literals are skipped. Returns `len(text)` when unbalanced.
    """
    pairs = {"(": ")", "[": "]", "{": "}"}
    stack = []
    quoted = False
    index = open_index
    while index < len(text):
        char = text[index]
        if quoted:
            if char == "\\":
                index += 1
            elif char == '"':
                quoted = False
        elif char == '"':
            quoted = True
        elif char in pairs:
            stack.append(pairs[char])
        elif stack and char == stack[-1]:
            stack.pop()
            if not stack:
                return index
        index += 1
    return len(text)


def find_argument(args, *labels):
    """First argument with one of the given labels, or None."""
    for arg in args:
        if arg.label in labels:
            return arg
    return None


def positional(args, index=0):
    """Unlabeled argument by position, or None."""
    unlabeled = [arg for arg in args if arg.label is None]
    if index < len(unlabeled):
        return unlabeled[index]
    return None


def enum_value(text):
    """Extract an enum token from `.token`, `Type.token` or a bare name."""
    text = text.strip()
    match = _LEADING_DOT.match(text)
    if match:
        return match.group(1)
    match = _TYPE_DOT.match(text)
    if match:
        return match.group(1)
    names = _IDENT.findall(_STRING.sub("", text))
    if names:
        return names[-1]
    return None


def number_value(text):
    """First number found in the text, or None.

    Whole numbers come back as `int`.
    """
    match = _NUMBER.search(text)
    if not match:
        return None
    literal = match.group(0)
    if "." in literal or "e" in literal or "E" in literal:
        return float(literal)
    return int(literal)


def string_value(text):
    """Contents of the first string literal in the text, or None."""
    text = text.strip()
    if text.startswith('"""'):
        end = text.find('"""', 3)
        if end < 0:
            return None
        return _dedent_multiline(text[3:end])
    match = _STRING.search(text)
    if not match:
        return None
    return unquote(match.group(1))


def unquote(body):
    """Resolve backslash escapes except string interpolations."""
    out = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body):
            nxt = body[index + 1]
            if nxt in _ESCAPES:
                out.append(_ESCAPES[nxt])
                index += 2
                continue
            # keep \( interpolations verbatim
            out.append(char)
            index += 1
            continue
        out.append(char)
        index += 1
    return "".join(out)


def _dedent_multiline(body):
    lines = body.split("\n")
    if lines and not lines[0].strip():
        lines = lines[1:]
    if lines and not lines[-1].strip():
        indent = len(lines[-1])
        lines = [line[indent:] if line[:indent].isspace() else line for line in lines[:-1]]
    return unquote("\n".join(lines))


def bool_value(text):
    """`true`/`false` literal value, or None for anything else."""
    text = text.strip()
    if text == "true":
        return True
    if text == "false":
        return False
    return None


def color_value(text):
    """Extract a color from a color expression.

    Understands `.red`, `Color.red`, `.red.opacity(0.5)`,
    `Color(red: 1, green: 0.5, blue: 0)`, `Color(hex: "#ff0000")`,
    `Color("Asset")` and `Color(.systemGray)`.

    Returns:
        (tuple[str | None, float | None]) Color token and optional opacity
    """
    text = text.strip()
    opacity = None
    match = _OPACITY.search(text)
    if match:
        opacity = float(match.group(1))

    if re.match(r"^(Color|UIColor|NSColor)\s*\(", text):
        open_index = text.index("(")
        inner = text[open_index + 1:closing_index(text, open_index)]
        args = split_arguments(inner)
        labels = {arg.label: arg for arg in args}
        if "red" in labels and "green" in labels and "blue" in labels:
            channels = [
                number_value(labels[name].text) or 0 for name in ("red", "green", "blue")
            ]
            rgb = ", ".join(str(round(float(chan) * 255)) for chan in channels)
            if "opacity" in labels:
                opacity = number_value(labels["opacity"].text)
            return f"rgb({rgb})", opacity
        if "white" in labels:
            level = round(float(number_value(labels["white"].text) or 0) * 255)
            return f"rgb({level}, {level}, {level})", opacity
        if "hex" in labels:
            return string_value(labels["hex"].text), opacity
        first = positional(args)
        if first is not None:
            literal = string_value(first.text)
            if literal is not None:
                return literal, opacity
            return enum_value(first.text), opacity

    return enum_value(text), opacity


def range_value(text):
    """Parse a numeric range literal.

    Returns:
        (dict | None) `{start, end, inclusive}` or None when the text is not
        a literal `a..<b` / `a...b` range
    """
    match = _RANGE.match(text)
    if not match:
        return None
    return {
        "start": int(match.group(1)),
        "end": int(match.group(3)),
        "inclusive": match.group(2) == "...",
    }


def array_items(text):
    """Items of an array literal, or None when text is not one.

    String items are unquoted, numbers converted, anything else is kept as
    source text.
    """
    text = text.strip()
    if not (text.startswith("[") and text.endswith("]")):
        return None
    if text[1:-1].strip() == ":":
        return None
    items = []
    for arg in split_arguments(text[1:-1]):
        if arg.label is not None or _STRING_KEY.match(arg.text):
            # dictionary literal
            return None
        literal = string_value(arg.text) if arg.text.startswith('"') else None
        if literal is not None:
            items.append(literal)
        elif _NUMBER.fullmatch(arg.text):
            items.append(number_value(arg.text))
        else:
            items.append(arg.text)
    return items
