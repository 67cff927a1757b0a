"""Interpretation of postfix modifier calls.

Each known modifier name has a rule that turns the call arguments into an
argument mapping and picks the argument category. Both parsing paths feed
the same rules with `Argument` lists, so the fallback parser and the
structural parser produce identical modifiers for the same text.

Unknown modifier names are kept as modifiers with empty arguments. They are
facts about the source, not failures.
"""

__all__ = [
    "MODIFIER_RULES",
    "TRAILING",
    "interpret_modifier",
    "known_modifier",
]

import logging
import re

from ._view import Modifier, ViewNode
from ._values import (
    bool_value,
    color_value,
    enum_value,
    find_argument,
    number_value,
    positional,
    string_value,
)


logger = logging.getLogger(__name__)

# Label given to trailing closure arguments
TRAILING = "{}"

NUM = (int, float)
STR = (str,)
BOOL = (bool,)
NODE = (ViewNode,)
NUM_STR = (int, float, str)

MATERIALS = frozenset([
    "ultraThinMaterial",
    "thinMaterial",
    "regularMaterial",
    "thickMaterial",
    "ultraThickMaterial",
    "bar",
])

_DURATION = re.compile(r"duration\s*:\s*(-?\d+(?:\.\d+)?)")
_VIEW_CALL = re.compile(r"^[A-Z]\w*\s*[({]")
_VIEW_NAMES = re.compile(r"^(Color|UIColor|NSColor)\b")


class ModifierRule:
    """Extraction rule for one or more modifier names.

    Args:
        names: (tuple[str]) Modifier names handled by the rule
        category: (str) Default argument category
        schema: (dict) Field name to allowed value types
        extract: (callable) `extract(args, view_of)` returning the argument
            dict, or a `(category, args)` pair when the category depends
            on the values
    """

    __slots__ = ("names", "category", "schema", "extract")

    def __init__(self, names, category, schema, extract):
        self.names = names
        self.category = category
        self.schema = schema
        self.extract = extract

    def __repr__(self):
        return f"ModifierRule<{', '.join(self.names)}>"


MODIFIER_RULES = {}


def _rule(*names, category, schema=None):
    """Register an extraction function for modifier names."""
    def register(func):
        rule = ModifierRule(names, category, schema or {}, func)
        for name in names:
            MODIFIER_RULES[name] = rule
        return func
    return register


def known_modifier(name):
    """Check if a modifier name has an extraction rule."""
    return name in MODIFIER_RULES


def interpret_modifier(name, args, view_of=None):
    """Build a `Modifier` from a call.

    Args:
        name: (str) Modifier name
        args: (list[Argument]) Call arguments, trailing closures labeled
            with `TRAILING`
        view_of: (callable | None) Translates an `Argument` holding a view
            expression into a `ViewNode`, or returns None

    Returns:
        (tuple[Modifier, str | None]) The modifier and an error message
        when its arguments were invalid. An invalid modifier is still
        returned, with empty arguments.
    """
    rule = MODIFIER_RULES.get(name)
    if rule is None:
        return Modifier(name), None

    view_of = view_of or _no_views
    try:
        extracted = rule.extract(args, view_of)
        if isinstance(extracted, tuple):
            category, values = extracted
        else:
            category, values = rule.category, extracted
        values = {key: val for key, val in values.items() if val is not None}
        if not values and category != "empty":
            category = "empty"
        return Modifier(name, values, category, rule.schema), None
    except ValueError as err:
        logger.debug("Rejected arguments for .%s: %s", name, err)
        return Modifier(name), f"Invalid arguments for modifier .{name}: {err}"


def _no_views(arg):
    return None


def _first(args):
    """First unlabeled non trailing argument."""
    return positional(args)


def _trailing(args):
    return find_argument(args, TRAILING)


def _number(arg):
    if arg is None:
        return None
    return number_value(arg.text)


def _enum(arg):
    if arg is None:
        return None
    return enum_value(arg.text)


def _text(arg):
    if arg is None:
        return None
    return string_value(arg.text)


def _flag(arg, default=True):
    if arg is None:
        return default
    value = bool_value(arg.text)
    return default if value is None else value


def _is_view_expression(arg):
    """Argument text looks like a view constructor rather than a color."""
    text = arg.text
    if arg.label == TRAILING:
        return True
    return bool(_VIEW_CALL.match(text)) and not _VIEW_NAMES.match(text)


def _paint(args, view_of, label=None):
    """Shared color / material / view content extraction."""
    arg = find_argument(args, label) if label else None
    arg = arg or _first(args) or _trailing(args)
    if arg is None:
        return "empty", {}
    alignment = _enum(find_argument(args, "alignment"))
    if _is_view_expression(arg):
        node = view_of(arg)
        if node is not None:
            return "node", {"content": node, "alignment": alignment}
    token, opacity = color_value(arg.text)
    if token in MATERIALS:
        return "color", {"material": token}
    return "color", {"color": token, "opacity": opacity}


# Layout


@_rule("padding", category="mixed", schema={
    "all": NUM, "edges": STR, "length": NUM,
    "top": NUM, "leading": NUM, "bottom": NUM, "trailing": NUM,
})
def _padding(args, view_of):
    first = _first(args)
    if first is None:
        return {}
    text = first.text
    if text.startswith("EdgeInsets"):
        inner = {}
        for side in ("top", "leading", "bottom", "trailing"):
            match = re.search(rf"{side}\s*:\s*(-?\d+(?:\.\d+)?)", text)
            if match:
                inner[side] = number_value(match.group(1))
        return inner
    if text.startswith(".") or text.startswith("["):
        edges = enum_value(text)
        if text.startswith("["):
            edges = ",".join(re.findall(r"\.(\w+)", text))
        return {"edges": edges, "length": _number(positional(args, 1))}
    return {"all": number_value(text)}


_FRAME_FIELDS = (
    "width", "height",
    "minWidth", "idealWidth", "maxWidth",
    "minHeight", "idealHeight", "maxHeight",
)


@_rule("frame", category="mixed", schema={
    **{name: NUM_STR for name in _FRAME_FIELDS},
    "alignment": STR,
})
def _frame(args, view_of):
    values = {}
    for name in _FRAME_FIELDS:
        arg = find_argument(args, name)
        if arg is None:
            continue
        if "infinity" in arg.text:
            values[name] = "infinity"
        else:
            values[name] = number_value(arg.text)
    values["alignment"] = _enum(find_argument(args, "alignment"))
    return values


@_rule("offset", "position", category="numeric", schema={"x": NUM, "y": NUM})
def _point(args, view_of):
    first = _first(args)
    if first is not None and first.text.startswith("CGSize"):
        width = re.search(r"width\s*:\s*(-?\d+(?:\.\d+)?)", first.text)
        height = re.search(r"height\s*:\s*(-?\d+(?:\.\d+)?)", first.text)
        return {
            "x": number_value(width.group(1)) if width else None,
            "y": number_value(height.group(1)) if height else None,
        }
    return {
        "x": _number(find_argument(args, "x")),
        "y": _number(find_argument(args, "y")),
    }


@_rule("zIndex", "layoutPriority", category="numeric", schema={"value": NUM})
def _plain_value(args, view_of):
    return {"value": _number(_first(args))}


@_rule("aspectRatio", category="mixed", schema={"ratio": NUM, "contentMode": STR})
def _aspect_ratio(args, view_of):
    first = _first(args)
    ratio = None
    mode = _enum(find_argument(args, "contentMode"))
    if first is not None:
        if first.text.startswith("."):
            mode = mode or enum_value(first.text)
        elif first.text.startswith("CGSize"):
            width = re.search(r"width\s*:\s*(-?\d+(?:\.\d+)?)", first.text)
            height = re.search(r"height\s*:\s*(-?\d+(?:\.\d+)?)", first.text)
            if width and height and float(height.group(1)):
                ratio = float(width.group(1)) / float(height.group(1))
        else:
            ratio = number_value(first.text)
    second = positional(args, 1)
    if mode is None and second is not None:
        mode = enum_value(second.text)
    return {"ratio": ratio, "contentMode": mode}


@_rule(
    "scaledToFit", "scaledToFill", "resizable", "fixedSize", "hidden",
    "labelsHidden", "compositingGroup", "drawingGroup", "ignoresSafeArea",
    "edgesIgnoringSafeArea", "clipped",
    category="empty",
)
def _no_arguments(args, view_of):
    return {}


# Shape and effects


@_rule("cornerRadius", category="numeric", schema={"radius": NUM})
def _corner_radius(args, view_of):
    return {"radius": _number(_first(args) or find_argument(args, "radius"))}


@_rule("opacity", category="numeric", schema={"value": NUM})
def _opacity(args, view_of):
    return {"value": _number(_first(args))}


@_rule("blur", category="numeric", schema={"radius": NUM})
def _blur(args, view_of):
    return {"radius": _number(find_argument(args, "radius") or _first(args))}


@_rule("shadow", category="mixed", schema={
    "color": STR, "opacity": NUM, "radius": NUM, "x": NUM, "y": NUM,
})
def _shadow(args, view_of):
    color = opacity = None
    color_arg = find_argument(args, "color")
    if color_arg is not None:
        color, opacity = color_value(color_arg.text)
    radius = find_argument(args, "radius") or _first(args)
    return {
        "color": color,
        "opacity": opacity,
        "radius": _number(radius),
        "x": _number(find_argument(args, "x")),
        "y": _number(find_argument(args, "y")),
    }


def _angle(text):
    """Degrees or radians from `.degrees(n)`, `Angle(radians: n)` and so on."""
    if "radians" in text:
        return {"radians": number_value(text)}
    return {"degrees": number_value(text)}


@_rule("rotationEffect", category="numeric", schema={"degrees": NUM, "radians": NUM})
def _rotation(args, view_of):
    first = _first(args)
    if first is None:
        return {}
    return _angle(first.text)


@_rule("hueRotation", category="numeric", schema={"degrees": NUM})
def _hue_rotation(args, view_of):
    first = _first(args)
    if first is None:
        return {}
    angle = _angle(first.text)
    if "radians" in angle and angle["radians"] is not None:
        return {"degrees": angle["radians"] * 180 / 3.141592653589793}
    return angle


@_rule("scaleEffect", category="numeric", schema={"scale": NUM, "x": NUM, "y": NUM})
def _scale(args, view_of):
    x = find_argument(args, "x")
    y = find_argument(args, "y")
    if x is not None or y is not None:
        return {"x": _number(x), "y": _number(y)}
    return {"scale": _number(_first(args))}


@_rule("brightness", "contrast", "saturation", "grayscale", category="numeric",
       schema={"amount": NUM})
def _amount(args, view_of):
    return {"amount": _number(_first(args))}


@_rule("clipShape", "mask", "contentShape", category="mixed",
       schema={"shape": STR, "cornerRadius": NUM})
def _clip_shape(args, view_of):
    arg = _first(args) or _trailing(args)
    if arg is None:
        return {}
    text = arg.text
    shape = None
    match = re.match(r"^\.?\s*([A-Za-z_]\w*)", text.lstrip("{ \n"))
    if match:
        shape = match.group(1)
        shape = shape[:1].upper() + shape[1:]
    radius = None
    match = re.search(r"cornerRadius\s*:\s*(-?\d+(?:\.\d+)?)", text)
    if match:
        radius = number_value(match.group(1))
    return {"shape": shape, "cornerRadius": radius}


# Colors and paint


@_rule(
    "foregroundColor", "foregroundStyle", "background", "fill", "tint",
    "accentColor",
    category="color",
    schema={
        "color": STR, "opacity": NUM, "material": STR,
        "content": NODE, "alignment": STR,
    },
)
def _color(args, view_of):
    return _paint(args, view_of)


@_rule("stroke", "strokeBorder", category="color", schema={
    "color": STR, "opacity": NUM, "lineWidth": NUM, "content": NODE, "alignment": STR,
})
def _stroke(args, view_of):
    category, values = _paint(args, view_of)
    width = find_argument(args, "lineWidth")
    if width is not None:
        values["lineWidth"] = number_value(width.text)
    else:
        style = find_argument(args, "style")
        if style is not None:
            match = re.search(r"lineWidth\s*:\s*(-?\d+(?:\.\d+)?)", style.text)
            if match:
                values["lineWidth"] = number_value(match.group(1))
    if category == "empty" and values.get("lineWidth") is not None:
        category = "color"
    return category, values


@_rule("border", category="color", schema={"color": STR, "opacity": NUM, "width": NUM})
def _border(args, view_of):
    first = _first(args)
    color = opacity = None
    if first is not None:
        color, opacity = color_value(first.text)
    return {
        "color": color,
        "opacity": opacity,
        "width": _number(find_argument(args, "width")),
    }


@_rule("overlay", category="node", schema={"content": NODE, "alignment": STR})
def _overlay(args, view_of):
    arg = find_argument(args, "content") or _first(args) or _trailing(args)
    if arg is None:
        return "empty", {}
    node = view_of(arg)
    if node is None:
        return "empty", {}
    return {"content": node, "alignment": _enum(find_argument(args, "alignment"))}


@_rule("tabItem", "toolbar", category="node", schema={"content": NODE})
def _content(args, view_of):
    arg = _trailing(args) or find_argument(args, "content") or _first(args)
    if arg is None:
        return "empty", {}
    node = view_of(arg)
    if node is None:
        return "empty", {}
    return {"content": node}


# Text


_FONT_SIZE = re.compile(r"size\s*:\s*(-?\d+(?:\.\d+)?)")
_FONT_WEIGHT = re.compile(r"weight\s*:\s*\.?(\w+)")
_FONT_DESIGN = re.compile(r"design\s*:\s*\.?(\w+)")
_FONT_CHAIN = re.compile(r"\.(bold|italic|weight\(\s*\.(\w+)\s*\))\s*(\(\s*\))?")


@_rule("font", category="mixed", schema={
    "style": STR, "size": NUM, "weight": STR, "design": STR, "family": STR,
    "italic": BOOL,
})
def _font(args, view_of):
    first = _first(args)
    if first is None:
        return {}
    text = first.text
    values = {}
    token = enum_value(text)
    if token == "system":
        size = _FONT_SIZE.search(text)
        values["size"] = number_value(size.group(1)) if size else None
        # .system(.title) keeps a text style
        match = re.match(r"^(?:Font)?\s*\.system\(\s*\.(\w+)", text)
        if match:
            values["style"] = match.group(1)
    elif token == "custom":
        values["family"] = string_value(text)
        size = _FONT_SIZE.search(text) or re.search(r"(?:fixedSize|relativeTo)\s*:\s*(\d+)", text)
        values["size"] = number_value(size.group(1)) if size else None
    else:
        values["style"] = token
    weight = _FONT_WEIGHT.search(text)
    if weight:
        values["weight"] = weight.group(1)
    design = _FONT_DESIGN.search(text)
    if design:
        values["design"] = design.group(1)
    for match in _FONT_CHAIN.finditer(text):
        if match.group(1) == "bold":
            values["weight"] = "bold"
        elif match.group(1) == "italic":
            values["italic"] = True
        elif match.group(2):
            values["weight"] = match.group(2)
    return values


@_rule("fontWeight", category="enum", schema={"weight": STR})
def _font_weight(args, view_of):
    return {"weight": _enum(_first(args))}


@_rule("fontDesign", category="enum", schema={"design": STR})
def _font_design(args, view_of):
    return {"design": _enum(_first(args))}


@_rule("bold", "italic", "underline", "strikethrough", "monospaced",
       category="flag", schema={"active": BOOL})
def _text_flag(args, view_of):
    return {"active": _flag(_first(args) or find_argument(args, "isActive"))}


@_rule("kerning", "tracking", "lineSpacing", category="numeric", schema={"amount": NUM})
def _spacing(args, view_of):
    return {"amount": _number(_first(args))}


@_rule("lineLimit", category="numeric", schema={"lines": NUM})
def _line_limit(args, view_of):
    first = _first(args)
    if first is None or first.text == "nil":
        return {}
    return {"lines": number_value(first.text)}


@_rule("multilineTextAlignment", category="enum", schema={"alignment": STR})
def _text_alignment(args, view_of):
    return {"alignment": _enum(_first(args))}


@_rule("textCase", category="enum", schema={"case": STR})
def _text_case(args, view_of):
    first = _first(args)
    if first is None or first.text == "nil":
        return {}
    return {"case": enum_value(first.text)}


# Interaction


@_rule("onTapGesture", category="flag", schema={"count": NUM})
def _tap(args, view_of):
    count = find_argument(args, "count")
    return {"count": _number(count) if count is not None else 1}


@_rule("onLongPressGesture", "onAppear", "onDisappear", category="flag",
       schema={"active": BOOL})
def _event(args, view_of):
    return {"active": True}


@_rule("disabled", category="flag", schema={"active": BOOL})
def _disabled(args, view_of):
    # Only a literal `true` is known to disable, expressions stay enabled
    return {"active": _flag(_first(args), default=False)}


# Navigation and containers


@_rule("navigationTitle", "navigationBarTitle", category="text", schema={"title": STR})
def _navigation_title(args, view_of):
    first = _first(args)
    if first is None:
        return {}
    title = string_value(first.text)
    if title is None:
        title = first.text
    return {"title": title}


@_rule("navigationBarTitleDisplayMode", category="enum", schema={"mode": STR})
def _title_mode(args, view_of):
    return {"mode": _enum(_first(args))}


@_rule("badge", "tag", category="mixed", schema={"value": NUM_STR})
def _badge(args, view_of):
    first = _first(args)
    if first is None:
        return {}
    literal = string_value(first.text) if first.text.startswith('"') else None
    if literal is not None:
        return {"value": literal}
    if re.fullmatch(r"-?\d+(\.\d+)?", first.text):
        return {"value": number_value(first.text)}
    return {"value": enum_value(first.text)}


@_rule(
    "listStyle", "textFieldStyle", "buttonStyle", "pickerStyle", "toggleStyle",
    "labelStyle", "progressViewStyle", "datePickerStyle", "tabViewStyle",
    "navigationViewStyle", "transition",
    category="enum",
    schema={"style": STR},
)
def _style(args, view_of):
    return {"style": _enum(_first(args))}


@_rule("controlSize", category="enum", schema={"size": STR})
def _control_size(args, view_of):
    return {"size": _enum(_first(args))}


@_rule("animation", category="mixed", schema={"curve": STR, "duration": NUM})
def _animation(args, view_of):
    first = _first(args)
    if first is None or first.text == "nil":
        return {}
    duration = _DURATION.search(first.text)
    return {
        "curve": enum_value(first.text),
        "duration": number_value(duration.group(1)) if duration else None,
    }


@_rule("accessibilityLabel", "accessibilityHint", "accessibilityValue", "help",
       category="text", schema={"text": STR})
def _accessibility(args, view_of):
    return {"text": _text(_first(args))}


@_rule("searchable", category="text", schema={"prompt": STR})
def _searchable(args, view_of):
    prompt = find_argument(args, "prompt")
    return {"prompt": _text(prompt)}
