"""Modifier to CSS declaration mapping.

Modifiers fold left to right into an ordered list of declarations. A later
modifier that emits the same property simply appends another declaration,
so in the style attribute the last one wins, which is how modifier
precedence works in the preview. Filters, transforms and text decorations
compose: each such modifier re-emits the whole accumulated value.
"""

__all__ = [
    "StyleBuilder",
    "style_declarations",
    "style_attribute",
    "css_color",
    "gradient_css",
    "FONT_STYLES",
    "FONT_WEIGHTS",
    "SHAPE_KINDS",
    "ALIGN_ITEMS",
    "ALIGN_2D",
]

import math
import re

from ._view import ViewNode

SHAPE_KINDS = frozenset(["Rectangle", "Circle", "RoundedRectangle", "Capsule", "Ellipse"])

COLORS = {
    "red": "#ff3b30",
    "orange": "#ff9500",
    "yellow": "#ffcc00",
    "green": "#34c759",
    "mint": "#00c7be",
    "teal": "#30b0c7",
    "cyan": "#32ade6",
    "blue": "#007aff",
    "indigo": "#5856d6",
    "purple": "#af52de",
    "pink": "#ff2d55",
    "brown": "#a2845e",
    "gray": "#8e8e93",
    "grey": "#8e8e93",
    "black": "#000000",
    "white": "#ffffff",
    "clear": "transparent",
    "primary": "#000000",
    "secondary": "rgba(60, 60, 67, 0.6)",
    "tertiary": "rgba(60, 60, 67, 0.3)",
    "accentColor": "#007aff",
    "accent": "#007aff",
    "systemBackground": "#ffffff",
    "secondarySystemBackground": "#f2f2f7",
    "tertiarySystemBackground": "#ffffff",
    "systemGroupedBackground": "#f2f2f7",
    "systemGray": "#8e8e93",
    "systemGray2": "#aeaeb2",
    "systemGray3": "#c7c7cc",
    "systemGray4": "#d1d1d6",
    "systemGray5": "#e5e5ea",
    "systemGray6": "#f2f2f7",
    "label": "#000000",
    "secondaryLabel": "rgba(60, 60, 67, 0.6)",
    "separator": "rgba(60, 60, 67, 0.29)",
}

MATERIALS = {
    "ultraThinMaterial": (0.35, 10),
    "thinMaterial": (0.5, 15),
    "regularMaterial": (0.65, 20),
    "thickMaterial": (0.8, 25),
    "ultraThickMaterial": (0.9, 30),
    "bar": (0.85, 20),
}

# Text style name to (size px, weight)
FONT_STYLES = {
    "largeTitle": (34, 400),
    "title": (28, 400),
    "title2": (22, 400),
    "title3": (20, 400),
    "headline": (17, 600),
    "body": (17, 400),
    "callout": (16, 400),
    "subheadline": (15, 400),
    "footnote": (13, 400),
    "caption": (12, 400),
    "caption2": (11, 400),
}

FONT_WEIGHTS = {
    "ultraLight": 100,
    "thin": 200,
    "light": 300,
    "regular": 400,
    "medium": 500,
    "semibold": 600,
    "bold": 700,
    "heavy": 800,
    "black": 900,
}

FONT_DESIGNS = {
    "default": "-apple-system, BlinkMacSystemFont, 'Helvetica Neue', sans-serif",
    "rounded": "ui-rounded, 'SF Pro Rounded', -apple-system, sans-serif",
    "serif": "ui-serif, 'New York', Georgia, serif",
    "monospaced": "ui-monospace, 'SF Mono', Menlo, monospace",
}

ALIGN_ITEMS = {
    "leading": "flex-start",
    "top": "flex-start",
    "center": "center",
    "trailing": "flex-end",
    "bottom": "flex-end",
    "firstTextBaseline": "baseline",
    "lastTextBaseline": "last baseline",
}

# Alignment name to (justify-content, align-items) in a row flex box
ALIGN_2D = {
    "center": ("center", "center"),
    "top": ("center", "flex-start"),
    "bottom": ("center", "flex-end"),
    "leading": ("flex-start", "center"),
    "trailing": ("flex-end", "center"),
    "topLeading": ("flex-start", "flex-start"),
    "topTrailing": ("flex-end", "flex-start"),
    "bottomLeading": ("flex-start", "flex-end"),
    "bottomTrailing": ("flex-end", "flex-end"),
}

TEXT_ALIGN = {"leading": "left", "center": "center", "trailing": "right"}

EASING = {
    "linear": "linear",
    "easeIn": "ease-in",
    "easeOut": "ease-out",
    "easeInOut": "ease-in-out",
    "default": "ease-in-out",
    "spring": "cubic-bezier(0.5, 1.5, 0.5, 1)",
    "bouncy": "cubic-bezier(0.5, 1.6, 0.4, 1)",
    "interactiveSpring": "cubic-bezier(0.5, 1.4, 0.5, 1)",
}

CONTROL_SIZES = {"mini": 11, "small": 13, "regular": 15, "large": 17, "extraLarge": 20}

GRADIENT_DIRECTIONS = {
    "top": "to top",
    "bottom": "to bottom",
    "leading": "to left",
    "trailing": "to right",
    "topLeading": "to top left",
    "topTrailing": "to top right",
    "bottomLeading": "to bottom left",
    "bottomTrailing": "to bottom right",
}

_HEX = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB = re.compile(r"^rgb\(([^)]*)\)$")


class StyleBuilder:
    """Ordered CSS declarations with composed filter and transform lists."""

    def __init__(self):
        self.declarations = []
        self._filters = []
        self._transforms = []
        self._decorations = []

    def add(self, prop, value):
        if value is None:
            return
        self.declarations.append((prop, str(value)))

    def filter(self, function):
        self._filters.append(function)
        self.add("filter", " ".join(self._filters))

    def transform(self, function):
        self._transforms.append(function)
        self.add("transform", " ".join(self._transforms))

    def decoration(self, line):
        if line not in self._decorations:
            self._decorations.append(line)
        self.add("text-decoration-line", " ".join(self._decorations))

    def extend(self, declarations):
        for prop, value in declarations:
            self.add(prop, value)

    def value(self, prop):
        """Effective value of a property, the last declaration."""
        for name, value in reversed(self.declarations):
            if name == prop:
                return value
        return None

    def text(self):
        return style_attribute(self.declarations)


def style_attribute(declarations):
    """Join declarations into the text of a style attribute."""
    return "; ".join(f"{prop}: {value}" for prop, value in declarations)


def _px(value):
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}px"


def css_color(token, opacity=None):
    """CSS color for a color token from the modifier interpreter."""
    if not token:
        return None
    css = COLORS.get(token)
    if css is None:
        match = _HEX.match(token)
        if match and (token.startswith("#") or len(match.group(1)) >= 6):
            css = "#" + match.group(1).lower()
        elif _RGB.match(token):
            css = token
        else:
            # asset colors and anything exotic show as neutral gray
            css = COLORS["gray"]
    if opacity is None:
        return css
    return _with_opacity(css, opacity)


def _with_opacity(css, opacity):
    if css == "transparent":
        return css
    match = _RGB.match(css)
    if match:
        return f"rgba({match.group(1)}, {opacity})"
    if css.startswith("#"):
        digits = css[1:]
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        red, green, blue = (int(digits[index:index + 2], 16) for index in (0, 2, 4))
        return f"rgba({red}, {green}, {blue}, {opacity})"
    percent = round(float(opacity) * 100)
    return f"color-mix(in srgb, {css} {percent}%, transparent)"


def gradient_css(node):
    """CSS gradient for a gradient view node, None for other nodes."""
    colors = [css_color(color) for color in node.props.get("colors", [])]
    colors = [color for color in colors if color]
    if not colors:
        colors = [COLORS["gray"]]
    if len(colors) == 1:
        colors = colors * 2
    stops = ", ".join(colors)
    if node.kind == "LinearGradient":
        direction = GRADIENT_DIRECTIONS.get(node.props.get("endPoint"), "to bottom")
        return f"linear-gradient({direction}, {stops})"
    if node.kind == "RadialGradient":
        end = node.props.get("endRadius")
        shape = f"circle {_px(end)}" if end else "circle"
        return f"radial-gradient({shape} at center, {stops})"
    return None


def _font(style, mod):
    args = mod.args
    if "style" in args and args["style"] in FONT_STYLES:
        size, weight = FONT_STYLES[args["style"]]
        style.add("font-size", _px(size))
        style.add("font-weight", weight)
    if "size" in args:
        style.add("font-size", _px(args["size"]))
    if "weight" in args:
        style.add("font-weight", FONT_WEIGHTS.get(args["weight"], 400))
    if "design" in args:
        style.add("font-family", FONT_DESIGNS.get(args["design"], FONT_DESIGNS["default"]))
    if "family" in args:
        family = args["family"].replace('"', "").replace("'", "")
        style.add("font-family", f"'{family}', {FONT_DESIGNS['default']}")
    if args.get("italic"):
        style.add("font-style", "italic")


def _padding(style, mod, options):
    args = mod.args
    default = options.default_padding
    if not args:
        style.add("padding", _px(default))
        return
    if "all" in args:
        style.add("padding", _px(args["all"]))
        return
    if "edges" in args:
        length = args.get("length", default)
        sides = set()
        for edge in args["edges"].split(","):
            sides.update(_EDGE_SIDES.get(edge, ()))
        for side in ("top", "right", "bottom", "left"):
            if side in sides:
                style.add(f"padding-{side}", _px(length))
        return
    for side, css_side in (("top", "top"), ("leading", "left"),
                           ("bottom", "bottom"), ("trailing", "right")):
        if side in args:
            style.add(f"padding-{css_side}", _px(args[side]))


_EDGE_SIDES = {
    "all": ("top", "right", "bottom", "left"),
    "horizontal": ("left", "right"),
    "vertical": ("top", "bottom"),
    "top": ("top",),
    "bottom": ("bottom",),
    "leading": ("left",),
    "trailing": ("right",),
}


def _frame(style, mod):
    args = mod.args
    for field, prop in (
        ("width", "width"), ("height", "height"),
        ("minWidth", "min-width"), ("maxWidth", "max-width"),
        ("minHeight", "min-height"), ("maxHeight", "max-height"),
        ("idealWidth", "width"), ("idealHeight", "height"),
    ):
        if field not in args:
            continue
        value = args[field]
        if value == "infinity":
            style.add(prop, "100%")
            if field == "maxWidth":
                style.add("width", "100%")
                style.add("align-self", "stretch")
            elif field == "maxHeight":
                style.add("height", "100%")
                style.add("flex-grow", 1)
        else:
            style.add(prop, _px(value))
    if "width" in args or "height" in args:
        style.add("flex-shrink", 0)
    alignment = args.get("alignment")
    if alignment in ALIGN_2D:
        justify, align = ALIGN_2D[alignment]
        style.add("display", "flex")
        style.add("justify-content", justify)
        style.add("align-items", align)


def _paint(style, mod, prop):
    """Color, material or gradient content for a color like modifier."""
    args = mod.args
    content = args.get("content")
    if isinstance(content, ViewNode):
        gradient = gradient_css(content)
        if gradient is None:
            return
        if prop == "color":
            style.add("background", gradient)
            style.add("-webkit-background-clip", "text")
            style.add("background-clip", "text")
            style.add("color", "transparent")
        else:
            style.add("background", gradient)
        return
    material = args.get("material")
    if material is not None:
        alpha, blur = MATERIALS.get(material, (0.65, 20))
        if prop != "color":
            style.add("background-color", f"rgba(255, 255, 255, {alpha})")
            style.add("backdrop-filter", f"blur({blur}px)")
            style.add("-webkit-backdrop-filter", f"blur({blur}px)")
        return
    style.add(prop, css_color(args.get("color"), args.get("opacity")))


def _clip(style, mod):
    shape = mod.args.get("shape")
    if shape in ("Circle", "Ellipse"):
        style.add("border-radius", "50%")
    elif shape == "Capsule":
        style.add("border-radius", "9999px")
    elif shape in ("RoundedRectangle", "Rect") and "cornerRadius" in mod.args:
        style.add("border-radius", _px(mod.args["cornerRadius"]))
    style.add("overflow", "hidden")


def _line_limit(style, mod):
    lines = mod.args.get("lines")
    if lines is None:
        return
    style.add("overflow", "hidden")
    if lines == 1:
        style.add("white-space", "nowrap")
        style.add("text-overflow", "ellipsis")
        return
    style.add("display", "-webkit-box")
    style.add("-webkit-box-orient", "vertical")
    style.add("-webkit-line-clamp", lines)


def _shadow(style, mod):
    args = mod.args
    color = css_color(args.get("color"), args.get("opacity")) or "rgba(0, 0, 0, 0.33)"
    radius = args.get("radius", 0)
    style.add(
        "box-shadow",
        f"{_px(args.get('x', 0))} {_px(args.get('y', 0))} {_px(radius)} {color}",
    )


def _degrees(args):
    if "radians" in args:
        return args["radians"] * 180 / math.pi
    return args.get("degrees", 0)


def _number_text(value):
    value = round(float(value), 4)
    return str(int(value)) if value.is_integer() else str(value)


def style_declarations(node, options):
    """Fold a node's modifiers into CSS declarations.

    Args:
        node: (ViewNode) Node whose modifiers are folded
        options: Render options providing `default_padding`

    Returns:
        (StyleBuilder) Declarations in emission order
    """
    style = StyleBuilder()
    shape = node.kind in SHAPE_KINDS
    for mod in node.modifiers:
        args = mod.args
        match mod.name:
            case "padding":
                _padding(style, mod, options)
            case "frame":
                _frame(style, mod)
            case "offset":
                style.transform(f"translate({_px(args.get('x', 0))}, {_px(args.get('y', 0))})")
            case "position":
                style.add("position", "absolute")
                style.add("left", _px(args.get("x", 0)))
                style.add("top", _px(args.get("y", 0)))
                style.transform("translate(-50%, -50%)")
            case "cornerRadius":
                if "radius" in args:
                    style.add("border-radius", _px(args["radius"]))
                    style.add("overflow", "hidden")
            case "opacity":
                style.add("opacity", args.get("value"))
            case "blur":
                style.filter(f"blur({_px(args.get('radius', 0))})")
            case "brightness":
                style.filter(f"brightness({_number_text(1 + args.get('amount', 0))})")
            case "contrast":
                style.filter(f"contrast({_number_text(args.get('amount', 1))})")
            case "saturation":
                style.filter(f"saturate({_number_text(args.get('amount', 1))})")
            case "grayscale":
                style.filter(f"grayscale({_number_text(args.get('amount', 0))})")
            case "hueRotation":
                style.filter(f"hue-rotate({_number_text(args.get('degrees', 0))}deg)")
            case "rotationEffect":
                style.transform(f"rotate({_number_text(_degrees(args))}deg)")
            case "scaleEffect":
                if "scale" in args:
                    style.transform(f"scale({_number_text(args['scale'])})")
                elif "x" in args or "y" in args:
                    scale_x = _number_text(args.get("x", 1))
                    scale_y = _number_text(args.get("y", 1))
                    style.transform(f"scale({scale_x}, {scale_y})")
            case "shadow":
                _shadow(style, mod)
            case "lineLimit":
                _line_limit(style, mod)
            case "foregroundColor" | "foregroundStyle":
                _paint(style, mod, "background-color" if shape else "color")
            case "fill":
                _paint(style, mod, "background-color")
            case "background":
                if not isinstance(args.get("content"), ViewNode) or gradient_css(args["content"]):
                    _paint(style, mod, "background-color")
            case "tint" | "accentColor":
                color = css_color(args.get("color"), args.get("opacity"))
                style.add("accent-color", color)
                style.add("--sp-tint", color)
            case "stroke" | "strokeBorder":
                if shape:
                    style.add("background-color", "transparent")
                color = css_color(args.get("color"), args.get("opacity")) or "currentColor"
                style.add("border", f"{_px(args.get('lineWidth', 1))} solid {color}")
            case "border":
                color = css_color(args.get("color"), args.get("opacity")) or "currentColor"
                style.add("border", f"{_px(args.get('width', 1))} solid {color}")
            case "font":
                _font(style, mod)
            case "fontWeight":
                style.add("font-weight", FONT_WEIGHTS.get(args.get("weight"), 400))
            case "fontDesign":
                style.add("font-family", FONT_DESIGNS.get(args.get("design"), FONT_DESIGNS["default"]))
            case "bold":
                if args.get("active", True):
                    style.add("font-weight", 700)
            case "italic":
                if args.get("active", True):
                    style.add("font-style", "italic")
            case "underline":
                if args.get("active", True):
                    style.decoration("underline")
            case "strikethrough":
                if args.get("active", True):
                    style.decoration("line-through")
            case "monospaced":
                if args.get("active", True):
                    style.add("font-family", FONT_DESIGNS["monospaced"])
            case "kerning" | "tracking":
                style.add("letter-spacing", _px(args.get("amount", 0)))
            case "lineSpacing":
                style.add("line-height", f"calc(1.3em + {_px(args.get('amount', 0))})")
            case "multilineTextAlignment":
                style.add("text-align", TEXT_ALIGN.get(args.get("alignment"), "left"))
            case "textCase":
                if args.get("case") == "uppercase":
                    style.add("text-transform", "uppercase")
                elif args.get("case") == "lowercase":
                    style.add("text-transform", "lowercase")
            case "clipShape" | "mask":
                _clip(style, mod)
            case "clipped":
                style.add("overflow", "hidden")
            case "aspectRatio":
                if "ratio" in args:
                    style.add("aspect-ratio", _number_text(args["ratio"]))
                if args.get("contentMode") == "fill":
                    style.add("object-fit", "cover")
                elif args.get("contentMode") == "fit":
                    style.add("object-fit", "contain")
            case "scaledToFit":
                style.add("object-fit", "contain")
            case "scaledToFill":
                style.add("object-fit", "cover")
            case "resizable":
                style.add("width", "100%")
                style.add("height", "100%")
            case "zIndex":
                style.add("position", "relative")
                style.add("z-index", args.get("value"))
            case "layoutPriority":
                if args.get("value", 0) > 0:
                    style.add("flex-shrink", 0)
            case "fixedSize":
                style.add("flex-shrink", 0)
                style.add("white-space", "nowrap")
            case "hidden":
                style.add("visibility", "hidden")
            case "disabled":
                if args.get("active"):
                    style.add("opacity", 0.5)
                    style.add("pointer-events", "none")
            case "onTapGesture" | "onLongPressGesture":
                style.add("cursor", "pointer")
            case "animation":
                duration = args.get("duration", 0.35)
                easing = EASING.get(args.get("curve"), "ease-in-out")
                style.add("transition", f"all {_number_text(duration)}s {easing}")
            case "controlSize":
                size = CONTROL_SIZES.get(args.get("size"))
                if size:
                    style.add("font-size", _px(size))
            case "compositingGroup" | "drawingGroup":
                style.add("isolation", "isolate")
            case _:
                # structural or behavior only modifiers
                pass
    return style
