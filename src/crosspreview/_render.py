"""Render view trees into HTML markup.

`render` is a pure function of its input: it never mutates the tree it is
given and never raises. Each view kind has a renderer in `_RENDERERS`,
anything else shows as a placeholder carrying the kind name. All text from
the source is escaped exactly once, when it is inserted into markup.
"""

__all__ = [
    "RenderOptions",
    "render",
    "render_error_banner",
    "expand_for_each",
    "iteration_values",
]

import html
import logging
import re
from dataclasses import dataclass

from ._style import (
    ALIGN_2D,
    ALIGN_ITEMS,
    SHAPE_KINDS,
    StyleBuilder,
    css_color,
    gradient_css,
    style_declarations,
)
from ._view import ViewNode, clone_tree


logger = logging.getLogger(__name__)

# SF Symbol names to a close unicode glyph
SYMBOLS = {
    "star": "☆",
    "star.fill": "★",
    "heart": "♡",
    "heart.fill": "♥",
    "house": "⌂",
    "house.fill": "⌂",
    "gear": "⚙",
    "gearshape": "⚙",
    "gearshape.fill": "⚙",
    "person": "\U0001F464",
    "person.fill": "\U0001F464",
    "person.circle": "\U0001F464",
    "magnifyingglass": "\U0001F50D",
    "bell": "\U0001F514",
    "bell.fill": "\U0001F514",
    "envelope": "✉",
    "envelope.fill": "✉",
    "checkmark": "✓",
    "checkmark.circle": "✓",
    "checkmark.circle.fill": "✔",
    "xmark": "✕",
    "xmark.circle": "✕",
    "xmark.circle.fill": "✖",
    "plus": "+",
    "plus.circle": "⊕",
    "plus.circle.fill": "⊕",
    "minus": "−",
    "trash": "\U0001F5D1",
    "pencil": "✎",
    "square.and.pencil": "✎",
    "chevron.right": "›",
    "chevron.left": "‹",
    "chevron.down": "⌄",
    "chevron.up": "⌃",
    "arrow.right": "→",
    "arrow.left": "←",
    "arrow.up": "↑",
    "arrow.down": "↓",
    "info.circle": "ⓘ",
    "exclamationmark.triangle": "⚠",
    "exclamationmark.triangle.fill": "⚠",
    "cloud": "☁",
    "cloud.fill": "☁",
    "sun.max": "☀",
    "sun.max.fill": "☀",
    "moon": "☾",
    "moon.fill": "☾",
    "bolt": "⚡",
    "bolt.fill": "⚡",
    "globe": "\U0001F310",
    "lock": "\U0001F512",
    "lock.fill": "\U0001F512",
    "cart": "\U0001F6D2",
    "photo": "\U0001F5BC",
    "calendar": "\U0001F4C5",
    "clock": "\U0001F552",
    "book": "\U0001F4D6",
    "music.note": "♪",
    "play.fill": "▶",
    "pause.fill": "⏸",
    "flag": "⚑",
    "flag.fill": "⚑",
    "bookmark": "\U0001F516",
    "square.and.arrow.up": "⇪",
    "list.bullet": "☰",
    "ellipsis": "…",
    "circle": "○",
    "circle.fill": "●",
}
DEFAULT_SYMBOL = "▢"

TEXT_PROPS = ("text", "title", "placeholder", "footer", "name", "systemName", "url")

_SAFE_URL = re.compile(r"^(https?:|mailto:|tel:)", re.IGNORECASE)


@dataclass
class RenderOptions:
    """Settings for rendering.

    Attributes:
        default_padding: (float) Padding in px for `.padding()` without a value
        unresolved_rows: (int) Rows shown for a `ForEach` whose item source
            cannot be resolved statically
    """

    default_padding: float = 8
    unresolved_rows: int = 3


def escape(text):
    return html.escape(str(text), quote=True)


def render(node, options=None):
    """Render a view tree into HTML markup.

    Args:
        node: (ViewNode) Root of the tree, it is not modified
        options: (RenderOptions | None) Rendering settings

    Returns:
        (str) HTML fragment
    """
    options = options or RenderOptions()
    if not isinstance(node, ViewNode):
        return _unknown_markup(type(node).__name__)
    return _node(node, options)


def render_error_banner(errors):
    """Markup listing parse diagnostics, empty when there are none."""
    errors = list(errors)
    if not errors:
        return ""
    count = len(errors)
    heading = "1 problem" if count == 1 else f"{count} problems"
    items = "".join(f"<li>{escape(message)}</li>" for message in errors)
    return (
        f'<div class="sp-errors" role="alert">'
        f"<strong>Preview: {heading}</strong><ul>{items}</ul></div>"
    )


def iteration_values(node, options):
    """Values a `ForEach` iterates over."""
    props = node.props
    bounds = props.get("forEachRange")
    if bounds is not None:
        end = bounds["end"] + (1 if bounds.get("inclusive") else 0)
        return list(range(bounds["start"], end))
    items = props.get("forEachItems")
    if items is not None:
        return list(items)
    return [f"Item {index + 1}" for index in range(options.unresolved_rows)]


def expand_for_each(node, options=None):
    """Expand a `ForEach` into one fresh copy of its row per iteration.

    Every row is a deep clone of the template, with `\\(variable)`
    interpolations in its text replaced by the iteration value.

    Returns:
        (list[ViewNode]) Rows in iteration order, empty without a template
    """
    options = options or RenderOptions()
    template = node.props.get("rowTemplate")
    if not isinstance(template, ViewNode):
        return []
    variable = node.props.get("variable")
    rows = []
    for value in iteration_values(node, options):
        row = clone_tree(template)
        if variable:
            _substitute(row, variable, value)
        rows.append(row)
    return rows


def _substitute(row, variable, value):
    pattern = re.compile(r"\\\(\s*" + re.escape(variable) + r"(?:\.[\w.]+)?\s*\)")
    replacement = str(value)
    for node in row.walk():
        for key in TEXT_PROPS:
            text = node.props.get(key)
            if isinstance(text, str) and "\\(" in text:
                node.props[key] = pattern.sub(lambda _: replacement, text)


def _node(node, options):
    """Markup for one node, including structural modifiers."""
    renderer = _RENDERERS.get(node.kind)
    if renderer is None:
        return _unknown_markup(node.kind)
    try:
        markup = renderer(node, options)
        return _wrap_structural(node, markup, options)
    except (TypeError, ValueError, KeyError, AttributeError) as err:
        logger.debug("Cannot render %s: %s", node.kind, err)
        return _unknown_markup(node.kind)


def _unknown_markup(kind):
    return f'<div class="sp-unknown">{escape(kind)}</div>'


def _children(node, options):
    """Rendered children, with `ForEach` children expanded in place."""
    parts = []
    for child in _flat_children(node, options):
        parts.append(_node(child, options))
    return parts


def _flat_children(node, options):
    children = []
    for child in node.children:
        if child.kind == "ForEach":
            if child.modifiers:
                children.append(child)
            else:
                children.extend(expand_for_each(child, options))
        else:
            children.append(child)
    return children


def _element(tag, node, options, content="", base=(), cls=None, attrs=None):
    """Assemble an element with base styles followed by modifier styles."""
    style = StyleBuilder()
    style.extend(base)
    style.extend(style_declarations(node, options).declarations)
    attributes = {"class": cls or f"sp-{node.kind.lower()}"}
    attributes.update(attrs or {})
    attributes.update(_aria(node))
    text = style.text()
    if text:
        attributes["style"] = text
    rendered = "".join(
        f' {name}="{escape(value)}"' if value is not True else f" {name}"
        for name, value in attributes.items()
        if value is not None and value is not False
    )
    if tag in ("input", "hr", "img"):
        return f"<{tag}{rendered}>"
    return f"<{tag}{rendered}>{content}</{tag}>"


def _aria(node):
    attrs = {}
    for name, attr in (
        ("accessibilityLabel", "aria-label"),
        ("accessibilityHint", "aria-description"),
        ("accessibilityValue", "aria-valuetext"),
        ("help", "title"),
    ):
        mod = node.modifier(name)
        if mod is not None and mod.get("text"):
            attrs[attr] = mod["text"]
    if node.modifier("hidden") is not None:
        attrs["aria-hidden"] = "true"
    return attrs


def _wrap_structural(node, markup, options):
    """Apply modifiers that add markup around the node."""
    for mod in node.modifiers:
        content = mod.get("content")
        if mod.name == "background" and isinstance(content, ViewNode) and gradient_css(content) is None:
            layer = _node(content, options)
            markup = (
                '<div class="sp-layered" style="position: relative; isolation: isolate">'
                '<div class="sp-background" style="position: absolute; inset: 0; z-index: -1; '
                f'display: flex">{layer}</div>{markup}</div>'
            )
        elif mod.name == "overlay" and isinstance(content, ViewNode):
            justify, align = ALIGN_2D.get(mod.get("alignment"), ALIGN_2D["center"])
            layer = _node(content, options)
            markup = (
                '<div class="sp-layered" style="position: relative; display: inline-flex">'
                f"{markup}"
                '<div class="sp-overlay" style="position: absolute; inset: 0; display: flex; '
                f'justify-content: {justify}; align-items: {align}; pointer-events: none">'
                f"{layer}</div></div>"
            )
        elif mod.name == "badge" and "value" in mod.args:
            markup = (
                '<div class="sp-layered" style="position: relative; display: inline-flex">'
                f'{markup}<span class="sp-badge">{escape(mod["value"])}</span></div>'
            )
    return markup


def _text_of(node):
    """First readable text in a subtree."""
    for item in node.walk():
        for key in ("text", "title"):
            value = item.props.get(key)
            if isinstance(value, str) and value:
                return value
    return ""


def _variant(node, name, default):
    """Style name set by a `.xxxStyle()` modifier, or the default."""
    style = node.modifier(name)
    if style is None:
        return default
    return style.get("style") or default


def _flex(direction, node, options, default_align="center"):
    spacing = node.props.get("spacing", 8)
    align = ALIGN_ITEMS.get(node.props.get("alignment"), ALIGN_ITEMS[default_align])
    base = [
        ("display", "flex"),
        ("flex-direction", direction),
        ("align-items", align),
        ("gap", f"{spacing}px"),
    ]
    return _element("div", node, options, "".join(_children(node, options)), base)


def _vstack(node, options):
    return _flex("column", node, options)


def _hstack(node, options):
    return _flex("row", node, options)


def _zstack(node, options):
    justify, align = ALIGN_2D.get(node.props.get("alignment"), ALIGN_2D["center"])
    layers = "".join(
        f'<div class="sp-layer" style="grid-area: 1 / 1; display: flex; '
        f'justify-content: {justify}; align-items: {align}">{part}</div>'
        for part in _children(node, options)
    )
    return _element("div", node, options, layers, [("display", "grid")])


def _group(node, options):
    if "placeholder" in node.props:
        content = "".join(_children(node, options))
        return _element("div", node, options, content, cls="sp-placeholder",
                        attrs={"data-view": node.props["placeholder"]})
    return _flex("column", node, options)


def _list(node, options):
    variant = _variant(node, "listStyle", "insetGrouped")
    rows = []
    for child in _flat_children(node, options):
        markup = _node(child, options)
        if child.kind == "Section":
            rows.append(markup)
        else:
            rows.append(f'<div class="sp-row" role="listitem">{markup}</div>')
    return _element(
        "div", node, options, "".join(rows),
        cls=f"sp-list sp-list-{variant}", attrs={"role": "list"},
    )


def _form(node, options):
    rows = []
    for child in _flat_children(node, options):
        markup = _node(child, options)
        if child.kind == "Section":
            rows.append(markup)
        else:
            rows.append(f'<div class="sp-row">{markup}</div>')
    return _element("form", node, options, "".join(rows), cls="sp-form sp-list")


def _section(node, options):
    parts = []
    title = node.props.get("title")
    if title:
        parts.append(f'<div class="sp-section-header">{escape(title)}</div>')
    rows = "".join(
        f'<div class="sp-row" role="listitem">{markup}</div>'
        for markup in _children(node, options)
    )
    parts.append(f'<div class="sp-section-rows">{rows}</div>')
    footer = node.props.get("footer")
    if footer:
        parts.append(f'<div class="sp-section-footer">{escape(footer)}</div>')
    return _element("section", node, options, "".join(parts))


def _scroll_view(node, options):
    horizontal = node.props.get("axis") == "horizontal"
    base = [
        ("display", "flex"),
        ("flex-direction", "row" if horizontal else "column"),
        ("gap", "8px"),
        ("overflow-x" if horizontal else "overflow-y", "auto"),
    ]
    return _element("div", node, options, "".join(_children(node, options)), base)


def _grid(node, options):
    rows = _flat_children(node, options)
    columns = max(
        [len(row.children) for row in rows if row.kind == "GridRow"] or [1]
    )
    cells = []
    for row in rows:
        if row.kind == "GridRow":
            cells.append(_element(
                "div", row, options, "".join(_children(row, options)),
                [("display", "contents")],
            ))
        else:
            cells.append(
                f'<div style="grid-column: 1 / -1">{_node(row, options)}</div>'
            )
    base = [
        ("display", "grid"),
        ("grid-template-columns", f"repeat({columns}, auto)"),
        ("column-gap", f"{node.props.get('horizontalSpacing', 8)}px"),
        ("row-gap", f"{node.props.get('verticalSpacing', 8)}px"),
    ]
    return _element("div", node, options, "".join(cells), base)


def _grid_row(node, options):
    return _flex("row", node, options)


def _navigation(node, options):
    title = mode = None
    toolbar = []
    search = None
    for item in node.walk():
        mod = item.modifier("navigationTitle")
        if mod is not None and title is None:
            title = mod.get("title")
            display = item.modifier("navigationBarTitleDisplayMode")
            mode = display.get("mode") if display is not None else None
        mod = item.modifier("toolbar")
        if mod is not None and isinstance(mod.get("content"), ViewNode):
            toolbar.append(_node(mod["content"], options))
        mod = item.modifier("searchable")
        if mod is not None and search is None:
            search = mod.get("prompt", "Search")
    bar = ""
    if title or toolbar:
        inline = mode == "inline"
        cls = "sp-nav-title-inline" if inline else "sp-nav-title"
        tools = f'<div class="sp-toolbar">{"".join(toolbar)}</div>' if toolbar else ""
        heading = f'<h1 class="{cls}">{escape(title)}</h1>' if title else ""
        bar = f'<header class="sp-navbar">{tools}{heading}</header>'
    if search is not None:
        bar += (
            f'<input class="sp-search" type="search" placeholder="{escape(search)}" '
            'readonly tabindex="-1">'
        )
    content = "".join(_children(node, options))
    return _element("div", node, options, bar + f'<div class="sp-nav-content">{content}</div>')


def _split_view(node, options):
    parts = _children(node, options)
    if not parts:
        return _element("div", node, options)
    sidebar = f'<aside class="sp-sidebar">{parts[0]}</aside>'
    detail = f'<div class="sp-detail">{"".join(parts[1:])}</div>'
    return _element("div", node, options, sidebar + detail, [("display", "flex")])


def _tab_view(node, options):
    children = _flat_children(node, options)
    tabs = []
    for index, child in enumerate(children):
        mod = child.modifier("tabItem")
        label = ""
        if mod is not None and isinstance(mod.get("content"), ViewNode):
            label = _tab_label(mod["content"])
        if not label:
            label = escape(f"Tab {index + 1}")
        selected = " sp-tab-selected" if index == 0 else ""
        tabs.append(f'<div class="sp-tab{selected}" role="tab">{label}</div>')
    content = _node(children[0], options) if children else ""
    return _element(
        "div", node, options,
        f'<div class="sp-tab-content">{content}</div>'
        f'<nav class="sp-tabbar" role="tablist">{"".join(tabs)}</nav>',
    )


def _tab_label(content):
    icon = ""
    for item in content.walk():
        symbol = item.props.get("systemName") or item.props.get("systemImage")
        if symbol:
            icon = f'<span class="sp-tab-icon">{escape(SYMBOLS.get(symbol, DEFAULT_SYMBOL))}</span>'
            break
    text = _text_of(content)
    return f"{icon}<span>{escape(text)}</span>"


def _disclosure(node, options):
    title = escape(node.props.get("title", ""))
    content = "".join(_children(node, options))
    return _element("details", node, options, f"<summary>{title}</summary>{content}",
                    attrs={"open": True})


def _menu(node, options):
    title = escape(node.props.get("title", "Menu"))
    content = "".join(_children(node, options))
    return _element(
        "details", node, options,
        f'<summary class="sp-menu-label">{title} ▾</summary>'
        f'<div class="sp-menu-items">{content}</div>',
    )


def _picker(node, options):
    labels = [_text_of(child) for child in _flat_children(node, options)]
    title = node.props.get("title", "")
    style = node.modifier("pickerStyle")
    if style is not None and style.get("style") == "segmented":
        segments = "".join(
            f'<span class="sp-segment{" sp-segment-selected" if index == 0 else ""}">'
            f"{escape(label)}</span>"
            for index, label in enumerate(labels)
        )
        return _element("div", node, options, segments, cls="sp-picker sp-segmented")
    choices = "".join(f"<option>{escape(label)}</option>" for label in labels)
    heading = ""
    if title and node.modifier("labelsHidden") is None:
        heading = f'<span class="sp-control-title">{escape(title)}</span>'
    return _element(
        "label", node, options,
        f'{heading}<select disabled>{choices}</select>', cls="sp-picker sp-control",
    )


def _for_each(node, options):
    rows = "".join(_node(row, options) for row in expand_for_each(node, options))
    return _element("div", node, options, rows, [("display", "contents")])


def _text(node, options):
    return _element("span", node, options, escape(node.props.get("text", "")))


def _symbol(name):
    return escape(SYMBOLS.get(name, DEFAULT_SYMBOL))


def _image(node, options):
    system = node.props.get("systemName")
    if system is not None:
        return _element(
            "span", node, options, _symbol(system),
            cls="sp-symbol", attrs={"role": "img", "aria-label": system},
        )
    name = node.props.get("name", "")
    return _element(
        "div", node, options, escape(name),
        cls="sp-image", attrs={"role": "img", "aria-label": name},
    )


def _async_image(node, options):
    url = node.props.get("url", "")
    if not _SAFE_URL.match(url):
        return _element("div", node, options, "", cls="sp-image")
    return _element("img", node, options, cls="sp-async-image", attrs={"src": url, "alt": ""})


def _spacer(node, options):
    length = node.props.get("minLength")
    base = [("flex", "1 1 auto")]
    if length is not None:
        base += [("min-width", f"{length}px"), ("min-height", f"{length}px")]
    return _element("div", node, options, "", base)


def _divider(node, options):
    return _element("div", node, options, "", [
        ("align-self", "stretch"),
        ("min-height", "1px"),
        ("min-width", "1px"),
        ("background-color", "rgba(60, 60, 67, 0.29)"),
    ], attrs={"role": "separator"})


def _button(node, options):
    content = "".join(_children(node, options)) or escape(node.props.get("title", ""))
    variant = _variant(node, "buttonStyle", "automatic")
    cls = f"sp-button sp-button-{variant}"
    if node.props.get("role") == "destructive":
        cls += " sp-button-destructive"
    return _element("button", node, options, content, cls=cls, attrs={"type": "button"})


def _toggle(node, options):
    label = "".join(_children(node, options)) or escape(node.props.get("title", ""))
    if node.modifier("labelsHidden") is not None:
        label = ""
    switch = '<span class="sp-switch" role="switch" aria-checked="false"></span>'
    return _element(
        "label", node, options,
        f'<span class="sp-control-title">{label}</span>{switch}', cls="sp-toggle sp-control",
    )


def _text_field(node, options):
    kind = "password" if node.kind == "SecureField" else "text"
    variant = _variant(node, "textFieldStyle", "automatic")
    return _element("input", node, options, cls=f"sp-textfield sp-textfield-{variant}", attrs={
        "type": kind,
        "placeholder": node.props.get("placeholder", ""),
        "readonly": True,
        "tabindex": "-1",
    })


def _text_editor(node, options):
    return _element("textarea", node, options, "", attrs={"readonly": True, "tabindex": "-1"})


def _shape(node, options):
    base = [
        ("flex", "1 1 auto"),
        ("align-self", "stretch"),
        ("min-width", "10px"),
        ("min-height", "10px"),
        ("background-color", "#000000"),
    ]
    match node.kind:
        case "Circle":
            base += [("border-radius", "50%"), ("aspect-ratio", "1")]
        case "Ellipse":
            base.append(("border-radius", "50%"))
        case "Capsule":
            base.append(("border-radius", "9999px"))
        case "RoundedRectangle":
            base.append(("border-radius", f"{node.props.get('cornerRadius', 0)}px"))
    return _element("div", node, options, "", base, cls=f"sp-shape sp-{node.kind.lower()}")


def _label(node, options):
    children = "".join(_children(node, options))
    if children:
        return _element("span", node, options, children, [("display", "inline-flex"), ("gap", "6px")])
    icon = ""
    symbol = node.props.get("systemImage")
    if symbol:
        icon = f'<span class="sp-symbol">{_symbol(symbol)}</span>'
    title = escape(node.props.get("title", ""))
    return _element(
        "span", node, options, f"{icon}<span>{title}</span>",
        [("display", "inline-flex"), ("gap", "6px"), ("align-items", "center")],
    )


def _slider(node, options):
    low = node.props.get("min", 0)
    high = node.props.get("max", 1)
    attrs = {
        "type": "range",
        "min": low,
        "max": high,
        "value": (low + high) / 2,
        "disabled": True,
    }
    if "step" in node.props:
        attrs["step"] = node.props["step"]
    return _element("input", node, options, cls="sp-slider", attrs=attrs)


def _stepper(node, options):
    title = escape(node.props.get("title", ""))
    buttons = '<span class="sp-stepper-buttons"><span>−</span><span>+</span></span>'
    return _element(
        "div", node, options,
        f'<span class="sp-control-title">{title}</span>{buttons}', cls="sp-stepper sp-control",
    )


def _date_picker(node, options):
    title = escape(node.props.get("title", ""))
    return _element(
        "div", node, options,
        f'<span class="sp-control-title">{title}</span><span class="sp-chip">Jan 1, 2025</span>',
        cls="sp-datepicker sp-control",
    )


def _color_picker(node, options):
    title = escape(node.props.get("title", ""))
    return _element(
        "div", node, options,
        f'<span class="sp-control-title">{title}</span><span class="sp-swatch"></span>',
        cls="sp-colorpicker sp-control",
    )


def _progress(node, options):
    title = node.props.get("title")
    heading = f'<span class="sp-control-title">{escape(title)}</span>' if title else ""
    value = node.props.get("value")
    if value is None:
        return _element("div", node, options, f'<span class="sp-spinner"></span>{heading}')
    total = node.props.get("total", 1)
    bar = f'<progress value="{escape(value)}" max="{escape(total)}"></progress>'
    return _element("div", node, options, heading + bar)


def _link(node, options):
    url = node.props.get("url", "")
    content = "".join(_children(node, options)) or escape(node.props.get("title", ""))
    href = url if _SAFE_URL.match(url) else "#"
    return _element("a", node, options, content, attrs={"href": href})


def _gradient(node, options):
    base = [
        ("flex", "1 1 auto"),
        ("align-self", "stretch"),
        ("min-height", "10px"),
        ("background", gradient_css(node)),
    ]
    return _element("div", node, options, "", base, cls="sp-gradient")


def _navigation_link(node, options):
    content = "".join(_children(node, options)) or escape(node.props.get("title", ""))
    return _element(
        "div", node, options,
        f'<span class="sp-link-label">{content}</span><span class="sp-chevron">›</span>',
        cls="sp-navigationlink", attrs={"role": "link"},
    )


def _custom(node, options):
    name = node.props.get("name", "Custom")
    return _element("div", node, options, escape(f"<{name}>"), cls="sp-placeholder")


def _geometry_reader(node, options):
    content = "".join(_children(node, options))
    return _element("div", node, options, content, [("width", "100%"), ("display", "flex"),
                                                    ("flex-direction", "column")])


_RENDERERS = {
    "VStack": _vstack,
    "LazyVStack": _vstack,
    "HStack": _hstack,
    "LazyHStack": _hstack,
    "ZStack": _zstack,
    "Group": _group,
    "List": _list,
    "Form": _form,
    "Section": _section,
    "ScrollView": _scroll_view,
    "Grid": _grid,
    "GridRow": _grid_row,
    "GeometryReader": _geometry_reader,
    "NavigationView": _navigation,
    "NavigationStack": _navigation,
    "NavigationSplitView": _split_view,
    "TabView": _tab_view,
    "DisclosureGroup": _disclosure,
    "Menu": _menu,
    "Picker": _picker,
    "ForEach": _for_each,
    "Text": _text,
    "Image": _image,
    "AsyncImage": _async_image,
    "Spacer": _spacer,
    "Divider": _divider,
    "Button": _button,
    "Toggle": _toggle,
    "TextField": _text_field,
    "SecureField": _text_field,
    "TextEditor": _text_editor,
    "Label": _label,
    "Slider": _slider,
    "Stepper": _stepper,
    "DatePicker": _date_picker,
    "ColorPicker": _color_picker,
    "ProgressView": _progress,
    "Link": _link,
    "LinearGradient": _gradient,
    "RadialGradient": _gradient,
    "NavigationLink": _navigation_link,
    "Custom": _custom,
}
for _kind in SHAPE_KINDS:
    _RENDERERS[_kind] = _shape
