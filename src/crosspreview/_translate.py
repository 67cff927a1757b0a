"""Translate view expressions into `ViewNode` trees.

`ViewTranslator` holds the table of known view constructors. It works on
path neutral data (constructor name, `Argument` list, `Closure` list) so
the structural parser and the fallback parser build identical nodes.
`TreeTranslator` walks lark trees from the syntax provider and feeds that
table.
"""

__all__ = [
    "Closure",
    "ViewTranslator",
    "TreeTranslator",
    "CONSTRUCTORS",
    "snippet",
]

import logging
import re

import lark

from ._error import ErrorCollector
from ._modifiers import TRAILING, interpret_modifier
from ._syntax import source_text, subtrees, tokens_of, tree_line
from ._values import (
    Argument,
    array_items,
    closing_index,
    color_value,
    enum_value,
    find_argument,
    number_value,
    positional,
    string_value,
)
from ._view import VIEW_KINDS, ViewNode, placeholder_node


logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"^[A-Z]\w*View$")
_RANGE_SPLIT = re.compile(r"(\.\.<|\.\.\.)")
_COUNT = re.compile(r"^([A-Za-z_]\w*)\.count$")
_INDICES = re.compile(r"^([A-Za-z_]\w*)\.indices$")


class Closure:
    """A trailing closure attached to a call.

    Args:
        label: (str | None) Label of the closure, None for the first one
        params: (list[str]) Closure parameter names
        body: Path specific handle to the closure statements
        text: (str) Source text of the whole closure
        line: (int | None) Source line of the closure
        tree: Syntax tree of the closure (structural path only)
    """

    __slots__ = ("label", "params", "body", "text", "line", "tree")

    def __init__(self, label, params, body, text="", line=None, tree=None):
        self.label = label
        self.params = params
        self.body = body
        self.text = text
        self.line = line
        self.tree = tree

    def __repr__(self):
        return f"Closure({self.label or ''}{', '.join(self.params)})"


def snippet(text, limit=60):
    """First line of a source fragment, shortened for messages."""
    text = text.strip()
    first = text.split("\n", 1)[0].strip()
    if len(first) > limit:
        return first[:limit - 3] + "..."
    if first != text:
        return first + " ..."
    return first


CONSTRUCTORS = {}


def _constructor(*names):
    """Register a view constructor handler for one or more names."""
    def register(func):
        for name in names:
            CONSTRUCTORS[name] = func
        return func
    return register


class ViewTranslator:
    """Builds view nodes from constructor calls.

    Subclasses provide `views(closure)` to translate the statements of a
    closure and `view(arg)` to translate an argument holding a view
    expression.

    Args:
        errors: (ErrorCollector | None) Collector for diagnostics
        constants: (dict | None) Property name to literal value, used to
            resolve `ForEach` sources
    """

    def __init__(self, errors=None, constants=None):
        self.errors = errors if errors is not None else ErrorCollector()
        self.constants = constants or {}

    def views(self, closure):
        raise NotImplementedError

    def view(self, arg):
        raise NotImplementedError

    def build(self, name, args, closures, line=None):
        """Create the node for a constructor call, or None if unknown."""
        handler = CONSTRUCTORS.get(name)
        if handler is not None:
            return handler(self, name, args, closures)
        if name == "Color":
            return self.color_view("Color(" + ", ".join(_arg_text(arg) for arg in args) + ")")
        if name == "EmptyView":
            return ViewNode("Group")
        if name == "AnyView":
            first = positional(args)
            return self.view(first) if first is not None else None
        if _PLACEHOLDER.match(name):
            logger.debug("Placeholder for custom view %s", name)
            return placeholder_node(name)
        return None

    def color_view(self, text):
        """A color used as a view is a filled rectangle."""
        node = ViewNode("Rectangle")
        self.modify(node, "fill", [Argument(None, text)])
        return node

    def modify(self, node, name, args, line=None):
        """Append an interpreted modifier to a node."""
        mod, error = interpret_modifier(name, args, self.view)
        if error:
            self.errors.add(error)
        node.modifiers.append(mod)
        return node

    def row(self, closure):
        """Single node for a closure body, a Group when it holds several."""
        if closure is None:
            return None
        nodes = self.views(closure)
        if not nodes:
            return None
        if len(nodes) == 1:
            return nodes[0]
        return ViewNode("Group", {}, [], nodes)

    def resolve_int(self, text):
        """Integer value of a literal, a numeric constant or `name.count`."""
        text = text.strip().strip("()").strip()
        if re.fullmatch(r"-?\d+", text):
            return int(text)
        value = self.constants.get(text)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        match = _COUNT.match(text)
        if match and isinstance(self.constants.get(match.group(1)), list):
            return len(self.constants[match.group(1)])
        return None

    def resolve_source(self, text):
        """Props describing the item source of a `ForEach`."""
        text = text.strip()
        if text.startswith("(") and text.endswith(")"):
            text = text[1:-1].strip()
        parts = _RANGE_SPLIT.split(text, maxsplit=1)
        if len(parts) == 3:
            start = self.resolve_int(parts[0])
            end = self.resolve_int(parts[2])
            if start is not None and end is not None:
                return {"forEachRange": {
                    "start": start, "end": end, "inclusive": parts[1] == "...",
                }}
            return {"itemsSource": text}
        items = array_items(text)
        if items is not None:
            return {"forEachItems": items}
        value = self.constants.get(text)
        if isinstance(value, list):
            return {"forEachItems": list(value)}
        match = _INDICES.match(text)
        if match and isinstance(self.constants.get(match.group(1)), list):
            count = len(self.constants[match.group(1)])
            return {"forEachRange": {"start": 0, "end": count, "inclusive": False}}
        return {"itemsSource": text}


def _arg_text(arg):
    if arg.label:
        return f"{arg.label}: {arg.text}"
    return arg.text


def _closure(closures, label=None):
    """Closure with the given label, None selects the first unlabeled one."""
    for closure in closures:
        if closure.label == label:
            return closure
    return None


def _children(translator, closures, label=None):
    closure = _closure(closures, label)
    if closure is None:
        return []
    return translator.views(closure)


def _title(args):
    """Leading string literal argument, `Text("...")` also counts."""
    first = positional(args)
    if first is None:
        return None
    return string_value(first.text)


def _binding(arg):
    if arg is None:
        return None
    return arg.text.lstrip("$")


def _number(arg):
    if arg is None:
        return None
    return number_value(arg.text)


def _enum(arg):
    if arg is None:
        return None
    return enum_value(arg.text)


def _bounds(text):
    """Lower and upper value of a range literal like `0...100`."""
    parts = _RANGE_SPLIT.split(text, maxsplit=1)
    if len(parts) != 3:
        return None, None
    return number_value(parts[0]), number_value(parts[2])


def _bracket_items(text):
    """Items of the first array literal found in the text."""
    start = text.find("[")
    if start < 0:
        return []
    end = closing_index(text, start)
    return array_items(text[start:end + 1]) or []


def _gradient_colors(args):
    arg = find_argument(args, "colors", "gradient", "stops")
    if arg is None:
        return []
    colors = []
    for item in _bracket_items(arg.text):
        item = str(item)
        match = re.search(r"color\s*:\s*(.+?)(?:,\s*location\s*:.*)?\)?$", item)
        if match:
            item = match.group(1)
        color, _ = color_value(item)
        if color:
            colors.append(color)
    return colors


def _props(**values):
    return {key: val for key, val in values.items() if val is not None}


# Leaf views


@_constructor("Text")
def _text(translator, name, args, closures):
    arg = positional(args) or find_argument(args, "verbatim")
    if arg is None:
        return ViewNode("Text", {"text": ""})
    text = string_value(arg.text)
    if text is None:
        # non literal text shows its expression as an interpolation
        text = f"\\({arg.text})"
    return ViewNode("Text", {"text": text})


@_constructor("Image")
def _image(translator, name, args, closures):
    system = find_argument(args, "systemName")
    if system is not None:
        return ViewNode("Image", _props(systemName=string_value(system.text)))
    first = positional(args)
    if first is not None:
        return ViewNode("Image", _props(name=string_value(first.text) or first.text))
    return ViewNode("Image")


@_constructor("Spacer")
def _spacer(translator, name, args, closures):
    return ViewNode("Spacer", _props(minLength=_number(find_argument(args, "minLength"))))


@_constructor("Divider", "Rectangle", "Circle", "Capsule", "Ellipse")
def _plain(translator, name, args, closures):
    return ViewNode(name)


@_constructor("RoundedRectangle")
def _rounded_rectangle(translator, name, args, closures):
    radius = find_argument(args, "cornerRadius", "cornerSize")
    return ViewNode(name, _props(cornerRadius=_number(radius)))


@_constructor("Button")
def _button(translator, name, args, closures):
    title = _title(args)
    node = ViewNode("Button", _props(title=title))
    role = find_argument(args, "role")
    if role is not None:
        node.props["role"] = enum_value(role.text)
    label = _closure(closures, "label")
    if label is not None:
        node.children = translator.views(label)
    elif title is None and len(closures) == 1:
        # Button(action: act) { Label } has its label as the closure
        node.children = translator.views(closures[0])
    return node


@_constructor("Toggle")
def _toggle(translator, name, args, closures):
    node = ViewNode("Toggle", _props(
        title=_title(args),
        binding=_binding(find_argument(args, "isOn")),
    ))
    node.children = _children(translator, closures)
    return node


@_constructor("TextField", "SecureField")
def _text_field(translator, name, args, closures):
    return ViewNode(name, _props(
        placeholder=_title(args),
        binding=_binding(find_argument(args, "text")),
    ))


@_constructor("TextEditor")
def _text_editor(translator, name, args, closures):
    return ViewNode(name, _props(binding=_binding(find_argument(args, "text"))))


@_constructor("Label")
def _label(translator, name, args, closures):
    system = find_argument(args, "systemImage")
    image = find_argument(args, "image")
    node = ViewNode("Label", _props(
        title=_title(args),
        systemImage=string_value(system.text) if system is not None else None,
        image=string_value(image.text) if image is not None else None,
    ))
    if closures:
        node.children = _children(translator, closures) + _children(translator, closures, "icon")
    return node


@_constructor("Slider")
def _slider(translator, name, args, closures):
    low = high = None
    bounds = find_argument(args, "in")
    if bounds is not None:
        low, high = _bounds(bounds.text)
    return ViewNode("Slider", _props(
        binding=_binding(find_argument(args, "value")),
        min=low,
        max=high,
        step=_number(find_argument(args, "step")),
    ))


@_constructor("Stepper")
def _stepper(translator, name, args, closures):
    low = high = None
    bounds = find_argument(args, "in")
    if bounds is not None:
        low, high = _bounds(bounds.text)
    title = _title(args)
    if title is None and closures:
        title = string_value(closures[0].text)
    return ViewNode("Stepper", _props(
        title=title,
        binding=_binding(find_argument(args, "value")),
        min=low,
        max=high,
    ))


@_constructor("DatePicker", "ColorPicker")
def _picker_control(translator, name, args, closures):
    return ViewNode(name, _props(
        title=_title(args),
        binding=_binding(find_argument(args, "selection")),
    ))


@_constructor("ProgressView")
def _progress(translator, name, args, closures):
    return ViewNode("ProgressView", _props(
        title=_title(args),
        value=_number(find_argument(args, "value")),
        total=_number(find_argument(args, "total")),
    ))


@_constructor("Link")
def _link(translator, name, args, closures):
    destination = find_argument(args, "destination")
    node = ViewNode("Link", _props(
        title=_title(args),
        url=string_value(destination.text) if destination is not None else None,
    ))
    node.children = _children(translator, closures)
    return node


@_constructor("LinearGradient")
def _linear_gradient(translator, name, args, closures):
    return ViewNode(name, _props(
        colors=_gradient_colors(args),
        startPoint=_enum(find_argument(args, "startPoint")),
        endPoint=_enum(find_argument(args, "endPoint")),
    ))


@_constructor("RadialGradient")
def _radial_gradient(translator, name, args, closures):
    return ViewNode(name, _props(
        colors=_gradient_colors(args),
        center=_enum(find_argument(args, "center")),
        startRadius=_number(find_argument(args, "startRadius")),
        endRadius=_number(find_argument(args, "endRadius")),
    ))


@_constructor("AsyncImage")
def _async_image(translator, name, args, closures):
    url = find_argument(args, "url")
    return ViewNode(name, _props(url=string_value(url.text) if url is not None else None))


@_constructor("NavigationLink")
def _navigation_link(translator, name, args, closures):
    title = _title(args)
    node = ViewNode("NavigationLink", _props(title=title))
    destination = find_argument(args, "destination")
    if destination is not None:
        view = translator.view(destination)
        if view is not None:
            node.props["destination"] = view
    label = _closure(closures, "label")
    first = _closure(closures)
    if label is not None:
        node.children = translator.views(label)
        if first is not None:
            node.props["destination"] = translator.row(first)
    elif first is not None:
        if title is not None and "destination" not in node.props:
            node.props["destination"] = translator.row(first)
        else:
            node.children = translator.views(first)
    if node.props.get("destination") is None:
        node.props.pop("destination", None)
    return node


# Containers


@_constructor("VStack", "HStack", "LazyVStack", "LazyHStack")
def _stack(translator, name, args, closures):
    node = ViewNode(name, _props(
        alignment=_enum(find_argument(args, "alignment")),
        spacing=_number(find_argument(args, "spacing")),
    ))
    node.children = _children(translator, closures)
    return node


@_constructor("ZStack")
def _zstack(translator, name, args, closures):
    node = ViewNode(name, _props(alignment=_enum(find_argument(args, "alignment"))))
    node.children = _children(translator, closures)
    return node


@_constructor("Form", "Group", "NavigationView", "NavigationStack", "TabView",
              "GeometryReader", "GridRow")
def _container(translator, name, args, closures):
    node = ViewNode(name)
    node.children = _children(translator, closures)
    return node


@_constructor("NavigationSplitView")
def _split_view(translator, name, args, closures):
    node = ViewNode(name)
    for closure in closures:
        node.children.extend(translator.views(closure))
    return node


@_constructor("ScrollView")
def _scroll_view(translator, name, args, closures):
    axis = positional(args) or find_argument(args, "axes")
    node = ViewNode(name, {"axis": enum_value(axis.text) if axis is not None else "vertical"})
    node.children = _children(translator, closures)
    return node


@_constructor("Grid")
def _grid(translator, name, args, closures):
    node = ViewNode(name, _props(
        alignment=_enum(find_argument(args, "alignment")),
        horizontalSpacing=_number(find_argument(args, "horizontalSpacing")),
        verticalSpacing=_number(find_argument(args, "verticalSpacing")),
    ))
    node.children = _children(translator, closures)
    return node


@_constructor("Section")
def _section(translator, name, args, closures):
    title = _title(args)
    header = find_argument(args, "header")
    if title is None and header is not None:
        title = string_value(header.text)
    footer = find_argument(args, "footer")
    footer = string_value(footer.text) if footer is not None else None
    header_closure = _closure(closures, "header")
    if title is None and header_closure is not None:
        title = string_value(header_closure.text)
    footer_closure = _closure(closures, "footer")
    if footer is None and footer_closure is not None:
        footer = string_value(footer_closure.text)
    node = ViewNode(name, _props(title=title, footer=footer))
    node.children = _children(translator, closures)
    return node


@_constructor("DisclosureGroup", "Menu", "Picker")
def _titled_container(translator, name, args, closures):
    title = _title(args)
    label = _closure(closures, "label")
    if title is None and label is not None:
        title = string_value(label.text)
    node = ViewNode(name, _props(
        title=title,
        binding=_binding(find_argument(args, "selection", "isExpanded")),
    ))
    node.children = _children(translator, closures)
    return node


@_constructor("ForEach")
def _for_each(translator, name, args, closures):
    source = positional(args) or find_argument(args, "data")
    props = translator.resolve_source(source.text) if source is not None else {}
    closure = _closure(closures) or _closure(closures, "content")
    if closure is not None:
        if closure.params:
            props["variable"] = closure.params[0]
        template = translator.row(closure)
        if template is not None:
            props["rowTemplate"] = template
    return ViewNode("ForEach", props)


@_constructor("List")
def _list(translator, name, args, closures):
    source = positional(args) or find_argument(args, "data")
    node = ViewNode("List")
    if source is not None:
        # List(data) { row } is a list holding one ForEach
        node.children = [_for_each(translator, "ForEach", [source], closures)]
    else:
        node.children = _children(translator, closures)
    return node


class TreeTranslator(ViewTranslator):
    """Translate lark expression trees into view nodes.

    Args:
        source: (str) Text the trees were parsed from
        errors: (ErrorCollector | None) Collector for diagnostics
        constants: (dict | None) Literal property values of the view
    """

    def __init__(self, source, errors=None, constants=None):
        super().__init__(errors, constants)
        self.source = source

    def text(self, tree):
        return source_text(tree, self.source)

    def body(self, statements, name):
        """Translate the statements of a `body` getter into the root node.

        Returns:
            (ViewNode | None) Root node, None after recording an error
        """
        if len(statements) == 1:
            stmt = statements[0]
            expr = stmt
            if stmt.data == "return_stmt":
                expr = stmt.children[0] if stmt.children else None
            if expr is not None and expr.data not in _STATEMENT_RULES:
                node = self.translate(expr)
                if node is None:
                    self.errors.add(f"Unsupported body expression: {snippet(self.text(expr))}")
                return node

        nodes = self.statements(statements)
        if not nodes:
            text = " ".join(self.text(stmt) for stmt in statements)
            self.errors.add(f"Unsupported body expression: {snippet(text)}")
            return None
        if len(nodes) == 1 and len(statements) == 1:
            return nodes[0]
        return ViewNode("Group", {}, [], nodes)

    def views(self, closure):
        return self.statements(closure.body)

    def view(self, arg):
        tree = arg.tree
        if tree is None:
            return None
        if tree.data == "closure":
            return self.row(self.closure(tree, None))
        return self.translate(tree)

    def statements(self, statements):
        """Translate view builder statements, skipping unsupported ones."""
        nodes = []
        for stmt in statements:
            if not isinstance(stmt, lark.Tree):
                continue
            match stmt.data:
                case "var_decl" | "func_decl" | "assign_stmt" | "guard_stmt":
                    logger.debug("Skipping %s at line %s", stmt.data, tree_line(stmt))
                    continue
                case "if_stmt":
                    node = self._if(stmt)
                case "switch_stmt":
                    node = self._switch(stmt)
                case "return_stmt":
                    node = self.translate(stmt.children[0]) if stmt.children else None
                case "for_stmt":
                    node = None
                case _:
                    node = self.translate(stmt)
            if node is None:
                self.errors.add(
                    f"Unsupported view expression: {snippet(self.text(stmt))}",
                    tree_line(stmt),
                )
                logger.debug("Unsupported statement at line %s", tree_line(stmt))
                continue
            nodes.append(node)
        return nodes

    def translate(self, tree):
        """Translate one expression tree, None when it is not a view."""
        if not isinstance(tree, lark.Tree):
            return None
        kids = tree.children
        match tree.data:
            case "postfix":
                return self._postfix(tree)
            case "paren":
                return self.translate(kids[0])
            case "ternary":
                # conditions are not evaluated, the first branch is shown
                return self.translate(kids[1])
            case "try_op" | "await_op":
                return self.translate(kids[-1])
            case "binary":
                return self._concat(tree)
            case _:
                return None

    def closure(self, tree, label):
        """Build a `Closure` from a closure tree."""
        params = []
        body = []
        for kid in tree.children:
            if isinstance(kid, lark.Tree) and kid.data == "closure_sig":
                for group in subtrees(kid, "closure_params"):
                    for item in group.children:
                        if isinstance(item, lark.Token):
                            params.append(str(item))
                        else:
                            params.append(str(tokens_of(item, "NAME")[0]))
            else:
                body.append(kid)
        return Closure(label, params, body, self.text(tree), tree_line(tree), tree)

    def call(self, call):
        """Arguments and trailing closures of a call suffix."""
        args = []
        closures = []
        for kid in subtrees(call):
            if kid.data == "call_args":
                args.extend(self.arguments(kid))
            elif kid.data == "trailing_closures":
                label = None
                for item in kid.children:
                    if item.data == "label":
                        label = str(item.children[0])
                    else:
                        closures.append(self.closure(item, label))
                        label = None
        return args, closures

    def arguments(self, call_args):
        args = []
        for arg in subtrees(call_args, "arg"):
            labels = subtrees(arg, "label")
            expr = arg.children[-1]
            label = str(labels[0].children[0]) if labels else None
            args.append(Argument(label, self.text(expr), expr, tree_line(expr)))
        return args

    def _postfix(self, tree):
        primary, *suffixes = tree.children
        index = 0
        line = tree_line(tree)
        if primary.data != "name":
            if primary.data != "paren":
                return None
            node = self.translate(primary)
        else:
            name = str(primary.children[0])
            first = suffixes[0] if suffixes else None
            if name == "Color" and first is not None and first.data in ("member", "call"):
                node = self.color_view(self.source[primary.meta.start_pos:first.meta.end_pos])
                index = 1
            elif first is not None and first.data == "call":
                args, closures = self.call(first)
                node = self.build(name, args, closures, line)
                index = 1
            elif name in VIEW_KINDS or name in CONSTRUCTORS:
                node = self.build(name, [], [], line)
            else:
                node = None
        if node is None:
            return None

        while index < len(suffixes):
            suffix = suffixes[index]
            index += 1
            if suffix.data != "member":
                continue
            name = str(suffix.children[0].children[0])
            args = []
            if index < len(suffixes) and suffixes[index].data == "call":
                args = self._modifier_arguments(suffixes[index])
                index += 1
            self.modify(node, name, args, tree_line(suffix))
        return node

    def _modifier_arguments(self, call):
        args, closures = self.call(call)
        for closure in closures:
            args.append(Argument(closure.label or TRAILING, closure.text, closure.tree, closure.line))
        return args

    def _if(self, stmt):
        block = subtrees(stmt, "block")[0]
        return ViewNode("Group", {}, [], self.statements(block.children))

    def _switch(self, stmt):
        cases = subtrees(stmt, "switch_case", "default_case")
        if not cases:
            return ViewNode("Group")
        body = [
            kid for kid in cases[0].children
            if isinstance(kid, lark.Tree) and kid.data not in ("case_pattern", "case_where")
        ]
        return ViewNode("Group", {}, [], self.statements(body))

    def _concat(self, tree):
        """`Text("a") + Text("b")` joins into one Text."""
        operands = tree.children[0::2]
        operators = [str(op.children[0]) for op in tree.children[1::2]]
        if any(op != "+" for op in operators):
            return None
        parts = []
        for operand in operands:
            node = self.translate(operand)
            if node is None or node.kind != "Text":
                return None
            parts.append(node.props.get("text", ""))
        return ViewNode("Text", {"text": "".join(parts)})


_STATEMENT_RULES = frozenset([
    "var_decl", "func_decl", "assign_stmt", "guard_stmt",
    "if_stmt", "switch_stmt", "for_stmt",
])

