"""View tree intermediate representation.

A parse produces a tree of `ViewNode` objects. Each node has a `kind` from
the closed `VIEW_KINDS` set, a `props` mapping whose meaningful keys depend
on the kind, an ordered list of `Modifier` objects in source order, and an
ordered list of children.

Modifier arguments are a tagged union: every modifier carries a `category`
and the argument values are checked against that category (and an optional
per-modifier schema) when the modifier is constructed.
"""

__all__ = [
    "VIEW_KINDS",
    "CONTAINER_KINDS",
    "MODIFIER_CATEGORIES",
    "ViewNode",
    "Modifier",
    "ParseResult",
    "clone_tree",
    "placeholder_node",
]

from dataclasses import dataclass, field


CONTAINER_KINDS = frozenset([
    "VStack",
    "HStack",
    "ZStack",
    "List",
    "Form",
    "Section",
    "ScrollView",
    "LazyVStack",
    "LazyHStack",
    "Grid",
    "GridRow",
    "Group",
    "GeometryReader",
    "NavigationView",
    "NavigationStack",
    "NavigationSplitView",
    "TabView",
    "DisclosureGroup",
    "Menu",
    "Picker",
])

LEAF_KINDS = frozenset([
    "Text",
    "Image",
    "Spacer",
    "Button",
    "Toggle",
    "TextField",
    "SecureField",
    "Rectangle",
    "Circle",
    "RoundedRectangle",
    "Capsule",
    "Ellipse",
    "Divider",
    "Label",
    "Slider",
    "Stepper",
    "DatePicker",
    "ColorPicker",
    "ProgressView",
    "Link",
    "LinearGradient",
    "RadialGradient",
    "AsyncImage",
    "TextEditor",
    "NavigationLink",
])

VIEW_KINDS = CONTAINER_KINDS | LEAF_KINDS | {"ForEach", "Custom"}


@dataclass
class ViewNode:
    """A node in the view tree.

    Args:
        kind: (str) One of `VIEW_KINDS`
        props: (dict) Kind specific properties
        modifiers: (list[Modifier]) Modifiers in source order
        children: (list[ViewNode]) Child views in source order
    """

    kind: str
    props: dict = field(default_factory=dict)
    modifiers: list = field(default_factory=list)
    children: list = field(default_factory=list)

    def __post_init__(self):
        if self.kind not in VIEW_KINDS:
            raise ValueError(f"Unknown view kind: {self.kind!r}")

    def modifier(self, name):
        """Get the last modifier with the given name, or None."""
        for mod in reversed(self.modifiers):
            if mod.name == name:
                return mod
        return None

    def walk(self):
        """Iterate this node and every descendant, depth first.

        Nodes held in props (ForEach row templates, navigation destinations)
        and modifier content (overlays) are included.
        """
        yield self
        for value in self.props.values():
            if isinstance(value, ViewNode):
                yield from value.walk()
        for mod in self.modifiers:
            for value in mod.args.values():
                if isinstance(value, ViewNode):
                    yield from value.walk()
        for child in self.children:
            yield from child.walk()

    def to_dict(self):
        """Convert into plain json compatible data."""
        return {
            "kind": self.kind,
            "props": _plain(self.props),
            "modifiers": [mod.to_dict() for mod in self.modifiers],
            "children": [child.to_dict() for child in self.children],
        }


# Allowed value types for each modifier argument category
MODIFIER_CATEGORIES = {
    "empty": (),
    "numeric": (int, float),
    "color": (str, int, float),
    "enum": (str,),
    "text": (str,),
    "node": (ViewNode, str, int, float),
    "flag": (bool, int),
    "mixed": (str, int, float, bool, list, ViewNode),
}


@dataclass
class Modifier:
    """A postfix `.name(args)` call attached to a view.

    Args:
        name: (str) Modifier name as written in source
        args: (dict) Extracted argument fields
        category: (str) Argument category, one of `MODIFIER_CATEGORIES`
        schema: (dict | None) Optional mapping of field name to allowed
            types, checked in addition to the category

    Raises:
        ValueError: Arguments do not match the category or schema
    """

    name: str
    args: dict = field(default_factory=dict)
    category: str = "empty"
    schema: dict | None = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        allowed = MODIFIER_CATEGORIES.get(self.category)
        if allowed is None:
            raise ValueError(f"Unknown modifier category {self.category!r}")
        if self.category == "empty" and self.args:
            raise ValueError(f".{self.name} takes no arguments")
        for key, value in self.args.items():
            if not _accepts(allowed, value):
                raise ValueError(
                    f".{self.name} {key}={value!r} is not valid for "
                    f"{self.category} arguments"
                )
            if self.schema is None:
                continue
            if key not in self.schema:
                raise ValueError(f".{self.name} has no argument {key!r}")
            if not _accepts(self.schema[key], value):
                raise ValueError(f".{self.name} {key}={value!r} has the wrong type")
        if self.category == "node" and self.args and not isinstance(
            self.args.get("content"), ViewNode
        ):
            raise ValueError(f".{self.name} requires view content")

    def __getitem__(self, key):
        return self.args[key]

    def get(self, key, default=None):
        return self.args.get(key, default)

    def to_dict(self):
        return {
            "name": self.name,
            "category": self.category,
            "args": _plain(self.args),
        }


def _accepts(types, value):
    """Check value against a tuple of types, bool is not a number."""
    if isinstance(value, bool) and bool not in types:
        return False
    return isinstance(value, types)


class ParseResult:
    """Outcome of one parse call.

    A missing root always comes with at least one error explaining why. A
    root with errors is a partial success.

    Args:
        root: (ViewNode | None) Parsed tree
        errors: (list[str]) Diagnostics in the order they were found

    Attributes:
        root: (ViewNode | None) Parsed tree
        errors: (list[str]) Diagnostics in the order they were found
        backend: (str | None) Name of the backend that produced the root
    """

    __slots__ = ("root", "errors", "backend")

    def __init__(self, root, errors=(), backend=None):
        errors = list(errors)
        if root is None and not errors:
            raise ValueError("A ParseResult without a root needs an error")
        self.root = root
        self.errors = errors
        self.backend = backend

    @property
    def ok(self):
        """(bool) Root present and no diagnostics."""
        return self.root is not None and not self.errors

    @property
    def partial(self):
        """(bool) Root present alongside diagnostics."""
        return self.root is not None and bool(self.errors)

    def to_dict(self):
        return {
            "root": self.root.to_dict() if self.root is not None else None,
            "errors": list(self.errors),
        }

    def __eq__(self, other):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return self.root == other.root and self.errors == other.errors

    def __repr__(self):
        kind = self.root.kind if self.root is not None else None
        return f"ParseResult(root={kind}, errors={self.errors!r})"


def clone_tree(value):
    """Deep structural copy of view tree data.

    Every `ViewNode` and `Modifier` reachable from the value is copied,
    including nodes stored in props and modifier arguments. Scalars are
    shared since they are immutable.
    """
    match value:
        case ViewNode():
            return ViewNode(
                value.kind,
                clone_tree(value.props),
                [clone_tree(mod) for mod in value.modifiers],
                [clone_tree(kid) for kid in value.children],
            )
        case Modifier():
            return Modifier(
                value.name, clone_tree(value.args), value.category, value.schema
            )
        case dict():
            return {key: clone_tree(val) for key, val in value.items()}
        case list():
            return [clone_tree(val) for val in value]
        case tuple():
            return tuple(clone_tree(val) for val in value)
        case _:
            return value


def placeholder_node(name):
    """Group holding a single text placeholder for an unexpandable view."""
    text = ViewNode("Text", {"text": f"<{name}>"})
    return ViewNode("Group", {"placeholder": name}, [], [text])


def _plain(value):
    """Convert nested view data into json compatible values."""
    match value:
        case ViewNode() | Modifier():
            return value.to_dict()
        case dict():
            return {key: _plain(val) for key, val in value.items()}
        case list() | tuple():
            return [_plain(val) for val in value]
        case float() if value != value or value in (float("inf"), float("-inf")):
            return str(value)
        case _:
            return value
