"""Tests for the text scanning fallback parser"""

import crosspreview
import previewtest


def parse(body, members=""):
    return crosspreview.parse_text(previewtest.view_source(body, members))


@previewtest.params(
    "body",
    stack='VStack(spacing: 8) {\n    Text("A").bold()\n    Image(systemName: "star")\n}',
    foreach='ForEach(0..<3) { i in\n    Text("Row \\(i)").padding(4)\n}',
    navigation='NavigationView {\n    List {\n        Text("a")\n    }\n    .navigationTitle("T")\n}',
    section='Form {\n    Section(header: Text("H")) {\n        Toggle("On", isOn: $on)\n    }\n}',
    labeled='NavigationLink {\n    Text("D")\n} label: {\n    Text("L")\n}',
    placeholder="HStack {\n    ProfileCardView()\n    Spacer()\n}",
    colors="ZStack {\n    Color.blue\n    Circle().fill(.red).frame(width: 20, height: 20)\n}",
)
def test_matches_structural(key, body, structural, fallback):
    source = previewtest.view_source(body)
    expected = structural.parse(source)
    result = fallback.parse(source)
    assert result.errors == []
    assert result.root == expected.root
    assert result.backend == "fallback"
    assert expected.backend == "structural"


def test_nested_parentheses_unsupported():
    result = parse('Text("a")\n    .shadow(color: .black.opacity(0.2), radius: 4)\n    .bold()')
    assert result.root.kind == "Text"
    assert [mod.name for mod in result.root.modifiers] == ["bold"]
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Unsupported view expression: .shadow(")


def test_modifier_closure_unsupported():
    result = parse('Text("a")\n    .overlay {\n        Circle()\n    }\n    .padding()')
    assert [mod.name for mod in result.root.modifiers] == ["padding"]
    assert result.errors[0].startswith("Unsupported view expression: .overlay")


def test_unknown_statement_skipped():
    result = parse('VStack {\n    someHelper\n    Text("b")\n}')
    assert [kid.kind for kid in result.root.children] == ["Text"]
    assert result.errors == ["Unsupported view expression: someHelper (line 5)"]


def test_if_first_branch():
    result = parse('if ok {\n    Text("A")\n} else if other {\n    Text("B")\n} else {\n    Text("C")\n}\nText("D")')
    assert result.errors == []
    group, last = result.root.children
    assert group.kind == "Group"
    assert [kid.props["text"] for kid in group.children] == ["A"]
    assert last.props["text"] == "D"


def test_declarations_skipped():
    result = parse('let x = 5\nreturn Text("A")')
    assert result.errors == []
    assert result.root.kind == "Text"


def test_constants_resolved():
    result = parse(
        "ForEach(items, id: \\.self) { item in Text(item) }",
        members='    let items = ["x", "y"]',
    )
    assert result.root.props["forEachItems"] == ["x", "y"]


def test_missing_view():
    result = crosspreview.parse_text('struct A { var body: some View { Text("x") } }')
    assert result.root is None
    assert result.errors == [crosspreview.NO_VIEW]


def test_missing_body():
    result = crosspreview.parse_text('struct A: View {\n    var title = "x"\n}')
    assert result.root is None
    assert result.errors == ["View 'A' has no body property"]


def test_empty_body():
    result = crosspreview.parse_text("struct A: View {\n    var body: some View {\n    }\n}")
    assert result.root is None
    assert result.errors == ["Could not isolate the body expression of 'A'"]


def test_nothing_recognized():
    result = parse("42")
    assert result.root is None
    assert result.errors[-1] == "Unsupported body expression: 42"


def test_extract_text_conformance_list():
    target = crosspreview.extract_text(
        "struct Model: Codable {}\n"
        "struct Screen: SwiftUI.View, Equatable {\n"
        "    let count = 3\n"
        "    var body: some View {\n"
        "        Text(\"x\")\n"
        "    }\n"
        "}\n"
    )
    assert target.name == "Screen"
    assert target.body.strip() == 'Text("x")'
    assert target.constants == {"count": 3}
    assert target.line == 4


def test_matching_brace():
    assert crosspreview.matching_brace("{ { } }", 0) == 6
    assert crosspreview.matching_brace("{ { }", 0) == -1
    # string contents count too
    assert crosspreview.matching_brace('{ "}" }', 0) == 3
