"""Tests for comment stripping"""

import crosspreview
import previewtest


@previewtest.params(
    "line expected",
    trailing=('Text("a") // note', 'Text("a") '),
    whole=("// only a comment", ""),
    none=('Text("a")', 'Text("a")'),
    url=('Link("x", destination: URL(string: "https://a.b")!)',
         'Link("x", destination: URL(string: "https://a.b")!)'),
    after_string=('Text("https://a") // c', 'Text("https://a") '),
    odd_quotes=('Text("a // b', 'Text("a // b'),
    empty=("", ""),
    single_slash=("a / b", "a / b"),
)
def test_strip_line(key, line, expected):
    assert crosspreview.strip_line_comment(line) == expected


def test_strip_keeps_lines():
    source = 'struct A: View { // decl\n    var body: some View { Text("x") } // body\n}'
    stripped = crosspreview.strip_comments(source)
    assert stripped.count("\n") == source.count("\n")
    assert "decl" not in stripped
    assert "body\n" not in stripped
    assert 'Text("x")' in stripped


def test_commented_view_ignored(structural, fallback):
    source = previewtest.view_source('VStack {\n// Text("hidden")\nText("shown")\n}')
    for backend in (structural, fallback):
        result = backend.parse(source)
        assert result.errors == []
        assert [kid.props["text"] for kid in result.root.children] == ["shown"]
