"""Tests for backend selection, the fallback policy and the parse entry point"""

import logging

import pytest

import crosspreview
import previewtest


SOURCE = previewtest.view_source('VStack {\n    Text("a")\n}')

# `&` alone is outside the grammar, the fallback parser never reads members
UNPARSEABLE = previewtest.view_source('Text("a")', members="    let mask = a & b")


class FailingProvider:
    """Stands in for a syntax provider that rejects every source."""

    def parse(self, source):
        raise crosspreview.ProviderError("Unexpected character '&'", 2, 20)


@previewtest.params(
    "name cls",
    fallback=("fallback", crosspreview.FallbackBackend),
    structural=("structural", crosspreview.StructuralBackend),
    auto=("auto", crosspreview.StructuralBackend),
)
def test_select_backend(key, name, cls):
    backend = crosspreview.select_backend(crosspreview.PreviewConfig(backend=name))
    assert isinstance(backend, cls)
    assert repr(backend) == f"{cls.__name__}<{backend.name}>"


def test_auto_without_grammar():
    config = crosspreview.PreviewConfig(grammar="missing")
    backend = crosspreview.select_backend(config)
    assert isinstance(backend, crosspreview.FallbackBackend)
    assert backend.parse(SOURCE).root.kind == "VStack"


def test_structural_without_grammar():
    config = crosspreview.PreviewConfig(backend="structural", grammar="missing")
    with pytest.raises(crosspreview.ProviderUnavailable):
        crosspreview.select_backend(config)

    result = crosspreview.parse(SOURCE, config=config)
    assert result.root is None
    assert result.errors[0].startswith("Syntax provider failed: Cannot build grammar 'missing'")


def test_provider_available():
    assert crosspreview.SyntaxProvider.available()
    assert not crosspreview.SyntaxProvider.available("missing")


def test_provider_error_position():
    provider = crosspreview.SyntaxProvider.load()
    with pytest.raises(crosspreview.ProviderError) as info:
        provider.parse(UNPARSEABLE)
    assert info.value.line == 2
    assert "(line 2, column" in str(info.value)


def test_grammar_failure_uses_fallback(structural):
    result = structural.parse(UNPARSEABLE)
    assert result.backend == "fallback"
    assert result.root.kind == "Text"
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Syntax provider failed: ")
    assert result.partial


def test_fallback_reported_once(caplog):
    backend = crosspreview.StructuralBackend(FailingProvider())
    with caplog.at_level(logging.WARNING, logger="crosspreview"):
        result = backend.parse(SOURCE)
    assert result.errors == [
        "Syntax provider failed: Unexpected character '&' (line 2, column 20)"
    ]
    assert result.root.kind == "VStack"
    assert "retrying with the fallback parser" in caplog.text


def test_fallback_silent():
    config = crosspreview.PreviewConfig(report_fallback=False)
    backend = crosspreview.StructuralBackend(FailingProvider(), config)
    result = backend.parse(SOURCE)
    assert result.errors == []
    assert result.ok
    assert result.backend == "fallback"


def test_fallback_disabled():
    config = crosspreview.PreviewConfig(fallback_on_error=False)
    backend = crosspreview.StructuralBackend(FailingProvider(), config)
    result = backend.parse(SOURCE)
    assert result.root is None
    assert result.backend == "structural"
    assert result.errors == [
        "Syntax provider failed: Unexpected character '&' (line 2, column 20)"
    ]


def test_fallback_failure_keeps_both_errors():
    backend = crosspreview.StructuralBackend(FailingProvider())
    result = backend.parse("struct A { }")
    assert result.root is None
    assert result.errors == [
        "Syntax provider failed: Unexpected character '&' (line 2, column 20)",
        crosspreview.NO_VIEW,
    ]


@previewtest.params(
    "backend",
    structural="structural",
    fallback="fallback",
)
def test_idempotent(key, backend):
    parser = previewtest.backend(backend)
    source = previewtest.view_source(
        'List {\n    ForEach(0..<2) { i in Text("\\(i)").overlay(Circle()) }\n}'
    )
    first = parser.parse(source)
    second = parser.parse(source)
    assert first == second
    assert first.root is not second.root


def test_parse_entry_point():
    result = crosspreview.parse(SOURCE)
    assert result.ok
    assert result.root.kind == "VStack"

    backend = crosspreview.FallbackBackend()
    assert crosspreview.parse(SOURCE, backend=backend).backend == "fallback"


def test_parse_rejects_bytes():
    with pytest.raises(TypeError):
        crosspreview.parse(SOURCE.encode())


@previewtest.params(
    "source",
    empty="",
    no_view="let x = 1",
    garbage="}}}{{{ )(",
    half="struct A: View { var body: some View {",
)
def test_never_raises(key, source):
    for name in previewtest.BACKENDS:
        result = previewtest.backend(name).parse(source)
        assert result.root is None
        assert result.errors


def test_deep_nesting_reported():
    depth = 1200
    body = "VStack {\n" * depth + 'Text("x")\n' + "}\n" * depth
    result = crosspreview.FallbackBackend().parse(previewtest.view_source(body))
    assert result.root is None
    assert result.errors == ["Source nesting is too deep to parse"]


def test_missing_conformance_message():
    source = 'struct Plain {\n    var body: some View { Text("x") }\n}'
    for name in previewtest.BACKENDS:
        result = previewtest.backend(name).parse(source)
        assert result.root is None
        assert result.errors == ["No struct conforming to View found"]


def test_config_from_mapping():
    config = crosspreview.PreviewConfig.from_mapping({"backend": "fallback", "report_fallback": False})
    assert config.backend == "fallback"
    assert config.report_fallback is False
    with pytest.raises(ValueError):
        crosspreview.PreviewConfig.from_mapping({"colour": "red"})
    with pytest.raises(ValueError):
        crosspreview.PreviewConfig.from_mapping({"fallback_on_error": "yes"})
    with pytest.raises(ValueError):
        crosspreview.PreviewConfig(backend="fastest")


def test_parse_result_invariants():
    with pytest.raises(ValueError):
        crosspreview.ParseResult(None)
    result = crosspreview.ParseResult(None, ["x"])
    assert not result.ok
    assert not result.partial
    assert result.to_dict() == {"root": None, "errors": ["x"]}


def test_error_collector():
    errors = crosspreview.ErrorCollector()
    assert not errors
    errors.add("a")
    errors.add("b", line=3)
    errors.add("a")
    errors.extend(["c", "b (line 3)"])
    assert errors.messages == ["a", "b (line 3)", "c"]
    assert len(errors) == 3
    assert list(errors) == errors.messages
