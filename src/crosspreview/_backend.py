"""Parser backends and the parse entry point.

A backend turns source text into a `ParseResult`. Two implementations exist:
the structural backend drives the lark syntax provider, the fallback
backend scans text. `select_backend` decides between them once, from the
configuration and what the environment provides. Nothing is cached at
module level, callers that parse repeatedly keep the backend they got.
"""

__all__ = [
    "ParserBackend",
    "StructuralBackend",
    "FallbackBackend",
    "select_backend",
    "parse",
]

import logging

from ._comments import strip_comments
from ._config import PreviewConfig
from ._error import ErrorCollector, ProviderError, ProviderUnavailable, TranslationError
from ._extract import extract_tree
from ._fallback import parse_text
from ._syntax import SyntaxProvider
from ._translate import TreeTranslator
from ._view import ParseResult


logger = logging.getLogger(__name__)


class ParserBackend:
    """Interface for objects that parse source into a `ParseResult`.

    Args:
        config: (PreviewConfig | None) Policy settings
    """

    name = None

    def __init__(self, config=None):
        self.config = config or PreviewConfig()

    def parse(self, source):
        """Parse source text, never raising for string input."""
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}<{self.name}>"


class FallbackBackend(ParserBackend):
    """Text scanning backend, needs nothing from the environment."""

    name = "fallback"

    def parse(self, source):
        return _guarded(parse_text, strip_comments(source), self.name)


class StructuralBackend(ParserBackend):
    """Grammar based backend.

    Args:
        provider: (SyntaxProvider) Loaded syntax provider handle
        config: (PreviewConfig | None) Policy settings
    """

    name = "structural"

    def __init__(self, provider, config=None):
        super().__init__(config)
        self.provider = provider

    def parse(self, source):
        text = strip_comments(source)
        try:
            tree = self.provider.parse(text)
        except ProviderError as err:
            return self._recover(text, err)
        return _guarded(self._translate, (tree, text), self.name)

    def _translate(self, parsed):
        tree, text = parsed
        errors = ErrorCollector()
        try:
            target = extract_tree(tree, text)
        except TranslationError as err:
            logger.debug("Extraction failed at line %s: %s", err.line, err.message)
            errors.add(err.message)
            return ParseResult(None, errors.messages, self.name)
        translator = TreeTranslator(text, errors, target.constants)
        root = translator.body(target.body, target.name)
        return ParseResult(root, errors.messages, self.name)

    def _recover(self, text, err):
        """Handle a provider failure for one source text."""
        message = f"Syntax provider failed: {err}"
        if not self.config.fallback_on_error:
            logger.warning("%s", message)
            return ParseResult(None, [message], self.name)

        logger.warning("%s, retrying with the fallback parser", message)
        result = _guarded(parse_text, text, FallbackBackend.name)
        errors = ErrorCollector()
        if self.config.report_fallback:
            errors.add(message)
        errors.extend(result.errors)
        if result.root is None and not errors:
            errors.add(message)
        return ParseResult(result.root, errors.messages, result.backend)


def _guarded(func, value, backend):
    """Run a parse step, turning runaway nesting into a diagnostic."""
    try:
        return func(value)
    except RecursionError:
        logger.warning("Source nesting too deep for the %s backend", backend)
        return ParseResult(None, ["Source nesting is too deep to parse"], backend)


def select_backend(config=None):
    """Pick the parser backend for a configuration.

    Capability detection happens here, once: `auto` uses the structural
    backend when its grammar is installed, the fallback backend otherwise.

    Args:
        config: (PreviewConfig | None) Backend choice and policy

    Returns:
        (ParserBackend) Ready backend

    Raises:
        ProviderUnavailable: `structural` was requested and cannot be built
    """
    config = config or PreviewConfig()
    if config.backend == "fallback":
        logger.info("Using the fallback parser")
        return FallbackBackend(config)
    if config.backend == "auto" and not SyntaxProvider.available(config.grammar):
        logger.info("Syntax provider not available, using the fallback parser")
        return FallbackBackend(config)
    provider = SyntaxProvider.load(config.grammar)
    logger.info("Using the structural parser with grammar %s", config.grammar)
    return StructuralBackend(provider, config)


def parse(source, backend=None, config=None):
    """Parse source into a view tree.

    Args:
        source: (str) Swift source text
        backend: (ParserBackend | None) Backend to use, selected from
            `config` when not given
        config: (PreviewConfig | None) Used only to select a backend

    Returns:
        (ParseResult) Root view and diagnostics

    Raises:
        TypeError: `source` is not a string
    """
    if not isinstance(source, str):
        raise TypeError(f"Source must be str, not {type(source).__name__}")
    if backend is None:
        try:
            backend = select_backend(config)
        except ProviderUnavailable as err:
            # an explicit structural request that cannot be honored
            logger.warning("%s", err)
            return ParseResult(None, [f"Syntax provider failed: {err}"])
    return backend.parse(source)
