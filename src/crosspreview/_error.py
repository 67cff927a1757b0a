"""Error classes and the diagnostic collector"""

__all__ = [
    "PreviewError",
    "ProviderUnavailable",
    "ProviderError",
    "TranslationError",
    "ErrorCollector",
]


class PreviewError(Exception):
    """Base class for errors raised inside the preview core."""


class ProviderUnavailable(PreviewError):
    """The syntax provider could not be created.

    Raised when the grammar file is missing or fails
    to build. Never raised by `parse`, only by explicit backend selection.
    """


class ProviderError(PreviewError):
    """The syntax provider failed on a specific source text.

    Args:
        message: (str) Error description
        line: (int | None) Optional 1-indexed line where parsing stopped
        column: (int | None) Optional 1-indexed column where parsing stopped

    Attributes:
        message: (str) Error description
        line: (int | None) Line where parsing stopped
        column: (int | None) Column where parsing stopped
    """

    def __init__(self, message, line=None, column=None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)

    def __str__(self):
        if self.line is not None:
            return f"{self.message} (line {self.line}, column {self.column})"
        return self.message


class TranslationError(PreviewError):
    """An expression could not be turned into a view node.

    Args:
        message: (str) Error description
        line: (int | None) Optional line of the offending expression
    """

    def __init__(self, message, line=None):
        self.message = message
        self.line = line
        super().__init__(message)


class ErrorCollector:
    """Ordered accumulator of human readable diagnostics.

    Each failure point in extraction and translation adds one message.
    Identical messages are only kept once, the first occurrence decides
    the order.
    """

    def __init__(self, messages=None):
        self._messages = []
        for message in messages or ():
            self.add(message)

    def add(self, message, line=None):
        """Record a message, optionally suffixed with its source line."""
        if line is not None:
            message = f"{message} (line {line})"
        if message not in self._messages:
            self._messages.append(message)

    def extend(self, messages):
        for message in messages:
            self.add(message)

    @property
    def messages(self):
        """(list[str]) Copy of the collected messages."""
        return list(self._messages)

    def __bool__(self):
        return bool(self._messages)

    def __len__(self):
        return len(self._messages)

    def __iter__(self):
        return iter(list(self._messages))

    def __repr__(self):
        return f"ErrorCollector({self._messages!r})"
