"""Parser configuration"""

__all__ = ["PreviewConfig", "BACKENDS"]

from dataclasses import dataclass, fields
from typing import Literal


BackendType = Literal["auto", "structural", "fallback"]
BACKENDS = ("auto", "structural", "fallback")


@dataclass
class PreviewConfig:
    """Configuration for backend selection and fallback policy.

    Examples:
        # Use the grammar based parser when its grammar is installed
        config = PreviewConfig(backend="auto")

        # Never touch the syntax provider
        config = PreviewConfig(backend="fallback")

        # Fail hard instead of retrying with the fallback parser
        config = PreviewConfig(backend="structural", fallback_on_error=False)
    """

    backend: BackendType = "auto"

    # Retry with the fallback parser when the syntax provider raises
    fallback_on_error: bool = True

    # Keep the provider failure message as a caveat next to a fallback tree
    report_fallback: bool = True

    # Grammar file name under the package lark/ directory
    grammar: str = "swift"

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown backend {self.backend!r}, expected one of {', '.join(BACKENDS)}"
            )

    @classmethod
    def from_mapping(cls, data):
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                raise ValueError(f"Unknown configuration key {key!r}")
            if isinstance(getattr(cls, key, None), bool):
                if not isinstance(value, bool):
                    raise ValueError(f"Configuration key {key!r} expects true or false")
            values[key] = value
        return cls(**values)
