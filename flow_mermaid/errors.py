from __future__ import annotations


class FlowConversionError(ValueError):
    """Fatal input problem detected before any graph traversal."""


class FlowParseError(FlowConversionError):
    """The input text is not valid JSON."""


class ActionsNotFoundError(FlowConversionError):
    """No recognized document shape yields an `actions` mapping."""
