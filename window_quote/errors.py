from __future__ import annotations

from typing import Optional


class QuoteError(ValueError):
    """Base class for every error raised by the window quote engine."""


class InvalidDimensions(QuoteError):
    def __init__(self, message: str, length_cm=None, width_cm=None):
        super().__init__(message)
        self.length_cm = length_cm
        self.width_cm = width_cm


class InvalidMargin(QuoteError):
    def __init__(self, margin):
        super().__init__(f"profit margin must be >= 0, got {margin}")
        self.margin = margin


class InvalidQuantity(QuoteError):
    def __init__(self, quantity):
        super().__init__(f"quantity must be a whole number >= 1, got {quantity}")
        self.quantity = quantity


class UnresolvedReference(QuoteError):
    """A style combination has no entry in a decision table.

    Only raised in strict mode; otherwise the resolver returns the table default
    and the assembler records an audit note.
    """

    def __init__(self, table: str, key, default_ref: str):
        super().__init__(f"no {table} reference for {key!r} (default would be {default_ref!r})")
        self.table = table
        self.key = key
        self.default_ref = default_ref


class MaterialNotFound(QuoteError, KeyError):
    def __init__(self, ref: str):
        super().__init__(f"material {ref!r} is not in the catalog")
        self.ref = ref

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class ConfigError(QuoteError):
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
