"""
Invoice generation errors.
Every one of these aborts the whole request; main.py turns them into a 500.
"""


class InvoiceError(Exception):
    """Base class for failures raised while building an invoice."""


class AssetMissing(InvoiceError):
    """Logo or signature image not found in the static directory."""


class InvalidInput(InvoiceError):
    """Payload or text block does not have the expected shape."""


class InvalidAmount(InvoiceError):
    """A computed amount is NaN or infinite."""
