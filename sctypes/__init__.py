"""Types, compile-time values, diagnostics and scopes for a small compiler front end."""

__version__ = "0.1.0"
__all__ = ["text", "tokens", "errors", "values", "types", "compound", "scope"]