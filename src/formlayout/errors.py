"""
Exception taxonomy for formlayout.

Every error is synchronous and caller-recoverable. Nothing here is
retried internally: compose either returns a fully merged tree or raises
before returning anything.
"""


class FormLayoutError(Exception):
    """Base class for all formlayout errors."""
    pass


class MissingSectionError(FormLayoutError):
    """Raised by strict compose when no result section matches a schema section."""

    def __init__(self, section: str):
        self.section = section
        super().__init__(f'Section "{section}" not found.')


class MissingFieldError(FormLayoutError):
    """Raised by strict compose when no result item matches a schema item."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f'Result missing for field "{field}".')


class ValidationFailedError(FormLayoutError):
    """
    Raised when a submitted entry violates one of its validation rules.

    Properties:
        field: Name of the offending item
        rule: Rule that failed ("required", "min", "max", "min_length",
              "max_length", "pattern", "allowed_values", "accept")
    """

    def __init__(self, field: str, rule: str, message: str):
        self.field = field
        self.rule = rule
        super().__init__(message)


class SchemaError(FormLayoutError, ValueError):
    """Raised when a dict/JSON/YAML schema cannot be loaded."""
    pass


class DepthLimitError(FormLayoutError):
    """Raised when section or item nesting exceeds the configured bound."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Nesting deeper than {max_depth} levels")
