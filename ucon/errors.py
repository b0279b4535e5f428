"""
Conversion Errors
=================

Every failure a conversion request can hit. Each error carries the offending
token (and any other context) as attributes and renders a user-facing message
through str().

Configuration problems live in ucon.config.validator instead: they are fatal
to startup, these never are.

Usage:
    from ucon.errors import UnitError, UnitNotFound

    try:
        result = convert_tokens(registry, cache, "1", "in", "furlong")
    except UnitError as e:
        print(f"error: {e}")
"""

from typing import Optional


class UnitError(Exception):
    """Base class for errors raised while resolving or converting."""

    description = "conversion failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.detail:
            return f"{self.description}: {self.detail}"
        return self.description


class InvalidInput(UnitError):
    """Value token is not a number, or the value is NaN/infinite."""

    description = "out of range or unrecognized value"

    def __init__(self, token: str, reason: Optional[str] = None):
        self.token = token
        self.reason = reason
        detail = f"'{token}'" if reason is None else f"'{token}' ({reason})"
        super().__init__(detail)


class UnitNotFound(UnitError):
    """A literal unit name is not present in the registry."""

    description = "unknown unit"

    def __init__(self, name: str, slot: Optional[str] = None):
        self.name = name
        self.slot = slot
        if slot == "input":
            self.description = "converting from unknown unit"
        elif slot == "output":
            self.description = "converting to unknown unit"
        super().__init__(name)


class RecallUnset(UnitError):
    """Recall requested before any literal was resolved in that slot."""

    description = "unable to recall variable"

    def __init__(self, slot: str):
        self.slot = slot
        super().__init__(f"{slot}: not set")


class UnitExpressionError(UnitError):
    """Malformed unit expression syntax."""

    description = "parse error"

    def __init__(self, token: str, detail: Optional[str] = None):
        self.token = token
        super().__init__(detail or f"'{token}'")


class UnknownPrefix(UnitExpressionError):
    description = "unknown metric prefix"

    def __init__(self, prefix: str, token: str):
        self.prefix = prefix
        super().__init__(token, f"'{prefix}' in '{token}'")


class NoNameGiven(UnitExpressionError):
    description = "expected a unit name or recall expression"


class NoNameAllowed(UnitExpressionError):
    description = "recall expression takes no unit name"


class IncompatibleUnits(UnitError):
    """Resolved units belong to different unit types."""

    description = "incompatible unit types"

    def __init__(self, input_type: str, output_type: str,
                 input_name: Optional[str] = None, output_name: Optional[str] = None):
        self.input_type = input_type
        self.output_type = output_type
        self.input_name = input_name
        self.output_name = output_name
        super().__init__(f"attempted to convert {input_type} to {output_type}")
