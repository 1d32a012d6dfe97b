"""
Domain exceptions - Semantic error types for the name registry.

Every failure of a registry operation is one of these types. Each carries a
stable ``code`` and a structured payload so the host can surface the error
verbatim to the caller.
"""

from typing import Any

from .models import Coin


class RegistryError(Exception):
    """Base class for registry domain errors."""

    code = "registry_error"

    def to_dict(self) -> dict[str, Any]:
        """Structured payload describing the error."""
        return {"code": self.code, "message": str(self)}


class InvalidFee(RegistryError):
    """Attached funds are not exactly one unit of the configured fee."""

    code = "invalid_fee"

    def __init__(self, given: list[Coin], expected: Coin) -> None:
        self.given = list(given)
        self.expected = expected
        rendered = ", ".join(str(coin) for coin in self.given)
        super().__init__(f"Expected {expected} as fee but received [{rendered}]")

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["given"] = [coin.to_dict() for coin in self.given]
        payload["expected"] = self.expected.to_dict()
        return payload


class ValidationError(RegistryError):
    """Structural violation of a name, metadata field or address."""

    code = "validation_error"

    def __init__(self, field: str, reason: str, errors: list[tuple[str, str]] | None = None) -> None:
        self.field = field
        self.reason = reason
        self.errors = errors or [(field, reason)]
        super().__init__("; ".join(f"{f}: {r}" for f, r in self.errors))

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["field"] = self.field
        payload["reason"] = self.reason
        payload["errors"] = [{"field": f, "reason": r} for f, r in self.errors]
        return payload


class Unauthorized(RegistryError):
    """Caller is not the owner, or the name is already registered."""

    code = "unauthorized"

    def __init__(self) -> None:
        super().__init__("Unauthorized")


class NotFound(RegistryError):
    """Operation targets a name that is not registered."""

    code = "not_found"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No entry registered under {name!r}")

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["name"] = self.name
        return payload


class NotAValidator(RegistryError):
    """Entry has no validator address, or the directory does not know it."""

    code = "not_a_validator"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("The owner of the entry is not a validator")

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["name"] = self.name
        return payload


class NotInstantiated(RegistryError):
    """The registry config has not been written yet."""

    code = "not_instantiated"

    def __init__(self) -> None:
        super().__init__("Registry has not been instantiated")


class AlreadyInstantiated(RegistryError):
    """Instantiate was called on a registry that already holds a config."""

    code = "already_instantiated"

    def __init__(self) -> None:
        super().__init__("Registry is already instantiated")


class Conflict(RegistryError):
    """State read by the operation changed before its writes were applied."""

    code = "conflict"

    def __init__(self) -> None:
        super().__init__("Registry state changed during the operation; retry")
