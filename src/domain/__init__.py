"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic of the name registry. It
defines its own port interfaces for infrastructure abstraction, ensuring
true hexagonal architecture decoupling.
"""

from .exceptions import (
    AlreadyInstantiated,
    Conflict,
    InvalidFee,
    NotAValidator,
    NotFound,
    NotInstantiated,
    RegistryError,
    Unauthorized,
    ValidationError,
)
from .models import (
    BankSend,
    Coin,
    Config,
    Entry,
    InstantiateMsg,
    MessageInfo,
    Metadata,
    RegisterMsg,
    Response,
    SendFundsToMsg,
    TransferMsg,
    ValidatorRecord,
)
from .ports import FundsDispatcher, IdentityValidator, KeyValueStore, ValidatorDirectory
from .registry import RegistryService

__all__ = [
    "AlreadyInstantiated",
    "BankSend",
    "Coin",
    "Config",
    "Conflict",
    "Entry",
    "FundsDispatcher",
    "IdentityValidator",
    "InstantiateMsg",
    "InvalidFee",
    "KeyValueStore",
    "MessageInfo",
    "Metadata",
    "NotAValidator",
    "NotFound",
    "NotInstantiated",
    "RegisterMsg",
    "RegistryError",
    "RegistryService",
    "Response",
    "SendFundsToMsg",
    "TransferMsg",
    "Unauthorized",
    "ValidationError",
    "ValidatorDirectory",
    "ValidatorRecord",
]
