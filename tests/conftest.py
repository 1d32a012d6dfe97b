"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Deterministic test addresses
- In-memory registry wiring (store, address validator, validator directory)
- An instantiated registry service
"""

import hashlib
from collections.abc import Callable

import pytest

from src.adapters.identity.prefix import BECH32_CHARSET, PrefixAddressValidator
from src.adapters.storage.memory import MemoryStore
from src.adapters.validators.static import StaticValidatorDirectory
from src.domain.models import Coin, InstantiateMsg, MessageInfo, ValidatorRecord
from src.domain.registry import RegistryService

REGISTRATION_FEE = Coin(denom="ucosm", amount=100)
TRANSFER_FEE = Coin(denom="ucosm", amount=50)


def address_for(label: str, prefix: str = "cosmos") -> str:
    """Build a stable bech32-shaped address from a label."""
    digest = hashlib.sha512(label.encode()).digest()
    return prefix + "1" + "".join(BECH32_CHARSET[b % 32] for b in digest[:38])


@pytest.fixture
def make_address() -> Callable[..., str]:
    return address_for


@pytest.fixture
def registration_fee() -> Coin:
    return REGISTRATION_FEE


@pytest.fixture
def transfer_fee() -> Coin:
    return TRANSFER_FEE


@pytest.fixture
def alice() -> str:
    return address_for("alice")


@pytest.fixture
def bob() -> str:
    return address_for("bob")


@pytest.fixture
def validator_record() -> ValidatorRecord:
    return ValidatorRecord(
        address=address_for("validator", prefix="cosmosvaloper"),
        commission="0.05",
        max_commission="0.2",
        max_change_rate="0.01",
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def service(store: MemoryStore, validator_record: ValidatorRecord) -> RegistryService:
    """Registry service over an empty in-memory store."""
    return RegistryService(
        store=store,
        identity_validator=PrefixAddressValidator("cosmos"),
        validator_directory=StaticValidatorDirectory([validator_record]),
    )


@pytest.fixture
def registry(service: RegistryService, alice: str) -> RegistryService:
    """Registry service instantiated with the default test fees."""
    service.instantiate(
        MessageInfo(sender=alice),
        InstantiateMsg(registration_fee=REGISTRATION_FEE, transfer_fee=TRANSFER_FEE),
    )
    return service
