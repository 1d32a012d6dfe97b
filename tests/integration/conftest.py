"""
Fixtures for integration tests.

Runs the real application (lifespan included) against the in-memory store
with a validator set loaded from a temporary JSON file.
"""

import json
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.config.settings import get_settings
from src.domain.models import ValidatorRecord


@pytest.fixture
def client(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, validator_record: ValidatorRecord
) -> Generator[TestClient, None, None]:
    """Create test client over a fresh in-memory registry."""
    validators_file = tmp_path / "validators.json"
    validators_file.write_text(json.dumps([validator_record.to_dict()]))

    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("ADDRESS_PREFIX", "cosmos")
    monkeypatch.setenv("VALIDATORS_FILE", str(validators_file))
    get_settings.cache_clear()

    with TestClient(app) as test_client:
        yield test_client

    get_settings.cache_clear()


@pytest.fixture
def instantiated(client: TestClient, alice: str) -> TestClient:
    """Client whose registry charges 100ucosm to register and 50ucosm to transfer."""
    response = client.post(
        "/v1/instantiate",
        json={
            "registration_fee": {"denom": "ucosm", "amount": 100},
            "transfer_fee": {"denom": "ucosm", "amount": 50},
        },
        headers={"X-Sender": alice},
    )
    assert response.status_code == 201
    return client
