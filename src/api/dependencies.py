"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from src.adapters.bank.console import ConsoleFundsDispatcher
from src.domain.exceptions import ValidationError
from src.domain.ports import IdentityValidator, KeyValueStore, ValidatorDirectory
from src.domain.registry import RegistryService

# Module-level singleton - ConsoleFundsDispatcher is stateless
_funds_dispatcher = ConsoleFundsDispatcher()


def get_store(request: Request) -> KeyValueStore:
    """
    Get the key-value store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.store


def get_identity_validator(request: Request) -> IdentityValidator:
    return request.app.state.identity_validator


def get_validator_directory(request: Request) -> ValidatorDirectory:
    return request.app.state.validator_directory


def get_funds_dispatcher() -> ConsoleFundsDispatcher:
    """Get console funds dispatcher (singleton)."""
    return _funds_dispatcher


def get_registry_service(request: Request) -> RegistryService:
    """
    Create registry service with injected dependencies.

    Wires together the store, address validator and validator directory.
    """
    return RegistryService(
        store=get_store(request),
        identity_validator=get_identity_validator(request),
        validator_directory=get_validator_directory(request),
    )


# X-Sender header security scheme for OpenAPI documentation
sender_header = APIKeyHeader(name="X-Sender", auto_error=False)


def get_sender(
    request: Request,
    sender: str | None = Depends(sender_header),
) -> str:
    """
    Extract and normalize the caller address from the X-Sender header.

    Returns:
        Normalized caller address

    Raises:
        HTTPException: 401 if the header is missing
        ValidationError: If the address is malformed
    """
    if not sender:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Sender header",
        )
    try:
        return get_identity_validator(request).validate(sender)
    except ValueError as e:
        raise ValidationError("sender", str(e)) from e
