"""
API v1 routes.

Defines REST endpoints for the Name Registry API. Execute operations take
the caller from the X-Sender header and attached funds from the body.
"""

from fastapi import APIRouter, Depends, Query, status

from src.adapters.bank.console import ConsoleFundsDispatcher
from src.api.dependencies import get_funds_dispatcher, get_registry_service, get_sender
from src.api.models import (
    BankSendModel,
    EntryListResponse,
    EntryResponse,
    ErrorResponse,
    ExecuteResponse,
    InstantiateRequest,
    NamedEntry,
    RegisterRequest,
    SendFundsRequest,
    TransferRequest,
    ValidatorResponse,
)
from src.domain.models import InstantiateMsg, MessageInfo
from src.domain.registry import DEFAULT_LIMIT, MAX_LIMIT, RegistryService

router = APIRouter(tags=["v1"])


def _to_execute_response(messages) -> ExecuteResponse:
    return ExecuteResponse(messages=[BankSendModel.from_domain(send) for send in messages])


@router.post(
    "/instantiate",
    response_model=ExecuteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Already instantiated"}},
    summary="Instantiate the registry",
    description="Set the registration and transfer fees. Can only be done once.",
)
async def instantiate(
    request_data: InstantiateRequest,
    sender: str = Depends(get_sender),
    service: RegistryService = Depends(get_registry_service),
) -> ExecuteResponse:
    response = service.instantiate(
        MessageInfo(sender=sender),
        InstantiateMsg(
            registration_fee=request_data.registration_fee.to_domain(),
            transfer_fee=request_data.transfer_fee.to_domain(),
        ),
    )
    return _to_execute_response(response.messages)


@router.post(
    "/register",
    response_model=ExecuteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {"model": ErrorResponse, "description": "Attached funds are not the registration fee"},
        403: {"model": ErrorResponse, "description": "Name already registered"},
        409: {"model": ErrorResponse, "description": "Name registered concurrently; retry"},
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
    summary="Register a name",
    description="Register a name to the caller. Exactly the registration fee must be attached.",
)
async def register(
    request_data: RegisterRequest,
    sender: str = Depends(get_sender),
    service: RegistryService = Depends(get_registry_service),
) -> ExecuteResponse:
    """
    Register a name.

    - **name**: 3 to 64 characters
    - **metadata.url**: optional, must be a valid URL
    - **funds**: exactly one coin equal to the registration fee
    """
    info = MessageInfo(sender=sender, funds=tuple(coin.to_domain() for coin in request_data.funds))
    response = service.register(info, request_data.name, request_data.metadata.to_domain())
    return _to_execute_response(response.messages)


@router.post(
    "/transfer",
    response_model=ExecuteResponse,
    responses={
        402: {"model": ErrorResponse, "description": "Attached funds are not the transfer fee"},
        403: {"model": ErrorResponse, "description": "Caller does not own the name"},
        404: {"model": ErrorResponse, "description": "Name not registered"},
        409: {"model": ErrorResponse, "description": "Entry changed concurrently; retry"},
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
    summary="Transfer a name",
    description="Hand a name to a new owner. Only the current owner may do this.",
)
async def transfer(
    request_data: TransferRequest,
    sender: str = Depends(get_sender),
    service: RegistryService = Depends(get_registry_service),
) -> ExecuteResponse:
    info = MessageInfo(sender=sender, funds=tuple(coin.to_domain() for coin in request_data.funds))
    response = service.transfer(info, request_data.name, request_data.to)
    return _to_execute_response(response.messages)


@router.post(
    "/send-funds",
    response_model=ExecuteResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Name not registered"},
        422: {"model": ErrorResponse, "description": "No funds attached"},
    },
    summary="Send funds to a name's owner",
    description="Forward the attached funds to whoever owns the name.",
)
async def send_funds(
    request_data: SendFundsRequest,
    sender: str = Depends(get_sender),
    service: RegistryService = Depends(get_registry_service),
    dispatcher: ConsoleFundsDispatcher = Depends(get_funds_dispatcher),
) -> ExecuteResponse:
    info = MessageInfo(sender=sender, funds=tuple(coin.to_domain() for coin in request_data.funds))
    response = service.send_funds_to(info, request_data.name)

    # Hand off only after the operation succeeded
    for send in response.messages:
        dispatcher.dispatch(send)

    return _to_execute_response(response.messages)


@router.get(
    "/entries",
    response_model=EntryListResponse,
    summary="List entries",
    description="Entries in ascending name order. Pass the last returned name "
    "as start_after to fetch the next page.",
)
async def list_entries(
    start_after: str | None = Query(None, description="Exclusive cursor"),
    limit: int = Query(DEFAULT_LIMIT, ge=0, le=MAX_LIMIT),
    service: RegistryService = Depends(get_registry_service),
) -> EntryListResponse:
    page = service.list_entries(start_after=start_after, limit=limit)
    return EntryListResponse(entries=[NamedEntry.from_pair(name, entry) for name, entry in page])


@router.get(
    "/entries/{name}",
    response_model=EntryResponse,
    responses={404: {"model": ErrorResponse, "description": "Name not registered"}},
    summary="Look up a name",
)
async def lookup(
    name: str,
    service: RegistryService = Depends(get_registry_service),
) -> EntryResponse:
    return EntryResponse.from_domain(service.lookup(name))


@router.get(
    "/entries/{name}/validator",
    response_model=ValidatorResponse,
    responses={404: {"model": ErrorResponse, "description": "Name not registered or not a validator"}},
    summary="Resolve a name's validator",
    description="Look up the validator recorded in the entry's metadata.",
)
async def validator_info(
    name: str,
    service: RegistryService = Depends(get_registry_service),
) -> ValidatorResponse:
    return ValidatorResponse.from_domain(service.query_validator_info(name))
