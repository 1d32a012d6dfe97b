"""
Registry domain service - Name registration state machine.

This module contains the core business logic of the name registry:
registering names against an exact fee, transferring ownership, forwarding
funds to a name's owner, and the read-only queries over registered entries.

Operation Rules
===============

Register(name, metadata) + funds
    1. funds must be exactly one coin equal to the registration fee
    2. name length in [3, 64]; metadata.url, when set, a valid URL
    3. name must not be registered yet (collision -> Unauthorized)

Transfer(name, to) + funds
    1. funds must be exactly one coin equal to the transfer fee
    2. name must be registered (NotFound)
    3. caller must be the current owner (Unauthorized)
    4. to must be a valid address (ValidationError)

SendFundsTo(name) + funds
    name must be registered and funds non-empty with positive amounts. Any
    caller may forward funds; the response carries one BankSend of the
    attached funds to the owner.

Every state-mutating operation runs against a StagedStore. Writes reach the
underlying store in one set_many() call, and only when the operation
succeeds. A raised error leaves the store untouched. If another writer
changed a key the operation read, the commit raises Conflict instead.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

from .exceptions import (
    AlreadyInstantiated,
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
    ExecuteMsg,
    InstantiateMsg,
    ListQuery,
    LookupQuery,
    MessageInfo,
    Metadata,
    QueryMsg,
    RegisterMsg,
    Response,
    SendFundsToMsg,
    TransferMsg,
    ValidatorInfoQuery,
    ValidatorRecord,
)
from .ports import IdentityValidator, KeyValueStore, ValidatorDirectory
from .state import StagedStore, iter_entries, load_config, load_entry, save_config, save_entry
from .validation import UNENCODABLE_REASON, encodes_as_utf8, validate_registration

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
MAX_LIMIT = 100


def ensure_fee_paid(funds: Sequence[Coin], expected: Coin) -> None:
    """
    Require exactly one attached coin equal to the expected fee.

    Zero coins, several coins, a different denomination and a different
    amount all fail the same way.

    Raises:
        InvalidFee: Carrying both the attached funds and the expected fee
    """
    if len(funds) != 1 or funds[0] != expected:
        raise InvalidFee(given=list(funds), expected=expected)


@dataclass
class RegistryService:
    """
    Domain service for the name registry.

    Holds explicit handles to its collaborators; there is no module-level
    state. Tests wire it to a MemoryStore and plain fakes.
    """

    store: KeyValueStore
    identity_validator: IdentityValidator
    validator_directory: ValidatorDirectory

    # Execute operations

    def instantiate(self, info: MessageInfo, msg: InstantiateMsg) -> Response:
        """
        Write the registry config.

        Raises:
            AlreadyInstantiated: If a config is already stored
        """
        with self._operation("instantiate", info) as store:
            if load_config(store) is not None:
                raise AlreadyInstantiated()
            save_config(
                store,
                Config(registration_fee=msg.registration_fee, transfer_fee=msg.transfer_fee),
            )
        return Response()

    def execute(self, info: MessageInfo, msg: ExecuteMsg) -> Response:
        """Dispatch an execute message to its operation."""
        if isinstance(msg, RegisterMsg):
            return self.register(info, msg.name, msg.metadata)
        if isinstance(msg, TransferMsg):
            return self.transfer(info, msg.name, msg.to)
        if isinstance(msg, SendFundsToMsg):
            return self.send_funds_to(info, msg.name)
        raise TypeError(f"Unsupported execute message: {type(msg).__name__}")

    def register(self, info: MessageInfo, name: str, metadata: Metadata) -> Response:
        """
        Register name to the caller.

        Raises:
            InvalidFee: Funds are not exactly the registration fee
            ValidationError: Name or metadata is malformed
            Unauthorized: Name is already registered
            Conflict: Name was registered concurrently by another writer
        """
        with self._operation("register", info, name) as store:
            config = self._load_config(store)
            ensure_fee_paid(info.funds, config.registration_fee)

            validate_registration(name, metadata)

            if load_entry(store, name) is not None:
                raise Unauthorized()

            save_entry(store, name, Entry(owner=info.sender, metadata=metadata))
        return Response()

    def transfer(self, info: MessageInfo, name: str, to: str) -> Response:
        """
        Hand ownership of name to another address.

        Raises:
            InvalidFee: Funds are not exactly the transfer fee
            NotFound: Name is not registered
            Unauthorized: Caller is not the current owner
            ValidationError: Recipient address is malformed
            Conflict: Entry changed concurrently by another writer
        """
        with self._operation("transfer", info, name) as store:
            config = self._load_config(store)
            ensure_fee_paid(info.funds, config.transfer_fee)

            entry = self._load_entry(store, name)

            # only owner can transfer
            if info.sender != entry.owner:
                raise Unauthorized()

            try:
                new_owner = self.identity_validator.validate(to)
            except ValueError as e:
                raise ValidationError("to", str(e)) from e

            save_entry(store, name, Entry(owner=new_owner, metadata=entry.metadata))
        return Response()

    def send_funds_to(self, info: MessageInfo, name: str) -> Response:
        """
        Forward the attached funds to the owner of name.

        No caller check is made: anyone may pay a name's owner.

        Raises:
            NotFound: Name is not registered
            ValidationError: No coins are attached, or a coin has a zero amount
        """
        with self._operation("send_funds_to", info, name) as store:
            entry = self._load_entry(store, name)
            # a bank send of nothing is rejected by the payment rail
            if not info.funds:
                raise ValidationError("funds", "must include at least one coin")
            if any(coin.amount <= 0 for coin in info.funds):
                raise ValidationError("funds", "coin amounts must be positive")
        return Response(messages=(BankSend(to_address=entry.owner, amount=tuple(info.funds)),))

    # Queries

    def query(self, msg: QueryMsg) -> Entry | list[tuple[str, Entry]] | ValidatorRecord:
        """Dispatch a query message."""
        if isinstance(msg, LookupQuery):
            return self.lookup(msg.name)
        if isinstance(msg, ListQuery):
            return self.list_entries(msg.start_after, msg.limit)
        if isinstance(msg, ValidatorInfoQuery):
            return self.query_validator_info(msg.name)
        raise TypeError(f"Unsupported query message: {type(msg).__name__}")

    def lookup(self, name: str) -> Entry:
        """
        Raises:
            NotFound: Name is not registered
            ValidationError: Name cannot be encoded as UTF-8
        """
        return self._load_entry(self.store, name)

    def list_entries(self, start_after: str | None = None, limit: int | None = None) -> list[tuple[str, Entry]]:
        """
        List entries in ascending name order.

        Args:
            start_after: Exclusive cursor; pass the last name of the previous page
            limit: Page size, defaults to 100 and is capped at 100

        Returns:
            Up to limit (name, entry) pairs

        Raises:
            ValidationError: start_after cannot be encoded as UTF-8
        """
        if start_after is not None and not encodes_as_utf8(start_after):
            raise ValidationError("start_after", UNENCODABLE_REASON)
        page_size = DEFAULT_LIMIT if limit is None else max(0, min(limit, MAX_LIMIT))
        page: list[tuple[str, Entry]] = []
        if page_size == 0:
            return page
        for item in iter_entries(self.store, start_after):
            page.append(item)
            if len(page) >= page_size:
                break
        return page

    def query_validator_info(self, name: str) -> ValidatorRecord:
        """
        Resolve the validator recorded in an entry's metadata.

        Raises:
            NotFound: Name is not registered
            NotAValidator: No validator address is recorded, or the
                directory has no validator at that address
        """
        entry = self._load_entry(self.store, name)
        address = entry.metadata.validator_address
        if address is None:
            raise NotAValidator(name)

        validator = self.validator_directory.get_validator(address)
        if validator is None:
            raise NotAValidator(name)
        return validator

    # Helpers

    @contextmanager
    def _operation(self, operation: str, info: MessageInfo, name: str | None = None) -> Iterator[StagedStore]:
        """Run one operation against a StagedStore and commit it on success."""
        staged = StagedStore(self.store)
        try:
            yield staged
            staged.commit()
        except RegistryError as e:
            logger.warning(
                "Rejected %s name=%s sender=%s: %s", operation, name, info.sender, e.code
            )
            raise
        logger.info("Accepted %s name=%s sender=%s", operation, name, info.sender)

    @staticmethod
    def _load_config(store: KeyValueStore) -> Config:
        config = load_config(store)
        if config is None:
            raise NotInstantiated()
        return config

    @staticmethod
    def _load_entry(store: KeyValueStore, name: str) -> Entry:
        if not encodes_as_utf8(name):
            raise ValidationError("name", UNENCODABLE_REASON)
        entry = load_entry(store, name)
        if entry is None:
            raise NotFound(name)
        return entry
