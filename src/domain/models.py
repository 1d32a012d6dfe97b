"""
Domain models - Plain dataclasses for registry state and messages.

Serialization to and from dictionaries lives here so that the storage layer
can persist records as JSON without depending on any framework.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Coin:
    """A monetary amount in a single denomination."""

    denom: str
    amount: int

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def to_dict(self) -> dict[str, Any]:
        return {"denom": self.denom, "amount": self.amount}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Coin":
        return cls(denom=data["denom"], amount=int(data["amount"]))


@dataclass(frozen=True)
class Config:
    """Fees charged by the registry. Written once at instantiation."""

    registration_fee: Coin
    transfer_fee: Coin

    def to_dict(self) -> dict[str, Any]:
        return {
            "registration_fee": self.registration_fee.to_dict(),
            "transfer_fee": self.transfer_fee.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        return cls(
            registration_fee=Coin.from_dict(data["registration_fee"]),
            transfer_fee=Coin.from_dict(data["transfer_fee"]),
        )


@dataclass(frozen=True)
class Metadata:
    url: str | None = None
    validator_address: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "validator_address": self.validator_address}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metadata":
        return cls(url=data.get("url"), validator_address=data.get("validator_address"))


@dataclass(frozen=True)
class Entry:
    """A registered name's owner and metadata."""

    owner: str
    metadata: Metadata = field(default_factory=Metadata)

    def to_dict(self) -> dict[str, Any]:
        return {"owner": self.owner, "metadata": self.metadata.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entry":
        return cls(owner=data["owner"], metadata=Metadata.from_dict(data.get("metadata") or {}))


@dataclass(frozen=True)
class ValidatorRecord:
    """Staking validator as reported by the validator directory."""

    address: str
    commission: str
    max_commission: str
    max_change_rate: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "commission": self.commission,
            "max_commission": self.max_commission,
            "max_change_rate": self.max_change_rate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidatorRecord":
        return cls(
            address=data["address"],
            commission=str(data["commission"]),
            max_commission=str(data["max_commission"]),
            max_change_rate=str(data["max_change_rate"]),
        )


@dataclass(frozen=True)
class MessageInfo:
    """Who is calling and which funds they attached."""

    sender: str
    funds: tuple[Coin, ...] = ()


@dataclass(frozen=True)
class BankSend:
    """Outbound instruction to move funds to an address."""

    to_address: str
    amount: tuple[Coin, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "to_address": self.to_address,
            "amount": [coin.to_dict() for coin in self.amount],
        }


@dataclass(frozen=True)
class Response:
    """Result of a successful execute: the outbound messages it emits."""

    messages: tuple[BankSend, ...] = ()


# Operation messages


@dataclass(frozen=True)
class InstantiateMsg:
    registration_fee: Coin
    transfer_fee: Coin


@dataclass(frozen=True)
class RegisterMsg:
    name: str
    metadata: Metadata = field(default_factory=Metadata)


@dataclass(frozen=True)
class TransferMsg:
    name: str
    to: str


@dataclass(frozen=True)
class SendFundsToMsg:
    name: str


ExecuteMsg = RegisterMsg | TransferMsg | SendFundsToMsg


@dataclass(frozen=True)
class LookupQuery:
    name: str


@dataclass(frozen=True)
class ListQuery:
    start_after: str | None = None
    limit: int | None = None


@dataclass(frozen=True)
class ValidatorInfoQuery:
    name: str


QueryMsg = LookupQuery | ListQuery | ValidatorInfoQuery
