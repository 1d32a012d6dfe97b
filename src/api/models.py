"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Name length and URL shape are checked by the domain, not here, so that
those violations come back as structured registry errors.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.domain.models import BankSend, Coin, Entry, Metadata, ValidatorRecord


class CoinModel(BaseModel):
    """A single-denomination amount."""

    denom: str = Field(..., min_length=1, description="Denomination, e.g. ucosm")
    amount: int = Field(..., ge=0, description="Amount in the smallest unit")

    def to_domain(self) -> Coin:
        return Coin(denom=self.denom, amount=self.amount)

    @classmethod
    def from_domain(cls, coin: Coin) -> "CoinModel":
        return cls(denom=coin.denom, amount=coin.amount)


class MetadataModel(BaseModel):
    url: str | None = None
    validator_address: str | None = None

    def to_domain(self) -> Metadata:
        return Metadata(url=self.url, validator_address=self.validator_address)

    @classmethod
    def from_domain(cls, metadata: Metadata) -> "MetadataModel":
        return cls(url=metadata.url, validator_address=metadata.validator_address)


class InstantiateRequest(BaseModel):
    """Request model for one-time registry setup."""

    registration_fee: CoinModel
    transfer_fee: CoinModel


class RegisterRequest(BaseModel):
    """Request model for name registration."""

    name: str
    metadata: MetadataModel = Field(default_factory=MetadataModel)
    funds: list[CoinModel] = Field(default_factory=list, description="Attached funds")


class TransferRequest(BaseModel):
    """Request model for ownership transfer."""

    name: str
    to: str = Field(..., description="Address of the new owner")
    funds: list[CoinModel] = Field(default_factory=list, description="Attached funds")


class SendFundsRequest(BaseModel):
    """Request model for forwarding funds to a name's owner."""

    name: str
    funds: list[CoinModel] = Field(default_factory=list, description="Funds to forward")


class BankSendModel(BaseModel):
    to_address: str
    amount: list[CoinModel]

    @classmethod
    def from_domain(cls, send: BankSend) -> "BankSendModel":
        return cls(
            to_address=send.to_address,
            amount=[CoinModel.from_domain(coin) for coin in send.amount],
        )


class ExecuteResponse(BaseModel):
    """Response model for execute operations: emitted outbound messages."""

    messages: list[BankSendModel] = Field(default_factory=list)


class EntryResponse(BaseModel):
    """Response model for a single entry lookup."""

    owner: str
    metadata: MetadataModel

    @classmethod
    def from_domain(cls, entry: Entry) -> "EntryResponse":
        return cls(owner=entry.owner, metadata=MetadataModel.from_domain(entry.metadata))


class NamedEntry(EntryResponse):
    name: str

    @classmethod
    def from_pair(cls, name: str, entry: Entry) -> "NamedEntry":
        return cls(name=name, owner=entry.owner, metadata=MetadataModel.from_domain(entry.metadata))


class EntryListResponse(BaseModel):
    """Response model for a page of entries in ascending name order."""

    entries: list[NamedEntry]


class ValidatorResponse(BaseModel):
    address: str
    commission: str
    max_commission: str
    max_change_rate: str

    @classmethod
    def from_domain(cls, validator: ValidatorRecord) -> "ValidatorResponse":
        return cls(**validator.to_dict())


class ErrorBody(BaseModel):
    """Error code and message, plus the error's structured payload fields."""

    model_config = ConfigDict(extra="allow")

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: ErrorBody
