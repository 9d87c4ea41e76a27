"""Output models for explained transactions."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from .units import MAX_SAFE_INTEGER


class ExplainerBaseModel(BaseModel):
    """Immutable model serialized with camelCase keys for the web client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_response(self) -> Dict[str, Any]:
        """Dump to a JSON-ready dict, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NormalizedEvent(ExplainerBaseModel):
    type: str = "event"
    asset: Optional[str] = None
    amount: Optional[str] = None
    amount_stx: Optional[str] = None
    sender: Optional[str] = None
    recipient: Optional[str] = None
    sender_short: Optional[str] = None
    recipient_short: Optional[str] = None


class ExplainedTransaction(ExplainerBaseModel):
    summary: str
    tx_type: str
    tx_id: Optional[str] = None
    status: Optional[str] = None
    sender: Optional[str] = None
    recipient: Optional[str] = None
    amount: Optional[str] = None
    amount_stx: Optional[str] = None
    fee: Optional[str] = None
    fee_stx: Optional[str] = None
    nonce: Optional[int] = None
    contract_id: Optional[str] = None
    function_name: Optional[str] = None
    function_args: List[str] = Field(default_factory=list)
    memo: Optional[str] = None
    block_height: Optional[int] = None
    block_time: Optional[str] = None
    confirmations: Optional[int] = None
    anchor_mode: Optional[str] = None
    events: List[NormalizedEvent] = Field(default_factory=list)

    @field_serializer("nonce", "block_height", "confirmations", when_used="json")
    def serialize_counter(self, value: Optional[int]) -> Union[int, str, None]:
        # u64 values beyond 2**53 do not survive a JavaScript number
        if value is not None and abs(value) > MAX_SAFE_INTEGER:
            return str(value)
        return value


class WalletStorySection(ExplainerBaseModel):
    title: str
    description: str


class WalletStory(ExplainerBaseModel):
    address: str
    sections: List[WalletStorySection] = Field(default_factory=list)
    transactions: List[ExplainedTransaction] = Field(default_factory=list)
