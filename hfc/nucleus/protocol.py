# hfc/nucleus/protocol.py
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator


class FrameError(ValueError):
    """Raised when an inbound frame cannot be decoded into a known event."""


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PresenceData(_Payload):
    """Payload of a presence registration."""

    user_id: str = Field(..., alias="userId", min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_id(cls, value: Any) -> Any:
        # Older clients emit the user id itself instead of an object.
        if isinstance(value, str):
            return {"userId": value}
        return value


class MessageData(_Payload):
    """Payload of a message a client wants routed to another user."""

    sender_id: str = Field(..., alias="senderId", min_length=1)
    receiver_id: str = Field(..., alias="receiverId", min_length=1)
    message_text: str = Field(..., alias="messageText")


class DeliveryData(_Payload):
    sender_id: str = Field(..., alias="senderId")
    message_text: str = Field(..., alias="messageText")


class RegisterFrame(BaseModel):
    event: Literal["addUser"]
    data: PresenceData


class SendMessageFrame(BaseModel):
    event: Literal["sendMessage"]
    data: MessageData


class DeliveryFrame(BaseModel):
    """The frame pushed to a recipient's connection."""

    event: Literal["receiveMessage"] = "receiveMessage"
    data: DeliveryData

    @classmethod
    def build(cls, sender_id: str, message_text: str) -> "DeliveryFrame":
        return cls(data=DeliveryData(sender_id=sender_id, message_text=message_text))

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


InboundFrame = Annotated[Union[RegisterFrame, SendMessageFrame], Field(discriminator="event")]
_inbound_adapter = TypeAdapter(InboundFrame)


def parse_frame(raw: Union[str, bytes]) -> Union[RegisterFrame, SendMessageFrame]:
    """
    Decodes a raw websocket message into one of the inbound frame models.

    Raises:
        FrameError: if the message is not JSON, names an unknown event or
                    carries a payload missing required fields.
    """
    try:
        return _inbound_adapter.validate_json(raw)
    except ValidationError as e:
        raise FrameError(f"Invalid frame: {e.error_count()} error(s), first: {e.errors()[0]['msg']}") from e
