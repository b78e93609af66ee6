"""Shared Pydantic data models for the roman broadcast bridge."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

PayloadT = TypeVar("PayloadT", bound=BaseModel)

# --- Enums ---


class EventType(str, Enum):
    INIT = "conversation.init"
    NEW_TEXT = "conversation.new_text"
    CALL = "conversation.call"
    AUDIO_NEW = "conversation.audio.new"
    NEW_IMAGE = "conversation.new_image"
    FILE_NEW = "conversation.file.new"
    ASSET_DATA = "conversation.asset.data"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> EventType:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class CallType(str, Enum):
    START = "GROUPSTART"
    DROP = "GROUPLEAVE"


# --- Tenant Models ---


class TenantAuth(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    admin_user_ids: frozenset[str] = Field(alias="admins", min_length=1)
    api_key: str = Field(alias="appKey", min_length=1)

    def is_admin(self, user_id: str) -> bool:
        return user_id in self.admin_user_ids


# --- Inbound Models ---


class CallPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: str | None = None
    type: str | None = None
    resp: bool | None = None
    sessid: str | None = None


class InboundEvent(BaseModel):
    """Envelope of one webhook call; kind-specific fields stay in model_extra."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    user_id: str = Field(default="", alias="userId")
    message_id: str = Field(default="", alias="messageId")
    conversation_id: str | None = Field(default=None, alias="conversationId")

    @property
    def event_type(self) -> EventType:
        return EventType.parse(self.type)

    def payload(self, model: type[PayloadT]) -> PayloadT:
        """Validate the kind-specific fields against the payload model of one handler."""
        return model.model_validate(self.model_extra or {})


class TextPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str | None = None


class CallEventPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    call: CallPayload | None = None


class AssetPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    attachment: str | None = None
    text: str | None = None
    filename: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
    duration: int | float | None = None
    levels: list[int] | None = None


class EmptyPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")


# --- Wire Models ---


class TextData(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: str


class CallData(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str = "3.0"
    type: CallType
    resp: bool = False
    sessid: str = ""


class AttachmentData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    data: str
    filename: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
    duration: int | float | None = None
    levels: list[int] | None = None


class TextMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: TextData


class CallMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["call"] = "call"
    call: CallData


class AttachmentMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["attachment"] = "attachment"
    attachment: AttachmentData


WireMessage = TextMessage | CallMessage | AttachmentMessage


def wire_payload(message: WireMessage) -> dict[str, Any]:
    """Serialize a wire message to the JSON shape the downstream API expects."""
    return message.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Stats Models ---


class StatsEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    count: int


class BroadcastStatsReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    report: list[StatsEntry]

    def render(self) -> str:
        return "\n".join(f"{entry.type}: {entry.count}" for entry in self.report)
