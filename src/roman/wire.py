"""Builders for the outbound wire messages accepted by the broadcast API."""

from __future__ import annotations

from src.models import (
    AssetPayload,
    AttachmentData,
    AttachmentMessage,
    CallData,
    CallMessage,
    CallType,
    TextData,
    TextMessage,
)


def wire_text(message: str) -> TextMessage:
    return TextMessage(text=TextData(data=message))


def wire_call(call_type: CallType) -> CallMessage:
    return CallMessage(call=CallData(type=call_type))


def wire_call_start() -> CallMessage:
    """Ring the phones of every subscriber."""
    return wire_call(CallType.START)


def wire_call_drop() -> CallMessage:
    """Leave the group call."""
    return wire_call(CallType.DROP)


def wire_attachment(
    data: str,
    filename: str | None = None,
    mime_type: str | None = None,
    duration: int | float | None = None,
    levels: list[int] | None = None,
) -> AttachmentMessage:
    return AttachmentMessage(
        attachment=AttachmentData(
            data=data,
            filename=filename,
            mime_type=mime_type,
            duration=duration,
            levels=levels,
        ),
    )


def wire_attachment_from_asset(asset: AssetPayload) -> AttachmentMessage:
    """Re-wrap an inbound asset; the caption doubles as filename when none is sent."""
    if not asset.attachment:
        raise ValueError("Asset payload carries no attachment data")
    return wire_attachment(
        data=asset.attachment,
        filename=asset.filename if asset.filename is not None else asset.text,
        mime_type=asset.mime_type,
        duration=asset.duration,
        levels=asset.levels,
    )
