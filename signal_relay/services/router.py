"""Validation and dispatch of inbound signaling messages."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Protocol

from pydantic import ValidationError

from ..schemas.signaling import (
    DIRECTED_TYPES,
    MEMBERSHIP_TYPES,
    ErrorNotice,
    MessageType,
    SignalingEnvelope,
)
from .presence import PresenceNotifier
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class MalformedMessage(ValueError):
    """Raised for envelopes that cannot be parsed or are not valid client messages."""


class MembershipHandler(Protocol):
    def change_room(self, connection_id: str, room_id: str | None) -> Awaitable[bool]:
        ...

    def disconnect(self, connection_id: str) -> Awaitable[bool]:
        ...


def parse_envelope(raw: str | bytes) -> SignalingEnvelope:
    """Parse a text frame into an envelope a client is allowed to send."""

    try:
        envelope = SignalingEnvelope.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedMessage(f"unparseable envelope: {exc.errors()[0]['msg']}") from exc

    try:
        message_type = MessageType(envelope.type)
    except ValueError as exc:
        raise MalformedMessage(f"unrecognized message type {envelope.type!r}") from exc

    if message_type in DIRECTED_TYPES:
        if not isinstance(envelope.target, str) or not envelope.target:
            raise MalformedMessage(f"{message_type.value} requires a target")
        if "payload" not in envelope.model_fields_set:
            raise MalformedMessage(f"{message_type.value} requires a payload")
    elif message_type is MessageType.JOIN:
        if envelope.room_id is not None and not isinstance(envelope.room_id, str):
            raise MalformedMessage("join roomId must be a string")
    elif message_type not in MEMBERSHIP_TYPES:
        raise MalformedMessage(f"{message_type.value} is not accepted from clients")
    return envelope


class MessageRouter:
    """Route one inbound frame from ``sender_id`` to its recipient(s).

    Directed messages (offer/answer/ice-candidate) go to exactly one target
    with ``from`` stamped by the server. ``join`` and ``leave`` are handed to
    the membership handler. The payload is never inspected.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        notifier: PresenceNotifier,
        membership: MembershipHandler,
    ) -> None:
        self._registry = registry
        self._notifier = notifier
        self._membership = membership

    async def route(self, sender_id: str, raw: str | bytes) -> bool:
        """Dispatch ``raw``; return ``False`` once the sender has been torn down."""

        try:
            envelope = parse_envelope(raw)
        except MalformedMessage as exc:
            logger.warning("Protocol violation from %s: %s", sender_id, exc)
            self._notifier.deliver(
                sender_id,
                ErrorNotice(code="malformed-message", detail=str(exc)).as_message(),
            )
            return sender_id in self._registry

        message_type = MessageType(envelope.type)
        identity = self._registry.identity(sender_id)
        room = identity.room_id if identity else None
        logger.debug("Room %s: client %s sent %s", room, sender_id, message_type.value)

        if message_type is MessageType.JOIN:
            await self._membership.change_room(sender_id, envelope.room_id)
            return sender_id in self._registry
        if message_type is MessageType.LEAVE:
            await self._membership.disconnect(sender_id)
            return False

        self.forward(sender_id, envelope)
        return True

    def forward(self, sender_id: str, envelope: SignalingEnvelope) -> bool:
        """Deliver a directed envelope to its target, dropping it if the target is gone."""

        message: dict[str, Any] = dict(envelope.model_extra or {})
        message.update(type=envelope.type, target=envelope.target, payload=envelope.payload)
        if "room_id" in envelope.model_fields_set:
            message["roomId"] = envelope.room_id
        message["from"] = sender_id

        target = envelope.target
        if self._registry.resolve(target) is None:
            logger.debug("Dropping %s from %s: target %s is not connected", envelope.type, sender_id, target)
            return False
        return self._notifier.deliver(target, message)
