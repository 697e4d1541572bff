"""Data contracts for the signaling WebSocket."""
from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageType(str, enum.Enum):
    JOIN = "join"
    LEAVE = "leave"
    OFFER = "offer"
    ANSWER = "answer"
    ICE_CANDIDATE = "ice-candidate"
    PEER_LIST = "peer-list"
    NEW_PEER = "new-peer"
    PEER_DISCONNECTED = "peer-disconnected"
    ID_ASSIGNMENT = "id-assignment"
    ERROR = "error"


DIRECTED_TYPES = frozenset({MessageType.OFFER, MessageType.ANSWER, MessageType.ICE_CANDIDATE})
MEMBERSHIP_TYPES = frozenset({MessageType.JOIN, MessageType.LEAVE})


class SignalingEnvelope(BaseModel):
    """Inbound message as sent by a client.

    Keys other than these fields, ``from`` included, are kept as extras and
    forwarded with directed messages; ``from`` is then overwritten.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    target: Any = None
    payload: Any = None
    room_id: Any = Field(default=None, alias="roomId")


class _Outbound(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def as_message(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class IdAssignment(_Outbound):
    type: Literal["id-assignment"] = "id-assignment"
    id: str


class PeerList(_Outbound):
    type: Literal["peer-list"] = "peer-list"
    peer_ids: list[str] = Field(default_factory=list, alias="peerIds")


class NewPeer(_Outbound):
    type: Literal["new-peer"] = "new-peer"
    peer_id: str = Field(..., alias="peerId")


class PeerDisconnected(_Outbound):
    type: Literal["peer-disconnected"] = "peer-disconnected"
    peer_id: str = Field(..., alias="peerId")


class ErrorNotice(_Outbound):
    type: Literal["error"] = "error"
    code: str
    detail: str


class HealthResponse(BaseModel):
    status: str = Field(..., description="Liveness status")
    timestamp: str = Field(..., description="ISO-8601 server time")


class RoomsResponse(BaseModel):
    connections: int = Field(..., ge=0, description="Live registered connections")
    rooms: dict[str, int] = Field(default_factory=dict, description="Occupancy per room")
