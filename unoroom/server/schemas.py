"""Inbound message schemas (pydantic), the validation boundary of the server."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

ConcreteColor = Literal["red", "blue", "green", "yellow"]

MessageType = Literal[
    "create_room",
    "join_room",
    "start_game",
    "play_card",
    "draw_card",
    "pass_turn",
    "call_uno",
    "challenge",
]


class ClientMessage(BaseModel):
    type: MessageType
    data: Dict[str, Any] = Field(default_factory=dict)


class CreateRoomRequest(BaseModel):
    player_name: str = Field("Host", min_length=1, max_length=20)


class JoinRoomRequest(BaseModel):
    room_id: str = Field(..., min_length=1)
    player_name: str = Field(..., min_length=1, max_length=20)
    player_id: Optional[str] = None  # set when reconnecting


class PlayCardRequest(BaseModel):
    card_id: str = Field(..., min_length=1)
    selected_color: Optional[ConcreteColor] = None  # wilds only


class TargetPlayerRequest(BaseModel):
    target_player_id: str = Field(..., min_length=1)
