"""
rps_client.commands — Outgoing command models
=============================================

The four commands a client may send. Each model carries its wire tag in
``TAG``; the model fields are exactly the ``data`` object on the wire:

    JoinLobby(name="Alice")          -> {"type":"join_lobby","data":{"name":"Alice"}}
    MakeChoice(choice=Choice.ROCK)   -> {"type":"make_choice","data":{"choice":"rock"}}
    PlayAgain()                      -> {"type":"play_again","data":{}}
    Disconnect()                     -> {"type":"disconnect","data":{}}
"""

from typing import ClassVar, Dict, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from ._shared.protocol import OutgoingType
from .types import Choice


class Command(BaseModel):
    """Base class for outgoing commands."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    TAG: ClassVar[OutgoingType]


class JoinLobby(Command):
    """Enter the lobby under a display name."""

    TAG: ClassVar[OutgoingType] = OutgoingType.JOIN_LOBBY
    name: str = Field(min_length=1)


class MakeChoice(Command):
    """Submit this round's hand."""

    TAG: ClassVar[OutgoingType] = OutgoingType.MAKE_CHOICE
    choice: Choice


class PlayAgain(Command):
    TAG: ClassVar[OutgoingType] = OutgoingType.PLAY_AGAIN


class Disconnect(Command):
    TAG: ClassVar[OutgoingType] = OutgoingType.DISCONNECT


OutgoingCommand = Union[JoinLobby, MakeChoice, PlayAgain, Disconnect]

COMMAND_MODELS: Dict[OutgoingType, Type[Command]] = {
    OutgoingType.JOIN_LOBBY: JoinLobby,
    OutgoingType.MAKE_CHOICE: MakeChoice,
    OutgoingType.PLAY_AGAIN: PlayAgain,
    OutgoingType.DISCONNECT: Disconnect,
}
