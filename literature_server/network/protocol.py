"""Wire protocol: newline-delimited JSON messages.

Every message is one UTF-8 JSON object on its own line with a ``type``
field. Client requests are parsed into the pydantic models below; server
messages are plain dicts.
"""

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from literature_server.errors import ProtocolError

# Longest accepted request line
MAX_LINE_BYTES = 64 * 1024

ENCODING = "utf-8"


class JoinRequest(BaseModel):
    type: Literal["join"]
    lobby: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=20)
    admin: bool = False


class JoinGameRequest(BaseModel):
    """Ask for the current game view (after a reconnect)."""

    type: Literal["join_game"]


class StartGameRequest(BaseModel):
    type: Literal["start_game"]


class AskRequest(BaseModel):
    type: Literal["ask"]
    target: str
    card: str


class DeclareRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["declare"]
    set_key: str = Field(alias="set")
    assignment: dict[str, list[str]]


class KickPlayerRequest(BaseModel):
    type: Literal["kick_player"]
    player: str


class ToggleTeamRequest(BaseModel):
    type: Literal["toggle_team"]
    player: str


class UpdateSettingsRequest(BaseModel):
    type: Literal["update_settings"]
    settings: dict[str, Any]


class PlayAgainRequest(BaseModel):
    type: Literal["play_again"]


Request = Annotated[
    Union[
        JoinRequest,
        JoinGameRequest,
        StartGameRequest,
        AskRequest,
        DeclareRequest,
        KickPlayerRequest,
        ToggleTeamRequest,
        UpdateSettingsRequest,
        PlayAgainRequest,
    ],
    Field(discriminator="type"),
]

_request_adapter: TypeAdapter[Request] = TypeAdapter(Request)


def decode_message(line: bytes | str) -> dict[str, Any]:
    """Parse one line into a JSON object.

    Raises:
        ProtocolError: If the line is not a JSON object with a ``type``
    """
    if isinstance(line, bytes):
        if len(line) > MAX_LINE_BYTES:
            raise ProtocolError("Message too long")
        try:
            line = line.decode(ENCODING)
        except UnicodeDecodeError:
            raise ProtocolError("Message is not valid UTF-8") from None

    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Invalid JSON: {e.msg}") from None

    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise ProtocolError("Message must be an object with a type")
    return data


def decode_request(line: bytes | str) -> Request:
    """Parse one line into a client request.

    Raises:
        ProtocolError: If the message is malformed or of an unknown type
    """
    data = decode_message(line)
    try:
        return _request_adapter.validate_python(data)
    except ValidationError as e:
        raise ProtocolError(f"Invalid {data['type']} message: {e.error_count()} error(s)") from None


def encode_message(message: dict[str, Any]) -> bytes:
    """Serialize a message to one line."""
    return (json.dumps(message, ensure_ascii=False) + "\n").encode(ENCODING)


def make_message(type_: str, **payload: Any) -> dict[str, Any]:
    """Build a server message."""
    return {"type": type_, **payload}


def error_message(code: str, message: str) -> dict[str, Any]:
    return make_message("error", code=code, message=message)
