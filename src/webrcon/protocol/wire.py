from __future__ import annotations

from typing import Any, Dict, Union

from .. import json
from ..errors import DecodeError
from . import fields
from .message import Envelope


def pack_frame(envelope: Envelope) -> str:
    """
    Serialize Envelope -> str

    The server only accepts text frames. All four keys are always present.
    """

    header = {
        fields.MESSAGE:    envelope.text,
        fields.IDENTIFIER: envelope.identifier,
        fields.TYPE:       envelope.kind,
        fields.STACKTRACE: envelope.trace,
    }

    return json.dumps(header)


def unpack_frame(frame: Union[str, bytes]) -> Envelope:
    """
    Deserialize str/bytes -> Envelope

    Key lookup is case-insensitive and unknown keys are ignored; missing
    keys and nulls take the zero value for the field.
    """

    try:
        decoded = json.loads(frame)
    except json.errors as exc:
        raise DecodeError(f"malformed frame: {exc}") from exc

    if not isinstance(decoded, dict):
        raise DecodeError(f"frame is not a JSON object: {type(decoded).__name__}")

    env: Dict[str, Any] = {}
    for key, value in decoded.items():
        env.setdefault(key.lower(), value)

    return Envelope(
        text=_field(env, fields.MESSAGE, str, ""),
        identifier=_field(env, fields.IDENTIFIER, int, 0),
        kind=_field(env, fields.TYPE, str, ""),
        trace=_field(env, fields.STACKTRACE, str, ""),
    )


def _field(env: Dict[str, Any], name: str, kind: type, default: Any) -> Any:
    value = env.get(name.lower())
    if value is None:
        return default

    # bool is an int subclass; JSON true is not an identifier.
    if isinstance(value, bool) or not isinstance(value, kind):
        raise DecodeError(
            f"field {name!r}: expected {kind.__name__}, got {type(value).__name__}"
        )

    return value
