"""
Decoder for the stored receiver configuration.

Three shapes have been written over time, newest first:

1. ``{"entries": [{"email": ..., "enabled": ...}], "multiSendMode": ...}``
2. ``[{"email": ..., "enabled": ...}, ...]``
3. a single plain address

They are tried in that order. Drop this module once every stored row has been
rewritten in shape 1.
"""

import json
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from signdesk.schemas.receivers import ReceiverConfig, ReceiverEntry

Decoder = Callable[[str, Any], Optional[ReceiverConfig]]


def _entry(item: Any) -> Optional[ReceiverEntry]:
    """One stored entry; unusable ones (bad shape or bad address) are skipped."""
    if isinstance(item, str):
        item = {"email": item}
    try:
        return ReceiverEntry.model_validate(item)
    except ValidationError:
        return None


def _entries(items: List[Any]) -> List[ReceiverEntry]:
    return [entry for entry in (_entry(item) for item in items) if entry is not None]


def _from_object(raw: str, parsed: Any) -> Optional[ReceiverConfig]:
    if not isinstance(parsed, dict):
        return None
    entries = parsed.get("entries")
    if not isinstance(entries, list):
        return None
    try:
        mode = ReceiverConfig.model_validate({"multiSendMode": parsed.get("multiSendMode")}).multi_send_mode
    except ValidationError:
        mode = None
    return ReceiverConfig(entries=_entries(entries), multi_send_mode=mode)


def _from_array(raw: str, parsed: Any) -> Optional[ReceiverConfig]:
    if not isinstance(parsed, list):
        return None
    return ReceiverConfig(entries=_entries(parsed))


def _from_plain_string(raw: str, parsed: Any) -> Optional[ReceiverConfig]:
    address = parsed if isinstance(parsed, str) else raw
    entry = _entry(address)
    return ReceiverConfig(entries=[entry] if entry is not None else [])


DECODERS: List[Decoder] = [_from_object, _from_array, _from_plain_string]


def decode_receiver_config(raw: Optional[str]) -> ReceiverConfig:
    if raw is None or not raw.strip():
        return ReceiverConfig()
    try:
        parsed: Any = json.loads(raw)
    except ValueError:
        parsed = None
    for decoder in DECODERS:
        config = decoder(raw, parsed)
        if config is not None:
            return config
    return ReceiverConfig()
