"""
Callback data for the format buttons.

    tt_dl:<kind>:<base64 url>     URL carried inline
    tt_ref:<kind>:<token>         URL parked in the LinkRegistry

Telegram rejects callback data over 64 bytes, so long URLs go by reference.
"""
import base64
import binascii

from services.models import MediaKind

INLINE_PREFIX = "tt_dl"
REF_PREFIX = "tt_ref"
CALLBACK_PREFIXES = (INLINE_PREFIX + ":", REF_PREFIX + ":")
MAX_CALLBACK_BYTES = 64


class MalformedPayload(ValueError):
    pass


def encode_payload(kind: MediaKind, url: str) -> str:
    encoded = base64.b64encode(url.encode("utf-8")).decode("ascii")
    return f"{INLINE_PREFIX}:{MediaKind(kind).value}:{encoded}"


def _split(data: str, prefix: str) -> tuple[MediaKind, str]:
    parts = (data or "").split(":")
    if len(parts) != 3 or parts[0] != prefix:
        raise MalformedPayload(f"unexpected callback data: {data!r}")

    try:
        kind = MediaKind(parts[1])
    except ValueError:
        raise MalformedPayload(f"unknown media kind: {parts[1]!r}") from None

    if not parts[2]:
        raise MalformedPayload("empty url field")
    return kind, parts[2]


def decode_payload(data: str) -> tuple[MediaKind, str]:
    kind, encoded = _split(data, INLINE_PREFIX)
    try:
        url = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise MalformedPayload(f"bad url encoding: {e}") from None
    return kind, url


def pack_choice(kind: MediaKind, url: str, links) -> str:
    payload = encode_payload(kind, url)
    if len(payload.encode("utf-8")) <= MAX_CALLBACK_BYTES:
        return payload
    return f"{REF_PREFIX}:{MediaKind(kind).value}:{links.register(url)}"


def unpack_choice(data: str, links) -> tuple[MediaKind, str]:
    if not (data or "").startswith(REF_PREFIX + ":"):
        return decode_payload(data)

    kind, token = _split(data, REF_PREFIX)
    url = links.lookup(token)
    if not url:
        raise MalformedPayload("link reference expired")
    return kind, url
