from __future__ import annotations

import base64
import binascii
from typing import Iterable, Optional
from urllib.parse import parse_qs, urlparse

from otpmigrate.base32 import b32encode
from otpmigrate.errors import MalformedTransport
from otpmigrate.models import Algorithm, DigitCount, MigrationBatch, OtpAccount, OtpType
from otpmigrate.wire import (
    WIRE_LENGTH_DELIMITED,
    WIRE_VARINT,
    read_length_delimited,
    read_tag,
    read_varint,
    skip_field,
)

MIGRATION_SCHEME = "otpauth-migration"


def _to_int32(value: int) -> int:
    # int32 fields are sign-extended to 64 bits on the wire
    value &= 0xFFFFFFFFFFFFFFFF
    if value >= 1 << 63:
        value -= 1 << 64
    return value


def decode_otp_parameters(buf: bytes) -> OtpAccount:
    out: dict = {}
    i = 0
    while i < len(buf):
        field, wire, i = read_tag(buf, i)

        if field == 1 and wire == WIRE_LENGTH_DELIMITED:
            raw, i = read_length_delimited(buf, i)
            out["secret"] = b32encode(raw)
        elif field == 2 and wire == WIRE_LENGTH_DELIMITED:
            raw, i = read_length_delimited(buf, i)
            out["name"] = raw.decode("utf-8", errors="replace")
        elif field == 3 and wire == WIRE_LENGTH_DELIMITED:
            raw, i = read_length_delimited(buf, i)
            out["issuer"] = raw.decode("utf-8", errors="replace")
        elif field == 4 and wire == WIRE_VARINT:
            index, i = read_varint(buf, i)
            out["algorithm"] = Algorithm.from_index(index)
        elif field == 5 and wire == WIRE_VARINT:
            index, i = read_varint(buf, i)
            out["digits"] = DigitCount.from_index(index).digits
        elif field == 6 and wire == WIRE_VARINT:
            index, i = read_varint(buf, i)
            out["otp_type"] = OtpType.from_index(index)
        elif field == 7 and wire == WIRE_VARINT:
            out["counter"], i = read_varint(buf, i)
        else:
            # unique_id, locale and anything newer
            i = skip_field(buf, i, wire)
    return OtpAccount(**out)


def decode_migration_batch(payload: bytes) -> MigrationBatch:
    """Decode a MigrationPayload message, keeping the multi-QR batch metadata."""
    accounts: list[OtpAccount] = []
    meta: dict = {}
    i = 0
    while i < len(payload):
        field, wire, i = read_tag(payload, i)

        if field == 1 and wire == WIRE_LENGTH_DELIMITED:
            msg, i = read_length_delimited(payload, i)
            accounts.append(decode_otp_parameters(msg))
        elif field == 2 and wire == WIRE_VARINT:
            meta["version"], i = read_varint(payload, i)
        elif field == 3 and wire == WIRE_VARINT:
            meta["batch_size"], i = read_varint(payload, i)
        elif field == 4 and wire == WIRE_VARINT:
            meta["batch_index"], i = read_varint(payload, i)
        elif field == 5 and wire == WIRE_VARINT:
            value, i = read_varint(payload, i)
            meta["batch_id"] = _to_int32(value)
        else:
            i = skip_field(payload, i, wire)

    return MigrationBatch(accounts=accounts, **meta)


def decode_migration_payload(payload: bytes) -> list[OtpAccount]:
    return decode_migration_batch(payload).accounts


def extract_migration_data(uri: str) -> bytes:
    """
    Pull the raw payload out of a Google Authenticator export URI:
    otpauth-migration://offline?data=...
    """
    uri = (uri or "").strip()
    if not uri:
        raise MalformedTransport("Empty migration URI")

    parsed = urlparse(uri)
    if parsed.scheme != MIGRATION_SCHEME:
        raise MalformedTransport("Not an otpauth-migration URI")

    qs = parse_qs(parsed.query or "")
    data_list = qs.get("data") or []
    if not data_list or not data_list[0]:
        raise MalformedTransport("Missing data param")

    # parse_qs turns an unescaped '+' into a space
    data = data_list[0].replace(" ", "+")
    # Some scanners may drop padding
    if len(data) % 4:
        data += "=" * (4 - (len(data) % 4))
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise MalformedTransport("Invalid base64 in data param") from e


def decode_migration_uri(uri: str) -> list[OtpAccount]:
    return decode_migration_payload(extract_migration_data(uri))


def filter_accounts(
    entries: Iterable[OtpAccount],
    *,
    issuer: Optional[str] = None,
    name: Optional[str] = None,
    otp_type: Optional[OtpType] = None,
) -> list[OtpAccount]:
    issuer_hint = (issuer or "").strip().lower()
    name_hint = (name or "").strip().lower()

    picked = []
    for e in entries:
        if issuer_hint and issuer_hint not in (e.issuer or "").lower():
            continue
        if name_hint and name_hint not in (e.name or "").lower():
            continue
        if otp_type is not None and e.otp_type != otp_type:
            continue
        picked.append(e)
    return picked
