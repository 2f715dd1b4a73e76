from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from otpmigrate.errors import UnknownEnumIndex


class _IndexedEnum(enum.IntEnum):
    @classmethod
    def from_index(cls, index: int):
        try:
            return cls(index)
        except ValueError:
            raise UnknownEnumIndex(cls.__name__, index) from None


class Algorithm(_IndexedEnum):
    UNSPECIFIED = 0
    SHA1 = 1
    SHA256 = 2
    SHA512 = 3
    MD5 = 4


class DigitCount(_IndexedEnum):
    UNSPECIFIED = 0
    SIX = 1
    EIGHT = 2

    @property
    def digits(self) -> Optional[int]:
        return {DigitCount.SIX: 6, DigitCount.EIGHT: 8}.get(self)


class OtpType(_IndexedEnum):
    UNSPECIFIED = 0
    HOTP = 1
    TOTP = 2


@dataclass(frozen=True)
class OtpAccount:
    secret: Optional[str] = None  # Base32 text, never the raw bytes
    name: Optional[str] = None
    issuer: Optional[str] = None
    algorithm: Algorithm = Algorithm.UNSPECIFIED
    digits: Optional[int] = None
    otp_type: OtpType = OtpType.UNSPECIFIED
    counter: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name is not None:
            out["name"] = self.name
        if self.issuer is not None:
            out["issuer"] = self.issuer
        out["type"] = self.otp_type.name
        out["algorithm"] = self.algorithm.name
        out["digits"] = self.digits
        if self.secret is not None:
            out["secret"] = self.secret
        if self.counter is not None:
            out["counter"] = self.counter
        return out


@dataclass(frozen=True)
class MigrationBatch:
    accounts: list[OtpAccount] = field(default_factory=list)
    version: Optional[int] = None
    batch_size: Optional[int] = None
    batch_index: Optional[int] = None
    batch_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "accounts": [a.to_dict() for a in self.accounts],
            "version": self.version,
            "batch_size": self.batch_size,
            "batch_index": self.batch_index,
            "batch_id": self.batch_id,
        }
