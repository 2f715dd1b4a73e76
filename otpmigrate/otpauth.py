from __future__ import annotations

import hashlib

import pyotp

from otpmigrate.models import Algorithm, OtpAccount, OtpType

_DIGESTS = {
    Algorithm.UNSPECIFIED: hashlib.sha1,
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


def to_otpauth_uri(account: OtpAccount) -> str:
    """Render an account as an otpauth:// key URI that authenticator apps can import."""
    if not account.secret:
        raise ValueError("Account has no secret")
    digest = _DIGESTS.get(account.algorithm)
    if digest is None:
        raise ValueError(f"{account.algorithm.name} accounts cannot be expressed as otpauth URIs")

    secret = account.secret.rstrip("=")
    digits = account.digits or 6
    name = account.name or ""
    issuer = account.issuer or None

    if account.otp_type == OtpType.HOTP:
        otp = pyotp.HOTP(secret, digits=digits, digest=digest, name=name, issuer=issuer)
        return otp.provisioning_uri(initial_count=account.counter or 0)
    # treat UNSPECIFIED as TOTP
    return pyotp.TOTP(secret, digits=digits, digest=digest, name=name, issuer=issuer).provisioning_uri()


def account_dicts(accounts: list[OtpAccount], *, with_uris: bool = False) -> list[dict]:
    out = []
    for account in accounts:
        d = account.to_dict()
        if with_uris:
            try:
                d["uri"] = to_otpauth_uri(account)
            except ValueError:
                d["uri"] = None
        out.append(d)
    return out
