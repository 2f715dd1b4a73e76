from __future__ import annotations

from contextlib import asynccontextmanager
from secrets import compare_digest
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel

from otpmigrate.errors import MalformedTransport, MigrationDecodeError
from otpmigrate.migration import decode_migration_batch, extract_migration_data
from otpmigrate.otpauth import account_dicts
from otpmigrate.settings import Settings, load_settings


security = HTTPBasic(auto_error=False)


def _require_auth(
    request: Request, credentials: Optional[HTTPBasicCredentials] = Depends(security)
) -> Optional[str]:
    settings: Settings = request.app.state.settings
    if not settings.auth_enabled:
        return None
    if credentials is None:
        raise HTTPException(status_code=401, headers={"WWW-Authenticate": "Basic"})
    ok_user = compare_digest(credentials.username, settings.basic_auth_user)
    ok_pass = compare_digest(credentials.password, settings.basic_auth_password)
    if not (ok_user and ok_pass):
        raise HTTPException(status_code=401, headers={"WWW-Authenticate": "Basic"})
    return credentials.username


def _error_detail(e: MigrationDecodeError) -> dict:
    return {"error": type(e).__name__, "message": str(e)}


class DecodeRequest(BaseModel):
    url: str
    otpauth_uris: bool = False


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = load_settings()
    yield


app = FastAPI(lifespan=lifespan)


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.post("/decode")
def decode(body: DecodeRequest, _: Optional[str] = Depends(_require_auth)):
    try:
        payload = extract_migration_data(body.url)
    except MalformedTransport as e:
        raise HTTPException(status_code=400, detail=_error_detail(e))
    try:
        batch = decode_migration_batch(payload)
    except MigrationDecodeError as e:
        raise HTTPException(status_code=422, detail=_error_detail(e))

    meta = batch.to_dict()
    del meta["accounts"]
    return {
        "accounts": account_dicts(batch.accounts, with_uris=body.otpauth_uris),
        "batch": meta,
    }
