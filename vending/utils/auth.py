from __future__ import annotations

import datetime
import os
from typing import Any

import bcrypt
import jwt
from dotenv import load_dotenv
from jwt import ExpiredSignatureError, PyJWTError

from vending.constants import TOKEN_EXPIRY_DAYS

load_dotenv()


def _require_env(var_name: str) -> str:
    value = os.getenv(var_name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {var_name}")
    return value


SECRET_KEY = _require_env("AUTH_SECRET_KEY")
ALGORITHM = "HS256"


def create_access_token(subject: str | Any, email: str | None = None) -> str:
    expire = datetime.datetime.now(tz=datetime.timezone.utc) + datetime.timedelta(
        days=TOKEN_EXPIRY_DAYS
    )
    payload = {
        "sub": str(subject),
        "exp": expire,
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict | None:
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        return None
    except PyJWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def verify_token(token: str) -> str | None:
    payload = decode_token(token)
    if payload is None:
        return None
    return str(payload["sub"])


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Hash con formato no bcrypt
        return False
