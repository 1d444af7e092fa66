"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor (``config.bcrypt_rounds``).  The
async variants push the CPU-bound work onto the threadpool so a login
never stalls the event loop.

bcrypt only reads the first 72 bytes of a password; longer ones are
refused up front by ``password_too_long`` rather than left to the
installed bcrypt version.
"""

from __future__ import annotations

from typing import Optional

import bcrypt
from fastapi.concurrency import run_in_threadpool

from config.settings import config

MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode()) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt (auto-salted, work factor ``rounds``)."""
    if rounds is None:
        rounds = config.bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str, rounds: Optional[int] = None) -> str:
    return await run_in_threadpool(hash_password, password, rounds)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(verify_password, password, password_hash)
