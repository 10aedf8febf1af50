"""
Credential helpers - password hashing, session tokens, client identifiers.
"""
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

JWT_ALGORITHM = "HS256"

# No 0/O or 1/I so codes survive being read aloud or retyped
CLIENT_ID_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CLIENT_ID_PREFIX = "CL-"
CLIENT_ID_LENGTH = 6


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed hash in the database
        return False


def generate_unique_client_id() -> str:
    """Short human-readable client code, e.g. CL-7K2Q9X (32^6 ~ 1e9 values)."""
    code = "".join(secrets.choice(CLIENT_ID_ALPHABET) for _ in range(CLIENT_ID_LENGTH))
    return f"{CLIENT_ID_PREFIX}{code}"


def create_access_token(
    user_id: uuid.UUID,
    role: str,
    signing_key: str,
    expiry_hours: int = 24,
) -> str:
    return jwt.encode(
        {
            "user_id": str(user_id),
            "role": role,
            "exp": datetime.now(timezone.utc) + timedelta(hours=expiry_hours),
        },
        signing_key,
        algorithm=JWT_ALGORITHM,
    )


def decode_access_token(token: str, signing_key: str) -> dict:
    """Decode and verify a session token. Raises jwt.InvalidTokenError."""
    return jwt.decode(token, signing_key, algorithms=[JWT_ALGORITHM])
