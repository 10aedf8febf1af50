"""
Turn pydantic validation errors into one readable message for API clients.
"""
from typing import Iterable, Union

from pydantic import ValidationError


def _format_error(err: dict) -> str:
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    msg = err.get("msg", "Invalid value")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    if err.get("type") == "missing":
        return f"Missing required field: {'.'.join(loc)}" if loc else "Missing required fields"
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def describe_validation_error(error: Union[ValidationError, Iterable[dict]]) -> str:
    errors = error.errors() if hasattr(error, "errors") else list(error)
    if not errors:
        return "Invalid request"
    return "; ".join(_format_error(e) for e in errors[:5])
