from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from fastapi import status


class ErrorKind(str, Enum):
    DUPLICATE_USER = "DUPLICATE_USER"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    PROFILE_ALREADY_EXISTS = "PROFILE_ALREADY_EXISTS"


class DomainError(Exception):
    """Raised by repositories/services; turned into an HTTP response at the edge."""

    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind


# every ErrorKind must have an entry (tests/test_errors.py checks this)
HTTP_STATUS: Dict[ErrorKind, Tuple[int, str]] = {
    ErrorKind.DUPLICATE_USER: (status.HTTP_409_CONFLICT, "Email or username already exists"),
    ErrorKind.USER_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "User not found"),
    ErrorKind.PROFILE_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Profile not found"),
    ErrorKind.PROFILE_ALREADY_EXISTS: (status.HTTP_409_CONFLICT, "Profile already exists"),
}


def to_http(err: DomainError) -> Tuple[int, str]:
    return HTTP_STATUS[err.kind]
