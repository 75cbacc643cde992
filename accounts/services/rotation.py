from __future__ import annotations

from typing import Protocol


class RotationLedger(Protocol):
    """
    Where refresh-token rotation ids would be tracked for reuse detection.

    issued() is called for every refresh token handed out, accepts() before a
    presented refresh token is honoured, retire() when its rotation id is
    superseded or the session logs out.
    """

    def issued(self, sub: str, rot: str) -> None: ...

    def accepts(self, sub: str, rot: str) -> bool: ...

    def retire(self, sub: str, rot: str) -> None: ...


class OpenRotationLedger:
    """No server-side state: any correctly signed, unexpired refresh token is accepted."""

    def issued(self, sub: str, rot: str) -> None:
        return None

    def accepts(self, sub: str, rot: str) -> bool:
        return True

    def retire(self, sub: str, rot: str) -> None:
        return None
