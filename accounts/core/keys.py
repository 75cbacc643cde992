from __future__ import annotations

import logging
from typing import Optional

from jose import jwk
from jose.backends.base import Key
from jose.exceptions import JWKError

log = logging.getLogger(__name__)

ALGORITHM = "RS256"


class KeyMaterialError(RuntimeError):
    def __init__(self) -> None:
        super().__init__("JWT_KEYS_MISSING")


def _normalize_pem(pem: Optional[str]) -> str:
    # env files usually carry the PEM on one line with literal "\n"
    return (pem or "").replace("\\n", "\n").strip()


class KeyProvider:
    """
    Holds the RS256 signing keypair.

    Built once by create_app() and handed to the TokenCodec. The PEM text is
    parsed on first use and the parsed key objects are reused for every
    sign/verify afterwards; they are read-only after that.
    """

    def __init__(self, private_pem: Optional[str], public_pem: Optional[str]) -> None:
        self._private_pem = _normalize_pem(private_pem)
        self._public_pem = _normalize_pem(public_pem)
        self._private_key: Optional[Key] = None
        self._public_key: Optional[Key] = None

    def _construct(self, pem: str, private: bool) -> Key:
        if not pem:
            raise KeyMaterialError()
        try:
            key = jwk.construct(pem, ALGORITHM)
        except (JWKError, ValueError, TypeError) as exc:
            log.error("Could not parse JWT %s key: %s", "private" if private else "public", exc)
            raise KeyMaterialError() from exc
        if key.is_public() == private:
            raise KeyMaterialError()
        return key

    def get_private_key(self) -> Key:
        if self._private_key is None:
            self._private_key = self._construct(self._private_pem, private=True)
        return self._private_key

    def get_public_key(self) -> Key:
        if self._public_key is None:
            self._public_key = self._construct(self._public_pem, private=False)
        return self._public_key

    def load(self) -> "KeyProvider":
        """Parse both keys now so misconfiguration surfaces at startup."""
        private_key = self.get_private_key()
        public_key = self.get_public_key()

        # the two halves must belong to the same pair
        sample = b"accounts-keypair-check"
        if not public_key.verify(sample, private_key.sign(sample)):
            log.error("JWT private and public keys do not form a pair")
            raise KeyMaterialError()
        return self
