from __future__ import annotations

import hmac
import re

from nacl.encoding import RawEncoder
from nacl.exceptions import BadSignatureError
from nacl.hash import blake2b
from nacl.signing import SigningKey

from .errors import ConfigError, InvalidSecretKeyError

SUPPORTED_SIGNATURE_ALGORITHMS = ("hmac", "ed25519")

_RE_HEX = re.compile(r"^[0-9a-f]+$")

# BLAKE2b personalisation for deriving the Ed25519 seed (max 16 bytes).
_SEED_PERSON = b"chain.sign.seed1"


class HmacSigner:
    """HMAC over the hex block hash, keyed with the verifier secret."""

    algorithm = "hmac"

    def __init__(self, secret: bytes, digest: str = "sha256") -> None:
        if not secret:
            raise InvalidSecretKeyError("secret key must not be empty")
        self._secret = secret
        self._digest = digest

    def sign(self, hash_hex: str) -> str:
        return hmac.new(self._secret, hash_hex.encode("utf-8"), self._digest).hexdigest()

    def verify(self, hash_hex: str, signature: str) -> bool:
        expected = self.sign(hash_hex)
        return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8", "surrogatepass"))

    def __repr__(self) -> str:
        return f"HmacSigner(digest={self._digest!r})"


class Ed25519Signer:
    """
    Ed25519 signature over the raw bytes of the hex block hash.

    The signing key is derived from the verifier secret, so the secret stays the
    single provisioned credential. Ed25519 signatures are deterministic, which
    keeps re-inspection of a repaired chain stable.
    """

    algorithm = "ed25519"

    def __init__(self, secret: bytes) -> None:
        if not secret:
            raise InvalidSecretKeyError("secret key must not be empty")
        seed = blake2b(secret, digest_size=32, person=_SEED_PERSON, encoder=RawEncoder)
        self._signing_key = SigningKey(seed)
        self._verify_key = self._signing_key.verify_key

    def sign(self, hash_hex: str) -> str:
        return self._signing_key.sign(bytes.fromhex(hash_hex)).signature.hex()

    def verify(self, hash_hex: str, signature: str) -> bool:
        if not _RE_HEX.fullmatch(signature) or len(signature) % 2:
            return False
        try:
            self._verify_key.verify(bytes.fromhex(hash_hex), bytes.fromhex(signature))
        except (BadSignatureError, ValueError):
            return False
        return True

    def __repr__(self) -> str:
        return "Ed25519Signer()"


def make_signer(algorithm: str, secret: str, digest: str = "sha256"):
    if not secret:
        raise InvalidSecretKeyError("secret key must not be empty")
    raw = secret.encode("utf-8")
    if algorithm == "hmac":
        return HmacSigner(raw, digest=digest)
    if algorithm == "ed25519":
        return Ed25519Signer(raw)
    raise ConfigError(
        f"unsupported signature algorithm: {algorithm!r}",
        meta={"supported": list(SUPPORTED_SIGNATURE_ALGORITHMS)},
    )

