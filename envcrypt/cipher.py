"""
Symmetric encryption of text payloads.

Payloads are encrypted with AES-256-GCM. The key is the SHA-256 digest of the secret and the
nonce is the UTF-8 encoding of the IV, so the same (key, iv) pair always produces the same
ciphertext. Ciphertexts are stored as hex so they survive newline and encoding conversions.
"""

import binascii
import hashlib
import logging
import secrets
import typing

import attr
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .utils import ConfigError, CryptoError

log = logging.getLogger(__name__)

DEFAULT_IV = 'envcrypt-default'
SEPARATOR = ':'

MIN_IV_BYTES = 8
MAX_IV_BYTES = 128
TAG_BYTES = 16


def _key(key: str) -> bytes:
    if not key:
        raise CryptoError("Secret key should not be empty")
    return hashlib.sha256(key.encode('utf-8')).digest()


def _nonce(iv: str) -> bytes:
    nonce = iv.encode('utf-8')
    if not MIN_IV_BYTES <= len(nonce) <= MAX_IV_BYTES:
        raise CryptoError(
            f"IV should be between {MIN_IV_BYTES} and {MAX_IV_BYTES} bytes, "
            f"got {len(nonce)}")
    return nonce


def encrypt(key: str, iv: str, plaintext: str) -> str:
    aes = AESGCM(_key(key))
    try:
        data = aes.encrypt(_nonce(iv), plaintext.encode('utf-8'), None)
    except (ValueError, OverflowError) as error:
        raise CryptoError(f"Could not encrypt: {error}") from error
    return data.hex()


def decrypt(key: str, iv: str, ciphertext: str) -> str:
    aes = AESGCM(_key(key))
    nonce = _nonce(iv)

    text = ciphertext.strip()
    try:
        data = bytes.fromhex(text)
    except ValueError as error:
        raise CryptoError("Ciphertext is not valid hex") from error

    # Ciphertexts are written in lower case; any other spelling has been altered.
    if data.hex() != text:
        raise CryptoError("Ciphertext is not lower case hex")

    if len(data) < TAG_BYTES:
        raise CryptoError("Ciphertext is truncated")

    try:
        plaintext = aes.decrypt(nonce, data, None)
    except InvalidTag as error:
        raise CryptoError("Could not decrypt: wrong key or IV, or the data was modified") from error

    try:
        return plaintext.decode('utf-8')
    except UnicodeDecodeError as error:
        raise CryptoError("Decrypted data is not valid UTF-8") from error


def random_iv() -> str:
    return secrets.token_hex(8)


def seal(key: str, plaintext: str) -> str:
    """Encrypt with a fresh random IV, storing the IV in front of the ciphertext."""
    iv = random_iv()
    return f"{iv}{SEPARATOR}{encrypt(key, iv, plaintext)}"


def unseal(key: str, ciphertext: str) -> str:
    iv, separator, data = ciphertext.strip().partition(SEPARATOR)
    if not separator:
        raise CryptoError(
            "Ciphertext does not contain an IV - pass the IV it was encrypted with")
    return decrypt(key, iv, data)


def _not_empty(instance, attribute, value):
    if not value:
        raise ConfigError("Secret key should be provided")


@attr.s(frozen=True, kw_only=True, repr=False)
class CipherConfig:
    key: str = attr.ib(validator=_not_empty)
    iv: typing.Optional[str] = attr.ib(default=None, converter=lambda v: v or None)
    legacy_iv: bool = attr.ib(default=False)

    def __repr__(self):
        return f"CipherConfig(iv={self.iv!r}, legacy_iv={self.legacy_iv!r})"

    @property
    def effective_iv(self) -> typing.Optional[str]:
        """The IV used for every call, or None when each encryption generates its own."""
        if self.iv:
            return self.iv
        if self.legacy_iv:
            return DEFAULT_IV
        return None

    def encrypt(self, plaintext: str) -> str:
        iv = self.effective_iv
        if iv is None:
            log.debug("Encrypting with a random IV")
            return seal(self.key, plaintext)
        return encrypt(self.key, iv, plaintext)

    def decrypt(self, ciphertext: str) -> str:
        iv = self.effective_iv
        if iv is None:
            log.debug("Decrypting with the embedded IV")
            return unseal(self.key, ciphertext)
        return decrypt(self.key, iv, ciphertext)
