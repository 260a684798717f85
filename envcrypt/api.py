import logging
import typing

import attr

from . import __version__
from .cipher import CipherConfig, decrypt, encrypt
from .pairs import SyncResult, sync
from .sources import Source
from .utils import ConfigError, CryptoError, PathLike
from .writer import Transformed, target, write_file_safely

log = logging.getLogger(__name__)

ENCRYPTED_FILE_NAME = 'out.enc'
DECRYPTED_FILE_NAME = '.env'


@attr.s(frozen=True, kw_only=True, repr=False)
class EnvcryptOptions:
    secret_key: str = attr.ib()
    iv: typing.Optional[str] = attr.ib(default=None)
    legacy_iv: bool = attr.ib(default=False)
    disable_write_file: bool = attr.ib(default=False)
    enc_file_name: typing.Optional[str] = attr.ib(default=None)

    def __repr__(self):
        return (f"EnvcryptOptions(iv={self.iv!r}, legacy_iv={self.legacy_iv!r}, "
                f"disable_write_file={self.disable_write_file!r}, "
                f"enc_file_name={self.enc_file_name!r})")

    @property
    def cipher(self) -> CipherConfig:
        return CipherConfig(key=self.secret_key, iv=self.iv, legacy_iv=self.legacy_iv)


def get_version() -> str:
    return __version__


def encrypt_single_data(secret: str, iv: str, data: str) -> str:
    try:
        return encrypt(secret, iv, data)
    except (TypeError, ValueError) as error:
        raise CryptoError(f"Could not encrypt: {error}") from error


def decrypt_single_data(secret: str, iv: str, data: str) -> str:
    try:
        return decrypt(secret, iv, data)
    except (TypeError, ValueError) as error:
        raise CryptoError(f"Could not decrypt: {error}") from error


def validate(
        value: str,
        options: EnvcryptOptions,
        output_path: typing.Optional[PathLike]) -> None:
    """Reject incomplete options before any file is read or written."""
    if not options.secret_key:
        raise ConfigError("Secret key should be provided")

    if not value:
        raise ConfigError("Input path or value should be provided")

    if not options.disable_write_file and not output_path:
        raise ConfigError(
            "Output path should be provided if you're trying to write a file")


def transform(
        value: str,
        options: EnvcryptOptions,
        output_path: typing.Optional[PathLike],
        function: typing.Callable[[CipherConfig, str], str],
        default_name: str) -> Transformed:
    validate(value, options, output_path)
    config = options.cipher
    source = Source.detect(value)

    result = function(config, source.read())

    if not source.writable or options.disable_write_file:
        return Transformed(value=result)

    name = options.enc_file_name or default_name
    log.info(f"Writing the result of {source} to {name} in {output_path}")
    persisted = write_file_safely(output_path, result, name)
    return Transformed(value=result, path=target(output_path, name), persisted=persisted)


def to_encrypted_form(
        value: str,
        options: EnvcryptOptions,
        output_path: typing.Optional[PathLike] = None) -> Transformed:
    """
    Encrypt a file, or a value passed directly.

    The encrypted contents of a file are also written to output_path (as 'out.enc' unless
    enc_file_name is set) unless disable_write_file is set. The write happens in the
    background: wait on the result to be sure the file exists.
    """
    return transform(value, options, output_path, CipherConfig.encrypt, ENCRYPTED_FILE_NAME)


def to_plaintext_form(
        value: str,
        options: EnvcryptOptions,
        output_path: typing.Optional[PathLike] = None) -> Transformed:
    """Decrypt a file, or a value passed directly; the reverse of to_encrypted_form()."""
    return transform(value, options, output_path, CipherConfig.decrypt, DECRYPTED_FILE_NAME)


def sync_files(
        ciphertext_path: PathLike,
        plaintext_path: PathLike,
        options: EnvcryptOptions) -> SyncResult:
    """Regenerate whichever of the two files is older from the one modified last."""
    if not options.secret_key:
        raise ConfigError("Secret key should be provided")
    return sync(ciphertext_path, plaintext_path, options.cipher)
