import enum
import logging
import pathlib
import threading
import typing
import weakref

import attr

from .cipher import CipherConfig
from .utils import NotFoundError, PathLike, modified_time, read_text, resolve_path
from .writer import Transformed, write_file_safely

log = logging.getLogger(__name__)

Key = typing.Tuple[pathlib.Path, pathlib.Path]

# Entries drop out once no sync of the pair holds its lock.
_locks: typing.MutableMapping[Key, threading.Lock] = weakref.WeakValueDictionary()
_locks_lock = threading.Lock()


class Direction(enum.Enum):
    ENCRYPTED = 'encrypted'
    DECRYPTED = 'decrypted'


def lock_for(key: Key) -> threading.Lock:
    with _locks_lock:
        return _locks.setdefault(key, threading.Lock())


@attr.s(frozen=True, kw_only=True)
class SyncResult(Transformed):
    direction: Direction = attr.ib()


@attr.s(frozen=True, kw_only=True)
class SyncPair:
    ciphertext: pathlib.Path = attr.ib(converter=resolve_path)
    plaintext: pathlib.Path = attr.ib(converter=resolve_path)

    def __str__(self):
        return f"{self.ciphertext} <-> {self.plaintext}"

    @property
    def key(self) -> Key:
        return self.ciphertext.resolve(), self.plaintext.resolve()

    def check(self) -> None:
        if not self.ciphertext.exists():
            raise NotFoundError(self.ciphertext, 'Encrypted file')
        if not self.plaintext.exists():
            raise NotFoundError(self.plaintext, 'Env file')

    def direction(self) -> Direction:
        """
        Decide which file to regenerate.

        The plaintext is only regenerated when the ciphertext was modified strictly after it;
        when the timestamps are equal the plaintext wins and the ciphertext is regenerated.
        """
        plaintext_time = modified_time(self.plaintext)
        ciphertext_time = modified_time(self.ciphertext)
        log.debug(f"Modified times: {self.ciphertext}={ciphertext_time} "
                  f"{self.plaintext}={plaintext_time}")
        if ciphertext_time > plaintext_time:
            return Direction.DECRYPTED
        return Direction.ENCRYPTED

    def sync(self, config: CipherConfig) -> SyncResult:
        """
        Regenerate the older file of the pair from the newer one.

        Syncs of the same pair within this process run one at a time, and each holds the pair
        until its write has completed.
        """
        with lock_for(self.key):
            self.check()
            direction = self.direction()

            if direction is Direction.DECRYPTED:
                log.info(f"Decrypting {self.ciphertext} to {self.plaintext}")
                value = config.decrypt(read_text(self.ciphertext))
                path = self.plaintext
            else:
                log.info(f"Encrypting {self.plaintext} to {self.ciphertext}")
                value = config.encrypt(read_text(self.plaintext))
                path = self.ciphertext

            persisted = write_file_safely(path, value)
            persisted.result()

        return SyncResult(value=value, path=path, persisted=persisted, direction=direction)


def sync(ciphertext: PathLike, plaintext: PathLike, config: CipherConfig) -> SyncResult:
    return SyncPair(ciphertext=ciphertext, plaintext=plaintext).sync(config)
