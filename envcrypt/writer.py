"""
Atomic file writes, performed in the background.

Each write is submitted to a single worker thread, so writes land in the order they were
scheduled. Callers receive a Future and decide for themselves whether to wait on it.
"""

import concurrent.futures
import logging
import os
import pathlib
import tempfile
import typing

import attr

from .utils import FileIOError, PathLike, resolve_path

log = logging.getLogger(__name__)

_executor = concurrent.futures.ThreadPoolExecutor(
    max_workers=1, thread_name_prefix='envcrypt-writer')


def target(path: PathLike, name: typing.Optional[str] = None) -> pathlib.Path:
    """The file a write to path (and optionally a file name inside it) ends up in."""
    resolved = resolve_path(path)
    return resolved / name if name else resolved


def write_atomic(path: pathlib.Path, content: str) -> bool:
    log.debug(f"Writing {path}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise FileIOError(f"Could not write {path}: {error}") from error

    temporary: typing.Optional[pathlib.Path] = None
    try:
        with tempfile.NamedTemporaryFile(
                'w',
                encoding='utf-8',
                newline='',
                dir=path.parent,
                prefix=f'.{path.name}.',
                suffix='.tmp',
                delete=False) as file:
            temporary = pathlib.Path(file.name)
            file.write(content)
            file.flush()
            os.fsync(file.fileno())
        os.replace(temporary, path)
    except OSError as error:
        if temporary is not None:
            temporary.unlink(missing_ok=True)
        raise FileIOError(f"Could not write {path}: {error}") from error

    return True


def _report(path: pathlib.Path) -> typing.Callable[[concurrent.futures.Future], None]:
    def callback(future: concurrent.futures.Future) -> None:
        error = future.exception()
        if error is None:
            log.info(f"Successfully wrote {path}")
        else:
            log.error(f"Failed to write {path}: {error}")

    return callback


def write_file_safely(
        path: PathLike,
        content: str,
        name: typing.Optional[str] = None) -> 'concurrent.futures.Future[bool]':
    """
    Schedule an atomic write of content to path, or to the file name inside path.

    The returned future resolves to True once the file is in place, or raises FileIOError.
    """
    destination = target(path, name)
    future = _executor.submit(write_atomic, destination, content)
    future.add_done_callback(_report(destination))
    return future


@attr.s(frozen=True, kw_only=True)
class Transformed:
    """
    The result of a transform, available as soon as it is returned.

    If the result is being written to a file, persisted is the Future for that write and
    path is the file it is written to.
    """
    value: str = attr.ib(repr=False)
    path: typing.Optional[pathlib.Path] = attr.ib(default=None)
    persisted: typing.Optional['concurrent.futures.Future[bool]'] = attr.ib(default=None)

    def __str__(self):
        return self.value

    def wait(self, timeout: typing.Optional[float] = None) -> bool:
        """Block until the output file is written; False if nothing is being written."""
        if self.persisted is None:
            return False
        return self.persisted.result(timeout=timeout)
