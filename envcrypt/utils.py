import pathlib
import typing

import click

PathLike = typing.Union[str, pathlib.Path]


class EnvcryptException(click.ClickException):
    pass


class ConfigError(EnvcryptException):
    """Options are missing or invalid; raised before any file is touched."""


class CryptoError(EnvcryptException):
    """The cipher rejected the key or IV, or the ciphertext could not be decrypted."""


class FileIOError(EnvcryptException):
    pass


class NotFoundError(EnvcryptException):
    def __init__(self, path: PathLike, kind: str = 'File') -> None:
        super().__init__(f"{kind} {path} not found")
        self.path = pathlib.Path(path)


def resolve_path(path: PathLike) -> pathlib.Path:
    """Join a relative path onto the current working directory."""
    return pathlib.Path.cwd() / pathlib.Path(path)


def is_directory(path: PathLike) -> bool:
    try:
        return resolve_path(path).is_dir()
    except (OSError, ValueError):
        return False


def is_file(path: PathLike) -> bool:
    # Long literal values can exceed the maximum path length.
    try:
        return resolve_path(path).is_file()
    except (OSError, ValueError):
        return False


def read_text(path: pathlib.Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as error:
        raise FileIOError(f"Could not read {path}: {error}") from error


def modified_time(path: pathlib.Path) -> int:
    try:
        return path.stat().st_mtime_ns
    except FileNotFoundError as error:
        raise NotFoundError(path) from error
    except OSError as error:
        raise FileIOError(f"Could not stat {path}: {error}") from error
