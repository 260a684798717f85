"""
Each Source provides the text a transform is applied to.

Whether an input names a file or is the value itself is decided once, by Source.detect().
"""

import logging
import pathlib

import attr

from .utils import ConfigError, is_directory, is_file, read_text, resolve_path

log = logging.getLogger(__name__)


class Source:
    writable = False

    def read(self) -> str:
        raise NotImplementedError

    @staticmethod
    def detect(value: str) -> 'Source':
        if not value:
            raise ConfigError("Input path or value should be provided")

        if is_file(value):
            log.debug(f"Using {value} as an input file")
            return FileSource(resolve_path(value))

        if is_directory(value):
            raise ConfigError(f"Input {value} is a directory, not a file")

        log.debug("Using the input as a literal value")
        return LiteralSource(value)


@attr.s(frozen=True)
class FileSource(Source):
    """Content loaded from a file. Results of file transforms may be written out."""
    writable = True

    path: pathlib.Path = attr.ib()

    def __str__(self):
        return str(self.path)

    def read(self) -> str:
        log.debug(f"Reading contents of {self.path}")
        return read_text(self.path)


@attr.s(frozen=True, repr=False)
class LiteralSource(Source):
    """A value passed directly; transformed without any file access."""

    text: str = attr.ib()

    def __repr__(self):
        return "LiteralSource(...)"

    def __str__(self):
        return "<literal>"

    def read(self) -> str:
        return self.text
