import os
import pathlib
import typing

import attr
import click.testing
import pytest

import envcrypt.cli
from envcrypt.api import EnvcryptOptions
from envcrypt.cipher import encrypt

KEY = 'k1'
IV = '0123456789abcdef'
PLAINTEXT = 'A=1\nB=2'


def touch(path: pathlib.Path, ns: int) -> None:
    """Pin the modification time of a file."""
    os.utime(path, ns=(ns, ns))


@pytest.fixture(autouse=True)
def cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def invoke():
    def invoke_func(arguments: typing.Sequence[str], key: str = KEY, exit_code: int = 0):
        assert all(isinstance(arg, str) for arg in arguments)
        runner = click.testing.CliRunner()
        result = runner.invoke(envcrypt.cli.main, ['-k', key, '--iv', IV, *arguments])
        if result.exit_code != exit_code:
            message = f"Command envcrypt {' '.join(arguments)} exited with {result.exit_code}"
            raise Exception(message) from result.exception
        return result.output.splitlines()

    return invoke_func


@pytest.fixture()
def options():
    return EnvcryptOptions(secret_key=KEY, iv=IV)


@attr.s(frozen=True)
class ExamplePair:
    ciphertext: pathlib.Path = attr.ib()
    plaintext: pathlib.Path = attr.ib()

    def touch(self, ciphertext: int, plaintext: int) -> None:
        touch(self.ciphertext, ciphertext)
        touch(self.plaintext, plaintext)


@pytest.fixture()
def pair(tmp_path):
    """A ciphertext of 'A=1\\nB=2' and a plaintext file with different contents."""
    ciphertext = tmp_path / 'secrets' / 'out.enc'
    ciphertext.parent.mkdir()
    ciphertext.write_text(encrypt(KEY, IV, PLAINTEXT))

    plaintext = tmp_path / '.env'
    plaintext.write_text('A=3\n')

    return ExamplePair(ciphertext=ciphertext, plaintext=plaintext)
