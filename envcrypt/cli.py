import functools
import logging
import os.path
import pathlib
import typing

import click

from . import __doc__
from .api import (
    EnvcryptOptions,
    get_version,
    sync_files,
    to_encrypted_form,
    to_plaintext_form,
)
from .pairs import Direction
from .repository import find_git_directory, unignored
from .writer import Transformed

log = logging.getLogger(__name__)


@functools.lru_cache()
def rel(path: pathlib.Path) -> str:
    """
    Convert a path to a relative Path.

    Returns a string as these should only be used for presentation.
    """
    return os.path.relpath(path.as_posix(), pathlib.Path.cwd().as_posix())


def enc(path: pathlib.Path) -> str:
    """Style a path to a encrypted file."""
    return click.style(rel(path), fg='green')


def dec(path: pathlib.Path) -> str:
    """Style a path to a decrypted file."""
    return click.style(rel(path), fg='red')


class PathType(click.Path):
    def convert(self, value, param, ctx):
        return pathlib.Path(super().convert(value, param, ctx))


@click.group(help=__doc__)
@click.option(
    '-k', '--secret-key',
    metavar='KEY',
    envvar='ENVCRYPT_SECRET_KEY',
    default=None,
    help="Secret the encryption key is derived from.")
@click.option(
    '--iv',
    metavar='IV',
    envvar='ENVCRYPT_IV',
    default=None,
    help="Initialization vector (8 to 128 bytes). "
         "Defaults to a random IV stored with each ciphertext.")
@click.option(
    '--legacy-iv',
    default=False,
    is_flag=True,
    help="Use the fixed default IV when no IV is given.")
@click.option(
    '-d', '--debug', 'debug',
    default=False,
    is_flag=True,
    help="Enable debug logging.")
@click.pass_context
def main(
        ctx,
        debug: bool,
        secret_key: typing.Optional[str],
        iv: typing.Optional[str],
        legacy_iv: bool):
    logging.basicConfig(level=(logging.DEBUG if debug else logging.WARNING))
    ctx.obj = {'secret_key': secret_key or '', 'iv': iv, 'legacy_iv': legacy_iv}


output_option = click.option(
    '-o', '--output', 'output',
    type=PathType(file_okay=False, dir_okay=True),
    default=None,
    help="Directory to write the output file to.")

name_option = click.option(
    '-n', '--name', 'name',
    metavar='NAME',
    default=None,
    help="Name of the output file.")

no_write_option = click.option(
    '--no-write', 'no_write',
    default=False,
    is_flag=True,
    help="Print the result instead of writing a file.")


def options(obj: dict, no_write: bool = False, name: typing.Optional[str] = None):
    return EnvcryptOptions(disable_write_file=no_write, enc_file_name=name, **obj)


def report(result: Transformed, style: typing.Callable[[pathlib.Path], str]) -> None:
    if result.persisted is None:
        click.echo(result.value)
    else:
        result.wait()
        click.echo(f"Wrote {style(result.path)}")


@main.command()
def version():
    """Show the application version."""
    click.echo(f"envcrypt {get_version()}")


@main.command()
@click.argument('value', required=True)
@output_option
@name_option
@no_write_option
@click.pass_obj
def encrypt(
        obj: dict,
        value: str,
        output: typing.Optional[pathlib.Path],
        name: typing.Optional[str],
        no_write: bool):
    """
    Encrypt a file, or a value passed directly.

    Encrypted files are written to OUTPUT/out.enc unless --name is given.
    """
    report(to_encrypted_form(value, options(obj, no_write, name), output), enc)


@main.command()
@click.argument('value', required=True)
@output_option
@name_option
@no_write_option
@click.pass_obj
def decrypt(
        obj: dict,
        value: str,
        output: typing.Optional[pathlib.Path],
        name: typing.Optional[str],
        no_write: bool):
    """
    Decrypt a file, or a value passed directly.

    Decrypted files are written to OUTPUT/.env unless --name is given.
    """
    report(to_plaintext_form(value, options(obj, no_write, name), output), dec)


@main.command()
@click.argument('ciphertext', type=PathType(), required=True)
@click.argument('plaintext', type=PathType(), required=True)
@click.pass_obj
def sync(obj: dict, ciphertext: pathlib.Path, plaintext: pathlib.Path):
    """
    Regenerate the older of an encrypted file and its plaintext.

    If both were modified at the same time, the plaintext is encrypted.
    """
    result = sync_files(ciphertext, plaintext, options(obj))
    if result.direction is Direction.DECRYPTED:
        click.echo(f"Decrypted {enc(ciphertext)} to {dec(plaintext)}")
    else:
        click.echo(f"Encrypted {enc(ciphertext)} from the plaintext in {dec(plaintext)}")


@main.command()
@click.option(
    '-p', '--path',
    type=PathType(
        file_okay=False,
        dir_okay=True,
        exists=True),
    default=find_git_directory,
    required=True,
    help="Defaults to the current git repository.")
@click.argument(
    'plaintexts',
    type=PathType(exists=True, dir_okay=False),
    required=True,
    nargs=-1)
def check(path: pathlib.Path, plaintexts: typing.Sequence[pathlib.Path]):
    """Check that plaintext files are excluded by .gitignore."""
    included = unignored(path, plaintexts)
    if included:
        raise click.ClickException(
            f"Plaintext file(s) not excluded by .gitignore: "
            f"{', '.join(rel(p) for p in included)}")
    click.echo(f"All {len(plaintexts)} plaintext file(s) are ignored by git")
