import logging
import pathlib
import typing

import git

from .utils import EnvcryptException

log = logging.getLogger(__name__)


def find_git_directory() -> typing.Optional[pathlib.Path]:
    try:
        repo = git.Repo(search_parent_directories=True)
    except git.exc.InvalidGitRepositoryError:
        return None
    return pathlib.Path(repo.working_dir)


def unignored(
        directory: pathlib.Path,
        paths: typing.Iterable[pathlib.Path]) -> typing.Sequence[pathlib.Path]:
    """Return the paths that are not excluded by the repository's .gitignore files."""
    try:
        repo = git.Repo(directory, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as error:
        raise EnvcryptException(f"{directory} is not in a git repository") from error

    candidates = sorted({path.resolve() for path in paths})
    log.info(f"Checking {len(candidates)} plaintext file(s) are ignored by git")
    ignored = {pathlib.Path(repo.working_dir, p).resolve() for p in repo.ignored(*candidates)}
    return tuple(path for path in candidates if path not in ignored)
