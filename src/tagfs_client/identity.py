"""Workspace-relative file identities."""

from os import PathLike
from pathlib import PurePosixPath

from tagfs_client.types import FileId


def _posix(path: str | PathLike[str]) -> str:
    return str(path).replace("\\", "/")


def file_identity(path: str | PathLike[str], workspace_root: str | PathLike[str]) -> FileId:
    """Normalize a path to the ``./relative/posix`` form tagfs expects.

    Relative paths are taken relative to the workspace root. Already
    normalized identities are returned unchanged.

    Raises:
        ValueError: The path is the root itself or lies outside it
    """
    root = _posix(workspace_root).rstrip("/")
    text = _posix(path)
    if text.startswith(root + "/"):
        text = text[len(root) + 1 :]
    elif PurePosixPath(text).is_absolute() or text == root:
        raise ValueError(f"{path} is not a file inside workspace {workspace_root}")

    candidate = PurePosixPath(text)
    if ".." in candidate.parts or candidate.as_posix() == ".":
        raise ValueError(f"{path} is not a file inside workspace {workspace_root}")
    return FileId(f"./{candidate.as_posix()}")
