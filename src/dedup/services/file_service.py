"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem mutations applied on behalf of the operator: delete, trash, hard-link, rename.
Every failure is raised as MutationError with the underlying OSError chained.
"""
import os
import logging
import tempfile
from pathlib import Path

from send2trash import send2trash

from dedup.core.exceptions import MutationError

logger = logging.getLogger(__name__)

_LINK_SUFFIX = ".hardlink_tmp"
_LINK_ATTEMPTS = 10


class FileService:
    """
    Mutation primitives used by the action resolver.
    Each call either fully succeeds or leaves the target path as it was.
    """

    @staticmethod
    def delete(file_path: str, use_trash: bool = False) -> None:
        """Deletes a file, or moves it to the system trash when `use_trash` is set."""
        if use_trash:
            FileService.move_to_trash(file_path)
            return
        try:
            os.unlink(file_path)
        except OSError as e:
            raise MutationError(f"Failed to delete {file_path}: {e.strerror or e}") from e

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash."""
        path = Path(file_path)

        if not path.exists():
            raise MutationError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise MutationError(f"Failed to move to trash: {e}") from e

    @staticmethod
    def is_same_file(first: str, second: str) -> bool:
        try:
            return os.path.samefile(first, second)
        except OSError:
            return False

    @staticmethod
    def hard_link(source: str, target: str) -> None:
        """
        Replaces `target` with a hard link to `source`.

        The link is created under a fresh temporary sibling name and renamed
        over `target`, so on failure `target` is left untouched. A temporary
        name that is already taken is never reused or removed.
        """
        directory, name = os.path.split(target)
        temp_path = None
        for _ in range(_LINK_ATTEMPTS):
            candidate = tempfile.mktemp(prefix=f".{name}.", suffix=_LINK_SUFFIX, dir=directory or os.curdir)
            try:
                os.link(source, candidate)
            except FileExistsError:
                continue
            except OSError as e:
                raise MutationError(f"Failed to link {target} to {source}: {e.strerror or e}") from e
            temp_path = candidate
            break

        if temp_path is None:
            raise MutationError(f"Failed to link {target} to {source}: no free temporary name")

        try:
            os.replace(temp_path, target)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError as cleanup_error:
                logger.warning(f"Could not remove {temp_path}: {cleanup_error}")
            raise MutationError(f"Failed to link {target} to {source}: {e.strerror or e}") from e

    @staticmethod
    def rename(source: str, destination: str) -> None:
        """Renames `source` to `destination`, replacing `destination` if it exists."""
        try:
            os.replace(source, destination)
        except OSError as e:
            raise MutationError(f"Failed to rename {source} to {destination}: {e.strerror or e}") from e
