"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/resolver.py
Interactive resolution of duplicate groups.

For each group the operator sees a numbered list and answers with a command
word optionally followed by numbers, e.g. `d 1 2`, `link`, `mv 0 2`, `c`.
Numbers always refer to the original numbering of the group: entries that
are deleted or moved disappear from the list but the others keep their number.
Each action returns the numbers it retired; an empty answer (or the list
running empty) ends the group.
"""

import os
import re
import sys
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Set

try:
    import readline
except ImportError:
    readline = None

from dedup.aliases import ACTION_ALIASES, ACTION_PROMPT
from dedup.core.cache import ChecksumCache
from dedup.core.exceptions import InputError, MutationError
from dedup.core.interfaces import LineReader
from dedup.core.models import Action, DuplicateGroup, FileRecord
from dedup.services.file_service import FileService

logger = logging.getLogger(__name__)

COMMAND_PATTERN = re.compile(r'^([a-z]+)\s*([\d\s]*)$', re.IGNORECASE)


@dataclass
class Command:
    token: str
    action: Optional[Action]
    indices: List[int] = field(default_factory=list)


def parse_command(response: str) -> Command:
    """
    Parses `word [N ...]`. Unknown words parse fine and carry action None.

    Raises:
        InputError: the response does not match the grammar.
    """
    match = COMMAND_PATTERN.match(response.strip())
    if not match:
        raise InputError(f"Unrecognized response: {response.strip()}")
    token = match.group(1).lower()
    indices = [int(n) for n in match.group(2).split()]
    return Command(token=token, action=ACTION_ALIASES.get(token), indices=indices)


class ConsoleLineReader(LineReader):
    """Reads operator answers from the terminal."""

    def readline(self, prompt: str) -> str:
        return input(prompt)


def _print_warning(message: str) -> None:
    print(f"⚠️  {message}", file=sys.stderr)


class ActionResolver:
    """
    Presents duplicate groups and applies the operator's actions.

    Attributes:
        reader: Source of operator answers
        cache: Checksum cache kept in sync with every mutation (None when caching is off)
        use_trash: Send deleted files to the system trash instead of unlinking them
        echo: Output for listings and confirmation lines
        warn: Output for warnings
    """

    def __init__(
        self,
        reader: LineReader,
        cache: Optional[ChecksumCache] = None,
        use_trash: bool = False,
        echo: Callable[[str], None] = print,
        warn: Callable[[str], None] = _print_warning
    ):
        self.reader = reader
        self.cache = cache
        self.use_trash = use_trash
        self.echo = echo
        self.warn = warn
        self._handlers = {
            Action.DELETE: self._delete,
            Action.LINK: self._link,
            Action.MOVE: self._move,
            Action.EVICT_CACHE: self._evict_cache,
        }

    def resolve_all(self, groups: Iterable[DuplicateGroup]) -> None:
        for group in groups:
            self.resolve_group(group)

    def resolve_group(self, group: DuplicateGroup) -> Dict[int, FileRecord]:
        """
        Runs the prompt loop for one group.
        Returns the entries still presentable when the operator moved on.
        """
        remaining = dict(enumerate(group.files))
        self.echo("Duplicate files:")

        while remaining:
            self._present(remaining)
            try:
                response = self.reader.readline(ACTION_PROMPT)
            except EOFError:
                self.echo("")
                break

            if not response.strip():
                break

            try:
                command = parse_command(response)
            except InputError as e:
                self.warn(str(e))
                continue

            for index in self.apply(command, remaining):
                remaining.pop(index, None)

        self.echo("")
        return remaining

    def apply(self, command: Command, remaining: Dict[int, FileRecord]) -> Set[int]:
        """Dispatches one parsed command; returns the indices to retire."""
        if command.action is None:
            self.warn(f"Unknown action: {command.token}")
            return set()
        logger.debug(f"Applying {command.action.value} to {command.indices or 'default selection'}")
        return self._handlers[command.action](command.indices, remaining)

    def _present(self, remaining: Dict[int, FileRecord]) -> None:
        for index in sorted(remaining):
            self.echo(f"\t{index}: {remaining[index].path}")

    def _select(self, indices: List[int], remaining: Dict[int, FileRecord], default_all: bool) -> List[int]:
        """
        Typed indices in typed order, without repeats and without entries that are gone.
        Falls back to every remaining index when nothing was typed and `default_all` is set.
        """
        if not indices:
            return sorted(remaining) if default_all else []

        selected = []
        for index in indices:
            if index in selected:
                continue
            if index not in remaining:
                self.warn(f"No such entry: {index}")
                continue
            selected.append(index)
        return selected

    # =============================
    # Actions
    # =============================

    def _delete(self, indices: List[int], remaining: Dict[int, FileRecord]) -> Set[int]:
        done = set()
        for index in self._select(indices, remaining, default_all=False):
            file = remaining[index]
            self.echo(f"{'trash' if self.use_trash else 'unlink'} {file.path}")
            try:
                FileService.delete(file.path, use_trash=self.use_trash)
            except MutationError as e:
                self.warn(str(e))
                continue
            done.add(index)
            self._evict(file)
        return done

    def _link(self, indices: List[int], remaining: Dict[int, FileRecord]) -> Set[int]:
        selected = self._select(indices, remaining, default_all=True)
        if len(selected) < 2:
            self.warn("link requires at least two files")
            return set()

        source = remaining[selected[0]]
        failed = 0
        for index in selected[1:]:
            copy = remaining[index]
            if FileService.is_same_file(source.path, copy.path):
                self.echo(f"{copy.path} is already linked to {source.path}")
                continue
            self.echo(f"link {copy.path} -> {source.path}")
            try:
                FileService.hard_link(source.path, copy.path)
            except MutationError as e:
                self.warn(str(e))
                failed += 1
                continue
            self._store(copy.rel_path, source.digest)

        if failed:
            self.warn(f"{failed} file(s) could not be linked")
        else:
            self.echo("all linked")
        return set()

    def _move(self, indices: List[int], remaining: Dict[int, FileRecord]) -> Set[int]:
        if len(indices) != 2:
            self.warn("mv requires exactly two choices (mv A --> B)")
            return set()

        src_index, dst_index = indices
        for index in indices:
            if index not in remaining:
                self.warn(f"No such entry: {index}")
                return set()

        src, dst = remaining[src_index], remaining[dst_index]
        new_dst = os.path.join(dst.directory, src.filename)
        if os.path.normpath(new_dst) == os.path.normpath(src.path):
            self.warn("No-op mv")
            return set()

        replaces_dst = os.path.normpath(new_dst) == os.path.normpath(dst.path)
        if not replaces_dst and os.path.lexists(new_dst):
            self.warn(f"Refusing to overwrite {new_dst}")
            return set()

        self.echo(f"unlink {dst.path} and rename {src.path} to {new_dst}")
        try:
            FileService.rename(src.path, new_dst)
        except MutationError as e:
            self.warn(str(e))
            return set()

        retired = {src_index}
        self._evict(src)
        if replaces_dst:
            retired.add(dst_index)
        else:
            try:
                FileService.delete(dst.path, use_trash=self.use_trash)
            except MutationError as e:
                self.warn(str(e))
            else:
                retired.add(dst_index)
                self._evict(dst)

        self._store(os.path.join(os.path.dirname(dst.rel_path), src.filename), src.digest)
        return retired

    def _evict_cache(self, indices: List[int], remaining: Dict[int, FileRecord]) -> Set[int]:
        if self.cache is None:
            self.warn("Checksum cache is disabled")
            return set()
        for index in self._select(indices, remaining, default_all=True):
            file = remaining[index]
            self.echo(f"clear cache for {file.path}")
            self.cache.evict(file.rel_path)
        return set()

    # =============================
    # Cache bookkeeping
    # =============================

    def _evict(self, file: FileRecord) -> None:
        if self.cache is not None:
            self.cache.evict(file.rel_path)

    def _store(self, rel_path: str, digest: Optional[str]) -> None:
        if self.cache is not None and digest:
            self.cache.store(rel_path, digest)
