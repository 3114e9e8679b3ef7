"""Path classification and confirm-then-delete logic."""

from __future__ import annotations

import os
import stat
import sys
from typing import Callable, Optional, TextIO

from .logging import get_logger
from .models import (
    DirectoryCensus,
    EntryKind,
    InspectionResult,
    MetadataResult,
    MetadataStatus,
    Outcome,
)

ACCEPT_LINE = "y\n"

_LOGGER = get_logger("inspector")

_TOCTOU_NOTE = (
    "(Note that no file locking or revalidation is performed, and the {subject} "
    "may {change} by the time you respond to this prompt!)"
)


class InspectionError(RuntimeError):
    """Raised when the path cannot be inspected or acted upon."""


def read_metadata(path: str) -> MetadataResult:
    """``lstat`` the path and fold the outcome into a :class:`MetadataResult`."""
    try:
        info = os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        return MetadataResult.not_found()
    except PermissionError:
        return MetadataResult.permission_denied()
    except OSError as exc:
        return MetadataResult.other_error(str(exc))
    return MetadataResult.success(_kind_from_mode(info.st_mode), info.st_size)


def canonicalize(path: str) -> Optional[str]:
    """Return the absolute, symlink-free form of ``path``.

    ``None`` means the path, or whatever a symlink along it points to, does
    not exist. Any other resolution failure is an :class:`InspectionError`.
    """
    try:
        resolved = os.path.realpath(path, strict=True)
    except (FileNotFoundError, NotADirectoryError):
        _LOGGER.info(
            'Could not canonicalize input path "%s" because it or the file it '
            "resolves to does not exist",
            path,
        )
        return None
    except OSError as exc:
        raise InspectionError(f'Could not canonicalize path "{path}": {exc}') from exc
    _require_utf8(resolved, "canonicalized path")
    _LOGGER.info('Canonicalized input path "%s" to "%s"', path, resolved)
    return resolved


def take_census(path: str) -> DirectoryCensus:
    """Count the immediate children of a directory by kind."""
    directories = files = symlinks = 0
    try:
        with os.scandir(path) as entries:
            for entry in entries:
                kind = _entry_kind(entry)
                if kind is EntryKind.DIRECTORY:
                    directories += 1
                elif kind is EntryKind.FILE:
                    files += 1
                elif kind is EntryKind.SYMLINK:
                    symlinks += 1
                else:
                    raise InspectionError(
                        f'Encountered directory entry "{entry.path}" that is not a '
                        "directory, file, or symlink"
                    )
    except OSError as exc:
        raise InspectionError(f'Could not read directory "{path}": {exc}') from exc
    census = DirectoryCensus(directories=directories, files=files, symlinks=symlinks)
    _LOGGER.debug("Census of %s: %s", path, census)
    return census


def read_link_target(path: str) -> str:
    """Return the raw text stored in a symbolic link."""
    try:
        target = os.readlink(path)
    except OSError as exc:
        raise InspectionError(f'Could not read symbolic link "{path}": {exc}') from exc
    _require_utf8(target, "symbolic link target")
    return target


class PathInspector:
    """Classify one path and optionally delete it when it is empty.

    Status lines go to ``stdout``; confirmation prompts and notices go to
    ``stderr``. The confirmation answer is read from ``stdin``. Streams
    default to the process streams looked up at call time.
    """

    def __init__(
        self,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def inspect(self, path: str, *, delete_if_empty: bool = False) -> InspectionResult:
        """Inspect ``path`` and return what was found and done."""
        _require_utf8(path, "path")
        metadata = read_metadata(path)
        _LOGGER.debug("Metadata for %s: %s", path, metadata)

        if metadata.status is MetadataStatus.NOT_FOUND:
            self._notice(f'Path "{path}" does not exist')
            return InspectionResult(Outcome.NOT_FOUND, path=path, display_path=path)
        if metadata.status is MetadataStatus.PERMISSION_DENIED:
            self._notice(f'Permission to path "{path}" was denied')
            return InspectionResult(Outcome.PERMISSION_DENIED, path=path, display_path=path)
        if metadata.status is MetadataStatus.OTHER_ERROR:
            raise InspectionError(f'Could not read metadata for "{path}": {metadata.message}')

        if metadata.kind is EntryKind.DIRECTORY:
            return self._inspect_directory(path, delete_if_empty)
        if metadata.kind is EntryKind.FILE:
            return self._inspect_file(path, metadata.size, delete_if_empty)
        if metadata.kind is EntryKind.SYMLINK:
            return self._inspect_symlink(path, delete_if_empty)
        raise InspectionError(f'Path "{path}" is not a directory, file, or symlink')

    def _inspect_directory(self, path: str, delete_if_empty: bool) -> InspectionResult:
        canonical = canonicalize(path)
        shown = canonical or path
        census = take_census(path)
        result = InspectionResult(
            Outcome.SUCCESS,
            path=path,
            display_path=shown,
            kind=EntryKind.DIRECTORY,
            canonical_path=canonical,
            census=census,
        )

        if not census.is_empty:
            self._status(
                f'Path "{shown}" is a non-empty directory (directories: {census.directories}, '
                f"files: {census.files}, symlinks: {census.symlinks}, "
                f"total items: {census.total})"
            )
            result.outcome = Outcome.NON_EMPTY_DIRECTORY
            return result

        self._status(f'Path "{shown}" is an empty directory')
        if not delete_if_empty:
            return result

        confirmed = self._confirm(
            f'Are you sure you want to delete empty directory "{shown}"? ("y")',
            _TOCTOU_NOTE.format(subject="directory", change="be non-empty"),
        )
        if not confirmed:
            self._status('Input was not "y", not deleting empty directory')
            result.outcome = Outcome.DIRECTORY_DELETE_DECLINED
            return result

        _remove(os.rmdir, path)
        self._status(f'Deleted empty directory "{shown}"')
        result.deleted = True
        return result

    def _inspect_file(self, path: str, size: int, delete_if_empty: bool) -> InspectionResult:
        canonical = canonicalize(path)
        shown = canonical or path
        result = InspectionResult(
            Outcome.SUCCESS,
            path=path,
            display_path=shown,
            kind=EntryKind.FILE,
            canonical_path=canonical,
            size=size,
        )

        if size > 0:
            self._status(f'Path "{shown}" is a non-empty file (bytes: {size})')
            result.outcome = Outcome.NON_EMPTY_FILE
            return result

        self._status(f'Path "{shown}" is an empty file')
        if not delete_if_empty:
            return result

        confirmed = self._confirm(
            f'Are you sure you want to delete empty file "{shown}"? ("y")',
            _TOCTOU_NOTE.format(subject="file", change="be non-empty"),
        )
        if not confirmed:
            self._status('Input was not "y", not deleting empty file')
            result.outcome = Outcome.FILE_DELETE_DECLINED
            return result

        _remove(os.unlink, path)
        self._status(f'Deleted empty file "{shown}"')
        result.deleted = True
        return result

    def _inspect_symlink(self, path: str, delete_if_empty: bool) -> InspectionResult:
        target = read_link_target(path)
        canonical = canonicalize(path)
        result = InspectionResult(
            Outcome.SUCCESS,
            path=path,
            display_path=path,
            kind=EntryKind.SYMLINK,
            canonical_path=canonical,
            link_target=target,
        )

        # A resolvable link is never "empty", whatever it points at.
        if canonical is not None:
            self._status(
                f'Path "{path}" (non-canonicalized) is a symbolic link to "{target}" '
                f'(resolves to "{canonical}")'
            )
            result.outcome = Outcome.SYMLINK_RESOLVES
            return result

        self._status(
            f'Path "{path}" (non-canonicalized) is a symbolic link to non-existent file '
            f'"{target}" (non-canonicalized)'
        )
        if not delete_if_empty:
            return result

        confirmed = self._confirm(
            f'Are you sure you want to delete symbolic link "{path}" (non-canonicalized) '
            f'pointing to non-existent file "{target}" (non-canonicalized)? ("y")',
            _TOCTOU_NOTE.format(subject="symbolic link destination", change="exist"),
        )
        if not confirmed:
            self._status('Input was not "y", not deleting symbolic link')
            result.outcome = Outcome.SYMLINK_DELETE_DECLINED
            return result

        _remove(os.unlink, path)
        self._status(f'Deleted symbolic link "{path}" (non-canonicalized)')
        result.deleted = True
        return result

    def _confirm(self, question: str, note: str) -> bool:
        self.stderr.write(f"{question}\n{note}\n")
        self.stderr.flush()
        try:
            answer = self.stdin.readline()
        except OSError as exc:
            raise InspectionError(f"Could not read confirmation input: {exc}") from exc
        _LOGGER.debug("Confirmation input: %r", answer)
        return answer == ACCEPT_LINE

    def _status(self, message: str) -> None:
        print(message, file=self.stdout)

    def _notice(self, message: str) -> None:
        print(message, file=self.stderr)


def _remove(remover: Callable[[str], None], path: str) -> None:
    try:
        remover(path)
    except OSError as exc:
        raise InspectionError(f'Could not delete "{path}": {exc}') from exc


def _kind_from_mode(mode: int) -> EntryKind:
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    return EntryKind.OTHER


def _entry_kind(entry: os.DirEntry) -> EntryKind:
    if entry.is_symlink():
        return EntryKind.SYMLINK
    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return EntryKind.OTHER


def _require_utf8(text: str, what: str) -> None:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InspectionError(f"Could not convert {what} to a UTF-8 string: {exc}") from exc


__all__ = [
    "ACCEPT_LINE",
    "InspectionError",
    "PathInspector",
    "canonicalize",
    "read_link_target",
    "read_metadata",
    "take_census",
]
