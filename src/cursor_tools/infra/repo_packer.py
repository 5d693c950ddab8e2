"""Pack a repository into a single text document for long-context models.

Each text file becomes one ``<file path="...">`` block.  Hidden paths,
dependency/build directories, lock and env files, binary files and
anything matched by the repository root ``.gitignore`` are skipped.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Iterable, Iterator
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath

import pathspec

from cursor_tools.exceptions import ProviderError

IGNORED_DIRS: frozenset[str] = frozenset(
    {"node_modules", "dist", "build", "compile", "__pycache__", "venv"}
)

IGNORED_FILES: tuple[str, ...] = (
    "*.pbxproj",
    "*.spec.*",
    "*.pyc",
    "*.env",
    "*.env.*",
    "*.lock",
    "*.lockb",
    "package-lock.*",
    "pnpm-lock.*",
    "*.tsbuildinfo",
)

GITIGNORE = ".gitignore"

HEADER = (
    "This file is a merged representation of the repository, packed for "
    "analysis by an AI model.\n"
)


def is_ignored(relative: PurePosixPath) -> bool:
    """Whether a repository-relative path should be left out."""
    *dirs, name = relative.parts
    if any(part.startswith(".") or part in IGNORED_DIRS for part in dirs):
        return True
    if name.startswith("."):
        return True
    return any(fnmatch(name, pattern) for pattern in IGNORED_FILES)


def _decode_text(data: bytes) -> str | None:
    if b"\x00" in data[:8192]:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def render(files: Iterable[tuple[str, str]]) -> str:
    """Render ``(path, content)`` pairs as the packed document."""
    parts = [HEADER, "<files>\n"]
    for path, content in files:
        parts.append(f'<file path="{path}">\n{content.rstrip()}\n</file>\n\n')
    parts.append("</files>\n")
    return "".join(parts)


def gitignore_spec(text: str | None) -> pathspec.GitIgnoreSpec | None:
    """Compile the contents of a ``.gitignore`` file, if there is one."""
    if not text:
        return None
    return pathspec.GitIgnoreSpec.from_lines(text.splitlines())


def _excluded(relative: PurePosixPath, spec: pathspec.GitIgnoreSpec | None) -> bool:
    if is_ignored(relative):
        return True
    return spec is not None and spec.match_file(str(relative))


def _walk(root: Path) -> Iterator[tuple[str, bytes]]:
    gitignore = root / GITIGNORE
    spec = None
    if gitignore.is_file():
        spec = gitignore_spec(gitignore.read_text(encoding="utf-8", errors="replace"))

    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        relative = PurePosixPath(path.relative_to(root).as_posix())
        if _excluded(relative, spec):
            continue
        try:
            yield str(relative), path.read_bytes()
        except OSError:
            # Unreadable files (sockets, permission errors) are left out.
            continue


def _text_files(entries: Iterable[tuple[str, bytes]], max_bytes: int | None) -> Iterator[tuple[str, str]]:
    total = 0
    for path, data in entries:
        text = _decode_text(data)
        if text is None:
            continue
        total += len(data)
        if max_bytes is not None and total > max_bytes:
            raise ProviderError(
                f"Repository exceeds the {max_bytes // (1024 * 1024)} MB packing limit.",
                hint="Raise doc.maxRepoSizeMB in cursor-tools.config.json",
            )
        yield path, text


def pack_directory(root: Path, *, max_bytes: int | None = None) -> str:
    """Pack every eligible text file below *root*."""
    if not root.is_dir():
        raise ProviderError(f"{root} is not a directory.")
    return render(_text_files(_walk(root), max_bytes))


def pack_zip(data: bytes, *, max_bytes: int | None = None) -> str:
    """Pack a GitHub-style zipball, dropping its single top-level folder."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise ProviderError("Downloaded archive is not a valid zip file.") from exc

    members: list[tuple[PurePosixPath, zipfile.ZipInfo]] = []
    for info in sorted(archive.infolist(), key=lambda i: i.filename):
        parts = PurePosixPath(info.filename).parts[1:]
        if info.is_dir() or not parts:
            continue
        members.append((PurePosixPath(*parts), info))

    spec = None
    for relative, info in members:
        if str(relative) == GITIGNORE:
            spec = gitignore_spec(archive.read(info).decode("utf-8", errors="replace"))

    def entries() -> Iterator[tuple[str, bytes]]:
        with archive:
            for relative, info in members:
                if _excluded(relative, spec):
                    continue
                yield str(relative), archive.read(info)

    return render(_text_files(entries(), max_bytes))
