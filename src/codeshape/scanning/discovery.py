"""File discovery and loading.

Turns the paths given on the command line into parsed SourceFiles:
directories are walked recursively, files are filtered by language,
exclude globs, hidden-ness and size, and the survivors are parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional, Sequence

from ..config import AnalysisConfig
from ..exceptions import InvalidPathError
from ..logging_config import get_logger
from .languages import detect_language
from .normalizer import TreeSitterNormalizer
from .syntax import SourceFile

logger = get_logger(__name__)


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    """Check a "/"-separated relative path against glob patterns.

    A pattern matches the whole path or any trailing part of it, so
    ``node_modules/*`` also excludes ``web/node_modules/lib/x.js``.
    """
    parts = PurePosixPath(path).parts
    suffixes = ["/".join(parts[i:]) for i in range(len(parts))]
    for pattern in patterns:
        if any(fnmatch(suffix, pattern) for suffix in suffixes):
            return True
    return False


def _is_hidden(relative: PurePosixPath) -> bool:
    return any(part.startswith(".") and part not in (".", "..") for part in relative.parts)


@dataclass
class DiscoveredFile:
    path: Path
    display_path: str
    language: str


@dataclass
class LoadResult:
    """Parsed sources plus what was left out.

    Attributes:
        sources: Files that were read, sorted by display path
        parse_failures: Display paths of files without a syntax tree
        skipped: Number of candidate files filtered out
    """

    sources: list[SourceFile] = field(default_factory=list)
    parse_failures: list[str] = field(default_factory=list)
    skipped: int = 0


def discover_files(paths: Sequence[Path], config: AnalysisConfig) -> tuple[list[DiscoveredFile], int]:
    """Collect analyzable files under ``paths``.

    Returns:
        (files sorted by display path, number of files skipped)

    Raises:
        InvalidPathError: If a path does not exist
    """
    found: dict[str, DiscoveredFile] = {}
    skipped = 0

    for root in paths:
        if not root.exists():
            raise InvalidPathError(root, "path does not exist")

        if root.is_file():
            candidates = [(root, PurePosixPath(root.name))]
        else:
            candidates = [
                (item, PurePosixPath(item.relative_to(root).as_posix()))
                for item in root.rglob("*")
                if item.is_file() and not item.is_symlink()
            ]

        for filepath, relative in candidates:
            display = relative.as_posix() if root.is_dir() else _display_path(filepath)

            language = detect_language(filepath)
            if language == "unknown":
                continue
            if config.languages and language not in config.languages:
                skipped += 1
                continue

            if not config.allow_hidden_files and _is_hidden(relative):
                skipped += 1
                logger.debug(f"Skipped (hidden): {display}")
                continue

            if matches_any(relative.as_posix(), config.exclude_patterns):
                skipped += 1
                logger.debug(f"Skipped (pattern): {display}")
                continue

            try:
                size = filepath.stat().st_size
            except OSError as e:
                skipped += 1
                logger.warning(f"Cannot stat {filepath}: {e}")
                continue
            if size > config.max_file_size_bytes:
                skipped += 1
                logger.debug(f"Skipped (size): {display} ({size} bytes)")
                continue

            found.setdefault(display, DiscoveredFile(filepath, display, language))

    return [found[key] for key in sorted(found)], skipped


def _display_path(filepath: Path) -> str:
    try:
        return filepath.resolve().relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return filepath.as_posix()


def load_sources(
    paths: Sequence[Path],
    config: AnalysisConfig,
    normalizer: Optional[TreeSitterNormalizer] = None,
) -> LoadResult:
    """Discover, read and parse every analyzable file under ``paths``.

    Files that cannot be parsed are still returned (line-based rules can
    use them) and are listed in ``parse_failures``.
    """
    normalizer = normalizer or TreeSitterNormalizer()
    files, skipped = discover_files(paths, config)
    result = LoadResult(skipped=skipped)

    for item in files:
        try:
            content = item.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            result.skipped += 1
            logger.warning(f"Cannot read {item.display_path}: {e}")
            continue

        source = normalizer.parse_file(content, item.display_path, item.language)
        if source.root is None:
            logger.debug(f"No syntax tree for {item.display_path}, tree rules will skip it")
            result.parse_failures.append(item.display_path)
        result.sources.append(source)

    logger.info(
        f"Loaded {len(result.sources)} files "
        f"({len(result.parse_failures)} unparsed, {result.skipped} skipped)"
    )
    return result
