"""Icon set inspection: manifest classification and badgeable file resolution."""

from __future__ import annotations

import glob
import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

log = logging.getLogger("iconlib.catalog")

MANIFEST_NAME = "Contents.json"
ICON_SET_SUFFIX = ".appiconset"
SINGLE_SIZE = "1024x1024"


class SchemaKind(Enum):
    """Manifest schema generations understood by the inspector."""
    LEGACY = "legacy"
    SINGLE_SIZE = "single_size"
    LAYERED = "layered"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Classification:
    """Outcome of loading a manifest. UNKNOWN marks the glob fallback."""
    kind: SchemaKind
    files: Tuple[str, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return self.kind is SchemaKind.UNKNOWN


FALLBACK = Classification(SchemaKind.UNKNOWN)


def _extract_icon_files(directory: Path, images: Sequence[Any]) -> Tuple[str, ...]:
    files: List[str] = []
    for image in images:
        if not isinstance(image, dict):
            continue
        filename = image.get("filename")
        if not filename:
            continue

        icon_path = directory / str(filename)
        if icon_path.is_file() and icon_path.suffix.lower() == ".png":
            files.append(str(icon_path))
    return tuple(files)


def _has_appearances(image: Any) -> bool:
    # null and false do not mark a layered entry; empty arrays do
    if not isinstance(image, dict):
        return False
    value = image.get("appearances")
    return value is not None and value is not False


def _load_images(manifest_path: Path) -> Optional[List[Any]]:
    """Return the manifest's images, or None when the manifest is unusable.

    OSErrors other than a missing manifest (or a non-directory parent) are
    not caught.
    """
    try:
        raw = manifest_path.read_bytes()
    except (FileNotFoundError, NotADirectoryError):
        log.info("No %s found at %s, using fallback", MANIFEST_NAME, manifest_path)
        return None

    try:
        contents = json.loads(raw.decode("utf-8"))
    except ValueError as e:  # JSONDecodeError and UnicodeDecodeError
        log.error("Failed to parse %s: %s", manifest_path, e)
        return None

    if not isinstance(contents, dict):
        log.error("Failed to parse %s: top-level value is not an object", manifest_path)
        return None

    images = contents.get("images") or []
    if not isinstance(images, list):
        log.error("Failed to parse %s: 'images' is not an array", manifest_path)
        return None
    return images


def classify_manifest(directory: Union[str, os.PathLike]) -> Classification:
    """Classify the manifest inside ``directory`` and resolve its files.

    Priority: layered (any entry carries ``appearances``), then single-size
    (exactly one entry sized 1024x1024), then legacy. A missing, malformed or
    empty manifest yields the UNKNOWN fallback.
    """
    directory = Path(directory)
    manifest_path = directory / MANIFEST_NAME

    images = _load_images(manifest_path)
    if images is None:
        return FALLBACK

    if not images:
        log.info("%s has no images array", manifest_path)
        return FALLBACK

    if any(_has_appearances(img) for img in images):
        files = _extract_icon_files(directory, images)
        log.info("Detected layered icon format with %d variant(s)", len(files))
        return Classification(SchemaKind.LAYERED, files)

    if len(images) == 1 and isinstance(images[0], dict) and images[0].get("size") == SINGLE_SIZE:
        files = _extract_icon_files(directory, images)
        log.info("Detected single-size icon format")
        return Classification(SchemaKind.SINGLE_SIZE, files)

    files = _extract_icon_files(directory, images)
    log.info("Detected legacy multi-size icon format with %d size(s)", len(files))
    return Classification(SchemaKind.LEGACY, files)


class IconSetInspector:
    """Inspect one icon set directory.

    Classification happens once, in the constructor. The instance is
    read-only afterwards.
    """

    def __init__(self, directory_path: Union[str, os.PathLike]) -> None:
        self._directory_path = Path(directory_path)
        self._manifest_path = self._directory_path / MANIFEST_NAME
        self._classification = classify_manifest(self._directory_path)

    def __repr__(self) -> str:
        return f"IconSetInspector({str(self._directory_path)!r}, {self.schema_kind.value})"

    @property
    def directory_path(self) -> Path:
        return self._directory_path

    @property
    def manifest_path(self) -> Path:
        return self._manifest_path

    @property
    def name(self) -> str:
        return self._directory_path.name

    @property
    def schema_kind(self) -> SchemaKind:
        return self._classification.kind

    @property
    def resolved_files(self) -> Tuple[str, ...]:
        return self._classification.files

    def badgeable_icons(self) -> List[str]:
        """Return the icon files a badging step should process."""
        kind = self.schema_kind
        if kind in (SchemaKind.LAYERED, SchemaKind.SINGLE_SIZE, SchemaKind.LEGACY):
            return list(self._classification.files)
        return self._glob_fallback()

    def _glob_fallback(self) -> List[str]:
        # Only the two common casings, unlike the case-insensitive manifest check
        base = glob.escape(str(self._directory_path))
        matches: List[str] = []
        for ext in ("png", "PNG"):
            matches.extend(sorted(glob.glob(os.path.join(base, f"*.{ext}"))))
        return matches


@dataclass(frozen=True)
class ResolvedGlob:
    """A caller-supplied glob pattern, passed through untouched."""
    pattern: str


@dataclass(frozen=True)
class DiscoveredSet:
    """Icon sets found by discovery, in sorted path order."""
    inspectors: Tuple[IconSetInspector, ...] = ()

    def __iter__(self):
        return iter(self.inspectors)

    def __len__(self) -> int:
        return len(self.inspectors)

    def badgeable_icons(self) -> List[str]:
        """Flatten the badgeable files of every discovered icon set."""
        files: List[str] = []
        for inspector in self.inspectors:
            files.extend(inspector.badgeable_icons())
        return files


DiscoveryResult = Union[ResolvedGlob, DiscoveredSet]


def find_icon_set_dirs(search_path: Union[str, os.PathLike]) -> List[Path]:
    """Return every ``*.appiconset`` directory below ``search_path``, sorted."""
    pattern = os.path.join(glob.escape(str(search_path)), "**", f"*{ICON_SET_SUFFIX}")
    return [Path(p) for p in sorted(glob.glob(pattern, recursive=True)) if os.path.isdir(p)]


def find_icon_sets(
    search_path: Union[str, os.PathLike], glob_pattern: Optional[str] = None
) -> DiscoveryResult:
    """Discover icon sets below ``search_path``.

    An explicit ``glob_pattern`` bypasses discovery and is returned as a
    ``ResolvedGlob`` for callers that work from raw file patterns.
    """
    if glob_pattern is not None:
        log.info("Using custom glob pattern: %s", glob_pattern)
        return ResolvedGlob(glob_pattern)

    inspectors = tuple(IconSetInspector(d) for d in find_icon_set_dirs(search_path))
    log.info("Found %d app icon set(s)", len(inspectors))
    for inspector in inspectors:
        log.info("  - %s (%s)", inspector.name, inspector.schema_kind.value)
    return DiscoveredSet(inspectors)


def expand_glob(pattern: str, root: Union[str, os.PathLike] = ".") -> List[str]:
    """Expand a custom glob pattern relative to ``root`` (recursive ``**`` allowed)."""
    if os.path.isabs(pattern):
        return sorted(glob.glob(pattern, recursive=True))
    base = glob.escape(str(root))
    return sorted(glob.glob(os.path.join(base, pattern), recursive=True))
