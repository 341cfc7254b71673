"""Navigation metadata declarations.

Each content directory may hold a ``_meta.toml`` (or ``_meta.json``) file
mapping content-area keys to sidebar labels::

    overview = "Introduction"
    quickstart = "Quickstart"
    guide = "Tracing Guide"

Declaration order is display order.
"""

import json
import tomllib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

META_FILENAMES = ("_meta.toml", "_meta.json")


class MetaError(ValueError):
    """Malformed navigation metadata."""


@dataclass(frozen=True)
class NavigationEntry:
    """Single key to label declaration."""

    key: str
    label: str


class NavigationMeta:
    """Ordered, immutable mapping of content-area keys to labels."""

    __slots__ = ("_entries", "_index", "source")

    def __init__(
        self,
        entries: Iterable[tuple[str, str]] = (),
        *,
        source: Path | None = None,
    ) -> None:
        """Initialize metadata from ``(key, label)`` pairs.

        Args:
            entries: Pairs in display order
            source: File the entries were read from, for error messages

        Raises:
            MetaError: If a key repeats or a key/label is not a string
        """
        self.source = source
        self._entries: tuple[NavigationEntry, ...] = ()
        self._index: dict[str, int] = {}

        collected: list[NavigationEntry] = []
        for key, label in entries:
            if not isinstance(key, str) or not key:
                raise MetaError(f"{self._where()}navigation keys must be non-empty strings")
            if not isinstance(label, str):
                raise MetaError(f"{self._where()}label for '{key}' must be a string")
            if key in self._index:
                raise MetaError(f"{self._where()}duplicate navigation key '{key}'")
            self._index[key] = len(collected)
            collected.append(NavigationEntry(key=key, label=label))
        self._entries = tuple(collected)

    @classmethod
    def load(cls, path: Path) -> "NavigationMeta":
        """Read metadata from a ``_meta.toml`` or ``_meta.json`` file.

        Raises:
            MetaError: If the file cannot be parsed or is not a flat mapping
        """
        if path.suffix == ".json":
            pairs = _read_json_pairs(path)
        else:
            pairs = _read_toml_pairs(path)
        return cls(pairs, source=path)

    @classmethod
    def find(cls, directory: Path) -> "NavigationMeta":
        """Load the metadata declared in a directory, or an empty mapping.

        Raises:
            MetaError: If the directory declares metadata in more than one file
        """
        found = [directory / name for name in META_FILENAMES if (directory / name).is_file()]
        if not found:
            return cls()
        if len(found) > 1:
            names = ", ".join(p.name for p in found)
            raise MetaError(f"{directory}: conflicting navigation metadata files ({names})")
        return cls.load(found[0])

    def keys(self) -> list[str]:
        return [entry.key for entry in self._entries]

    def labels(self) -> list[str]:
        return [entry.label for entry in self._entries]

    def items(self) -> list[tuple[str, str]]:
        return [(entry.key, entry.label) for entry in self._entries]

    def label_for(self, key: str) -> str | None:
        idx = self._index.get(key)
        if idx is None:
            return None
        return self._entries[idx].label

    def position(self, key: str) -> int | None:
        """Display position of a key, None if not declared."""
        return self._index.get(key)

    def __iter__(self) -> Iterator[NavigationEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NavigationMeta):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"NavigationMeta({self.items()!r})"

    def _where(self) -> str:
        return f"{self.source}: " if self.source is not None else ""


def _read_toml_pairs(path: Path) -> list[tuple[str, str]]:
    # TOML rejects duplicate keys and tomllib keeps document order
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise MetaError(f"{path}: invalid TOML: {e}") from e
    return list(data.items())


def _read_json_pairs(path: Path) -> list[tuple[str, str]]:
    try:
        data = json.loads(
            path.read_text(encoding="utf-8"),
            object_pairs_hook=_Pairs,
        )
    except json.JSONDecodeError as e:
        raise MetaError(f"{path}: invalid JSON: {e}") from e
    if not isinstance(data, _Pairs):
        raise MetaError(f"{path}: navigation metadata must be an object")
    return list(data)


class _Pairs(list):
    """Key/value pairs of a JSON object, duplicates preserved."""
