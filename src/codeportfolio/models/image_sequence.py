"""Bounded, ordered sequence of project image URLs.

The first URL is the cover image for every consumer. An empty sequence is a
real value (no images); it is never represented as ``None``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from codeportfolio.constants.portfolio_constants import MAX_PROJECT_IMAGES
from codeportfolio.models.errors import CapacityError


class ImageSequence(Sequence[str]):
    """Immutable list of at most ``capacity`` image URLs."""

    __slots__ = ("_urls", "_capacity")

    def __init__(self, urls: Iterable[str] | None = (), capacity: int = MAX_PROJECT_IMAGES) -> None:
        values = tuple(urls or ())
        if len(values) > capacity:
            raise CapacityError(
                f"Maximum {capacity} images allowed", field="image_urls"
            )
        self._urls = values
        self._capacity = capacity

    @classmethod
    def from_storage(cls, raw: Sequence[str] | None) -> ImageSequence:
        """Build from a stored column value, treating NULL as empty."""
        return cls(raw or ())

    def __getitem__(self, index):  # type: ignore[override]
        return self._urls[index]

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ImageSequence):
            return self._urls == other._urls
        if isinstance(other, (list, tuple)):
            return list(self._urls) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._urls)

    def __repr__(self) -> str:
        return f"ImageSequence({list(self._urls)!r})"

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def remaining(self) -> int:
        return self._capacity - len(self._urls)

    @property
    def cover(self) -> str | None:
        return self._urls[0] if self._urls else None

    def ensure_room_for(self, count: int) -> None:
        """Raise :class:`CapacityError` unless ``count`` more URLs fit."""
        if count > self.remaining:
            raise CapacityError(
                f"Maximum {self._capacity} images allowed "
                f"({len(self._urls)} already attached, {count} requested)",
                field="image_urls",
            )

    def extend(self, urls: Sequence[str]) -> ImageSequence:
        """Return a new sequence with ``urls`` appended after the existing ones."""
        self.ensure_room_for(len(urls))
        return ImageSequence((*self._urls, *urls), capacity=self._capacity)

    def without(self, url: str) -> ImageSequence:
        """Return a new sequence with every occurrence of ``url`` removed."""
        return ImageSequence((u for u in self._urls if u != url), capacity=self._capacity)

    def to_list(self) -> list[str]:
        return list(self._urls)
