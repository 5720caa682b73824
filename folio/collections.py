from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from .content import Post


class PostCollection(Sequence[Post]):
    """Lightweight helper for working with lists of Posts."""

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PostCollection(self._posts[item])
        return self._posts[item]

    def with_tag(self, tag: str) -> PostCollection:
        return PostCollection(p for p in self._posts if tag in p.tags)

    def drafts(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.draft)

    def published(self) -> PostCollection:
        return PostCollection(p for p in self._posts if not p.draft)

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort posts by date.

        When reverse=True (the default) the newest post comes first. Posts
        sharing a date keep source path order in both directions.

        Args:
            reverse: If True (default), newest first. If False, oldest first.

        Returns:
            A new PostCollection with sorted posts.
        """
        sign = -1 if reverse else 1
        by_path = sorted(self._posts, key=lambda p: p.path.as_posix())
        # sorted() is stable, so equal dates stay in path order
        return PostCollection(sorted(by_path, key=lambda p: sign * p.date.toordinal()))

    def latest(self, count: int = 5) -> PostCollection:
        return self.sorted()[:count]

    def by_year(self) -> dict[int, PostCollection]:
        """Group posts by year, newest year first, newest post first."""
        years: dict[int, list[Post]] = {}
        for post in self.sorted():
            years.setdefault(post.year, []).append(post)
        return {year: PostCollection(posts) for year, posts in years.items()}

    def tags(self) -> TagCollection:
        return TagCollection(build_tags_index(self.sorted()))

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"


class TagCollection(Mapping[str, PostCollection]):
    """Mapping of tag name to PostCollection with convenience helpers."""

    def __init__(self, mapping: dict[str, Iterable[Post]]):
        self._mapping = {k: PostCollection(v) for k, v in mapping.items()}

    def __getitem__(self, key: str) -> PostCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def most_used(self) -> list[tuple[str, int]]:
        """Return (tag, count) pairs, most used first, then by name."""
        counts = [(tag, len(posts)) for tag, posts in self._mapping.items()]
        return sorted(counts, key=lambda item: (-item[1], item[0]))

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagCollection({len(self._mapping)} tags)"


def build_tags_index(posts: Iterable[Post]) -> dict[str, list[Post]]:
    """Build an index mapping tags to the posts carrying them."""
    tags: dict[str, list[Post]] = {}
    for post in posts:
        for tag in post.tags:
            tags.setdefault(tag, []).append(post)
    return tags
