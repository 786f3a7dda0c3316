"""
Tracked repository identifier.
"""

from dataclasses import dataclass

from reaper.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class Repository:
    """A project tracked on both CI providers."""

    owner: str
    name: str

    @classmethod
    def parse(cls, slug: str) -> "Repository":
        """Parse an ``owner/name`` identifier."""
        owner, sep, name = slug.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ConfigurationError(f"invalid repository {slug!r}, expected owner/name")
        return cls(owner=owner, name=name)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.slug
