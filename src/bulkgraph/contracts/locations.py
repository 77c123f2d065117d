# src/bulkgraph/contracts/locations.py
"""Opaque resource locators for graph input, output and staged artifacts.

A Location is NOT assumed to be a filesystem path. It is a scheme plus a
path, and only the storage boundary decides whether it can handle a
given scheme (see DistributedStorage.supports()). Bare paths without a
scheme are treated as ``file`` locations.

Usage:
    loc = Location.parse("hdfs://namenode/graphs/output")
    intermediate = loc.child("~g")
    # str(intermediate) == "hdfs://namenode/graphs/output/~g"
"""

from dataclasses import dataclass
from urllib.parse import urlparse

DEFAULT_SCHEME = "file"


@dataclass(frozen=True, slots=True)
class Location:
    """Scheme-qualified resource locator.

    Attributes:
        scheme: Storage scheme (e.g. "file", "hdfs", "s3")
        authority: Host/bucket portion, empty for local files
        path: Slash-separated path, without trailing slash
    """

    scheme: str
    authority: str
    path: str

    @classmethod
    def parse(cls, raw: "str | Location") -> "Location":
        """Parse a raw locator string.

        Windows drive letters are not special-cased; callers on such
        systems should pass ``file:///C:/...`` explicitly.

        Raises:
            ValueError: If raw is empty
        """
        if isinstance(raw, Location):
            return raw
        if not raw or not raw.strip():
            raise ValueError("Location must be a non-empty string")

        parsed = urlparse(raw)
        if not parsed.scheme:
            return cls(scheme=DEFAULT_SCHEME, authority="", path=_normalize(raw))
        return cls(scheme=parsed.scheme.lower(), authority=parsed.netloc, path=_normalize(parsed.path))

    def child(self, name: str) -> "Location":
        """Return the location of a direct child named ``name``."""
        if not name or "/" in name:
            raise ValueError(f"Child name must be a single non-empty segment, got {name!r}")
        base = self.path.rstrip("/")
        return Location(scheme=self.scheme, authority=self.authority, path=f"{base}/{name}")

    @property
    def name(self) -> str:
        """Last path segment."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    def __str__(self) -> str:
        if self.scheme == DEFAULT_SCHEME and not self.authority:
            return self.path
        return f"{self.scheme}://{self.authority}{self.path}"


def _normalize(path: str) -> str:
    if len(path) > 1:
        path = path.rstrip("/")
    return path
