"""Helpers for locating descriptors and picking the newest release tag."""

from __future__ import annotations

import re
import urllib.parse
from typing import Sequence

from themeupdater.models import ReleaseTag
from themeupdater.versioning import Ordering, compare, normalize

_URI_TEMPLATE_RE = re.compile(r"\{[^}]*\}")
_GITHUB_HOSTS = {"github.com", "www.github.com"}


def descriptor_url(base_url: str, slug: str) -> str:
    """Return ``<base>themes/<first letter>/<slug>.json`` for a slug."""
    first_letter = slug[:1].lower()
    base = base_url if base_url.endswith("/") else f"{base_url}/"
    return f"{base}themes/{first_letter}/{slug}.json"


def normalize_tag_url(url: str) -> str:
    """Turn the descriptor's ``tags`` pointer into a fetchable endpoint.

    URI-template segments like ``{/sha}`` are dropped and plain GitHub
    repository links are mapped onto the tags API.
    """
    cleaned = _URI_TEMPLATE_RE.sub("", url.strip()).rstrip("/")
    parsed = urllib.parse.urlparse(cleaned)
    if parsed.hostname in _GITHUB_HOSTS:
        parts = [part for part in parsed.path.split("/") if part]
        if len(parts) >= 2:
            owner, repo = parts[0], parts[1].removesuffix(".git")
            return f"https://api.github.com/repos/{owner}/{repo}/tags"
    return cleaned


def newest_release_tag(tags: Sequence[ReleaseTag]) -> ReleaseTag | None:
    """Return the tag with the highest normalized version; first wins ties."""
    newest: ReleaseTag | None = None
    for tag in tags:
        if newest is None or compare(normalize(tag.name), normalize(newest.name)) is Ordering.GREATER:
            newest = tag
    return newest
