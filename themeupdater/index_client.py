"""Two-stage client for the remote theme index.

A cold slug costs at most two requests: the package descriptor, then the tag
listing it points to. Each result is cached independently under the configured
namespace, so repeated resolutions inside the TTL window stay offline.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from themeupdater.cache import CacheStore
from themeupdater.config import UpdaterConfig
from themeupdater.exceptions import (
    MalformedDataError,
    NoReleasesFoundError,
    NotFoundError,
    TransportError,
    UpdaterError,
)
from themeupdater.models import ReleaseTag, RemoteDescriptor
from themeupdater.releases import descriptor_url, newest_release_tag, normalize_tag_url

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5


@dataclass(frozen=True)
class LatestRelease:
    """Resolved newest release for one slug."""

    version: str
    artifact_url: str


class CacheKeys:
    """Cache key layout for one namespace."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace

    def descriptor(self, slug: str) -> str:
        return f"{self.namespace}{slug}"

    def remote_version(self, slug: str) -> str:
        return f"{self.namespace}remote-version-{slug}"

    def download_url(self, slug: str) -> str:
        return f"{self.namespace}download-url-{slug}"

    def for_slug(self, slug: str) -> tuple[str, str, str]:
        return (self.descriptor(slug), self.remote_version(slug), self.download_url(slug))


class RemoteIndexClient:
    """Fetch descriptors and newest releases with read-through caching."""

    def __init__(
        self,
        config: UpdaterConfig,
        cache: CacheStore,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.keys = CacheKeys(config.cache_namespace)
        self._transport = transport

    def fetch_descriptor(self, slug: str) -> RemoteDescriptor | None:
        """Return the descriptor for ``slug`` or None when it cannot be fetched."""
        if not slug:
            return None
        try:
            return self._descriptor(slug)
        except UpdaterError as exc:
            logger.warning("descriptor unavailable for %s: %s", slug, exc)
            return None

    def resolve_latest_version(self, slug: str) -> LatestRelease | None:
        """Return the newest release version and artifact URL for ``slug``."""
        if not slug:
            return None
        if self.config.cache_enabled:
            cached_version = self.cache.get(self.keys.remote_version(slug))
            cached_url = self.cache.get(self.keys.download_url(slug))
            if cached_version and cached_url:
                logger.debug("remote version cache hit for %s", slug)
                return LatestRelease(version=str(cached_version), artifact_url=str(cached_url))
            if cached_version:
                logger.debug("artifact url for %s missing from cache, re-resolving", slug)
        try:
            return self._resolve_from_tags(slug)
        except UpdaterError as exc:
            logger.warning("latest version unavailable for %s: %s", slug, exc)
            return None

    def forget(self, slug: str) -> None:
        """Drop the descriptor, version and artifact URL entries for one slug."""
        for key in self.keys.for_slug(slug):
            self.cache.delete(key)

    def _descriptor(self, slug: str) -> RemoteDescriptor:
        key = self.keys.descriptor(slug)
        if self.config.cache_enabled:
            cached = self.cache.get(key)
            if isinstance(cached, dict):
                logger.debug("descriptor cache hit for %s", slug)
                return _parse_descriptor(cached)
        logger.debug("fetching descriptor for %s", slug)
        payload = self._get_json(descriptor_url(self.config.index_base_url, slug))
        descriptor = _parse_descriptor(payload)
        if self.config.cache_enabled:
            self.cache.set(key, payload, self.config.default_ttl_seconds)
        return descriptor

    def _resolve_from_tags(self, slug: str) -> LatestRelease:
        descriptor = self._descriptor(slug)
        if not descriptor.tags_url:
            raise MalformedDataError(f"descriptor for {slug} has no tags url")
        payload = self._get_json(normalize_tag_url(descriptor.tags_url))
        if not isinstance(payload, list) or not payload:
            raise NoReleasesFoundError(f"no release tags listed for {slug}")
        try:
            tags = [ReleaseTag.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise MalformedDataError(f"invalid tag listing for {slug}") from exc
        newest = newest_release_tag(tags)
        version = newest.name.lstrip("v") if newest is not None else ""
        if newest is None or not version:
            raise NoReleasesFoundError(f"no usable release version for {slug}")
        if self.config.cache_enabled:
            ttl = self.config.default_ttl_seconds
            self.cache.set(self.keys.download_url(slug), newest.artifact_url, ttl)
            self.cache.set(self.keys.remote_version(slug), version, ttl)
        return LatestRelease(version=version, artifact_url=newest.artifact_url)

    def _get_json(self, url: str) -> Any:
        try:
            with httpx.Client(
                timeout=self.config.request_timeout_seconds,
                transport=self._transport,
                headers={"Accept": "application/json"},
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
            ) as client:
                response = client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {url}") from exc
        if response.status_code != 200:
            raise NotFoundError(f"unexpected status {response.status_code}: {url}")
        if not response.content.strip():
            raise NotFoundError(f"empty response body: {url}")
        try:
            return json.loads(response.content)
        except ValueError as exc:
            raise MalformedDataError(f"invalid JSON: {url}") from exc


def _parse_descriptor(payload: Any) -> RemoteDescriptor:
    if not isinstance(payload, dict):
        raise MalformedDataError("descriptor payload must be an object")
    try:
        return RemoteDescriptor.model_validate(payload)
    except ValidationError as exc:
        raise MalformedDataError(f"invalid descriptor: {exc.error_count()} error(s)") from exc
