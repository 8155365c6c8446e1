"""Resolution pass: compare installed themes with the remote index."""

from __future__ import annotations

import logging

from themeupdater.cache import CacheStore
from themeupdater.config import UpdaterConfig
from themeupdater.index_client import RemoteIndexClient
from themeupdater.models import UpdateRecord, utc_now_iso
from themeupdater.packages import InstalledPackage, PackageSource
from themeupdater.registry import UpdateRegistry
from themeupdater.versioning import is_newer

logger = logging.getLogger(__name__)


class UpdateResolver:
    """Build the set of pending theme updates.

    Constructing a resolver has no side effects; call :meth:`run` to perform a
    pass. A pass only writes cache entries and repopulates :attr:`registry`.
    """

    def __init__(
        self,
        config: UpdaterConfig,
        cache: CacheStore,
        packages: PackageSource,
        *,
        index_client: RemoteIndexClient | None = None,
        registry: UpdateRegistry | None = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.packages = packages
        self.index_client = index_client or RemoteIndexClient(config, cache)
        self.registry = registry or UpdateRegistry(self.index_client)

    def run(self, *, force_invalidate: bool = False) -> UpdateRegistry:
        """Run one pass over installed themes and return the populated registry."""
        if force_invalidate:
            self.invalidate_all()
        self.registry.clear()
        for package in self.packages.installed_packages():
            record = self.check_package(package)
            if record is not None:
                self.registry.store(record)
        return self.registry

    def check_package(self, package: InstalledPackage) -> UpdateRecord | None:
        """Return an update record when the index has a newer release."""
        slug = package.slug
        descriptor = self.index_client.fetch_descriptor(slug)
        if descriptor is None:
            return None
        installed_version = package.installed_version
        if not installed_version:
            logger.debug("skipping %s: no installed version", slug)
            return None
        latest = self.index_client.resolve_latest_version(slug)
        if latest is None:
            return None
        if not is_newer(installed_version, latest.version):
            logger.debug("%s is up to date at %s", slug, installed_version)
            return None

        logger.info(
            "theme update available for %s: %s -> %s", slug, installed_version, latest.version
        )
        return UpdateRecord(
            slug=slug,
            new_version=latest.version,
            artifact_url=latest.artifact_url,
            homepage_url=package.homepage_url,
            requires=descriptor.requires,
            tested=descriptor.tested,
            requires_php=descriptor.requires_php,
            name=package.display_name,
            description=package.description,
            author=package.author,
            author_url=package.author_url,
            tags=tuple(package.tags),
            template=package.template_slug,
            screenshot=descriptor.screenshot_url,
            changelog=descriptor.sections.changelog,
            last_updated=descriptor.last_updated or utc_now_iso(),
        )

    def invalidate_all(self) -> int:
        """Delete every cache entry under the configured namespace."""
        removed = self.cache.delete_by_prefix(self.config.cache_namespace)
        logger.info("deleted %d theme update cache entries", removed)
        return removed

    def clean_after_update(self, slug: str) -> None:
        """Forget cached state for a theme whose update just completed."""
        if not self.config.cache_enabled:
            return
        self.index_client.forget(slug)
        logger.debug("cleared cached update state for %s", slug)
