"""In-memory table of pending updates and the queries served from it."""

from __future__ import annotations

import logging
from typing import Mapping

from themeupdater.index_client import RemoteIndexClient
from themeupdater.models import DetailRecord, UpdateRecord, UpdateSummary, utc_now_iso
from themeupdater.versioning import is_newer

logger = logging.getLogger(__name__)


class UpdateRegistry:
    """Pending updates keyed by slug, rebuilt on every resolution pass."""

    def __init__(self, index_client: RemoteIndexClient) -> None:
        self.index_client = index_client
        self._records: dict[str, UpdateRecord] = {}

    def clear(self) -> None:
        self._records.clear()

    def store(self, record: UpdateRecord) -> None:
        self._records[record.slug] = record

    def get(self, slug: str) -> UpdateRecord | None:
        return self._records.get(slug)

    @property
    def records(self) -> dict[str, UpdateRecord]:
        return dict(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, slug: object) -> bool:
        return slug in self._records

    def has_updates(self, installed_versions: Mapping[str, str]) -> dict[str, UpdateSummary]:
        """Summaries for slugs whose supplied version is still behind the record.

        Versions are re-checked against the caller's map, so a slug that was
        updated since the pass is not reported again.
        """
        summaries: dict[str, UpdateSummary] = {}
        for slug, record in self._records.items():
            current = installed_versions.get(slug)
            if not current or not record.new_version:
                continue
            if not is_newer(current, record.new_version):
                continue
            summaries[slug] = UpdateSummary(
                slug=slug,
                new_version=record.new_version,
                url=record.homepage_url,
                artifact_url=record.artifact_url,
                requires=record.requires,
                requires_php=record.requires_php,
            )
            logger.debug("reporting update for %s: %s -> %s", slug, current, record.new_version)
        return summaries

    def get_detail(self, slug: str) -> DetailRecord | None:
        """Detail view for one slug, read from the descriptor rather than the table."""
        descriptor = self.index_client.fetch_descriptor(slug)
        if descriptor is None:
            return None
        return DetailRecord(
            name=descriptor.name,
            slug=descriptor.slug,
            version=descriptor.version,
            tested=descriptor.tested,
            requires=descriptor.requires,
            requires_php=descriptor.requires_php,
            author=descriptor.author,
            author_profile=descriptor.author_profile,
            donate_link=descriptor.donate_link,
            homepage=descriptor.homepage,
            download_link=descriptor.download_url,
            last_updated=descriptor.last_updated or utc_now_iso(),
            screenshot_url=descriptor.screenshot_url,
            sections={
                "description": descriptor.sections.description,
                "installation": descriptor.sections.installation,
                "changelog": descriptor.sections.changelog,
            },
        )
