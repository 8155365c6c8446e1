"""Typed records for remote index payloads and pending updates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DescriptorSections(BaseModel):
    """Free-text content blocks shown on the theme detail view."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    description: str = ""
    installation: str = ""
    changelog: str = ""

    @field_validator("description", "installation", "changelog", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class RemoteDescriptor(BaseModel):
    """Package descriptor served at ``themes/<letter>/<slug>.json``."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, populate_by_name=True)

    slug: str
    name: str
    version: str = ""
    requires: str = ""
    tested: str = ""
    requires_php: str = ""
    tags_url: str = Field(default="", alias="tags")
    last_updated: str = ""
    screenshot_url: str = ""
    author: str = ""
    author_profile: str = ""
    donate_link: str = ""
    homepage: str = ""
    download_url: str = ""
    sections: DescriptorSections = Field(default_factory=DescriptorSections)

    @field_validator(
        "version",
        "requires",
        "tested",
        "requires_php",
        "tags_url",
        "last_updated",
        "screenshot_url",
        "author",
        "author_profile",
        "donate_link",
        "homepage",
        "download_url",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("sections", mode="before")
    @classmethod
    def _sections_mapping(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class ReleaseTag(BaseModel):
    """One entry of the tag listing."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, populate_by_name=True)

    name: str
    artifact_url: str = Field(alias="zipball_url")


@dataclass(frozen=True)
class UpdateRecord:
    """Pending update for one installed theme, held for a single pass."""

    slug: str
    new_version: str
    artifact_url: str
    homepage_url: str = ""
    requires: str = ""
    tested: str = ""
    requires_php: str = ""
    name: str = ""
    description: str = ""
    author: str = ""
    author_url: str = ""
    tags: tuple[str, ...] = ()
    template: str = ""
    screenshot: str = ""
    changelog: str = ""
    last_updated: str = ""


@dataclass(frozen=True)
class UpdateSummary:
    """Entry merged into the host's update state for one slug."""

    slug: str
    new_version: str
    url: str
    artifact_url: str
    requires: str
    requires_php: str

    def to_dict(self) -> dict[str, str]:
        return {
            "theme": self.slug,
            "new_version": self.new_version,
            "url": self.url,
            "package": self.artifact_url,
            "requires": self.requires,
            "requires_php": self.requires_php,
        }


@dataclass(frozen=True)
class DetailRecord:
    """Full metadata for the theme information view."""

    name: str
    slug: str
    version: str
    tested: str
    requires: str
    requires_php: str
    author: str
    author_profile: str
    donate_link: str
    homepage: str
    download_link: str
    last_updated: str
    screenshot_url: str
    sections: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "slug": self.slug,
            "version": self.version,
            "tested": self.tested,
            "requires": self.requires,
            "requires_php": self.requires_php,
            "author": self.author,
            "author_profile": self.author_profile,
            "donate_link": self.donate_link,
            "homepage": self.homepage,
            "download_link": self.download_link,
            "trunk": self.download_link,
            "last_updated": self.last_updated,
            "screenshot_url": self.screenshot_url,
            "sections": dict(self.sections),
        }


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
