"""Read-only view of installed themes."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

_HEADER_FIELDS = {
    "Theme Name": "display_name",
    "Theme URI": "homepage_url",
    "Description": "description",
    "Author": "author",
    "Author URI": "author_url",
    "Version": "installed_version",
    "Tags": "tags",
    "Template": "template_slug",
}
_HEADER_RE = re.compile(
    r"^[ \t/*#@]*(" + "|".join(re.escape(name) for name in _HEADER_FIELDS) + r"):(.*)$",
    re.MULTILINE | re.IGNORECASE,
)
# headers live in the leading comment block
_HEADER_BYTES = 8192


@runtime_checkable
class InstalledPackage(Protocol):
    """What the resolver needs to know about one installed theme."""

    @property
    def slug(self) -> str: ...

    @property
    def installed_version(self) -> str: ...

    @property
    def display_name(self) -> str: ...

    @property
    def homepage_url(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def author(self) -> str: ...

    @property
    def author_url(self) -> str: ...

    @property
    def tags(self) -> tuple[str, ...]: ...

    @property
    def template_slug(self) -> str: ...


class PackageSource(Protocol):
    """Enumerates installed themes."""

    def installed_packages(self) -> list[InstalledPackage]: ...


@dataclass(frozen=True)
class ThemePackage:
    """Concrete installed theme."""

    slug: str
    installed_version: str = ""
    display_name: str = ""
    homepage_url: str = ""
    description: str = ""
    author: str = ""
    author_url: str = ""
    tags: tuple[str, ...] = ()
    template_slug: str = ""


class StaticPackageSource:
    """Package source backed by a fixed list."""

    def __init__(self, packages: Iterable[InstalledPackage]) -> None:
        self._packages = list(packages)

    def installed_packages(self) -> list[InstalledPackage]:
        return list(self._packages)


class ThemeDirectorySource:
    """Discover themes from ``<themes_dir>/<slug>/style.css`` headers."""

    def __init__(self, themes_dir: Path) -> None:
        self.themes_dir = themes_dir

    def installed_packages(self) -> list[InstalledPackage]:
        if not self.themes_dir.is_dir():
            return []
        packages: list[InstalledPackage] = []
        for theme_dir in sorted(self.themes_dir.iterdir()):
            if not theme_dir.is_dir():
                continue
            package = self._read_theme(theme_dir)
            if package is not None:
                packages.append(package)
        return packages

    def _read_theme(self, theme_dir: Path) -> ThemePackage | None:
        stylesheet = theme_dir / "style.css"
        if not stylesheet.is_file():
            return None
        try:
            with stylesheet.open("r", encoding="utf-8", errors="replace") as handle:
                header = handle.read(_HEADER_BYTES)
        except OSError as exc:
            logger.warning("cannot read %s: %s", stylesheet, exc)
            return None
        values = parse_stylesheet_header(header)
        if not values.get("display_name"):
            return None
        slug = theme_dir.name
        tags = tuple(tag.strip() for tag in values.get("tags", "").split(",") if tag.strip())
        return ThemePackage(
            slug=slug,
            installed_version=values.get("installed_version", ""),
            display_name=values["display_name"],
            homepage_url=values.get("homepage_url", ""),
            description=values.get("description", ""),
            author=values.get("author", ""),
            author_url=values.get("author_url", ""),
            tags=tags,
            template_slug=values.get("template_slug") or slug,
        )


def parse_stylesheet_header(text: str) -> dict[str, str]:
    """Extract theme header fields keyed by ThemePackage attribute name."""
    lookup = {name.lower(): attr for name, attr in _HEADER_FIELDS.items()}
    values: dict[str, str] = {}
    for match in _HEADER_RE.finditer(text):
        attr = lookup[match.group(1).lower()]
        value = match.group(2).strip()
        if value.endswith("*/"):
            value = value[:-2].strip()
        if attr not in values and value:
            values[attr] = value
    return values
