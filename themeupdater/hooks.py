"""Adapter translating host lifecycle events into resolver calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from themeupdater.fixup import SourceDirectoryFixup
from themeupdater.models import DetailRecord, UpdateSummary
from themeupdater.resolver import UpdateResolver

THEME_INFORMATION_ACTION = "theme_information"


@dataclass
class UpdateState:
    """Host-side update state: versions checked and updates offered."""

    checked: dict[str, str] = field(default_factory=dict)
    response: dict[str, UpdateSummary] = field(default_factory=dict)


def force_check_requested(params: Mapping[str, Any], page: str) -> bool:
    """True for ``force-check=1`` on the update administration page."""
    return str(params.get("force-check", "")) == "1" and str(params.get("page", "")) == page


class UpdaterHooks:
    """Callbacks the host invokes; nothing registers itself implicitly."""

    def __init__(self, resolver: UpdateResolver, fixup: SourceDirectoryFixup | None = None) -> None:
        self.resolver = resolver
        self.fixup = fixup or SourceDirectoryFixup()

    def start(self, request_params: Mapping[str, Any] | None = None) -> None:
        """Run the initial resolution pass, forcing a refresh when requested."""
        force = force_check_requested(request_params or {}, self.resolver.config.force_check_page)
        self.resolver.run(force_invalidate=force)

    def on_update_query(self, state: UpdateState | None) -> UpdateState:
        """Merge pending updates into the host's update state."""
        if state is None:
            state = UpdateState()
        if not state.checked:
            state.checked = {
                package.slug: package.installed_version
                for package in self.resolver.packages.installed_packages()
            }
        state.response.update(self.resolver.registry.has_updates(state.checked))
        return state

    def on_theme_information(self, action: str, slug: str | None) -> DetailRecord | None:
        if action != THEME_INFORMATION_ACTION or not slug:
            return None
        return self.resolver.registry.get_detail(slug)

    def on_upgrade_complete(self, options: Mapping[str, Any]) -> None:
        """Clear cached state for themes the host just updated."""
        if options.get("action") != "update" or options.get("type") != "theme":
            return
        for slug in options.get("themes", []) or []:
            self.resolver.clean_after_update(str(slug))

    def on_source_selection(
        self,
        source: str | Path,
        remote_source: str | Path,
        args: Mapping[str, Any],
    ) -> str | Path:
        """Fix the extracted directory name for theme updates; pass others through.

        Raises:
            RenameFailedError: propagated so the host aborts this update.
        """
        slug = args.get("theme")
        if not slug:
            return source
        return self.fixup.fix(source, remote_source, str(slug))
