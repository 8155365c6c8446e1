"""themeupdater: resolve theme updates against a remote package index."""

from themeupdater.cache import CacheStore, FileCacheStore, InMemoryCacheStore
from themeupdater.config import UpdaterConfig, load_config
from themeupdater.exceptions import (
    MalformedDataError,
    NoReleasesFoundError,
    NotFoundError,
    RenameFailedError,
    TransportError,
    UpdaterError,
)
from themeupdater.fixup import SourceDirectoryFixup
from themeupdater.hooks import UpdaterHooks, UpdateState, force_check_requested
from themeupdater.index_client import LatestRelease, RemoteIndexClient
from themeupdater.models import (
    DetailRecord,
    ReleaseTag,
    RemoteDescriptor,
    UpdateRecord,
    UpdateSummary,
)
from themeupdater.packages import (
    InstalledPackage,
    PackageSource,
    StaticPackageSource,
    ThemeDirectorySource,
    ThemePackage,
)
from themeupdater.registry import UpdateRegistry
from themeupdater.resolver import UpdateResolver
from themeupdater.versioning import Ordering, compare, normalize

__all__ = [
    "CacheStore",
    "DetailRecord",
    "FileCacheStore",
    "InMemoryCacheStore",
    "InstalledPackage",
    "LatestRelease",
    "MalformedDataError",
    "NoReleasesFoundError",
    "NotFoundError",
    "Ordering",
    "PackageSource",
    "ReleaseTag",
    "RemoteDescriptor",
    "RemoteIndexClient",
    "RenameFailedError",
    "SourceDirectoryFixup",
    "StaticPackageSource",
    "ThemeDirectorySource",
    "ThemePackage",
    "TransportError",
    "UpdateRecord",
    "UpdateRegistry",
    "UpdateResolver",
    "UpdateState",
    "UpdateSummary",
    "UpdaterConfig",
    "UpdaterError",
    "UpdaterHooks",
    "compare",
    "force_check_requested",
    "load_config",
    "normalize",
]
