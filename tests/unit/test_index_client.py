"""Unit tests for the two-stage remote index client."""

from __future__ import annotations

import httpx

from tests.fakes import (
    INDEX_BASE,
    FakeClock,
    FakeIndex,
    descriptor_url,
    tags_api_url,
    zipball_url,
)
from themeupdater.cache import InMemoryCacheStore
from themeupdater.config import UpdaterConfig
from themeupdater.index_client import MAX_REDIRECTS, LatestRelease, RemoteIndexClient


def test_fetch_descriptor_requests_letter_bucketed_url(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.add_theme("Mytheme", ["1.0.0"])
    descriptor = index_client.fetch_descriptor("Mytheme")
    assert descriptor is not None
    assert descriptor.slug == "Mytheme"
    assert fake_index.urls == [f"{INDEX_BASE}themes/m/Mytheme.json"]
    request = fake_index.requests[0]
    assert request.headers["accept"] == "application/json"


def test_fetch_descriptor_is_cached(index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    first = index_client.fetch_descriptor("aurora")
    second = index_client.fetch_descriptor("aurora")
    assert first == second
    assert len(fake_index.requests) == 1
    assert cache.get("themeupdater_updates_theme_aurora")["slug"] == "aurora"


def test_fetch_descriptor_refetches_after_ttl(index_client: RemoteIndexClient, fake_index: FakeIndex, clock: FakeClock) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    index_client.fetch_descriptor("aurora")
    clock.advance(86400)
    index_client.fetch_descriptor("aurora")
    assert len(fake_index.requests) == 2


def test_fetch_descriptor_404_returns_none_without_caching(
    index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore
) -> None:
    fake_index.set_raw(descriptor_url("ghost"), 404)
    assert index_client.fetch_descriptor("ghost") is None
    assert cache.keys() == []


def test_fetch_descriptor_empty_body_returns_none(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.set_raw(descriptor_url("blank"), 200, b"  ")
    assert index_client.fetch_descriptor("blank") is None


def test_fetch_descriptor_transport_error_returns_none(
    index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore
) -> None:
    fake_index.set_error(descriptor_url("slow"), httpx.ReadTimeout)
    assert index_client.fetch_descriptor("slow") is None
    assert cache.keys() == []


def test_fetch_descriptor_rejects_invalid_json_and_missing_fields(
    index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore
) -> None:
    fake_index.set_raw(descriptor_url("broken"), 200, b"{not json")
    fake_index.set_json(descriptor_url("partial"), {"slug": "partial"})
    fake_index.set_json(descriptor_url("listy"), ["not", "an", "object"])
    assert index_client.fetch_descriptor("broken") is None
    assert index_client.fetch_descriptor("partial") is None
    assert index_client.fetch_descriptor("listy") is None
    assert cache.keys() == []


def test_fetch_descriptor_empty_slug_makes_no_request(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    assert index_client.fetch_descriptor("") is None
    assert fake_index.requests == []


def test_resolve_latest_version_selects_highest_numeric_tag(
    index_client: RemoteIndexClient, fake_index: FakeIndex
) -> None:
    fake_index.add_theme("aurora", ["1.0.0", "1.10.0", "1.9.0"])
    latest = index_client.resolve_latest_version("aurora")
    assert latest == LatestRelease(version="1.10.0", artifact_url=zipball_url("aurora", "1.10.0"))
    assert fake_index.urls == [descriptor_url("aurora"), tags_api_url("aurora")]


def test_resolve_latest_version_strips_v_prefix(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.add_theme("aurora", ["v2.9", "v2.10", "v2.2"])
    latest = index_client.resolve_latest_version("aurora")
    assert latest is not None
    assert latest.version == "2.10"
    assert latest.artifact_url == zipball_url("aurora", "v2.10")


def test_resolve_latest_version_is_idempotent_within_ttl(
    index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore
) -> None:
    fake_index.add_theme("aurora", ["1.0.0", "1.2.0"])
    first = index_client.resolve_latest_version("aurora")
    second = index_client.resolve_latest_version("aurora")
    assert first == second
    assert len(fake_index.requests) == 2
    assert cache.get("themeupdater_updates_theme_remote-version-aurora") == "1.2.0"
    assert cache.get("themeupdater_updates_theme_download-url-aurora") == zipball_url("aurora", "1.2.0")


def test_resolve_latest_version_reuses_cached_descriptor(
    index_client: RemoteIndexClient, fake_index: FakeIndex
) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    index_client.fetch_descriptor("aurora")
    index_client.resolve_latest_version("aurora")
    assert fake_index.urls == [descriptor_url("aurora"), tags_api_url("aurora")]


def test_resolve_latest_version_empty_tag_list_writes_nothing(
    index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore
) -> None:
    fake_index.add_theme("aurora", [])
    assert index_client.resolve_latest_version("aurora") is None
    assert cache.get("themeupdater_updates_theme_remote-version-aurora") is None
    assert cache.get("themeupdater_updates_theme_download-url-aurora") is None


def test_resolve_latest_version_non_list_tag_payload(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    fake_index.set_json(tags_api_url("aurora"), {"message": "rate limited"})
    assert index_client.resolve_latest_version("aurora") is None


def test_resolve_latest_version_tag_endpoint_failure(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    fake_index.set_raw(tags_api_url("aurora"), 500, b"oops")
    assert index_client.resolve_latest_version("aurora") is None
    fake_index.set_error(tags_api_url("aurora"))
    assert index_client.resolve_latest_version("aurora") is None


def test_resolve_latest_version_without_tags_url(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.add_theme("aurora", ["1.0.0"], tags="")
    assert index_client.resolve_latest_version("aurora") is None
    assert fake_index.urls == [descriptor_url("aurora")]


def test_resolve_latest_version_malformed_tag_entry(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    fake_index.set_json(tags_api_url("aurora"), [{"name": "1.0.0"}])
    assert index_client.resolve_latest_version("aurora") is None


def test_disabled_cache_always_fetches(fake_index: FakeIndex, cache: InMemoryCacheStore) -> None:
    config = UpdaterConfig(index_base_url=INDEX_BASE, cache_enabled=False)
    client = RemoteIndexClient(config, cache, transport=fake_index.transport)
    fake_index.add_theme("aurora", ["1.0.0"])
    client.resolve_latest_version("aurora")
    client.resolve_latest_version("aurora")
    assert len(fake_index.requests) == 4
    assert cache.keys() == []


def test_forget_removes_all_entries_for_slug(
    index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore
) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    fake_index.add_theme("borealis", ["1.0.0"])
    index_client.resolve_latest_version("aurora")
    index_client.resolve_latest_version("borealis")
    index_client.forget("aurora")
    assert all("aurora" not in key for key in cache.keys())
    assert len(cache.keys()) == 3


def test_resolve_latest_version_refetches_when_artifact_url_evicted(
    index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore
) -> None:
    fake_index.add_theme("aurora", ["1.0.0", "2.0.0"])
    index_client.resolve_latest_version("aurora")
    cache.delete("themeupdater_updates_theme_download-url-aurora")

    latest = index_client.resolve_latest_version("aurora")

    assert latest == LatestRelease(version="2.0.0", artifact_url=zipball_url("aurora", "2.0.0"))
    assert fake_index.urls[-1] == tags_api_url("aurora")
    assert len(fake_index.requests) == 3
    assert cache.get("themeupdater_updates_theme_download-url-aurora") == zipball_url("aurora", "2.0.0")


def test_resolve_latest_version_ignores_empty_cached_artifact_url(
    index_client: RemoteIndexClient, fake_index: FakeIndex, cache: InMemoryCacheStore
) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    cache.set("themeupdater_updates_theme_remote-version-aurora", "1.0.0", 60)
    cache.set("themeupdater_updates_theme_download-url-aurora", "", 60)

    latest = index_client.resolve_latest_version("aurora")

    assert latest is not None
    assert latest.artifact_url == zipball_url("aurora", "1.0.0")
    assert tags_api_url("aurora") in fake_index.urls


def test_fetch_descriptor_follows_redirect(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.add_theme("aurora", ["1.0.0"])
    fake_index.set_redirect(descriptor_url("old-aurora"), descriptor_url("aurora"))

    descriptor = index_client.fetch_descriptor("old-aurora")

    assert descriptor is not None
    assert descriptor.slug == "aurora"
    assert fake_index.urls == [descriptor_url("old-aurora"), descriptor_url("aurora")]


def test_resolve_latest_version_follows_renamed_repository(
    index_client: RemoteIndexClient, fake_index: FakeIndex
) -> None:
    fake_index.add_theme("aurora", ["1.0.0", "2.0.0"])
    renamed = "https://api.github.com/repos/acme/aurora-theme/tags"
    fake_index.responses[renamed] = fake_index.responses.pop(tags_api_url("aurora"))
    fake_index.set_redirect(tags_api_url("aurora"), renamed, status=302)

    latest = index_client.resolve_latest_version("aurora")

    assert latest is not None
    assert latest.version == "2.0.0"
    assert fake_index.urls[-1] == renamed


def test_fetch_descriptor_redirect_loop_returns_none(index_client: RemoteIndexClient, fake_index: FakeIndex) -> None:
    fake_index.set_redirect(descriptor_url("aurora"), "https://index.test/loop")
    fake_index.set_redirect("https://index.test/loop", descriptor_url("aurora"))

    assert index_client.fetch_descriptor("aurora") is None
    assert 1 < len(fake_index.requests) <= MAX_REDIRECTS + 1
