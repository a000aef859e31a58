"""Tests for the generated cache models."""

import pytest

from devspace_cache.exceptions import ProfileNotFoundError
from devspace_cache.models import (
    DeploymentCache,
    GeneratedCache,
    ImageCache,
    LastContext,
    ProfileCache,
)


def test_new_cache_is_empty():
    cache = GeneratedCache()

    assert cache.override_profile is None
    assert cache.active_profile == ""
    assert cache.vars == {}
    assert cache.profiles == {}


def test_validates_camel_case_keys():
    cache = GeneratedCache.model_validate(
        {
            "lastOverrideProfile": "dev",
            "activeProfile": "default",
            "profiles": {
                "default": {
                    "images": {"web": {"imageConfigHash": "h1", "customFilesHash": "h2"}},
                    "deployments": {"api": {"kubectlManifestsHash": "m1"}},
                    "lastContext": {"namespace": "ns", "context": "ctx"},
                }
            },
        }
    )

    profile = cache.profiles["default"]
    assert cache.override_profile == "dev"
    assert cache.active_profile == "default"
    assert profile.images["web"].image_config_hash == "h1"
    assert profile.images["web"].custom_files_hash == "h2"
    assert profile.deployments["api"].kubectl_manifests_hash == "m1"
    assert profile.last_context == LastContext(namespace="ns", context="ctx")


def test_null_mappings_become_empty():
    cache = GeneratedCache.model_validate(
        {
            "activeProfile": None,
            "vars": None,
            "profiles": {
                "default": None,
                "staging": {"images": None, "deployments": {"api": None}, "dependencies": None},
            },
        }
    )

    assert cache.active_profile == ""
    assert cache.vars == {}
    assert cache.profiles["default"] == ProfileCache()
    staging = cache.profiles["staging"]
    assert staging.images == {}
    assert staging.deployments == {"api": DeploymentCache()}
    assert staging.dependencies == {}


def test_null_text_fields_become_empty():
    profile = ProfileCache.model_validate(
        {
            "images": {"web": {"tag": None, "imageName": "web"}},
            "deployments": {"api": {"helmChartHash": None}},
            "dependencies": {"db": None},
            "lastContext": {"namespace": None, "context": "kind-dev"},
        }
    )

    assert profile.images["web"] == ImageCache(image_name="web")
    assert profile.deployments["api"] == DeploymentCache()
    assert profile.dependencies == {"db": ""}
    assert profile.last_context == LastContext(context="kind-dev")


def test_null_override_profile_stays_unset():
    cache = GeneratedCache.model_validate({"lastOverrideProfile": None, "activeProfile": None})

    assert cache.override_profile is None
    assert cache.active_profile == ""


def test_unknown_keys_are_ignored():
    cache = GeneratedCache.model_validate({"activeProfile": "default", "somethingNew": {"a": 1}})

    assert cache.active_profile == "default"


def test_ensure_profile_creates_missing_entry():
    cache = GeneratedCache()

    profile = cache.ensure_profile("staging")

    assert cache.profiles["staging"] is profile
    assert profile.images == {}
    assert profile.deployments == {}
    assert profile.dependencies == {}


def test_ensure_profile_backfills_missing_mappings():
    cache = GeneratedCache()
    partial = ProfileCache()
    partial.images = None
    partial.deployments = None
    partial.dependencies = None
    cache.profiles["default"] = partial

    profile = cache.ensure_profile("default")

    assert profile is partial
    assert profile.images == {}
    assert profile.deployments == {}
    assert profile.dependencies == {}


def test_ensure_profile_is_idempotent():
    cache = GeneratedCache()
    first = cache.ensure_profile("default")
    first.get_or_create_image("web").tag = "v1"
    snapshot = cache.model_copy(deep=True)

    second = cache.ensure_profile("default")

    assert second is first
    assert cache == snapshot


def test_get_active_prefers_override():
    cache = GeneratedCache(active_profile="default", override_profile="staging")

    active = cache.get_active()

    assert cache.active_profile_name == "staging"
    assert cache.profiles["staging"] is active
    assert "default" not in cache.profiles


def test_get_active_uses_persisted_profile_without_override():
    cache = GeneratedCache(active_profile="default")

    assert cache.get_active() is cache.profiles["default"]


def test_get_active_returns_live_object():
    cache = GeneratedCache(active_profile="default")

    cache.get_active().dependencies["db"] = "2.0"

    assert cache.profiles["default"].dependencies == {"db": "2.0"}


def test_get_or_create_image_returns_same_entry():
    profile = ProfileCache()

    first = profile.get_or_create_image("web")
    second = profile.get_or_create_image("web")

    assert first is second
    assert first == ImageCache()


def test_get_or_create_image_mutates_in_place():
    profile = ProfileCache()

    profile.get_or_create_image("web").dockerfile_hash = "d1"

    assert profile.images["web"].dockerfile_hash == "d1"


def test_get_or_create_deployment_keeps_existing_entry():
    profile = ProfileCache(deployments={"api": DeploymentCache(helm_chart_hash="c1")})

    entry = profile.get_or_create_deployment("api")

    assert entry.helm_chart_hash == "c1"
    assert profile.get_or_create_deployment("worker") == DeploymentCache()
    assert set(profile.deployments) == {"api", "worker"}


def test_remove_profile():
    cache = GeneratedCache()
    staging = cache.ensure_profile("staging")

    assert cache.remove_profile("staging") is staging
    assert cache.profiles == {}


def test_remove_missing_profile_raises():
    cache = GeneratedCache()
    cache.ensure_profile("default")

    with pytest.raises(ProfileNotFoundError, match="Available profiles: default"):
        cache.remove_profile("prod")


def test_dump_omits_empty_fields():
    cache = GeneratedCache(active_profile="default")
    profile = cache.ensure_profile("default")
    profile.get_or_create_image("web").tag = "v1"

    data = cache.model_dump(mode="json", by_alias=True)

    assert data == {
        "activeProfile": "default",
        "profiles": {"default": {"images": {"web": {"tag": "v1"}}}},
    }


def test_dump_keeps_empty_map_entries():
    cache = GeneratedCache(vars={"EMPTY": ""})
    cache.ensure_profile("default")

    data = cache.model_dump(mode="json", by_alias=True)

    assert data == {"vars": {"EMPTY": ""}, "profiles": {"default": {}}}


def test_dump_keeps_empty_last_context():
    profile = ProfileCache(last_context=LastContext())

    data = profile.model_dump(mode="json", by_alias=True)

    assert data == {"lastContext": {}}
    assert ProfileCache.model_validate(data) == profile
