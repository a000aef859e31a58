"""Pydantic models for the generated cache file (.devspace/generated.yaml).

The file is written by the tool itself but stays hand-editable, so the models
are lenient on input:

- ``null`` mappings and ``null`` entries validate to empty containers
- ``null`` text fields validate to ``""``
- unknown keys are ignored

Scalars arrive as the text written in the file (see
:func:`devspace_cache.store.parse_generated_cache`), so ``1.10`` or ``yes``
are kept verbatim.

On output, fields holding an empty string, ``None`` or an empty mapping are
omitted so the file only contains what was actually recorded. A nested record
that is set, such as an empty ``lastContext``, is always written.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from devspace_cache.exceptions import ProfileNotFoundError


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, dict) and not value)


def _text_mapping(value: Any) -> Any:
    if value is None:
        return {}
    if isinstance(value, dict):
        return {str(key): "" if item is None else item for key, item in value.items()}
    return value


class _CacheModel(BaseModel):
    """Common configuration for every model stored in the cache file."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_text_is_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and cls.model_fields[info.field_name].annotation is str:
            return ""
        return value

    @model_serializer(mode="wrap")
    def omit_empty_fields(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        records = set()
        for name, field in type(self).model_fields.items():
            if isinstance(getattr(self, name), BaseModel):
                records.update((name, field.alias or name))
        return {key: value for key, value in data.items() if key in records or not _is_empty(value)}


class LastContext(_CacheModel):
    """Kubernetes context and namespace used by the previous run."""

    namespace: str = ""
    context: str = ""


class ImageCache(_CacheModel):
    """Inputs that determined the last build of an image."""

    image_config_hash: str = ""

    dockerfile_hash: str = ""
    context_hash: str = ""
    entrypoint_hash: str = ""

    custom_files_hash: str = ""

    image_name: str = ""
    tag: str = ""


class DeploymentCache(_CacheModel):
    """Inputs that determined the last rollout of a deployment."""

    deployment_config_hash: str = ""

    helm_overrides_hash: str = ""
    helm_chart_hash: str = ""
    kubectl_manifests_hash: str = ""


class ProfileCache(_CacheModel):
    """Cached build and deploy state for a single profile."""

    deployments: dict[str, DeploymentCache] = Field(default_factory=dict)
    images: dict[str, ImageCache] = Field(default_factory=dict)
    dependencies: dict[str, str] = Field(default_factory=dict)
    last_context: LastContext | None = None

    @field_validator("deployments", "images", mode="before")
    @classmethod
    def normalize_entries(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(key): {} if entry is None else entry for key, entry in value.items()}
        return value

    @field_validator("dependencies", mode="before")
    @classmethod
    def normalize_dependencies(cls, value: Any) -> Any:
        return _text_mapping(value)

    def get_or_create_image(self, name: str) -> ImageCache:
        """Return the cache entry for image ``name``, creating an empty one if missing.

        The returned object is stored in :attr:`images`; mutating it updates the cache.
        """
        if name not in self.images:
            self.images[name] = ImageCache()
        return self.images[name]

    def get_or_create_deployment(self, name: str) -> DeploymentCache:
        """Return the cache entry for deployment ``name``, creating an empty one if missing."""
        if name not in self.deployments:
            self.deployments[name] = DeploymentCache()
        return self.deployments[name]


class GeneratedCache(_CacheModel):
    """Root of the generated cache file.

    ``override_profile`` is recomputed on every load from the caller supplied
    override. It is written back under its historical key
    ``lastOverrideProfile`` but never read back to select a profile.
    """

    override_profile: str | None = Field(default=None, alias="lastOverrideProfile")
    active_profile: str = ""
    vars: dict[str, str] = Field(default_factory=dict)
    profiles: dict[str, ProfileCache] = Field(default_factory=dict)

    @field_validator("vars", mode="before")
    @classmethod
    def normalize_vars(cls, value: Any) -> Any:
        return _text_mapping(value)

    @field_validator("profiles", mode="before")
    @classmethod
    def normalize_profiles(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(key): {} if entry is None else entry for key, entry in value.items()}
        return value

    @property
    def active_profile_name(self) -> str:
        """Name of the profile in effect: the override if set, else the persisted one."""
        if self.override_profile is not None:
            return self.override_profile
        return self.active_profile

    def ensure_profile(self, name: str) -> ProfileCache:
        """Make sure profile ``name`` exists with all nested mappings initialized.

        Missing profiles are created empty. Existing profiles get any ``None``
        mapping replaced by an empty one, which covers entries that were
        assigned partially after load.
        """
        profile = self.profiles.get(name)
        if profile is None:
            profile = ProfileCache()
            self.profiles[name] = profile
            return profile

        if profile.deployments is None:
            profile.deployments = {}
        if profile.images is None:
            profile.images = {}
        if profile.dependencies is None:
            profile.dependencies = {}
        return profile

    def get_active(self) -> ProfileCache:
        """Return the live cache of the profile currently in effect."""
        return self.ensure_profile(self.active_profile_name)

    def remove_profile(self, name: str) -> ProfileCache:
        """Drop the entry of profile ``name`` and return it.

        Raises:
            ProfileNotFoundError: If the profile has no entry.

        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name, sorted(self.profiles))
        return self.profiles.pop(name)
