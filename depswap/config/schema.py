"""Workspace manifest schema using Pydantic for validation.

A manifest describes the projects of a workspace, their configurations
and dependency declarations, the modules eligible for artifact
substitution and the rewrite settings. Validation happens here so that
the graph builder only ever sees well-formed input.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from depswap.graph.identifiers import normalize_project_path
from depswap.registry import DEFAULT_ARTIFACT_EXTENSION
from depswap.rewrite.exclusion import ExclusionMode
from depswap.rewrite.propagation import PROPAGATED_CONFIGURATIONS
from depswap.rewrite.settings import RewriteSettings

_PROJECT_NOTATION_PREFIX = "project("


class ExcludeRuleModel(BaseModel):
    """Exclude rule; an empty ``module`` matches the whole group."""

    group: str = Field(min_length=1)
    module: Optional[str] = None

    model_config = {"extra": "forbid"}


class DependencyModel(BaseModel):
    """One dependency declaration.

    Exactly one of ``project`` (source reference) or ``artifact``
    (``group:name[:version][@ext]``) must be set. Per-edge exclude rules
    only apply to artifacts.
    """

    project: Optional[str] = None
    artifact: Optional[str] = None
    exclude: List[ExcludeRuleModel] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def _expand_string_notation(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip()
        if text.startswith(_PROJECT_NOTATION_PREFIX) and text.endswith(")"):
            return {"project": text[len(_PROJECT_NOTATION_PREFIX):-1].strip(" '\"")}
        return {"artifact": text}

    @model_validator(mode="after")
    def _check_single_target(self) -> "DependencyModel":
        if bool(self.project) == bool(self.artifact):
            raise ValueError("Dependency must set exactly one of 'project' or 'artifact'")
        if self.project and self.exclude:
            raise ValueError("Exclude rules are only supported on artifact dependencies")
        return self


class ConfigurationModel(BaseModel):
    """Dependencies and configuration-wide exclude rules of one configuration."""

    dependencies: List[DependencyModel] = Field(default_factory=list)
    exclude: List[ExcludeRuleModel] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_list(cls, value: Any) -> Any:
        if isinstance(value, list):
            return {"dependencies": value}
        return value


class ProjectModel(BaseModel):
    """A workspace project and its configurations, in declaration order."""

    path: str = Field(min_length=1)
    configurations: Dict[str, ConfigurationModel] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    @field_validator("path")
    @classmethod
    def _normalize_path(cls, v: str) -> str:
        return normalize_project_path(v)


class ModuleModel(BaseModel):
    """Substitutable module.

    Attributes:
        name: Path of the wrapped project.
        enabled: Disabled modules are never substituted.
        cache_valid: Whether the cached artifact is up to date.
        flavor: Build-variant name.
        group: Artifact group.
        artifact: Artifact name; defaults to the last project path segment.
        version: Artifact version.
        extension: Artifact type.
    """

    name: str = Field(min_length=1)
    enabled: bool = True
    cache_valid: bool = False
    flavor: str = ""
    group: Optional[str] = None
    artifact: Optional[str] = None
    version: Optional[str] = None
    extension: Optional[str] = DEFAULT_ARTIFACT_EXTENSION

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, v: str) -> str:
        return normalize_project_path(v)


class SettingsModel(BaseModel):
    """Rewrite settings section of the manifest."""

    exclusion_mode: ExclusionMode = ExclusionMode.ALL_RULES
    fail_on_cycle: bool = True
    propagated_configurations: List[str] = Field(
        default_factory=lambda: list(PROPAGATED_CONFIGURATIONS)
    )

    model_config = {"extra": "forbid"}

    @field_validator("propagated_configurations")
    @classmethod
    def _check_names(cls, v: List[str]) -> List[str]:
        for name in v:
            if not name or not name[0].islower():
                raise ValueError(
                    f"Invalid configuration base name '{name}': must start lowercase"
                )
        return v

    def to_settings(self) -> RewriteSettings:
        return RewriteSettings.from_dict(self.model_dump(mode="json"))


class ManifestModel(BaseModel):
    """Top-level workspace manifest."""

    root: Optional[str] = None
    projects: List[ProjectModel] = Field(min_length=1)
    modules: List[ModuleModel] = Field(default_factory=list)
    settings: SettingsModel = Field(default_factory=SettingsModel)

    model_config = {"extra": "forbid"}

    @field_validator("root")
    @classmethod
    def _normalize_root(cls, v: Optional[str]) -> Optional[str]:
        return normalize_project_path(v) if v is not None else None
