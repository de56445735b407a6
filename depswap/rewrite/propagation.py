"""Transitive dependency propagation.

Once a module is replaced by its binary artifact, the build no longer sees
the dependencies the module itself declared. Propagation copies those
declarations one level up into the parent project, once per build-variant
prefix, so the parent keeps a correct transitive set.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Sequence

from depswap.graph.models import ArtifactDependency, Configuration, Project
from depswap.rewrite.exclusion import ExclusionMode, is_excluded

logger = logging.getLogger("depswap.rewrite.propagation")

PROPAGATED_CONFIGURATIONS = ("api", "runtimeOnly", "implementation")

DEBUG_PREFIX = "debug"
RELEASE_PREFIX = "release"


def variant_configuration_name(prefix: str, base_name: str) -> str:
    """Build the configuration name for a variant prefix.

    ``("", "api")`` -> ``api``; ``("debug", "api")`` -> ``debugApi``;
    ``("tiyaRelease", "implementation")`` -> ``tiyaReleaseImplementation``.
    """
    if not prefix:
        return base_name
    return prefix + base_name[:1].upper() + base_name[1:]


def variant_prefixes(flavor_name: str = "") -> List[str]:
    """Prefixes a cache-hit module propagates under, in order."""
    prefixes = ["", DEBUG_PREFIX, RELEASE_PREFIX]
    if flavor_name:
        prefixes.extend([flavor_name, flavor_name + "Debug", flavor_name + "Release"])
    return prefixes


def copy_dependencies(
    source: Configuration,
    destination: Configuration,
    mode: ExclusionMode = ExclusionMode.ALL_RULES,
) -> int:
    """Copy every dependency of ``source`` into ``destination``.

    Artifact dependencies excluded on either side are skipped. The others
    are copied with their own exclude list, extended by every rule of both
    configurations, so the rules apply to the new edge only.

    Returns:
        int: Number of dependencies actually added to ``destination``.
    """
    added = 0
    for dependency in source.snapshot():
        if isinstance(dependency, ArtifactDependency):
            if is_excluded(source, dependency, mode) or is_excluded(
                destination, dependency, mode
            ):
                continue
            dependency = replace(dependency, exclude_rules=list(dependency.exclude_rules))
            for rule in source.exclude_rules:
                dependency.exclude(rule.group, rule.module)
            for rule in destination.exclude_rules:
                dependency.exclude(rule.group, rule.module)

        if destination.add(dependency):
            added += 1
    return added


def propagate(
    source: Project,
    destination: Project,
    prefix: str = "",
    *,
    mode: ExclusionMode = ExclusionMode.ALL_RULES,
    base_names: Sequence[str] = PROPAGATED_CONFIGURATIONS,
) -> int:
    """Copy ``source``'s dependencies into ``destination`` for one variant prefix.

    Configurations the destination does not declare are skipped; so are
    configurations the source does not declare.

    Returns:
        int: Number of dependencies added across all base names.
    """
    added = 0
    for base_name in base_names:
        name = variant_configuration_name(prefix, base_name)

        dst_config = destination.find_configuration(name)
        if dst_config is None:
            logger.debug("%s has no configuration %s, skipping", destination.path, name)
            continue

        src_config = source.find_configuration(name)
        if src_config is None:
            logger.debug("%s has no configuration %s, skipping", source.path, name)
            continue

        count = copy_dependencies(src_config, dst_config, mode)
        if count:
            logger.debug(
                "Propagated %d dependencies %s:%s -> %s:%s",
                count,
                source.path,
                name,
                destination.path,
                name,
            )
        added += count
    return added


__all__ = [
    "DEBUG_PREFIX",
    "PROPAGATED_CONFIGURATIONS",
    "RELEASE_PREFIX",
    "copy_dependencies",
    "propagate",
    "variant_configuration_name",
    "variant_prefixes",
]
