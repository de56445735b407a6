"""Configuration-level exclusion matching."""

from __future__ import annotations

import logging
from enum import Enum

from depswap.graph.models import ArtifactDependency, Configuration, Dependency

logger = logging.getLogger("depswap.rewrite.exclusion")


class ExclusionMode(str, Enum):
    """How many configuration exclude rules are consulted per dependency.

    FIRST_RULE reproduces the legacy accelerator, which returned after
    testing the first rule. ALL_RULES tests every rule.
    """

    ALL_RULES = "all_rules"
    FIRST_RULE = "first_rule"


def is_excluded(
    configuration: Configuration,
    dependency: Dependency,
    mode: ExclusionMode = ExclusionMode.ALL_RULES,
) -> bool:
    """Return True when ``dependency`` is covered by an exclude rule of ``configuration``.

    Only artifact dependencies carry group/name coordinates; anything else
    is never excluded.
    """
    if not isinstance(dependency, ArtifactDependency):
        return False

    rules = configuration.exclude_rules
    if mode is ExclusionMode.FIRST_RULE:
        rules = rules[:1]

    for rule in rules:
        if rule.matches(dependency.group, dependency.name):
            logger.debug(
                "%s excluded by %s rule %s:%s",
                dependency.notation,
                configuration.name,
                rule.group,
                rule.module or "*",
            )
            return True
    return False


__all__ = ["ExclusionMode", "is_excluded"]
