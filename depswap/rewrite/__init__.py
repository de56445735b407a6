"""Dependency rewrite engine: traversal, propagation and exclusion matching."""

from depswap.rewrite.exclusion import ExclusionMode, is_excluded
from depswap.rewrite.propagation import (
    PROPAGATED_CONFIGURATIONS,
    copy_dependencies,
    propagate,
    variant_configuration_name,
    variant_prefixes,
)
from depswap.rewrite.settings import RewriteSettings
from depswap.rewrite.traversal import DependencyRewriter, RewriteResult, Substitution

__all__ = [
    "DependencyRewriter",
    "ExclusionMode",
    "PROPAGATED_CONFIGURATIONS",
    "RewriteResult",
    "RewriteSettings",
    "Substitution",
    "copy_dependencies",
    "is_excluded",
    "propagate",
    "variant_configuration_name",
    "variant_prefixes",
]
