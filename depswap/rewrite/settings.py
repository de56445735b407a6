"""Rewrite pass settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from depswap.errors import ManifestError
from depswap.rewrite.exclusion import ExclusionMode
from depswap.rewrite.propagation import PROPAGATED_CONFIGURATIONS

logger = logging.getLogger("depswap.rewrite.settings")

EXCLUSION_MODE_ENV = "DEPSWAP_EXCLUSION_MODE"


@dataclass
class RewriteSettings:
    """Knobs of a rewrite pass.

    Attributes:
        exclusion_mode: How many configuration exclude rules are consulted.
        fail_on_cycle: Raise on a true project cycle; when False the
            re-entered edge is skipped and the cycle reported.
        propagated_configurations: Base configuration names copied into
            parents, in order.
    """

    exclusion_mode: ExclusionMode = ExclusionMode.ALL_RULES
    fail_on_cycle: bool = True
    propagated_configurations: Tuple[str, ...] = PROPAGATED_CONFIGURATIONS

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RewriteSettings":
        """Build settings from a mapping, applying the environment override.

        Raises:
            ManifestError: If the exclusion mode is not a known mode.
        """
        data = data or {}
        env_mode = os.getenv(EXCLUSION_MODE_ENV)
        mode = env_mode or data.get("exclusion_mode")

        exclusion_mode = ExclusionMode.ALL_RULES
        if mode:
            try:
                exclusion_mode = ExclusionMode(mode)
            except ValueError as e:
                origin = EXCLUSION_MODE_ENV if env_mode else "exclusion_mode"
                choices = ", ".join(m.value for m in ExclusionMode)
                raise ManifestError(
                    f"Invalid {origin} {mode!r}; expected one of: {choices}"
                ) from e

        settings = cls(
            exclusion_mode=exclusion_mode,
            fail_on_cycle=bool(data.get("fail_on_cycle", True)),
            propagated_configurations=tuple(
                data.get("propagated_configurations") or PROPAGATED_CONFIGURATIONS
            ),
        )
        logger.debug("Rewrite settings: %s", settings)
        return settings


__all__ = ["EXCLUSION_MODE_ENV", "RewriteSettings"]
