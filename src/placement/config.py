"""
Placement configuration.

A single immutable value object carries every knob of a placement run.
Field bounds are enforced by pydantic; cross-field rules that need the
placement context (zero bins, factor sums) are checked by `ensure_valid()`
so they surface as ConfigurationError.
"""

import logging
import os
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class SelectionPolicy(str, Enum):
    """How the selector chooses among the d candidates"""
    MAX_OVERLAP = "max_overlap"  # maximize overlap, no exclusions
    MAX_LOAD = "max_load"        # drop fullest candidates, then maximize overlap
    TWO_FACTOR = "two_factor"    # drop lowest overlap, then fullest, then maximize overlap


class EvaluationMode(str, Enum):
    """What overlap is measured against"""
    SINGLE_PASS = "single_pass"  # bins accumulated so far
    TWO_PASS = "two_pass"        # precomputed potential contents


class PlacementConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    k: int = Field(default=10, ge=1, description="Results requested per keyword (top-k)")
    d: int = Field(default=10, ge=1, description="Number of hash choices per keyword")
    max_bins: int = Field(default=1, ge=0, description="Number of bins")
    filter_k: int = Field(
        default=2,
        ge=0,
        description="Minimum result-set size for a keyword to be placed"
    )
    max_load_factor: int = Field(
        default=0,
        ge=0,
        description="Number of highest-load candidates dropped before selection"
    )
    min_overlap_factor: int = Field(
        default=0,
        ge=0,
        description="Number of lowest-overlap candidates dropped before selection"
    )
    save_result: bool = Field(default=False, description="Persist bins after the run")
    policy: SelectionPolicy = SelectionPolicy.TWO_FACTOR
    evaluation: EvaluationMode = EvaluationMode.SINGLE_PASS
    strict_factors: bool = Field(
        default=False,
        description="Reject factor combinations that filter out every candidate instead of falling back"
    )

    def excluded_candidates(self) -> int:
        """Number of candidates the configured policy removes before picking"""
        if self.policy == SelectionPolicy.TWO_FACTOR:
            return self.min_overlap_factor + self.max_load_factor
        if self.policy == SelectionPolicy.MAX_LOAD:
            return self.max_load_factor
        return 0

    def ensure_valid(self, warn: bool = True) -> "PlacementConfig":
        """
        Check rules that make a placement run impossible or meaningless.

        Args:
            warn: Log warnings for lenient fallbacks and filter_k > k

        Raises:
            ConfigurationError: zero bins, or (strict mode) factors that leave
                no candidate to choose from

        Returns:
            self, so calls can be chained
        """
        if self.max_bins == 0:
            raise ConfigurationError("max_bins must be at least 1")

        excluded = self.excluded_candidates()
        if excluded >= self.d:
            message = (
                f"Policy {self.policy.value} removes {excluded} of {self.d} candidates "
                f"(min_overlap_factor={self.min_overlap_factor}, max_load_factor={self.max_load_factor})"
            )
            if self.strict_factors:
                raise ConfigurationError(message)
            if warn:
                logger.warning(f"{message}; falling back to the highest-overlap candidate")

        if warn and self.filter_k > self.k:
            logger.warning(
                f"filter_k={self.filter_k} exceeds k={self.k}: every keyword will be ignored"
            )

        return self

    @classmethod
    def from_env(cls, **overrides) -> "PlacementConfig":
        """
        Build configuration from BINS_* environment variables.

        Keyword overrides win over the environment; unset variables keep
        the model defaults.
        """
        env_map = {
            "k": "BINS_K",
            "d": "BINS_D",
            "max_bins": "BINS_MAX_BINS",
            "filter_k": "BINS_FILTER_K",
            "max_load_factor": "BINS_MAX_LOAD_FACTOR",
            "min_overlap_factor": "BINS_MIN_OVERLAP_FACTOR",
            "save_result": "BINS_SAVE_RESULT",
            "policy": "BINS_POLICY",
            "evaluation": "BINS_EVALUATION",
            "strict_factors": "BINS_STRICT_FACTORS",
        }
        values = {}
        for field, env_name in env_map.items():
            raw = os.getenv(env_name)
            if raw is not None and raw != "":
                values[field] = raw.lower() if field in ("policy", "evaluation") else raw
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
