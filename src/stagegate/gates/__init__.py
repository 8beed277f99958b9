"""Stage gate evaluation utilities."""

from .evaluator import (
    BranchPredicate,
    DefaultsTable,
    StageConfig,
    StageGateEvaluator,
    is_enabled,
    is_enabled_for_context,
    load,
)
from .predicates import all_of, any_of, branch_is, branch_matches, negate, trunk_only

__all__ = [
    "BranchPredicate",
    "DefaultsTable",
    "StageConfig",
    "StageGateEvaluator",
    "is_enabled",
    "is_enabled_for_context",
    "load",
    "all_of",
    "any_of",
    "branch_is",
    "branch_matches",
    "negate",
    "trunk_only",
]
