"""Branch predicates supplied by pipeline definitions."""

from __future__ import annotations

from fnmatch import fnmatchcase

from stagegate.models import ExecutionContext

from .evaluator import BranchPredicate


def branch_is(*names: str) -> BranchPredicate:
    """Match the branch exactly against any of ``names``."""

    allowed = frozenset(names)

    def _predicate(context: ExecutionContext) -> bool:
        return context.branch in allowed

    return _predicate


def branch_matches(*patterns: str) -> BranchPredicate:
    """Match the branch against glob patterns such as ``release/*``."""

    def _predicate(context: ExecutionContext) -> bool:
        return any(fnmatchcase(context.branch, pattern) for pattern in patterns)

    return _predicate


def trunk_only() -> BranchPredicate:
    def _predicate(context: ExecutionContext) -> bool:
        return context.is_trunk

    return _predicate


def all_of(*predicates: BranchPredicate) -> BranchPredicate:
    def _predicate(context: ExecutionContext) -> bool:
        return all(predicate(context) for predicate in predicates)

    return _predicate


def any_of(*predicates: BranchPredicate) -> BranchPredicate:
    def _predicate(context: ExecutionContext) -> bool:
        return any(predicate(context) for predicate in predicates)

    return _predicate


def negate(predicate: BranchPredicate) -> BranchPredicate:
    def _predicate(context: ExecutionContext) -> bool:
        return not predicate(context)

    return _predicate


__all__ = ["branch_is", "branch_matches", "trunk_only", "all_of", "any_of", "negate"]
