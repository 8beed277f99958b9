"""Stage gate evaluation over a marker file merged with pipeline defaults."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterator, Mapping, Optional, Union

from stagegate.models import ExecutionContext, StageDecision
from stagegate.properties import parse_properties, to_bool

logger = logging.getLogger(__name__)

DefaultsTable = Mapping[str, bool]
BranchPredicate = Callable[[ExecutionContext], bool]


@dataclass(frozen=True, eq=False)
class StageConfig:
    """Resolved stage flags for one pipeline run.

    ``flags`` holds the boolean for every key from the file or the defaults;
    ``raw`` keeps the file's string values for display. Both are read-only.
    """

    flags: Mapping[str, bool] = field(default_factory=dict)
    raw: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))
        object.__setattr__(self, "raw", MappingProxyType(dict(self.raw)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StageConfig):
            return NotImplemented
        return dict(self.flags) == dict(other.flags) and dict(self.raw) == dict(other.raw)

    def __hash__(self) -> int:
        return hash((frozenset(self.flags.items()), frozenset(self.raw.items())))

    def __contains__(self, key: object) -> bool:
        return key in self.flags

    def __getitem__(self, key: str) -> bool:
        return self.flags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.flags)

    def __len__(self) -> int:
        return len(self.flags)

    def get(self, key: str, default: bool = False) -> bool:
        return self.flags.get(key, default)

    def to_dict(self) -> Dict[str, bool]:
        return dict(sorted(self.flags.items()))


class StageGateEvaluator:
    """Decide which pipeline stages are eligible to run."""

    def __init__(self, on_duplicate: str = "last"):
        self.on_duplicate = on_duplicate

    def load(self, file_contents: str, defaults: Optional[DefaultsTable] = None) -> StageConfig:
        """Build a StageConfig from marker file contents.

        Keys missing from the file take the default; keys missing from the
        defaults are kept as they are. Values are normalised with ``to_bool``.

        Raises:
            ConfigParseError: If the contents are structurally malformed
        """
        raw = parse_properties(file_contents, on_duplicate=self.on_duplicate)

        flags = {key: to_bool(value) for key, value in raw.items()}
        for key, default in (defaults or {}).items():
            if key not in flags:
                flags[key] = bool(default)

        logger.debug("loaded %d file keys, %d resolved flags", len(raw), len(flags))
        return StageConfig(flags=flags, raw=raw)

    def load_file(self, path: Union[str, Path], defaults: Optional[DefaultsTable] = None) -> StageConfig:
        """Read the marker file at ``path`` and load it."""
        contents = Path(path).read_text(encoding="utf-8-sig")
        return self.load(contents, defaults)

    def is_enabled(self, config: StageConfig, key: str) -> bool:
        """Resolved flag for ``key``; unknown stages never run."""
        return config.get(key, False)

    def is_enabled_for_context(
        self,
        config: StageConfig,
        key: str,
        context: ExecutionContext,
        branch_predicate: Optional[BranchPredicate] = None,
    ) -> bool:
        """Flag for ``key`` combined with an optional branch predicate."""
        if not self.is_enabled(config, key):
            return False
        return branch_predicate is None or bool(branch_predicate(context))

    def explain(
        self,
        config: StageConfig,
        key: str,
        context: ExecutionContext,
        branch_predicate: Optional[BranchPredicate] = None,
        stage: Optional[str] = None,
    ) -> StageDecision:
        """Same decision as ``is_enabled_for_context`` with a reason attached."""
        if not self.is_enabled(config, key):
            reason = "flag disabled" if key in config else "flag not set"
            enabled = False
        elif branch_predicate is not None and not branch_predicate(context):
            reason = f"branch predicate rejected {context.branch}"
            enabled = False
        else:
            reason = "enabled"
            enabled = True

        return StageDecision(stage=stage or key, key=key, enabled=enabled, reason=reason)


_default_evaluator = StageGateEvaluator()


def load(file_contents: str, defaults: Optional[DefaultsTable] = None) -> StageConfig:
    return _default_evaluator.load(file_contents, defaults)


def is_enabled(config: StageConfig, key: str) -> bool:
    return _default_evaluator.is_enabled(config, key)


def is_enabled_for_context(
    config: StageConfig,
    key: str,
    context: ExecutionContext,
    branch_predicate: Optional[BranchPredicate] = None,
) -> bool:
    return _default_evaluator.is_enabled_for_context(config, key, context, branch_predicate)
