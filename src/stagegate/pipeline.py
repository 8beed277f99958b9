"""Pipeline definition: named stages gated by marker file flags."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from stagegate.gates.evaluator import BranchPredicate, StageConfig, StageGateEvaluator
from stagegate.models import ExecutionContext, StageDecision
from stagegate.output.audit import AuditLogger
from stagegate.properties import ConfigParseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageSpec:
    """One named stage, its flag key, fallback and branch rule."""

    name: str
    key: str
    default: bool = False
    predicate: Optional[BranchPredicate] = None


class PipelineDefinition:
    """Evaluate every stage of a pipeline against one marker file."""

    def __init__(
        self,
        stages: Iterable[StageSpec],
        evaluator: Optional[StageGateEvaluator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> None:
        self.stages = list(stages)
        self.evaluator = evaluator or StageGateEvaluator()
        self.audit_logger = audit_logger
        self._defaults = self._build_defaults(self.stages)

    @staticmethod
    def _build_defaults(stages: List[StageSpec]) -> Dict[str, bool]:
        names = set()
        defaults: Dict[str, bool] = {}
        for spec in stages:
            if spec.name in names:
                raise ValueError(f"duplicate stage name {spec.name}")
            names.add(spec.name)

            if spec.key in defaults and defaults[spec.key] != spec.default:
                raise ValueError(f"conflicting defaults for {spec.key}")
            defaults[spec.key] = spec.default
        return defaults

    def defaults(self) -> Dict[str, bool]:
        return dict(self._defaults)

    def evaluate(
        self,
        file_contents: str,
        context: ExecutionContext,
        marker_file: str = "<memory>",
    ) -> List[StageDecision]:
        """Return one decision per stage, in declaration order.

        Raises:
            ConfigParseError: If the marker file is malformed; the run must fail
        """
        if self.audit_logger:
            self.audit_logger.log_run_started(
                context.branch, marker_file, [spec.name for spec in self.stages]
            )

        try:
            config = self.evaluator.load(file_contents, self._defaults)
        except ConfigParseError as exc:
            logger.error("malformed marker file %s: %s", marker_file, exc)
            if self.audit_logger:
                self.audit_logger.log_error(
                    "ConfigParseError",
                    str(exc),
                    {"marker_file": marker_file, "line_number": exc.line_number},
                )
            raise

        return self._decide(config, context)

    def evaluate_file(self, path: Union[str, Path], context: ExecutionContext) -> List[StageDecision]:
        contents = Path(path).read_text(encoding="utf-8-sig")
        return self.evaluate(contents, context, marker_file=str(path))

    def enabled_stages(self, file_contents: str, context: ExecutionContext) -> List[str]:
        return [d.stage for d in self.evaluate(file_contents, context) if d.enabled]

    def _decide(self, config: StageConfig, context: ExecutionContext) -> List[StageDecision]:
        decisions: List[StageDecision] = []
        for spec in self.stages:
            decision = self.evaluator.explain(
                config, spec.key, context, spec.predicate, stage=spec.name
            )
            if not decision.enabled:
                logger.info("skipping stage %s on %s: %s", spec.name, context.branch, decision.reason)
            if self.audit_logger:
                self.audit_logger.log_stage_decision(decision, context.branch)
            decisions.append(decision)
        return decisions


__all__ = ["StageSpec", "PipelineDefinition"]
