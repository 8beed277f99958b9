"""``check`` and ``show`` sub-commands."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Dict, List, Optional

from stagegate.config import Config
from stagegate.gates.evaluator import BranchPredicate, StageConfig, StageGateEvaluator
from stagegate.gates.predicates import all_of, branch_is, trunk_only
from stagegate.models import ExecutionContext
from stagegate.output.audit import AuditLogger
from stagegate.properties import ConfigParseError, to_bool

EXIT_ENABLED = 0
EXIT_DISABLED = 1
EXIT_ERROR = 2

# Unreadable, undecodable or malformed marker files all fail the run
LOAD_ERRORS = (ConfigParseError, OSError, UnicodeDecodeError, argparse.ArgumentTypeError)


# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


def _add_common_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--file", "-f", type=str, default=None, help="Marker file path")
    p.add_argument(
        "--default",
        dest="defaults",
        action="append",
        default=[],
        metavar="KEY=BOOL",
        help="Default flag used when the file omits KEY (repeatable)",
    )


def add_check_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``check`` sub-command."""

    p = subparsers.add_parser(
        "check",
        help="Exit 0 when a stage is enabled, 1 when disabled",
        description="Evaluate one stage key against the marker file.",
    )
    p.add_argument("key", type=str, help="Stage key, e.g. stage.deploy.prod.enabled")
    _add_common_arguments(p)
    p.add_argument("--branch", "-b", type=str, default=None, help="Branch name (default: from CI env)")
    p.add_argument(
        "--require-branch",
        action="append",
        default=[],
        metavar="NAME",
        help="Only enable the stage on this branch (repeatable)",
    )
    p.add_argument("--require-trunk", action="store_true", help="Only enable the stage on the trunk branch")
    p.set_defaults(func=run_check_cmd)


def add_show_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``show`` sub-command."""

    p = subparsers.add_parser(
        "show",
        help="Print the resolved stage flags as JSON",
        description="Merge the marker file with defaults and print every flag.",
    )
    _add_common_arguments(p)
    p.set_defaults(func=run_show_cmd)


def parse_defaults(items: List[str]) -> Dict[str, bool]:
    """Turn ``KEY=BOOL`` arguments into a defaults table."""
    defaults: Dict[str, bool] = {}
    for item in items:
        if "=" not in item:
            raise argparse.ArgumentTypeError(f"default must be KEY=BOOL, got {item!r}")
        key, value = item.split("=", 1)
        defaults[key.strip()] = to_bool(value.strip())
    return defaults


def _build_predicate(args: argparse.Namespace) -> Optional[BranchPredicate]:
    predicates = []
    if args.require_branch:
        predicates.append(branch_is(*args.require_branch))
    if args.require_trunk:
        predicates.append(trunk_only())
    if not predicates:
        return None
    return all_of(*predicates)


def _resolve_context(args: argparse.Namespace, cfg: Config) -> ExecutionContext:
    if args.branch:
        return ExecutionContext(
            branch=args.branch,
            trunk_branch=cfg.get("trunk_branch"),
            environment=cfg.get("environment"),
        )
    return cfg.context_from_env()


def _load(args: argparse.Namespace, cfg: Config, evaluator: StageGateEvaluator) -> StageConfig:
    path = args.file or cfg.get("marker_file")
    return evaluator.load_file(path, parse_defaults(args.defaults))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def run_check_cmd(args: argparse.Namespace, cfg: Config) -> int:
    """Evaluate one key and map the decision to an exit code."""

    evaluator = StageGateEvaluator(on_duplicate=cfg.get("on_duplicate"))
    try:
        config = _load(args, cfg, evaluator)
    except LOAD_ERRORS as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    predicate = _build_predicate(args)
    try:
        context = _resolve_context(args, cfg)
    except ValueError as exc:
        if predicate is not None:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_ERROR
        # Branch rules were not requested, any placeholder branch is fine
        context = ExecutionContext(branch="unknown", trunk_branch=cfg.get("trunk_branch"))

    decision = evaluator.explain(config, args.key, context, predicate)

    if cfg.get("enable_audit"):
        AuditLogger(cfg.get("audit_dir")).log_stage_decision(decision, context.branch)

    print(f"{decision.key}: {'enabled' if decision.enabled else 'disabled'} ({decision.reason})")
    return EXIT_ENABLED if decision.enabled else EXIT_DISABLED


def run_show_cmd(args: argparse.Namespace, cfg: Config) -> int:
    """Print the resolved flags."""

    evaluator = StageGateEvaluator(on_duplicate=cfg.get("on_duplicate"))
    try:
        config = _load(args, cfg, evaluator)
    except LOAD_ERRORS as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    print(json.dumps(config.to_dict(), indent=2, sort_keys=True))
    return 0
