"""stagegate: gate CI pipeline stages on a flat properties marker file."""

__version__ = "0.1.0"

from .gates import StageConfig, StageGateEvaluator, is_enabled, is_enabled_for_context, load
from .models import ExecutionContext, StageDecision
from .properties import ConfigParseError

__all__ = [
    "__version__",
    "ConfigParseError",
    "ExecutionContext",
    "StageConfig",
    "StageDecision",
    "StageGateEvaluator",
    "is_enabled",
    "is_enabled_for_context",
    "load",
]
