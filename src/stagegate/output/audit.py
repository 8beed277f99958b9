"""JSON-based audit trail for stage gate decisions"""

import json
from typing import Dict, Any, List, Optional
from pathlib import Path
from datetime import datetime, timezone
from stagegate.models import StageDecision


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditLogger:
    """Append-only JSONL audit logger for pipeline runs"""

    def __init__(self, audit_dir: Optional[Path] = None):
        """Initialize audit logger

        Args:
            audit_dir: Directory to store audit logs
        """
        self.audit_dir = Path(audit_dir) if audit_dir else Path("./audit_logs")
        self.audit_dir.mkdir(parents=True, exist_ok=True)

    def _file_for(self, date: datetime) -> Path:
        return self.audit_dir / f"audit_{date.strftime('%Y%m%d')}.jsonl"

    @property
    def current_file(self) -> Path:
        """Today's (UTC) log file, re-evaluated on every access"""
        return self._file_for(_utcnow())

    def log_event(self, event_type: str, data: Dict[str, Any],
                   level: str = "INFO") -> None:
        """Log an audit event

        Args:
            event_type: Type of event (e.g., 'run_started', 'stage_decision')
            data: Event data
            level: Log level (INFO, WARNING, ERROR)
        """
        now = _utcnow()
        event = {
            "timestamp": now.isoformat(),
            "event_type": event_type,
            "level": level,
            "data": data
        }

        with open(self._file_for(now), 'a', encoding='utf-8') as f:
            f.write(json.dumps(event) + '\n')

    def log_run_started(self, branch: str, marker_file: str,
                         stages: List[str]) -> None:
        """Log the start of a gated pipeline run"""
        self.log_event("run_started", {
            "branch": branch,
            "marker_file": marker_file,
            "stages": stages
        })

    def log_stage_decision(self, decision: StageDecision, branch: str) -> None:
        """Log the gate outcome for one stage

        Args:
            decision: Decision produced by the evaluator
            branch: Branch the run executes on
        """
        data = decision.model_dump()
        data["branch"] = branch
        self.log_event("stage_decision", data)

    def log_error(self, error_type: str, error_message: str,
                   context: Optional[Dict[str, Any]] = None) -> None:
        """Log error event

        Args:
            error_type: Type of error
            error_message: Error message
            context: Additional context
        """
        self.log_event("error", {
            "error_type": error_type,
            "error_message": error_message,
            "context": context or {}
        }, level="ERROR")

    def read_audit_log(self, date: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Read audit log for a specific date

        Args:
            date: Date to read (default: today)

        Returns:
            List of audit events
        """
        if date is None:
            date = _utcnow()

        log_file = self._file_for(date)

        if not log_file.exists():
            return []

        events = []
        with open(log_file, 'r', encoding='utf-8') as f:
            for line in f:
                try:
                    events.append(json.loads(line.strip()))
                except json.JSONDecodeError:
                    continue

        return events

    def get_run_statistics(self, date: Optional[datetime] = None) -> Dict[str, Any]:
        """Get statistics from audit logs

        Args:
            date: Date to analyze (default: today)

        Returns:
            Statistics dictionary
        """
        events = self.read_audit_log(date)

        stats = {
            "total_runs": 0,
            "stages_enabled": 0,
            "stages_skipped": 0,
            "total_errors": 0,
            "branches": set(),
            "event_counts": {}
        }

        for event in events:
            event_type = event.get("event_type")

            stats["event_counts"][event_type] = stats["event_counts"].get(event_type, 0) + 1

            if event_type == "run_started":
                stats["total_runs"] += 1
                stats["branches"].add(event["data"].get("branch", "unknown"))

            elif event_type == "stage_decision":
                if event["data"].get("enabled"):
                    stats["stages_enabled"] += 1
                else:
                    stats["stages_skipped"] += 1

            elif event_type == "error":
                stats["total_errors"] += 1

        stats["branches"] = sorted(stats["branches"])

        return stats
