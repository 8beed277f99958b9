"""Data models for stage gating"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_TRUNK_BRANCH = "main"


class ExecutionContext(BaseModel):
    """Ambient attributes of one pipeline run"""

    model_config = ConfigDict(frozen=True)

    branch: str = Field(min_length=1)
    trunk_branch: str = Field(default=DEFAULT_TRUNK_BRANCH, min_length=1)
    environment: Optional[str] = None
    attributes: Dict[str, str] = Field(default_factory=dict)

    @field_validator("branch", "trunk_branch", mode="before")
    @classmethod
    def _strip_refs(cls, value):
        if not isinstance(value, str):
            return value
        value = value.strip()
        if value.startswith("refs/heads/"):
            value = value[len("refs/heads/"):]
        return value

    @property
    def is_trunk(self) -> bool:
        return self.branch == self.trunk_branch


class StageDecision(BaseModel):
    """Outcome of gating one stage"""

    stage: str
    key: str
    enabled: bool
    reason: str
