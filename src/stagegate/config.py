"""Configuration loader for stagegate"""

import os
import json
import logging
from pathlib import Path
from typing import Dict, Any, Mapping, Optional
from dotenv import load_dotenv

from stagegate.models import DEFAULT_TRUNK_BRANCH, ExecutionContext
from stagegate.properties import DUPLICATE_POLICIES


DEFAULT_MARKER_FILE = "stagegate.properties"
DEFAULT_AUDIT_DIR = "./audit_logs"
DEFAULT_LOG_LEVEL = "INFO"

# First non-empty wins: Jenkins multibranch, Jenkins git plugin, GitLab, GitHub
BRANCH_ENV_VARS = ("BRANCH_NAME", "GIT_BRANCH", "CI_COMMIT_BRANCH", "GITHUB_REF_NAME")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """Configuration manager for stagegate

    Loads configuration from:
    1. Environment variables (.env file)
    2. JSON configuration file
    3. Default values
    """

    def __init__(self, config_file: Optional[str] = None):
        """Initialize configuration

        Args:
            config_file: Optional path to JSON config file
        """
        load_dotenv()

        self.json_config = {}
        if config_file and Path(config_file).exists():
            with open(config_file, 'r') as f:
                self.json_config = json.load(f)

        self.config = self._build_config()

    def _build_config(self) -> Dict[str, Any]:
        """Build configuration from all sources

        Priority: ENV vars > JSON config > Defaults
        """
        return {
            'marker_file': self._get('STAGEGATE_MARKER_FILE', DEFAULT_MARKER_FILE),
            'trunk_branch': self._get('STAGEGATE_TRUNK_BRANCH', DEFAULT_TRUNK_BRANCH),
            'on_duplicate': str(self._get('STAGEGATE_ON_DUPLICATE', 'last')).lower(),
            'enable_audit': self._get_bool('STAGEGATE_ENABLE_AUDIT', False),
            'audit_dir': self._get('STAGEGATE_AUDIT_DIR', DEFAULT_AUDIT_DIR),
            'log_level': str(self._get('STAGEGATE_LOG_LEVEL', DEFAULT_LOG_LEVEL)).upper(),
            'environment': self._get('STAGEGATE_ENVIRONMENT'),
        }

    def _get(self, key: str, default: Any = None) -> Any:
        """Get configuration value

        Priority: ENV var > JSON config > default
        """
        env_value = os.getenv(key)
        if env_value is not None:
            return env_value

        # JSON keys drop the STAGEGATE_ prefix and are lower case
        json_key = key.lower()
        if json_key.startswith('stagegate_'):
            json_key = json_key[len('stagegate_'):]
        if json_key in self.json_config:
            return self.json_config[json_key]

        return default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Get boolean configuration value"""
        value = self._get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ('true', '1', 'yes', 'on')
        return default

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key"""
        return self.config.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary"""
        return self.config.copy()

    def log_level(self) -> int:
        return getattr(logging, self.config['log_level'], logging.INFO)

    def context_from_env(self, environ: Optional[Mapping[str, str]] = None) -> ExecutionContext:
        """Build the execution context from CI environment variables

        Raises:
            ValueError: If no branch variable is set
        """
        env = os.environ if environ is None else environ
        for name in BRANCH_ENV_VARS:
            branch = (env.get(name) or '').strip()
            if not branch:
                continue
            if name == 'GIT_BRANCH' and branch.startswith('origin/'):
                branch = branch[len('origin/'):]
            return ExecutionContext(
                branch=branch,
                trunk_branch=self.config['trunk_branch'],
                environment=self.config.get('environment'),
            )

        raise ValueError(
            "cannot determine branch, set one of: " + ", ".join(BRANCH_ENV_VARS)
        )

    def validate(self) -> list:
        """Validate configuration and return list of issues

        Returns:
            List of validation error messages (empty if valid)
        """
        issues = []

        if not str(self.config.get('marker_file') or '').strip():
            issues.append("marker_file must not be empty")

        if self.config.get('on_duplicate') not in DUPLICATE_POLICIES:
            issues.append(
                f"on_duplicate must be one of {', '.join(DUPLICATE_POLICIES)}"
            )

        if self.config.get('log_level') not in LOG_LEVELS:
            issues.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        if not str(self.config.get('trunk_branch') or '').strip():
            issues.append("trunk_branch must not be empty")

        return issues
