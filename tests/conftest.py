import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from stagegate.config import BRANCH_ENV_VARS  # noqa: E402


SAMPLE_PROPERTIES = """\
# sample marker file
stage.build.enabled=true
stage.test.unit.enabled=true
stage.test.integration.enabled=false

stage.deploy.prod.enabled=true
"""


@pytest.fixture
def clean_env(monkeypatch):
    """Remove CI branch and stagegate variables and skip .env loading."""
    for name in BRANCH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in (
        "STAGEGATE_MARKER_FILE",
        "STAGEGATE_TRUNK_BRANCH",
        "STAGEGATE_ON_DUPLICATE",
        "STAGEGATE_ENABLE_AUDIT",
        "STAGEGATE_AUDIT_DIR",
        "STAGEGATE_LOG_LEVEL",
        "STAGEGATE_ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("stagegate.config.load_dotenv", lambda *args, **kwargs: False)
    return monkeypatch


@pytest.fixture
def marker_file(tmp_path):
    path = tmp_path / "stagegate.properties"
    path.write_text(SAMPLE_PROPERTIES, encoding="utf-8")
    return path
