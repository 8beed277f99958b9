import json

import pytest

from stagegate.cli import main
from stagegate.cli.check import parse_defaults


@pytest.fixture
def run(clean_env, tmp_path):
    clean_env.setenv("STAGEGATE_AUDIT_DIR", str(tmp_path / "audit"))

    def _run(*argv):
        return main(list(argv))

    return _run


def test_check_enabled(run, marker_file, capsys):
    assert run("check", "stage.build.enabled", "--file", str(marker_file)) == 0
    assert "stage.build.enabled: enabled" in capsys.readouterr().out


def test_check_disabled(run, marker_file):
    assert run("check", "stage.test.integration.enabled", "--file", str(marker_file)) == 1


def test_check_unknown_key_disabled(run, marker_file, capsys):
    assert run("check", "stage.nope.enabled", "--file", str(marker_file)) == 1
    assert "flag not set" in capsys.readouterr().out


def test_check_default_applies(run, marker_file):
    argv = ["check", "stage.security.scan.enabled", "--file", str(marker_file)]
    assert run(*argv) == 1
    assert run(*argv, "--default", "stage.security.scan.enabled=true") == 0


def test_check_branch_rules(run, marker_file):
    base = ["check", "stage.deploy.prod.enabled", "--file", str(marker_file)]
    assert run(*base, "--branch", "main", "--require-branch", "main") == 0
    assert run(*base, "--branch", "feature/x", "--require-branch", "main") == 1
    assert run(*base, "--branch", "main", "--require-trunk") == 0
    assert run(*base, "--branch", "develop", "--require-trunk") == 1


def test_check_branch_from_env(run, marker_file, clean_env):
    clean_env.setenv("BRANCH_NAME", "feature/x")
    assert run("check", "stage.deploy.prod.enabled", "--file", str(marker_file), "--require-trunk") == 1


def test_check_branch_rule_without_branch_fails(run, marker_file, capsys):
    assert run("check", "stage.deploy.prod.enabled", "--file", str(marker_file), "--require-trunk") == 2
    assert "cannot determine branch" in capsys.readouterr().err


def test_check_malformed_file(run, tmp_path, capsys):
    path = tmp_path / "bad.properties"
    path.write_text("stage.build.enabled\n")
    assert run("check", "stage.build.enabled", "--file", str(path)) == 2
    assert "line 1" in capsys.readouterr().err


def test_check_missing_file(run, tmp_path):
    assert run("check", "stage.build.enabled", "--file", str(tmp_path / "absent")) == 2


def test_check_undecodable_file(run, tmp_path, capsys):
    path = tmp_path / "binary.properties"
    path.write_bytes(b"\xff\xfe")
    assert run("check", "stage.build.enabled", "--file", str(path)) == 2
    assert "error:" in capsys.readouterr().err


def test_check_directory_as_file(run, tmp_path, capsys):
    assert run("check", "stage.build.enabled", "--file", str(tmp_path)) == 2
    assert "error:" in capsys.readouterr().err


def test_show_undecodable_file(run, tmp_path):
    path = tmp_path / "binary.properties"
    path.write_bytes(b"\xff\xfe")
    assert run("show", "--file", str(path)) == 2


def test_check_file_with_bom(run, tmp_path):
    path = tmp_path / "bom.properties"
    path.write_bytes("stage.build.enabled=true\n".encode("utf-8-sig"))
    assert run("check", "stage.build.enabled", "--file", str(path)) == 0


def test_check_marker_file_from_config(run, marker_file, clean_env):
    clean_env.setenv("STAGEGATE_MARKER_FILE", str(marker_file))
    assert run("check", "stage.build.enabled") == 0


def test_check_writes_audit(run, marker_file, clean_env, tmp_path):
    clean_env.setenv("STAGEGATE_ENABLE_AUDIT", "true")
    assert run("check", "stage.build.enabled", "--file", str(marker_file), "--branch", "main") == 0
    files = list((tmp_path / "audit").glob("audit_*.jsonl"))
    assert len(files) == 1
    event = json.loads(files[0].read_text().splitlines()[0])
    assert event["data"]["branch"] == "main"


def test_show_prints_resolved_flags(run, marker_file, capsys):
    code = run("show", "--file", str(marker_file), "--default", "stage.security.scan.enabled=true")
    assert code == 0
    flags = json.loads(capsys.readouterr().out)
    assert flags["stage.security.scan.enabled"] is True
    assert flags["stage.test.integration.enabled"] is False


def test_invalid_config_exits_2(run, marker_file, clean_env):
    clean_env.setenv("STAGEGATE_ON_DUPLICATE", "merge")
    assert run("show", "--file", str(marker_file)) == 2


def test_no_command_prints_help(run, capsys):
    assert run() == 0
    assert "usage" in capsys.readouterr().out


def test_parse_defaults():
    assert parse_defaults(["a=true", "b=false", "c=TRUE"]) == {"a": True, "b": False, "c": False}
