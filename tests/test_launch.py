"""
Launch helper tests

Tests for environment resolution, launch plans and configuration checks.
"""
import logging
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from launchspec.local.launch import (
    build_launch_plan,
    check_configuration,
    get_executable_path,
    get_working_directory,
    resolve_environment,
)
from launchspec.spec import ExecutionMode, ValidationError, load_record


@pytest.fixture
def app_dir(tmp_path):
    """An application directory with an executable, a dotenv file and a logs dir."""
    root = tmp_path / "myapp"
    (root / "bin").mkdir(parents=True)
    script = root / "bin" / "server.sh"
    script.write_text("#!/bin/sh\nexit 0\n")
    script.chmod(0o755)
    (root / ".env.production").write_text("DATABASE_URL=postgres://db/app\nNODE_ENV=from-file\n")
    return root


def _spec(app_dir, **overrides):
    record = {
        "name": "web",
        "command": "./bin/server.sh",
        "cwd": str(app_dir),
        "env_file": ".env.production",
        "env": {"NODE_ENV": "production", "PORT": 3000},
        "env_staging": {"PORT": "4000"},
    }
    record.update(overrides)
    return load_record({k: v for k, v in record.items() if v is not None})


class TestResolveEnvironment:

    def test_precedence(self, app_dir):
        env = resolve_environment(
            _spec(app_dir),
            base_env={"PATH": "/usr/bin", "NODE_ENV": "inherited", "DATABASE_URL": "inherited"},
        )
        assert env == {
            "PATH": "/usr/bin",
            "DATABASE_URL": "postgres://db/app",
            "NODE_ENV": "production",
            "PORT": "3000",
        }

    def test_overlay_applied_last(self, app_dir):
        env = resolve_environment(_spec(app_dir), env_name="staging")
        assert env["PORT"] == "4000"
        assert env["NODE_ENV"] == "production"

    def test_unknown_overlay(self, app_dir):
        with pytest.raises(ValidationError, match="no environment 'qa'"):
            resolve_environment(_spec(app_dir), env_name="qa")

    def test_missing_env_file_is_skipped(self, app_dir, caplog):
        spec = _spec(app_dir, env_file="missing.env")
        with caplog.at_level(logging.WARNING):
            env = resolve_environment(spec)
        assert env == {"NODE_ENV": "production", "PORT": "3000"}
        assert "missing.env" in caplog.text

    def test_base_env_not_mutated(self, app_dir):
        base = {"PORT": "80"}
        resolve_environment(_spec(app_dir), base_env=base)
        assert base == {"PORT": "80"}


class TestLaunchPlan:

    def test_plan_resolves_paths(self, app_dir):
        spec = _spec(
            app_dir,
            args="--port 3000",
            log_file="logs/app.log",
            out_file="/var/log/web/out.log",
            execution_mode="cluster",
            instances=2,
        )
        plan = build_launch_plan(spec, inherit_env=False)
        assert plan.argv == ["./bin/server.sh", "--port", "3000"]
        assert plan.cwd == app_dir
        assert plan.instances == 2
        assert plan.execution_mode is ExecutionMode.CLUSTER
        assert plan.log_paths.combined == str(app_dir / "logs" / "app.log")
        assert plan.log_paths.stdout == "/var/log/web/out.log"
        assert plan.log_paths.stderr is None
        assert plan.env["DATABASE_URL"] == "postgres://db/app"

    def test_plan_inherits_process_environment(self, app_dir, monkeypatch):
        monkeypatch.setenv("LAUNCHSPEC_TEST_MARKER", "1")
        plan = build_launch_plan(_spec(app_dir))
        assert plan.env["LAUNCHSPEC_TEST_MARKER"] == "1"

    def test_plan_defaults(self, app_dir):
        plan = build_launch_plan(_spec(app_dir), inherit_env=False)
        assert plan.restart_policy.max_restarts == 16
        assert plan.restart_policy.min_uptime_ms == 1000
        assert plan.restart_policy.max_memory_bytes is None
        assert plan.timeouts.kill_timeout_ms == 1600
        assert plan.timeouts.wait_ready is False

    def test_relative_cwd_anchored_at_base_dir(self, tmp_path):
        spec = load_record({"name": "web", "command": "npm", "cwd": "apps/web"})
        assert get_working_directory(spec) == tmp_path / "apps" / "web"

    def test_unset_cwd_is_base_dir(self, tmp_path):
        spec = load_record({"name": "web", "command": "npm"})
        assert get_working_directory(spec) == tmp_path


class TestExecutablePath:

    def test_relative_path_resolved_against_cwd(self, app_dir):
        assert get_executable_path("./bin/server.sh", app_dir) == app_dir / "./bin/server.sh"

    def test_missing_relative_path(self, app_dir):
        assert get_executable_path("./bin/nope.sh", app_dir) is None

    def test_bare_name_uses_path_lookup(self, app_dir):
        with patch("launchspec.local.launch.shutil.which", return_value="/usr/bin/npm") as which:
            assert get_executable_path("npm", app_dir) == Path("/usr/bin/npm")
        which.assert_called_once_with("npm")


class TestCheckConfiguration:

    def test_valid_configuration(self, app_dir):
        spec = _spec(app_dir, log_file="logs/app.log", error_file="logs/error.log")
        assert check_configuration(spec) is True

    def test_missing_working_directory(self, app_dir):
        spec = _spec(app_dir, cwd=str(app_dir / "gone"), command="/bin/sh", env_file=None)
        assert check_configuration(spec) is False

    def test_missing_command(self, app_dir, caplog):
        with patch("launchspec.local.launch.shutil.which", return_value=None):
            spec = _spec(app_dir, command="definitely-not-installed")
            with caplog.at_level(logging.ERROR):
                assert check_configuration(spec) is False
        assert "definitely-not-installed" in caplog.text

    def test_missing_env_file(self, app_dir):
        assert check_configuration(_spec(app_dir, env_file="nope.env")) is False

    def test_memory_ceiling_above_physical_memory_warns(self, app_dir, caplog):
        spec = _spec(app_dir, max_memory_restart="1G")
        with patch("launchspec.local.launch.psutil.virtual_memory", return_value=Mock(total=512 * 1024 ** 2)):
            with caplog.at_level(logging.WARNING):
                assert check_configuration(spec) is True
        assert "never trigger a restart" in caplog.text

    def test_cluster_oversubscription_warns(self, app_dir, caplog):
        spec = _spec(app_dir, execution_mode="cluster", instances=64)
        with patch("launchspec.local.launch.psutil.cpu_count", return_value=4):
            with caplog.at_level(logging.WARNING):
                assert check_configuration(spec) is True
        assert "64 cluster instances on 4 CPU(s)" in caplog.text
