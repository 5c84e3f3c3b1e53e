"""
Pytest fixtures for launchspec tests
"""
import json
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from launchspec.local.config import effective_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the settings singleton at a temp directory and reset loader flags."""
    monkeypatch.setattr(effective_settings, "BASE_DIR", tmp_path)
    monkeypatch.setattr(effective_settings, "STRICT_MODE", False)
    monkeypatch.setattr(effective_settings, "DEFAULT_ENV_NAME", "")
    monkeypatch.setattr(effective_settings, "ECOSYSTEM_FILE", tmp_path / "ecosystem.json")
    monkeypatch.setattr(effective_settings, "OVERRIDES_JSON_PATH", tmp_path / "overrides.json")
    monkeypatch.setattr(effective_settings, "VERBOSE_LOGGING", False)
    return effective_settings


@pytest.fixture
def canonical_record():
    """The minimal record from the loader contract, using canonical keys."""
    return {
        "name": "app",
        "command": "npm",
        "args": ["run", "start"],
        "instances": 1,
        "execution_mode": "fork",
    }


@pytest.fixture
def pm2_record():
    """A full record spelled the way a PM2 ecosystem file spells it."""
    return {
        "name": "nextjs-template",
        "script": "npm",
        "args": "run start",
        "cwd": "/home/deploy/app/nextjs_template/scripts/myapp",
        "instances": 1,
        "exec_mode": "fork",
        "env": {"NODE_ENV": "production", "PORT": 3000},
        "env_file": ".env.production",
        "log_file": "logs/app.log",
        "out_file": "logs/out.log",
        "error_file": "logs/error.log",
        "log_date_format": "YYYY-MM-DD HH:mm:ss Z",
        "watch": False,
        "max_restarts": 10,
        "min_uptime": "10s",
        "max_memory_restart": "500M",
        "kill_timeout": 5000,
        "wait_ready": True,
        "listen_timeout": 10000,
        "monitoring": True,
    }


@pytest.fixture
def write_ecosystem(tmp_path):
    """Writes an ecosystem document as JSON and returns its path."""
    def _write(document, name="ecosystem.json"):
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write
