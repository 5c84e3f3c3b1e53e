"""
This module contains the configuration settings for the launchspec tooling.
It defines paths, loader behaviour and logging options.
It is used throughout the package to ensure consistent settings and paths.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=False)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 't')


#* --- Core Paths ---
BASE_DIR = pathlib.Path(os.getenv("LAUNCHSPEC_HOME", pathlib.Path.cwd())).resolve()
LOGS_DIR = BASE_DIR / "logs"
LOG_FILE_PATH = LOGS_DIR / "launchspec.log"
OVERRIDES_JSON_PATH = BASE_DIR / "launchspec.overrides.json"

#* --- Ecosystem File ---
ECOSYSTEM_FILE = BASE_DIR / os.getenv("LAUNCHSPEC_FILE", "ecosystem.json")
SUPPORTED_SUFFIXES = {".json", ".yml", ".yaml"}

#* --- Loader Behaviour ---
# Strict mode rejects unknown keys instead of ignoring them with a warning.
STRICT_MODE = _env_flag("LAUNCHSPEC_STRICT", "False")
# Environment overlay applied by 'env' when none is given (e.g. 'production').
DEFAULT_ENV_NAME = os.getenv("LAUNCHSPEC_ENV", "")

#* --- Logging ---
LOG_TO_FILE = _env_flag("LAUNCHSPEC_LOG_TO_FILE", "False")
VERBOSE_LOGGING = False

#* --- MODIFIABLE SETTINGS (Changeable at runtime via 'config' command) ---
MODIFIABLE_SETTINGS = {
    "ECOSYSTEM_FILE",
    "STRICT_MODE",
    "DEFAULT_ENV_NAME",
    "LOG_TO_FILE",
}
