import os
import shutil
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import psutil
from dotenv import dotenv_values

from launchspec.local.config import effective_settings as config
from launchspec.spec import ExecutionMode, LogPaths, ProcessLaunchSpec, RestartPolicy, Timeouts, ValidationError
from launchspec.spec.units import format_bytes

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchPlan:
    """Everything an external supervisor needs to start one app, fully resolved."""
    name: str
    argv: List[str]
    cwd: Path
    env: Dict[str, str]
    instances: int
    execution_mode: ExecutionMode
    log_paths: LogPaths
    restart_policy: RestartPolicy
    timeouts: Timeouts


#* --- Path Resolution ---
def get_working_directory(spec: ProcessLaunchSpec) -> Path:
    """
    Returns the execution root for a spec.

    A relative `cwd` is anchored at BASE_DIR; an unset `cwd` means BASE_DIR itself.
    """
    if not spec.cwd:
        return Path(config.BASE_DIR)
    cwd = Path(spec.cwd).expanduser()
    return cwd if cwd.is_absolute() else Path(config.BASE_DIR) / cwd


def _anchor(path_str: str, base_dir: Path) -> Path:
    path = Path(path_str).expanduser()
    return path if path.is_absolute() else base_dir / path


def get_executable_path(command: str, cwd: Path) -> Optional[Path]:
    """
    Resolves the command to an executable path.

    Bare names are looked up on PATH; anything containing a path separator is
    resolved relative to `cwd`.

    :return: The resolved path, or None if it cannot be found.
    """
    if os.sep in command or (os.altsep and os.altsep in command):
        candidate = _anchor(command, cwd)
        return candidate if candidate.exists() else None
    found = shutil.which(command)
    return Path(found) if found else None


#* --- Environment ---
def resolve_environment(
    spec: ProcessLaunchSpec,
    env_name: Optional[str] = None,
    base_env: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Builds the environment a process would be started with.

    Precedence, lowest first: `base_env`, the dotenv `env_file`, `env`, and
    finally the `env_<env_name>` overlay.

    :param spec: The launch specification.
    :param env_name: Optional overlay name (e.g. 'production').
    :param base_env: Inherited environment, usually os.environ.
    :return: A new dict of variables.
    :raises ValidationError: If `env_name` names an overlay the spec does not define.
    """
    env: Dict[str, str] = dict(base_env or {})

    if spec.env_file:
        env_file = _anchor(spec.env_file, get_working_directory(spec))
        if env_file.is_file():
            file_values = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
            env.update(file_values)
            log.debug(f"Loaded {len(file_values)} variable(s) for '{spec.name}' from {env_file}")
        else:
            log.warning(f"Env file for '{spec.name}' not found at '{env_file}'. Skipping.")

    env.update(spec.env or {})

    if env_name:
        overlays = spec.env_overlays or {}
        if env_name not in overlays:
            available = ", ".join(spec.environment_names) or "none"
            raise ValidationError(
                f"env_{env_name}",
                f"app '{spec.name}' defines no environment '{env_name}' (available: {available})"
            )
        env.update(overlays[env_name])

    return env


#* --- Launch Plan ---
def build_launch_plan(
    spec: ProcessLaunchSpec,
    env_name: Optional[str] = None,
    inherit_env: bool = True,
) -> LaunchPlan:
    """
    Resolves a spec into the concrete values a supervisor would launch with.

    :param spec: The launch specification.
    :param env_name: Optional environment overlay to apply.
    :param inherit_env: Start from the current process environment.
    :return: The resolved LaunchPlan. Nothing is started.
    """
    cwd = get_working_directory(spec)
    env = resolve_environment(spec, env_name, os.environ if inherit_env else None)
    return LaunchPlan(
        name=spec.name,
        argv=list(spec.argv),
        cwd=cwd,
        env=env,
        instances=spec.instance_count,
        execution_mode=spec.mode,
        log_paths=spec.log_paths.resolve(cwd),
        restart_policy=spec.restart_policy,
        timeouts=spec.timeouts,
    )


#* --- Configuration Checks ---
def _check_log_destination(path: Path) -> bool:
    """A log path is usable if its nearest existing ancestor directory is writable."""
    parent = path.parent
    while not parent.exists() and parent != parent.parent:
        parent = parent.parent
    return parent.is_dir() and os.access(parent, os.W_OK)


def check_configuration(spec: ProcessLaunchSpec) -> bool:
    """
    Validates that a spec can actually be applied on this machine.

    Checks the working directory, the executable, the env file and the log
    destinations. Resource limits that look unreasonable are reported as
    warnings only.

    :return: True if all required checks pass, otherwise False.
    """
    log.info(f"Performing configuration and path validation for '{spec.name}'...")
    all_ok = True
    cwd = get_working_directory(spec)

    if cwd.is_dir():
        log.info(f"Config Check OK: Working directory '{cwd}' exists")
    else:
        log.error(f"CONFIG CHECK FAILED: working directory not found at '{cwd}'")
        all_ok = False

    executable = get_executable_path(spec.command, cwd)
    if executable is None:
        log.error(f"CONFIG CHECK FAILED: command '{spec.command}' not found on PATH or in '{cwd}'")
        all_ok = False
    else:
        log.info(f"Config Check OK: Found '{spec.command}' at '{executable}'")

    if spec.env_file:
        env_file = _anchor(spec.env_file, cwd)
        if env_file.is_file():
            log.info(f"Config Check OK: Found env file at '{env_file}'")
        else:
            log.error(f"CONFIG CHECK FAILED: env file not found at '{env_file}'")
            all_ok = False

    for label, path_str in spec.log_paths.as_dict().items():
        if path_str is None:
            continue
        path = _anchor(path_str, cwd)
        if _check_log_destination(path):
            log.info(f"Config Check OK: {label} log '{path}' is writable")
        else:
            log.error(f"CONFIG CHECK FAILED: {label} log '{path}' is not writable")
            all_ok = False

    ceiling = spec.restart_policy.max_memory_bytes
    if ceiling is not None:
        total = psutil.virtual_memory().total
        if ceiling >= total:
            log.warning(
                f"Memory ceiling {format_bytes(ceiling)} for '{spec.name}' is not below "
                f"physical memory ({format_bytes(total)}); it will never trigger a restart."
            )

    cpus = psutil.cpu_count(logical=True) or 1
    if spec.mode is ExecutionMode.CLUSTER and spec.instance_count > cpus:
        log.warning(f"'{spec.name}' requests {spec.instance_count} cluster instances on {cpus} CPU(s).")

    return all_ok
