import logging
from pathlib import Path
from typing import List, Optional

from launchspec.local import effective_settings as config
from launchspec.local.launch import build_launch_plan, check_configuration, resolve_environment
from launchspec.log import set_console_level
from launchspec.spec import ProcessLaunchSpec, load_file, write_file
from launchspec.spec.units import format_bytes, format_duration

log = logging.getLogger(__name__)


def _ecosystem_path(arg: Optional[str]) -> Path:
    """Returns the file named on the command line, or the configured default."""
    return Path(arg) if arg else Path(config.ECOSYSTEM_FILE)


def _find_app(specs: List[ProcessLaunchSpec], name: str) -> Optional[ProcessLaunchSpec]:
    for spec in specs:
        if spec.name == name:
            return spec
    return None


def handle_check_command(args: List[str]) -> bool:
    """
    Loads the ecosystem file and runs the configuration checks for every app.

    :param args: Optional ecosystem file path.
    :return: True if every app passed.
    """
    path = _ecosystem_path(args[0] if args else None)
    specs = load_file(path)
    results = {spec.name: check_configuration(spec) for spec in specs}

    print(f"\n--- Configuration Check: {path} ---")
    for name, ok in results.items():
        print(f"  - {name:<25} : {'OK' if ok else 'FAILED'}")
    print("-" * 26 + "\n")
    return all(results.values())


def display_specs(args: List[str]) -> None:
    """Prints every app in the ecosystem file with its resolved launch plan."""
    path = _ecosystem_path(args[0] if args else None)
    specs = load_file(path)

    print(f"\n--- Launch Specifications ({path}) ---")
    for spec in specs:
        plan = build_launch_plan(spec, inherit_env=False)
        policy = plan.restart_policy
        timeouts = plan.timeouts
        print(f"\n[{spec.name}]")
        print(f"  Command        : {' '.join(plan.argv)}")
        print(f"  Working dir    : {plan.cwd}")
        print(f"  Mode           : {plan.execution_mode.value} x {plan.instances}")
        print(f"  Env vars       : {', '.join(sorted(spec.env or {})) or '-'}")
        if spec.environment_names:
            print(f"  Environments   : {', '.join(spec.environment_names)}")
        if spec.env_file:
            print(f"  Env file       : {spec.env_file}")
        print(f"  Logs           : combined={plan.log_paths.combined or '-'} "
              f"out={plan.log_paths.stdout or '-'} err={plan.log_paths.stderr or '-'}")
        memory = format_bytes(policy.max_memory_bytes) if policy.max_memory_bytes is not None else "unlimited"
        print(f"  Restart policy : max {policy.max_restarts} restarts, "
              f"stable after {format_duration(policy.min_uptime_ms)}, memory ceiling {memory}")
        print(f"  Timeouts       : kill {format_duration(timeouts.kill_timeout_ms)}, "
              f"listen {format_duration(timeouts.listen_timeout_ms)}, wait_ready={timeouts.wait_ready}")
        print(f"  Watch          : {spec.watch if spec.watch is not None else False}")
        print(f"  Monitoring     : {bool(spec.monitoring)}")
    print()


def handle_export_command(args: List[str]) -> None:
    """Re-serialises the ecosystem file to a new JSON or YAML file."""
    if not args:
        print("Usage: export <OUTPUT_FILE> [ECOSYSTEM_FILE]")
        return
    specs = load_file(_ecosystem_path(args[1] if len(args) > 1 else None))
    output = write_file(specs, Path(args[0]))
    print(f"Exported {len(specs)} app(s) to '{output}'.")


def handle_env_command(args: List[str]) -> None:
    """Prints the resolved environment for one app, optionally with an overlay."""
    if not args:
        print("Usage: env <APP_NAME> [ENV_NAME] [ECOSYSTEM_FILE]")
        return

    app_name = args[0]
    env_name = args[1] if len(args) > 1 else (config.DEFAULT_ENV_NAME or None)
    specs = load_file(_ecosystem_path(args[2] if len(args) > 2 else None))

    spec = _find_app(specs, app_name)
    if spec is None:
        print(f"Error: no app named '{app_name}'. Available: {', '.join(s.name for s in specs)}")
        return

    env = resolve_environment(spec, env_name)
    label = f" ({env_name})" if env_name else ""
    print(f"\n--- Environment for '{app_name}'{label} ---")
    for key in sorted(env):
        print(f"  {key}={env[key]}")
    print()


def _config_show():
    """Displays the current modifiable settings."""
    print("\n--- Current Configuration ---")
    print(f"(Overrides file: {config.OVERRIDES_JSON_PATH})")
    for key, value in config.current_overrides().items():
        print(f"  {key} = {value}")
    print("---")
    print("Use 'config set <KEY> <VALUE>' to change a setting.")
    print("-----------------------------\n")


def _config_set(args: List[str]):
    """Sets and persists a modifiable setting."""
    if len(args) < 2:
        print("Usage: config set <SETTING_NAME> <VALUE>")
        return

    key, value_str = args[0].upper(), " ".join(args[1:])
    success, message = config.update_setting(key, value_str)
    if success:
        print(message)
    else:
        print(f"Error: {message}")


def _config_help():
    """Displays help for the config command."""
    print("\nConfig Command Help:")
    print("  config show                - Display all modifiable settings.")
    print("  config set KEY VALUE       - Change and persist a setting.")
    print("  config help                - Show this help message.")


def handle_config_command(args: List[str]) -> None:
    """
    Handles all sub-commands for the 'config' command-line interface.

    :param args: A list of string arguments following the 'config' command.
    """
    sub_command = args[0].lower() if args else "show"

    if sub_command == "show":
        _config_show()
    elif sub_command == "set":
        _config_set(args[1:])
    elif sub_command == "help":
        _config_help()
    else:
        print(f"Unknown config sub-command: '{sub_command}'. Type 'config help' for available commands.")


def toggle_verbose_logging() -> None:
    """Toggles verbose (DEBUG level) logging for the console handler."""
    config.VERBOSE_LOGGING = not config.VERBOSE_LOGGING
    set_console_level(logging.DEBUG if config.VERBOSE_LOGGING else logging.INFO)
    print(f"Verbose console logging is now {'ON' if config.VERBOSE_LOGGING else 'OFF'}.")
    log.debug("Debug logging test: This message should only appear when verbose is ON.")


def print_help():
    """Prints the main help text for the console."""
    print("\nAvailable commands:")
    print("  check [file]               - Validate the ecosystem file and check paths, commands and env files.")
    print("  show [file]                - Show every app with its restart policy, timeouts and log paths.")
    print("  export <out> [file]        - Re-serialise the ecosystem to a JSON or YAML file.")
    print("  env <app> [env] [file]     - Print the resolved environment of an app.")
    print("  config <cmd>               - Manage settings. Use 'config help' for more details.")
    print("  verbose                    - Toggle detailed DEBUG log output in the console.")
    print("  exit                       - Exit the management console.")
    print("Flags: --verbose, --strict (reject unknown keys)")
    print()
