import logging
from typing import List

from launchspec.spec import LaunchSpecError
from launchspec.console.handler import (
    display_specs, handle_check_command, handle_config_command, handle_env_command,
    handle_export_command, print_help, toggle_verbose_logging,
)

log = logging.getLogger(__name__)


def execute_command(command: str, args: List[str]) -> bool:
    """
    Executes a single command from the user.

    Configuration and file errors are reported and the console carries on;
    they never end the session.

    :param command: The main command string (e.g., 'check', 'config').
    :param args: A list of arguments for the command.
    :return bool: True if the console should exit, False otherwise.
    """
    log.debug(f"Executing command: {command}, args: {args}")
    command_map = {
        "check": lambda: handle_check_command(args),
        "show": lambda: display_specs(args),
        "export": lambda: handle_export_command(args),
        "env": lambda: handle_env_command(args),
        "config": lambda: handle_config_command(args),
        "verbose": toggle_verbose_logging,
        "help": print_help,
        "exit": lambda: True,
    }

    if command not in command_map:
        log.info(f"Unknown command: '{command}'. Type 'help' for a list of commands.")
        return False

    try:
        result = command_map[command]()
    except FileNotFoundError as e:
        log.error(str(e))
        return False
    except LaunchSpecError as e:
        log.error(f"Invalid launch specification: {e}")
        return False
    except OSError as e:
        log.error(f"File operation failed: {e}")
        return False

    return command == "exit" and result is True
