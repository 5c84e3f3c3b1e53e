import sys
import logging

# Basic console logger for messages BEFORE full setup is complete.
# This logger will be replaced by the full setup later.
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)-8s - [console] - %(message)s',
    stream=sys.stdout
)
log = logging.getLogger("console")

import launchspec.console as console
from launchspec.local import effective_settings as config
from launchspec.log import setup_logging


def _apply_flags(args):
    """Strips the global flags out of `args` and applies them."""
    if "--verbose" in args:
        args.remove("--verbose")
        console.toggle_verbose_logging()
    if "--strict" in args:
        args.remove("--strict")
        config.STRICT_MODE = True
        log.debug("Strict mode enabled: unknown keys will be rejected.")
    return args


def main() -> None:
    """The main entry point for the console application."""
    setup_logging(logging.INFO)

    # Non-interactive mode for one-off commands
    if len(sys.argv) > 1:
        args = _apply_flags(sys.argv[1:])
        if not args:
            console.print_help()
            return
        command, args = args[0].lower(), args[1:]
        try:
            console.execute_command(command, args)
        except Exception as e:
            log.error(f"An unexpected error occurred while running '{command}': {e}", exc_info=True)
        return

    # Interactive mode
    print("--- Launch Specification Console ---")
    print("Type 'help' for a list of commands.")
    print(f"Ecosystem file: {config.ECOSYSTEM_FILE}")
    while True:
        try:
            command_line_str = input("> ")
            if not command_line_str.strip():
                continue
            command_line = _apply_flags(command_line_str.strip().split())
            if not command_line:
                continue

            command, args = command_line[0].lower(), command_line[1:]
            log.debug(f"Received command: {command}, args: {args}")

            if console.execute_command(command, args):
                break

        except (KeyboardInterrupt, EOFError):
            log.warning("Exiting console.")
            break
        except Exception as e:
            log.error(f"An unexpected error occurred in the console: {e}", exc_info=True)


if __name__ == "__main__":
    main()
