import json
import logging
from pathlib import Path
from typing import Dict, Any, Tuple

import launchspec.settings as default_settings

log = logging.getLogger(__name__)


class MergedSettings:
    """
    A singleton class that merges default settings with JSON/env overrides.

    This class provides a unified, attribute-based access point for all
    launchspec configuration. It follows a clear precedence:
    1. Base values from `settings.py`.
    2. Overrides from `.env` file (handled by `python-dotenv` in settings.py).
    3. Overrides from the overrides JSON file for settings in `MODIFIABLE_SETTINGS`.
    """

    def __init__(self, overrides_path: Path = None) -> None:
        """Initializes the settings object by loading defaults and overrides."""
        self._load_defaults()
        if overrides_path is not None:
            self.OVERRIDES_JSON_PATH = Path(overrides_path)
        self._load_overrides()

    def _load_defaults(self) -> None:
        """
        Loads all uppercase attributes from the settings.py module as defaults.
        """
        for key in dir(default_settings):
            if key.isupper():
                setattr(self, key, getattr(default_settings, key))

    def _coerce(self, key: str, value: Any) -> Any:
        """
        Coerces a raw override value to the type of the default it replaces.

        :raises ValueError: If the value cannot be converted.
        """
        original_value = getattr(default_settings, key, None)
        if isinstance(original_value, bool):
            if isinstance(value, bool):
                return value
            return str(value).lower() in ('true', '1', 't', 'yes', 'y')
        if isinstance(original_value, Path):
            # Relative paths are anchored at BASE_DIR, like the defaults in settings.py.
            path = Path(value).expanduser()
            return path if path.is_absolute() else Path(self.BASE_DIR) / path
        if original_value is not None:
            return type(original_value)(value)
        return value

    def _load_overrides(self) -> None:
        """
        Loads and applies settings from the overrides JSON file.

        It will only apply overrides for keys that are explicitly listed in
        the `MODIFIABLE_SETTINGS` set in `settings.py`.
        """
        if not self.OVERRIDES_JSON_PATH.exists():
            return

        try:
            with self.OVERRIDES_JSON_PATH.open('r') as f:
                overrides = json.load(f)

            log.info(f"Loading configuration overrides from {self.OVERRIDES_JSON_PATH}")
            for key, value in overrides.items():
                if hasattr(self, key):
                    if key not in self.MODIFIABLE_SETTINGS:
                        log.warning(
                            f"Attempted to override non-modifiable setting '{key}'. Ignoring."
                        )
                        continue
                    setattr(self, key, self._coerce(key, value))
                    log.debug(f"Overridden setting: {key} = {value}")
                else:
                    log.warning(f"Override setting '{key}' not found in default settings. Ignoring.")
        except (json.JSONDecodeError, IOError, ValueError, TypeError) as e:
            log.error(
                f"Failed to load or parse overrides file '{self.OVERRIDES_JSON_PATH}': {e}"
            )

    def current_overrides(self) -> Dict[str, Any]:
        """Returns the modifiable settings as JSON-serialisable values."""
        return {
            key: str(getattr(self, key)) if isinstance(getattr(self, key), Path) else getattr(self, key)
            for key in sorted(self.MODIFIABLE_SETTINGS)
        }

    def save_overrides(self, overrides_to_save: Dict[str, Any]) -> None:
        """
        Saves the provided dictionary of settings to the overrides JSON file.

        The dictionary is filtered so that only keys present in
        `MODIFIABLE_SETTINGS` are persisted.

        :param overrides_to_save: A dictionary of settings to persist.
        """
        filtered_overrides = {
            key: str(value) if isinstance(value, Path) else value
            for key, value in overrides_to_save.items()
            if key in self.MODIFIABLE_SETTINGS
        }

        if not filtered_overrides:
            log.warning("No modifiable settings provided to save.")
            return

        try:
            self.OVERRIDES_JSON_PATH.parent.mkdir(parents=True, exist_ok=True)
            with self.OVERRIDES_JSON_PATH.open('w') as f:
                json.dump(filtered_overrides, f, indent=4)
            log.info(
                f"Configuration overrides saved to {self.OVERRIDES_JSON_PATH}"
            )
        except IOError as e:
            log.error(
                f"Failed to write to overrides file '{self.OVERRIDES_JSON_PATH}': {e}"
            )

    def update_setting(self, key: str, value: Any) -> Tuple[bool, str]:
        """
        Updates a single modifiable setting in memory and persists it.

        :param key: The setting name (case-insensitive).
        :param value: The raw new value, coerced to the default's type.
        :return: A (success, message) tuple.
        """
        key = key.upper()
        if key not in self.MODIFIABLE_SETTINGS:
            message = f"Setting '{key}' is not modifiable."
            log.warning(f"Rejected config update: {message}")
            return False, message

        try:
            new_value = self._coerce(key, value)
        except (ValueError, TypeError) as e:
            message = f"Could not convert value '{value}' for key '{key}'. Error: {e}"
            log.error(f"Config update failed: {message}")
            return False, message

        setattr(self, key, new_value)
        self.save_overrides(self.current_overrides())
        message = f"Setting '{key}' updated to '{new_value}'."
        log.info(message)
        return True, message


# Create a singleton instance to be imported by other modules
effective_settings = MergedSettings()
