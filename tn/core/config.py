import json
from dataclasses import dataclass, fields
from enum import Enum
from tn.common.logger import log
from tn.common.setup import PATHS


#region === Settings types ===

SETTINGS_PATH = PATHS.data / "settings.json"

class ClockMode(Enum):
    TWELVE = 12
    TWENTY_FOUR = 24

    # Modulus applied when a range ends numerically before it starts.
    @property
    def wrap_seconds(self):
        return self.value * 3600

class Precision(Enum):
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"

# Everything a command needs to know about the annotation format. Built once per invocation and handed to
# every component explicitly, never mutated.
@dataclass(frozen=True)
class Settings:
    marker: str = "time:"
    separator: str = "-"
    continuation: str = "\\"
    wrap_column: int = 0
    clock_mode: ClockMode = ClockMode.TWENTY_FOUR
    precision: Precision = Precision.MINUTES
    tab_size: int = 4

    @property
    def wraps(self):
        return self.wrap_column > 0

#endregion === Settings types ===

#region === Loading Settings ===

_DEFAULTS = Settings()

# Each validator takes the raw json value and returns the converted value, or raises ValueError/TypeError when
# the value can't be used (which defaults it).
def _non_empty_text(value):
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"expected non-empty text, got {value!r}")
    return value

def _separator(value):
    value = _non_empty_text(value)
    if any(c.isspace() for c in value):
        raise ValueError(f"separator may not contain whitespace: {value!r}")
    return value

def _non_negative_int(value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise TypeError(f"expected a non-negative integer, got {value!r}")
    return value

def _positive_int(value):
    if _non_negative_int(value) == 0:
        raise ValueError("expected a positive integer")
    return value

def _clock_mode(value):
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    return ClockMode(value)

def _precision(value):
    if not isinstance(value, str):
        raise TypeError(f"expected precision name, got {value!r}")
    return Precision(value.strip().lower())

_VALIDATORS = {
    "marker": _non_empty_text,
    "separator": _separator,
    "continuation": _non_empty_text,
    "wrap_column": _non_negative_int,
    "clock_mode": _clock_mode,
    "precision": _precision,
    "tab_size": _positive_int,
}

# Converts a raw (json) dict into Settings. Missing or unusable keys fall back to defaults and are reported
# in the log.
def settings_from_dict(raw):
    values = {}
    defaulted_values = set()
    for field in fields(Settings):
        if field.name not in raw:
            defaulted_values.add(field.name)
            continue
        try:
            values[field.name] = _VALIDATORS[field.name](raw[field.name])
        except (TypeError, ValueError):
            log.warning(f"Invalid value for setting '{field.name}': {raw[field.name]!r}, using default.")
            defaulted_values.add(field.name)

    unknown = set(raw) - set(_VALIDATORS)
    if unknown:
        log.warning(f"Ignoring unknown settings: {', '.join(sorted(unknown))}")
    return Settings(**values), defaulted_values

# Loads Settings from the given json file (PATHS.data / settings.json by default). Never raises, a missing or
# broken file just means default settings.
def load_settings(path=None):
    path = path or SETTINGS_PATH
    if not path.exists():
        log.info(f"No settings file at '{path}', using default settings.")
        return _DEFAULTS
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise TypeError(f"settings file must hold a json object, got {type(raw).__name__}")
    except (json.JSONDecodeError, OSError, TypeError):
        log.warning(f"Ran into an error while reading '{path}', falling back to default settings.",exc_info=True)
        return _DEFAULTS

    settings, defaulted_values = settings_from_dict(raw)
    if defaulted_values:
        log.warning(f"Loaded settings from '{path}', but with missing values that were defaulted: {', '.join(sorted(defaulted_values))}")
    else:
        log.info(f"Successfully loaded settings from '{path}'.")
    return settings

#endregion === Loading Settings ===
