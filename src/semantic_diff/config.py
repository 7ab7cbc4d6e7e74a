"""Engine configuration loaded from YAML/JSON files."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional
import yaml
from dataclasses_json import dataclass_json

from .language_support import GRAMMAR_BY_LANGUAGE

STRATEGIES = ('hunk', 'symbol')


@dataclass_json
@dataclass
class EngineConfig:
    """Settings for the engine and the command line.

    Example (YAML)::

        default_strategy: hunk
        log_level: INFO
        extra_language_aliases:
          es6: js
          vue-ts: ts
    """

    default_strategy: str = 'hunk'
    extra_language_aliases: Dict[str, str] = field(default_factory=dict)  # tag -> parser-backed tag
    log_level: str = 'WARNING'

    def __post_init__(self):
        if self.default_strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown default_strategy {self.default_strategy!r}, expected one of {STRATEGIES}"
            )
        aliases = {}
        for alias, target in self.extra_language_aliases.items():
            if str(target).lower() not in GRAMMAR_BY_LANGUAGE:
                raise ValueError(f"Alias {alias!r} points to unsupported language {target!r}")
            aliases[str(alias).lower()] = str(target).lower()
        self.extra_language_aliases = aliases
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log_level {self.log_level!r}")
        self.log_level = self.log_level.upper()


def load_config(config_path: Optional[str] = None) -> EngineConfig:
    """Load configuration from a YAML or JSON file.

    Args:
        config_path: Path to the file, or None for defaults

    Returns:
        EngineConfig instance

    Raises:
        ValueError: If the file is not a mapping or holds invalid values
    """
    if not config_path:
        return EngineConfig()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    known = {key: value for key, value in data.items() if key in EngineConfig.__dataclass_fields__}
    return EngineConfig.from_dict(known)
