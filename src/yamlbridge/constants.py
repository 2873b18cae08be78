# topmark:header:start
#
#   project      : YamlBridge
#   file         : constants.py
#   file_relpath : src/yamlbridge/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""YamlBridge Constants."""

from __future__ import annotations

from typing import Final

# Key under which a dataclass field carries its annotation in `field(metadata=...)`:
FIELD_METADATA_KEY: Final[str] = "yaml"

# Separator between the serialized name and the flag segment ("name,c"):
FLAG_SEPARATOR: Final[str] = ","

# Flag marking a field as conditional (omitted when zero):
FLAG_CONDITIONAL: Final[str] = "c"

# Core YAML tag prefix and its shorthand:
YAML_TAG_PREFIX: Final[str] = "tag:yaml.org,2002:"
YAML_TAG_SHORTHAND: Final[str] = "!!"

NULL_TAG: Final[str] = YAML_TAG_PREFIX + "null"

DEFAULT_FORMAT: Final[str] = "yaml"

# Environment variable consulted by `setup_logging()`:
LOG_LEVEL_ENV_VAR: Final[str] = "YAMLBRIDGE_LOG_LEVEL"
