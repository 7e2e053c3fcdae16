"""Reporter configuration and its YAML loader."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from jsonschema import Draft7Validator

DEFAULT_OUTPUT_DIR = Path("output")

CONFIG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "output_dir": {"type": "string", "minLength": 1},
    },
}

_validator = Draft7Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class ReporterConfig:
    """Where persisted reports are written."""

    output_dir: Path = DEFAULT_OUTPUT_DIR

    @classmethod
    def from_mapping(
        cls, data: Optional[Mapping[str, Any]], *, base: Optional[Path] = None
    ) -> "ReporterConfig":
        if not data:
            return cls()
        errors = sorted(_validator.iter_errors(dict(data)), key=lambda e: [str(part) for part in e.path])
        if errors:
            messages = "; ".join(
                f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors
            )
            raise ValueError(f"Config schema validation failed: {messages}")
        output_dir = Path(data.get("output_dir", DEFAULT_OUTPUT_DIR)).expanduser()
        if base is not None and not output_dir.is_absolute():
            output_dir = base / output_dir
        return cls(output_dir=output_dir)

    def with_output_dir(self, output_dir: Union[str, Path, None]) -> "ReporterConfig":
        if output_dir is None:
            return self
        return ReporterConfig(output_dir=Path(output_dir))


def load_config(path: Union[str, Path]) -> ReporterConfig:
    """Load a config file; relative ``output_dir`` resolves against the file's directory."""

    config_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError("Config file must contain a mapping at the top level")
    return ReporterConfig.from_mapping(raw, base=config_path.parent)
