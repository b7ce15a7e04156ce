"""
JSON persistence of solver configurations.
"""

import dataclasses
import json
from pathlib import Path

from .solver import SolverConfig


class ConfigJSONEncoder(json.JSONEncoder):
    """JSON encoder that writes dataclasses as plain objects."""

    def default(self, o):
        if dataclasses.is_dataclass(o):
            return dataclasses.asdict(o)
        return super().default(o)


def save_config(config: SolverConfig, path) -> Path:
    """Write a configuration as JSON."""
    path = Path(path)
    with open(path, 'w') as f:
        json.dump(config, f, cls=ConfigJSONEncoder, indent=2)
    return path


def load_config(path, **overrides) -> SolverConfig:
    """
    Read a configuration from JSON.

    Keys missing from the file take their default values; overrides are
    applied on top of the file contents.

    Raises:
        ValueError: Unknown keys or invalid values
    """
    with open(Path(path)) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path}: configuration must be a JSON object")

    known = {field.name for field in dataclasses.fields(SolverConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"{path}: unknown configuration keys: {', '.join(sorted(unknown))}")

    data.update(overrides)
    return SolverConfig(**data)
