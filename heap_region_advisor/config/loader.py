"""Configuration file loading.

Settings are read from a YAML file (see ``config.yaml.example``); command line
flags override file values.
"""
import dataclasses
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any
from typing import Dict
from typing import Optional

import yaml


@dataclass(frozen=True)
class AdvisorConfig:
    base_url: str = field(default="http://localhost:7070")
    member_name: Optional[str] = field(default=None)
    profile: str = field(default="summary")
    top_k: Optional[int] = field(default=None)
    target_sample_budget: Optional[int] = field(default=None)
    max_workers: int = field(default=1)
    estimator: str = field(default="deep")
    sink_path: Optional[str] = field(default=None)
    log_path: Optional[str] = field(default=None)
    verify_ssl: bool = field(default=True)
    timeout: int = field(default=10)

    def with_overrides(self, **overrides: Any) -> "AdvisorConfig":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **values)


def load_config(path: Optional[str] = None) -> AdvisorConfig:
    """Load settings from a YAML file, or defaults when no path is given."""
    if not path:
        return AdvisorConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    known = {f.name for f in dataclasses.fields(AdvisorConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")
    return AdvisorConfig(**data)
