"""Configuration for the gittuf policy visualizer backend."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

from .errors import InvalidInputError

POLICY_REF = "refs/gittuf/policy"


@dataclass(slots=True)
class VisualizerConfig:
    """Runtime configuration passed explicitly into the service layer.

    Attributes
    ----------
    base_dir:
        Directory holding the optional ``config.json``. Defaults to
        ``~/.gittufviz``.
    policy_ref:
        Reference walked when listing commits of a remote repository and
        fetched after every clone.
    local_ref:
        Reference walked when listing commits of a local repository.
    metadata_dir:
        Directory inside the policy tree that holds the metadata files. File
        names given to the metadata operations are resolved relative to it.
    clone_timeout:
        Upper bound in seconds for each clone or fetch. ``None`` leaves git
        unbounded.
    temp_dir:
        Parent directory for temporary clones. ``None`` uses the system
        temporary directory.
    temp_prefix:
        Prefix of every temporary clone directory.
    log_level:
        Level handed to :func:`gittufviz.logs.configure_logging` by the CLI.
    """

    base_dir: Path = field(default_factory=lambda: Path.home() / ".gittufviz")
    policy_ref: str = POLICY_REF
    local_ref: str = "HEAD"
    metadata_dir: str = "metadata"
    clone_timeout: float | None = None
    temp_dir: Path | None = None
    temp_prefix: str = "gittuf-viz-"
    log_level: str = "INFO"

    def config_path(self) -> Path:
        """Return the default location of the JSON configuration file."""
        return self.base_dir / "config.json"

    def metadata_path(self, file_name: str) -> str:
        """Join ``file_name`` onto the metadata directory using ``/``."""
        prefix = self.metadata_dir.strip("/")
        name = file_name.lstrip("/")
        return f"{prefix}/{name}" if prefix else name

    @classmethod
    def load(cls, path: Path | None = None) -> "VisualizerConfig":
        """Load configuration from a JSON file.

        Missing files yield the defaults. Unknown keys are ignored so that
        older binaries keep working against newer files.

        Raises
        ------
        InvalidInputError:
            If the file exists but is not a JSON object.
        """
        config = cls()
        target = path or config.config_path()
        if not target.exists():
            return config

        try:
            with open(target, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            raise InvalidInputError(f"Cannot read configuration {target}", str(exc)) from exc

        if not isinstance(raw, dict):
            raise InvalidInputError(f"Configuration {target} must be a JSON object")

        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "VisualizerConfig":
        """Build a configuration from decoded JSON, checking value types.

        Raises
        ------
        InvalidInputError:
            If a known key holds a value of the wrong type.
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in raw.items() if key in known}
        for key in ("base_dir", "temp_dir"):
            if values.get(key) is None:
                continue
            if not isinstance(values[key], str) or not values[key]:
                raise InvalidInputError(f"Configuration {key} must be a path string")
            values[key] = Path(values[key]).expanduser()
        if values.get("base_dir") is None:
            values.pop("base_dir", None)
        for key in _STRING_FIELDS:
            if key in values and not isinstance(values[key], str):
                raise InvalidInputError(
                    f"Configuration {key} must be a string",
                    f"got {type(values[key]).__name__}",
                )
        if "clone_timeout" in values:
            values["clone_timeout"] = _timeout(values["clone_timeout"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["base_dir"] = str(self.base_dir)
        data["temp_dir"] = str(self.temp_dir) if self.temp_dir else None
        return data

    def save(self, path: Path | None = None) -> Path:
        """Write the configuration as JSON and return the file written."""
        target = path or self.config_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        return target


_STRING_FIELDS = ("policy_ref", "local_ref", "metadata_dir", "temp_prefix", "log_level")


def _timeout(value: Any) -> float | None:
    """Coerce a configured timeout to positive seconds, or ``None``."""
    if value is None:
        return None
    # bool is an int subclass; ``true`` is not a number of seconds.
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidInputError(
            "Configuration clone_timeout must be a number of seconds",
            f"got {type(value).__name__}",
        )
    try:
        seconds = float(value)
    except ValueError as exc:
        raise InvalidInputError(
            "Configuration clone_timeout must be a number of seconds", str(exc)
        ) from exc
    if not seconds > 0 or seconds == float("inf"):
        raise InvalidInputError(
            "Configuration clone_timeout must be positive", f"got {value!r}"
        )
    return seconds


DEFAULT_CONFIG = VisualizerConfig()
