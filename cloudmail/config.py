"""
Config system - Layered configuration with merge precedence.

Sources, later overriding earlier:
1. Config files (JSON / YAML)
2. ``.env`` file
3. Environment variables (``CLOUDMAIL_`` prefix, ``__`` separates levels)
4. Manual overrides (nested dict)
5. Property strings (``"cloud.aws.ses.enabled=false"``)

Keys are normalized on the way in: ``-`` becomes ``_`` so that
``source-arn`` and ``source_arn`` address the same value.
"""

from typing import Any, Dict, Iterable, Optional
from pathlib import Path
import os
import json

from dotenv import dotenv_values


class ConfigError(Exception):
    """Raised when configuration sources cannot be read or parsed."""
    pass


def normalize_key(key: str) -> str:
    """Normalize a single dotted key (``Source-Arn`` -> ``source_arn``)."""
    return key.strip().lower().replace("-", "_")


def parse_property(prop: str) -> tuple[str, str]:
    """
    Split a ``key=value`` or ``key:value`` property string.

    Whichever separator comes first wins, so
    ``cloud.aws.ses.endpoint:http://localhost:8090`` keeps the URL intact.
    """
    positions = [i for i in (prop.find("="), prop.find(":")) if i > 0]
    if not positions:
        raise ConfigError(f"Property {prop!r} is not of the form key=value")
    idx = min(positions)
    return prop[:idx].strip(), prop[idx + 1:].strip()


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Usage::

        config = ConfigLoader.load(
            paths=["config/app.yaml"],
            properties=["cloud.aws.region.static=eu-west-1"],
        )
        config.get("cloud.aws.region.static")  # "eu-west-1"
    """

    def __init__(self, env_prefix: str = "CLOUDMAIL_", data: Optional[Dict[str, Any]] = None):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}
        if data:
            self._merge_dict(self.config_data, self._normalize_dict(data))

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "CLOUDMAIL_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        properties: Optional[Iterable[str]] = None,
        use_environ: bool = True,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources with proper merge strategy.

        Args:
            paths: Config file paths (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Nested dict overrides
            properties: ``key=value`` strings (highest precedence)
            use_environ: Read ``os.environ`` (disabled by the test runner)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        if use_environ:
            loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, loader._normalize_dict(overrides))

        for prop in properties or []:
            key, value = parse_property(prop)
            loader.set(key, loader._parse_value(value))

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        from glob import glob

        matches = glob(pattern)
        if not matches and not any(ch in pattern for ch in "*?["):
            raise ConfigError(f"Config file not found: {pattern}")

        for path_str in sorted(matches):
            path = Path(path_str)
            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)
            else:
                raise ConfigError(f"Unsupported config file type: {path}")

    def _load_json_file(self, path: Path):
        """Load config from JSON file."""
        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Invalid JSON in {path}: {e}") from e
        if data:
            self._merge_dict(self.config_data, self._normalize_dict(data))

    def _load_yaml_file(self, path: Path):
        """Load config from YAML file."""
        import yaml
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if data:
            self._merge_dict(self.config_data, self._normalize_dict(data))

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        env_path = Path(path)
        if not env_path.exists():
            raise ConfigError(f"Env file not found: {path}")

        for key, value in dotenv_values(env_path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_from_env(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_from_env(key, value)

    def _set_from_env(self, key: str, value: str):
        """Convert CLOUDMAIL_CLOUD__AWS__SES__ENABLED to cloud.aws.ses.enabled."""
        key = key[len(self.env_prefix):]
        self.set(".".join(key.split("__")), self._parse_value(value))

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        # JSON
        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _normalize_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize keys recursively; dotted keys are expanded to nesting."""
        result: Dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, dict):
                value = self._normalize_dict(value)
            parts = [normalize_key(p) for p in str(key).split(".")]
            nested: Any = value
            for part in reversed(parts[1:]):
                nested = {part: nested}
            self._merge_dict(result, {parts[0]: nested})
        return result

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def set(self, path: str, value: Any) -> None:
        """Set a value by dot-separated path."""
        parts = [normalize_key(p) for p in path.split(".")]
        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current: Any = self.config_data

        for part in path.split("."):
            part = normalize_key(part)
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def section(self, path: str) -> Dict[str, Any]:
        """Get a nested section as a dict (empty when absent)."""
        value = self.get(path, {})
        return value if isinstance(value, dict) else {}

    def to_dict(self) -> dict:
        """Export all config as dictionary."""
        return json.loads(json.dumps(self.config_data, default=str))
