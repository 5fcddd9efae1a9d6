"""
Inkwell configuration management (YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

import jsonschema
import yaml

from inkwell.core.exceptions import ConfigError
from inkwell.data import get_data_path, read_yaml

from .merge import deep_merge

logger = logging.getLogger(__name__)

ENV_PREFIX = "INKWELL_"
PROJECT_FILES = ("inkwell.yaml", "inkwell.yml")


class ConfigManager:
    """Load, merge, and validate Inkwell configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: INKWELL_<SECTION>__<KEY>
    2. Project config: explicit ``config_path``, else ./inkwell.yaml or ./inkwell.yml
    3. Bundled defaults: inkwell.data/config/defaults.yaml
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        *,
        base_dir: Optional[Path] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> None:
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.explicit_path = Path(config_path) if config_path is not None else None
        self.environ = environ if environ is not None else os.environ
        self.defaults_path = get_data_path("config", "defaults.yaml")

    @property
    def project_path(self) -> Optional[Path]:
        """The project config file in effect, if any."""
        if self.explicit_path is not None:
            path = self.explicit_path
            return path if path.is_absolute() else self.base_dir / path
        for name in PROJECT_FILES:
            candidate = self.base_dir / name
            if candidate.is_file():
                return candidate
        return None

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigError(
                f"Config file not found: {path}", context={"path": str(path)}
            ) from exc
        except yaml.YAMLError as exc:
            raise ConfigError(
                f"Invalid YAML in {path}: {exc}", context={"path": str(path)}
            ) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {path}",
                context={"path": str(path), "type": type(data).__name__},
            )
        return data

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            raise ConfigError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'",
                context={"key": ENV_PREFIX + raw},
            )
        return [seg.lower() for seg in segs]

    def _schema_types(self, path: List[str]) -> Set[str]:
        """JSON types the config schema declares for ``path`` (empty if undeclared)."""
        node: Any = read_yaml("schemas", "config.yaml")
        for part in path:
            props = node.get("properties") if isinstance(node, dict) else None
            if not isinstance(props, dict) or part not in props:
                return set()
            node = props[part]
        declared = node.get("type") if isinstance(node, dict) else None
        if isinstance(declared, str):
            return {declared}
        return set(declared or [])

    def _coerce_for(self, path: List[str], value: str) -> Any:
        # String-typed settings keep the raw text, so "2024" stays a path.
        types = self._schema_types(path)
        if types and types <= {"string", "null"}:
            return value.strip()
        return self._coerce_type(value)

    def iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                continue
            path = self._parse_env_key(raw)
            yield path, self._coerce_for(path, self.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        current = root
        for part in path[:-1]:
            nxt = current.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                current[part] = nxt
            current = nxt
        current[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self.iter_env_overrides():
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, value)

    # ========== Loading ==========

    def validate_schema(self, config: Dict[str, Any]) -> None:
        """Validate ``config`` against the bundled config schema.

        Raises:
            ConfigError: With every violation listed in ``context["errors"]``.
        """
        schema = read_yaml("schemas", "config.yaml")
        validator = jsonschema.Draft202012Validator(schema)
        errors: List[str] = []
        for error in sorted(validator.iter_errors(config), key=lambda e: str(e.path)):
            if error.path:
                path_str = ".".join(str(p) for p in error.path)
                errors.append(f"{path_str}: {error.message}")
            else:
                errors.append(error.message)
        if errors:
            raise ConfigError(
                "Configuration failed validation: " + "; ".join(errors),
                context={"errors": errors},
            )

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from every source.

        Args:
            validate: If True, validate against the bundled JSON schema

        Returns:
            Merged configuration dictionary
        """
        # Layer 1: bundled defaults
        cfg = deep_merge({}, self.load_yaml(self.defaults_path))

        # Layer 2: project file
        project = self.project_path
        if project is not None:
            logger.debug("Loading project config %s", project)
            cfg = deep_merge(cfg, self.load_yaml(project))

        # Layer 3: environment
        self.apply_env_overrides(cfg)

        if validate:
            self.validate_schema(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get("engine.dev_mode")
            False
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "ENV_PREFIX"]
