# uiauto_web/repository.py
from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft202012Validator

from uiauto_web.exceptions import ConfigError
from uiauto_web.steps import Strategy, parse_strategy

log = logging.getLogger(__name__)

FALLBACK_STRATEGY = "general_interactive"

DEFAULT_SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "strategies.schema.json")

SETTINGS_KEYS = ("timing_settings", "screenshot_settings", "error_handling")


def default_strategy_data() -> Dict[str, Any]:
    return {
        "description": "Default generic interaction test",
        "file_patterns": [],
        "test_sequences": [],
    }


class StrategyRepository:
    """
    Loads test-strategies.json (or .yaml). Provides access to strategies,
    the element selector table and run settings.
    """

    def __init__(self, path: str, schema_path: Optional[str] = None):
        self.path = os.path.abspath(path)
        self.schema_path = os.path.abspath(schema_path or DEFAULT_SCHEMA_PATH)
        self.is_fallback = False
        raw = self._load_file(self.path)
        self._validate_schema(raw, self.schema_path)
        self._init_from(raw)

    @classmethod
    def load(cls, path: str, schema_path: Optional[str] = None) -> StrategyRepository:
        """
        Lenient loader: on any read/parse/validation failure the built-in
        default strategy is used instead. Never raises.
        """
        try:
            repo = cls(path, schema_path=schema_path)
        except (ConfigError, OSError) as e:
            log.error("Could not load strategy file %s: %s", path, e)
            repo = cls.default()
            repo.path = os.path.abspath(path)
            return repo
        log.info(
            "Loaded strategy file %s (%d strategies, %d element roles)",
            repo.path, len(repo.list_strategies()), len(repo.element_selectors),
        )
        return repo

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        source: str = "<memory>",
        schema_path: Optional[str] = None,
    ) -> StrategyRepository:
        repo = cls.__new__(cls)
        repo.path = source
        repo.schema_path = os.path.abspath(schema_path or DEFAULT_SCHEMA_PATH)
        repo.is_fallback = False
        cls._validate_schema(data, repo.schema_path)
        repo._init_from(data)
        return repo

    @classmethod
    def default(cls) -> StrategyRepository:
        repo = cls.from_dict({"test_strategies": {FALLBACK_STRATEGY: default_strategy_data()}}, source="<default>")
        repo.is_fallback = True
        return repo

    @staticmethod
    def _load_file(path: str) -> Dict[str, Any]:
        if not os.path.exists(path):
            raise ConfigError(f"Strategy file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.lower().endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Strategy file must be a mapping at root.")
        return data

    @staticmethod
    def _validate_schema(data: Dict[str, Any], schema_path: str) -> None:
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
        errors = sorted(Draft202012Validator(schema).iter_errors(data), key=lambda e: list(e.path))
        if errors:
            lines = ["Strategy file schema validation failed:"]
            for e in errors:
                lines.append(f"- {list(e.path)}: {e.message}")
            raise ConfigError("\n".join(lines))

    def _init_from(self, raw: Dict[str, Any]) -> None:
        self._raw = raw
        self._strategies: Dict[str, Strategy] = {}
        for name, entry in (raw.get("test_strategies") or {}).items():
            self._strategies[name] = parse_strategy(name, entry)
        if FALLBACK_STRATEGY not in self._strategies:
            self._strategies[FALLBACK_STRATEGY] = parse_strategy(FALLBACK_STRATEGY, default_strategy_data())

        self._selectors: Dict[str, List[str]] = {
            role: list(sels) for role, sels in (raw.get("element_selectors") or {}).items()
        }
        self._settings = {key: dict(raw.get(key) or {}) for key in SETTINGS_KEYS}
        self._edge_cases = dict(raw.get("edge_cases") or {})

    @property
    def strategies(self) -> Dict[str, Strategy]:
        return dict(self._strategies)

    @property
    def element_selectors(self) -> Dict[str, List[str]]:
        return {role: list(sels) for role, sels in self._selectors.items()}

    @property
    def settings(self) -> Dict[str, Dict[str, Any]]:
        return {key: dict(value) for key, value in self._settings.items()}

    @property
    def edge_cases(self) -> Dict[str, Any]:
        return dict(self._edge_cases)

    def has_strategy(self, name: str) -> bool:
        return name in self._strategies

    def get_strategy(self, name: str) -> Strategy:
        if name not in self._strategies:
            raise ConfigError(f"Unknown strategy: {name}")
        return self._strategies[name]

    def selectors_for(self, role: str) -> List[str]:
        return list(self._selectors.get(role, []))

    def list_strategies(self) -> List[str]:
        """Strategy names in file order (the detection order)."""
        return list(self._strategies.keys())

    def list_roles(self) -> List[str]:
        return sorted(self._selectors.keys())
