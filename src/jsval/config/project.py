"""Project Configuration for jsval-gen

Manages .jsval/config.json settings for the names used in generated code.
"""

import json
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from jsval.core.errors import ConfigError, StructuredError
from jsval.generators.program import GeneratorOptions


# Error codes
# CFG-001: Config does not match config.schema.json
# CFG-002: Config file is not valid JSON

SCHEMA_FILE = Path(__file__).parent.parent / "schemas" / "config.schema.json"


class ProjectConfig:
    """Manages project configuration for jsval-gen"""

    DEFAULT_CONFIG = {
        "prefix": "jsval",
        "table_name": "M",
        "reference_prefix": "R",
        "validator_prefix": "V",
        "init_function": "_init",
        "formatter": "ast",
        "output": None,
    }

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir or Path.cwd()
        self.config_dir = self.base_dir / ".jsval"
        self.config_file = self.config_dir / "config.json"

    def exists(self) -> bool:
        """Check if config file exists"""
        return self.config_file.exists()

    def load(self, overrides: dict[str, Any] | None = None) -> dict:
        """Load config merged over defaults, then validate it"""
        merged = self.DEFAULT_CONFIG.copy()

        if self.config_file.exists():
            with open(self.config_file) as f:
                try:
                    config = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigError([StructuredError(
                        path=str(self.config_file),
                        code="CFG-002",
                        message=f"Invalid JSON: {e}",
                    )]) from e
            if not isinstance(config, dict):
                raise ConfigError([StructuredError(
                    path="root",
                    code="CFG-001",
                    message="Config must be a JSON object",
                    expected="object",
                    actual=type(config).__name__,
                )])
            merged.update(config)

        if overrides:
            merged.update({k: v for k, v in overrides.items() if v is not None})

        self.validate(merged)
        return merged

    def validate(self, config: dict) -> None:
        """Validate config against config.schema.json"""
        with open(SCHEMA_FILE) as f:
            schema = json.load(f)

        validator = Draft202012Validator(schema)
        errors = []
        for error in sorted(validator.iter_errors(config), key=lambda e: list(map(str, e.absolute_path))):
            path = ".".join(str(p) for p in error.absolute_path)
            errors.append(StructuredError(
                path=path or "root",
                code="CFG-001",
                message=error.message,
                actual=error.instance,
            ))
        if errors:
            raise ConfigError(errors)

    def save(self, config: dict) -> None:
        """Save config to file"""
        self.validate(config)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            json.dump(config, f, indent=2, ensure_ascii=False)

    def init(self, prefix: str = "jsval", formatter: str = "ast", output: str | None = None) -> dict:
        """Initialize project config"""
        config = self.DEFAULT_CONFIG.copy()
        config["prefix"] = prefix
        config["formatter"] = formatter
        config["output"] = output
        self.save(config)
        return config

    def options(self, overrides: dict[str, Any] | None = None) -> GeneratorOptions:
        """Build generator options from the merged config"""
        config = self.load(overrides)
        return GeneratorOptions(
            prefix=config["prefix"],
            table_name=config["table_name"],
            reference_prefix=config["reference_prefix"],
            validator_prefix=config["validator_prefix"],
            init_function=config["init_function"],
            formatter=config["formatter"],
        )

    def get_output_path(self) -> Path | None:
        """Default output file for generated code, if configured"""
        output = self.load()["output"]
        if output is None:
            return None
        return self.base_dir / output
