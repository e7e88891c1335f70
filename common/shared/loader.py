"""
Shared configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader
 - `load_logging_config`: the top-level `logging` section
 - `load_task_config`: validated configuration for a given task
 - `cli_main`: command-line entry point exposed as the `stdpkgs-config` script
"""

from __future__ import annotations

import argparse
import base64
import json
import re
import shlex
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from common.base.file_io import read_yaml


ConfigDict = Dict[str, Any]

DEFAULT_CONFIG_FILENAME = "config.yaml"
LOGGING_SECTION_KEY = "logging"
TASKS_SECTION_KEY = "tasks"
CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"


TASK_SCHEMAS: Dict[str, Dict[str, Iterable[str]]] = {
    "stdpkgs_gen": {
        "required": [],
        "optional": [
            "goroot",
            "roots",
            "output",
            "package",
            "type_name",
            "var_name",
            "placeholder",
            "header",
            "formatter",
            "format",
            "dry_run",
        ],
    },
}

FIELD_ALIASES = {
    "root": "roots",
    "output_file": "output",
}

SINGLE_PATH_FIELDS = {"goroot", "output"}
MULTI_PATH_FIELDS = {"roots"}
BOOLEAN_FIELDS = {"format", "dry_run"}
COMMAND_FIELDS = {"formatter"}
IDENTIFIER_FIELDS = {"package", "type_name", "var_name"}
LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}

YES_VALUES = {"1", "true", "yes", "y", "on"}
NO_VALUES = {"0", "false", "no", "n", "off"}

_GO_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def load_config(path: str | Path | None) -> Mapping[str, Any] | Dict[str, Any]:
    if not path:
        return {}

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {cfg_path}")

    data = read_yaml(cfg_path)
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration root must be a mapping in {cfg_path}")

    return data


def load_logging_config(config_path: str | Path | None = None) -> Dict[str, Any]:
    resolved = _resolve_config_path(config_path)
    root = load_config(resolved)
    return _extract_logging_settings(root, resolved)


def load_task_config(task: str, config_path: str | Path | None = None) -> ConfigDict:
    """Return the validated settings for ``task``.

    Without an explicit ``config_path`` the repository default
    (``configs/config.yaml``) is used when present; otherwise every setting
    falls back to its built-in default. Bookkeeping keys are double-underscored:
    ``__task__``, ``__config_path__`` and ``__logging__``.
    """
    if task not in TASK_SCHEMAS:
        raise ValueError(f"Unknown task '{task}'. Expected one of: {', '.join(sorted(TASK_SCHEMAS))}")

    resolved_path = _resolve_config_path(config_path)
    root_config = dict(load_config(resolved_path))
    task_config_raw = _extract_task_config(root_config, task, resolved_path)

    task_logging_override: Dict[str, Any] = {}
    if LOGGING_SECTION_KEY in task_config_raw:
        logging_payload = task_config_raw.pop(LOGGING_SECTION_KEY)
        if not isinstance(logging_payload, Mapping):
            raise ValueError(
                f"Task '{task}' logging section must be a mapping in {resolved_path}"
            )
        task_logging_override = _validate_logging_keys(
            logging_payload, f"Task '{task}' logging section", resolved_path
        )

    config = _apply_aliases(task_config_raw)

    schema = TASK_SCHEMAS[task]
    required = set(schema.get("required", []))
    optional = set(schema.get("optional", []))
    allowed_keys = required | optional

    missing = [key for key in required if not config.get(key)]
    if missing:
        raise ValueError(
            f"Configuration '{resolved_path}' missing required fields for task '{task}': {', '.join(missing)}"
        )

    unexpected = [key for key in config if key not in allowed_keys]
    if unexpected:
        raise ValueError(
            f"Configuration '{resolved_path}' contains unsupported keys for task '{task}': {', '.join(sorted(unexpected))}"
        )

    normalized: ConfigDict = {}
    for key in sorted(allowed_keys):
        if key not in config:
            continue
        value = config[key]

        if key in SINGLE_PATH_FIELDS:
            normalized[key] = _normalize_single_path(value, key, resolved_path)
        elif key in MULTI_PATH_FIELDS:
            normalized[key] = _normalize_multi_path(value, key, resolved_path)
        elif key in BOOLEAN_FIELDS:
            normalized[key] = _coerce_yes_no(value, key, resolved_path)
        elif key in COMMAND_FIELDS:
            normalized[key] = _normalize_command(value, key, resolved_path)
        elif key in IDENTIFIER_FIELDS:
            normalized[key] = _coerce_identifier(value, key, resolved_path)
        else:
            normalized[key] = "" if value is None else str(value)

    normalized["__task__"] = task
    normalized["__config_path__"] = str(resolved_path) if resolved_path else None

    merged_logging = _extract_logging_settings(root_config, resolved_path)
    if task_logging_override:
        merged_logging.update(_anchor_log_dir(task_logging_override, resolved_path))
    if merged_logging:
        normalized["__logging__"] = merged_logging
    return normalized


def _apply_aliases(config: Mapping[str, Any]) -> ConfigDict:
    result: ConfigDict = {}
    for key, value in config.items():
        canonical = FIELD_ALIASES.get(key, key)
        result[canonical] = value
    return result


def _normalize_single_path(value: Any, field: str, config_path: Optional[Path]) -> str:
    if value is None or value == "":
        raise ValueError(f"Configuration '{config_path}' field '{field}' expects a path value")
    return str(Path(str(value)).expanduser())


def _normalize_multi_path(value: Any, field: str, config_path: Optional[Path]) -> list[str]:
    if value is None:
        raise ValueError(f"Configuration '{config_path}' field '{field}' expects a list of paths")
    if isinstance(value, (list, tuple, set)):
        values = list(value)
    else:
        values = [value]
    if not values:
        raise ValueError(f"Configuration '{config_path}' field '{field}' needs at least one path entry")
    return [str(Path(str(item)).expanduser()) for item in values]


def _coerce_yes_no(value: object, key: str, config_path: Optional[Path]) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False
    raise ValueError(
        f"Configuration '{config_path}' field '{key}' must be a boolean (yes/no, true/false)."
    )


def _normalize_command(value: Any, field: str, config_path: Optional[Path]) -> List[str]:
    if isinstance(value, str):
        tokens = shlex.split(value)
    elif isinstance(value, (list, tuple)):
        tokens = [str(item) for item in value]
    else:
        tokens = []
    if not tokens:
        raise ValueError(
            f"Configuration '{config_path}' field '{field}' must be a command string or a non-empty list."
        )
    return tokens


def _coerce_identifier(value: Any, field: str, config_path: Optional[Path]) -> str:
    text = "" if value is None else str(value).strip()
    if not _GO_IDENTIFIER_RE.match(text):
        raise ValueError(
            f"Configuration '{config_path}' field '{field}' must be a Go identifier, got {value!r}."
        )
    return text


def _resolve_config_path(config_path: str | Path | None) -> Optional[Path]:
    if config_path:
        return Path(config_path).expanduser()

    candidate = CONFIGS_DIR / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def _extract_task_config(root: Mapping[str, Any], task: str, config_path: Optional[Path]) -> ConfigDict:
    if TASKS_SECTION_KEY in root:
        tasks_section = root.get(TASKS_SECTION_KEY) or {}
        if not isinstance(tasks_section, Mapping):
            raise ValueError(f"'tasks' section must be a mapping in {config_path}")
        if task not in tasks_section:
            raise ValueError(
                f"Configuration '{config_path}' missing task '{task}' under 'tasks' section"
            )
        task_payload = tasks_section[task] or {}
        if not isinstance(task_payload, Mapping):
            raise ValueError(f"Task '{task}' entry must be a mapping in {config_path}")
        return dict(task_payload)

    # Single-task files keep settings at the top level.
    return {key: value for key, value in root.items() if key != LOGGING_SECTION_KEY}


def _validate_logging_keys(
    section: Mapping[str, Any],
    label: str,
    config_path: Optional[Path],
) -> Dict[str, Any]:
    invalid = [key for key in section if key not in LOGGING_ALLOWED_KEYS]
    if invalid:
        raise ValueError(
            f"{label} contains unsupported keys in {config_path}: {', '.join(sorted(invalid))}"
        )
    return dict(section)


def _extract_logging_settings(root: Mapping[str, Any], config_path: Optional[Path]) -> Dict[str, Any]:
    section = root.get(LOGGING_SECTION_KEY, {})
    if not section:
        return {}
    if not isinstance(section, Mapping):
        raise ValueError(f"'{LOGGING_SECTION_KEY}' section must be a mapping in {config_path}")
    settings = _validate_logging_keys(section, f"'{LOGGING_SECTION_KEY}' section", config_path)
    return _anchor_log_dir(settings, config_path)


def _anchor_log_dir(settings: Dict[str, Any], config_path: Optional[Path]) -> Dict[str, Any]:
    """Resolve a relative ``log_dir`` against the directory holding the config file."""
    cfg = dict(settings)
    log_dir_value = cfg.get("log_dir")
    if not log_dir_value:
        return cfg
    path = Path(str(log_dir_value)).expanduser()
    if not path.is_absolute() and config_path is not None:
        path = config_path.expanduser().resolve().parent / path
    cfg["log_dir"] = str(path.resolve())
    return cfg


def cli_main(argv: Optional[Iterable[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load and validate stdpkgs-gen YAML configs.")
    parser.add_argument("task", help=f"Task identifier ({', '.join(sorted(TASK_SCHEMAS))})")
    parser.add_argument("config_path", nargs="?", help="Path to YAML file (defaults to configs/config.yaml)")
    parser.add_argument(
        "--format",
        choices={"b64", "json"},
        default="json",
        help="Output format: raw JSON (default) or base64-encoded JSON.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    config = load_task_config(args.task, args.config_path)
    payload = json.dumps(config, sort_keys=True)

    if args.format == "json":
        print(payload)
    else:
        encoded = base64.b64encode(payload.encode("utf-8")).decode("utf-8")
        print(encoded)
    return 0


if __name__ == "__main__":
    raise SystemExit(cli_main())
