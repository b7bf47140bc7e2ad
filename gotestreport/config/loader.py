import dataclasses
import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from gotestreport.logging import get_logger

from .types import ConfigError, Inputs, OmitOption, UnsupportedConfigFormatError

logger = get_logger(__name__)

_PATH_KEYS = ("module_directory", "from_json_file", "stderr_file", "summary_file")

# deprecated boolean key -> omit option it turns on
_DEPRECATED_KEYS = {
    "omit_untested_packages": OmitOption.SKIPPED,
    "omit_successful_packages": OmitOption.SUCCESSFUL,
    "omit_pie": OmitOption.PIE,
}

_DEPRECATED_ENV = {
    "INPUT_OMITUNTESTEDPACKAGES": OmitOption.SKIPPED,
    "INPUT_OMITSUCCESSFULPACKAGES": OmitOption.SUCCESSFUL,
    "INPUT_OMITPIE": OmitOption.PIE,
}

_ENV_PATHS = {
    "INPUT_MODULEDIRECTORY": "module_directory",
    "INPUT_FROMJSONFILE": "from_json_file",
    "INPUT_STDERRFILE": "stderr_file",
    "GITHUB_STEP_SUMMARY": "summary_file",
}

_TRUE_VALUES = ("true", "True", "TRUE")
_FALSE_VALUES = ("false", "False", "FALSE")


def load_inputs(path: str | Path, base: Inputs | None = None) -> Inputs:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return _build_inputs(raw_file, _copy(base))


def inputs_from_env(environ: Mapping[str, str], base: Inputs | None = None) -> Inputs:
    """
    Read report inputs the way a GitHub Action receives them.

    Unset or empty variables leave the matching input untouched.
    """
    inputs = _copy(base)
    used_deprecated = []

    for name, option in _DEPRECATED_ENV.items():
        value = environ.get(name, "")
        if not value:
            continue

        used_deprecated.append(name)
        if _parse_bool(name, value):
            inputs.omit.add(option)

    if used_deprecated:
        logger.warning(
            "The following inputs are deprecated: %s. Please use INPUT_OMIT instead.",
            ", ".join(used_deprecated),
        )

    for name, attr in _ENV_PATHS.items():
        value = environ.get(name, "").strip()
        if value:
            setattr(inputs, attr, value)

    for item in environ.get("INPUT_OMIT", "").split():
        if item not in OmitOption.values():
            logger.debug("ignoring unknown omit option: %s", item)
            continue
        inputs.omit.add(OmitOption(item))

    return inputs


def _copy(base: Inputs | None) -> Inputs:
    if base is None:
        return Inputs()
    return dataclasses.replace(base, omit=set(base.omit))


def _parse_bool(name: str, value: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"{name}: expected one of {', '.join(_TRUE_VALUES + _FALSE_VALUES)}, got {value!r}"
    )


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    # An empty YAML document means "no overrides"
    if raw_file is None:
        return {}

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: YAML parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    return raw_file


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: JSON parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_inputs(raw: Mapping[str, Any], inputs: Inputs) -> Inputs:
    keys = set(_PATH_KEYS) | {"omit"} | set(_DEPRECATED_KEYS)

    for field in raw.keys():
        if field not in keys:
            raise ConfigError(f"Can't process: {field}")

    used_deprecated = []
    for key, option in _DEPRECATED_KEYS.items():
        if key not in raw:
            continue

        used_deprecated.append(key)
        if not isinstance(raw[key], bool):
            raise ConfigError(f"'{key}' should be a boolean")

        if raw[key]:
            inputs.omit.add(option)

    if used_deprecated:
        logger.warning(
            "The following config keys are deprecated: %s. Please use 'omit' instead.",
            ", ".join(used_deprecated),
        )

    for key in _PATH_KEYS:
        if key not in raw:
            continue

        if not isinstance(raw[key], str):
            raise ConfigError(f"'{key}' should be a string")

        if len(raw[key].strip()) < 1:
            raise ConfigError(f"'{key}': Please provide a string or remove this field")

        setattr(inputs, key, raw[key].strip())

    if "omit" in raw:
        if not isinstance(raw["omit"], list):
            raise ConfigError("'omit' should be a list")

        for item in raw["omit"]:
            if not isinstance(item, str):
                raise ConfigError(f"{item} should be a string in the omit list")

            option = item.strip()
            if option not in OmitOption.values():
                raise ConfigError(
                    f"Unknown omit option '{option}', expected one of: "
                    + ", ".join(OmitOption.values())
                )

            inputs.omit.add(OmitOption(option))

    return inputs
