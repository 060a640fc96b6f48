"""Read a conversion configuration document into the job model.

Expected tree (TOML shown, YAML is equivalent):

    [global.config]
    name_format = "yyyymmdd-hhmmss-sn-n"
    acc_calculate = false
    unit_conversion = true

    [[conversions]]
    name = "main"
    from = "jp_nied_knet"
    to = "jp_jma_csv"

    [[conversions.groups]]
    files = [{ path = "a.ns", component = "ns", g_key = 1 }, ...]

A group without ``files`` but with a ``path`` is read as a one-file group.
Structural problems are collected and raised together as a single
ConfigurationError.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

import yaml

from motionconv.config import NAME_FORMAT
from motionconv.errors import ConfigurationError
from motionconv.harmonize.axis_map import parse_axis
from motionconv.models.core import (
    Configuration,
    ConversionJob,
    FileEntry,
    FileGroup,
    GlobalSettings,
    SourceFormat,
    TargetFormat,
)

logger = logging.getLogger(__name__)


def read_config_file(path: Path) -> dict:
    """Parse a TOML or YAML configuration file into a plain tree."""
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            with open(path, "rb") as f:
                tree = tomllib.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                tree = yaml.safe_load(f)
        else:
            raise ConfigurationError([f"Unsupported configuration file type '{suffix}': {path}"])
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError([f"Failed to parse '{path}': {e}"]) from e

    if not isinstance(tree, dict):
        raise ConfigurationError([f"Config file '{path}' has the wrong structure."])
    return tree


def load_configuration(tree: dict, base_dir: Path | None = None) -> Configuration:
    """Build a Configuration from an already-parsed document tree.

    Args:
        tree: Parsed configuration document.
        base_dir: Directory that relative file paths are resolved against.
            Paths are kept as written when None.

    Raises:
        ConfigurationError: listing every structural problem found.
    """
    problems: list[str] = []

    settings = _parse_global(tree.get("global"), problems)

    conversions = tree.get("conversions", tree.get("conversion"))
    jobs: list[ConversionJob] = []
    if not isinstance(conversions, list) or not conversions:
        problems.append("'conversions' must be a non-empty list of tables")
    else:
        for i, raw in enumerate(conversions):
            job = _parse_conversion(raw, i, base_dir, problems)
            if job is not None:
                jobs.append(job)

    if problems:
        raise ConfigurationError(problems)

    logger.debug("Loaded %d conversion(s)", len(jobs))
    return Configuration(global_settings=settings, jobs=tuple(jobs))


def _parse_global(raw, problems: list[str]) -> GlobalSettings:
    if raw is None:
        return GlobalSettings()
    if not isinstance(raw, dict):
        problems.append("'global' must be a table")
        return GlobalSettings()

    # The settings may sit directly under [global] or under [global.config]
    values = raw.get("config", raw)
    if not isinstance(values, dict):
        problems.append("'global.config' must be a table")
        return GlobalSettings()

    name_format = values.get("name_format", NAME_FORMAT)
    if name_format != NAME_FORMAT:
        problems.append(f"Unknown name_format '{name_format}', expected '{NAME_FORMAT}'")

    flags = {}
    for key, default in (("acc_calculate", False), ("unit_conversion", True)):
        value = values.get(key, default)
        if not isinstance(value, bool):
            problems.append(f"'global.config.{key}' must be true or false, got {value!r}")
            value = default
        flags[key] = value

    return GlobalSettings(name_format=NAME_FORMAT, **flags)


def _parse_conversion(raw, index: int, base_dir: Path | None, problems: list[str]) -> ConversionJob | None:
    where = f"conversions[{index}]"
    if not isinstance(raw, dict):
        problems.append(f"{where} must be a table")
        return None

    name = raw.get("name", raw.get("id"))
    if name is None or str(name).strip() == "":
        problems.append(f"{where}: 'name' is required")
        name = ""
    name = str(name).strip()

    source = _parse_enum(SourceFormat, raw.get("from"), f"{where}.from", problems)
    target = _parse_enum(TargetFormat, raw.get("to"), f"{where}.to", problems)

    raw_groups = raw.get("groups", raw.get("group"))
    groups: list[FileGroup] = []
    if not isinstance(raw_groups, list) or not raw_groups:
        problems.append(f"{where}: 'groups' must be a non-empty list")
    else:
        for g, raw_group in enumerate(raw_groups):
            group = _parse_group(raw_group, f"{where}.groups[{g}]", base_dir, problems)
            if group is not None:
                groups.append(group)

    if source is None or target is None:
        return None
    return ConversionJob(name=name, source_format=source, target_format=target, groups=tuple(groups))


def _parse_enum(enum_cls, value, where: str, problems: list[str]):
    allowed = ", ".join(member.value for member in enum_cls)
    if value is None:
        problems.append(f"{where} is required (one of: {allowed})")
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        problems.append(f"{where}: unknown format '{value}' (one of: {allowed})")
        return None


def _parse_group(raw, where: str, base_dir: Path | None, problems: list[str]) -> FileGroup | None:
    if not isinstance(raw, dict):
        problems.append(f"{where} must be a table")
        return None

    if "files" in raw:
        raw_files = raw["files"]
        if not isinstance(raw_files, list):
            problems.append(f"{where}.files must be a list")
            return None
    elif "path" in raw:
        raw_files = [raw]
    else:
        problems.append(f"{where}: expected 'files' or 'path'")
        return None

    entries = []
    for f, raw_file in enumerate(raw_files):
        entry = _parse_file(raw_file, f"{where}.files[{f}]", base_dir, problems)
        if entry is not None:
            entries.append(entry)
    return FileGroup(entries=tuple(entries))


def _parse_file(raw, where: str, base_dir: Path | None, problems: list[str]) -> FileEntry | None:
    if isinstance(raw, str):
        raw = {"path": raw}
    if not isinstance(raw, dict):
        problems.append(f"{where} must be a table or a path string")
        return None

    raw_path = raw.get("path")
    if not isinstance(raw_path, str) or not raw_path.strip():
        problems.append(f"{where}: 'path' is required")
        return None
    path = Path(raw_path).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path

    axis = None
    raw_axis = raw.get("component", raw.get("acc_axis", raw.get("axis")))
    if raw_axis is not None:
        axis = parse_axis(str(raw_axis))
        if axis is None:
            problems.append(f"{where}: unknown component '{raw_axis}' (one of: ns, ew, ud)")

    key = raw.get("g_key", raw.get("grouping_key"))
    if key is not None and (isinstance(key, bool) or not isinstance(key, int) or key < 0):
        problems.append(f"{where}: 'g_key' must be a non-negative integer, got {key!r}")
        key = None

    return FileEntry(path=path, axis=axis, grouping_key=key)
