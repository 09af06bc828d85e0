"""Repository configuration stored in pyproject.toml under [tool.workweave]."""

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

import tomlkit

logger = logging.getLogger(__name__)

DEFAULT_STAGING_BRANCH = "ww-working"
DEFAULT_REMOTE = "origin"
DEFAULT_WORKTREES_DIR = ".worktrees"
DEFAULT_PATCH_WINDOW = 200


@dataclass(frozen=True)
class WorkweaveConfig:
    """In-memory representation of `[tool.workweave]`.

    trunk_branch is None when not configured; it is then detected from git.
    """

    staging_branch: str = DEFAULT_STAGING_BRANCH
    trunk_branch: str | None = None
    remote: str = DEFAULT_REMOTE
    worktrees_dir: str = DEFAULT_WORKTREES_DIR
    patch_window: int = DEFAULT_PATCH_WINDOW


CONFIG_KEYS = tuple(f.name for f in fields(WorkweaveConfig))


def _read_tool_section(pyproject_path: Path) -> dict[str, object]:
    if not pyproject_path.exists():
        return {}

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)

    tool_section = data.get("tool")
    if tool_section is None:
        return {}

    section = tool_section.get("workweave")
    if section is None:
        return {}

    return section


def parse_config_value(key: str, value: str) -> str | int:
    """Convert a raw string (from the command line) to the type a key expects.

    Raises:
        ValueError: If the key is unknown or the value has the wrong shape
    """
    if key not in CONFIG_KEYS:
        raise ValueError(f"Unknown config key: {key}")

    if key == "patch_window":
        window = int(value)
        if window <= 0:
            raise ValueError("patch_window must be a positive integer")
        return window

    if not value.strip():
        raise ValueError(f"{key} must not be empty")
    return value


def load_config(repo_root: Path) -> WorkweaveConfig:
    """Load `[tool.workweave]` from the repository's pyproject.toml.

    Missing file, section or keys fall back to defaults. Unknown keys and
    malformed values are ignored.

    Example config:
      [tool.workweave]
      staging_branch = "ww-working"
      trunk_branch = "main"
      patch_window = 500
    """
    section = _read_tool_section(repo_root / "pyproject.toml")

    config = WorkweaveConfig()
    overrides: dict[str, str | int] = {}
    for key in CONFIG_KEYS:
        if key not in section:
            continue
        try:
            overrides[key] = parse_config_value(key, str(section[key]))
        except ValueError as e:
            logger.warning("Ignoring [tool.workweave] %s: %s", key, e)

    return replace(config, **overrides)


def write_config_value(repo_root: Path, key: str, value: str | int) -> None:
    """Write one setting to `[tool.workweave]` in pyproject.toml.

    Creates the file and the section if needed. Preserves existing formatting
    and comments using tomlkit.
    """
    pyproject_path = repo_root / "pyproject.toml"

    if pyproject_path.exists():
        with pyproject_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        doc = tomlkit.document()

    if "tool" not in doc:
        doc["tool"] = tomlkit.table(is_super_table=True)  # type: ignore[index]

    if "workweave" not in doc["tool"]:  # type: ignore[operator]
        doc["tool"]["workweave"] = tomlkit.table()  # type: ignore[index]

    doc["tool"]["workweave"][key] = value  # type: ignore[index]

    with pyproject_path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)
