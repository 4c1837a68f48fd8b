"""
Project metadata helpers used to stamp log records (service name, version).

Values come from the installed distribution when available, else from the
nearest pyproject.toml.
"""
from pathlib import Path
from importlib import metadata as importlib_metadata
from typing import Any
import tomllib


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    p = start
    for _ in range(max_up):
        candidate = p / "pyproject.toml"
        if candidate.exists():
            return candidate
        if p.parent == p:
            break
        p = p.parent
    return None


def load_pyproject_data(pyproject_path: Path) -> dict:
    with pyproject_path.open("rb") as f:
        return tomllib.load(f)


def get_pyproject_value(
    key: str,
    start: str | Path | None = None,
    max_up: int = 5,
    default: Any = None,
) -> Any:
    """
    Return the value for a dot-separated `key` (e.g. "project.version") from the
    nearest pyproject.toml, or `default` when the file or key is missing or the
    file cannot be parsed.
    """
    start_path = Path(start).resolve() if start is not None else Path(__file__).resolve().parent

    pyproject = find_pyproject(start=start_path, max_up=max_up)
    if not pyproject or not key:
        return default

    try:
        data = load_pyproject_data(pyproject)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    cur = data
    for part in key.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur


def get_project_name(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str | None = None,
) -> str | None:
    return get_pyproject_value("project.name", start=start, max_up=max_up, default=default)


def get_project_version(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str = "unknown",
) -> str:
    """
    Installed distribution version first (containers ship without pyproject),
    then project.version from pyproject.toml, then `default`.
    """
    name = get_project_name(start=start, max_up=max_up, default="oriento-api")
    try:
        return importlib_metadata.version(name)
    except importlib_metadata.PackageNotFoundError:
        pass

    val = get_pyproject_value("project.version", start=start, max_up=max_up, default=None)
    return val if val is not None else default


__all__ = [
    "find_pyproject",
    "load_pyproject_data",
    "get_pyproject_value",
    "get_project_name",
    "get_project_version",
]
