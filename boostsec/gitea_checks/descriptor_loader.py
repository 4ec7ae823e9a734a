"""Load build descriptors and check results from YAML or JSON files."""

from pathlib import Path

import yaml

from boostsec.gitea_checks.models.check_result import CheckResult
from boostsec.gitea_checks.models.descriptor import BuildDescriptor


def _load_yaml(path: Path, kind: str) -> object:
    if not path.exists():
        raise FileNotFoundError(f"{kind} file not found: {path}")

    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty {kind.lower()} file: {path}")

    return data


def load_build_descriptor(path: Path) -> BuildDescriptor:
    """Load the job, run and credentials of a build.

    Args:
        path: Path to the build descriptor

    Returns:
        Parsed build descriptor

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If YAML is invalid or doesn't match schema

    """
    data = _load_yaml(path, "Build descriptor")

    try:
        return BuildDescriptor.model_validate(data)
    except Exception as e:
        raise ValueError(f"Invalid build descriptor schema in {path}: {e}") from e


def load_check_result(path: Path) -> CheckResult:
    """Load the check result to publish.

    JSON files are accepted as well, being valid YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the content is invalid or doesn't match schema

    """
    data = _load_yaml(path, "Check result")

    try:
        return CheckResult.model_validate(data)
    except Exception as e:
        raise ValueError(f"Invalid check result schema in {path}: {e}") from e
