"""Import configuration, from arguments or a TOML file."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import toml

from shared.logger import get_logger

from .exceptions import ConfigError

logger = get_logger(__name__)

SECTION = "excel2mysql"


@dataclass
class ImportConfig:
    """Settings for one import run."""

    strict: bool = True
    include: List[str] = field(default_factory=list)
    output: Optional[Path] = None

    def merge(
        self,
        strict: Optional[bool] = None,
        include: Optional[List[str]] = None,
        output: Optional[Path] = None,
    ) -> "ImportConfig":
        """Return a copy with the given (non-None, non-empty) values overriding."""
        return ImportConfig(
            strict=self.strict if strict is None else strict,
            include=list(include) if include else list(self.include),
            output=output if output is not None else self.output,
        )


def load_config(filepath: Path) -> ImportConfig:
    """
    Load configuration from the ``[excel2mysql]`` table of a TOML file.

    Args:
        filepath: Path to TOML file

    Returns:
        ImportConfig

    Raises:
        ConfigError: If the file cannot be read or holds invalid values
    """
    if not filepath.exists():
        raise ConfigError(f"Config file not found: {filepath}")

    logger.info(f"Loading config from {filepath}")

    try:
        data = toml.load(filepath)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Failed to parse {filepath}: {e}") from e

    section = data.get(SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{SECTION}] must be a table")

    unknown = set(section) - {"strict", "include", "output"}
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    strict = section.get("strict", True)
    if not isinstance(strict, bool):
        raise ConfigError("'strict' must be true or false")

    include = section.get("include", [])
    if isinstance(include, str):
        include = [include]
    if not isinstance(include, list) or not all(isinstance(p, str) for p in include):
        raise ConfigError("'include' must be a list of sheet paths")

    output = section.get("output")
    if output is not None and not isinstance(output, str):
        raise ConfigError("'output' must be a path string")

    return ImportConfig(
        strict=strict,
        include=include,
        output=Path(output) if output else None,
    )
