"""Loading of resolver configuration from YAML files.

Example configuration file:

    output_encoding: utf-8
    archive_suffixes: [.jar, .zip, .war]
    roots:
      - classes
      - lib/ext.jar
      - jar:file:/opt/app/app.war!/WEB-INF/classes!/
"""

from pathlib import Path

import yaml

from resource_accessor.exceptions import ConfigError
from resource_accessor.models import ResolverConfig
from resource_accessor.resources.normalizer import has_scheme


def _anchor_root(root: str, base_dir: Path) -> str:
    """Resolve a relative local root against the configuration file's directory."""
    if has_scheme(root):
        return root
    path = Path(root).expanduser()
    if path.is_absolute():
        return str(path)
    return str(base_dir / path)


def load_config(config_path: Path) -> ResolverConfig:
    """Read a ResolverConfig from a YAML file.

    Relative local roots are interpreted relative to the directory holding
    the file; descriptors with a scheme are kept as written.

    Args:
        config_path: Path to the YAML file

    Returns:
        The parsed ResolverConfig

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or does not
                     contain a mapping with the expected fields
    """
    config_path = Path(config_path).expanduser()

    if not config_path.is_file():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading {config_path}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration must be a YAML mapping, got {type(data).__name__}"
        )

    roots = data.get("roots") or []
    if not isinstance(roots, list):
        raise ConfigError("Configuration field 'roots' must be a list")

    suffixes = data.get("archive_suffixes")
    if suffixes is not None and not isinstance(suffixes, list):
        raise ConfigError("Configuration field 'archive_suffixes' must be a list")

    encoding = data.get("output_encoding", "utf-8")
    if not isinstance(encoding, str):
        raise ConfigError("Configuration field 'output_encoding' must be a string")

    base_dir = config_path.resolve().parent
    data = dict(data, roots=[_anchor_root(str(root), base_dir) for root in roots])

    return ResolverConfig.from_dict(data)
