"""
Configuration file support for the genomatrix CLI.

Supports YAML and JSON config files with CLI argument override.

Example config:
```yaml
data: data_CNA.txt
genes: genes.tsv
samples: samples.tsv
events: cna_events.tsv
output: results/brca
profile:
  stable_id: brca_tcga_gistic
  profile_id: 7
  study_id: brca_tcga
  alteration_type: COPY_NUMBER_ALTERATION
  show_in_analysis_tab: true
import:
  add_samples_on_the_fly: true
  progress_interval: 5000
```
"""

import json
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from genomatrix.core.profile import GeneticAlterationType


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters:
        config_path: Path to config file (.yaml, .yml, or .json)

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported or invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    try:
        with open(config_path, 'r') as f:
            if suffix in ('.yaml', '.yml'):
                config = yaml.safe_load(f)
            elif suffix == '.json':
                config = json.load(f)
            else:
                raise ValueError(
                    f"Unsupported config format: {suffix}. "
                    f"Use .yaml, .yml, or .json"
                )
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ValueError("Config file must contain a dictionary/mapping at top level")

    return config


def _merge_value(cli_value: Any, config_value: Any, was_explicitly_set: bool) -> Any:
    """
    Merge a single config value with a CLI argument.

    Explicit CLI values win, then config values, then CLI defaults.
    """
    if was_explicitly_set:
        return cli_value
    if config_value is not None:
        return config_value
    return cli_value


_FLAG_DESTS = {
    'no_samples_on_the_fly': 'samples_on_the_fly',
    'hide_from_analysis_tab': 'show_in_analysis_tab',
}


def _explicit_args(cli_args: Optional[List[str]]) -> set:
    short_to_long = {
        'i': 'data',
        'o': 'output',
        'c': 'config',
    }
    explicit = set()
    for arg in cli_args or []:
        if arg.startswith('--'):
            name = arg[2:].split('=', 1)[0].replace('-', '_')
            explicit.add(_FLAG_DESTS.get(name, name))
        elif arg.startswith('-') and len(arg) == 2 and arg[1] in short_to_long:
            explicit.add(short_to_long[arg[1]])
    return explicit


# config key -> (section, argparse dest)
_MAPPINGS = [
    ('data', None, 'data'),
    ('output', None, 'output'),
    ('genes', None, 'genes'),
    ('samples', None, 'samples'),
    ('events', None, 'events'),
    ('stable_id', 'profile', 'profile'),
    ('profile_id', 'profile', 'profile_id'),
    ('study_id', 'profile', 'study'),
    ('alteration_type', 'profile', 'alteration_type'),
    ('show_in_analysis_tab', 'profile', 'show_in_analysis_tab'),
    ('target_line', 'import', 'target_line'),
    ('add_samples_on_the_fly', 'import', 'samples_on_the_fly'),
    ('progress_interval', 'import', 'progress_interval'),
]

_PATH_ARGS = {'data', 'output', 'genes', 'samples', 'events'}


def merge_config_with_args(config: Dict[str, Any], args: Namespace,
                           cli_args: Optional[List[str]] = None) -> Namespace:
    """
    Merge config file values with CLI arguments.

    Priority (highest to lowest):
    1. Explicitly provided CLI arguments
    2. Config file values
    3. CLI argument defaults

    Parameters:
        config: Configuration dictionary from load_config()
        args: Parsed CLI arguments (argparse.Namespace)
        cli_args: Raw CLI arguments list (for detecting explicit values)
                  If None, assumes all args are defaults

    Returns:
        Updated Namespace with merged values
    """
    explicit = _explicit_args(cli_args)
    merged = Namespace(**vars(args))

    for key, section, dest in _MAPPINGS:
        source = config if section is None else (config.get(section) or {})
        if key not in source:
            continue
        value = source[key]
        if value is not None and dest in _PATH_ARGS:
            value = Path(value)
        setattr(merged, dest, _merge_value(getattr(merged, dest, None), value, dest in explicit))

    return merged


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Raises:
        ValueError: If configuration is invalid
    """
    profile = config.get('profile') or {}
    if not isinstance(profile, dict):
        raise ValueError("'profile' section must be a mapping")
    if profile.get('alteration_type') is not None:
        GeneticAlterationType.parse(profile['alteration_type'])
    if 'profile_id' in profile and not isinstance(profile['profile_id'], int):
        raise ValueError(f"profile_id must be an integer, got: {profile['profile_id']}")

    options = config.get('import') or {}
    if not isinstance(options, dict):
        raise ValueError("'import' section must be a mapping")
    if 'progress_interval' in options:
        interval = options['progress_interval']
        if not isinstance(interval, int) or interval <= 0:
            raise ValueError(f"progress_interval must be a positive integer, got: {interval}")
