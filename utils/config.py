"""
Configuration Loader

Loads configuration from .env file and analyzer_config.json.
.env contains sensitive data (API key, team ID)
analyzer_config.json contains non-sensitive settings (safe to commit to git)
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

from config.settings import ANALYZER_CONFIG_PATH, BASE_DIR, DATABASE_PATH
from infrastructure.errors import ConfigurationError

PROJECT_ROOT = BASE_DIR
DEFAULT_CONFIG_FILE = ANALYZER_CONFIG_PATH

DEFAULT_MAX_HITS = -8


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == '':
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def load_config(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load complete configuration from .env and analyzer_config.json.

    Environment variables win over the JSON file where both set a value.

    Returns:
        Combined configuration dict with all settings
    """
    config: Dict[str, Any] = {}

    # Load .env file if present; existing environment variables are kept
    env_path = Path(env_file) if env_file else PROJECT_ROOT / '.env'
    if env_path.exists():
        load_dotenv(env_path)

    # Load analyzer_config.json (non-sensitive settings)
    json_config: Dict[str, Any] = {}
    config_path = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    if config_path.exists():
        with open(config_path) as f:
            json_config = json.load(f)

    config['season'] = json_config.get('season', '2025/26')
    config['decision_config'] = dict(json_config.get('decision_config', {}))
    config['llm_config'] = dict(json_config.get('llm_config', {}))

    # Secrets and per-deployment values from the environment
    config['anthropic_api_key'] = os.getenv('ANTHROPIC_API_KEY', '')
    config['demo_mode'] = _env_flag('DEMO_MODE')
    config['team_id'] = _env_int('FPL_TEAM_ID')
    config['log_level'] = os.getenv('LOG_LEVEL', 'INFO')
    config['database_path'] = os.getenv('DATABASE_PATH', DATABASE_PATH)

    max_hits = _env_int('MAX_HITS')
    if max_hits is None:
        max_hits = config['decision_config'].get('max_hits', DEFAULT_MAX_HITS)
    if max_hits > 0:
        raise ConfigurationError(f"MAX_HITS must be zero or negative, got {max_hits}")
    config['max_hits'] = max_hits

    config['llm_fallback_to_heuristic'] = _env_flag(
        'LLM_FALLBACK_TO_HEURISTIC',
        default=bool(config['llm_config'].get('fallback_to_heuristic', False))
    )

    return config


def check_config() -> Dict[str, bool]:
    """
    Check which configuration items are set.

    Returns:
        Dict with boolean status for each config item
    """
    load_dotenv(PROJECT_ROOT / '.env')

    return {
        'anthropic_api_key': bool(os.getenv('ANTHROPIC_API_KEY')),
        'team_id': bool(os.getenv('FPL_TEAM_ID')),
        'demo_mode': _env_flag('DEMO_MODE'),
    }
