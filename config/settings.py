"""
Configuration settings for the FPL Analyzer.
"""

import os
from pathlib import Path

# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Database configuration
DATABASE_PATH = os.getenv('DATABASE_PATH', str(BASE_DIR / 'data' / 'fpl_analyzer.db'))

# Logging configuration
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = os.getenv('LOG_FILE', '')  # empty: console only

# Non-sensitive settings
ANALYZER_CONFIG_PATH = BASE_DIR / 'config' / 'analyzer_config.json'
CHIP_POLICY_PATH = BASE_DIR / 'config' / 'chip_policy.yaml'
