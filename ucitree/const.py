"""
Package constants and defaults.
"""

# Package info
APP_NAME = "ucitree"
APP_VERSION = "0.1.0"

# Default values
DEFAULT_TREE_PATH = "/etc/config"
DEFAULT_FILE_MODE = 0o644
TEMP_FILE_PREFIX = f".{APP_NAME}-"
