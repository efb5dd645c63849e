"""
mcpr Data Paths

Location of the mcpr data directory (config file, log file).
"""

import os
from pathlib import Path

DEFAULT_DATA_PATH = Path.home() / ".mcpr"


def get_data_path() -> Path:
    """Get the mcpr data directory path.

    MCPR_DATA_PATH overrides the default of ~/.mcpr.
    """
    data_path = os.environ.get("MCPR_DATA_PATH")
    if data_path:
        return Path(data_path).expanduser()
    return DEFAULT_DATA_PATH
