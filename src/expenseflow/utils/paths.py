"""Application data directory resolution."""
import os
from pathlib import Path


def app_data_dir() -> Path:
    """Return (and create) the directory holding config, logs and the database."""
    root = os.getenv("EXPENSEFLOW_HOME")
    path = Path(root) if root else Path.home() / ".expenseflow"
    path.mkdir(parents=True, exist_ok=True)
    return path
