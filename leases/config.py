"""Environment-driven paths and settings."""

import os
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DATA_PATH = PROJECT_ROOT / "vehicles.yaml"


def data_path() -> Path:
    """Vehicle store file; LEASETRACK_DATA overrides the default."""
    return Path(os.environ.get("LEASETRACK_DATA") or DEFAULT_DATA_PATH)


def widget_stamp_path(data: Optional[Path] = None) -> Path:
    """File touched to tell the widget host to reload; sits beside the store."""
    override = os.environ.get("LEASETRACK_WIDGET_STAMP")
    if override:
        return Path(override)
    return Path(data or data_path()).parent / ".widget-reload"


def secret_key() -> str:
    return os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
