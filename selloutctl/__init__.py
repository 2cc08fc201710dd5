"""selloutctl - bulk sellout spreadsheet imports from the command line.

This package uploads retail sellout spreadsheets to the sellout backend and
reconciles the result:
- Estimate processing time and show a live remaining/elapsed countdown
- Cancel an in-flight upload without confusing it with a failure
- Report per-dataset read/processed counts, unmatched codes and incidents
- Download the backend's incident report and reload the sales dataset
"""

__version__ = "0.1.0"

from selloutctl.core.client import SelloutClient
from selloutctl.core.config import Config, Profile
from selloutctl.core.exceptions import (
    ConfigurationError,
    SelloutCtlError,
    TransportError,
    UploadCancelledError,
    ValidationError,
)
from selloutctl.services.orchestrator import UploadOrchestrator

__all__ = [
    "__version__",
    "SelloutClient",
    "Config",
    "Profile",
    "UploadOrchestrator",
    "SelloutCtlError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "UploadCancelledError",
]
