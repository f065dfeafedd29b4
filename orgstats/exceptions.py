"""Error taxonomy for the reporting commands"""

from typing import Optional


class OrgStatsError(Exception):
    """Base class for fatal errors that abort a command"""


class ConfigurationError(OrgStatsError):
    """Missing credential or invalid command input"""


class InvalidDateError(ConfigurationError):
    """Date argument is not a valid YYYY-MM-DD value"""


class IngestionError(OrgStatsError):
    """Ingestion run aborted"""


class RemoteAPIError(IngestionError):
    """GitHub API request failed"""

    def __init__(self, message: str, *, path: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.status_code = status_code


class MalformedRecordError(IngestionError):
    """Upstream record is missing a field the store requires"""


class UsageError(ConfigurationError):
    """Unknown command or missing positional arguments"""
