"""Status enums and error codes."""

from enum import Enum


class JobStatus(str, Enum):
    """Lifecycle state of a single conversion job."""

    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class CoverStrategy(str, Enum):
    """Which search step located the cover image."""

    ROOT_NAME = "ROOT_NAME"  # Well-known filename in the source root
    SUBFOLDER = "SUBFOLDER"  # Inside a scans/artwork subfolder
    ANY_IMAGE = "ANY_IMAGE"  # Any image in the source root


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    ENCODE_FAIL = "ENCODE_FAIL"
    TIMEOUT = "TIMEOUT"
    IO_ERROR = "IO_ERROR"
