"""
Probe Error Handling

Exceptions raised inside the probe pipeline. Transport failures surface as
``httpx.RequestError`` and are not wrapped.
"""

from .schemas import AttemptResult


class ProbeError(Exception):
    """Base class for failures that abort a probe"""
    pass


class UpstreamServerError(ProbeError):
    """Raised when the connectivity check returns a 5xx status"""

    def __init__(self, attempt: AttemptResult):
        self.attempt = attempt
        super().__init__(f"Server error: {attempt.status_code} {attempt.status_text}")
