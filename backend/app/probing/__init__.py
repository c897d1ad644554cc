"""
Probe Module

Checks whether an HTTP endpoint (typically an MCP server) is reachable and
responds to a simple request:
- Connectivity check (HEAD with GET fallback)
- Functionality check (diagnostic POST with GET fallback)
- Response classification (HTML / JSON server info / opaque text)
"""

from .classifier import classify_response, extract_features, extract_server_name, is_html_response
from .connectivity import probe_connectivity
from .errors import ProbeError, UpstreamServerError
from .functionality import DIAGNOSTIC_PAYLOAD, probe_functionality
from .http_client import ProbeHttpClient
from .pipeline import ProbePipeline
from .schemas import (
    AttemptResult,
    HtmlResponse,
    OpaqueResponse,
    ProbeRequest,
    ProbeResult,
    ServerInfo,
)

__all__ = [
    'ProbePipeline',
    'ProbeHttpClient',
    'probe_connectivity',
    'probe_functionality',
    'classify_response',
    'extract_features',
    'extract_server_name',
    'is_html_response',
    'DIAGNOSTIC_PAYLOAD',
    'ProbeError',
    'UpstreamServerError',
    'AttemptResult',
    'HtmlResponse',
    'OpaqueResponse',
    'ProbeRequest',
    'ProbeResult',
    'ServerInfo',
]
