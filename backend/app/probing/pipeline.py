"""
Probe Pipeline

Coordinates a single probe:
1. Input validation
2. Connectivity check (HEAD, GET fallback); a 5xx aborts the probe
3. Functionality check (POST, GET fallback)
4. Response classification
5. Result assembly

``ProbePipeline.run`` never raises; every failure becomes a ``ProbeResult``.
"""

import logging
from typing import Optional, Union

from app.core.config import Settings, get_settings
from app.utils.structured_logging import ProbeMetrics

from .classifier import classify_response
from .connectivity import probe_connectivity
from .functionality import probe_functionality
from .http_client import ProbeHttpClient
from .schemas import (
    FAILURE_MESSAGE,
    HTML_SUCCESS_MESSAGE,
    SERVER_UNREACHABLE_MESSAGE,
    SUCCESS_MESSAGE,
    AttemptResult,
    Classification,
    ConnectivityReport,
    FunctionalityReport,
    HtmlResponse,
    ProbeRequest,
    ProbeResult,
    ServerSummary,
)

logger = logging.getLogger(__name__)


class ProbePipeline:
    """
    Runs the connectivity and functionality checks against one target and
    builds the normalized result.

    Args:
        http_client: HTTP client capability
        settings: Application settings; the cached instance when omitted
        log: Logger to report on; the module logger when omitted
    """

    def __init__(
        self,
        http_client: ProbeHttpClient,
        settings: Optional[Settings] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.http_client = http_client
        self.settings = settings or get_settings()
        self.logger = log or logger

    async def run(self, request: ProbeRequest) -> ProbeResult:
        """
        Execute the probe.

        Returns:
            ProbeResult; ``http_status`` is 400 for a missing URL, 500 when
            the probe raised, 200 otherwise
        """
        url = request.target_url
        if not url:
            return ProbeResult.validation_error()

        metrics = ProbeMetrics(url).start()
        self.logger.info(f"Testing server {url}")

        try:
            connectivity = await probe_connectivity(
                self.http_client,
                url,
                request.credential,
                fallback_timeout=self.settings.CONNECTIVITY_FALLBACK_TIMEOUT,
                metrics=metrics,
                log=self.logger,
            )
            functionality = await probe_functionality(
                self.http_client,
                url,
                request.credential,
                metrics=metrics,
                log=self.logger,
            )
            classification = classify_response(functionality, url, log=self.logger)
            result = self._build_result(connectivity, functionality, classification)
        except Exception as e:
            self.logger.error(f"Error testing server {url}: {e}", exc_info=True)
            metrics.stop(success=False, error=str(e))
            self._log_metrics(metrics)
            return ProbeResult.from_exception(e)

        metrics.stop(success=result.success)
        self._log_metrics(metrics)
        return result

    def _build_result(
        self,
        connectivity: AttemptResult,
        functionality: AttemptResult,
        classification: Classification,
    ) -> ProbeResult:
        success = connectivity.ok or functionality.ok
        is_html = classification.is_html

        if is_html:
            self.logger.info(
                f"Detected HTML response (title: {classification.title!r}), "
                "preserving format for direct display"
            )

        if not success:
            message = FAILURE_MESSAGE
        elif is_html:
            message = HTML_SUCCESS_MESSAGE
        else:
            message = SUCCESS_MESSAGE

        return ProbeResult(
            success=success,
            message=message,
            connectivity=ConnectivityReport.from_attempt(connectivity),
            functionality=FunctionalityReport(
                status=functionality.status_code,
                status_text=functionality.status_text,
                response=render_response(classification, success),
                is_html=is_html,
                headers=functionality.headers,
            ),
        )

    def _log_metrics(self, metrics: ProbeMetrics):
        log_fn = self.logger.info if metrics.success else self.logger.warning
        log_fn("Probe complete", extra={"probe_metrics": metrics.to_dict()})


def render_response(classification: Classification, success: bool) -> Union[str, ServerSummary]:
    """Wire form of a classified response: raw HTML, or a server summary"""
    if isinstance(classification, HtmlResponse):
        return classification.html

    summary = ServerSummary(
        status="success" if success else "failed",
        message=SUCCESS_MESSAGE if success else SERVER_UNREACHABLE_MESSAGE,
        server=classification.server,
        raw_response=classification.raw_response,
    )
    if classification.kind == "server_info":
        summary.version = classification.version
        summary.features = classification.features or None
    return summary
