"""Request tracing for the relay server.

Every request gets a human-readable trace ID. When a debug directory is
configured, the outbound payload and the provider's answer are written to:

    {debug_dir}/logs/{session_id}/{trace_id}/
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class RequestTracer:
    """Generates trace IDs, logs request outcomes and saves debug dumps.

    Only used from the event loop thread, so the counter needs no lock.

    Example:
        tracer = RequestTracer(debug_dir="/tmp/shoutit-debug")
        trace_id = tracer.generate_trace_id("POST", "/shout")
    """

    def __init__(self, debug_dir: str | Path | None = None):
        self._request_counter = 0
        self._session_id: str | None = None
        self._debug_dir_config = debug_dir

    @property
    def debug_dir(self) -> Path | None:
        """Session debug directory, or None when dumps are disabled."""
        if not self._debug_dir_config:
            return None

        if self._session_id is None:
            self._session_id = time.strftime("%Y-%m-%d_%H-%M-%S")

        return Path(self._debug_dir_config) / "logs" / self._session_id

    def generate_trace_id(self, method: str, path: str) -> str:
        """Generate a trace ID.

        Format: {counter}_{hhmmss}_{method}_{path}
        Example: 00001_031333_POST_shout
        """
        self._request_counter += 1
        timestamp = time.strftime("%H%M%S")
        route = "".join(c if c.isalnum() else "_" for c in path.strip("/"))[:20] or "root"
        return f"{self._request_counter:05d}_{timestamp}_{method.upper()}_{route}"

    def save_debug(self, trace_id: str, filename: str, data: Any) -> None:
        """Save debug data to a JSON file if a debug directory is configured."""
        if not self.debug_dir:
            return

        try:
            trace_path = self.debug_dir / trace_id
            trace_path.mkdir(parents=True, exist_ok=True)

            filepath = trace_path / filename
            with open(filepath, "w") as f:
                json.dump(data, f, indent=2, default=str, ensure_ascii=False)
            logger.debug("[%s] Saved debug file: %s", trace_id, filepath)
        except Exception as e:
            logger.warning("[%s] Failed to save debug file %s: %s", trace_id, filename, e)

    def log_request(self, trace_id: str, method: str, path: str, body_size: int) -> None:
        logger.debug(
            "[%s] request_start: method=%s, path=%s, body_size=%d",
            trace_id,
            method,
            path,
            body_size,
        )

    def log_response(
        self,
        trace_id: str,
        method: str,
        path: str,
        status_code: int,
        duration_s: float,
        error: str | None = None,
    ) -> None:
        """Log the outcome of a request.

        Failures are logged at WARNING, everything else at INFO.
        """
        if error:
            logger.warning(
                "[%s] %s %s -> %d: %s (%.3fs)",
                trace_id,
                method,
                path,
                status_code,
                error[:200],
                duration_s,
            )
        else:
            logger.info(
                "[%s] %s %s -> %d (%.3fs)",
                trace_id,
                method,
                path,
                status_code,
                duration_s,
            )
