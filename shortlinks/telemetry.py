"""Remote log shipping.

``TelemetryClient.log`` validates a small enum-constrained payload and POSTs
it to a remote logging endpoint. ``TelemetryReporter`` wraps a client as a
fire-and-forget sink for the registry: calls are queued on a thread pool and
failures are only logged.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import requests

VALID_STACKS = ["backend", "frontend"]
VALID_LEVELS = ["debug", "info", "warn", "error", "fatal"]
VALID_BACKEND_PACKAGES = [
    "cache", "controller", "cron_job", "db", "domain",
    "handler", "repository", "route", "service",
]
VALID_FRONTEND_PACKAGES = ["api", "component", "hook", "page", "state", "style"]
VALID_UNIVERSAL_PACKAGES = ["auth", "config", "middleware", "utils"]

logger = logging.getLogger(__name__)


class TelemetryError(Exception):
    """The logging endpoint could not be reached or rejected the entry."""


class TelemetryValidationError(TelemetryError, ValueError):
    """A log argument is outside its allow-list."""


def valid_packages(stack: str) -> List[str]:
    """Packages allowed for a stack, universal packages included."""
    if stack.lower() == "backend":
        return VALID_BACKEND_PACKAGES + VALID_UNIVERSAL_PACKAGES
    return VALID_FRONTEND_PACKAGES + VALID_UNIVERSAL_PACKAGES


def validate_log_args(stack: str, level: str, package: str) -> None:
    """Check log arguments against their allow-lists (case-insensitive).

    Raises:
        TelemetryValidationError: If any argument is not allowed
    """
    if not isinstance(stack, str) or stack.lower() not in VALID_STACKS:
        raise TelemetryValidationError(
            f"Invalid stack: {stack}. Must be one of: {', '.join(VALID_STACKS)}"
        )
    if not isinstance(level, str) or level.lower() not in VALID_LEVELS:
        raise TelemetryValidationError(
            f"Invalid level: {level}. Must be one of: {', '.join(VALID_LEVELS)}"
        )
    packages = valid_packages(stack)
    if not isinstance(package, str) or package.lower() not in packages:
        raise TelemetryValidationError(
            f"Invalid package '{package}' for stack '{stack}'. "
            f"Valid packages: {', '.join(packages)}"
        )


class TelemetryClient:
    """Client for the remote logging endpoint."""

    def __init__(
        self,
        api_url: str,
        auth_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 5,
    ):
        """Initialize telemetry client.

        Args:
            api_url: Logging endpoint URL
            auth_token: Bearer credential sent with every entry
            session: Optional requests session (a new one if not specified)
            timeout_seconds: Request timeout
        """
        self.api_url = api_url
        self.auth_token = auth_token
        self.session = session or requests.Session()
        self.timeout_seconds = timeout_seconds

    def log(self, stack: str, level: str, package: str, message: str) -> Dict[str, Any]:
        """Send one log entry.

        Args:
            stack: 'backend' or 'frontend'
            level: 'debug', 'info', 'warn', 'error' or 'fatal'
            package: Package name allowed for the stack
            message: Log message

        Returns:
            Decoded response body

        Raises:
            TelemetryValidationError: If an argument is not allowed
            TelemetryError: If the request fails or returns a non-success status
        """
        validate_log_args(stack, level, package)

        payload = {
            "stack": stack.lower(),
            "level": level.lower(),
            "package": package.lower(),
            "message": message,
        }
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"

        try:
            response = self.session.post(
                self.api_url,
                json=payload,
                headers=headers,
                timeout=self.timeout_seconds,
            )
            if not response.ok:
                raise TelemetryError(
                    f"Logging API error: {response.status_code} {response.reason}"
                )
            result = response.json()
        except (requests.RequestException, ValueError, TelemetryError) as e:
            logger.error(f"Failed to send log to server: {e}")
            logger.info(f"[{stack.upper()}][{level.upper()}][{package}] {message}")
            if isinstance(e, TelemetryError):
                raise
            raise TelemetryError(str(e)) from e

        logger.debug(f"Log sent successfully: {result}")
        return result

    def close(self) -> None:
        self.session.close()


class TelemetryReporter:
    """Fire-and-forget sink that ships ``(level, message)`` pairs through a client."""

    def __init__(
        self,
        client: TelemetryClient,
        stack: str = "backend",
        package: str = "service",
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        validate_log_args(stack, "info", package)
        self.client = client
        self.stack = stack
        self.package = package
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="shortlinks-telemetry"
        )

    def __call__(self, level: str, message: str) -> Optional[Future]:
        try:
            future = self.executor.submit(
                self.client.log, self.stack, level, self.package, message
            )
        except RuntimeError as e:
            # Executor already shut down
            logger.warning(f"Telemetry dropped: {e}")
            return None
        future.add_done_callback(self._report_failure)
        return future

    @staticmethod
    def _report_failure(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Telemetry delivery failed: {error}")

    def close(self, wait: bool = True) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=wait)
        self.client.close()


def reporter_from_config(config) -> Optional[TelemetryReporter]:
    """Build a reporter from a ``Config``; None when no telemetry URL is set.

    Raises:
        TelemetryValidationError: If the configured stack or package is not allowed
    """
    if not config.telemetry_url:
        return None
    client = TelemetryClient(
        api_url=config.telemetry_url,
        auth_token=config.telemetry_token,
        timeout_seconds=config.telemetry_timeout_seconds,
    )
    return TelemetryReporter(
        client,
        stack=config.telemetry_stack,
        package=config.telemetry_package,
    )
