import atexit
import json
import logging
import os
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Dict, Mapping, Optional, Sequence
from urllib.parse import urlparse

import requests

from .errors import ConfigurationError
from .issue import StarkIssue
from .version import LibraryVersion

logger = logging.getLogger("stark_accessibility.report")

PRODUCTION_API_URL = "https://app.getstark.co/api/automated-scan/result/ios"

API_URL_ENV_VAR = "STARK_API_URL"

DEFAULT_SCAN_NAME = "Accessibility Scan"

_background_executor: Optional[ThreadPoolExecutor] = None


def _default_executor() -> ThreadPoolExecutor:
    global _background_executor
    if _background_executor is None:
        _background_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="stark-report")
        # pending reports still go out before the interpreter exits
        atexit.register(_background_executor.shutdown, wait=True)
    return _background_executor


def _parse_url(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return value.strip()


def determine_base_url(environ: Optional[Mapping[str, str]] = None) -> str:
    """Pick the collection endpoint, preferring STARK_API_URL when it is a valid URL."""
    if environ is None:
        environ = os.environ
    override = _parse_url(environ.get(API_URL_ENV_VAR))
    if override is not None:
        return override
    if environ.get(API_URL_ENV_VAR):
        logger.warning(f"Ignoring invalid {API_URL_ENV_VAR} value, using {PRODUCTION_API_URL}")

    url = _parse_url(PRODUCTION_API_URL)
    if url is None:
        raise ConfigurationError("Invalid URL format for production API URL")
    return url


def build_payload(results: Sequence[StarkIssue], scan_name: str) -> Dict[str, Any]:
    return {
        "version": LibraryVersion.current,
        "data": {
            "name": scan_name,
            "results": [issue.to_dict() for issue in results],
        },
    }


class ReportService(ABC):
    """Sends collected accessibility issues somewhere."""

    @abstractmethod
    def send(self, results: Sequence[StarkIssue], scan_name: str = DEFAULT_SCAN_NAME) -> None:
        raise NotImplementedError


class ConsoleReportService(ReportService):
    """Prints every issue to stdout. Useful when working offline."""

    def send(self, results: Sequence[StarkIssue], scan_name: str = "") -> None:
        print(f"--- Found {len(results)} Accessibility Issue(s) ---")
        for index, issue in enumerate(results, start=1):
            print(f"\nIssue #{index}:")
            print(f"  Detailed Description: {issue.detailed_description}")
            print(f"  Compact Description: {issue.compact_description}")
            print(f"  Audit Type: {issue.audit_type}")
            print(f"  Element Description: {issue.element_description or 'N/A'}")
            print(f"  Element Label: {issue.element_label or 'N/A'}")
            print(f"  Element Identifier: {issue.element_identifier or 'N/A'}")
            print("---")
        print("\n--- End of Accessibility Issues ---")


class WebApiReportService(ReportService):
    """Reports issues to the Stark API with a PUT request.

    Sends are fire-and-forget: send() hands the request to a background
    executor and returns right away. The outcome is only ever logged, failed
    reports are neither raised nor retried.
    """

    def __init__(
        self,
        stark_project_token: str,
        session: Optional[requests.Session] = None,
        executor: Optional[Executor] = None,
        timeout: float = 30,
    ):
        self.url = determine_base_url()
        self.stark_project_token = stark_project_token
        # without an injected session every send opens its own
        self.session = session
        self.executor = executor
        self.timeout = timeout

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.stark_project_token}",
            "User-Agent": LibraryVersion.user_agent,
        }

    def send(self, results: Sequence[StarkIssue], scan_name: str = DEFAULT_SCAN_NAME) -> None:
        try:
            body = json.dumps(build_payload(results, scan_name), indent=2)
        except (TypeError, ValueError) as e:
            logger.error(f"Error encoding accessibility report: {e}")
            return

        executor = self.executor if self.executor is not None else _default_executor()
        count = len(results)
        try:
            future = executor.submit(self._put, body)
        except RuntimeError as e:
            # executor already shut down, e.g. during interpreter exit
            logger.error(f"Error sending accessibility report: {e}")
            return
        future.add_done_callback(lambda f: self._log_outcome(f, count))

    def _put(self, body: str) -> requests.Response:
        data = body.encode("utf-8")
        if self.session is not None:
            return self.session.put(self.url, data=data, headers=self.headers, timeout=self.timeout)
        with requests.Session() as session:
            return session.put(self.url, data=data, headers=self.headers, timeout=self.timeout)

    @staticmethod
    def _log_outcome(future: Future, count: int) -> None:
        error = future.exception()
        if error is not None:
            logger.error(f"Error sending accessibility report: {error}")
            return

        status_code = future.result().status_code
        if 200 <= status_code < 300:
            logger.info(f"Successfully sent {count} accessibility issues (Status code: {status_code})")
        else:
            logger.error(f"Failed to send accessibility report (Status code: {status_code})")
