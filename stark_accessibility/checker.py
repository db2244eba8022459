"""Entry point for auditing a screen and reporting the result to Stark.

Basic usage::

    from stark_accessibility import AccessibilityChecker, SeleniumAxeAudit

    audit = SeleniumAxeAudit(driver)
    checker = AccessibilityChecker(stark_project_token="your-stark-project-token")
    checker.audit_screen(audit, scan_name="HomeScreen")

The API endpoint can be overridden with the STARK_API_URL environment variable.
"""
import logging
from typing import List, Optional

from .audit import AccessibilityAudit
from .errors import AccessibilityError
from .issue import Platform, StarkIssue
from .report_service import ReportService, WebApiReportService

logger = logging.getLogger("stark_accessibility.checker")


class AccessibilityChecker:
    def __init__(
        self,
        stark_project_token: str,
        report_service: Optional[ReportService] = None,
        platform: Platform = Platform.TOUCH,
    ):
        if report_service is None:
            report_service = WebApiReportService(stark_project_token=stark_project_token)
        self.report_service = report_service
        self.platform = platform

    def audit_screen(
        self,
        application: AccessibilityAudit,
        scan_name: str,
        fail_test_on_accessibility_issues: bool = False,
    ) -> List[StarkIssue]:
        """Audit one screen, report every issue found and optionally fail.

        Must be called from the thread that owns ``application``. Raises
        AccessibilityError carrying all issues when any were found and
        ``fail_test_on_accessibility_issues`` is set.
        """
        application.ensure_ui_context()
        collected: List[StarkIssue] = []

        def handle(issue) -> bool:
            collected.append(StarkIssue.from_audit_issue(issue, self.platform))
            # claim the issue so the audit itself doesn't fail
            return True

        application.perform_accessibility_audit(handle)
        logger.info(f"{scan_name}: found {len(collected)} accessibility issue(s)")

        self.report_service.send(collected, scan_name)

        if collected and fail_test_on_accessibility_issues:
            raise AccessibilityError(collected)
        return collected
