"""
StarkAccessibility - accessibility audits for UI tests, reported to Stark

Modules:
- checker: audit a screen and report the issues found
- issue: normalized, serializable accessibility issues
- report_service: console and Stark web API reporters
- selenium_axe / playwright_axe: axe-core audits for Selenium and Playwright
"""

from .audit import AccessibilityAudit, AxeAudit, AxeIssue, ElementSnapshot
from .checker import AccessibilityChecker
from .errors import AccessibilityError, ConfigurationError, UIContextError
from .issue import AuditType, Platform, StarkIssue, audit_type_string
from .playwright_axe import PlaywrightAxeAudit
from .report_service import ConsoleReportService, ReportService, WebApiReportService
from .selenium_axe import SeleniumAxeAudit
from .version import LibraryVersion

__version__ = LibraryVersion.current

__all__ = [
    "AccessibilityAudit",
    "AccessibilityChecker",
    "AccessibilityError",
    "AuditType",
    "AxeAudit",
    "AxeIssue",
    "ConfigurationError",
    "ConsoleReportService",
    "ElementSnapshot",
    "LibraryVersion",
    "Platform",
    "PlaywrightAxeAudit",
    "ReportService",
    "SeleniumAxeAudit",
    "StarkIssue",
    "UIContextError",
    "WebApiReportService",
    "audit_type_string",
    "__version__",
]
