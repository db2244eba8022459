from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import List, Optional
from unittest.mock import MagicMock

import pytest

from stark_accessibility.audit import AccessibilityAudit
from stark_accessibility.issue import AuditType


@dataclass
class FakeElement:
    description: str = "Button"
    identifier: str = ""
    label: str = ""


@dataclass
class FakeIssue:
    compact_description: str = "Contrast failed"
    detailed_description: str = "Text contrast is below 4.5:1"
    audit_type: AuditType = AuditType.CONTRAST
    element: Optional[FakeElement] = None


class FakeScreen(AccessibilityAudit):
    def __init__(self, issues: List[FakeIssue]):
        super().__init__()
        self.issues = issues

    def raw_issues(self):
        return list(self.issues)


class ImmediateExecutor(Executor):
    """Runs submitted work on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture
def executor():
    return ImmediateExecutor()


@pytest.fixture
def session():
    session = MagicMock()
    session.put.return_value = MagicMock(status_code=200)
    return session


@pytest.fixture(autouse=True)
def no_api_url_override(monkeypatch):
    monkeypatch.delenv("STARK_API_URL", raising=False)
