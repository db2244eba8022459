"""Accessibility audit capabilities backed by axe-core.

An audit yields raw issues to a handler one at a time. The handler returns
True to take ownership of an issue; anything left unclaimed fails the audit
once the pass is over.
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .errors import UIContextError
from .issue import AuditType, RawElement

IssueHandler = Callable[["AxeIssue"], bool]

AXE_CDN = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"

WCAG_TAGS = ("wcag2a", "wcag2aa")

# axe rule categories
_CATEGORY_AUDIT_TYPES = {
    "cat.color": AuditType.CONTRAST,
    "cat.text-alternatives": AuditType.SUFFICIENT_ELEMENT_DESCRIPTION,
    "cat.forms": AuditType.SUFFICIENT_ELEMENT_DESCRIPTION,
    "cat.name-role-value": AuditType.TRAIT,
    "cat.aria": AuditType.TRAIT,
    "cat.keyboard": AuditType.ACTION,
    "cat.structure": AuditType.PARENT_CHILD,
    "cat.tables": AuditType.PARENT_CHILD,
    "cat.semantics": AuditType.ELEMENT_DETECTION,
}

# rules whose category doesn't say enough on its own
_RULE_AUDIT_TYPES = {
    "target-size": AuditType.HIT_REGION,
    "meta-viewport": AuditType.DYNAMIC_TYPE,
    "meta-viewport-large": AuditType.DYNAMIC_TYPE,
    "avoid-inline-spacing": AuditType.TEXT_CLIPPED,
    "region": AuditType.ELEMENT_DETECTION,
    "scrollable-region-focusable": AuditType.ELEMENT_DETECTION,
    "aria-hidden-focus": AuditType.ELEMENT_DETECTION,
    "nested-interactive": AuditType.ELEMENT_DETECTION | AuditType.ACTION,
}


def audit_type_for_rule(rule: Dict[str, Any]) -> AuditType:
    """Map an axe violation to the audit categories it belongs to."""
    audit_type = _RULE_AUDIT_TYPES.get(rule.get("id", ""), AuditType.NONE)
    for tag in rule.get("tags", []):
        audit_type |= _CATEGORY_AUDIT_TYPES.get(tag, AuditType.NONE)
    return audit_type


@dataclass(frozen=True)
class ElementSnapshot:
    """Element attributes read out of the page in one go."""

    description: str
    identifier: str
    label: str


def _detailed_description(rule: Dict[str, Any], node: Dict[str, Any]) -> str:
    lines = [rule.get("description", "")]
    if rule.get("helpUrl"):
        lines.append(f"More info: {rule['helpUrl']}")
    if node.get("failureSummary"):
        lines.append(node["failureSummary"])
    return "\n".join(line for line in lines if line)


class AxeIssue:
    """One axe violation on one node.

    The element is looked up through the audit's live page handle on access.
    """

    def __init__(self, audit: "AxeAudit", rule: Dict[str, Any], node: Dict[str, Any]):
        self.rule = rule
        self.node = node
        self.compact_description: str = rule.get("help") or rule.get("id", "")
        self.detailed_description: str = _detailed_description(rule, node)
        self.audit_type: AuditType = audit_type_for_rule(rule)
        self._audit = audit

    @property
    def selector(self) -> Optional[str]:
        target = self.node.get("target") or []
        # shadow DOM / iframe targets are nested lists, not plain selectors
        if target and isinstance(target[0], str):
            return target[0]
        return None

    @property
    def element(self) -> Optional[RawElement]:
        if self.selector is None:
            return None
        return self._audit.find_element(self.selector, self.node.get("html", ""))

    def __repr__(self):
        return f"<AxeIssue {self.rule.get('id')} {self.selector}>"


class AccessibilityAudit(ABC):
    """A screen under test that can run an accessibility audit over itself.

    Bound to the thread it was created on, which must be the thread that
    drives the browser.
    """

    def __init__(self):
        self.owner_thread = threading.get_ident()

    def ensure_ui_context(self) -> None:
        if threading.get_ident() != self.owner_thread:
            raise UIContextError(
                f"{type(self).__name__} must be audited from the thread that owns it"
            )

    @abstractmethod
    def raw_issues(self) -> Iterable[AxeIssue]:
        raise NotImplementedError

    def perform_accessibility_audit(self, handler: IssueHandler) -> None:
        self.ensure_ui_context()
        unclaimed: List[AxeIssue] = []
        for issue in self.raw_issues():
            if not handler(issue):
                unclaimed.append(issue)
        if unclaimed:
            summary = "\n".join(f"  {issue.compact_description}" for issue in unclaimed)
            raise AssertionError(f"Found {len(unclaimed)} accessibility violations\n{summary}")


class AxeAudit(AccessibilityAudit):
    """Shared axe-core handling: result walking and element lookup."""

    @abstractmethod
    def run_axe(self) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def find_element(self, selector: str, html: str) -> Optional[ElementSnapshot]:
        raise NotImplementedError

    def raw_issues(self) -> Iterator[AxeIssue]:
        results = self.run_axe()
        for rule in results.get("violations", []):
            for node in rule.get("nodes", []):
                yield AxeIssue(self, rule, node)
