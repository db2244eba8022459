"""Normalized accessibility issues.

A raw issue comes straight from the audit engine and may hold live handles
into the page under test. StarkIssue copies out everything needed for triage
so it stays valid after the page is gone.
"""
import enum
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple


class AuditType(enum.Flag):
    NONE = 0
    CONTRAST = enum.auto()
    ELEMENT_DETECTION = enum.auto()
    HIT_REGION = enum.auto()
    SUFFICIENT_ELEMENT_DESCRIPTION = enum.auto()
    DYNAMIC_TYPE = enum.auto()
    TEXT_CLIPPED = enum.auto()
    TRAIT = enum.auto()
    ACTION = enum.auto()
    PARENT_CHILD = enum.auto()


class Platform(enum.Enum):
    TOUCH = "touch"
    DESKTOP = "desktop"


_COMMON_TAGS = [
    (AuditType.CONTRAST, "contrast"),
    (AuditType.ELEMENT_DETECTION, "elementDetection"),
    (AuditType.HIT_REGION, "hitRegion"),
    (AuditType.SUFFICIENT_ELEMENT_DESCRIPTION, "sufficientElementDescription"),
]

# Order matters: tags of a multi-category issue are emitted in this order.
AUDIT_TYPE_TAGS: Dict[Platform, List[Tuple[AuditType, str]]] = {
    Platform.TOUCH: _COMMON_TAGS + [
        (AuditType.DYNAMIC_TYPE, "dynamicType"),
        (AuditType.TEXT_CLIPPED, "textClipped"),
        (AuditType.TRAIT, "trait"),
    ],
    Platform.DESKTOP: _COMMON_TAGS + [
        (AuditType.ACTION, "action"),
        (AuditType.PARENT_CHILD, "parentChild"),
    ],
}

UNKNOWN_TYPE = "unknownType"


class RawElement(Protocol):
    description: str
    identifier: str
    label: str


class RawIssue(Protocol):
    compact_description: str
    detailed_description: str
    audit_type: AuditType
    element: Optional[RawElement]


def audit_type_string(audit_type: AuditType, platform: Platform = Platform.TOUCH) -> str:
    """Render a set of audit categories as a comma-joined tag list.

    Returns "unknownType" when none of the platform's categories is set.
    """
    tags = [tag for flag, tag in AUDIT_TYPE_TAGS[platform] if flag in audit_type]
    if not tags:
        return UNKNOWN_TYPE
    return ", ".join(tags)


def _none_if_empty(value: str) -> Optional[str]:
    return value if value else None


@dataclass(frozen=True)
class StarkIssue:
    compact_description: str
    detailed_description: str
    audit_type: str
    element_description: Optional[str] = None
    element_identifier: Optional[str] = None
    element_label: Optional[str] = None

    @classmethod
    def from_audit_issue(cls, issue: RawIssue, platform: Platform = Platform.TOUCH) -> "StarkIssue":
        """Copy a raw audit issue into a detached record.

        Must run on the thread that owns the screen, element attributes are
        read here and never again.
        """
        element = issue.element
        if element is None:
            return cls(
                compact_description=issue.compact_description,
                detailed_description=issue.detailed_description,
                audit_type=audit_type_string(issue.audit_type, platform),
            )
        return cls(
            compact_description=issue.compact_description,
            detailed_description=issue.detailed_description,
            audit_type=audit_type_string(issue.audit_type, platform),
            element_description=str(element.description),
            element_identifier=_none_if_empty(element.identifier),
            element_label=_none_if_empty(element.label),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "compactDescription": self.compact_description,
            "detailedDescription": self.detailed_description,
            "auditType": self.audit_type,
            "elementDescription": self.element_description,
            "elementIdentifier": self.element_identifier,
            "elementLabel": self.element_label,
        }
