from typing import List


class ConfigurationError(RuntimeError):
    """The library was packaged with an unusable endpoint configuration."""


class UIContextError(RuntimeError):
    """An audit was started outside the thread that owns the screen."""


class AccessibilityError(AssertionError):
    """Accessibility issues were found and the caller asked to fail on them."""

    def __init__(self, issues):
        self.issues: List = list(issues)
        super().__init__(self.description)

    @property
    def description(self) -> str:
        return f"Accessibility audit found {len(self.issues)} issue(s)"

    @property
    def error_details(self) -> str:
        return "\n".join(f"- {issue.detailed_description}" for issue in self.issues)
