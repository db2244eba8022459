import logging
from typing import Any, Dict, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from .audit import AXE_CDN, WCAG_TAGS, AxeAudit, ElementSnapshot

logger = logging.getLogger("stark_accessibility.playwright")

RUN_AXE_SCRIPT = """
    async (tags) => {
        return await axe.run(document, {
            runOnly: {
                type: 'tag',
                values: tags
            }
        });
    }
"""


class PlaywrightAxeAudit(AxeAudit):
    """Runs axe-core inside a page driven by the sync Playwright API."""

    def __init__(self, page: Page, axe_url: str = AXE_CDN, run_only: Sequence[str] = WCAG_TAGS):
        super().__init__()
        self.page = page
        self.axe_url = axe_url
        self.run_only = list(run_only)

    def run_axe(self) -> Dict[str, Any]:
        self.page.add_script_tag(url=self.axe_url)
        results = self.page.evaluate(RUN_AXE_SCRIPT, self.run_only)
        logger.debug(f"axe reported {len(results.get('violations', []))} violated rules")
        return results

    def find_element(self, selector: str, html: str) -> Optional[ElementSnapshot]:
        locator = self.page.locator(selector).first
        try:
            if locator.count() == 0:
                return None
            return ElementSnapshot(
                description=html,
                identifier=locator.get_attribute("id") or "",
                label=locator.get_attribute("aria-label") or "",
            )
        except PlaywrightError as e:
            # detached element or timeout
            logger.debug(f"Could not read element {selector!r}: {e}")
            return None
