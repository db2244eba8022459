import logging
from typing import Any, Dict, Optional

from axe_selenium_python import Axe
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By

from .audit import AxeAudit, ElementSnapshot

logger = logging.getLogger("stark_accessibility.selenium")


class SeleniumAxeAudit(AxeAudit):
    """Runs axe-core inside the page currently loaded in a Selenium driver."""

    def __init__(self, driver, context=None, options=None, results_path: Optional[str] = None):
        super().__init__()
        self.driver = driver
        self.context = context
        self.options = options
        self.results_path = results_path

    def run_axe(self) -> Dict[str, Any]:
        axe = Axe(self.driver)
        # inject on every run, the page may have navigated since the last one
        axe.inject()
        results = axe.run(context=self.context, options=self.options)
        if self.results_path:
            axe.write_results(results, self.results_path)
        logger.debug(f"axe reported {len(results.get('violations', []))} violated rules")
        return results

    def find_element(self, selector: str, html: str) -> Optional[ElementSnapshot]:
        try:
            web_element = self.driver.find_element(By.CSS_SELECTOR, selector)
            return ElementSnapshot(
                description=html or f"<{web_element.tag_name}>",
                identifier=web_element.get_attribute("id") or "",
                label=web_element.get_attribute("aria-label") or "",
            )
        except WebDriverException as e:
            # missing, stale or unreachable element
            logger.debug(f"Could not read element {selector!r}: {e}")
            return None
