"""Prerequisite checks: interpreter, Playwright's Chromium, target reachability.

Required checks decide the exit status. Optional ones only warn.
"""

import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from playwright.async_api import Browser, Error as PlaywrightError, async_playwright

from . import config
from .log import get_logger

logger = get_logger(__name__)

MIN_PYTHON = (3, 8)
MIN_CHROMIUM_MAJOR = 90


@dataclass
class CheckResult:
    name: str
    ok: bool
    detail: str
    required: bool = True
    warning: bool = False

    @property
    def symbol(self) -> str:
        if not self.ok:
            return "❌" if self.required else "⚠️ "
        return "⚠️ " if self.warning else "✅"


def check_python(version_info: Tuple[int, ...] = tuple(sys.version_info[:3])) -> CheckResult:
    current = ".".join(str(part) for part in version_info[:3])
    wanted = ".".join(str(part) for part in MIN_PYTHON)
    if tuple(version_info[:2]) >= MIN_PYTHON:
        return CheckResult("python", True, f"Python {current} (>= {wanted})")
    return CheckResult("python", False, f"Python {current} found, need >= {wanted}")


def chromium_major(version: str) -> Optional[int]:
    head = version.strip().split(".", 1)[0]
    return int(head) if head.isdigit() else None


def check_browser_version(version: str) -> CheckResult:
    major = chromium_major(version)
    if major is None:
        return CheckResult("chromium", True, f"Chromium launched, unrecognised version {version!r}", warning=True)
    if major < MIN_CHROMIUM_MAJOR:
        return CheckResult(
            "chromium", True, f"Chromium {version} launched, recommend >= {MIN_CHROMIUM_MAJOR}", warning=True
        )
    return CheckResult("chromium", True, f"Chromium {version} launched (>= {MIN_CHROMIUM_MAJOR})")


async def check_url(browser: Browser, url: str, timeout_ms: int = config.NAVIGATION_TIMEOUT_MS) -> CheckResult:
    page = await browser.new_page()
    try:
        response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
    except PlaywrightError as exc:
        return CheckResult("url", False, f"{url} unreachable: {exc}", required=False)
    finally:
        await page.close()
    if response is not None and response.status >= 400:
        return CheckResult("url", False, f"{url} answered HTTP {response.status}", required=False)
    return CheckResult("url", True, f"{url} reachable", required=False)


async def run_checks(url: Optional[str] = None, timeout_ms: int = config.NAVIGATION_TIMEOUT_MS) -> List[CheckResult]:
    results = [check_python()]
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=True)
        except PlaywrightError as exc:
            logger.debug("chromium_launch_failed", error=str(exc))
            results.append(CheckResult(
                "chromium", False, "Chromium did not launch; run: python -m playwright install chromium"
            ))
            if url:
                results.append(CheckResult("url", False, f"{url} not checked, no browser", required=False))
            return results
        try:
            results.append(check_browser_version(browser.version))
            if url:
                results.append(await check_url(browser, url, timeout_ms))
        finally:
            await browser.close()
    return results


def report(results: Sequence[CheckResult]) -> int:
    """Print one line per check; 1 if any required check failed."""
    for result in results:
        print(f"{result.symbol} {result.detail}")
    failed = [r.name for r in results if r.required and not r.ok]
    if failed:
        print(f"\n❌ Missing prerequisites: {', '.join(failed)}")
        return 1
    print("\n✅ Ready")
    return 0
