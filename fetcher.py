"""
fetcher.py - Transport

Fetches raw upstream pages. Every call is bounded by a timeout and every
failure surfaces as TransportFailure, which the source adapters catch.
"""

import random
from typing import Dict, Optional

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

import config
from errors import TransportFailure
from logger import setup_logger

logger = setup_logger(__name__)

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0",
]


def get_random_user_agent() -> str:
    return random.choice(USER_AGENTS)


def default_headers() -> Dict[str, str]:
    return {
        "User-Agent": get_random_user_agent(),
        "Accept": "text/html,application/xhtml+xml",
    }


class HttpFetcher:
    """Plain HTTP GET through a shared requests session."""

    def __init__(self, timeout: float = config.FETCH_TIMEOUT_SECONDS, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        merged = {**default_headers(), **(headers or {})}
        try:
            resp = self.session.get(url, headers=merged, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise TransportFailure(url, str(e)) from e
        return resp.text


class BrowserFetcher:
    """
    Headless Chromium for pages that only fill in after their scripts run.
    A fresh browser per call keeps it safe to use from worker threads.
    """

    def __init__(self, timeout: float = config.FETCH_TIMEOUT_SECONDS):
        self.timeout_ms = int(timeout * 1000)

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        merged = {**default_headers(), **(headers or {})}
        user_agent = merged.pop("User-Agent")
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=True)
                try:
                    context = browser.new_context(user_agent=user_agent, extra_http_headers=merged)
                    page = context.new_page()
                    page.goto(url, timeout=self.timeout_ms, wait_until="networkidle")
                    return page.content()
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise TransportFailure(url, str(e)) from e


def build_fetcher(backend: str = config.FETCH_BACKEND, timeout: float = config.FETCH_TIMEOUT_SECONDS):
    """Pick the transport named by FETCH_BACKEND."""
    if backend == "browser":
        logger.info("Using headless browser transport", extra={"event": "fetcher_selected"})
        return BrowserFetcher(timeout=timeout)
    if backend != "http":
        raise ValueError(f"Unknown fetch backend: {backend}")
    return HttpFetcher(timeout=timeout)
