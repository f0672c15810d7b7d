"""
In-memory stand-ins for Playwright Page / Locator used by the unit tests.

The fake DOM is a mapping of query key -> element ids. Query keys mirror how
SelectorStrategy builds locators:
    css          -> the selector itself
    xpath        -> "xpath=<expression>"
    role         -> "role=<role>" or "role=<role>[name=<name>]"
    text / label / placeholder / test_id -> "<kind>=<value>"
"""

from typing import Dict, List, Optional, Set

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


def _name_key(name) -> str:
    return name if isinstance(name, str) else name.pattern


class FakeResponse:
    def __init__(self, url: str, status: int = 200):
        self.url = url
        self.status = status


class FakeLocator:
    def __init__(self, page: "FakePage", key: str, elements: List[str]):
        self.page = page
        self.key = key
        self.elements = elements

    # -- composition -------------------------------------------------------

    def locator(self, selector: str):
        scoped = list(self.page.dom.get(selector, [])) if self.elements else []
        return FakeLocator(self.page, f"{self.key} >> {selector}", scoped)

    def filter(self, has_text=None):
        text = _name_key(has_text)
        matching = [e for e in self.elements if text in self.page.texts.get(e, "")]
        return FakeLocator(self.page, f"{self.key}|has_text={text}", matching)

    def nth(self, index: int):
        return FakeLocator(self.page, f"{self.key}|nth={index}", self.elements[index:index + 1])

    @property
    def first(self):
        return self.nth(0)

    def or_(self, other: "FakeLocator"):
        merged = list(self.elements) + [e for e in other.elements if e not in self.elements]
        return FakeLocator(self.page, f"{self.key}|or|{other.key}", merged)

    @property
    def element(self) -> Optional[str]:
        return self.elements[0] if self.elements else None

    # -- queries -----------------------------------------------------------

    async def count(self) -> int:
        self.page.evaluated.append(self.key)
        base_key = self.key.split("|")[0]
        if base_key in self.page.broken:
            raise PlaywrightError(f"Malformed selector: {base_key}")
        return len(self.elements)

    async def wait_for(self, state: str = "visible", timeout: Optional[int] = None) -> None:
        self.page.waits.append((self.key, state))
        if state in ("attached", "visible") and not self.elements:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms waiting for {self.key}")
        if state == "visible" and self.element in self.page.hidden:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms waiting for {self.key} visible")

    async def text_content(self) -> Optional[str]:
        return self.page.texts.get(self.element)

    async def inner_text(self) -> str:
        return self.page.texts.get(self.element, "")

    async def get_attribute(self, name: str) -> Optional[str]:
        return self.page.attributes.get(self.element, {}).get(name)

    async def is_enabled(self) -> bool:
        return True

    # -- actions -----------------------------------------------------------

    async def click(self, timeout: Optional[int] = None, **kwargs) -> None:
        if self.element in self.page.blocked:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms clicking {self.element}")
        self.page.actions.append(("click", self.element, kwargs))

    async def fill(self, value: str, timeout: Optional[int] = None) -> None:
        self.page.actions.append(("fill", self.element, value))

    async def hover(self, timeout: Optional[int] = None) -> None:
        self.page.actions.append(("hover", self.element, None))

    async def select_option(self, value: str, timeout: Optional[int] = None) -> None:
        self.page.actions.append(("select", self.element, value))

    async def check(self, timeout: Optional[int] = None) -> None:
        self.page.actions.append(("check", self.element, None))

    async def uncheck(self, timeout: Optional[int] = None) -> None:
        self.page.actions.append(("uncheck", self.element, None))

    async def scroll_into_view_if_needed(self, timeout: Optional[int] = None) -> None:
        self.page.actions.append(("scroll", self.element, None))


class FakeKeyboard:
    def __init__(self, page: "FakePage"):
        self.page = page

    async def press(self, key: str) -> None:
        self.page.actions.append(("press", None, key))


class FakePage:
    """
    Args:
        dom: query key -> element ids matched by that query
        texts: element id -> text content
        hidden: element ids that exist but never become visible
        broken: query keys whose evaluation raises a Playwright error
        title: document title returned by title()
    """

    def __init__(
        self,
        dom: Optional[Dict[str, List[str]]] = None,
        texts: Optional[Dict[str, str]] = None,
        hidden: Optional[Set[str]] = None,
        broken: Optional[Set[str]] = None,
        url: str = "about:blank",
        title: str = "",
    ):
        self.dom = dom or {}
        self.texts = texts or {}
        self.hidden = hidden or set()
        self.broken = broken or set()
        self.blocked: Set[str] = set()
        self.attributes: Dict[str, Dict[str, str]] = {}
        self.url = url
        self.title_text = title
        self.keyboard = FakeKeyboard(self)

        self.evaluated: List[str] = []
        self.waits: List[tuple] = []
        self.actions: List[tuple] = []
        self.handlers: Dict[str, list] = {}
        self.goto_error: Optional[Exception] = None
        self.url_after_wait: Optional[str] = None

    def _query(self, key: str) -> FakeLocator:
        return FakeLocator(self, key, list(self.dom.get(key, [])))

    # -- locator factories ---------------------------------------------------

    def locator(self, selector: str) -> FakeLocator:
        return self._query(selector)

    def get_by_role(self, role: str, name=None, exact=None) -> FakeLocator:
        if name is None:
            return self._query(f"role={role}")
        return self._query(f"role={role}[name={_name_key(name)}]")

    def get_by_text(self, text, exact=None) -> FakeLocator:
        return self._query(f"text={_name_key(text)}")

    def get_by_label(self, text, exact=None) -> FakeLocator:
        return self._query(f"label={_name_key(text)}")

    def get_by_placeholder(self, text, exact=None) -> FakeLocator:
        return self._query(f"placeholder={_name_key(text)}")

    def get_by_test_id(self, test_id: str) -> FakeLocator:
        return self._query(f"test_id={test_id}")

    # -- page-level API ------------------------------------------------------

    def on(self, event: str, handler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def emit(self, event: str, payload) -> None:
        for handler in self.handlers.get(event, []):
            handler(payload)

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[int] = None):
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url
        return FakeResponse(url)

    async def wait_for_url(self, url, timeout: Optional[int] = None) -> None:
        if self.url_after_wait is not None:
            self.url = self.url_after_wait
        matched = url(self.url) if callable(url) else False
        if isinstance(url, str):
            matched = url == self.url
        elif hasattr(url, "search"):
            matched = bool(url.search(self.url))
        if not matched:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms waiting for URL {url}")

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[int] = None) -> None:
        self.waits.append(("load_state", state))

    async def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        data = b"\x89PNG fake"
        if path:
            with open(path, "wb") as f:
                f.write(data)
        return data

    async def reload(self, wait_until: Optional[str] = None, timeout: Optional[int] = None):
        self.actions.append(("reload", None, wait_until))
        return FakeResponse(self.url)

    async def go_back(self, wait_until: Optional[str] = None, timeout: Optional[int] = None):
        self.actions.append(("go_back", None, wait_until))
        return None

    async def title(self) -> str:
        return self.title_text
