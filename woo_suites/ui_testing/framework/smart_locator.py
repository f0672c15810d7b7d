"""
================================================================================
Smart Locator with Healing Fallbacks
================================================================================

Ordered-fallback element resolution:
    - Each logical UI element is a LocatorSpec: an ordered list of selector
      strategies plus a disambiguation rule
    - The first strategy that matches the live page wins; later strategies
      are never evaluated
    - Fallback usage is tracked so brittle primary selectors can be fixed

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Tuple, Union

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .errors import ElementNotFoundError


TextMatcher = Union[str, Pattern[str]]

STRATEGY_KINDS = ("css", "xpath", "role", "text", "label", "placeholder", "test_id")


@dataclass(frozen=True)
class SelectorStrategy:
    """
    One concrete way of querying the page for an element.

    Attributes:
        kind: One of STRATEGY_KINDS
        value: Selector expression, ARIA role, or text to match
        name: Accessible name (role strategies only)
        exact: Exact (case-sensitive, whole-string) matching for text-like kinds
    """
    kind: str
    value: TextMatcher
    name: Optional[TextMatcher] = None
    exact: bool = False

    def __post_init__(self) -> None:
        if self.kind not in STRATEGY_KINDS:
            raise ValueError(
                f"Unknown strategy kind '{self.kind}', expected one of {STRATEGY_KINDS}"
            )
        if not self.value:
            raise ValueError(f"Empty selector value for {self.kind} strategy")
        if self.kind in ("css", "xpath", "role") and not isinstance(self.value, str):
            raise ValueError(f"{self.kind} strategy requires a string value")

    def build(self, root: Union[Page, Locator]) -> Locator:
        """Create the (lazy) Playwright locator for this strategy under `root`."""
        if self.kind == "css":
            return root.locator(self.value)
        if self.kind == "xpath":
            return root.locator(f"xpath={self.value}")
        if self.kind == "role":
            options = {}
            if self.name is not None:
                options["name"] = self.name
                if isinstance(self.name, str):
                    options["exact"] = self.exact
            return root.get_by_role(self.value, **options)
        if self.kind == "text":
            return root.get_by_text(self.value, exact=self.exact)
        if self.kind == "label":
            return root.get_by_label(self.value, exact=self.exact)
        if self.kind == "placeholder":
            return root.get_by_placeholder(self.value, exact=self.exact)
        return root.get_by_test_id(self.value)

    def describe(self) -> str:
        """Short human-readable form used in logs and reports."""
        value = _matcher_repr(self.value)
        if self.kind == "role" and self.name is not None:
            return f"role={value}[name={_matcher_repr(self.name)}]"
        return f"{self.kind}={value}"


def _matcher_repr(matcher: TextMatcher) -> str:
    if isinstance(matcher, str):
        return matcher
    return f"/{matcher.pattern}/"


# -----------------------------------------------------------------------------
# Strategy shorthands used by page objects
# -----------------------------------------------------------------------------

def css(selector: str) -> SelectorStrategy:
    return SelectorStrategy("css", selector)


def xpath(expression: str) -> SelectorStrategy:
    return SelectorStrategy("xpath", expression)


def role(aria_role: str, name: Optional[TextMatcher] = None, exact: bool = False) -> SelectorStrategy:
    return SelectorStrategy("role", aria_role, name=name, exact=exact)


def text(value: TextMatcher, exact: bool = False) -> SelectorStrategy:
    return SelectorStrategy("text", value, exact=exact)


def label(value: TextMatcher, exact: bool = False) -> SelectorStrategy:
    return SelectorStrategy("label", value, exact=exact)


def placeholder(value: TextMatcher, exact: bool = False) -> SelectorStrategy:
    return SelectorStrategy("placeholder", value, exact=exact)


def test_id(value: str) -> SelectorStrategy:
    return SelectorStrategy("test_id", value)


# Keep pytest from collecting the helper above as a test function.
test_id.__test__ = False


@dataclass(frozen=True)
class Pick:
    """
    Disambiguation rule applied inside the winning strategy.

    Attributes:
        nth: Zero-based index of the match to use (0 = first match)
        has_text: Only consider matches containing this text
    """
    nth: int = 0
    has_text: Optional[TextMatcher] = None

    def describe(self) -> str:
        parts = [f"nth={self.nth}"]
        if self.has_text is not None:
            parts.append(f"has_text={_matcher_repr(self.has_text)}")
        return ", ".join(parts)


@dataclass(frozen=True)
class LocatorSpec:
    """
    Ordered selector strategies for one logical UI element.

    Strategies are declared from most semantically stable to least. The
    spec is immutable and safe to declare at class level on page objects.
    """
    name: str
    strategies: Tuple[SelectorStrategy, ...]
    pick: Pick = field(default_factory=Pick)

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategies", tuple(self.strategies))
        if not self.strategies:
            raise ValueError(f"LocatorSpec '{self.name}' needs at least one strategy")
        if self.pick.nth < 0:
            raise ValueError(f"LocatorSpec '{self.name}' has negative nth: {self.pick.nth}")

    @classmethod
    def of(
        cls,
        name: str,
        *strategies: SelectorStrategy,
        nth: int = 0,
        has_text: Optional[TextMatcher] = None,
    ) -> "LocatorSpec":
        """
        Convenience constructor.

        Usage:
            >>> PLACE_ORDER = LocatorSpec.of(
            ...     "place order button",
            ...     xpath('//button[normalize-space(text())="Place free order"]'),
            ...     role("button", name=re.compile("place free order", re.I)),
            ... )
        """
        return cls(name=name, strategies=strategies, pick=Pick(nth=nth, has_text=has_text))


@dataclass(frozen=True)
class ResolvedElement:
    """
    A live element chosen by resolving a LocatorSpec.

    Valid only for the page snapshot it was resolved against; resolve again
    after anything that may have mutated the page.
    """
    spec: LocatorSpec
    locator: Locator
    strategy_index: int
    match_count: int

    @property
    def strategy(self) -> SelectorStrategy:
        return self.spec.strategies[self.strategy_index]

    @property
    def used_fallback(self) -> bool:
        return self.strategy_index > 0


@dataclass
class LocatorHealth:
    """
    Tracks which strategy resolved an element.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred (first) strategy
        strategy_index: Index of the strategy that matched
        used_selector: The strategy that matched
    """
    element_name: str
    primary_selector: str
    strategy_index: int
    used_selector: str

    @property
    def used_fallback(self) -> bool:
        return self.strategy_index > 0


class SmartLocator:
    """
    Resolves LocatorSpecs against a Playwright page.

    Resolution evaluates strategies in declared order and short-circuits on
    the first one with any match; the pick rule only disambiguates inside
    it. It does not wait, retry or cache: callers own wait-for-state and
    timeout policy.

    Usage:
        >>> smart = SmartLocator(page)
        >>> element = await smart.resolve(CheckoutPage.PLACE_ORDER_BUTTON)
        >>> await element.locator.click()
    """

    def __init__(self, page: Page):
        """
        Initialize SmartLocator with Playwright page.

        Args:
            page: Playwright Page object
        """
        self.page = page
        self._health_records: List[LocatorHealth] = []
        self._fallback_used: Dict[str, LocatorHealth] = {}

    async def resolve(
        self,
        spec: LocatorSpec,
        root: Optional[Union[Page, Locator]] = None,
    ) -> ResolvedElement:
        """
        Resolve a spec to exactly one live element.

        Args:
            spec: Ordered strategies plus disambiguation rule
            root: Scope to query under (defaults to the whole page)

        The first strategy with at least one match is selected and later
        strategies are never evaluated. The pick rule is then applied inside
        that strategy only; if it cannot be satisfied there, resolution fails.

        Returns:
            ResolvedElement for the first matching strategy

        Raises:
            ElementNotFoundError: When no strategy matches, or the pick rule
                selects nothing within the matching strategy
        """
        scope = root if root is not None else self.page
        errors = []

        for index, strategy in enumerate(spec.strategies):
            try:
                candidates = strategy.build(scope)
                count = await candidates.count()
            except PlaywrightError as e:
                errors.append(f"[{index}] {strategy.describe()} -> {str(e)[:80]}")
                continue

            if count == 0:
                errors.append(f"[{index}] {strategy.describe()} -> 0 matches")
                continue

            return await self._pick(spec, index, candidates, count)

        error_msg = (
            f"All locators failed for '{spec.name}' ({spec.pick.describe()}):\n"
            + "\n".join(f"  - {err}" for err in errors)
        )
        logger.error(error_msg)
        raise ElementNotFoundError(error_msg)

    async def _pick(
        self,
        spec: LocatorSpec,
        index: int,
        candidates: Locator,
        count: int,
    ) -> ResolvedElement:
        """Apply the spec's pick rule inside the selected strategy."""
        strategy = spec.strategies[index]
        if spec.pick.has_text is not None:
            try:
                candidates = candidates.filter(has_text=spec.pick.has_text)
                count = await candidates.count()
            except PlaywrightError as e:
                count = 0
                logger.debug(f"has_text filter failed for '{spec.name}': {e}")

        if count <= spec.pick.nth:
            error_msg = (
                f"Locator for '{spec.name}' matched [{index}] {strategy.describe()} "
                f"but only {count} element(s) satisfy {spec.pick.describe()}; "
                f"later strategies are not evaluated"
            )
            logger.error(error_msg)
            raise ElementNotFoundError(error_msg)

        element = ResolvedElement(
            spec=spec,
            locator=candidates.nth(spec.pick.nth),
            strategy_index=index,
            match_count=count,
        )
        self._record(element)
        return element

    def any_of(
        self,
        spec: LocatorSpec,
        root: Optional[Union[Page, Locator]] = None,
    ) -> Locator:
        """
        Union of all strategies of a spec, for state waits before resolving.

        The pick rule is applied per strategy, so waiting on the union waits
        for the picked element (e.g. the third combobox), not just any match.
        The element to act on still comes from `resolve`.
        """
        scope = root if root is not None else self.page
        union = None
        for strategy in spec.strategies:
            candidates = strategy.build(scope)
            if spec.pick.has_text is not None:
                candidates = candidates.filter(has_text=spec.pick.has_text)
            picked = candidates.nth(spec.pick.nth)
            union = picked if union is None else union.or_(picked)
        return union.first

    def _record(self, element: ResolvedElement) -> None:
        health = LocatorHealth(
            element_name=element.spec.name,
            primary_selector=element.spec.strategies[0].describe(),
            strategy_index=element.strategy_index,
            used_selector=element.strategy.describe(),
        )
        self._health_records.append(health)

        if health.used_fallback:
            logger.warning(
                f"Element '{health.element_name}' used fallback "
                f"#{health.strategy_index}: {health.used_selector}"
            )
            self._fallback_used[health.element_name] = health
        else:
            logger.debug(f"Element '{health.element_name}' found: {health.used_selector}")

    @property
    def health_records(self) -> List[LocatorHealth]:
        return list(self._health_records)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that needed a fallback strategy (maintenance candidates).

        Returns:
            Formatted health report string
        """
        if not self._fallback_used:
            return "All elements used primary locators. No maintenance needed."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]

        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: #{health.strategy_index} -> {health.used_selector}",
                "",
            ])

        return "\n".join(report_lines)


__all__ = [
    "SmartLocator",
    "SelectorStrategy",
    "LocatorSpec",
    "Pick",
    "ResolvedElement",
    "LocatorHealth",
    "ElementNotFoundError",
    "css",
    "xpath",
    "role",
    "text",
    "label",
    "placeholder",
    "test_id",
]
