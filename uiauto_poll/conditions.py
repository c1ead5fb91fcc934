# uiauto_poll/conditions.py
"""
@file conditions.py
@brief Element-level probes built on the condition poller.

Elements are duck-typed WebElements: is_enabled(), is_displayed(),
is_selected(), get_attribute() and click().
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional

from .actions import RetryableAction, to_action_error
from .config import TimeConfig
from .outcomes import Completed, PollResult
from .poller import ConditionPoller
from .policy import WaitPolicy
from .scope import ImplicitWaitScope


class ElementState(Enum):
    ENABLED = "enabled"
    DISPLAYED = "displayed"
    SELECTED = "selected"
    DISABLED = "disabled"
    UNSELECTED = "unselected"
    ABSENT = "absent"

    @property
    def negative(self) -> bool:
        """True for states defined by the absence of a prior state."""
        return self in (ElementState.DISABLED, ElementState.UNSELECTED, ElementState.ABSENT)


_STATE_READERS: Dict[ElementState, Callable[[Any], bool]] = {
    ElementState.ENABLED: lambda e: e.is_enabled(),
    ElementState.DISPLAYED: lambda e: e.is_displayed(),
    ElementState.SELECTED: lambda e: e.is_selected(),
    # negative states read the positive state they wait to see go away
    ElementState.DISABLED: lambda e: e.is_enabled(),
    ElementState.UNSELECTED: lambda e: e.is_selected(),
    ElementState.ABSENT: lambda e: e.is_displayed(),
}


def _resolve_poller(poller: Optional[ConditionPoller], driver: Any) -> ConditionPoller:
    if poller is not None:
        return poller
    if driver is not None:
        return ConditionPoller(scope=ImplicitWaitScope(driver))
    return ConditionPoller()


def _label(element: Any, element_name: Optional[str]) -> str:
    if element_name:
        return f"'{element_name}'"
    return f"'{getattr(element, 'id', None) or type(element).__name__}'"


def element_is(
    element: Any,
    state: ElementState,
    *,
    policy: Optional[WaitPolicy] = None,
    poller: Optional[ConditionPoller] = None,
    driver: Any = None,
    element_name: Optional[str] = None,
) -> PollResult:
    """
    Wait until an element is in the expected state.

    Negative states (disabled, unselected, absent) poll the positive state
    and complete after two consecutive reads that no longer show it. A
    failed read counts as one such confirmation; a stale reference
    completes the wait at once.
    """
    state = ElementState(state)
    poller = _resolve_poller(poller, driver)
    if policy is None:
        setting = "absent_wait" if state is ElementState.ABSENT else "state_wait"
        policy = TimeConfig.current().policy(setting, negative_check=state.negative)
    elif policy.negative_check != state.negative:
        policy = policy.with_overrides(negative_check=state.negative)

    description = f"element {_label(element, element_name)} to be {state.value}"
    reader = _STATE_READERS[state]
    return poller.run(
        poller.classifier.condition_probe(lambda: reader(element), description),
        policy,
        description=description,
    )


def verify_element_state(
    element: Any,
    state: ElementState,
    *,
    policy: Optional[WaitPolicy] = None,
    poller: Optional[ConditionPoller] = None,
    driver: Any = None,
    element_name: Optional[str] = None,
) -> Any:
    """Raise ActionError unless the element reaches the state; return it."""
    state = ElementState(state)
    poller = _resolve_poller(poller, driver)
    result = element_is(element, state, policy=policy, poller=poller, element_name=element_name)
    if not result.ok:
        error = to_action_error(result, f"verify {state.value}", element_name)
        raise error from error.cause
    poller.sink.success(f"Element state is verified to be: {state.value}")
    return element


def element_contains_attribute(
    element: Any,
    attribute_name: str,
    attribute_value: str,
    *,
    policy: Optional[WaitPolicy] = None,
    poller: Optional[ConditionPoller] = None,
    driver: Any = None,
) -> bool:
    """Wait until the attribute equals the expected value."""
    poller = _resolve_poller(poller, driver)
    policy = policy or TimeConfig.current().policy("attribute_wait")
    description = f"attribute {attribute_name} -> {attribute_value}"
    result = poller.wait_until(
        lambda: element.get_attribute(attribute_name) == attribute_value,
        policy,
        description=description,
    )
    if not result.ok:
        poller.sink.warn(f"Element does not contain {attribute_name} -> {attribute_value} attribute pair.")
        return False
    return True


def attribute_contains_value(
    element: Any,
    attribute_name: str,
    value: str,
    *,
    policy: Optional[WaitPolicy] = None,
    poller: Optional[ConditionPoller] = None,
    driver: Any = None,
) -> bool:
    """
    Check whether the attribute contains value.

    Only failed reads are retried: the first clean read decides the answer.
    """
    poller = _resolve_poller(poller, driver)
    policy = policy or TimeConfig.current().policy("attribute_wait")
    result = poller.run(
        poller.classifier.action_probe(lambda: value in (element.get_attribute(attribute_name) or "")),
        policy,
        description=f"attribute {attribute_name} of element",
    )
    if isinstance(result, Completed):
        if not result.value:
            poller.sink.warn(f"Element attribute does not contain {attribute_name} -> {value}.")
        return bool(result.value)
    poller.sink.warn(f"Could not read attribute {attribute_name}: {getattr(result, 'last_message', None)}")
    return False


def _click_action(element: Any, scroller: Optional[Callable[[Any], Any]]) -> Callable[[], None]:
    scrolled = False

    def click() -> None:
        nonlocal scrolled
        if scroller is not None and not scrolled:
            scrolled = True
            scroller(element)
        element.click()

    return click


def click_element(
    element: Any,
    scroller: Optional[Callable[[Any], Any]] = None,
    *,
    policy: Optional[WaitPolicy] = None,
    poller: Optional[ConditionPoller] = None,
    driver: Any = None,
    element_name: Optional[str] = None,
) -> None:
    """
    Click with retries. The scroller runs once before the first attempt
    and again before every retry.
    """
    action = RetryableAction(_resolve_poller(poller, driver))
    policy = policy or TimeConfig.current().policy("click_action")
    action.perform(
        _click_action(element, scroller),
        policy,
        before_retry=(lambda: scroller(element)) if scroller is not None else None,
        description=f"click on {_label(element, element_name)}",
        element_name=element_name,
    )


def click_if_present(
    element: Any,
    scroller: Optional[Callable[[Any], Any]] = None,
    *,
    policy: Optional[WaitPolicy] = None,
    poller: Optional[ConditionPoller] = None,
    driver: Any = None,
    element_name: Optional[str] = None,
) -> PollResult:
    """Soft click: a failure is logged and returned, never raised."""
    action = RetryableAction(_resolve_poller(poller, driver))
    policy = policy or TimeConfig.current().policy("click_action")
    return action.perform_if_present(
        _click_action(element, scroller),
        policy,
        before_retry=(lambda: scroller(element)) if scroller is not None else None,
        description=f"click on {_label(element, element_name)}",
    )
