from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

ELIGIBLE_SELECTOR = 'input[type="text"], input[type="password"], input:not([type]), select, textarea'
TEXT_TAGS = {"input", "textarea"}
CHOICE_TAGS = {"select"}

_DISCOVER_JS = """(selector) => Array.from(document.querySelectorAll(selector)).filter(el => {
    if (el.offsetParent === null) return false;
    if (el.disabled) return false;
    const tag = el.tagName.toLowerCase();
    if (tag === 'input') {
        return (el.type === 'text' || el.type === 'password') && !el.readOnly;
    }
    if (tag === 'textarea') return !el.readOnly;
    return tag === 'select';
})"""

_FOCUS_INDEX_JS = """els => els.indexOf(document.activeElement)"""

_COUNT_JS = """els => els.length"""

_ELEMENT_AT_JS = """(els, i) => els[i]"""

_DESCRIBE_JS = """el => ({
    tag: el.tagName.toLowerCase(),
    input_type: el.tagName.toLowerCase() === 'input' ? (el.type || 'text') : null,
    element_id: el.id || null,
    name: el.getAttribute('name'),
})"""

_DESCRIBE_ALL_JS = f"""els => els.map({_DESCRIBE_JS})"""


@dataclass
class EligibleFields:
    """Eligible fields in document order, valid until the next suspension.

    Only the array lives in the page; element handles are created on demand
    by ``element_at`` and belong to the caller.
    """

    handle: object
    count: int

    def __len__(self) -> int:
        return self.count

    def __enter__(self) -> "EligibleFields":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    def focused_index(self) -> int:
        return int(self.handle.evaluate(_FOCUS_INDEX_JS))

    def element_at(self, index: int):
        if not 0 <= index < self.count:
            return None
        return self.handle.evaluate_handle(_ELEMENT_AT_JS, index).as_element()

    def describe_all(self) -> List[Dict[str, Optional[str]]]:
        return self.handle.evaluate(_DESCRIBE_ALL_JS)

    def dispose(self) -> None:
        self.handle.dispose()


def discover(page) -> EligibleFields:
    array_handle = page.evaluate_handle(_DISCOVER_JS, ELIGIBLE_SELECTOR)
    return EligibleFields(handle=array_handle, count=int(array_handle.evaluate(_COUNT_JS)))


def describe(element) -> Dict[str, Optional[str]]:
    return element.evaluate(_DESCRIBE_JS)
