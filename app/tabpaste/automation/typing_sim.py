from __future__ import annotations

# Text is delivered one character at a time, each insert wrapped in key and
# input events, with a single change event at the end.

_TYPE_JS = """(el, value) => {
    const fire = (type, key, code, extra = {}) => {
        const charCode = key && Array.from(key).length === 1 ? key.codePointAt(0) : 0;
        el.dispatchEvent(new KeyboardEvent(type, {
            key,
            code,
            which: extra.which ?? charCode,
            keyCode: extra.keyCode ?? charCode,
            bubbles: true,
            cancelable: true,
        }));
    };
    el.value = '';
    for (const ch of Array.from(value)) {
        const code = /^[a-z]$/i.test(ch) ? `Key${ch.toUpperCase()}` : '';
        fire('keydown', ch, code);
        fire('keypress', ch, code);
        el.value = el.value + ch;
        el.dispatchEvent(new Event('input', { bubbles: true }));
        fire('keyup', ch, code);
    }
    el.dispatchEvent(new Event('change', { bubbles: true }));
    return el.value;
}"""

_TAB_JS = """el => {
    for (const type of ['keydown', 'keyup']) {
        el.dispatchEvent(new KeyboardEvent(type, {
            key: 'Tab',
            code: 'Tab',
            which: 9,
            keyCode: 9,
            bubbles: true,
            cancelable: true,
        }));
    }
}"""


def type_into(element, value: str) -> str:
    """Clear ``element`` and re-type ``value``; returns the resulting value."""
    return element.evaluate(_TYPE_JS, value or "")


def press_tab(element) -> None:
    element.evaluate(_TAB_JS)
