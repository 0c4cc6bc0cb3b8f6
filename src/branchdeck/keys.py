"""Backend-neutral keyboard events."""

from __future__ import annotations

from dataclasses import dataclass

DOWN = "down"
UP = "up"
ENTER = "enter"
ESCAPE = "escape"
BACKSPACE = "backspace"
DELETE = "delete"

_NAMED_KEYS = {DOWN, UP, ENTER, ESCAPE, BACKSPACE, DELETE, "tab", "home", "end", "left", "right"}
_ALIASES = {"return": ENTER, "ctrl+m": ENTER, "esc": ESCAPE, "ctrl+h": BACKSPACE}


@dataclass(frozen=True)
class KeyEvent:
    code: str
    shift: bool = False
    ctrl: bool = False

    @property
    def text(self) -> str | None:
        """Printable text the key would insert, or None for control keys."""
        if self.ctrl or len(self.code) != 1 or not self.code.isprintable():
            return None
        if self.shift and self.code.isalpha():
            return self.code.upper()
        return self.code

    def is_char(self, char: str, *, shift: bool = False, ctrl: bool = False) -> bool:
        return self.code == char and self.shift == shift and self.ctrl == ctrl


def char_key(char: str, *, ctrl: bool = False) -> KeyEvent:
    if len(char) == 1 and char.isalpha() and char.isupper():
        return KeyEvent(char.lower(), shift=True, ctrl=ctrl)
    return KeyEvent(char, ctrl=ctrl)


def key_event_from_textual(key: str, character: str | None = None) -> KeyEvent:
    """Translate a Textual key name (``"down"``, ``"C"``, ``"ctrl+d"``) into a KeyEvent."""
    key = _ALIASES.get(key, key)
    if key in _NAMED_KEYS:
        return KeyEvent(key)

    parts = key.split("+")
    name = parts[-1]
    modifiers = set(parts[:-1])
    ctrl = "ctrl" in modifiers
    shift = "shift" in modifiers

    if not ctrl and character and len(character) == 1 and character.isprintable():
        return char_key(character)
    if name in _NAMED_KEYS:
        return KeyEvent(name, shift=shift, ctrl=ctrl)
    if len(name) == 1:
        event = char_key(name, ctrl=ctrl)
        return KeyEvent(event.code, shift=shift or event.shift, ctrl=ctrl)
    if name == "space":
        return KeyEvent(" ", shift=shift, ctrl=ctrl)
    return KeyEvent(name, shift=shift, ctrl=ctrl)
