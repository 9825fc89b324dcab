"""Receiver display surface.

A flat tree of named elements: the ``title`` and ``info`` text lines plus a
square grid of ``td`` cells keyed ``cell-<x>-<y>``. Each mutation is reported
to ``on_change`` so it can be pushed to the screens showing the receiver.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

TEXT = 'text'
CELL = 'td'

ChangeCallback = Callable[[Dict[str, Any]], None]


def cell_key(x: int, y: int) -> str:
    return f"cell-{x}-{y}"


@dataclass
class DisplayElement:
    key: str
    kind: str
    text: str = ''
    background: Optional[str] = None

    def to_dict(self):
        return {
            'key': self.key,
            'kind': self.kind,
            'text': self.text,
            'background': self.background,
        }


class Display:
    def __init__(self, grid_size: int = 10, empty_color: str = 'black',
                 on_change: Optional[ChangeCallback] = None):
        self.grid_size = grid_size
        self.empty_color = empty_color
        self.on_change = on_change
        self._elements: Dict[str, DisplayElement] = {}
        self._add(DisplayElement('title', TEXT))
        self._add(DisplayElement('info', TEXT))
        for y in range(grid_size):
            for x in range(grid_size):
                self._add(DisplayElement(cell_key(x, y), CELL, background=empty_color))

    def _add(self, element: DisplayElement) -> None:
        self._elements[element.key] = element

    def _notify(self, change: Dict[str, Any]) -> None:
        if self.on_change is not None:
            self.on_change(change)

    def get(self, key: Any) -> Optional[DisplayElement]:
        if key is None:
            return None
        return self._elements.get(str(key))

    def elements_of_kind(self, kind: str) -> List[DisplayElement]:
        return [e for e in self._elements.values() if e.kind == kind]

    def set_text(self, key: Any, text: str) -> bool:
        element = self.get(key)
        if not element:
            return False
        element.text = text
        self._notify({'key': element.key, 'text': text})
        return True

    def set_background(self, key: Any, color: str) -> bool:
        element = self.get(key)
        if not element:
            return False
        element.background = color
        self._notify({'key': element.key, 'background': color})
        return True

    def set_background_by_type(self, kind: str, color: str) -> int:
        """Paint every element of ``kind``; returns how many were touched."""
        touched = self.elements_of_kind(kind)
        for element in touched:
            element.background = color
        self._notify({'kind': kind, 'background': color})
        return len(touched)

    def snapshot(self) -> Dict[str, Any]:
        return {
            'grid_size': self.grid_size,
            'title': self._elements['title'].text,
            'info': self._elements['info'].text,
            'cells': {e.key: e.background for e in self.elements_of_kind(CELL)},
        }
