"""Node addressing.

Every node in a diff tree is located by a PropertyPath: the root element
followed by one element per container step. Elements render as:

    /                       root
    /config/model           map keys
    /messages[1]/content    sequence index
    /tags{'ai'}             set item

String map keys escape the separator characters with a backslash, so the
key "a/b" renders as `a\\/b` and stays distinct from the nested path a -> b.
Non-string keys render through str(); the int key 1 and the string key "1"
share a rendering but never compare equal as elements.

Paths are plain values (tuples of hashable elements) so nodes can refer to
their parent by path instead of holding an object reference.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Any, Iterator

_SPECIAL = "\\/[]{}"


@dataclass(frozen=True)
class RootElement:
    key: Any = None

    def __str__(self) -> str:
        return "/"


@dataclass(frozen=True)
class MapKeyElement:
    key: Any

    def __str__(self) -> str:
        if not isinstance(self.key, str):
            return str(self.key)
        return "".join("\\" + ch if ch in _SPECIAL else ch for ch in self.key)


@dataclass(frozen=True)
class IndexElement:
    key: int

    def __str__(self) -> str:
        return f"[{self.key}]"


@dataclass(frozen=True)
class CollectionItemElement:
    key: Any

    def __str__(self) -> str:
        return f"{{{self.key!r}}}"


PropertyElement = RootElement | MapKeyElement | IndexElement | CollectionItemElement

ROOT_ELEMENT = RootElement()

# Bracketed elements attach to the previous segment instead of starting a new one.
_BRACKETED = (IndexElement, CollectionItemElement)


def _closing_brace(text: str, start: int) -> int:
    """Index of the brace closing the one at `start`, skipping quoted text."""
    depth = 0
    quote = None
    i = start
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch in "{[(":
            depth += 1
        elif ch in "}])":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise ValueError(f"Unbalanced '{{' in path {text!r}")


def _tokenize(text: str) -> list[PropertyElement]:
    elements: list[PropertyElement] = []
    key: list[str] = []

    def flush() -> None:
        if key:
            elements.append(MapKeyElement("".join(key)))
            key.clear()

    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            if i + 1 == len(text):
                raise ValueError(f"Dangling escape in path {text!r}")
            key.append(text[i + 1])
            i += 2
        elif ch == "/":
            flush()
            i += 1
        elif ch == "[":
            flush()
            end = text.find("]", i)
            index = text[i + 1 : end] if end != -1 else ""
            if not index.isdecimal():
                raise ValueError(f"Invalid index in path {text!r}")
            elements.append(IndexElement(int(index)))
            i = end + 1
        elif ch == "{":
            flush()
            end = _closing_brace(text, i)
            try:
                item = ast.literal_eval(text[i + 1 : end])
                hash(item)
            except (ValueError, SyntaxError, TypeError) as exc:
                raise ValueError(f"Set item in path {text!r} is not a hashable literal") from exc
            elements.append(CollectionItemElement(item))
            i = end + 1
        elif ch in "]}":
            raise ValueError(f"Unbalanced {ch!r} in path {text!r}")
        else:
            key.append(ch)
            i += 1
    flush()
    return elements


class PropertyPath:
    """Immutable sequence of elements from the root to a node."""

    __slots__ = ("_elements",)

    def __init__(self, elements: tuple[PropertyElement, ...] = (ROOT_ELEMENT,)) -> None:
        if not elements or not isinstance(elements[0], RootElement):
            elements = (ROOT_ELEMENT, *elements)
        self._elements = elements

    @classmethod
    def root(cls) -> PropertyPath:
        return cls()

    @classmethod
    def parse(cls, text: str) -> PropertyPath:
        """Parse the rendered form back into a path.

        Map keys come back as strings and `[n]` as integer indexes. Set
        items are recovered when their repr is a Python literal. Paths
        through non-string map keys can only be built from elements.

        Raises:
            ValueError: On unbalanced brackets, a non-numeric index or a
                set item that is not a literal.
        """
        return cls(tuple(_tokenize(text.strip())))

    @property
    def elements(self) -> tuple[PropertyElement, ...]:
        return self._elements

    @property
    def last(self) -> PropertyElement:
        return self._elements[-1]

    @property
    def depth(self) -> int:
        return len(self._elements) - 1

    @property
    def parent(self) -> PropertyPath | None:
        if len(self._elements) == 1:
            return None
        return PropertyPath(self._elements[:-1])

    def child(self, element: PropertyElement) -> PropertyPath:
        return PropertyPath((*self._elements, element))

    def is_parent_of(self, other: PropertyPath) -> bool:
        """True if this path is a strict prefix of `other`."""
        return (
            len(self._elements) < len(other._elements)
            and other._elements[: len(self._elements)] == self._elements
        )

    def is_child_of(self, other: PropertyPath) -> bool:
        return other.is_parent_of(self)

    def __iter__(self) -> Iterator[PropertyElement]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PropertyPath):
            return self._elements == other._elements
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._elements)

    def __str__(self) -> str:
        rendered = ""
        for element in self._elements[1:]:
            if isinstance(element, _BRACKETED):
                rendered += str(element) if rendered else "/" + str(element)
            else:
                rendered += "/" + str(element)
        return rendered or "/"

    def __repr__(self) -> str:
        return f"PropertyPath({str(self)!r})"
