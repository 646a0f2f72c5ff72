"""Namespace-qualified identifiers for schema objects.

SQL identifiers compare case-insensitively, so ``Identifier`` overrides
pydantic's field-wise equality with a case-folded comparison and hashes the
same way.  That makes identifiers usable directly as dict keys.

Usage:
    from ddl_order.schema.identifier import Identifier

    Identifier.parse("schema1.tab2")
    # Identifier(namespace='schema1', name='tab2')
    Identifier.parse("[Schema1].[Tab2]") == Identifier.parse("schema1.tab2")
    # True
"""

import functools
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

_QUOTES = {"[": "]", '"': '"'}


def _join_part(chars: list[tuple[str, bool]]) -> str:
    """Join one part, trimming whitespace that sits outside delimiters."""
    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return "".join(ch for ch, _ in chars[start:end])


def _split_parts(text: str) -> list[str]:
    """Split a dotted name, honouring bracket and double-quote delimiters."""
    parts: list[str] = []
    current: list[tuple[str, bool]] = []
    closing: str | None = None

    for ch in text:
        if closing is not None:
            if ch == closing:
                closing = None
            else:
                current.append((ch, True))
        elif ch in _QUOTES:
            closing = _QUOTES[ch]
        elif ch == ".":
            parts.append(_join_part(current))
            current = []
        else:
            current.append((ch, False))

    if closing is not None:
        raise ValueError(f"Unterminated quoted identifier: {text!r}")

    parts.append(_join_part(current))
    return parts


@functools.total_ordering
class Identifier(BaseModel):
    """A namespace-qualified object name.

    Example:
        >>> ident = Identifier(namespace="schema1", name="tab2")
        >>> str(ident)
        'schema1.tab2'
        >>> ident == Identifier(namespace="SCHEMA1", name="Tab2")
        True
    """

    model_config = ConfigDict(frozen=True)

    namespace: str | None = None
    name: str

    @model_validator(mode="before")
    @classmethod
    def _accept_dotted_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return cls._parts_to_fields(data)
        return data

    @classmethod
    def _parts_to_fields(cls, text: str) -> dict[str, str | None]:
        parts = _split_parts(text)
        if any(not part for part in parts):
            raise ValueError(f"Empty identifier part in {text!r}")
        if len(parts) == 1:
            return {"namespace": None, "name": parts[0]}
        if len(parts) == 2:
            return {"namespace": parts[0], "name": parts[1]}
        raise ValueError(f"Too many identifier parts in {text!r}")

    @classmethod
    def parse(cls, text: str) -> "Identifier":
        """Parse ``name`` or ``namespace.name`` (brackets and quotes allowed)."""
        return cls(**cls._parts_to_fields(text))

    @property
    def is_qualified(self) -> bool:
        return self.namespace is not None

    @property
    def key(self) -> tuple[str, str]:
        """Case-folded comparison key."""
        return ((self.namespace or "").casefold(), self.name.casefold())

    def qualify(self, default_namespace: str) -> "Identifier":
        """Return this identifier with *default_namespace* filled in if absent."""
        if self.namespace is not None:
            return self
        return Identifier(namespace=default_namespace, name=self.name)

    def matches(self, other: "Identifier", default_namespace: str) -> bool:
        """Compare after resolving unqualified sides to *default_namespace*."""
        return self.qualify(default_namespace) == other.qualify(default_namespace)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        if self.namespace is None:
            return self.name
        return f"{self.namespace}.{self.name}"
