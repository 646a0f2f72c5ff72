"""Exceptions raised by schema model operations.

Structural errors are raised from the mutating call that caused them and
leave the model unchanged.  Referential and ordering problems are not
exceptions; they are reported in ``OrderingResult``.  ``OrderingFailed``
wraps such a result for callers that want an exception instead.
"""

from typing import TYPE_CHECKING

from ddl_order.schema.identifier import Identifier

if TYPE_CHECKING:
    from ddl_order.schema.models import OrderingResult


class SchemaModelError(Exception):
    """Base class for schema model errors."""

    pass


class DuplicateIdentifier(SchemaModelError):
    """Raised when adding an object whose identifier is already taken."""

    def __init__(self, identifier: Identifier, existing_kind: str) -> None:
        self.identifier = identifier
        self.existing_kind = existing_kind
        super().__init__(f"Identifier {identifier} already used by a {existing_kind}")


class NotFound(SchemaModelError):
    """Raised when removing or replacing an object that is not in the model."""

    def __init__(self, identifier: Identifier, kind: str) -> None:
        self.identifier = identifier
        self.kind = kind
        super().__init__(f"No {kind} named {identifier}")


class FrozenModelError(SchemaModelError):
    """Raised when mutating a snapshot."""

    pass


class OrderingFailed(SchemaModelError):
    """Raised by the strict ordering accessors when no complete order exists.

    The partial order, cycles and unresolved references are on ``result``.
    """

    def __init__(self, result: "OrderingResult") -> None:
        self.result = result
        super().__init__(result.format_report())
