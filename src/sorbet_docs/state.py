"""Run-scoped state shared by the statement handlers.

`FieldAccumulator` collects the struct fields declared in each namespace so
the constructor can be synthesised once the class body closes. Entries are
keyed by namespace path; classes reopened in another file keep adding to the
same entry. Declarations of one class body are expected to be contiguous:
a field appended after its class has closed only reaches the constructor if
the class is closed (reopened) again.
"""

from pydantic import BaseModel, ConfigDict

from sorbet_docs.types import NIL_TYPE


class FieldRecord(BaseModel):
    """A struct field declared with `const` or `prop`."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    types: tuple[str, ...]
    doc: str = ""
    source: str = ""
    default: str | None = None
    mutable: bool = False

    @property
    def is_nilable(self) -> bool:
        """Return True if `nil` is among the field's types."""
        return NIL_TYPE in self.types


class FieldAccumulator:
    """Ordered field records per namespace path."""

    def __init__(self) -> None:
        """Initialise an empty accumulator."""
        self._fields: dict[str, list[FieldRecord]] = {}
        self._synthesised: dict[str, int] = {}

    def append(self, record: FieldRecord) -> None:
        """Record a field for its namespace, creating the entry on first use."""
        self._fields.setdefault(record.namespace, []).append(record)

    def fields_for(self, namespace: str) -> list[FieldRecord]:
        """Return the fields recorded for a namespace, in declaration order."""
        return list(self._fields.get(namespace, []))

    def has_field(self, namespace: str, name: str) -> bool:
        """Check if a namespace already declared a field with this name."""
        return any(record.name == name for record in self._fields.get(namespace, []))

    def mark_synthesised(self, namespace: str) -> None:
        """Note that a constructor was built from all fields recorded so far."""
        self._synthesised[namespace] = len(self._fields.get(namespace, []))

    def unsynthesised(self) -> list[str]:
        """Return namespaces holding fields no constructor was built from."""
        return [
            namespace
            for namespace, records in self._fields.items()
            if len(records) > self._synthesised.get(namespace, 0)
        ]
