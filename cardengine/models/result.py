from dataclasses import dataclass, field

from cardengine.models.failure import FailureKind
from cardengine.models.store import CardStore


@dataclass(frozen=True, slots=True)
class Notice:
    """A reported, non-fatal condition raised by an operation."""

    kind: FailureKind
    message: str


@dataclass
class OperationResult:
    """
    Outcome of one store operation.

    Attributes:
        store: The reconciled store, or the untouched input when nothing ran
        changed: Whether the store was advanced
        notices: Conditions to surface to the user
        created_ids: Card ids minted by the operation
    """

    store: CardStore
    changed: bool = True
    notices: list[Notice] = field(default_factory=list)
    created_ids: list[str] = field(default_factory=list)

    @property
    def refused(self) -> bool:
        """True when the operation reported a condition and made no change."""
        return not self.changed and bool(self.notices)

    @classmethod
    def unchanged(cls, store: CardStore, notice: Notice | None = None) -> "OperationResult":
        return cls(store=store, changed=False, notices=[notice] if notice else [])
