"""
Response models shared by the store routers.

Operation results are mapped onto the failure envelope: an operation that
reported a condition and changed nothing becomes a known failure; anything
that advanced the store is a success carrying its notices.
"""

from typing import Any

from pydantic import BaseModel, Field

from cardengine.models.failure import (
    ApiResponse,
    FailureKind,
    create_known_failure,
    create_success,
)
from cardengine.models.result import OperationResult


class NoticeResponse(BaseModel):
    """A non-fatal condition reported by an operation."""

    kind: FailureKind
    message: str


class OperationData(BaseModel):
    """Payload of a successful mutation."""

    changed: bool = True
    created_ids: list[str] = Field(
        default_factory=list,
        description="Ids minted by the operation (cards, decks or hands)",
    )
    notices: list[NoticeResponse] = Field(
        default_factory=list,
        description="Non-fatal conditions, e.g. a short booster pack",
    )


def operation_response(result: OperationResult) -> ApiResponse[Any]:
    """Classify an operation result through the authority boundary."""
    if result.refused:
        notice = result.notices[0]
        return create_known_failure(notice.kind, notice.message)

    return create_success(
        OperationData(
            changed=result.changed,
            created_ids=result.created_ids,
            notices=[NoticeResponse(kind=n.kind, message=n.message) for n in result.notices],
        )
    )
