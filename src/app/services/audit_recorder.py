from abc import ABC, abstractmethod

from src.domain.entities import AuditEvent


class IAuditRecorder(ABC):
    """
    Write side of the audit trail.

    Implementations persist one event per call and never raise: a failing
    audit store must not fail the business operation it describes.
    """

    @abstractmethod
    async def record(self, event: AuditEvent) -> None:
        pass
