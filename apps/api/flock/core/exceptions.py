"""Domain exceptions raised by the service layer."""

from uuid import UUID


class FlockError(Exception):
    """Base exception for service errors."""

    pass


class NotFoundError(FlockError):
    """A referenced entity does not exist."""

    entity = "Resource"

    def __init__(self, entity_id: UUID | str | None = None, message: str | None = None):
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} {entity_id} not found")


class PersonNotFoundError(NotFoundError):
    entity = "Person"


class UserNotFoundError(NotFoundError):
    entity = "User"


class MentorNotFoundError(NotFoundError):
    """User does not exist, is inactive, or is not a mentor."""

    entity = "Mentor"


class NotificationNotFoundError(NotFoundError):
    entity = "Notification"


class ValidationError(FlockError):
    """Input rejected by a service-level check."""

    pass
