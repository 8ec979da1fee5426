"""Error taxonomy shared by every dispatcher.

Each error knows the HTTP status the routing layer should use and the body
that is safe to show to a client.
"""

from typing import Any


class GraphGateError(Exception):
    """Base class for all structured dispatcher failures."""

    status_code: int = 500

    def to_payload(self) -> dict[str, Any]:
        """Body returned to the client."""
        return {"message": str(self)}


class ValidationError(GraphGateError):
    """One or more request fields are missing or malformed."""

    status_code = 400

    def __init__(self, errors: list[dict[str, str]]):
        self.errors: list[dict[str, str]] = errors
        super().__init__("; ".join(f"{k}: {v}" for e in errors for k, v in e.items()))

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{field: message}])

    def to_payload(self) -> dict[str, Any]:
        return {"errors": self.errors}


class UnknownEntityTypeError(ValidationError):
    """The requested entity type is not declared in the registry."""

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        super().__init__([{"entity_type": f"Unknown entity type '{entity_type}'"}])


class UnknownRelationshipError(ValidationError):
    """No relationship with that name links the two entity types."""

    def __init__(self, from_type: str, to_type: str, name: str):
        super().__init__(
            [
                {
                    "relationship": f"'{name}' does not relate '{from_type}' "
                    f"to '{to_type}'"
                }
            ]
        )


class NotFoundError(GraphGateError):
    """An identifier does not resolve to an entity of the expected type."""

    status_code = 404

    def __init__(self, entity_type: str, identifier: str):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(f"'{entity_type}' with uuid '{identifier}' not found")


class ConflictError(GraphGateError):
    """A relationship already exists and duplicates are rejected."""

    status_code = 409


class StoreError(GraphGateError):
    """Query execution or connectivity failure inside the graph store."""

    status_code = 500

    def to_payload(self) -> dict[str, Any]:
        return {"message": "Internal server error"}
