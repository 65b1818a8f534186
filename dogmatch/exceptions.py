"""
Custom exception classes for the Dog Match application.
"""


class DogMatchError(Exception):
    """Base exception for all Dog Match errors."""
    status_code = 500


class ValidationError(DogMatchError):
    """Raised when input validation fails."""
    status_code = 400

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class AuthenticationError(DogMatchError):
    """Raised when the caller cannot be identified from the bearer token."""
    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class AuthorizationError(DogMatchError):
    """Raised when the caller is not the owner or a participant."""
    status_code = 403

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(message)


class NotFoundError(DogMatchError):
    """Raised when a document or route does not exist."""
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")


class ConflictError(DogMatchError):
    """Raised when a uniqueness constraint rejects a write."""
    status_code = 409


class ServiceUnavailableError(DogMatchError):
    """Raised when required service clients are not initialized."""
    status_code = 503

    def __init__(self, service_name: str):
        self.service_name = service_name
        super().__init__(f"{service_name} service is not available")


class PublishError(DogMatchError):
    """Raised when publishing a push request to Pub/Sub fails."""
    pass
