"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class InvalidAmount(ValidationError):
    """Raised when a material amount is not a positive number."""

    def __init__(self, message="Please enter a valid amount."):
        """Initialize the error."""
        super().__init__(message)


class InsufficientQuantity(AppError):
    """Raised when more material is requested than a ledger holds."""

    def __init__(self, message="Not enough material available."):
        """Initialize the error."""
        super().__init__(message, 409)


class MaterialNotFound(AppError):
    """Raised when a ledger entry no longer exists."""

    def __init__(self, message="Material not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class CannotRemoveAdmin(AppError):
    """Raised when trying to remove the admin from their own group."""

    def __init__(self, message="The group admin cannot be removed."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotAMember(AppError):
    """Raised when the requesting user is not a member of a group."""

    def __init__(self, message="You are not a member of this group."):
        """Initialize the error."""
        super().__init__(message, 403)


class AccessDenied(AppError):
    """Raised when a non-admin attempts an admin-only action."""

    def __init__(self, message="Only the group admin can do that."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class UploadFailed(AppError):
    """Raised when signing or uploading an image fails."""

    def __init__(self, message="Failed to upload image. Please try again."):
        """Initialize the error."""
        super().__init__(message, 502)


class RemoteOperationFailed(AppError):
    """Raised when a read or write against the document store fails."""

    def __init__(self, message="The operation failed. Please try again."):
        """Initialize the error."""
        super().__init__(message, 503)


class InvalidMessage(AppError):
    """Raised when a stored message does not match any known message type."""

    def __init__(self, message="Malformed message."):
        """Initialize the error."""
        super().__init__(message, 500)


class InvalidTransition(AppError):
    """Raised when a workflow step is attempted from the wrong state."""

    def __init__(self, message="Invalid workflow step."):
        """Initialize the error."""
        super().__init__(message, 409)
