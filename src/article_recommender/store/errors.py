"""Domain exceptions for the content, identity and interaction store.

This module defines a hierarchy of exceptions for the store layer,
separating infrastructure errors (database issues) from domain errors
(business rule violations such as a taken username).
"""


class StateStoreError(Exception):
    """Base exception for all store errors.

    All exceptions raised by the store should inherit from this class
    to enable consistent error handling at the application level.
    """


class ConnectionError(StateStoreError):
    """Raised when the database connection fails or is not established."""

    def __init__(self, message: str = "Database not connected") -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class ArticleNotFoundError(StateStoreError):
    """Raised when a write refers to an article that does not exist."""

    def __init__(self, article_id: str) -> None:
        """Initialize the error with the missing article ID.

        Args:
            article_id: The article ID that was not found.
        """
        self.article_id = article_id
        super().__init__(f"Article not found: {article_id}")


class UserNotFoundError(StateStoreError):
    """Raised when a write refers to a user that does not exist."""

    def __init__(self, user_id: str) -> None:
        """Initialize the error with the missing user ID.

        Args:
            user_id: The user ID that was not found.
        """
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class DuplicateUsernameError(StateStoreError):
    """Raised when creating or renaming a user onto a taken username."""

    def __init__(self, username: str) -> None:
        """Initialize the error with the conflicting username.

        Args:
            username: The normalized username already in use.
        """
        self.username = username
        super().__init__(f"Username already exists: {username}")


class MigrationError(StateStoreError):
    """Raised when a schema migration fails."""

    def __init__(self, version: int, message: str) -> None:
        """Initialize the migration error.

        Args:
            version: The migration version that failed.
            message: Human-readable error message.
        """
        self.version = version
        super().__init__(f"Migration {version} failed: {message}")
