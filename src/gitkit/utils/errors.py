"""Custom exceptions for git-kit."""


class GitKitError(Exception):
    """Base exception for all git-kit errors."""
    pass


class GitError(GitKitError):
    """Raised for Git integration errors."""
    pass

class GitReadError(GitError):
    """Raised when a git provided value could not be read."""
    pass

class GitWriteError(GitError):
    """Raised when a change could not be written through git."""
    pass


class UserInputError(GitKitError):
    """Raised for invalid or missing user input."""
    pass

class ValidationError(UserInputError):
    """Raised when user input fails validation."""
    pass

class MissingValueError(UserInputError):
    """Raised when a required value is missing and prompting is disabled."""

    def __init__(self, name: str):
        super().__init__(f"Missing required value '{name}' (interactive prompts are disabled)")
        self.name = name

class PromptCancelledError(UserInputError):
    """Raised when the user cancels an input prompt."""

    def __init__(self):
        super().__init__("Input prompt cancelled by user")


class PersistError(GitKitError):
    """Raised for storage-related errors."""
    pass

class NotFoundError(PersistError):
    """Raised when a stored record does not exist."""
    pass

class CorruptedError(PersistError):
    """Raised when a stored record cannot be decoded."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Corrupted '{name}' record: {reason}")
        self.name = name

class PersistValidationError(PersistError):
    """Raised when a record is rejected on write."""
    pass

class PersistConfigurationError(PersistError):
    """Raised when the database cannot be opened or configured."""
    pass


class ConfigurationError(GitKitError):
    """Raised for configuration errors."""
    pass
