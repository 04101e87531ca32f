"""
Custom Exception Classes for Dazibao

Hierarchical exception structure for error handling across services.
"""


class DazibaoError(Exception):
    """Base exception for all Dazibao errors"""

    def __init__(self, message: str, recoverable: bool = True):
        self.message = message
        self.recoverable = recoverable
        super().__init__(message)


class ConfigError(DazibaoError):
    """Configuration-related errors"""

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(f"Config Error: {message}", recoverable)


class ConfigNotFoundError(ConfigError):
    """Configuration file does not exist"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"config file not found: {path}", recoverable=True)


class ExecutionError(DazibaoError):
    """Shell command exited non-zero or could not be spawned"""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        output: str = "",
    ):
        self.command = command
        self.exit_code = exit_code
        self.output = output
        # Rendered verbatim after "Error: " in the block output
        super().__init__(message, recoverable=True)


class PersistenceError(DazibaoError):
    """Writing the configuration snapshot to disk failed"""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"Persistence Error: {message}", recoverable=True)


class StartupError(DazibaoError):
    """Fatal error before scheduling begins"""

    def __init__(self, message: str):
        super().__init__(f"Startup Error: {message}", recoverable=False)


class LockError(StartupError):
    """Another instance already holds the single-instance lock"""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class RenderError(DazibaoError):
    """HTML page could not be generated"""

    def __init__(self, message: str):
        super().__init__(f"Render Error: {message}", recoverable=True)
