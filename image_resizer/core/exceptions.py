"""
Custom exceptions for the Image Resizer.
"""


class ImageResizerException(Exception):
    """Base exception for all image resizer exceptions."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class StorageError(ImageResizerException):
    """Exception raised when a storage operation fails."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        message = f"Storage error during {operation}: {detail}"
        super().__init__(message)


class ObjectNotFoundError(StorageError):
    """Exception raised when a storage object does not exist."""

    def __init__(self, bucket: str, path: str):
        self.bucket = bucket
        self.path = path
        super().__init__("read_object", f"Object {path} not found in bucket {bucket}")


class ImageProcessingError(ImageResizerException):
    """Exception raised when an image cannot be decoded, resized or encoded."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        message = f"Image processing error for {path}: {detail}"
        super().__init__(message)


class ConfigurationError(ImageResizerException):
    """Exception raised when the settings are invalid."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Configuration error: {detail}")


class AlreadyInitializedError(ImageResizerException):
    """Exception raised when the runtime state is initialized twice."""

    def __init__(self):
        super().__init__("Image resizer runtime is already initialized")
