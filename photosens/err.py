"""Classes for error messages
"""


class PhotosensError(Exception):
    pass


class InvalidConfigurationError(PhotosensError, ValueError):
    pass


class TransformError(PhotosensError):
    def __init__(self, message, draw_index=None):
        # keep both in args so that the error survives pickling by joblib
        super().__init__(message, draw_index)
        self.message = message
        self.draw_index = draw_index

    def __str__(self):
        if self.draw_index is None:
            return self.message
        return f"Draw {self.draw_index}: {self.message}"
