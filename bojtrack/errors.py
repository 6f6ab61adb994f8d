class BojTrackError(Exception):
    pass


class FetchError(BojTrackError):
    def __init__(self, message: str, url: str = "", status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractionError(BojTrackError):
    pass


class StorageError(BojTrackError):
    pass
