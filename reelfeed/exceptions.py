class FeedError(Exception):
    pass


class FeedConnectionError(FeedError):
    pass


class FeedAPIError(FeedError):
    def __init__(self, message: str, status_code: int = 0, detail: object | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
