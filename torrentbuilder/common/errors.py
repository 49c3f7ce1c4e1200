class TorrentBuildError(Exception):
    """Base class for every fatal error raised while building a torrent."""


class NotFoundError(TorrentBuildError):
    def __init__(self, path):
        super().__init__(f"Target path does not exist: {path}")
        self.path = path


class TorrentIOError(TorrentBuildError):
    # the underlying OSError, if any, is chained as __cause__
    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class EncodingError(TorrentBuildError):
    pass
