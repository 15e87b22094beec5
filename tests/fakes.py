"""Stand-ins for the yt-dlp and requests objects the service talks to."""

import requests


class FakeUpstream:
    """A streamed requests.Response that yields preset chunks."""

    def __init__(self, chunks=(), status_code=200, fail_after=None):
        self.chunks = list(chunks)
        self.status_code = status_code
        self.fail_after = fail_after
        self.closed = False
        self.requested_chunk_size = None

    def iter_content(self, chunk_size=1):
        self.requested_chunk_size = chunk_size
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i == self.fail_after:
                raise requests.exceptions.ChunkedEncodingError("connection reset")
            yield chunk

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, upstream=None, error=None):
        self.upstream = upstream
        self.error = error
        self.closed = False
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.upstream

    def close(self):
        self.closed = True


def fmt(ext="mp4", vcodec="h264", acodec="aac", height=None, url=None):
    """Build a yt-dlp style format dict."""
    record = {"ext": ext, "vcodec": vcodec, "acodec": acodec}
    if height is not None:
        record["height"] = height
    if url is not None:
        record["url"] = url
    return record
