"""Errors raised by the resolver and relay, translated at the route boundary."""


class ServiceError(Exception):
    """Base error with a stable user-facing message and an HTTP status."""

    status = 500
    default_message = "Internal server error."

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidInput(ServiceError):
    status = 400
    default_message = "Invalid request."


class ExtractionFailed(ServiceError):
    # Usually an unsupported, private or malformed link rather than a server fault.
    status = 400
    default_message = "Failed to process the video link. It may be private, unsupported, or invalid."


class NoDownloadableFormat(ServiceError):
    status = 500
    default_message = "No downloadable format found."


class UpstreamFetchFailed(ServiceError):
    status = 502
    default_message = "Error during video download."
