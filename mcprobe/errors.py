"""Error taxonomy shared by the probes and the HTTP layer."""


class ProbeError(Exception):
    """Base error carrying the HTTP status it surfaces as."""
    status = 500

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidInput(ProbeError):
    status = 400


class ProbeFailure(ProbeError):
    status = 404


class ProbeTimeout(ProbeError):
    status = 408
