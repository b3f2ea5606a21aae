"""Error types shared by services and their collaborators."""


class ExternalServiceUnavailable(Exception):
    """An OS-level surface (alerts, live status) refused the request, e.g. the user has not authorized it."""
