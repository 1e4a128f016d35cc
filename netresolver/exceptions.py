"""Exception taxonomy for registry loading and lookups."""


class NetResolverError(Exception):
    """Base class for all netresolver errors."""


class RegistryLoadError(NetResolverError):
    """A registry source failed: transport, HTTP status or decode error."""

    def __init__(self, origin: str, reason: str):
        self.origin = origin
        self.reason = reason
        super().__init__(f"Failed to load {origin} registry: {reason}")


class RegistryUnavailableError(RegistryLoadError):
    """Neither the remote registry nor the embedded snapshot could be loaded.

    There is no baseline registry to serve from, so callers should treat this
    as a fatal configuration error rather than retrying per call.
    """

    def __init__(self, remote_error: Exception, embedded_error: Exception):
        self.remote_error = remote_error
        self.embedded_error = embedded_error
        super().__init__(
            "any",
            f"remote: {remote_error}; embedded: {embedded_error}",
        )


class UnknownServiceError(NetResolverError, KeyError):
    """Service name is not one of the registry's service lists."""

    def __init__(self, service: str):
        self.service = service
        super().__init__(service)

    def __str__(self) -> str:
        return f"Unknown service '{self.service}'"
