"""Exception taxonomy for the Juniper adapter.

- ConfigurationError: bad options or unsafe command text, raised before any I/O
- TransportError: the SSH session (or its proxy hop) could not be established
- UnsupportedOperationError: file transfer requests against a device
"""


class JuniperError(Exception):
    """Base class for adapter errors."""

    pass


class ConfigurationError(JuniperError, ValueError):
    """Invalid connection options or unsafe command text."""

    pass


class TransportError(JuniperError):
    """Failed to establish an SSH session to the device."""

    def __init__(
        self,
        host: str,
        original_error: Exception,
        bastion_host: str | None = None,
        message: str | None = None,
    ):
        """Initialize transport error.

        Args:
            host: Target device host
            original_error: Exception raised by the transport
            bastion_host: Bastion hop, if one was configured
            message: Full message override (defaults to a one-line summary)
        """
        self.host = host
        self.bastion_host = bastion_host
        self.original_error = original_error
        if message is None:
            via = f" via bastion {bastion_host}" if bastion_host else ""
            message = f"Failed to connect to Juniper device {host}{via}: {original_error}"
        super().__init__(message)


class UnsupportedOperationError(JuniperError, NotImplementedError):
    """Operation has no meaning for a network device."""

    pass
