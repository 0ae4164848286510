"""
asnpeers - Error types

Only the RPC fetch and terminal setup errors end a run. A failed ASN lookup
drops that one peer and the run goes on.
"""


class AsnPeersError(Exception):
    """Base class for all asnpeers errors"""


class ConfigError(AsnPeersError):
    """A configuration value could not be used"""


class NetworkError(AsnPeersError):
    """The RPC endpoint could not be reached or returned an unreadable body"""


class DecodeError(AsnPeersError):
    """The RPC response was JSON but not a net_info result"""


class ResolutionError(AsnPeersError):
    """A single IP could not be mapped to an ASN"""

    def __init__(self, ip: str, reason: str):
        super().__init__(f"{ip}: {reason}")
        self.ip = ip
        self.reason = reason


class UIInitError(AsnPeersError):
    """The terminal could not be put into chart mode"""


class ConfigWarning(UserWarning):
    """The optional env file is missing or unreadable"""
