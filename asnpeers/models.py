"""
asnpeers - Data model

Records flow through the pipeline once: NetInfo -> ResolvedPeer -> ASNSummary.
"""

from dataclasses import dataclass
from typing import Tuple

UNKNOWN_NAME = "Unknown"

LABEL_MAX_LEN = 10
ELLIPSIS = "..."


def truncate_name(name: str, limit: int = LABEL_MAX_LEN) -> str:
    """Cut a name to fit a bar label: 'ExampleOrgLongName' -> 'Example...'"""
    if len(name) > limit:
        return name[:limit - len(ELLIPSIS)] + ELLIPSIS
    return name


@dataclass(frozen=True)
class Peer:
    remote_ip: str


@dataclass(frozen=True)
class NetInfo:
    n_peers: str                # string on the wire, kept as-is
    peers: Tuple[Peer, ...] = ()

    @property
    def remote_ips(self) -> list:
        return [peer.remote_ip for peer in self.peers]


@dataclass(frozen=True)
class ResolvedPeer:
    ip: str
    asn: int
    name: str = UNKNOWN_NAME


@dataclass(frozen=True)
class ASNSummary:
    asn: int
    name: str
    count: int

    @property
    def label(self) -> str:
        return truncate_name(self.name)
