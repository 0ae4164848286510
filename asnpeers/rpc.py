"""
asnpeers - Node RPC client

One GET against the node's /net_info endpoint. No retries: if this fails
the run is over.
"""

from typing import Optional

import requests

from asnpeers.config import DEFAULT_TIMEOUT, net_info_url
from asnpeers.errors import DecodeError, NetworkError
from asnpeers.log import get_logger
from asnpeers.models import NetInfo, Peer

log = get_logger(__name__)


def fetch_net_info(base_url: str, timeout: float = DEFAULT_TIMEOUT,
                   session: Optional[requests.Session] = None) -> NetInfo:
    """Query <base_url>/net_info and decode the peer list"""
    url = net_info_url(base_url)
    http = session or requests
    log.debug("GET %s", url)

    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"{url}: {e}") from e

    try:
        payload = response.json()
    except ValueError as e:
        raise NetworkError(f"{url}: response is not JSON ({e})") from e

    return parse_net_info(payload)


def parse_net_info(payload) -> NetInfo:
    """Validate the JSON-RPC envelope and pull out what the pipeline needs"""
    if not isinstance(payload, dict):
        raise DecodeError(f"expected a JSON object, got {type(payload).__name__}")

    if payload.get('error'):
        error = payload['error']
        message = error.get('message', error) if isinstance(error, dict) else error
        raise DecodeError(f"RPC error: {message}")

    result = payload.get('result')
    if not isinstance(result, dict):
        raise DecodeError("missing 'result' object")

    n_peers = result.get('n_peers')
    if isinstance(n_peers, bool) or not isinstance(n_peers, (str, int)):
        raise DecodeError("missing or invalid 'result.n_peers'")

    raw_peers = result.get('peers')
    if raw_peers is None:
        raw_peers = []
    if not isinstance(raw_peers, list):
        raise DecodeError("'result.peers' is not a list")

    peers = tuple(_parse_peer(i, raw) for i, raw in enumerate(raw_peers))
    return NetInfo(n_peers=str(n_peers), peers=peers)


def _parse_peer(index: int, raw) -> Peer:
    if not isinstance(raw, dict):
        raise DecodeError(f"peer #{index} is not an object")

    remote_ip = raw.get('remote_ip')
    if not isinstance(remote_ip, str):
        raise DecodeError(f"peer #{index} has no 'remote_ip'")

    # Everything besides remote_ip (node_info, connection_status) is ignored
    return Peer(remote_ip=remote_ip)
