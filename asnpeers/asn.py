"""
asnpeers - ASN resolver

Maps each peer IP to its origin AS through the iptoasn.com JSON API:

    GET https://api.iptoasn.com/v1/as/ip/8.8.8.8
    {"announced": true, "as_number": 15169, "as_description": "GOOGLE",
     "as_country_code": "US", ...}

A failed lookup only drops that peer; it is logged and the rest continue.
"""

import ipaddress
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

import requests

from asnpeers.config import DEFAULT_ASN_API_URL, DEFAULT_TIMEOUT
from asnpeers.errors import ResolutionError
from asnpeers.log import get_logger
from asnpeers.models import UNKNOWN_NAME, ResolvedPeer

log = get_logger(__name__)


def _norm_ip(ip: str) -> str:
    try:
        return str(ipaddress.ip_address(ip.strip()))
    except ValueError:
        raise ResolutionError(ip, "malformed IP address") from None


def lookup_ip(ip: str, api_url: str = DEFAULT_ASN_API_URL,
              timeout: float = DEFAULT_TIMEOUT,
              session: Optional[requests.Session] = None) -> ResolvedPeer:
    """Resolve one IP to (ASN, AS name); raises ResolutionError on any failure"""
    addr = _norm_ip(ip)
    url = f"{api_url.rstrip('/')}/{addr}"
    http = session or requests

    try:
        response = http.get(url, timeout=timeout, headers={'Accept': 'application/json'})
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as e:
        raise ResolutionError(ip, f"lookup failed: {e}") from e
    except ValueError as e:
        raise ResolutionError(ip, f"lookup returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ResolutionError(ip, "lookup returned an unexpected body")
    if not data.get('announced'):
        raise ResolutionError(ip, "address is not announced by any AS")

    try:
        asn = int(data['as_number'])
    except (KeyError, TypeError, ValueError):
        raise ResolutionError(ip, "lookup result has no AS number") from None

    name = str(data.get('as_description') or '').strip() or UNKNOWN_NAME
    return ResolvedPeer(ip=ip, asn=asn, name=name)


class Resolver:
    """Resolves a batch of peer IPs, skipping the ones that fail"""

    def __init__(self, api_url: str = DEFAULT_ASN_API_URL,
                 timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def lookup(self, ip: str) -> ResolvedPeer:
        return lookup_ip(ip, self.api_url, self.timeout, self.session)

    def _try_lookup(self, ip: str) -> Optional[ResolvedPeer]:
        try:
            resolved = self.lookup(ip)
        except ResolutionError as e:
            log.error("ASN lookup failed for %s: %s", e.ip, e.reason)
            return None
        log.debug("%s -> AS%d %s", ip, resolved.asn, resolved.name)
        return resolved

    def resolve_all(self, ips: Iterable[str], workers: int = 1) -> List[ResolvedPeer]:
        """
        Look up every IP and return the successes in input order.

        With workers > 1 the lookups run on a bounded thread pool; the
        ordering of the returned list is the same either way.
        """
        ips = list(ips)
        if workers <= 1 or len(ips) <= 1:
            results = [self._try_lookup(ip) for ip in ips]
        else:
            with ThreadPoolExecutor(max_workers=min(workers, len(ips))) as pool:
                results = list(pool.map(self._try_lookup, ips))

        resolved = [r for r in results if r is not None]
        if len(resolved) < len(ips):
            log.warning("Resolved %d of %d peer IPs", len(resolved), len(ips))
        return resolved

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
