"""
asnpeers - Per-ASN aggregation
"""

from collections import Counter
from typing import Dict, Iterable, List

from asnpeers.models import ASNSummary, ResolvedPeer


def count_by_asn(resolved: Iterable[ResolvedPeer]) -> Dict[int, int]:
    """Number of resolved peers per ASN"""
    return dict(Counter(peer.asn for peer in resolved))


def first_names(resolved: Iterable[ResolvedPeer]) -> Dict[int, str]:
    """Display name per ASN; the first peer seen with that ASN decides it"""
    names = {}
    for peer in resolved:
        names.setdefault(peer.asn, peer.name)
    return names


def aggregate(resolved: Iterable[ResolvedPeer]) -> List[ASNSummary]:
    """Fold resolved peers into ASN summaries, largest count first"""
    resolved = list(resolved)
    counts = count_by_asn(resolved)
    names = first_names(resolved)

    summaries = [
        ASNSummary(asn=asn, name=names[asn], count=count)
        for asn, count in counts.items()
    ]
    # Stable sort: equal counts keep first-seen order
    summaries.sort(key=lambda s: s.count, reverse=True)
    return summaries
