"""Shared fakes for tests: no test touches the network or a real terminal."""

from __future__ import annotations

import json

import pytest
import requests

from asnpeers.config import ENV_ASN_API_URL, ENV_RPC_URL, ENV_TIMEOUT, ENV_WORKERS


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Maps URL -> FakeResponse or exception; records every GET."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append(url)
        outcome = self.routes.get(url)
        if outcome is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


def asn_payload(asn, name, country="US"):
    return {
        "announced": True,
        "as_number": asn,
        "as_description": name,
        "as_country_code": country,
    }


def net_info_payload(ips, n_peers=None):
    return {
        "jsonrpc": "2.0",
        "id": -1,
        "result": {
            "listening": True,
            "listeners": ["Listener(@)"],
            "n_peers": str(len(ips)) if n_peers is None else n_peers,
            "peers": [
                {
                    "node_info": {"id": f"node{i}", "moniker": f"peer-{i}"},
                    "is_outbound": i % 2 == 0,
                    "connection_status": {"Duration": "1000"},
                    "remote_ip": ip,
                }
                for i, ip in enumerate(ips)
            ],
        },
    }


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of config resolution.

    setenv before delenv so monkeypatch also undoes anything a test's
    env file writes into os.environ.
    """
    for name in (ENV_RPC_URL, ENV_ASN_API_URL, ENV_TIMEOUT, ENV_WORKERS):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
