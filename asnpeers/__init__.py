"""asnpeers - peers-per-ASN chart for CometBFT/Tendermint nodes"""

__version__ = "0.1.0"
