"""
Provenance Anchor CLI

Command-line interface for the anchoring service.

Usage:
    python -m anchor_cli serve
    python -m anchor_cli anchor purchase --payload purchase.json
    python -m anchor_cli hash --algo solidity "did:farmer:...-BATCH1-100-FPO"
    python -m anchor_cli merkle leaf1 leaf2 leaf3
    python -m anchor_cli fetch <cid>
"""

__version__ = "0.1.0"
