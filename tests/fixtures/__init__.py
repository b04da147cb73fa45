"""
Test fixtures package for provenance anchor tests.

This package provides factory functions for creating test objects:
- common.py: stage payload factories, fixed clock and DID factories
- storage_fixtures.py: recording / failing storage gateway doubles

Usage:
    from fixtures import make_purchase_payload, RecordingGateway

    def test_something():
        payload = make_purchase_payload(quantity_kg=250.0)
"""

from .common import (
    FIXED_DID,
    FIXED_TIME,
    PAYLOAD_FACTORIES,
    fixed_clock,
    fixed_did,
    make_ai_score_payload,
    make_logistics_payload,
    make_packaging_payload,
    make_processing_payload,
    make_purchase_payload,
    make_registration_payload,
    make_warehouse_payload,
    sequential_dids,
)

from .storage_fixtures import (
    RecordingGateway,
    make_failing_pin_gateway,
    make_failing_upload_gateway,
)

__all__ = [
    # Common
    "FIXED_DID",
    "FIXED_TIME",
    "PAYLOAD_FACTORIES",
    "fixed_clock",
    "fixed_did",
    "sequential_dids",
    "make_registration_payload",
    "make_purchase_payload",
    "make_warehouse_payload",
    "make_logistics_payload",
    "make_processing_payload",
    "make_packaging_payload",
    "make_ai_score_payload",
    # Storage
    "RecordingGateway",
    "make_failing_upload_gateway",
    "make_failing_pin_gateway",
]
