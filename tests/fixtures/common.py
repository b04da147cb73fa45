"""
Common test fixtures shared by all modules.

Provides factory functions for stage payloads (as plain JSON-style dicts,
the way they arrive over HTTP) and deterministic pipeline collaborators.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Iterator


FIXED_TIME = datetime(2026, 3, 1, 8, 0, 5, 250000, tzinfo=timezone.utc)
FIXED_DID = "did:farmer:00000000-0000-4000-8000-000000000001"


def fixed_clock(at: datetime = FIXED_TIME) -> Callable[[], datetime]:
    return lambda: at


def fixed_did(did: str = FIXED_DID) -> Callable[[], str]:
    return lambda: did


def sequential_dids(prefix: str = "did:farmer:test-") -> Callable[[], str]:
    counter: Iterator[int] = iter(range(1, 1_000_000))
    return lambda: f"{prefix}{next(counter)}"


# =============================================================================
# Stage payload factories
# =============================================================================

def make_registration_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "farmer_name": "A",
        "crop_type": "rice",
        "land_area_hectares": 2.5,
        "location": "Nashik, Maharashtra",
        "gps_coordinates": {"latitude": 19.9975, "longitude": 73.7898},
        "kyc_document_url": "ipfs://kyc-doc",
        "land_ownership_docs": ["ipfs://deed-1"],
        "phone_number": "+91-9000000000",
    }
    payload.update(overrides)
    return payload


def make_purchase_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "farmer_did": FIXED_DID,
        "fpo_name": "Sahyadri FPO",
        "batch_id": "BATCH-001",
        "quantity_kg": 100.0,
        "price_per_kg": 32.5,
        "quality_grade": "A",
        "moisture_content": 12.1,
    }
    payload.update(overrides)
    return payload


def make_warehouse_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "warehouse_id": "WH-7",
        "batch_id": "BATCH-001",
        "storage_location": "Bay 3, Rack 12",
        "temperature_celsius": 22.0,
        "humidity_percentage": 55.5,
        "co2_level_ppm": 410.0,
    }
    payload.update(overrides)
    return payload


def make_logistics_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "shipment_id": "SHIP-42",
        "current_location": "Pune Hub",
        "gps_coordinates": {"latitude": 18.5204, "longitude": 73.8567},
        "milestone_type": "in_transit",
        "carrier_name": "Konkan Freight",
        "vehicle_id": "MH-12-AB-1234",
    }
    payload.update(overrides)
    return payload


def make_processing_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "input_batch_id": "BATCH-001",
        "processor_name": "Deccan Mills",
        "processing_type": "milling",
        "input_quantity_kg": 100.0,
        "output_quantity_kg": 45.5,
        "yield_percentage": 91.0,
        "waste_percentage": 9.0,
        "output_batch_ids": ["OUT-1", "OUT-2"],
        "processing_parameters": {"method": "stone", "duration_minutes": 90},
    }
    payload.update(overrides)
    return payload


def make_packaging_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "sku_id": "SKU1",
        "parent_batch_id": "OUT-1",
        "product_name": "Basmati Rice 1kg",
        "brand": "Sahyadri",
        "unit_weight_grams": 1000.0,
        "units_packaged": 45,
        "package_type": "pouch",
    }
    payload.update(overrides)
    return payload


def make_ai_score_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "batch_id": "BATCH-001",
        "quality_score": 87.5,
        "sustainability_score": 72.0,
        "traceability_score": 95.0,
        "model_name": "grain-grader",
        "model_version": "1.4.2",
        "features": {"moisture": 12.1, "broken_ratio": 0.03},
        "predictions": {"grade": "A", "explanation": ["low moisture"]},
        "confidence": 0.93,
    }
    payload.update(overrides)
    return payload


PAYLOAD_FACTORIES: dict[str, Callable[..., dict[str, Any]]] = {
    "registration": make_registration_payload,
    "purchase": make_purchase_payload,
    "warehouse": make_warehouse_payload,
    "logistics": make_logistics_payload,
    "processing": make_processing_payload,
    "packaging": make_packaging_payload,
    "ai_score": make_ai_score_payload,
}
