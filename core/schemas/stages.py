"""
Module 01 - Schemas & Canonicalization
File: stages.py

Purpose: Business payloads for each custody-chain stage.

Payloads are validated on entry and frozen afterwards. Field names follow
the service's JSON wire format. Fields marked "off-chain" are descriptive
references persisted with the record; they never enter the delimited stage
hashes (only the AI score reveal hash covers the whole payload).
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


_PAYLOAD_CONFIG = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)


class StageKind(str, Enum):
    """Record type handled by the pipeline."""
    REGISTRATION = "registration"
    PURCHASE = "purchase"
    WAREHOUSE = "warehouse"
    LOGISTICS = "logistics"
    PROCESSING = "processing"
    PACKAGING = "packaging"
    AI_SCORE = "ai_score"


# =============================================================================
# Shared value types
# =============================================================================

class GpsCoordinates(BaseModel):
    model_config = _PAYLOAD_CONFIG

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    altitude: float | None = None


class PestInspection(BaseModel):
    model_config = _PAYLOAD_CONFIG

    inspected_at: datetime
    pest_found: bool
    pest_type: str | None = None
    treatment_applied: str | None = None


class MilestoneType(str, Enum):
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    AT_CHECKPOINT = "at_checkpoint"
    DELIVERED = "delivered"
    DELAYED = "delayed"
    INCIDENT = "incident"


class ShockEvent(BaseModel):
    model_config = _PAYLOAD_CONFIG

    timestamp: datetime
    g_force: float
    location: GpsCoordinates | None = None


class ProcessingType(str, Enum):
    CLEANING = "cleaning"
    DRYING = "drying"
    MILLING = "milling"
    EXTRACTION = "extraction"
    REFINING = "refining"
    BLENDING = "blending"


class ProcessingParameters(BaseModel):
    model_config = _PAYLOAD_CONFIG

    temperature_celsius: float | None = None
    pressure_bar: float | None = None
    duration_minutes: int | None = Field(default=None, ge=0)
    method: str


# =============================================================================
# Stage 1: Farmer registration
# =============================================================================

class FarmerRegistrationRequest(BaseModel):
    """Farmer onboarding record. The farmer DID is assigned by the pipeline."""

    model_config = _PAYLOAD_CONFIG

    farmer_name: str = Field(..., min_length=1)
    crop_type: str = Field(..., min_length=1)
    land_area_hectares: float = Field(..., ge=0.0)
    location: str = Field(..., min_length=1)
    gps_coordinates: GpsCoordinates | None = None

    # Off-chain
    kyc_document_url: str | None = None
    land_ownership_docs: list[str] = Field(default_factory=list)
    satellite_imagery_url: str | None = None
    soil_test_report: str | None = None
    phone_number: str | None = None
    email: str | None = None


# =============================================================================
# Stage 2: FPO purchase
# =============================================================================

class FpoPurchaseRequest(BaseModel):
    """Purchase of a farmer's produce by a Farmer Producer Organisation."""

    model_config = _PAYLOAD_CONFIG

    farmer_did: str = Field(..., min_length=1)
    fpo_name: str = Field(..., min_length=1)
    batch_id: str = Field(..., min_length=1)
    quantity_kg: float = Field(..., ge=0.0)
    price_per_kg: float = Field(..., ge=0.0)
    quality_grade: str

    # Off-chain
    quality_report_url: str | None = None
    weight_slip_url: str | None = None
    photos: list[str] = Field(default_factory=list)
    moisture_content: float | None = None
    impurity_percentage: float | None = None
    payment_reference: str | None = None


# =============================================================================
# Stage 3: Warehouse storage
# =============================================================================

class WarehouseUpdateRequest(BaseModel):
    model_config = _PAYLOAD_CONFIG

    warehouse_id: str = Field(..., min_length=1)
    batch_id: str = Field(..., min_length=1)
    storage_location: str

    # IoT sensor data
    temperature_celsius: float | None = None
    humidity_percentage: float | None = None
    co2_level_ppm: float | None = None

    # Off-chain
    iot_logs_url: str | None = None
    inspection_reports: list[str] = Field(default_factory=list)
    pest_inspection: PestInspection | None = None
    quality_degradation: float | None = None


# =============================================================================
# Stage 4: Logistics
# =============================================================================

class LogisticsMilestoneRequest(BaseModel):
    model_config = _PAYLOAD_CONFIG

    shipment_id: str = Field(..., min_length=1)
    current_location: str
    gps_coordinates: GpsCoordinates
    milestone_type: MilestoneType
    carrier_name: str
    vehicle_id: str
    is_delivered: bool = False

    # Off-chain
    gps_history_url: str | None = None
    driver_name: str | None = None
    temperature_log: str | None = None
    shock_events: list[ShockEvent] = Field(default_factory=list)
    estimated_arrival: datetime | None = None


# =============================================================================
# Stage 5: Processing
# =============================================================================

class ProcessBatchRequest(BaseModel):
    """
    Transformation of one input batch into one or more output batches.

    output_quantity_kg is the quantity of each output batch.
    """

    model_config = _PAYLOAD_CONFIG

    input_batch_id: str = Field(..., min_length=1)
    processor_name: str = Field(..., min_length=1)
    processing_type: ProcessingType
    input_quantity_kg: float = Field(..., ge=0.0)
    output_quantity_kg: float = Field(..., ge=0.0)
    yield_percentage: float = Field(..., ge=0.0, le=100.0)
    waste_percentage: float = Field(..., ge=0.0, le=100.0)
    output_batch_ids: list[str] = Field(default_factory=list)

    # Off-chain
    lab_results_url: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    processing_parameters: ProcessingParameters | None = None


# =============================================================================
# Stage 6: Packaging
# =============================================================================

class CreateSkuRequest(BaseModel):
    """
    Consumer unit created from a parent batch.

    merkle_proof, when given, is the ordered list of leaves aggregated into
    the SKU's merkle root; otherwise the SKU id alone is the single leaf.
    """

    model_config = _PAYLOAD_CONFIG

    sku_id: str = Field(..., min_length=1)
    parent_batch_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    brand: str
    unit_weight_grams: float = Field(..., ge=0.0)
    units_packaged: int = Field(..., ge=0)
    package_type: str
    merkle_proof: list[str] | None = None

    # Off-chain
    barcode: str | None = None
    qr_code: str | None = None
    nutritional_info_url: str | None = None
    regulatory_certifications: list[str] = Field(default_factory=list)
    label_images: list[str] = Field(default_factory=list)
    expiry_date: datetime | None = None
    best_before_date: datetime | None = None


# =============================================================================
# Stage 7: AI scoring
# =============================================================================

class AiScoreRequest(BaseModel):
    """Model-produced quality scores; committed to via commit-reveal."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        allow_inf_nan=False,
        protected_namespaces=(),
    )

    batch_id: str = Field(..., min_length=1)
    quality_score: float = Field(..., ge=0.0, le=100.0)
    sustainability_score: float
    traceability_score: float
    model_name: str = Field(..., min_length=1)
    model_version: str
    features: Any = Field(..., description="Input features used by the model")
    predictions: Any = Field(..., description="Model outputs and explanations")
    confidence: float = Field(..., ge=0.0)

    # Off-chain
    model_artifacts_url: str | None = None
    training_data_hash: str | None = None

