"""Canonical policy record and reference data models.

These are plain records: they carry no behavior and serialize directly to JSON
for review screens or for the downstream policy-creation request builder.
"""

from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class InstallmentEntry(BaseModel):
    """One row of a normalized installment schedule."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, description="1-based installment number")
    due_date: str = Field(default="", description="Due date in ISO yyyy-MM-dd or empty")
    amount: Decimal = Field(default=Decimal("0"), description="Installment amount")


class ReferenceItem(BaseModel):
    """Entry of an externally supplied master-data list."""

    model_config = ConfigDict(frozen=True)

    id: Union[int, str] = Field(..., description="Opaque registry identifier")
    name: str = Field(..., description="Canonical display name")
    code: Optional[str] = Field(default=None, description="Optional short code")


class CanonicalPolicyData(BaseModel):
    """Fully populated canonical policy record.

    Every field has a type-appropriate empty default. Missing data is reported
    through mapping issues, never through ``None``.
    """

    model_config = ConfigDict(frozen=True)

    # Policy
    policy_number: str = Field(default="", description="Policy number")
    endorsement: str = Field(default="0", description="Endorsement number")
    start_date: str = Field(default="", description="Coverage start, ISO yyyy-MM-dd")
    end_date: str = Field(default="", description="Coverage end, ISO yyyy-MM-dd")
    movement_type: str = Field(default="EMISION", description="Movement classification")

    # Financial
    premium: Decimal = Field(default=Decimal("0"), description="Commercial premium")
    total_amount: Decimal = Field(default=Decimal("0"), description="Total amount to pay")
    installment_count: int = Field(default=1, ge=1, description="Number of installments")
    installments: List[InstallmentEntry] = Field(default_factory=list)
    payment_method: str = Field(default="", description="Normalized payment method")
    currency_code: str = Field(default="", description="ISO 4217 numeric currency code")

    # Vehicle
    vehicle_brand: str = Field(default="")
    vehicle_model: str = Field(default="")
    vehicle_year: int = Field(default=0, description="Model year or 0 when unknown")
    vehicle_motor: str = Field(default="")
    vehicle_chassis: str = Field(default="")
    vehicle_plate: str = Field(default="")
    vehicle_fuel: str = Field(default="", description="Fuel text as scanned")
    vehicle_destination: str = Field(default="", description="Use/destination text as scanned")
    vehicle_category: str = Field(default="", description="Vehicle category text as scanned")

    # Client
    client_name: str = Field(default="")
    client_document: str = Field(default="")
    client_address: str = Field(default="")
    department: str = Field(default="")
    quality: str = Field(default="", description="Quality of the policy holder")

    # Policy terms
    tariff: str = Field(default="", description="Coverage modality / tariff text")
    broker_name: str = Field(default="")
    broker_code: str = Field(default="")
