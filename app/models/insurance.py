from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field, model_validator


class InsuranceScheme(str, Enum):
    PMFBY = "pmfby"
    PRIVATE = "private"


class CropSeason(str, Enum):
    KHARIF = "kharif"
    RABI = "rabi"


class PolicyStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CLAIMED = "claimed"


class ClaimStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class PremiumRequest(BaseModel):
    scheme: InsuranceScheme
    season: CropSeason
    sum_insured: float = Field(..., gt=0)


class PremiumBreakdown(BaseModel):
    total_premium: float
    farmer_share: float
    government_subsidy: float


class RegisterPolicyRequest(BaseModel):
    crop_name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    land_area: float = Field(..., gt=0, description="Land area in acres.")
    sowing_date: date
    harvest_date: date
    scheme: InsuranceScheme
    season: CropSeason
    sum_insured: float = Field(..., gt=0)
    land_proof: str = Field(..., description="Blob reference of the land record upload.")
    id_proof: str = Field(..., description="Blob reference of the ID proof upload.")

    @model_validator(mode="after")
    def _harvest_after_sowing(self):
        if self.harvest_date < self.sowing_date:
            raise ValueError("harvest_date must not be before sowing_date")
        return self


class InsurancePolicy(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    user_id: str
    crop_name: str
    location: str
    land_area: float
    sowing_date: date
    harvest_date: date
    scheme: InsuranceScheme
    season: CropSeason
    sum_insured: float
    premium: PremiumBreakdown
    land_proof: str
    id_proof: str
    status: PolicyStatus = Field(default=PolicyStatus.ACTIVE)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ClaimLocation(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class FileClaimRequest(BaseModel):
    policy_id: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1, description="e.g. 'Flood', 'Drought', 'Pest attack'.")
    description: str = Field(..., min_length=1)
    location: ClaimLocation
    damage_proof: str = Field(..., description="Blob reference of the damage photo.")


class InsuranceClaim(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    user_id: str
    policy_id: str
    crop_name: Optional[str] = Field(default=None)
    reason: str
    description: str
    location: ClaimLocation
    damage_proof: str
    status: ClaimStatus = Field(default=ClaimStatus.PENDING)
    created_at: datetime = Field(default_factory=datetime.utcnow)
