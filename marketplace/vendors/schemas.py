"""Vendor profile schemas."""

from pydantic import BaseModel, Field
from typing import Optional


class UpdateVendorProfileRequest(BaseModel):
    business_name: Optional[str] = Field(None, min_length=2, max_length=150)
    phone_number: Optional[str] = Field(None, min_length=7, max_length=20)
    address: Optional[str] = Field(None, max_length=250)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)


class SuspendVendorRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)
