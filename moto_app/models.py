from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MotorcyclePostRequest(BaseModel):
    # Business rules are enforced by the use case so that a rule violation is
    # reported as a 400 with the rule's message.
    make: str = Field(..., examples=["Honda"])
    model: str = Field(..., examples=["Shadow"])
    year: int = Field(..., examples=[2006])
    vin: str = Field(..., examples=["01234567890123456"])


class MotorcyclePutRequest(MotorcyclePostRequest):
    pass


class Motorcycle(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    make: str
    model: str
    year: int
    vin: str
    created_utc: Optional[datetime] = None
    modified_utc: Optional[datetime] = None


class MotorcyclePostResponse(BaseModel):
    id: int
    message: str


class MotorcycleGetResponse(BaseModel):
    motorcycle: Motorcycle
    message: str


class MotorcycleListResponse(BaseModel):
    motorcycles: List[Motorcycle]
    message: str
