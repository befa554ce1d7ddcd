"""Company schemas."""

from pydantic import BaseModel, Field


class CompanyCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)


class CompanyDTO(BaseModel):
    id: int
    title: str

    model_config = {"from_attributes": True}


class CompanyAssign(BaseModel):
    """Body of ``POST /users/{id}/company``."""

    company_id: int = Field(..., alias="companyId")

    model_config = {"populate_by_name": True}
