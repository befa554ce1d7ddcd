"""Company API endpoints."""

from fastapi import APIRouter, status

from eventhub.core.deps import CurrentUserRequired, DBSession
from eventhub.schemas.company import CompanyCreate, CompanyDTO
from eventhub.services.company_service import CompanyService

router = APIRouter()


@router.post("", response_model=CompanyDTO, status_code=status.HTTP_201_CREATED)
async def create_company(
    data: CompanyCreate,
    db: DBSession,
    current_user: CurrentUserRequired,
) -> CompanyDTO:
    """Create a company."""
    company = await CompanyService(db).create_company(data)
    return CompanyDTO.model_validate(company)


@router.get("", response_model=list[CompanyDTO])
async def get_companies(
    db: DBSession,
    current_user: CurrentUserRequired,
) -> list[CompanyDTO]:
    """Get all companies."""
    companies = await CompanyService(db).get_all()
    return [CompanyDTO.model_validate(c) for c in companies]


@router.get("/{company_id}", response_model=CompanyDTO)
async def get_company(
    company_id: int,
    db: DBSession,
    current_user: CurrentUserRequired,
) -> CompanyDTO:
    """Get one company."""
    company = await CompanyService(db).get_or_404(company_id)
    return CompanyDTO.model_validate(company)
