"""Company service."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.exceptions import ValidationError
from eventhub.models.company import Company
from eventhub.schemas.company import CompanyCreate
from eventhub.services.base_service import BaseService


class CompanyService(BaseService[Company]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Company)

    async def get_by_title(self, title: str) -> Company | None:
        result = await self.db.execute(select(Company).where(Company.title == title))
        return result.scalar_one_or_none()

    async def create_company(self, data: CompanyCreate) -> Company:
        """Create a company; titles are unique."""
        if await self.get_by_title(data.title):
            raise ValidationError(f"Company {data.title!r} already exists")
        return await self.save(Company(title=data.title))
