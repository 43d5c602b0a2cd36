"""
Company Repository Implementation
"""
from typing import Optional, List, Tuple
from uuid import UUID

from sqlalchemy import select, update, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Company
from domain.enums import CompanyIndustry, CompanySize
from application.repositories.interfaces import ICompanyRepository
from infrastructure.persistence.models.company import CompanyModel
from core.exceptions import DuplicateResourceException, RepositoryException, ResourceNotFoundException


class SQLAlchemyCompanyRepository(ICompanyRepository):
    """SQLAlchemy implementation of company repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, company_id: UUID) -> Optional[Company]:
        return await self._get_one(CompanyModel.id == company_id, f"id {company_id}")

    async def get_by_owner(self, owner_id: UUID) -> Optional[Company]:
        return await self._get_one(CompanyModel.owner_id == owner_id, f"owner {owner_id}")

    async def get_by_slug(self, slug: str) -> Optional[Company]:
        return await self._get_one(CompanyModel.slug == slug, f"slug {slug}")

    async def exists_by_name(self, name: str) -> bool:
        try:
            result = await self.session.execute(
                select(CompanyModel.id).where(func.lower(CompanyModel.name) == name.lower())
            )
            return result.first() is not None
        except Exception as e:
            logger.error(f"Failed to check company name {name}: {str(e)}")
            raise RepositoryException(f"Failed to check company: {str(e)}")

    async def create(self, company: Company) -> Company:
        try:
            model = self._to_model(company)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException("Company", "name", company.name)
        except Exception as e:
            logger.error(f"Failed to create company {company.name}: {str(e)}")
            raise RepositoryException(f"Failed to create company: {str(e)}")

    async def update(self, company: Company) -> Company:
        result = await self.session.execute(
            select(CompanyModel).where(CompanyModel.id == company.id)
        )
        model = result.scalar_one_or_none()
        if not model:
            raise ResourceNotFoundException("Company", str(company.id))

        try:
            model.name = company.name
            model.description = company.description
            model.email = company.email
            model.website = company.website
            model.phone = company.phone
            model.industry = company.industry.value if company.industry else None
            model.company_size = company.company_size.value if company.company_size else None
            model.founded_year = company.founded_year
            model.headquarters_city = company.headquarters_city
            model.headquarters_state = company.headquarters_state
            model.logo_url = company.logo_url
            model.is_verified = company.is_verified
            model.verification_requested_at = company.verification_requested_at

            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException("Company", "name", company.name)
        except Exception as e:
            logger.error(f"Failed to update company {company.id}: {str(e)}")
            raise RepositoryException(f"Failed to update company: {str(e)}")

    async def delete(self, company_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                select(CompanyModel).where(CompanyModel.id == company_id)
            )
            model = result.scalar_one_or_none()
            if model:
                await self.session.delete(model)
                await self.session.flush()
                return True
            return False

        except Exception as e:
            logger.error(f"Failed to delete company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete company: {str(e)}")

    async def search(
        self,
        search: Optional[str],
        industry: Optional[CompanyIndustry],
        offset: int,
        limit: int,
    ) -> Tuple[List[Company], int]:
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(CompanyModel.name.ilike(pattern), CompanyModel.description.ilike(pattern)))
        if industry:
            conditions.append(CompanyModel.industry == industry.value)

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(CompanyModel).where(*conditions)
            )
            result = await self.session.execute(
                select(CompanyModel)
                .where(*conditions)
                .order_by(CompanyModel.name)
                .offset(offset)
                .limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()], total or 0

        except Exception as e:
            logger.error(f"Failed to list companies: {str(e)}")
            raise RepositoryException(f"Failed to list companies: {str(e)}")

    async def set_rating(self, company_id: UUID, average_rating: float, review_count: int) -> None:
        try:
            await self.session.execute(
                update(CompanyModel)
                .where(CompanyModel.id == company_id)
                .values(average_rating=average_rating, review_count=review_count)
            )
        except Exception as e:
            logger.error(f"Failed to set rating for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to update company rating: {str(e)}")

    async def adjust_active_jobs(self, company_id: UUID, delta: int) -> None:
        try:
            await self.session.execute(
                update(CompanyModel)
                .where(CompanyModel.id == company_id)
                .values(active_jobs_count=CompanyModel.active_jobs_count + delta)
            )
        except Exception as e:
            logger.error(f"Failed to adjust active jobs for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to update company job count: {str(e)}")

    async def _get_one(self, condition, label: str) -> Optional[Company]:
        try:
            result = await self.session.execute(select(CompanyModel).where(condition))
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get company by {label}: {str(e)}")
            raise RepositoryException(f"Failed to get company: {str(e)}")

    @staticmethod
    def _to_entity(model: CompanyModel) -> Company:
        return Company(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            slug=model.slug,
            description=model.description,
            email=model.email,
            website=model.website,
            phone=model.phone,
            industry=CompanyIndustry(model.industry) if model.industry else None,
            company_size=CompanySize(model.company_size) if model.company_size else None,
            founded_year=model.founded_year,
            headquarters_city=model.headquarters_city,
            headquarters_state=model.headquarters_state,
            logo_url=model.logo_url,
            is_verified=model.is_verified,
            verification_requested_at=model.verification_requested_at,
            average_rating=model.average_rating,
            review_count=model.review_count,
            active_jobs_count=model.active_jobs_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_model(company: Company) -> CompanyModel:
        model = CompanyModel(
            id=company.id,
            owner_id=company.owner_id,
            name=company.name,
            slug=company.slug,
            description=company.description,
            email=company.email,
            website=company.website,
            phone=company.phone,
            industry=company.industry.value if company.industry else None,
            company_size=company.company_size.value if company.company_size else None,
            founded_year=company.founded_year,
            headquarters_city=company.headquarters_city,
            headquarters_state=company.headquarters_state,
            logo_url=company.logo_url,
            is_verified=company.is_verified,
            verification_requested_at=company.verification_requested_at,
            average_rating=company.average_rating,
            review_count=company.review_count,
            active_jobs_count=company.active_jobs_count,
        )
        if company.created_at:
            model.created_at = company.created_at
            model.updated_at = company.updated_at or company.created_at
        return model
