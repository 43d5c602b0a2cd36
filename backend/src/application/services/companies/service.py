"""
Company Service
Employer-owned company profiles
"""
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from loguru import logger

from core.exceptions import (
    AuthorizationException,
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import Company, User, slugify
from domain.enums import CompanyIndustry, CompanySize, UserType
from application.repositories.interfaces import ICompanyRepository, IUserRepository
from application.services.pagination import Page, PageRequest


EDITABLE_FIELDS = (
    "name",
    "description",
    "website",
    "email",
    "phone",
    "industry",
    "company_size",
    "founded_year",
    "headquarters_city",
    "headquarters_state",
    "logo_url",
)


class CompanyService:
    def __init__(self, company_repository: ICompanyRepository, user_repository: IUserRepository):
        self.company_repo = company_repository
        self.user_repo = user_repository

    async def create_company(self, owner: User, data: Dict[str, Any]) -> Company:
        """One company per employer; the owner is linked to it"""
        if owner.user_type != UserType.EMPLOYER:
            raise AuthorizationException("Only employers can create companies")

        if await self.company_repo.get_by_owner(owner.id):
            raise DuplicateResourceException("Company", "owner_id", str(owner.id))

        name = (data.get("name") or "").strip()
        if await self.company_repo.exists_by_name(name):
            raise DuplicateResourceException("Company", "name", name)

        slug = slugify(name)
        if await self.company_repo.get_by_slug(slug):
            slug = f"{slug}-{uuid4().hex[:6]}"

        now = datetime.now(timezone.utc)
        try:
            company = Company(
                id=uuid4(),
                owner_id=owner.id,
                slug=slug,
                created_at=now,
                updated_at=now,
                **self._coerce({key: data.get(key) for key in EDITABLE_FIELDS if key in data}),
            )
        except (TypeError, ValueError) as e:
            raise ValidationException("company", str(e))

        created = await self.company_repo.create(company)
        await self.user_repo.set_company(owner.id, created.id)
        logger.info(f"Company {created.id} ({created.slug}) created by {owner.id}")
        return created

    async def get_company(self, identifier: str) -> Company:
        """Look a company up by id or slug"""
        company = None
        try:
            company = await self.company_repo.get_by_id(UUID(identifier))
        except ValueError:
            pass
        if company is None:
            company = await self.company_repo.get_by_slug(identifier)
        if company is None:
            raise ResourceNotFoundException("Company", identifier)
        return company

    async def get_company_for_owner(self, owner_id: UUID) -> Company:
        company = await self.company_repo.get_by_owner(owner_id)
        if company is None:
            raise ResourceNotFoundException("Company", f"owner {owner_id}")
        return company

    async def list_companies(
        self,
        search: Optional[str],
        industry: Optional[CompanyIndustry],
        request: PageRequest,
    ) -> Page[Company]:
        items, total = await self.company_repo.search(search, industry, request.offset, request.limit)
        return Page.build(items, total, request)

    async def update_company(self, company_id: UUID, actor_id: UUID, data: Dict[str, Any]) -> Company:
        company = await self._get_owned(company_id, actor_id, "update")

        changes = self._coerce({key: data[key] for key in EDITABLE_FIELDS if key in data})
        new_name = changes.get("name")
        if new_name and new_name != company.name and await self.company_repo.exists_by_name(new_name):
            raise DuplicateResourceException("Company", "name", new_name)

        try:
            updated = replace(company, **changes, updated_at=datetime.now(timezone.utc))
        except ValueError as e:
            raise ValidationException("company", str(e))

        saved = await self.company_repo.update(updated)
        logger.info(f"Company {company_id} updated: {sorted(changes)}")
        return saved

    async def delete_company(self, company_id: UUID, actor_id: UUID) -> None:
        company = await self._get_owned(company_id, actor_id, "delete")
        await self.company_repo.delete(company_id)
        await self.user_repo.set_company(company.owner_id, None)
        logger.info(f"Company {company_id} deleted by {actor_id}")

    async def request_verification(self, company_id: UUID, actor_id: UUID) -> Company:
        """Owner asks for the verified badge; repeating the request refreshes its timestamp"""
        company = await self._get_owned(company_id, actor_id, "verify")
        if company.is_verified:
            raise ValidationException("company", "Company is already verified")

        now = datetime.now(timezone.utc)
        saved = await self.company_repo.update(replace(company, verification_requested_at=now, updated_at=now))
        logger.info(f"Verification requested for company {company_id} by {actor_id}")
        return saved

    async def approve_verification(self, company_id: UUID, admin: User) -> Company:
        if not admin.is_admin():
            raise AuthorizationException("Only administrators can verify companies")
        company = await self.company_repo.get_by_id(company_id)
        if company is None:
            raise ResourceNotFoundException("Company", str(company_id))
        if company.is_verified:
            raise ValidationException("company", "Company is already verified")

        saved = await self.company_repo.update(
            replace(company, is_verified=True, updated_at=datetime.now(timezone.utc))
        )
        logger.info(f"Company {company_id} verified by {admin.id}")
        return saved

    async def _get_owned(self, company_id: UUID, actor_id: UUID, action: str) -> Company:
        company = await self.company_repo.get_by_id(company_id)
        if company is None:
            raise ResourceNotFoundException("Company", str(company_id))
        if not company.is_owned_by(actor_id):
            logger.warning(f"User {actor_id} refused to {action} company {company_id}")
            raise AuthorizationException(f"Not authorized to {action} this company")
        return company

    @staticmethod
    def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
        try:
            if values.get("industry") is not None:
                values["industry"] = CompanyIndustry(values["industry"])
            if values.get("company_size") is not None:
                values["company_size"] = CompanySize(values["company_size"])
        except ValueError as e:
            raise ValidationException("company", str(e))
        if isinstance(values.get("name"), str):
            values["name"] = values["name"].strip()
        return values
