"""
User Repository Implementation
SQLAlchemy-based user repository
"""
from typing import Optional, List, Tuple
from uuid import UUID

from sqlalchemy import select, update, func, or_, cast, String
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import User
from domain.enums import UserType
from domain.value_objects import Email
from application.repositories.interfaces import IUserRepository
from infrastructure.persistence.models.user import UserModel
from core.exceptions import DuplicateResourceException, RepositoryException, ResourceNotFoundException


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation of user repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.id == user_id)
            )
            model = result.scalar_one_or_none()

            if model:
                return self._to_entity(model)
            return None

        except Exception as e:
            logger.error(f"Failed to get user by ID {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.email == email.lower())
            )
            model = result.scalar_one_or_none()

            if model:
                return self._to_entity(model)
            return None

        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def create(self, user: User) -> User:
        """Create new user"""
        try:
            model = self._to_model(user)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException("User", "email", str(user.email))
        except Exception as e:
            logger.error(f"Failed to create user {user.email}: {str(e)}")
            raise RepositoryException(f"Failed to create user: {str(e)}")

    async def update(self, user: User) -> User:
        """Update existing user"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user.id)
        )
        model = result.scalar_one_or_none()
        if not model:
            raise ResourceNotFoundException("User", str(user.id))

        try:
            model.email = str(user.email)
            model.password_hash = user.password_hash
            model.first_name = user.first_name
            model.last_name = user.last_name
            model.user_type = user.user_type.value
            model.is_active = user.is_active
            model.company_id = user.company_id
            model.phone = user.phone
            model.location = user.location
            model.bio = user.bio
            model.skills = list(user.skills)
            model.resume_url = user.resume_url
            model.is_email_verified = user.is_email_verified
            model.email_verified_at = user.email_verified_at
            model.deleted_at = user.deleted_at

            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException("User", "email", str(user.email))
        except Exception as e:
            logger.error(f"Failed to update user {user.id}: {str(e)}")
            raise RepositoryException(f"Failed to update user: {str(e)}")

    async def delete(self, user_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.id == user_id)
            )
            model = result.scalar_one_or_none()

            if model:
                await self.session.delete(model)
                await self.session.flush()
                return True
            return False

        except Exception as e:
            logger.error(f"Failed to delete user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete user: {str(e)}")

    async def exists_by_email(self, email: str) -> bool:
        """Check if user exists by email"""
        try:
            result = await self.session.execute(
                select(UserModel.id).where(UserModel.email == email.lower())
            )
            return result.scalar_one_or_none() is not None

        except Exception as e:
            logger.error(f"Failed to check user existence: {str(e)}")
            raise RepositoryException(f"Failed to check user: {str(e)}")

    async def set_company(self, user_id: UUID, company_id: Optional[UUID]) -> None:
        try:
            await self.session.execute(
                update(UserModel)
                .where(UserModel.id == user_id)
                .values(company_id=company_id)
            )
        except Exception as e:
            logger.error(f"Failed to link user {user_id} to company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to update user company: {str(e)}")

    async def search_job_seekers(self, search: Optional[str], offset: int, limit: int) -> Tuple[List[User], int]:
        conditions = [
            UserModel.user_type == UserType.JOB_SEEKER.value,
            UserModel.is_active.is_(True),
            UserModel.deleted_at.is_(None),
        ]
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                UserModel.first_name.ilike(pattern),
                UserModel.last_name.ilike(pattern),
                cast(UserModel.skills, String).ilike(pattern),
            ))

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(UserModel).where(*conditions)
            )
            result = await self.session.execute(
                select(UserModel)
                .where(*conditions)
                .order_by(UserModel.created_at.desc(), UserModel.id)
                .offset(offset)
                .limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()], total or 0

        except Exception as e:
            logger.error(f"Failed to search job seekers: {str(e)}")
            raise RepositoryException(f"Failed to search job seekers: {str(e)}")

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        """Convert ORM model to domain entity"""
        return User(
            id=model.id,
            email=Email(model.email),
            password_hash=model.password_hash,
            first_name=model.first_name,
            last_name=model.last_name,
            user_type=UserType(model.user_type),
            company_id=model.company_id,
            phone=model.phone,
            location=model.location,
            bio=model.bio,
            skills=list(model.skills or []),
            resume_url=model.resume_url,
            is_active=model.is_active,
            is_email_verified=model.is_email_verified,
            email_verified_at=model.email_verified_at,
            deleted_at=model.deleted_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_model(user: User) -> UserModel:
        """Convert domain entity to ORM model"""
        model = UserModel(
            id=user.id,
            email=str(user.email),
            password_hash=user.password_hash,
            first_name=user.first_name,
            last_name=user.last_name,
            user_type=user.user_type.value,
            company_id=user.company_id,
            phone=user.phone,
            location=user.location,
            bio=user.bio,
            skills=list(user.skills),
            resume_url=user.resume_url,
            is_active=user.is_active,
            is_email_verified=user.is_email_verified,
            email_verified_at=user.email_verified_at,
            deleted_at=user.deleted_at,
        )
        if user.created_at:
            model.created_at = user.created_at
            model.updated_at = user.updated_at or user.created_at
        return model
