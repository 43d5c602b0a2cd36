"""
Job Repository Implementation
SQLAlchemy-based job posting repository
"""
from typing import Optional, List, Tuple, Dict
from uuid import UUID

from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from loguru import logger

from domain.entities import Job
from domain.enums import JobType, ExperienceLevel, JobCategory, Currency, SalaryType
from domain.value_objects import JobLocation, JobStatus, Salary
from application.repositories.interfaces import IJobRepository, JobSearchCriteria
from infrastructure.persistence.models.job import JobModel
from core.exceptions import ConcurrencyConflictException, RepositoryException, ResourceNotFoundException


SORTABLE_COLUMNS = {
    "created_at": JobModel.created_at,
    "published_at": JobModel.published_at,
    "views": JobModel.views,
    "application_count": JobModel.application_count,
    "salary": JobModel.salary_min,
    "title": JobModel.title,
}


class SQLAlchemyJobRepository(IJobRepository):
    """SQLAlchemy implementation of job repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by its ID"""
        try:
            result = await self.session.execute(
                select(JobModel)
                .where(JobModel.id == job_id)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to get job: {str(e)}")

    async def create(self, job: Job) -> Job:
        try:
            model = self._to_model(job)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to create job {job.title}: {str(e)}")
            raise RepositoryException(f"Failed to create job: {str(e)}")

    async def update(self, job: Job) -> Job:
        result = await self.session.execute(
            select(JobModel).where(JobModel.id == job.id)
        )
        model = result.scalar_one_or_none()
        if not model:
            raise ResourceNotFoundException("Job", str(job.id))
        if model.version != job.version:
            raise ConcurrencyConflictException("Job", str(job.id))

        try:
            # Counters are owned by the increment_* statements
            model.title = job.title
            model.description = job.description
            model.job_type = job.job_type.value
            model.experience_level = job.experience_level.value
            model.category = job.category.value
            model.department = job.department
            model.company_id = job.company_id
            model.required_skills = list(job.required_skills)
            model.benefits = list(job.benefits)
            model.location_city = job.location.city
            model.location_state = job.location.state
            model.is_remote = job.location.is_remote
            model.salary_min = job.salary.min_salary
            model.salary_max = job.salary.max_salary
            model.salary_currency = job.salary.currency.value
            model.salary_visible = job.salary.is_visible
            model.salary_type = job.salary.salary_type.value
            model.status = job.status.value
            model.published_at = job.published_at
            model.closed_at = job.closed_at

            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except StaleDataError:
            logger.warning(f"Concurrent modification of job {job.id}")
            raise ConcurrencyConflictException("Job", str(job.id))
        except Exception as e:
            logger.error(f"Failed to update job {job.id}: {str(e)}")
            raise RepositoryException(f"Failed to update job: {str(e)}")

    async def delete(self, job_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(JobModel).where(JobModel.id == job_id)
            )
            return result.rowcount > 0

        except Exception as e:
            logger.error(f"Failed to delete job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete job: {str(e)}")

    async def increment_views(self, job_id: UUID) -> None:
        await self._increment(job_id, JobModel.views, "views")

    async def increment_applications(self, job_id: UUID) -> None:
        await self._increment(job_id, JobModel.application_count, "application_count")

    async def increment_saves(self, job_id: UUID) -> None:
        await self._increment(job_id, JobModel.save_count, "save_count")

    async def search(self, criteria: JobSearchCriteria, offset: int, limit: int) -> Tuple[List[Job], int]:
        conditions = [JobModel.status == criteria.status.value]

        if criteria.category:
            conditions.append(JobModel.category == criteria.category.value)
        if criteria.job_type:
            conditions.append(JobModel.job_type == criteria.job_type.value)
        if criteria.experience_level:
            conditions.append(JobModel.experience_level == criteria.experience_level.value)
        if criteria.city:
            conditions.append(JobModel.location_city.ilike(f"%{criteria.city}%"))
        if criteria.is_remote is not None:
            conditions.append(JobModel.is_remote == criteria.is_remote)
        if criteria.company_id:
            conditions.append(JobModel.company_id == criteria.company_id)
        if criteria.search:
            pattern = f"%{criteria.search}%"
            conditions.append(or_(JobModel.title.ilike(pattern), JobModel.description.ilike(pattern)))
        # Both salary bounds apply to the advertised minimum
        if criteria.min_salary is not None:
            conditions.append(JobModel.salary_min >= criteria.min_salary)
        if criteria.max_salary is not None:
            conditions.append(JobModel.salary_min <= criteria.max_salary)
        if criteria.posted_after is not None:
            conditions.append(JobModel.created_at >= criteria.posted_after)

        sort_column = SORTABLE_COLUMNS.get(criteria.sort_by, JobModel.created_at)
        ordering = sort_column.desc() if criteria.descending else sort_column.asc()

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(JobModel).where(*conditions)
            )
            result = await self.session.execute(
                select(JobModel)
                .where(*conditions)
                .order_by(ordering, JobModel.id)
                .offset(offset)
                .limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()], total or 0

        except Exception as e:
            logger.error(f"Failed to search jobs: {str(e)}")
            raise RepositoryException(f"Failed to search jobs: {str(e)}")

    async def list_by_poster(
        self,
        posted_by: UUID,
        status: Optional[JobStatus],
        offset: int,
        limit: int,
    ) -> Tuple[List[Job], int]:
        conditions = [JobModel.posted_by == posted_by]
        if status:
            conditions.append(JobModel.status == status.value)

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(JobModel).where(*conditions)
            )
            result = await self.session.execute(
                select(JobModel)
                .where(*conditions)
                .order_by(JobModel.created_at.desc())
                .offset(offset)
                .limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()], total or 0

        except Exception as e:
            logger.error(f"Failed to list jobs for {posted_by}: {str(e)}")
            raise RepositoryException(f"Failed to list jobs: {str(e)}")

    async def trending(self, limit: int) -> List[Job]:
        try:
            result = await self.session.execute(
                select(JobModel)
                .where(JobModel.status == JobStatus.PUBLISHED.value)
                .order_by(JobModel.views.desc(), JobModel.created_at.desc())
                .limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()]

        except Exception as e:
            logger.error(f"Failed to get trending jobs: {str(e)}")
            raise RepositoryException(f"Failed to get trending jobs: {str(e)}")

    async def count_by_category(self, status: JobStatus) -> Dict[str, int]:
        try:
            result = await self.session.execute(
                select(JobModel.category, func.count())
                .where(JobModel.status == status.value)
                .group_by(JobModel.category)
            )
            return {category: count for category, count in result.all()}

        except Exception as e:
            logger.error(f"Failed to count jobs by category: {str(e)}")
            raise RepositoryException(f"Failed to count jobs: {str(e)}")

    async def list_by_company(self, company_id: UUID, offset: int, limit: int) -> Tuple[List[Job], int]:
        condition = JobModel.company_id == company_id
        try:
            total = await self.session.scalar(
                select(func.count()).select_from(JobModel).where(condition)
            )
            result = await self.session.execute(
                select(JobModel)
                .where(condition)
                .order_by(JobModel.created_at.desc(), JobModel.id)
                .offset(offset)
                .limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()], total or 0

        except Exception as e:
            logger.error(f"Failed to list jobs for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to list jobs: {str(e)}")

    async def count_by_status_for_company(self, company_id: UUID) -> Dict[str, int]:
        try:
            result = await self.session.execute(
                select(JobModel.status, func.count())
                .where(JobModel.company_id == company_id)
                .group_by(JobModel.status)
            )
            return {status: count for status, count in result.all()}

        except Exception as e:
            logger.error(f"Failed to count jobs for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to count jobs: {str(e)}")

    async def _increment(self, job_id: UUID, column, name: str) -> None:
        """Single UPDATE ... SET n = n + 1, leaving the version untouched"""
        try:
            await self.session.execute(
                update(JobModel)
                .where(JobModel.id == job_id)
                .values({column: column + 1})
                .execution_options(synchronize_session=False)
            )
        except Exception as e:
            logger.error(f"Failed to increment {name} for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to increment {name}: {str(e)}")

    @staticmethod
    def _to_entity(model: JobModel) -> Job:
        return Job(
            id=model.id,
            posted_by=model.posted_by,
            company_id=model.company_id,
            title=model.title,
            description=model.description,
            job_type=JobType(model.job_type),
            experience_level=ExperienceLevel(model.experience_level),
            category=JobCategory(model.category),
            department=model.department,
            location=JobLocation(
                city=model.location_city,
                state=model.location_state,
                is_remote=model.is_remote,
            ),
            salary=Salary(
                min_salary=model.salary_min,
                max_salary=model.salary_max,
                currency=Currency(model.salary_currency),
                is_visible=model.salary_visible,
                salary_type=SalaryType(model.salary_type),
            ),
            required_skills=list(model.required_skills or []),
            benefits=list(model.benefits or []),
            status=JobStatus(model.status),
            published_at=model.published_at,
            closed_at=model.closed_at,
            views=model.views,
            application_count=model.application_count,
            save_count=model.save_count,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_model(job: Job) -> JobModel:
        model = JobModel(
            id=job.id,
            posted_by=job.posted_by,
            company_id=job.company_id,
            title=job.title,
            description=job.description,
            job_type=job.job_type.value,
            experience_level=job.experience_level.value,
            category=job.category.value,
            department=job.department,
            required_skills=list(job.required_skills),
            benefits=list(job.benefits),
            location_city=job.location.city,
            location_state=job.location.state,
            is_remote=job.location.is_remote,
            salary_min=job.salary.min_salary,
            salary_max=job.salary.max_salary,
            salary_currency=job.salary.currency.value,
            salary_visible=job.salary.is_visible,
            salary_type=job.salary.salary_type.value,
            status=job.status.value,
            published_at=job.published_at,
            closed_at=job.closed_at,
            views=job.views,
            application_count=job.application_count,
            save_count=job.save_count,
        )
        if job.created_at:
            model.created_at = job.created_at
            model.updated_at = job.updated_at or job.created_at
        return model
