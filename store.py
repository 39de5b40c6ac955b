"""Async record store for role kits and job targets.

Every call opens its own short-lived session.  Errors from the database
layer are not caught here; callers decide whether to propagate them.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from config import settings
from models import Base, JobTarget, RoleKit, utcnow

logger = logging.getLogger(__name__)


class RoleKitStore:
    """Read/insert/update access to the ``role_kits`` and ``job_targets`` tables."""

    def __init__(self, database_url: str = None, engine=None):
        self.engine = engine or create_async_engine(database_url or settings.database_url)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    # -- reads ---------------------------------------------------------------

    async def list_role_kits(self) -> List[RoleKit]:
        """All role kits in insertion order."""
        async with self.session_factory() as session:
            result = await session.execute(select(RoleKit).order_by(RoleKit.id))
            return list(result.scalars().all())

    async def list_job_targets(self) -> List[JobTarget]:
        async with self.session_factory() as session:
            result = await session.execute(select(JobTarget).order_by(JobTarget.id))
            return list(result.scalars().all())

    async def get_role_kit(self, role_kit_id: int) -> Optional[RoleKit]:
        async with self.session_factory() as session:
            return await session.get(RoleKit, role_kit_id)

    async def get_job_target(self, job_id: int) -> Optional[JobTarget]:
        async with self.session_factory() as session:
            return await session.get(JobTarget, job_id)

    # -- writes --------------------------------------------------------------

    async def insert_role_kit(self, *, name: str, level: str, domain: str,
                              role_category: str = None, description: str = None,
                              skills_focus: list = None, default_interview_types=(),
                              track_tags=(), is_active: bool = True) -> RoleKit:
        """Insert a role kit and return it with its generated id and timestamps."""
        if not name or not name.strip():
            raise ValueError('Role kit name must not be empty')

        kit = RoleKit(
            name=name.strip(),
            level=level,
            domain=domain,
            role_category=role_category,
            description=description,
            is_active=is_active,
        )
        kit._set_json('skills_focus', list(skills_focus) if skills_focus else None)
        kit._set_json('default_interview_types', list(default_interview_types))
        kit._set_json('track_tags', list(track_tags))

        async with self.session_factory.begin() as session:
            session.add(kit)
        logger.debug('Inserted role kit %s (%s)', kit.id, kit.name)
        return kit

    async def insert_job_target(self, *, role_title: str, jd_text: str = None,
                                jd_parsed: dict = None, company_name: str = None,
                                role_kit_id: int = None) -> JobTarget:
        job = JobTarget(
            role_title=role_title,
            jd_text=jd_text,
            company_name=company_name,
            role_kit_id=role_kit_id,
        )
        job._set_json('jd_parsed', jd_parsed)
        async with self.session_factory.begin() as session:
            session.add(job)
        return job

    async def update_job_target_role_kit(self, job_id: int, role_kit_id: int) -> JobTarget:
        """Point a job target at a role kit and bump its update timestamp."""
        async with self.session_factory.begin() as session:
            job = await session.get(JobTarget, job_id)
            if job is None:
                raise LookupError(f'Job target {job_id} not found')
            job.role_kit_id = role_kit_id
            job.updated_at = utcnow()
        return job
