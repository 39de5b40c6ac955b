"""Batch maintenance: re-resolve every job target against the current role kits.

Meant to be triggered from admin tooling, not a user request path.  One
failing job never aborts the run; it is logged and reported in ``details``.
"""

import asyncio
import logging
from collections import Counter

from config import settings
from role_kit_mapper import ensure_role_kit_for_job
from taxonomy_data import DEFAULT_TABLES

logger = logging.getLogger(__name__)


async def _reprocess_job(store, job, tables) -> dict:
    detail = {
        'job_id': job.id,
        'role_title': job.role_title,
        'previous_role_kit_id': job.role_kit_id,
    }
    try:
        match = await ensure_role_kit_for_job(
            store, job.role_title, job.jd_text, job.parsed_jd, job.company_name, tables=tables)
        if match.role_kit_id != job.role_kit_id:
            await store.update_job_target_role_kit(job.id, match.role_kit_id)
            status = 'updated'
        else:
            status = 'unchanged'
        detail.update({
            'status': status,
            'role_kit_id': match.role_kit_id,
            'role_kit_name': match.role_kit_name,
            'confidence': match.confidence,
            'match_type': match.match_type,
        })
    except Exception as exc:
        logger.exception('Reprocessing failed for job %s (%r)', job.id, job.role_title)
        detail.update({'status': 'error', 'error': str(exc)})
    return detail


async def reprocess_all_jobs(store, concurrency: int = None, tables=DEFAULT_TABLES) -> dict:
    """Re-run the find-or-create workflow for every job target.

    ``concurrency`` caps in-flight jobs (default from settings; 1 runs them
    strictly one after another).  ``details`` keeps the job order either way.

    Returns:
        dict with processed / updated / unchanged / errors counts and a
        per-job ``details`` list.
    """
    jobs = await store.list_job_targets()
    limit = max(1, concurrency or settings.reprocess_concurrency)
    logger.info('Reprocessing %d job targets (concurrency %d)', len(jobs), limit)

    if limit == 1:
        details = [await _reprocess_job(store, job, tables) for job in jobs]
    else:
        semaphore = asyncio.Semaphore(limit)

        async def _bounded(job):
            async with semaphore:
                return await _reprocess_job(store, job, tables)

        details = list(await asyncio.gather(*(_bounded(job) for job in jobs)))

    counts = Counter(detail['status'] for detail in details)
    summary = {
        'processed': len(details),
        'updated': counts['updated'],
        'unchanged': counts['unchanged'],
        'errors': counts['error'],
        'details': details,
    }
    logger.info('Reprocessing complete: %d processed, %d updated, %d errors',
                summary['processed'], summary['updated'], summary['errors'])
    return summary
