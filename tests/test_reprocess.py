import pytest

from reprocess import reprocess_all_jobs
from store import RoleKitStore


async def _seed_jobs(store):
    kit = await store.insert_role_kit(name='Software Engineer (Entry Level)', level='entry',
                                      domain='software')
    stale = await store.insert_job_target(role_title='Software Engineer')
    current = await store.insert_job_target(role_title='Software Engineer I', role_kit_id=kit.id)
    broken = await store.insert_job_target(role_title='Zookeeper',
                                           jd_parsed={'required_skills': 42})
    return kit, stale, current, broken


class TestReprocessAllJobs:
    @pytest.mark.asyncio
    async def test_counts_and_details(self, store):
        kit, stale, current, broken = await _seed_jobs(store)

        summary = await reprocess_all_jobs(store)

        assert summary['processed'] == 3
        assert summary['updated'] == 1
        assert summary['unchanged'] == 1
        assert summary['errors'] == 1
        statuses = {d['job_id']: d['status'] for d in summary['details']}
        assert statuses == {stale.id: 'updated', current.id: 'unchanged', broken.id: 'error'}

    @pytest.mark.asyncio
    async def test_updates_are_persisted(self, store):
        kit, stale, current, broken = await _seed_jobs(store)

        await reprocess_all_jobs(store)

        assert (await store.get_job_target(stale.id)).role_kit_id == kit.id
        assert (await store.get_job_target(broken.id)).role_kit_id is None

    @pytest.mark.asyncio
    async def test_error_detail_carries_message(self, store):
        *_, broken = await _seed_jobs(store)

        summary = await reprocess_all_jobs(store)

        detail = next(d for d in summary['details'] if d['job_id'] == broken.id)
        assert detail['role_title'] == 'Zookeeper'
        assert detail['previous_role_kit_id'] is None
        assert detail['error']

    @pytest.mark.asyncio
    async def test_concurrent_run_keeps_job_order(self, store):
        kit, stale, current, broken = await _seed_jobs(store)

        summary = await reprocess_all_jobs(store, concurrency=3)

        assert [d['job_id'] for d in summary['details']] == [stale.id, current.id, broken.id]
        assert (summary['updated'], summary['unchanged'], summary['errors']) == (1, 1, 1)

    @pytest.mark.asyncio
    async def test_store_failure_is_isolated(self, tmp_path):
        class FailingUpdateStore(RoleKitStore):
            async def update_job_target_role_kit(self, job_id, role_kit_id):
                raise RuntimeError('database unavailable')

        store = FailingUpdateStore(f'sqlite+aiosqlite:///{tmp_path / "failing.db"}')
        await store.create_all()
        try:
            kit, stale, current, broken = await _seed_jobs(store)
            summary = await reprocess_all_jobs(store)
        finally:
            await store.dispose()

        stale_detail = summary['details'][0]
        assert stale_detail['status'] == 'error'
        assert stale_detail['error'] == 'database unavailable'
        assert summary['unchanged'] == 1
        assert summary['errors'] == 2

    @pytest.mark.asyncio
    async def test_counts_always_add_up(self, seeded_store):
        for title in ['Senior Data Scientist', 'Product Manager', 'Zookeeper', 'UX Designer']:
            await seeded_store.insert_job_target(role_title=title)

        summary = await reprocess_all_jobs(seeded_store)

        assert summary['processed'] == 4
        assert summary['updated'] + summary['unchanged'] + summary['errors'] == summary['processed']

    @pytest.mark.asyncio
    async def test_no_jobs(self, store):
        summary = await reprocess_all_jobs(store)
        assert summary == {'processed': 0, 'updated': 0, 'unchanged': 0, 'errors': 0, 'details': []}
