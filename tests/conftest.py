"""Shared fixtures: a throwaway SQLite-backed store per test."""

import pytest_asyncio

from store import RoleKitStore

SEED_KITS = [
    {'name': 'Software Engineer (Entry Level)', 'level': 'entry', 'domain': 'software',
     'role_category': 'engineering'},
    {'name': 'Senior Software Engineer', 'level': 'senior', 'domain': 'software',
     'role_category': 'engineering'},
    {'name': 'Data Analyst (Entry Level)', 'level': 'entry', 'domain': 'data'},
    {'name': 'Data Scientist (Mid Level)', 'level': 'mid', 'domain': 'data'},
    {'name': 'Senior Data Scientist', 'level': 'senior', 'domain': 'data'},
    {'name': 'Product Manager (Mid Level)', 'level': 'mid', 'domain': 'product'},
    {'name': 'Associate Product Manager', 'level': 'entry', 'domain': 'product'},
]


@pytest_asyncio.fixture
async def store(tmp_path):
    kit_store = RoleKitStore(f'sqlite+aiosqlite:///{tmp_path / "role_kits.db"}')
    await kit_store.create_all()
    yield kit_store
    await kit_store.dispose()


@pytest_asyncio.fixture
async def seeded_store(store):
    """Store pre-loaded with SEED_KITS, ids 1..7 in list order."""
    for kit in SEED_KITS:
        await store.insert_role_kit(**kit)
    return store
