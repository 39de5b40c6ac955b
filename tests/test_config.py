import dataclasses
import logging

import pytest

from config import _int_env, configure_logging, resolve_database_url
from taxonomy_data import DEFAULT_TABLES, build_tables, coarsen_seniority


class TestResolveDatabaseUrl:
    @pytest.mark.parametrize('raw, expected', [
        ('postgres://u:p@host/db', 'postgresql+asyncpg://u:p@host/db'),
        ('postgresql://u:p@host/db', 'postgresql+asyncpg://u:p@host/db'),
        ('sqlite:///kits.db', 'sqlite+aiosqlite:///kits.db'),
        ('sqlite+aiosqlite:///kits.db', 'sqlite+aiosqlite:///kits.db'),
    ])
    def test_rewrites_to_async_driver(self, raw, expected):
        assert resolve_database_url(raw) == expected

    def test_falls_back_to_local_sqlite(self):
        url = resolve_database_url('')
        assert url.startswith('sqlite+aiosqlite:///')
        assert url.endswith('role_kits.db')


class TestIntEnv:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv('REPROCESS_CONCURRENCY', raising=False)
        assert _int_env('REPROCESS_CONCURRENCY', 1) == 1

    def test_reads_value(self, monkeypatch):
        monkeypatch.setenv('REPROCESS_CONCURRENCY', '4')
        assert _int_env('REPROCESS_CONCURRENCY', 1) == 4

    def test_garbage_and_too_small_values(self, monkeypatch):
        monkeypatch.setenv('REPROCESS_CONCURRENCY', 'lots')
        assert _int_env('REPROCESS_CONCURRENCY', 1) == 1
        monkeypatch.setenv('REPROCESS_CONCURRENCY', '0')
        assert _int_env('REPROCESS_CONCURRENCY', 1) == 1


class TestRuleTables:
    @pytest.mark.parametrize('level, bucket', [
        ('entry', 'entry'), ('mid', 'mid'), ('senior', 'senior'),
        ('director', 'senior'), ('vp', 'senior'), ('executive', 'senior'),
        ('unknown', 'mid'),
    ])
    def test_coarsen_seniority(self, level, bucket):
        assert coarsen_seniority(level) == bucket

    def test_labels(self):
        assert DEFAULT_TABLES.seniority_label('entry') == 'Entry Level'
        assert DEFAULT_TABLES.seniority_label('nonsense') == 'Mid Level'
        assert DEFAULT_TABLES.domain_label('customer_success') == 'Customer Success'
        assert DEFAULT_TABLES.domain_label('general') == 'General'

    def test_domain_order(self):
        keys = [entry.key for entry in DEFAULT_TABLES.domains]
        assert keys[:3] == ['software', 'data', 'product']
        assert keys[-1] == 'engineering_management'

    def test_companies_longest_first(self):
        names = DEFAULT_TABLES.company_names
        assert names.index('Bain & Company') < names.index('Bain')

    def test_tables_are_read_only(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_TABLES.company_names = ()
        with pytest.raises(TypeError):
            DEFAULT_TABLES.seniority_labels['entry'] = 'Newbie'

    def test_overrides_leave_defaults_alone(self):
        custom = build_tables(company_names=('Acme',))
        assert custom.company_names == ('Acme',)
        assert 'Google' in DEFAULT_TABLES.company_names


def test_configure_logging_quiets_sql_echo():
    configure_logging('DEBUG')
    assert logging.getLogger('sqlalchemy.engine').level == logging.WARNING
