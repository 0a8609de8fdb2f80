"""Relational schema management for the brewery domain.

Only SQL-backed providers get a schema; the in-memory provider used in
development and tests has nothing to create.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield name, provider


def _materialize_tables(domain: Domain, provider_name: str) -> None:
    """Touch every repository DAO so the provider registers its table metadata."""
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _materialize_tables(domain, name)
            provider._metadata.create_all(engine)
            logger.info("Schema created", provider=name, tables=len(provider._metadata.tables))


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("Schema dropped", provider=name)
