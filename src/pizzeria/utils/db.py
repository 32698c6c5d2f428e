"""Schema management for SQL-backed providers.

The in-memory provider used in development and tests needs no schema; these
helpers only act on ``sqlite`` and ``postgresql`` providers.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield name, provider


def _register_tables(domain: Domain, provider_name: str) -> None:
    """Touch each repository's DAO so its table is registered with SQLAlchemy."""
    registries = (domain.registry.aggregates, domain.registry.entities)
    for registry in registries:
        for _, record in registry.items():
            if record.cls.meta_.provider == provider_name:
                domain.repository_for(record.cls)._dao  # noqa: B018

    if hasattr(domain, "_outbox_repos") and provider_name in domain._outbox_repos:
        domain._outbox_repos[provider_name]._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for every SQL provider of the domain."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            _register_tables(domain, name)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.create_all(engine)
            logger.info("Schema created", provider=name, tables=sorted(provider._metadata.tables))


def drop_db(domain: Domain) -> None:
    """Drop tables for every SQL provider of the domain."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("Schema dropped", provider=name)
