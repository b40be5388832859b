from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _register_tables(domain: Domain, provider) -> None:
    """Build every DAO on ``provider`` so its table lands on the provider's metadata."""
    for registry in (domain.registry.aggregates, domain.registry.entities):
        for _, record in registry.items():
            if record.cls.meta_.provider == provider.name:
                domain.repository_for(record.cls)._dao  # noqa: B018

    # Force DAO creation for outbox tables (registered as internal)
    if hasattr(domain, "_outbox_repos") and provider.name in domain._outbox_repos:
        domain._outbox_repos[provider.name]._dao  # noqa: B018


def setup_db(domain: Domain):
    """Setup database schema"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _SQL_PROVIDERS:
                _register_tables(domain, provider)
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.create_all(engine)
                engine.dispose()


def drop_db(domain: Domain):
    """Drop database schema"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _SQL_PROVIDERS:
                _register_tables(domain, provider)
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)
                engine.dispose()


def reset_data(domain: Domain):
    """Empty every table and the event store, keeping the schema."""
    for _, provider in domain.providers.items():
        provider._data_reset()
    domain.event_store.store._data_reset()
