"""QuickBite domain — the composition root every aggregate registers on.

Menu, customers, ordering and payments share one Protean domain, so an order
and its payments always live behind the same persistence provider. The
provider is picked from ``Settings.database`` before the domain is
initialized:

- ``memory``: Protean's in-process memory provider.
- ``sqlite:///...`` / ``postgresql://...``: Protean's SQLAlchemy providers.
"""

from datetime import UTC, datetime

import structlog
from protean.domain import Domain

from shared.config import Settings

quickbite = Domain(name="quickbite")

logger = structlog.get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


def database_config(uri: str) -> dict:
    """Translate a ``QUICKBITE_DATABASE`` value into a Protean provider config."""
    if uri == "memory":
        return {"provider": "memory"}
    if uri.startswith("sqlite"):
        return {"provider": "sqlite", "database_uri": uri}
    return {"provider": "postgresql", "database_uri": uri}


def configure_domain(settings: Settings) -> Domain:
    """Point the domain's default provider at the configured database.

    Must run before ``quickbite.init()``.
    """
    quickbite.config["databases"]["default"] = database_config(settings.database)
    return quickbite


def register_aggregates() -> None:
    """Import every module that registers an element on the domain."""
    import customers.client.repository  # noqa: F401
    import menu.product.repository  # noqa: F401
    import ordering.order.repository  # noqa: F401
    import payments.payment.repository  # noqa: F401


def init_domain(settings: Settings) -> Domain:
    from shared.db import setup_db

    register_aggregates()
    configure_domain(settings)
    quickbite.init()
    setup_db(quickbite)
    logger.info("Domain initialized", database=database_config(settings.database)["provider"])
    return quickbite
