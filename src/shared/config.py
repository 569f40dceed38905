"""Runtime configuration.

Settings are read from ``QUICKBITE_*`` environment variables. ``QUICKBITE_ENV``
picks the overlay (``development``, ``test`` or ``production``), the same way
``PROTEAN_ENV`` selects a config overlay for a Protean domain:

- ``test`` forces the in-memory database and the fake gateway unless they are
  set explicitly.
- ``production`` refuses to start with the fake gateway.
"""

import os
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

ENV_PREFIX = "QUICKBITE_"


class Environment(Enum):
    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class FailurePolicyName(Enum):
    KEEP = "keep"  # order stays AWAITING_PAYMENT, caller may re-request payment
    CANCEL = "cancel"  # order is canceled when its payment fails or expires


class MercadoPagoSettings(BaseModel):
    base_url: str = "https://api.mercadopago.com"
    client_id: str = ""
    client_secret: str = ""
    user_id: str = ""
    external_pos_id: str = "Loja1"
    notification_url: str | None = None


class Settings(BaseModel):
    env: Environment = Environment.DEVELOPMENT

    # "memory", or a sqlite:/// or postgresql:// URI for Protean's SQLAlchemy providers
    database: str = "memory"

    gateway: str = "fake"
    gateway_timeout: float = Field(default=10.0, gt=0)
    mercadopago: MercadoPagoSettings = Field(default_factory=MercadoPagoSettings)

    webhook_topics: list[str] = Field(default_factory=lambda: ["merchant_order"])
    payment_failure_policy: FailurePolicyName = FailurePolicyName.KEEP

    log_level: str = "INFO"
    log_format: str = "console"

    @field_validator("gateway")
    @classmethod
    def _known_gateway(cls, value: str) -> str:
        value = value.lower()
        if value not in ("fake", "mercadopago"):
            raise ValueError(f"Unknown gateway '{value}'")
        return value

    @field_validator("database")
    @classmethod
    def _known_database(cls, value: str) -> str:
        if value == "memory":
            return value
        if not value.startswith(("sqlite://", "postgresql://")):
            raise ValueError(f"Unsupported database '{value}'")
        if ":memory:" in value:
            # Schema setup and the provider open separate connections
            raise ValueError("Use 'memory' or a file-backed SQLite database")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError(f"Unknown log format '{value}'")
        return value

    @model_validator(mode="after")
    def _production_needs_real_gateway(self) -> "Settings":
        if self.env == Environment.PRODUCTION and self.gateway == "fake":
            raise ValueError("The fake gateway cannot be used in production")
        return self


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build ``Settings`` from environment variables."""
    environ = os.environ if environ is None else environ

    def read(name: str) -> str | None:
        return environ.get(f"{ENV_PREFIX}{name}")

    env = Environment(read("ENV") or Environment.DEVELOPMENT.value)
    values: dict = {"env": env}

    if env == Environment.TEST:
        values["database"] = "memory"
        values["gateway"] = "fake"

    simple = {
        "DATABASE": "database",
        "GATEWAY": "gateway",
        "GATEWAY_TIMEOUT": "gateway_timeout",
        "PAYMENT_FAILURE_POLICY": "payment_failure_policy",
        "LOG_LEVEL": "log_level",
        "LOG_FORMAT": "log_format",
    }
    for name, field in simple.items():
        raw = read(name)
        if raw is not None:
            values[field] = raw

    topics = read("WEBHOOK_TOPICS")
    if topics is not None:
        values["webhook_topics"] = _split(topics)

    mercadopago = {}
    for field in MercadoPagoSettings.model_fields:
        raw = read(f"MERCADOPAGO_{field.upper()}")
        if raw is not None:
            mercadopago[field] = raw
    if mercadopago:
        values["mercadopago"] = mercadopago

    return Settings(**values)
