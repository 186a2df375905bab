"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("malainaadu", description="Database name")
    user: str = Field("malainaadu", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field("MALAINAADU_DB_PASSWORD", description="Environment variable for password")
    dsn_env: Optional[str] = Field("DATABASE_URL", description="Environment variable holding a full DSN")


class LLMConfig(BaseModel):
    """Generative rewrite provider configuration."""

    provider: str = Field("gemini", description="LLM provider (gemini, openai)")
    model: str = Field("gemini-2.0-flash", description="Model name")
    api_key_env: Optional[str] = Field("GEMINI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Override the provider base URL")
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(1024, ge=64, le=8192)


class RelayConfig(BaseModel):
    """Outbound webhook relay that performs the Facebook post."""

    url_env: str = Field("MAKE_WEBHOOK_URL", description="Environment variable for relay URL")
    key_env: str = Field("PUBLISH_WEBHOOK_KEY", description="Environment variable for shared secret")
    timeout: float = Field(10.0, gt=0)


class EmailConfig(BaseModel):
    """Transactional email provider."""

    api_key_env: str = Field("RESEND_API_KEY", description="Environment variable for Resend API key")
    from_address: str = Field("MalaiNaadu <alerts@malainaadu.com>")
    api_url: str = Field("https://api.resend.com/emails")
    timeout: float = Field(10.0, gt=0)


class SiteConfig(BaseModel):
    """Public site settings."""

    url: str = Field("https://malainaadu.com", description="Canonical site root")
    article_path: str = Field("berita", description="Path segment for article pages")


class IngestionConfig(BaseModel):
    """RSS ingestion parameters."""

    max_items_per_source: int = Field(5, ge=1, le=100)
    item_delay_seconds: float = Field(0.3, ge=0.0)
    feed_timeout: float = Field(10.0, gt=0)
    rewrite_timeout: float = Field(15.0, gt=0)
    user_agent: str = Field("BeritaMalaysia/1.0")
    default_category_slug: str = Field("nasional")


class HealthConfig(BaseModel):
    """Health monitor thresholds."""

    stale_after_minutes: int = Field(30, ge=1)
    article_window_minutes: int = Field(60, ge=1)
    default_cooldown_minutes: int = Field(60, ge=0)


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    relay: RelayConfig = Field(default_factory=RelayConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    health: HealthConfig = Field(default_factory=HealthConfig)


class SourceConfig(BaseModel):
    """Source entry from sources.yaml, used to seed the sources table."""

    name: str = Field(..., description="Source name")
    rss_url: str = Field(..., description="RSS feed URL")
    is_active: bool = Field(True, description="Whether source is fetched")
    logo_url: Optional[str] = Field(None)
