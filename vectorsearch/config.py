"""Application configuration using Pydantic Settings.

Every setting is resolved from the process environment first, then from
the ``.env`` properties file, then from the defaults below.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class AuthMode(str, Enum):
    """How clients authenticate against the database and embedding service."""

    PASSWORDLESS = "passwordless"
    CONNECTION_STRING = "connection_string"


class MongoSettings(BaseSettings):
    """DocumentDB (MongoDB vCore) connection configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cluster_name: str | None = Field(
        default=None,
        description="Cluster name, required for passwordless (OIDC) auth",
    )
    connection_string: SecretStr | None = Field(
        default=None,
        description="Full connection string, required for connection string auth",
    )
    database_name: str = Field(
        default="vectorSearchDB",
        description="Target database",
    )
    collection_name: str = Field(
        default="vectorSearchCollection",
        description="Target collection",
    )
    server_selection_timeout_ms: int = Field(
        default=30000,
        gt=0,
        description="Server selection timeout in milliseconds",
    )


class EmbeddingSettings(BaseSettings):
    """Azure OpenAI embedding service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AZURE_OPENAI_EMBEDDING_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    endpoint: str | None = Field(
        default=None,
        description="Azure OpenAI resource endpoint",
    )
    key: SecretStr | None = Field(
        default=None,
        description="API key (connection string auth only)",
    )
    model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model deployment name",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds",
    )


class DataSettings(BaseSettings):
    """Sample data files, field names and batch sizes."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_file_without_vectors: str = Field(
        default="data/HotelsData_toCosmosDB.json",
        description="Input records without embeddings",
    )
    data_file_with_vectors: str = Field(
        default="data/HotelsData_toCosmosDB_Vector.json",
        description="Records enriched with embeddings",
    )
    field_to_embed: str = Field(
        default="Description",
        description="Text field used as embedding source",
    )
    embedded_field: str = Field(
        default="DescriptionVector",
        description="Field that holds the embedding vector",
    )
    embedding_dimensions: int = Field(
        default=1536,
        gt=0,
        description="Vector dimensionality of the embedding model",
    )
    load_size_batch: int = Field(
        default=100,
        gt=0,
        description="Documents per insert batch",
    )
    embedding_size_batch: int = Field(
        default=16,
        gt=0,
        description="Texts per embedding request",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    auth_mode: AuthMode = Field(
        default=AuthMode.PASSWORDLESS,
        description="Authentication mode for both services",
    )

    # Nested settings
    mongo: MongoSettings = Field(default_factory=MongoSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    data: DataSettings = Field(default_factory=DataSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment and ``.env``.
    """
    return Settings()
