"""Credentialed database and embedding service clients."""

from types import TracebackType

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from vectorsearch.config import AuthMode, Settings, get_settings
from vectorsearch.credentials import (
    COGNITIVE_SERVICES_SCOPE,
    DOCUMENTDB_SCOPE,
    AzureTokenSupplier,
    TokenOIDCCallback,
    TokenSupplier,
)
from vectorsearch.embeddings.service import AzureOpenAIEmbeddingService, EmbeddingService
from vectorsearch.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DatabaseConnectionError,
)
from vectorsearch.logging_config import get_logger

logger = get_logger(__name__)

CLUSTER_URI_TEMPLATE = "mongodb+srv://{cluster}.global.mongocluster.cosmos.azure.com/"


def _ping(client: MongoClient) -> MongoClient:
    try:
        client.admin.command("ping")
    except AuthenticationError:
        client.close()
        raise
    except PyMongoError as e:
        client.close()
        raise DatabaseConnectionError(
            f"Failed to connect to DocumentDB: {e}",
            details={"error": str(e)},
        ) from e
    return client


def create_mongo_client(
    settings: Settings | None = None,
    token_supplier: TokenSupplier | None = None,
) -> MongoClient:
    """Connect to DocumentDB and verify the connection.

    Args:
        settings: Application settings.
        token_supplier: Token source for passwordless auth. Uses
            DefaultAzureCredential scoped to DocumentDB if not provided.

    Returns:
        A connected client.

    Raises:
        ConfigurationError: If the setting the auth mode needs is missing.
        DatabaseConnectionError: If the server cannot be reached.
        AuthenticationError: If no token can be obtained.
    """
    settings = settings or get_settings()
    mongo = settings.mongo

    if settings.auth_mode == AuthMode.CONNECTION_STRING:
        if mongo.connection_string is None:
            raise ConfigurationError(
                "MONGO_CONNECTION_STRING environment variable is required. "
                "Set it to your DocumentDB connection string or use AUTH_MODE=passwordless",
                details={"setting": "MONGO_CONNECTION_STRING"},
            )
        logger.info("Connecting to DocumentDB with a connection string")
        client: MongoClient = MongoClient(
            mongo.connection_string.get_secret_value(),
            maxPoolSize=50,
            minPoolSize=5,
            maxIdleTimeMS=30000,
            serverSelectionTimeoutMS=mongo.server_selection_timeout_ms,
            socketTimeoutMS=20000,
        )
        return _ping(client)

    if not mongo.cluster_name:
        raise ConfigurationError(
            "MONGO_CLUSTER_NAME environment variable is required",
            details={"setting": "MONGO_CLUSTER_NAME"},
        )

    supplier = token_supplier or AzureTokenSupplier(DOCUMENTDB_SCOPE)
    uri = CLUSTER_URI_TEMPLATE.format(cluster=mongo.cluster_name)
    logger.info("Attempting OIDC authentication...", extra={"cluster": mongo.cluster_name})

    client = MongoClient(
        uri,
        authMechanism="MONGODB-OIDC",
        authMechanismProperties={"OIDC_CALLBACK": TokenOIDCCallback(supplier)},
        tls=True,
        retryWrites=False,
        maxIdleTimeMS=120000,
        connectTimeoutMS=mongo.server_selection_timeout_ms,
        serverSelectionTimeoutMS=mongo.server_selection_timeout_ms,
    )
    client = _ping(client)
    logger.info("OIDC authentication successful")
    return client


def create_embedding_service(
    settings: Settings | None = None,
    token_supplier: TokenSupplier | None = None,
) -> AzureOpenAIEmbeddingService:
    """Build the embedding service for the configured auth mode.

    Raises:
        ConfigurationError: If the endpoint or key is missing.
    """
    settings = settings or get_settings()
    embedding = settings.embedding
    if not embedding.endpoint:
        raise ConfigurationError(
            "AZURE_OPENAI_EMBEDDING_ENDPOINT environment variable is required",
            details={"setting": "AZURE_OPENAI_EMBEDDING_ENDPOINT"},
        )

    if settings.auth_mode == AuthMode.CONNECTION_STRING:
        if embedding.key is None:
            raise ConfigurationError(
                "AZURE_OPENAI_EMBEDDING_KEY environment variable is required",
                details={"setting": "AZURE_OPENAI_EMBEDDING_KEY"},
            )
        return AzureOpenAIEmbeddingService(
            settings=embedding,
            api_key=embedding.key.get_secret_value(),
        )

    return AzureOpenAIEmbeddingService(
        settings=embedding,
        token_supplier=token_supplier or AzureTokenSupplier(COGNITIVE_SERVICES_SCOPE),
    )


class ServiceClients:
    """Database and embedding clients for one run.

    Use as a context manager so both handles are released on exit.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        mongo_client: MongoClient | None = None,
        embedding_service: EmbeddingService | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._mongo_client = mongo_client
        self._embedding_service = embedding_service

    @property
    def mongo(self) -> MongoClient:
        """Connected database client, created on first use."""
        if self._mongo_client is None:
            self._mongo_client = create_mongo_client(self._settings)
        return self._mongo_client

    @property
    def embeddings(self) -> EmbeddingService:
        """Embedding service, created on first use."""
        if self._embedding_service is None:
            self._embedding_service = create_embedding_service(self._settings)
        return self._embedding_service

    def connect(self) -> "ServiceClients":
        """Open both clients now so configuration errors surface before any work."""
        _ = self.mongo
        _ = self.embeddings
        return self

    def close(self) -> None:
        """Close whichever clients were opened."""
        if self._embedding_service is not None:
            self._embedding_service.close()
            self._embedding_service = None
        if self._mongo_client is not None:
            self._mongo_client.close()
            self._mongo_client = None

    def __enter__(self) -> "ServiceClients":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
