"""Token suppliers for passwordless (Microsoft Entra ID) authentication."""

from collections.abc import Callable

from azure.core.credentials import TokenCredential
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import DefaultAzureCredential
from pymongo.auth_oidc import OIDCCallback, OIDCCallbackContext, OIDCCallbackResult

from vectorsearch.exceptions import AuthenticationError
from vectorsearch.logging_config import get_logger

logger = get_logger(__name__)

DOCUMENTDB_SCOPE = "https://ossrdbms-aad.database.windows.net/.default"
COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"

# Returns a short-lived bearer token for a fixed scope.
TokenSupplier = Callable[[], str]


class AzureTokenSupplier:
    """Fetch bearer tokens for one scope from an azure-identity credential.

    The credential caches and refreshes tokens itself, so calling the
    supplier on every handshake or request is cheap.
    """

    def __init__(
        self,
        scope: str,
        credential: TokenCredential | None = None,
    ) -> None:
        """Initialize the supplier.

        Args:
            scope: OAuth scope the token is requested for.
            credential: Azure credential. Uses DefaultAzureCredential if not provided.
        """
        self.scope = scope
        self._credential = credential or DefaultAzureCredential()

    def __call__(self) -> str:
        """Return a fresh access token.

        Raises:
            AuthenticationError: If the credential cannot issue a token.
        """
        logger.debug(f"Requesting token for scope {self.scope}")
        try:
            access_token = self._credential.get_token(self.scope)
        except ClientAuthenticationError as e:
            raise AuthenticationError(
                f"Failed to get token with scope {self.scope}: {e}",
                details={"scope": self.scope},
            ) from e
        return access_token.token


class TokenOIDCCallback(OIDCCallback):
    """MONGODB-OIDC machine callback backed by a token supplier.

    The driver invokes ``fetch`` on every authentication handshake.
    """

    def __init__(self, token_supplier: TokenSupplier) -> None:
        self._token_supplier = token_supplier

    def fetch(self, context: OIDCCallbackContext) -> OIDCCallbackResult:
        """Fetch an access token for the database."""
        return OIDCCallbackResult(access_token=self._token_supplier())
