# hygraph/config.py

import os
from dataclasses import dataclass

ENDPOINT_VARIABLE = "SCHEMA_AUDIT_ENDPOINT"
TOKEN_VARIABLE = "SCHEMA_AUDIT_TOKEN"


@dataclass(frozen=True, slots=True)
class HygraphConfig:
    """
    Immutable configuration for the content API used to count entries.

    Returns:
        HygraphConfig: Endpoint, credentials and request limits.
    """

    # content API endpoint answering GraphQL queries
    endpoint: str

    # permanent auth token, or None for a public endpoint
    token: str | None = None

    # content-count requests in flight at once
    batch_size: int = 10

    # per-request timeout in seconds
    timeout: float = 30.0

    # retries for rate-limited or unavailable responses
    max_retries: int = 4

    # first retry delay in seconds when the server sends no Retry-After
    retry_base_delay: float = 0.5

    # longest wait between retries in seconds, Retry-After included
    retry_max_delay: float = 16.0

    @classmethod
    def from_env(cls) -> "HygraphConfig":
        """
        Build a configuration from environment variables.

        Reads ``SCHEMA_AUDIT_ENDPOINT`` (required) and ``SCHEMA_AUDIT_TOKEN``.

        Returns:
            HygraphConfig: Configuration for the configured endpoint.

        Raises:
            ValueError: If no endpoint is configured.
        """
        endpoint = os.environ.get(ENDPOINT_VARIABLE, "").strip()
        if not endpoint:
            raise ValueError(f"{ENDPOINT_VARIABLE} is not set")

        token = os.environ.get(TOKEN_VARIABLE, "").strip() or None
        return cls(endpoint=endpoint, token=token)

    @property
    def headers(self) -> dict[str, str]:
        """
        Headers sent with every content API request.

        Returns:
            dict[str, str]: Authorization header when a token is set.
        """
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}
