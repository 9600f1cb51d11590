# adapters/_utils.py

import httpx


def make_client(
    *,
    timeout: float = 30.0,
    headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """
    Create the async HTTP client shared by the adapters.

    Args:
        timeout: Request timeout in seconds.
        headers: Extra headers sent with every request.

    Returns:
        httpx.AsyncClient: Configured client; the caller closes it.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers={"Accept": "application/json", **(headers or {})},
        follow_redirects=True,
    )
