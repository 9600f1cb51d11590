# hygraph/api.py

import asyncio
import logging
from collections.abc import Callable, Iterable
from itertools import batched

import httpx

from schema_audit.adapters._utils import make_client
from schema_audit.domain.audit.rules import is_system_model
from schema_audit.schemas import ContentCount, SchemaEntity

from ._utils import retry_delay
from .config import HygraphConfig

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset(
    {
        httpx.codes.TOO_MANY_REQUESTS,  # 429
        httpx.codes.BAD_GATEWAY,  # 502
        httpx.codes.SERVICE_UNAVAILABLE,  # 503
        httpx.codes.GATEWAY_TIMEOUT,  # 504
    },
)

_COUNT_QUERY = (
    "query EntryCount {{"
    " draft: {field}(stage: DRAFT) {{ aggregate {{ count }} }}"
    " published: {field}(stage: PUBLISHED) {{ aggregate {{ count }} }}"
    " }}"
)


async def fetch_content_counts(
    entities: Iterable[SchemaEntity],
    *,
    config: HygraphConfig,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> dict[str, ContentCount]:
    """
    Count draft and published entries for every standalone model.

    Requests run ``config.batch_size`` at a time. Each request fails on its
    own: an entity whose count cannot be fetched is logged and left out of
    the result, and every other entity is still counted.

    Args:
        entities: Schema entities; sub-structures and platform models are
            skipped.
        config: Content API endpoint, credentials and limits.
        client_factory: Factory for the HTTP client; defaults to make_client.

    Returns:
        dict[str, ContentCount]: Counts keyed by entity name.
    """
    targets = [
        entity
        for entity in entities
        if not entity.is_component
        and not entity.is_system
        and not is_system_model(entity.name)
    ]
    if not targets:
        return {}

    factory = client_factory or (lambda: make_client(timeout=config.timeout))
    counts: dict[str, ContentCount] = {}

    async with factory() as client:
        for batch in batched(targets, config.batch_size):
            results = await asyncio.gather(
                *(_fetch_count(client, entity, config) for entity in batch),
            )
            counts.update(
                (entity.name, count)
                for entity, count in zip(batch, results, strict=True)
                if count is not None
            )

    logger.info(
        "Fetched content counts for %d of %d models",
        len(counts),
        len(targets),
    )
    return counts


def build_count_query(entity: SchemaEntity) -> str:
    """
    Build the aggregate query counting an entity's entries in both stages.

    Args:
        entity: Standalone model to count.

    Returns:
        str: GraphQL query with ``draft`` and ``published`` aliases.
    """
    plural = entity.plural_api_id or f"{entity.name}s"
    field = f"{plural[0].lower()}{plural[1:]}Connection"
    return _COUNT_QUERY.format(field=field)


async def _fetch_count(
    client: httpx.AsyncClient,
    entity: SchemaEntity,
    config: HygraphConfig,
) -> ContentCount | None:
    """
    Fetch one entity's counts, retrying on rate limits and gateway errors.

    Returns:
        ContentCount | None: Parsed counts, or None if the entity is skipped.
    """
    payload = {"query": build_count_query(entity)}

    for attempt in range(config.max_retries + 1):
        try:
            response = await client.post(
                config.endpoint,
                json=payload,
                headers=config.headers,
            )
        except httpx.HTTPError as error:
            logger.warning(
                "Content count request for %s failed, skipping: %s",
                entity.name,
                error,
            )
            return None

        if (
            response.status_code not in _RETRYABLE_STATUS_CODES
            or attempt == config.max_retries
        ):
            break

        delay = retry_delay(
            response,
            attempt,
            base=config.retry_base_delay,
            cap=config.retry_max_delay,
        )
        logger.debug(
            "RATE_LIMIT: content count for %s got HTTP %d. "
            "Retrying in %.1fs (attempt %d/%d)",
            entity.name,
            response.status_code,
            delay,
            attempt + 1,
            config.max_retries,
        )
        await asyncio.sleep(delay)

    return _safe_parse(entity, response)


def _safe_parse(entity: SchemaEntity, response: httpx.Response) -> ContentCount | None:
    """
    Parse a count response, returning None on any failure.

    Returns:
        ContentCount | None: Parsed counts, or None on error.
    """
    try:
        response.raise_for_status()
        return _parse_count(response.json())
    except Exception as error:
        logger.warning(
            "Content count for %s could not be read, skipping: %s",
            entity.name,
            error,
        )
        return None


def _parse_count(payload: dict) -> ContentCount:
    """
    Extract draft and published counts from an aggregate query response.

    Returns:
        ContentCount: Counts for both stages.

    Raises:
        ValueError: If the response reports GraphQL errors.
    """
    errors = payload.get("errors")
    if errors:
        raise ValueError(errors[0].get("message", "GraphQL error"))

    data = payload["data"]
    return ContentCount(
        draft=data["draft"]["aggregate"]["count"],
        published=data["published"]["aggregate"]["count"],
    )
