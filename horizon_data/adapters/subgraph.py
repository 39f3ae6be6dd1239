"""GraphQL subgraph client.

Talks to the indexing service over HTTP using httpx. Queries are described
declaratively with EntityQuery and paged with ``first``/``skip`` until either
a short page comes back or the requested maximum is reached.

Example:
    ```python
    async with SubgraphClient(config) as client:
        rows = await client.paginate(
            "exchanges",
            EntityQuery("zassetExchanges", ["id", "timestamp"], order_by="timestamp"),
            max_results=50,
        )
    ```
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..core.config import Config
from ..core.utils import drop_none, get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 1000


class SubgraphError(RuntimeError):
    """Raised when a subgraph request fails or returns GraphQL errors."""


def format_value(value: Any) -> str:
    """Render a Python value as a GraphQL literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple, set)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    return json.dumps(str(value))


@dataclass
class EntityQuery:
    """Declarative selection of a subgraph entity collection.

    Attributes:
        entity: Collection name (e.g. 'zassetExchanges').
        fields: Scalar fields to select.
        where: Filter arguments. None values are left out.
        order_by: Field to order by, if any.
        order_direction: 'asc' or 'desc'.
    """

    entity: str
    fields: list[str]
    where: dict[str, Any] = field(default_factory=dict)
    order_by: str | None = None
    order_direction: str = "desc"

    @property
    def filters(self) -> dict[str, Any]:
        """Filters with unset values removed."""
        return drop_none(self.where)

    def render(self, first: int, skip: int = 0) -> str:
        """Render the query document for one page."""
        args = [f"first: {first}", f"skip: {skip}"]
        if self.order_by:
            args.append(f"orderBy: {self.order_by}")
            args.append(f"orderDirection: {self.order_direction}")
        if self.filters:
            where = ", ".join(f"{k}: {format_value(v)}" for k, v in self.filters.items())
            args.append(f"where: {{{where}}}")
        selection = " ".join(self.fields)
        return f"{{ {self.entity}({', '.join(args)}) {{ {selection} }} }}"

    def render_subscription(self) -> str:
        """Render a subscription document that follows the newest entity."""
        return "subscription " + self.render(first=1)


class SubgraphClient:
    """Async client for the indexing service's GraphQL subgraphs."""

    TIMEOUT: int = 30

    def __init__(
        self,
        config: Config | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            config: Application configuration (endpoints, timeout, page size).
            transport: Optional httpx transport, used to stub the network.
        """
        self.config = config or Config()
        self.timeout = self.config.general.timeout_seconds or self.TIMEOUT
        self.page_size = min(self.config.general.page_size, MAX_PAGE_SIZE)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Open the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )

    async def disconnect(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> SubgraphClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.disconnect()

    async def query(
        self,
        subgraph: str,
        document: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run a GraphQL document against a subgraph.

        Args:
            subgraph: Subgraph name from the configuration.
            document: GraphQL query text.
            variables: Optional GraphQL variables.

        Returns:
            The ``data`` member of the response.

        Raises:
            SubgraphError: On transport errors, HTTP errors or GraphQL errors.
        """
        if not self._client:
            raise RuntimeError("Not connected. Call connect() first.")

        url = self.config.subgraphs.url_for(subgraph)
        payload: dict[str, Any] = {"query": document}
        if variables:
            payload["variables"] = variables

        try:
            response = await self._client.post(url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "subgraph_http_error",
                subgraph=subgraph,
                status_code=e.response.status_code,
            )
            raise SubgraphError(
                f"{subgraph} subgraph returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("subgraph_request_failed", subgraph=subgraph, error=str(e))
            raise SubgraphError(f"{subgraph} subgraph request failed: {e}") from e
        except ValueError as e:
            raise SubgraphError(f"{subgraph} subgraph returned invalid JSON") from e

        if body.get("errors"):
            messages = "; ".join(err.get("message", str(err)) for err in body["errors"])
            logger.error("subgraph_query_failed", subgraph=subgraph, errors=messages)
            raise SubgraphError(f"{subgraph} subgraph query failed: {messages}")

        return body.get("data") or {}

    async def paginate(
        self,
        subgraph: str,
        entity_query: EntityQuery,
        max_results: float = math.inf,
    ) -> list[dict[str, Any]]:
        """Fetch up to max_results entities, page by page.

        Args:
            subgraph: Subgraph name from the configuration.
            entity_query: What to select.
            max_results: Upper bound on rows returned; math.inf for all.

        Returns:
            Raw entity dictionaries in subgraph order.
        """
        results: list[dict[str, Any]] = []
        skip = 0

        while len(results) < max_results:
            first = int(min(self.page_size, max_results - len(results)))
            data = await self.query(subgraph, entity_query.render(first=first, skip=skip))
            page = data.get(entity_query.entity) or []
            results.extend(page)

            logger.debug(
                "subgraph_page_fetched",
                entity=entity_query.entity,
                skip=skip,
                count=len(page),
            )

            if len(page) < first:
                break
            skip += first

        return results

    async def fetch_one(
        self,
        subgraph: str,
        entity_query: EntityQuery,
    ) -> dict[str, Any] | None:
        """Fetch the first matching entity, or None."""
        rows = await self.paginate(subgraph, entity_query, max_results=1)
        return rows[0] if rows else None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(page_size={self.page_size}, connected={self._client is not None})"
