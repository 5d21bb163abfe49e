"""
Caches for fetched workflow definitions, keyed by slug.
"""

import json
import logging
import os
from typing import Dict, Optional, Protocol
import redis
from custom_workflow.domain.models import WorkflowDefinition
from custom_workflow.shared.constants import (
    DEFAULT_REDIS_URL,
    REDIS_URL_ENV_VAR,
    SCHEMA_CACHE_KEY_PREFIX,
    SCHEMA_CACHE_TTL_SECONDS,
)


class SchemaCache(Protocol):
    def get(self, slug: str) -> Optional[WorkflowDefinition]:
        ...

    def set(self, slug: str, definition: WorkflowDefinition) -> None:
        ...

    def evict(self, slug: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemorySchemaCache:
    """Per-process cache living as long as the owning client"""

    def __init__(self):
        self._definitions: Dict[str, WorkflowDefinition] = {}

    def get(self, slug: str) -> Optional[WorkflowDefinition]:
        return self._definitions.get(slug)

    def set(self, slug: str, definition: WorkflowDefinition) -> None:
        self._definitions[slug] = definition

    def evict(self, slug: str) -> None:
        self._definitions.pop(slug, None)

    def clear(self) -> None:
        self._definitions.clear()

    def __contains__(self, slug: str) -> bool:
        return slug in self._definitions


class RedisSchemaCache:
    """Redis-backed cache shared between client processes"""

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        redis_url: Optional[str] = None,
        ttl_seconds: int = SCHEMA_CACHE_TTL_SECONDS,
    ):
        if redis_client is None:
            url = redis_url or os.getenv(REDIS_URL_ENV_VAR, DEFAULT_REDIS_URL)
            redis_client = redis.Redis.from_url(url, decode_responses=False)
        self.client = redis_client
        self.ttl_seconds = ttl_seconds

    def _key(self, slug: str) -> str:
        return f"{SCHEMA_CACHE_KEY_PREFIX}{slug}"

    def get(self, slug: str) -> Optional[WorkflowDefinition]:
        data = self.client.get(self._key(slug))
        if not data:
            return None

        try:
            return WorkflowDefinition.from_api(json.loads(data))
        except (ValueError, KeyError) as e:
            logging.warning(
                "Discarding unreadable cached workflow schema",
                extra={"slug": slug, "error": str(e)}
            )
            self.evict(slug)
            return None

    def set(self, slug: str, definition: WorkflowDefinition) -> None:
        self.client.set(self._key(slug), json.dumps(definition.to_dict()), ex=self.ttl_seconds)

    def evict(self, slug: str) -> None:
        self.client.delete(self._key(slug))

    def clear(self) -> None:
        keys = list(self.client.scan_iter(match=f"{SCHEMA_CACHE_KEY_PREFIX}*"))
        if keys:
            self.client.delete(*keys)
