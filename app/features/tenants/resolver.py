"""
Tenant resolution: map a request origin to an active tenant domain.

No match is the normal outcome on the bare MSP admin domain and means
"operate in MSP admin mode". Directory trouble is never fatal on the
hostname path: it is logged and treated like no match.
"""

import asyncio
from typing import Awaitable, TypeVar

import structlog
from pydantic import ValidationError

from app.config import settings
from app.core.cache import CacheManager
from app.core.exceptions import ConfigLoadFailure, InvalidTenantState, ResolutionFailure
from app.core.metrics import tenant_resolution_duration_seconds, tenant_resolutions_total
from app.core.tenant import candidate_domains, normalize_origin
from app.features.tenants.directory import TenantDirectory
from app.schemas.tenant import TenantAccessConfigRead, TenantResolution

logger = structlog.get_logger(__name__)

T = TypeVar("T")

CACHE_NAMESPACE = "tenants"


class TenantResolver:
    """
    Resolve hostnames against a TenantDirectory.

    Every directory call is bounded by ``timeout`` seconds. Positive
    resolutions are cached when a live cache is supplied.
    """

    def __init__(
        self,
        directory: TenantDirectory,
        timeout: float | None = None,
        cache: CacheManager | None = None,
        cache_ttl: int | None = None,
    ) -> None:
        self.directory = directory
        self.timeout = timeout if timeout is not None else settings.directory_lookup_timeout_seconds
        self.cache = cache
        self.cache_ttl = cache_ttl or settings.cache_tenant_ttl

    async def resolve_from_origin(self, hostname: str | None) -> TenantResolution | None:
        """
        Tenant served at ``hostname``, or None.

        Never raises ResolutionFailure: failures are logged and reported
        as "no tenant".
        """
        host = normalize_origin(hostname)
        if host is None:
            return None

        try:
            return await self._resolve(host, use_cache=True)
        except ResolutionFailure as e:
            tenant_resolutions_total.labels(outcome="failed").inc()
            logger.warning(
                "resolution_failed",
                origin=host,
                error=e.message,
                error_type=type(e).__name__,
                **e.details,
            )
            return None

    async def resolve_by_domain(self, domain: str) -> TenantResolution | None:
        """
        Explicit lookup for administrative tooling.

        Same matching as resolve_from_origin, but bypasses the cache and
        lets ResolutionFailure reach the caller.
        """
        host = normalize_origin(domain)
        if host is None:
            return None
        return await self._resolve(host, use_cache=False)

    async def load_access_config(self, tenant: TenantResolution) -> TenantAccessConfigRead | None:
        """
        Access config of a resolved tenant.

        Raises:
            ConfigLoadFailure: the directory could not answer
        """
        try:
            return await self._call_directory(
                self.directory.find_access_config(tenant.tenant_id, tenant.organization_id),
                operation="access_config_lookup",
            )
        except ResolutionFailure as e:
            raise ConfigLoadFailure(
                f"Could not load access config for {tenant.domain_name}",
                details={"tenant_id": tenant.tenant_id, **e.details},
            ) from e

    async def _resolve(self, host: str, use_cache: bool) -> TenantResolution | None:
        cache_key = f"origin:{host}"

        if use_cache and self._cache_enabled:
            cached = await self._cached_resolution(cache_key)
            if cached is not None:
                tenant_resolutions_total.labels(outcome="cached").inc()
                return cached

        with tenant_resolution_duration_seconds.time():
            resolution = await self._lookup(host)

        if resolution is None:
            tenant_resolutions_total.labels(outcome="not_found").inc()
            logger.debug("tenant_not_found", origin=host)
            return None

        tenant_resolutions_total.labels(outcome="resolved").inc()
        logger.info(
            "tenant_resolved",
            origin=host,
            domain_name=resolution.domain_name,
            organization_id=resolution.organization_id,
            tenant_type=resolution.tenant_type.value,
        )

        if use_cache and self._cache_enabled:
            await self.cache.set(
                CACHE_NAMESPACE,
                cache_key,
                resolution.model_dump(mode="json"),
                ttl=self.cache_ttl,
            )

        return resolution

    async def _cached_resolution(self, cache_key: str) -> TenantResolution | None:
        """Cached resolution, or None; an entry that no longer validates is dropped."""
        cached = await self.cache.get(CACHE_NAMESPACE, cache_key)
        if cached is None:
            return None

        try:
            return TenantResolution.model_validate(cached)
        except ValidationError as e:
            logger.warning("cache_entry_discarded", key=cache_key, error_count=e.error_count())
            await self.cache.delete(CACHE_NAMESPACE, cache_key)
            return None

    async def _lookup(self, host: str) -> TenantResolution | None:
        for candidate in candidate_domains(host):
            domain = await self._call_directory(
                self.directory.find_active_tenant_domain_by_origin(candidate),
                operation="tenant_domain_lookup",
            )
            if domain is None:
                continue

            if domain.organization is None:
                raise InvalidTenantState(
                    f"Tenant domain {domain.domain_name} references a missing organization",
                    details={
                        "tenant_id": domain.id,
                        "organization_id": domain.organization_id,
                    },
                )
            return TenantResolution.from_domain(domain)

        return None

    async def _call_directory(self, call: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ResolutionFailure(
                f"Directory {operation} timed out",
                details={"operation": operation, "timeout_seconds": self.timeout},
            ) from e
        except ResolutionFailure:
            raise
        except Exception as e:
            raise ResolutionFailure(
                f"Directory {operation} failed: {e}",
                details={"operation": operation},
            ) from e

    @property
    def _cache_enabled(self) -> bool:
        return self.cache is not None and self.cache.enabled
