"""
Portal session: the single owner of derived portal state.

A session holds the current inputs (origin, principal) and the last
published detection and configuration. Every refresh runs
resolve -> load access config -> evaluate -> derive config, one step after
the other. Refreshes are tagged with a generation number; a refresh that
finds its generation superseded when it resumes drops its result, so the
published state always belongs to the latest inputs.
"""

import structlog

from app.config import settings
from app.core.context import set_request_context
from app.core.error_tracking import error_tracker
from app.core.exceptions import ConfigLoadFailure
from app.core.metrics import (
    portal_refresh_discarded_total,
    portal_refresh_errors_total,
    portal_refreshes_total,
)
from app.core.performance import PerformanceMonitor
from app.features.portal.modules import MODULE_NAMESPACE, READ_ONLY_MODULES
from app.features.portal.policy import build_portal_config, evaluate
from app.features.tenants.resolver import TenantResolver
from app.models.tenant import AccessType
from app.schemas.portal import (
    AccessLevel,
    ModulePermission,
    PortalConfig,
    PortalDetection,
    PortalState,
    PortalType,
)
from app.schemas.tenant import TenantResolution
from app.schemas.user import Principal

logger = structlog.get_logger(__name__)


class PortalSession:
    """
    Portal state for one (origin, principal) pair.

    Readers only ever see a fully published detection/config pair, or the
    previous one while a refresh is in flight.
    """

    def __init__(
        self,
        resolver: TenantResolver,
        origin: str | None = None,
        principal: Principal | None = None,
    ) -> None:
        self.resolver = resolver
        self.origin = origin
        self.principal = principal

        self.loading = False
        self.error: str | None = None

        self._tenant: TenantResolution | None = None
        self._detection: PortalDetection | None = None
        self._config: PortalConfig | None = None
        self._generation = 0
        self._closed = False

    async def refresh(
        self,
        origin: str | None = None,
        principal: Principal | None = None,
    ) -> PortalState:
        """
        Recompute the portal for the current inputs.

        Any input given replaces the stored one before the refresh starts.
        """
        if origin is not None:
            self.origin = origin
        if principal is not None:
            self.principal = principal
        return await self._run()

    async def on_origin_changed(self, origin: str | None) -> PortalState:
        """The host the user browses changed."""
        self.origin = origin
        return await self._run()

    async def on_principal_changed(self, principal: Principal | None) -> PortalState:
        """Sign-in, sign-out or a new identity; None means signed out."""
        self.principal = principal
        return await self._run()

    def close(self) -> None:
        """Stop publishing; refreshes still in flight are discarded."""
        self._closed = True
        self._generation += 1
        self.loading = False

    async def _run(self) -> PortalState:
        if self._closed:
            return self.state()

        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        try:
            async with PerformanceMonitor("portal_refresh", origin=self.origin):
                tenant = await self.resolver.resolve_from_origin(self.origin)
                if self._superseded(generation):
                    return self.state()

                load_error = None
                if tenant is not None:
                    try:
                        access_config = await self.resolver.load_access_config(tenant)
                    except ConfigLoadFailure as e:
                        # Publish with the tenant type defaults, but surface the failure
                        load_error = e.message
                        access_config = None
                        portal_refresh_errors_total.labels(error_type=type(e).__name__).inc()
                        logger.warning(
                            "access_config_load_failed",
                            tenant_id=tenant.tenant_id,
                            error=e.message,
                        )
                    if self._superseded(generation):
                        return self.state()
                    tenant = tenant.model_copy(update={"access_config": access_config})

                detection = evaluate(tenant, self.principal)
                config = build_portal_config(detection, tenant)
        except Exception as e:
            if self._superseded(generation):
                return self.state()

            # Last good detection and config stay published
            self.error = str(e) or type(e).__name__
            self.loading = False
            portal_refresh_errors_total.labels(error_type=type(e).__name__).inc()
            error_tracker.capture_exception(
                e,
                context={"operation": "portal_refresh", "origin": self.origin},
            )
            return self.state()

        self._publish(tenant, detection, config)
        self.error = load_error
        return self.state()

    def _superseded(self, generation: int) -> bool:
        if generation == self._generation:
            return False
        portal_refresh_discarded_total.inc()
        logger.debug(
            "portal_refresh_discarded",
            generation=generation,
            current_generation=self._generation,
        )
        return True

    def _publish(
        self,
        tenant: TenantResolution | None,
        detection: PortalDetection,
        config: PortalConfig,
    ) -> None:
        self._tenant = tenant
        self._detection = detection
        self._config = config
        self.loading = False

        if tenant is not None:
            set_request_context(tenant_id=tenant.tenant_id)

        portal_refreshes_total.labels(portal_type=detection.portal_type.value).inc()
        logger.info(
            "portal_refreshed",
            portal_type=detection.portal_type.value,
            tenant_domain=config.tenant_domain,
            module_count=len(config.allowed_modules),
        )

    def get_portal_config(self) -> PortalConfig | None:
        return self._config

    def get_portal_detection(self) -> PortalDetection | None:
        return self._detection

    def state(self) -> PortalState:
        return PortalState(
            portal_config=self._config,
            portal_detection=self._detection,
            loading=self.loading,
            error=self.error,
        )

    def is_msp_admin_portal(self) -> bool:
        return self._detection is not None and self._detection.is_msp_admin_portal

    def is_client_portal(self) -> bool:
        return self._detection is not None and self._detection.is_client_portal

    def can_access_module(self, module_id: str) -> bool:
        if self._detection is None:
            return False
        return module_id in self._detection.user_access.accessible_modules

    def get_module_permission(self, module_id: str) -> ModulePermission:
        """
        Access level on one module.

        none when not accessible, admin in the MSP admin portal, read for
        monitoring/security or a readonly tenant, write otherwise.
        """
        if not self.can_access_module(module_id):
            level = AccessLevel.NONE
        elif self._detection.portal_type == PortalType.MSP_ADMIN:
            level = AccessLevel.ADMIN
        elif module_id in READ_ONLY_MODULES or self._is_readonly_tenant():
            level = AccessLevel.READ
        else:
            level = AccessLevel.WRITE

        return ModulePermission(
            module_id=module_id,
            access_level=level,
            visible=level != AccessLevel.NONE,
        )

    def list_module_permissions(self) -> list[ModulePermission]:
        """Permission on every module of the namespace, in namespace order."""
        return [self.get_module_permission(module_id) for module_id in MODULE_NAMESPACE]

    def switch_to_msp_portal(self) -> str | None:
        """
        Canonical MSP admin URL for MSP admins, None for everyone else.

        Navigation itself is up to the caller.
        """
        if self.principal is not None and self.principal.is_msp_admin:
            return settings.msp_admin_url
        return None

    def _is_readonly_tenant(self) -> bool:
        config = self._tenant.access_config if self._tenant else None
        return (
            config is not None
            and config.is_active
            and config.access_type == AccessType.READONLY
        )
