"""
Access policy evaluation.

Pure functions from (resolved tenant, principal) to the portal detection
and configuration. No I/O happens here; the portal session gathers the
inputs and calls these on every refresh.
"""

from app.features.portal.modules import (
    FALLBACK_MODULES,
    MSP_MODULES,
    default_modules_for,
    expand_modules,
)
from app.models.tenant import TenantType
from app.schemas.portal import (
    PortalBranding,
    PortalConfig,
    PortalDetection,
    PortalFeatures,
    PortalType,
    PortalUIConfig,
    TenantInfo,
    UserAccess,
)
from app.schemas.tenant import TenantResolution
from app.schemas.user import Principal

MSP_BRANDING = PortalBranding(
    company_name="Administration MSP",
    primary_color="#3b82f6",
    accent_color="#1e40af",
)

CLIENT_DEFAULT_COMPANY_NAME = "Client Portal"
CLIENT_PRIMARY_COLOR = "#059669"
CLIENT_ACCENT_COLOR = "#047857"


def is_msp_context(tenant: TenantResolution | None) -> bool:
    """
    True when the origin belongs to the MSP itself.

    That is the bare admin domain (nothing resolved) or a domain registered
    as an msp tenant. Client and ESN domains never qualify, whoever browses
    them.
    """
    return tenant is None or tenant.tenant_type == TenantType.MSP


def tenant_modules(tenant: TenantResolution) -> list[str]:
    """Modules exposed by a resolved tenant."""
    config = tenant.access_config
    if config is not None and config.is_active and config.allowed_modules:
        return expand_modules(config.allowed_modules, tenant.tenant_type)
    return list(default_modules_for(tenant.tenant_type))


def evaluate(
    tenant: TenantResolution | None,
    principal: Principal | None,
) -> PortalDetection:
    """
    Compute the portal detection. The first matching rule wins.

    1. MSP admin in an MSP context: msp_admin with every MSP module.
    2. Any resolved tenant: esn_portal or client_portal with the tenant's
       configured modules, or the tenant type defaults.
    3. Otherwise: client_portal with the minimal fallback set.
    """
    is_msp_admin = principal is not None and principal.is_msp_admin

    if is_msp_admin and is_msp_context(tenant):
        return PortalDetection(
            portal_type=PortalType.MSP_ADMIN,
            is_msp_admin_portal=True,
            is_client_portal=False,
            user_access=UserAccess(
                has_admin_access=True,
                can_switch_organizations=True,
                accessible_modules=list(MSP_MODULES),
            ),
        )

    if tenant is not None:
        portal_type = (
            PortalType.ESN_PORTAL
            if tenant.tenant_type == TenantType.ESN
            else PortalType.CLIENT_PORTAL
        )
        return PortalDetection(
            portal_type=portal_type,
            is_msp_admin_portal=False,
            is_client_portal=True,
            tenant_info=TenantInfo(
                domain_name=tenant.domain_name,
                organization_id=tenant.organization_id,
                organization_name=tenant.organization_name,
            ),
            user_access=UserAccess(accessible_modules=tenant_modules(tenant)),
        )

    return PortalDetection(
        portal_type=PortalType.CLIENT_PORTAL,
        is_msp_admin_portal=False,
        is_client_portal=True,
        user_access=UserAccess(accessible_modules=list(FALLBACK_MODULES)),
    )


def build_portal_config(
    detection: PortalDetection,
    tenant: TenantResolution | None,
) -> PortalConfig:
    """
    Derive the portal configuration from a detection.

    Tenant branding and UI settings are layered over the defaults of the
    portal type; keys the tenant leaves unset keep the default.
    """
    modules = list(detection.user_access.accessible_modules)

    if detection.portal_type == PortalType.MSP_ADMIN:
        branding = MSP_BRANDING.model_copy()
        ui_config = PortalUIConfig(
            show_msp_branding=True,
            show_organization_selector=True,
            show_team_selector=True,
        )
        features = PortalFeatures(
            multi_tenant_access=True,
            cross_organization_view=True,
            admin_settings_access=True,
            cloud_management=True,
            user_management=True,
        )
    else:
        company_name = (
            detection.tenant_info.organization_name
            if detection.tenant_info
            else CLIENT_DEFAULT_COMPANY_NAME
        )
        branding = PortalBranding(
            company_name=company_name,
            primary_color=CLIENT_PRIMARY_COLOR,
            accent_color=CLIENT_ACCENT_COLOR,
        )
        ui_config = PortalUIConfig(
            show_msp_branding=False,
            show_organization_selector=False,
            show_team_selector=True,
        )
        features = PortalFeatures(
            cloud_management="cloud" in modules,
            user_management="users" in modules,
        )

    if tenant is not None:
        branding = branding.model_copy(update=_overrides(tenant.branding, PortalBranding))
        ui_config = ui_config.model_copy(update=_overrides(tenant.ui_config, PortalUIConfig))

    return PortalConfig(
        type=detection.portal_type,
        tenant_domain=tenant.domain_name if tenant else None,
        organization_id=detection.tenant_info.organization_id if detection.tenant_info else None,
        allowed_modules=modules,
        branding=branding,
        ui_config=ui_config,
        features=features,
    )


def _overrides(source, target: type) -> dict:
    """Values set on ``source`` for fields that ``target`` declares; blanks do not count."""
    values = source.model_dump(include=set(target.model_fields))
    return {
        key: value
        for key, value in values.items()
        if key in target.model_fields and value not in (None, "")
    }
