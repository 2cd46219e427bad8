"""
Portal module namespace and default module sets.

Adding a module means adding it to MODULE_NAMESPACE and to whichever
default sets should expose it.
"""

from app.models.tenant import TenantType

# Full MSP administration surface
MSP_MODULES: tuple[str, ...] = (
    "dashboard",
    "organizations",
    "users",
    "teams",
    "roles",
    "rbac",
    "business-services",
    "applications",
    "deployments",
    "itsm",
    "security",
    "cloud",
    "monitoring",
    "tenant-management",
    "settings",
)

CLIENT_MODULES: tuple[str, ...] = (
    "dashboard",
    "users",
    "teams",
    "business-services",
    "applications",
    "itsm",
    "monitoring",
    "profile",
    "settings",
)

ESN_MODULES: tuple[str, ...] = (
    "dashboard",
    "users",
    "teams",
    "itsm",
    "monitoring",
    "applications",
)

# Non-admin user on the main domain
FALLBACK_MODULES: tuple[str, ...] = (
    "dashboard",
    "users",
    "teams",
    "itsm",
    "monitoring",
    "profile",
)

# Modules a tenant user may see but never modify
READ_ONLY_MODULES: frozenset[str] = frozenset({"monitoring", "security"})

MODULE_NAMESPACE: tuple[str, ...] = MSP_MODULES + ("profile",)

# Stands for "every default module of the tenant type" in access configs
ALL_MODULES_WILDCARD = "*"


def default_modules_for(tenant_type: TenantType | str) -> tuple[str, ...]:
    """Default module set of a tenant without an access config."""
    if tenant_type == TenantType.ESN:
        return ESN_MODULES
    return CLIENT_MODULES


def expand_modules(modules: list[str], tenant_type: TenantType | str) -> list[str]:
    """
    Replace the wildcard with the tenant type defaults, keeping order and
    dropping duplicates.
    """
    expanded: list[str] = []
    for module in modules:
        if module == ALL_MODULES_WILDCARD:
            expanded.extend(default_modules_for(tenant_type))
        else:
            expanded.append(module)
    return list(dict.fromkeys(expanded))
