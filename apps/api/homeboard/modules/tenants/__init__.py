from homeboard.modules.tenants.provisioning import normalize_tenant_id, provision_tenant

__all__ = ["normalize_tenant_id", "provision_tenant"]
