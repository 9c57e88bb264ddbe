from sqlalchemy import Column, DateTime, ForeignKey, ForeignKeyConstraint, Index, String, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from homeboard.shared.infrastructure.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    dashboards = relationship("Dashboard", back_populates="tenant", cascade="all, delete-orphan")
    connection_config = relationship(
        "ConnectionConfigRecord",
        back_populates="tenant",
        uselist=False,
        cascade="all, delete-orphan",
    )


class Dashboard(Base):
    __tablename__ = "dashboards"

    tenant_id = Column(String(64), ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True)
    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    data = Column(Text, nullable=False)  # Serialized JSON document
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    tenant = relationship("Tenant", back_populates="dashboards")
    versions = relationship(
        "DashboardVersion",
        back_populates="dashboard",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("dashboards_tenant_updated_idx", "tenant_id", "updated_at"),
    )


class DashboardVersion(Base):
    """Immutable snapshot of a dashboard taken right before it was overwritten."""
    __tablename__ = "dashboard_versions"

    version_id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False)
    dashboard_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    data = Column(Text, nullable=False)
    source_updated_at = Column(DateTime, nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False)

    dashboard = relationship("Dashboard", back_populates="versions")

    __table_args__ = (
        ForeignKeyConstraint(
            ["tenant_id", "dashboard_id"],
            ["dashboards.tenant_id", "dashboards.id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        Index("dashboard_versions_lookup_idx", "tenant_id", "dashboard_id", "created_at"),
    )


class ConnectionConfigRecord(Base):
    """Per-tenant connection settings.

    The flat columns are the legacy single-connection schema and are kept in sync
    with the primary connection; connections_json holds the full connection set.
    """
    __tablename__ = "connection_configs"

    tenant_id = Column(String(64), ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True)
    url = Column(String(1024), nullable=False, default="")
    fallback_url = Column(String(1024), nullable=False, default="")
    auth_method = Column(String(16), nullable=False, default="oauth")
    token = Column(Text, nullable=False, default="")  # Encrypted
    oauth_tokens = Column(Text, nullable=True)
    connections_json = Column(Text, nullable=True)
    updated_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="connection_config")
