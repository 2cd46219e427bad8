"""
Organization model.

Organizations are the MSP itself, its clients and the ESNs that manage
clients on the MSP's behalf.
"""

from enum import Enum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.models.base import BaseModel


class OrganizationType(str, Enum):
    """Relation of an organization to the platform operator."""
    MSP = "msp"
    CLIENT = "client"
    ESN = "esn"


class Organization(BaseModel):
    """Organization directory entry."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Organization name"
    )

    type: Mapped[OrganizationType] = mapped_column(
        String(20),
        nullable=False,
        default=OrganizationType.CLIENT,
        index=True,
        comment="msp, client or esn"
    )

    is_msp: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Convenience flag, always true for msp organizations"
    )

    tenant_domains: Mapped[list["TenantDomain"]] = relationship(
        "TenantDomain",
        back_populates="organization",
        cascade="all, delete-orphan",
    )

    @validates("type", "is_msp")
    def _keep_msp_flag_consistent(self, key: str, value):
        if key == "type":
            if value == OrganizationType.MSP:
                self.is_msp = True
            return value
        # An msp organization cannot be flagged non-msp
        if self.type == OrganizationType.MSP:
            return True
        return bool(value)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name}, type={self.type})>"
