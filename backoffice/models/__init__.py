"""Back office models - re-exports all models and Base.metadata."""

from .base import Base, UUIDMixin, TimestampMixin, ServiceSyncMixin, SyncStatus
from .customer import Customer
from .package import HostingPackage, VpsPackage
from .service import Hosting, Vps
from .website import Domain, Website
from .control_panel import ControlPanel, ControlPanelType, LocalPlanType, PlanMapping

__all__ = [
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "ServiceSyncMixin",
    "SyncStatus",
    "Customer",
    "HostingPackage",
    "VpsPackage",
    "Hosting",
    "Vps",
    "Domain",
    "Website",
    "ControlPanel",
    "ControlPanelType",
    "LocalPlanType",
    "PlanMapping",
]
