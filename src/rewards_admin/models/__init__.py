"""SQLAlchemy models package."""

from .organization import Address, Branch, Organization, OrganizationNotificationLimit  # noqa: F401
from .user import (  # noqa: F401
    AppUser,
    AppUserOrganization,
    CollaboratorPermission,
    RestrictedCollaboratorAction,
    UserPermission,
)
from .beneficiary import Beneficiary, BeneficiaryOrganization  # noqa: F401
from .catalog import Category, Product, Stock, Subcategory  # noqa: F401
from .order import AppOrder, History, Redemption, Status  # noqa: F401
from .loyalty import Assignment, PointsRule, PointsRuleType  # noqa: F401
