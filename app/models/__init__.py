"""Database models — re-exports all models.

Import from here:  from app.models import Client, Deal, ...
Or from submodules: from app.models.deals import Deal
"""

from .base import Base  # noqa: F401

# CRM: Clients & their procurement requirements
from .crm import Client, ClientRequirement  # noqa: F401

# Suppliers & product catalogs
from .suppliers import Supplier, SupplierProduct  # noqa: F401

# Deal pipeline
from .deals import DEAL_STAGES, Deal  # noqa: F401
