"""Rent desk - period rents, selection and document e-mailing.

This module provides the client-side workflow of the rent management
backend: it loads the rents of a billing period, filters them, tracks the
rents selected for a bulk action and e-mails rent documents (first notice,
reminder, last reminder, receipt) to their tenants.

Key Components:
- Config: Organization-specific settings
- DTOs: Rents, occupants, leases and tenants
- PeriodStore: Active period and its rent collection, observable
- RentFilterer / SelectionTracker: Displayed subset and bulk selection
- NotificationDispatcher: One document kind sent at a time
- RentTableView: View model binding the pieces for one screen
- LeaseManager / NewTenantDialog / DashboardStore: Settings and shortcuts
"""

__version__ = "1.0.0"

from .config import RentsConfig
from .dispatcher import DispatchOutcome, DispatchResult, NotificationDispatcher, SendState
from .dto import DocumentKind, FilterCriteria, Occupant, Period, Rent, RentStatus
from .filters import RentFilterer
from .period import PeriodStore
from .rent_table import RentTableView
from .selection import HeaderCheckboxState, SelectionTracker

__all__ = [
    "RentsConfig",
    "DocumentKind",
    "RentStatus",
    "Rent",
    "Occupant",
    "Period",
    "FilterCriteria",
    "PeriodStore",
    "RentFilterer",
    "SelectionTracker",
    "HeaderCheckboxState",
    "NotificationDispatcher",
    "SendState",
    "DispatchOutcome",
    "DispatchResult",
    "RentTableView",
]
