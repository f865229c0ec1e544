"""timedldap: phase timing for directory (LDAP) operations.

Public surface re-exported here; see ``timedldap.template`` for details.
"""

from .client.base import SearchHit, SearchOptions, SearchScope
from .core.errors import AcquisitionError, OperationError, ReleaseError, TimedLdapError
from .telemetry.metrics import MetricsRegistry, Phase, get_metrics, reset_metrics
from .template import TimedDirectoryTemplate

__version__ = "0.1.0"

__all__ = [
    "AcquisitionError",
    "MetricsRegistry",
    "OperationError",
    "Phase",
    "ReleaseError",
    "SearchHit",
    "SearchOptions",
    "SearchScope",
    "TimedDirectoryTemplate",
    "TimedLdapError",
    "get_metrics",
    "reset_metrics",
]
