"""
Rescue365 - Reports Module
Rescue report storage, routing, lifecycle and navigation.
"""

from rescue365.reports.models import (
    RescueReport,
    ReportInput,
    ReportStatus,
    Role,
)
from rescue365.reports.store import (
    SupabaseReportStore,
    SQLReportStore,
    MockReportStore,
    get_report_store,
)
from rescue365.reports.router import (
    ReportView,
    visible_reports,
)
from rescue365.reports.lifecycle import (
    LifecycleController,
    TransitionResult,
    AnyTransitionPolicy,
    ForwardOnlyPolicy,
    get_transition_policy,
)
from rescue365.reports.navigation import (
    NavigationFlow,
    PendingNavigation,
    build_map_url,
)
from rescue365.reports.submission import (
    ReportDraft,
    validate_draft,
    submit_report,
)

__all__ = [
    # Models
    "RescueReport",
    "ReportInput",
    "ReportStatus",
    "Role",
    # Store
    "SupabaseReportStore",
    "SQLReportStore",
    "MockReportStore",
    "get_report_store",
    # Routing
    "ReportView",
    "visible_reports",
    # Lifecycle
    "LifecycleController",
    "TransitionResult",
    "AnyTransitionPolicy",
    "ForwardOnlyPolicy",
    "get_transition_policy",
    # Navigation
    "NavigationFlow",
    "PendingNavigation",
    "build_map_url",
    # Submission
    "ReportDraft",
    "validate_draft",
    "submit_report",
]
