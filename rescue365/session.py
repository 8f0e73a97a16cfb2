"""
Rescue365 - Session Controller

State and actions of one app user: sign-in, role, device location, the
report form, the report view and navigation. Screens only read this
state and call these actions.

Every action catches its own errors and reports them as a UserAlert;
state touched by a failed action keeps its previous value.

Device capabilities are passed in as objects:
    location provider: current_position() -> Coordinate, may raise PermissionDenied
    image picker:      pick(source) -> Optional[str], None when cancelled,
                       may raise PermissionDenied
"""

import logging
from typing import Optional, List, Any, Callable

from rescue365.core.config import settings
from rescue365.core.exceptions import (
    AuthError,
    PermissionDenied,
    StoreError,
    TransitionError,
    ValidationError,
)
from rescue365.alerts import messages
from rescue365.alerts.messages import UserAlert, AlertKind
from rescue365.reports.lifecycle import LifecycleController, TransitionResult
from rescue365.reports.models import RescueReport, Role
from rescue365.reports.navigation import NavigationFlow, PendingNavigation
from rescue365.reports.router import ReportView
from rescue365.reports.submission import ReportDraft, submit_report
from rescue365.services.auth import AuthUser, extract_tokens_from_url
from rescue365.services.geocoding import format_address

logger = logging.getLogger(__name__)

IMAGE_SOURCE_CAMERA = "camera"
IMAGE_SOURCE_LIBRARY = "library"


class RescueSession:
    """
    One user's app session.

    Usage:
        session = RescueSession(store=get_report_store())
        session.restore_session(access_token, refresh_token)
        session.select_role("rescuer")
        session.acquire_location(gps, geocoder)
        for report in session.reports: ...
    """

    def __init__(
        self,
        store: Any,
        auth_client: Optional[Any] = None,
        notifier: Optional[Any] = None,
        policy: Optional[Any] = None,
        map_launcher: Optional[Callable[[str], None]] = None,
        platform: str = "android",
        radius_meters: Optional[float] = None
    ):
        """
        Initialize session.

        Args:
            store: Report store gateway
            auth_client: Supabase auth client, needed for sign-in
            notifier: Bystander notifier
            policy: Status transition policy
            map_launcher: Opens map URLs on the device
            platform: Device platform for map URLs
            radius_meters: Rescuer range, defaults to the configured radius
        """
        self.store = store
        self.auth_client = auth_client
        self.lifecycle = LifecycleController(store, notifier=notifier, policy=policy)
        self.navigation = NavigationFlow(launcher=map_launcher, platform=platform)

        self.user: Optional[AuthUser] = None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None

        self.draft = ReportDraft()
        self.view = ReportView(
            radius_meters=radius_meters if radius_meters is not None else settings.rescue_radius_meters
        )
        self.selected_report: Optional[RescueReport] = None
        self.alerts: List[UserAlert] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def role(self) -> Optional[str]:
        return self.view.role

    @property
    def location(self):
        return self.view.location

    @property
    def reports(self) -> List[RescueReport]:
        """Reports visible to the current role."""
        return self.view.visible

    @property
    def screen(self) -> str:
        """Screen to show: sign_in, role_selection, or the role name."""
        if self.user is None:
            return "sign_in"
        if self.role is None:
            return "role_selection"
        return Role(self.role).value

    @property
    def last_alert(self) -> Optional[UserAlert]:
        return self.alerts[-1] if self.alerts else None

    def _alert(self, title: str, message: str = "", kind: AlertKind = AlertKind.INFO) -> UserAlert:
        alert = UserAlert(title=title, message=message, kind=kind)
        self.alerts.append(alert)
        return alert

    def _error(self, message: str) -> UserAlert:
        return self._alert("Error", message, AlertKind.ERROR)

    # ------------------------------------------------------------------
    # Sign-in
    # ------------------------------------------------------------------

    def google_sign_in_url(self) -> Optional[str]:
        """URL to open in a browser to sign in with Google."""
        if self.auth_client is None:
            logger.error("Sign-in requested without an auth client")
            return None
        return self.auth_client.authorize_url(
            settings.oauth_provider, settings.oauth_redirect_url
        )

    def complete_sign_in(self, callback_url: str) -> bool:
        """
        Finish sign-in from the OAuth redirect (or a deep link).

        Returns:
            True if a user is now signed in
        """
        tokens = extract_tokens_from_url(callback_url)
        if tokens is None or self.auth_client is None:
            logger.warning("Sign-in callback without tokens")
            return False

        try:
            auth_session = self.auth_client.set_session(tokens)
        except AuthError as e:
            logger.error(f"Error with Google Sign-In: {e}")
            return False

        self._adopt(auth_session)
        return True

    def restore_session(self, access_token: str, refresh_token: Optional[str] = None) -> bool:
        """
        Resume a stored session, refreshing it if the access token is stale.

        Returns:
            True if a user is now signed in
        """
        if self.auth_client is None:
            return False

        try:
            self.user = self.auth_client.get_user(access_token)
            self.access_token = access_token
            self.refresh_token = refresh_token
            self._bind_store()
            return True
        except AuthError as e:
            logger.info(f"Stored session rejected, refreshing: {e}")

        if not refresh_token:
            return False

        try:
            auth_session = self.auth_client.refresh_session(refresh_token)
        except AuthError as e:
            logger.error(f"Error fetching session: {e}")
            return False

        self._adopt(auth_session)
        return True

    def _adopt(self, auth_session) -> None:
        self.user = auth_session.user
        self.access_token = auth_session.access_token
        self.refresh_token = auth_session.refresh_token
        self._bind_store()

    def _bind_store(self) -> None:
        # Hosted stores act with the user's token
        with_token = getattr(self.store, "with_token", None)
        if with_token is not None and self.access_token:
            self.store = with_token(self.access_token)
            self.lifecycle.store = self.store

    def sign_out(self) -> None:
        """Sign out and reset all user state."""
        if self.auth_client is not None and self.access_token:
            try:
                self.auth_client.sign_out(self.access_token)
            except AuthError as e:
                logger.warning(f"Remote sign-out failed: {e}")

        self.user = None
        self.access_token = None
        self.refresh_token = None
        self.view.role = None
        self.view.clear()
        self.selected_report = None
        self.navigation.cancel()

    # ------------------------------------------------------------------
    # Role and location
    # ------------------------------------------------------------------

    def select_role(self, role: str) -> None:
        """Pick a role; rescuers and vets get their reports fetched."""
        self.view.role = Role(role)
        self.selected_report = None
        self.refresh_reports()

    def clear_role(self) -> None:
        """Go back to role selection."""
        self.view.role = None
        self.selected_report = None

    def acquire_location(self, provider: Any, geocoder: Optional[Any] = None) -> bool:
        """
        Read the device position and its address.

        Args:
            provider: Location provider
            geocoder: Reverse geocoder; the address stays empty without one

        Returns:
            True if a position was obtained
        """
        try:
            coordinate = provider.current_position()
        except PermissionDenied:
            self._alert(messages.LOCATION_DENIED, kind=AlertKind.ERROR)
            return False

        address = ""
        if geocoder is not None:
            address = format_address(geocoder.reverse(coordinate))

        self.view.location = coordinate
        self.draft.location = coordinate
        self.draft.address = address or None

        self.refresh_reports()
        return True

    # ------------------------------------------------------------------
    # Reporting (bystander)
    # ------------------------------------------------------------------

    def set_animal_type(self, animal_type: str) -> None:
        self.draft.animal_type = animal_type

    def set_description(self, description: str) -> None:
        self.draft.description = description

    def attach_image(self, picker: Any, source: str = IMAGE_SOURCE_CAMERA) -> bool:
        """
        Take a photo or choose one from the library.

        Returns:
            True if an image was attached
        """
        try:
            image_url = picker.pick(source)
        except PermissionDenied:
            self._alert("Permission Denied", messages.CAMERA_REQUIRED, AlertKind.ERROR)
            return False

        if not image_url:
            return False

        self.draft.image_url = image_url
        if source == IMAGE_SOURCE_CAMERA:
            self._alert("Photo Taken", messages.PHOTO_TAKEN, AlertKind.SUCCESS)
        else:
            self._alert("Image Selected", messages.IMAGE_SELECTED, AlertKind.SUCCESS)
        return True

    def submit_report(self) -> Optional[str]:
        """
        Submit the report form.

        Returns:
            Id of the new report, or None if nothing was created
        """
        self.draft.reported_by = self.user.id if self.user else None

        try:
            report_id = submit_report(self.store, self.draft)
        except ValidationError:
            self._alert("Missing Information", messages.MISSING_INFORMATION, AlertKind.ERROR)
            return None
        except StoreError as e:
            logger.error(f"Error submitting rescue report: {e}")
            self._error(messages.SUBMIT_FAILED)
            return None

        self._alert("Report Submitted", messages.SUBMIT_SUCCEEDED, AlertKind.SUCCESS)
        # Keep the position for the next report
        self.draft = ReportDraft(location=self.draft.location, address=self.draft.address)
        return report_id

    # ------------------------------------------------------------------
    # Reports (rescuer and vet)
    # ------------------------------------------------------------------

    def refresh_reports(self) -> bool:
        """
        Fetch all reports for rescuers and vets.

        Returns:
            True if the fetched reports were applied
        """
        if self.role not in (Role.RESCUER, Role.VET):
            return False

        token = self.view.begin_fetch()
        try:
            reports = self.store.list_all()
        except StoreError as e:
            logger.error(f"Error fetching rescue reports: {e}")
            self._error(messages.FETCH_FAILED)
            return False

        return self.view.load(token, reports)

    def select_report(self, report: Optional[RescueReport]) -> None:
        self.selected_report = report

    def update_status(self, report_id: str, status: str) -> Optional[TransitionResult]:
        """
        Change a report's status.

        Returns:
            TransitionResult, or None if the update failed
        """
        try:
            result = self.lifecycle.transition(report_id, status, view=self.view)
        except (StoreError, TransitionError) as e:
            logger.error(f"Error updating rescue status: {e}")
            self._error(messages.UPDATE_FAILED)
            return None

        self._alert(
            "Status Updated",
            messages.status_updated_message(result.status),
            AlertKind.SUCCESS
        )

        if result.bystander_notified:
            if self.selected_report is not None and self.selected_report.id == result.report_id:
                self.selected_report = None
            self._alert("Bystander Notified", messages.BYSTANDER_NOTIFIED, AlertKind.SUCCESS)

        return result

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def confirm_rescue(self, report: RescueReport) -> PendingNavigation:
        """Ask the rescuer to confirm navigating to a report."""
        return self.navigation.request(report)

    def accept_navigation(self) -> Optional[str]:
        return self.navigation.accept()

    def cancel_navigation(self) -> None:
        self.navigation.cancel()
