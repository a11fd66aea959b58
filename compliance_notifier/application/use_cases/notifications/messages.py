"""Message wording and ready-made notifiers for common compliance events."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from compliance_notifier.config import get_settings
from compliance_notifier.domain.entities import (
    AUDIT_SCHEDULED,
    CAPA_OVERDUE,
    COMPLIANCE_ALERT,
    INSURANCE_EXPIRED,
    INSURANCE_EXPIRY,
    LBP_STATUS_CANCELLED,
    LBP_STATUS_CHANGE,
    LBP_STATUS_SUSPENDED,
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_PRIORITY_CRITICAL,
    NOTIFICATION_PRIORITY_HIGH,
    NOTIFICATION_PRIORITY_NORMAL,
)
from compliance_notifier.utils import ensure_app_timezone

from .dispatch import (
    NotificationChannels,
    NotificationRequest,
    SendResult,
    create_notification,
)

logger = logging.getLogger(__name__)

COMPLIANCE_AT_RISK_THRESHOLD = 70
URGENT_INSURANCE_DAYS = 30

LBP_BOARD_PHONE = "0800 729 721"
LBP_BOARD_EMAIL = "lbp@mbie.govt.nz"


class SmsTemplates:
    """Short texts sized for a single SMS segment where possible."""

    @staticmethod
    def insurance_expiry_30(business_name: str, policy_type: str, days: int) -> str:
        return (
            f"URGENT: {business_name} - Your {policy_type} insurance expires in {days} days. "
            "Renew immediately to avoid certification suspension."
        )

    @staticmethod
    def insurance_expired(business_name: str, policy_type: str) -> str:
        return (
            f"ALERT: {business_name} - Your {policy_type} insurance has expired. "
            "Your certification badge has been suspended until renewed."
        )

    @staticmethod
    def lbp_status_change(member_name: str, new_status: str) -> str:
        return (
            f"RANZ: LBP status for {member_name} has changed to {new_status}. "
            "Please verify and update records."
        )

    @staticmethod
    def audit_scheduled(business_name: str, date: str) -> str:
        return (
            f"RANZ: An audit has been scheduled for {business_name} on {date}. "
            "Check your dashboard for details."
        )

    @staticmethod
    def capa_overdue(title: str) -> str:
        return f'URGENT: CAPA "{title}" is now overdue. Immediate action required.'

    @staticmethod
    def compliance_alert(business_name: str, score: int) -> str:
        return (
            f"RANZ: {business_name} compliance score has dropped to {score}%. "
            "Review required items in your dashboard."
        )


def _portal_url(path: str) -> str:
    return f"{get_settings().app_base_url.rstrip('/')}/{path.lstrip('/')}"


def format_long_date(value: datetime) -> str:
    """Format ``value`` like ``Monday, 3 March 2025``."""

    localized = ensure_app_timezone(value)
    return f"{localized:%A}, {localized.day} {localized:%B %Y}"


def notify_insurance_expiry(
    session: Session,
    *,
    organization_id: int,
    business_name: str,
    policy_type: str,
    days_until_expiry: int,
    owner_email: str,
    owner_phone: str | None = None,
    owner_user_id: str | None = None,
    channels: NotificationChannels | None = None,
    commit: bool = True,
) -> list[SendResult]:
    """Warn the owner about an upcoming policy expiry.

    SMS is only used once the expiry is within the urgent window.
    """

    urgent = days_until_expiry <= URGENT_INSURANCE_DAYS
    priority = NOTIFICATION_PRIORITY_HIGH if urgent else NOTIFICATION_PRIORITY_NORMAL
    results = [
        create_notification(
            session,
            NotificationRequest(
                organization_id=organization_id,
                user_id=owner_user_id,
                type=INSURANCE_EXPIRY,
                channel=NOTIFICATION_CHANNEL_EMAIL,
                priority=priority,
                title=f"Insurance Expiry Warning - {policy_type}",
                message=(
                    f"Your {policy_type} insurance expires in {days_until_expiry} days. "
                    "Please renew to maintain your RANZ certification status."
                ),
                action_url=_portal_url("/insurance"),
                recipient=owner_email,
            ),
            channels=channels,
            commit=commit,
        )
    ]
    if owner_phone and urgent:
        results.append(
            create_notification(
                session,
                NotificationRequest(
                    organization_id=organization_id,
                    user_id=owner_user_id,
                    type=INSURANCE_EXPIRY,
                    channel=NOTIFICATION_CHANNEL_SMS,
                    priority=priority,
                    title="Insurance Expiry",
                    message=SmsTemplates.insurance_expiry_30(
                        business_name, policy_type, days_until_expiry
                    ),
                    recipient=owner_phone,
                ),
                channels=channels,
                commit=commit,
            )
        )
    return results


def notify_insurance_expired(
    session: Session,
    *,
    organization_id: int,
    business_name: str,
    policy_type: str,
    owner_email: str,
    owner_phone: str | None = None,
    owner_user_id: str | None = None,
    channels: NotificationChannels | None = None,
    commit: bool = True,
) -> list[SendResult]:
    results = [
        create_notification(
            session,
            NotificationRequest(
                organization_id=organization_id,
                user_id=owner_user_id,
                type=INSURANCE_EXPIRED,
                channel=NOTIFICATION_CHANNEL_EMAIL,
                priority=NOTIFICATION_PRIORITY_HIGH,
                title=f"Insurance Expired - {policy_type}",
                message=(
                    f"Your {policy_type} insurance has expired. Your certification badge "
                    "is suspended until a renewed policy is uploaded."
                ),
                action_url=_portal_url("/insurance"),
                recipient=owner_email,
            ),
            channels=channels,
            commit=commit,
        )
    ]
    if owner_phone:
        results.append(
            create_notification(
                session,
                NotificationRequest(
                    organization_id=organization_id,
                    user_id=owner_user_id,
                    type=INSURANCE_EXPIRED,
                    channel=NOTIFICATION_CHANNEL_SMS,
                    priority=NOTIFICATION_PRIORITY_HIGH,
                    title="Insurance Expired",
                    message=SmsTemplates.insurance_expired(business_name, policy_type),
                    recipient=owner_phone,
                ),
                channels=channels,
                commit=commit,
            )
        )
    return results


def notify_audit_scheduled(
    session: Session,
    *,
    organization_id: int,
    business_name: str,
    audit_date: datetime,
    owner_email: str,
    owner_phone: str | None = None,
    channels: NotificationChannels | None = None,
    commit: bool = True,
) -> list[SendResult]:
    formatted_date = format_long_date(audit_date)
    results = [
        create_notification(
            session,
            NotificationRequest(
                organization_id=organization_id,
                type=AUDIT_SCHEDULED,
                channel=NOTIFICATION_CHANNEL_EMAIL,
                priority=NOTIFICATION_PRIORITY_NORMAL,
                title="Audit Scheduled",
                message=(
                    f"An audit has been scheduled for {business_name} on {formatted_date}. "
                    "Please ensure all documentation is up to date and available for review."
                ),
                action_url=_portal_url("/audits"),
                recipient=owner_email,
            ),
            channels=channels,
            commit=commit,
        )
    ]
    if owner_phone:
        results.append(
            create_notification(
                session,
                NotificationRequest(
                    organization_id=organization_id,
                    type=AUDIT_SCHEDULED,
                    channel=NOTIFICATION_CHANNEL_SMS,
                    priority=NOTIFICATION_PRIORITY_NORMAL,
                    title="Audit Scheduled",
                    message=SmsTemplates.audit_scheduled(business_name, formatted_date),
                    recipient=owner_phone,
                ),
                channels=channels,
                commit=commit,
            )
        )
    return results


def notify_capa_overdue(
    session: Session,
    *,
    organization_id: int,
    capa_title: str,
    assignee_email: str,
    assignee_phone: str | None = None,
    assignee_user_id: str | None = None,
    channels: NotificationChannels | None = None,
    commit: bool = True,
) -> list[SendResult]:
    results = [
        create_notification(
            session,
            NotificationRequest(
                organization_id=organization_id,
                user_id=assignee_user_id,
                type=CAPA_OVERDUE,
                channel=NOTIFICATION_CHANNEL_EMAIL,
                priority=NOTIFICATION_PRIORITY_HIGH,
                title="CAPA Overdue - Immediate Action Required",
                message=(
                    f'The corrective action "{capa_title}" is now overdue. Please complete '
                    "this action immediately to avoid compliance issues."
                ),
                action_url=_portal_url("/capa"),
                recipient=assignee_email,
            ),
            channels=channels,
            commit=commit,
        )
    ]
    if assignee_phone:
        results.append(
            create_notification(
                session,
                NotificationRequest(
                    organization_id=organization_id,
                    user_id=assignee_user_id,
                    type=CAPA_OVERDUE,
                    channel=NOTIFICATION_CHANNEL_SMS,
                    priority=NOTIFICATION_PRIORITY_HIGH,
                    title="CAPA Overdue",
                    message=SmsTemplates.capa_overdue(capa_title),
                    recipient=assignee_phone,
                ),
                channels=channels,
                commit=commit,
            )
        )
    return results


def notify_compliance_alert(
    session: Session,
    *,
    organization_id: int,
    business_name: str,
    compliance_score: int,
    owner_email: str,
    owner_phone: str | None = None,
    channels: NotificationChannels | None = None,
    commit: bool = True,
) -> list[SendResult]:
    """Tell the owner their compliance score dropped.

    Scores below the at-risk threshold are critical and also go out by SMS.
    """

    at_risk = compliance_score < COMPLIANCE_AT_RISK_THRESHOLD
    priority = NOTIFICATION_PRIORITY_CRITICAL if at_risk else NOTIFICATION_PRIORITY_HIGH
    results = [
        create_notification(
            session,
            NotificationRequest(
                organization_id=organization_id,
                type=COMPLIANCE_ALERT,
                channel=NOTIFICATION_CHANNEL_EMAIL,
                priority=priority,
                title="Compliance Score Alert",
                message=(
                    f"Your compliance score has dropped to {compliance_score}%. Please review "
                    "your dashboard to identify and address outstanding items."
                ),
                action_url=_portal_url("/dashboard"),
                recipient=owner_email,
            ),
            channels=channels,
            commit=commit,
        )
    ]
    if owner_phone and at_risk:
        results.append(
            create_notification(
                session,
                NotificationRequest(
                    organization_id=organization_id,
                    type=COMPLIANCE_ALERT,
                    channel=NOTIFICATION_CHANNEL_SMS,
                    priority=priority,
                    title="Compliance Alert",
                    message=SmsTemplates.compliance_alert(business_name, compliance_score),
                    recipient=owner_phone,
                ),
                channels=channels,
                commit=commit,
            )
        )
    return results


def member_lbp_message(
    member_name: str, lbp_number: str, old_status: str | None, new_status: str
) -> str:
    """Personal explanation of a licence status change for the practitioner."""

    if new_status == LBP_STATUS_SUSPENDED:
        explanation = (
            "You are now suspended from carrying out restricted building work. This "
            "suspension must be resolved before you can work as a Licensed Building "
            "Practitioner."
        )
    elif new_status == LBP_STATUS_CANCELLED:
        explanation = (
            "Your license has been revoked. You are no longer authorized to carry out "
            "restricted building work under this license."
        )
    else:
        explanation = f"Your license status has changed to {new_status}."

    return (
        f"Hi {member_name},\n\n"
        "Your Licensed Building Practitioner status has changed:\n"
        f"LBP Number: {lbp_number}\n"
        f"Previous Status: {old_status or 'Unknown'}\n"
        f"New Status: {new_status}\n\n"
        f"What this means: {explanation}\n\n"
        "If you believe this is an error or need assistance, please contact the LBP "
        f"Board immediately on {LBP_BOARD_PHONE} or {LBP_BOARD_EMAIL}."
    )


def organization_lbp_message(
    member_name: str, lbp_number: str, old_status: str | None, new_status: str
) -> str:
    """Compliance notice for the organization employing the practitioner."""

    impact = (
        "This status change may affect your organization's certification and "
        "compliance score."
    )
    if new_status in (LBP_STATUS_SUSPENDED, LBP_STATUS_CANCELLED):
        impact += (
            " A suspended or cancelled LBP license means this staff member cannot "
            "carry out restricted building work."
        )
    return (
        "During our daily verification with the MBIE LBP Board, we detected a status "
        "change for one of your staff members:\n"
        f"Staff Member: {member_name}\n"
        f"LBP Number: {lbp_number}\n"
        f"Previous Status: {old_status or 'Unknown'}\n"
        f"New Status: {new_status}\n\n"
        f"Compliance Impact: {impact}\n\n"
        "Please review this change and take any necessary action to maintain your "
        "certification status."
    )


def notify_lbp_status_change(
    session: Session,
    *,
    organization_id: int,
    member_name: str,
    lbp_number: str,
    old_status: str | None,
    new_status: str,
    member_email: str | None = None,
    member_phone: str | None = None,
    member_user_id: str | None = None,
    organization_email: str | None = None,
    channels: NotificationChannels | None = None,
) -> list[SendResult]:
    """Fan a licence status change out to the practitioner and their employer.

    Every message is committed on its own, so a failure for one recipient is
    logged and does not stop the others.
    """

    title = f"LBP Status Change - {new_status}"
    requests: list[NotificationRequest] = []
    if member_email:
        requests.append(
            NotificationRequest(
                organization_id=organization_id,
                user_id=member_user_id,
                type=LBP_STATUS_CHANGE,
                channel=NOTIFICATION_CHANNEL_EMAIL,
                priority=NOTIFICATION_PRIORITY_HIGH,
                title=title,
                message=member_lbp_message(member_name, lbp_number, old_status, new_status),
                action_url=_portal_url("/profile"),
                recipient=member_email,
            )
        )
    if member_phone:
        requests.append(
            NotificationRequest(
                organization_id=organization_id,
                user_id=member_user_id,
                type=LBP_STATUS_CHANGE,
                channel=NOTIFICATION_CHANNEL_SMS,
                priority=NOTIFICATION_PRIORITY_HIGH,
                title="LBP Status Change",
                message=SmsTemplates.lbp_status_change(member_name, new_status),
                recipient=member_phone,
            )
        )
    if organization_email:
        requests.append(
            NotificationRequest(
                organization_id=organization_id,
                type=LBP_STATUS_CHANGE,
                channel=NOTIFICATION_CHANNEL_EMAIL,
                priority=NOTIFICATION_PRIORITY_HIGH,
                title=f"Staff LBP Status Change - {member_name}",
                message=organization_lbp_message(
                    member_name, lbp_number, old_status, new_status
                ),
                action_url=_portal_url("/staff"),
                recipient=organization_email,
            )
        )
    results: list[SendResult] = []
    for request in requests:
        try:
            results.append(
                create_notification(session, request, channels=channels, commit=True)
            )
        except Exception:
            session.rollback()
            logger.exception(
                "Failed to send %s LBP status notification for %s",
                request.channel,
                lbp_number,
            )
    return results


__all__ = [
    "COMPLIANCE_AT_RISK_THRESHOLD",
    "SmsTemplates",
    "format_long_date",
    "member_lbp_message",
    "notify_audit_scheduled",
    "notify_capa_overdue",
    "notify_compliance_alert",
    "notify_insurance_expired",
    "notify_insurance_expiry",
    "notify_lbp_status_change",
    "organization_lbp_message",
]
