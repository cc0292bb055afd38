"""
Admin alerts through a self-hosted ntfy server.

Pushes a short message to moderator devices when a report or a community
request arrives. Alerts are fire-and-forget: failures are logged and never
reach the workflow that triggered them.
"""

import asyncio
from enum import Enum
from typing import NamedTuple

import httpx
from loguru import logger

from models.config import settings


class AlertConfig(NamedTuple):
    topic_suffix: str
    default_priority: str  # min, low, default, high, max
    tags: str  # comma-separated emoji shortcodes


class AlertType(Enum):
    """Alert kinds; each maps to its own ntfy topic."""

    REPORT = AlertConfig("reports", "high", "rotating_light,report")
    COMMUNITY_REQUEST = AlertConfig("community-requests", "default", "sparkles,new")
    CRITICAL = AlertConfig("critical", "max", "skull,warning")

    @property
    def topic_suffix(self) -> str:
        return self.value.topic_suffix

    @property
    def default_priority(self) -> str:
        return self.value.default_priority

    @property
    def tags(self) -> str:
        return self.value.tags


class AdminAlertService:
    """
    Admin alert sender.

    All methods log failures but never raise or block the caller.
    """

    @classmethod
    def _get_topic(cls, alert_type: AlertType) -> str:
        return f"{settings.NTFY_TOPIC_PREFIX}-{alert_type.topic_suffix}"

    @classmethod
    async def _send_async(
        cls,
        alert_type: AlertType,
        title: str,
        message: str,
        click_url: str | None = None,
    ) -> bool:
        """
        Post one alert to ntfy.

        Args:
            alert_type: Determines topic, priority and tags
            title: Alert title
            message: Alert body
            click_url: URL opened when the alert is tapped

        Returns:
            True if sent successfully, False otherwise
        """
        if not settings.NTFY_URL or not settings.NTFY_ENABLED:
            logger.debug("Ntfy not configured or disabled, skipping alert")
            return False

        topic = cls._get_topic(alert_type)
        headers: dict[str, str] = {
            "Title": title,
            "Priority": alert_type.default_priority,
            "Tags": alert_type.tags,
        }
        if settings.NTFY_AUTH_TOKEN:
            headers["Authorization"] = f"Bearer {settings.NTFY_AUTH_TOKEN}"
        if click_url:
            headers["Click"] = click_url

        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.post(
                    f"{settings.NTFY_URL}/{topic}",
                    headers=headers,
                    content=message,
                )
                response.raise_for_status()
                logger.info(f"Admin alert sent to {topic}: {title}")
                return True
        except httpx.TimeoutException:
            logger.warning(f"Ntfy timeout sending to {topic}: {title}")
            return False
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Ntfy HTTP error {e.response.status_code} for {topic}: {title}"
            )
            return False
        except httpx.HTTPError as e:
            logger.warning(f"Ntfy error sending to {topic}: {e}")
            return False

    @classmethod
    def send_fire_and_forget(
        cls,
        alert_type: AlertType,
        title: str,
        message: str,
        click_url: str | None = None,
    ) -> None:
        """
        Send an alert without blocking the caller when an event loop is running.

        Sync routers run in a worker thread with no loop, so the send runs
        inline there with the client's short timeout.
        """
        if not settings.NTFY_URL or not settings.NTFY_ENABLED:
            return

        try:
            loop = asyncio.get_running_loop()
            loop.create_task(cls._send_async(alert_type, title, message, click_url))
        except RuntimeError:
            asyncio.run(cls._send_async(alert_type, title, message, click_url))

    @classmethod
    def notify_new_report(cls, report_id: int, reason: str, target: str) -> None:
        """
        Alert moderators of a new report.

        Args:
            report_id: Database ID of the report
            reason: Report reason value
            target: Short target description, e.g. "post 12"
        """
        cls.send_fire_and_forget(
            AlertType.REPORT,
            f"New Report: {reason}",
            f"Target: {target}\nReport ID: {report_id}",
            f"{settings.APP_URL}/admin/reports",
        )

    @classmethod
    def notify_community_request(
        cls, request_id: int, name: str, target_type: str
    ) -> None:
        cls.send_fire_and_forget(
            AlertType.COMMUNITY_REQUEST,
            "Community Request",
            f"{name} ({target_type})\nRequest ID: {request_id}",
            f"{settings.APP_URL}/admin/community-requests",
        )

    @classmethod
    def notify_critical(cls, title: str, message: str) -> None:
        """Send a max-priority alert (unhandled server errors)."""
        cls.send_fire_and_forget(AlertType.CRITICAL, title, message, settings.APP_URL)
