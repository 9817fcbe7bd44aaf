import logging
from typing import Iterable, Optional, Dict, Any

from sqlalchemy.orm import Session

from app.core.firebase import send_push_notification_to_multiple
from app.core.realtime import feed, channel_for
from app.domains.users.repository.user_repository import UserRepository

logger = logging.getLogger(__name__)

NOTIFICATIONS_CHANNEL = "notifications"


class NotificationService:
    """Fan a user-facing notification out to the change feed and to FCM."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def notify(
        self,
        user_ids: Iterable[str],
        notif_type: str,
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> int:
        """
        Send to every user in user_ids. Never raises: a failed push must not
        undo the action that triggered it.

        Returns:
            int: number of users the notification was addressed to
        """
        targets = [u for u in dict.fromkeys(user_ids) if u]
        if not targets:
            return 0

        payload = {"type": notif_type, "title": title, "body": body, **(data or {})}

        for user_id in targets:
            feed.publish(channel_for(NOTIFICATIONS_CHANNEL, user_id), NOTIFICATIONS_CHANNEL, payload)

        try:
            fcm_tokens = self.user_repo.get_fcm_tokens_for_users(targets)
            if not fcm_tokens:
                logger.debug("[FCM] No FCM tokens for %s notification", notif_type)
                return len(targets)

            result = send_push_notification_to_multiple(
                fcm_tokens=fcm_tokens,
                title=title,
                body=body,
                data={"type": notif_type, **(data or {})},
            )
            logger.info(
                "[FCM] %s push sent: success=%s, failure=%s",
                notif_type,
                result["success_count"],
                result["failure_count"],
            )
            if result.get("invalid_tokens"):
                self.user_repo.remove_fcm_tokens(result["invalid_tokens"])
        except Exception as e:
            logger.error("[FCM] %s push error: %s", notif_type, e)
            self.db.rollback()

        return len(targets)
