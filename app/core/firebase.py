import logging
from typing import Optional, Dict, Any, List

import firebase_admin
from firebase_admin import credentials, auth, messaging

from app.core.config import settings

logger = logging.getLogger(__name__)

_firebase_app = None


def get_firebase_app():
    """
    Initialize the Firebase Admin SDK on first use.

    Returns None when FIREBASE_CREDENTIALS is not configured, in which case
    token verification fails closed and push notifications are skipped.
    """
    global _firebase_app

    if _firebase_app is not None:
        return _firebase_app

    if not settings.FIREBASE_CREDENTIALS:
        logger.warning("[FIREBASE] FIREBASE_CREDENTIALS not set; auth and push disabled")
        return None

    # avoid double initialization (reload, multiple workers importing)
    if firebase_admin._apps:
        _firebase_app = firebase_admin.get_app()
        return _firebase_app

    logger.info("[FIREBASE] Loading credentials from: %s", settings.FIREBASE_CREDENTIALS)
    cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
    _firebase_app = firebase_admin.initialize_app(cred)
    logger.info("[FIREBASE] Admin SDK initialized")
    return _firebase_app


def verify_firebase_token(id_token: str) -> Optional[Dict[str, Any]]:
    app = get_firebase_app()
    if app is None:
        return None

    try:
        # clock_skew_seconds tolerates up to 60s of device clock drift
        decoded = auth.verify_id_token(
            id_token,
            app=app,
            check_revoked=False,
            clock_skew_seconds=60,
        )
        return decoded
    except Exception as e:
        logger.error("[FIREBASE] Token verification failed: %s: %s", type(e).__name__, e)
        if "used too early" in str(e) or "clock" in str(e).lower():
            logger.info("[FIREBASE] Clock synchronization issue, sync the system time.")
        return None


def send_push_notification_to_multiple(
    fcm_tokens: List[str],
    title: str,
    body: str,
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Send one FCM notification to several devices.

    Returns:
        Dict: success_count, failure_count, failed_tokens, invalid_tokens
    """
    empty = {"success_count": 0, "failure_count": 0, "failed_tokens": [], "invalid_tokens": []}

    valid_tokens = [t for t in (fcm_tokens or []) if t]
    if not valid_tokens:
        return empty

    app = get_firebase_app()
    if app is None:
        return empty

    try:
        # FCM data payload only accepts strings
        payload_data = {k: str(v) for k, v in (data or {}).items()}
        payload_data.setdefault("type", "GENERIC")

        message = messaging.MulticastMessage(
            notification=messaging.Notification(
                title=title,
                body=body,
            ),
            data=payload_data,
            tokens=valid_tokens,
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(
                    sound="default",
                    click_action="OPEN_NOTIFICATION",
                ),
            ),
        )

        response = messaging.send_each_for_multicast(message, app=app)

        failed_tokens = []
        invalid_tokens = []
        for idx, send_response in enumerate(response.responses):
            if send_response.success:
                continue
            failed_tokens.append(valid_tokens[idx])
            error_obj = getattr(send_response, "exception", None)
            error_code = getattr(error_obj, "code", None)
            if isinstance(error_obj, messaging.UnregisteredError) or error_code in (
                "registration-token-not-registered",
                "invalid-argument",
            ):
                invalid_tokens.append(valid_tokens[idx])

        logger.info(
            "[FCM] Multicast result: %s success, %s failures",
            response.success_count,
            response.failure_count,
        )

        return {
            "success_count": response.success_count,
            "failure_count": response.failure_count,
            "failed_tokens": failed_tokens,
            "invalid_tokens": invalid_tokens,
        }

    except Exception as e:
        logger.error("[FCM] Error sending multicast: %s", e)
        return {
            "success_count": 0,
            "failure_count": len(valid_tokens),
            "failed_tokens": valid_tokens,
            # keep tokens on generic errors, they may still be valid
            "invalid_tokens": [],
        }
