"""Outbound, best-effort side effects of ledger operations.

Everything here runs after the ledger mutation has been committed. A failure
is logged and swallowed: it must never undo or mask the ledger change, and
callers must not rely on these records existing.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import agency.repositories.ledger as ledger_repo
from agency.core.config import settings
from agency.db.models.ledger import Expense as ExpenseModel
from agency.db.models.ledger import Revenue as RevenueModel

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("agency.audit")


def write_audit(
    action: str,
    entity: str,
    entity_id: int | None,
    old_value: Any = None,
    new_value: Any = None,
) -> None:
    """Emit an audit event as one JSON line on the ``agency.audit`` logger."""
    try:
        audit_logger.info(
            json.dumps(
                {
                    "at": datetime.now(timezone.utc).isoformat(),
                    "action": action,
                    "entity": entity,
                    "entity_id": entity_id,
                    "old_value": old_value,
                    "new_value": new_value,
                },
                default=str,
            )
        )
    except (TypeError, ValueError):
        logger.exception(f"Failed to write audit event {action} for {entity} {entity_id}")


def publish_notification(message: str) -> None:
    """Send a notification to the configured webhook, or just log it when none is set."""
    if not settings.notify_webhook_url:
        logger.info(f"Notification: {message}")
        return

    try:
        response = httpx.post(
            settings.notify_webhook_url,
            json={"message": message},
            timeout=settings.notify_timeout_seconds,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(
            f"Notification webhook failed with status {e.response.status_code}: {message}"
        )
    except httpx.RequestError as e:
        logger.error(f"Notification webhook request failed: {e}")


def record_expense(db: Session, **fields) -> ExpenseModel | None:
    """Create an expense in the side ledger. Returns None if it could not be written."""
    try:
        return ledger_repo.create_expense(db, **fields)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to record expense '{fields.get('title')}'")
        return None


def record_revenue(db: Session, **fields) -> RevenueModel | None:
    """Create a revenue in the side ledger. Returns None if it could not be written."""
    try:
        return ledger_repo.create_revenue(db, **fields)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to record revenue '{fields.get('title')}'")
        return None
