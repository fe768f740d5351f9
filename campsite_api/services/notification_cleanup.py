"""Delete read in-app notifications older than 30 days."""
import logging
from datetime import datetime, timezone, timedelta
from sqlalchemy.orm import Session
from campsite_api.database import SessionLocal
from campsite_api.models.notification import Notification

READ_NOTIFICATION_RETENTION_DAYS = 30


def run_notification_cleanup_job() -> None:
    db: Session = SessionLocal()
    try:
        threshold = datetime.now(timezone.utc) - timedelta(days=READ_NOTIFICATION_RETENTION_DAYS)
        deleted = db.query(Notification).filter(
            Notification.read.is_(True),
            Notification.created_at < threshold,
        ).delete(synchronize_session=False)
        db.commit()
        if deleted:
            logging.getLogger("uvicorn.error").info("Notification cleanup: deleted %d old read notification(s).", deleted)
    finally:
        db.close()
