import unittest
from datetime import datetime, timedelta, timezone

from campsite_api.database import SessionLocal
from campsite_api.models.notification import Notification
from campsite_api.models.profile import ProfileRole
from campsite_api.services.notification_cleanup import run_notification_cleanup_job
from tests.helpers import ApiTestCase


class NotificationApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.make_user()
        self.headers = self.auth(self.user)

    def _add(self, user, read=False, created_at=None, title="Campsite approved"):
        with SessionLocal() as db:
            n = Notification(user_id=user.id, type="campsite_approved", title=title, message="Your campsite is live.", read=read)
            if created_at is not None:
                n.created_at = created_at
            db.add(n)
            db.commit()
            return n.id

    def test_list_and_unread_count(self):
        self._add(self.user)
        self._add(self.user, read=True)
        self._add(self.make_user())
        data = self.client.get("/api/notifications", headers=self.headers).json()["data"]
        self.assertEqual(len(data["notifications"]), 2)
        unread = self.client.get("/api/notifications", params={"unread_only": "true"}, headers=self.headers).json()["data"]
        self.assertEqual(len(unread["notifications"]), 1)
        count = self.client.get("/api/notifications/unread-count", headers=self.headers).json()["data"]
        self.assertEqual(count, {"count": 1})

    def test_mark_read(self):
        nid = self._add(self.user)
        r = self.client.post(f"/api/notifications/{nid}/read", headers=self.headers)
        self.assertTrue(r.json()["data"]["read"])
        other = self._add(self.make_user())
        self.assertEqual(self.client.post(f"/api/notifications/{other}/read", headers=self.headers).status_code, 404)

    def test_mark_all_read(self):
        self._add(self.user)
        self._add(self.user)
        r = self.client.post("/api/notifications/read-all", headers=self.headers)
        self.assertEqual(r.json()["data"], {"updated": 2})
        self.assertEqual(self.client.get("/api/notifications/unread-count", headers=self.headers).json()["data"]["count"], 0)

    def test_test_email_requires_admin_and_mailgun(self):
        self.assertEqual(self.client.post("/api/notifications/test-email", headers=self.headers).status_code, 403)
        admin = self.make_user(ProfileRole.admin)
        r = self.client.post("/api/notifications/test-email", headers=self.auth(admin))
        self.assertEqual(r.status_code, 503)

    def test_cleanup_removes_old_read_notifications(self):
        old = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=40)
        self._add(self.user, read=True, created_at=old, title="old read")
        self._add(self.user, read=False, created_at=old, title="old unread")
        self._add(self.user, read=True, title="recent read")
        run_notification_cleanup_job()
        with SessionLocal() as db:
            titles = sorted(n.title for n in db.query(Notification).all())
        self.assertEqual(titles, ["old unread", "recent read"])


if __name__ == "__main__":
    unittest.main()
