import unittest

from campsite_api.database import SessionLocal
from campsite_api.models.campsite import Campsite, CampsiteStatus
from campsite_api.models.moderation_log import ModerationLog
from campsite_api.models.notification import Notification
from campsite_api.models.owner_request import OwnerRequest, OwnerRequestStatus
from campsite_api.models.profile import Profile, ProfileRole
from campsite_api.models.review import Review, ReviewReport, ReportReason
from tests.helpers import ApiTestCase


class AdminTestCase(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.make_user(ProfileRole.admin)
        self.headers = self.auth(self.admin)
        self.owner = self.make_user(ProfileRole.owner, full_name="Owner Person")

    def _notifications(self, user_id):
        with SessionLocal() as db:
            return [n.type for n in db.query(Notification).filter(Notification.user_id == user_id).all()]

    def _logs(self):
        with SessionLocal() as db:
            return [(e.action_type, e.entity_type, e.entity_id) for e in db.query(ModerationLog).order_by(ModerationLog.id).all()]


class AdminAccessTests(AdminTestCase):
    def test_requires_admin(self):
        r = self.client.get("/api/admin/stats", headers=self.auth(self.owner))
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["error"], "Admin role required")
        self.assertEqual(self.client.get("/api/admin/stats").status_code, 401)

    def test_stats(self):
        self.make_campsite(self.owner, "Live")
        self.make_campsite(self.owner, "Waiting", status=CampsiteStatus.pending)
        stats = self.client.get("/api/admin/stats", headers=self.headers).json()["data"]
        self.assertEqual(stats["pending_campsites"], 1)
        self.assertEqual(stats["total_campsites"], 1)
        self.assertEqual(stats["total_users"], 2)
        self.assertEqual(stats["reported_reviews"], 0)


class CampsiteModerationTests(AdminTestCase):
    def setUp(self):
        super().setUp()
        self.pending = self.make_campsite(self.owner, "Waiting Camp", status=CampsiteStatus.pending)

    def test_pending_list(self):
        data = self.client.get("/api/admin/campsites/pending", headers=self.headers).json()["data"]
        self.assertEqual([c["id"] for c in data["campsites"]], [self.pending.id])
        self.assertEqual(data["campsites"][0]["owner_name"], "Owner Person")
        self.assertEqual(data["pagination"]["total"], 1)

    def test_approve(self):
        r = self.client.post(f"/api/admin/campsites/{self.pending.id}/approve", headers=self.headers)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["data"]["status"], "approved")
        with SessionLocal() as db:
            self.assertIsNotNone(db.get(Campsite, self.pending.id).approved_at)
        self.assertEqual(self._notifications(self.owner.id), ["campsite_approved"])
        self.assertEqual(self._logs(), [("campsite_approve", "campsite", self.pending.id)])
        self.assertEqual(self.client.get(f"/api/campsites/{self.pending.id}").status_code, 200)
        again = self.client.post(f"/api/admin/campsites/{self.pending.id}/approve", headers=self.headers)
        self.assertEqual(again.status_code, 404)

    def test_reject(self):
        body = {"rejection_reason": "Photos do not show the campsite."}
        r = self.client.post(f"/api/admin/campsites/{self.pending.id}/reject", json=body, headers=self.headers)
        self.assertEqual(r.status_code, 200)
        with SessionLocal() as db:
            c = db.get(Campsite, self.pending.id)
            self.assertEqual(c.status, CampsiteStatus.rejected)
            self.assertEqual(c.rejection_reason, body["rejection_reason"])
        self.assertEqual(self._notifications(self.owner.id), ["campsite_rejected"])

    def test_reject_requires_reason(self):
        r = self.client.post(
            f"/api/admin/campsites/{self.pending.id}/reject", json={"rejection_reason": "no"}, headers=self.headers
        )
        self.assertEqual(r.status_code, 400)

    def test_padded_reason_is_rejected(self):
        url = f"/api/admin/campsites/{self.pending.id}/reject"
        r = self.client.post(url, json={"rejection_reason": "no" + " " * 20}, headers=self.headers)
        self.assertEqual(r.status_code, 400)
        r = self.client.post(url, json={"rejection_reason": "  Photos are missing.  "}, headers=self.headers)
        self.assertEqual(r.status_code, 200)
        with SessionLocal() as db:
            self.assertEqual(db.get(Campsite, self.pending.id).rejection_reason, "Photos are missing.")


class OwnerRequestModerationTests(AdminTestCase):
    def setUp(self):
        super().setUp()
        self.applicant = self.make_user()
        with SessionLocal() as db:
            req = OwnerRequest(user_id=self.applicant.id, business_name="Lakeside Glamping")
            db.add(req)
            db.commit()
            self.request_id = req.id

    def test_list_pending(self):
        data = self.client.get("/api/admin/owner-requests", headers=self.headers).json()["data"]
        self.assertEqual(len(data["requests"]), 1)
        self.assertEqual(data["requests"][0]["user_email"], self.applicant.email)
        approved = self.client.get("/api/admin/owner-requests", params={"status": "approved"}, headers=self.headers)
        self.assertEqual(approved.json()["data"]["requests"], [])

    def test_approve_promotes_user(self):
        r = self.client.post(f"/api/admin/owner-requests/{self.request_id}/approve", headers=self.headers)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["data"]["status"], "approved")
        with SessionLocal() as db:
            user = db.get(Profile, self.applicant.id)
            self.assertEqual(user.role, ProfileRole.owner)
            self.assertEqual(user.business_name, "Lakeside Glamping")
        self.assertEqual(self._notifications(self.applicant.id), ["owner_approved"])
        self.assertEqual(
            self.client.post(f"/api/admin/owner-requests/{self.request_id}/approve", headers=self.headers).status_code, 404
        )

    def test_reject(self):
        r = self.client.post(
            f"/api/admin/owner-requests/{self.request_id}/reject",
            json={"rejection_reason": "Business could not be verified."},
            headers=self.headers,
        )
        self.assertEqual(r.status_code, 200)
        with SessionLocal() as db:
            self.assertEqual(db.get(OwnerRequest, self.request_id).status, OwnerRequestStatus.rejected)
            self.assertEqual(db.get(Profile, self.applicant.id).role, ProfileRole.user)

    def test_padded_rejection_reason_is_rejected(self):
        r = self.client.post(
            f"/api/admin/owner-requests/{self.request_id}/reject",
            json={"rejection_reason": "\t\tno\n" + " " * 12},
            headers=self.headers,
        )
        self.assertEqual(r.status_code, 400)
        with SessionLocal() as db:
            self.assertEqual(db.get(OwnerRequest, self.request_id).status, OwnerRequestStatus.pending)


class ReviewModerationTests(AdminTestCase):
    def setUp(self):
        super().setUp()
        self.campsite = self.make_campsite(self.owner, "Reviewed Camp")
        self.author = self.make_user()
        self.review = self.make_review(self.campsite, self.author, rating=2, is_reported=True, report_count=2)
        self.make_review(self.campsite, self.make_user(), rating=4)
        reporters = [self.make_user(), self.make_user()]
        with SessionLocal() as db:
            for reporter in reporters:
                db.add(ReviewReport(review_id=self.review.id, user_id=reporter.id, reason=ReportReason.spam))
            c = db.get(Campsite, self.campsite.id)
            c.rating_average, c.review_count = 3.0, 2
            db.commit()

    def test_reported_list(self):
        data = self.client.get("/api/admin/reviews/reported", headers=self.headers).json()["data"]
        self.assertEqual(len(data["reviews"]), 1)
        item = data["reviews"][0]
        self.assertEqual(item["campsite_name"], "Reviewed Camp")
        self.assertEqual(item["report_count"], 2)
        self.assertEqual([r["reason"] for r in item["reports"]], ["spam", "spam"])
        filtered = self.client.get("/api/admin/reviews/reported", params={"min_reports": 3}, headers=self.headers)
        self.assertEqual(filtered.json()["data"]["reviews"], [])

    def test_hide_and_unhide(self):
        r = self.client.post(
            f"/api/admin/reviews/{self.review.id}/hide", json={"reason": "Spam content"}, headers=self.headers
        )
        self.assertEqual(r.status_code, 200)
        with SessionLocal() as db:
            c = db.get(Campsite, self.campsite.id)
            self.assertEqual((c.rating_average, c.review_count), (4.0, 1))
        self.assertEqual(self._notifications(self.author.id), ["review_hidden"])
        again = self.client.post(f"/api/admin/reviews/{self.review.id}/hide", json={"reason": "Spam again"}, headers=self.headers)
        self.assertEqual(again.status_code, 400)

        self.assertEqual(self.client.post(f"/api/admin/reviews/{self.review.id}/unhide", headers=self.headers).status_code, 200)
        with SessionLocal() as db:
            self.assertEqual(db.get(Campsite, self.campsite.id).review_count, 2)
        self.assertEqual(self.client.post(f"/api/admin/reviews/{self.review.id}/unhide", headers=self.headers).status_code, 400)

    def test_padded_hide_reason_is_rejected(self):
        r = self.client.post(
            f"/api/admin/reviews/{self.review.id}/hide", json={"reason": "bad" + " " * 10}, headers=self.headers
        )
        self.assertEqual(r.status_code, 400)
        with SessionLocal() as db:
            self.assertFalse(db.get(Review, self.review.id).is_hidden)

    def test_dismiss_reports(self):
        r = self.client.post(f"/api/admin/reviews/{self.review.id}/dismiss", headers=self.headers)
        self.assertEqual(r.status_code, 200)
        with SessionLocal() as db:
            review = db.get(Review, self.review.id)
            self.assertFalse(review.is_reported)
            self.assertEqual(review.report_count, 0)
            self.assertEqual(db.query(ReviewReport).count(), 0)

    def test_delete_review_and_logs(self):
        r = self.client.delete(f"/api/admin/reviews/{self.review.id}", headers=self.headers)
        self.assertEqual(r.status_code, 200)
        with SessionLocal() as db:
            self.assertIsNone(db.get(Review, self.review.id))
            self.assertEqual(db.get(Campsite, self.campsite.id).review_count, 1)
        logs = self.client.get(
            "/api/admin/moderation-logs", params={"entity_type": "review"}, headers=self.headers
        ).json()["data"]
        self.assertEqual(len(logs), 1)
        self.assertEqual(logs[0]["action_type"], "review_delete")
        self.assertEqual(logs[0]["meta"]["rating_overall"], 2)


if __name__ == "__main__":
    unittest.main()
