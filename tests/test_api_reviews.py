import unittest

from campsite_api.database import SessionLocal
from campsite_api.models.campsite import Campsite, CampsiteStatus
from campsite_api.models.profile import ProfileRole
from campsite_api.models.review import Review
from tests.helpers import ApiTestCase

REVIEW_TEXT = "Lovely spot with clean showers and a great view of the river at sunrise."


class ReviewApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner = self.make_user(ProfileRole.owner)
        self.camper = self.make_user()
        self.campsite = self.make_campsite(self.owner)

    def _create(self, user, **fields):
        body = {"campsite_id": self.campsite.id, "rating_overall": 4, "reviewer_type": "couple", "content": REVIEW_TEXT}
        body.update(fields)
        return self.client.post("/api/reviews", json=body, headers=self.auth(user))

    def _campsite(self):
        with SessionLocal() as db:
            return db.get(Campsite, self.campsite.id)

    def test_create_review_updates_rating(self):
        r = self._create(self.camper, rating_overall=5, photo_urls=["https://img.example.com/1.jpg"])
        self.assertEqual(r.status_code, 201, r.text)
        data = r.json()["data"]
        self.assertEqual(data["reviewer_name"], "Test User")
        self.assertEqual(len(data["photos"]), 1)
        self._create(self.make_user(), rating_overall=4)
        campsite = self._campsite()
        self.assertEqual(campsite.rating_average, 4.5)
        self.assertEqual(campsite.review_count, 2)

    def test_one_review_per_campsite(self):
        self._create(self.camper)
        r = self._create(self.camper)
        self.assertEqual(r.status_code, 409)

    def test_cannot_review_unapproved_campsite(self):
        pending = self.make_campsite(self.owner, "Pending", status=CampsiteStatus.pending)
        r = self._create(self.camper, campsite_id=pending.id)
        self.assertEqual(r.status_code, 404)

    def test_review_validation(self):
        for fields in ({"rating_overall": 6}, {"content": "too short"}, {"reviewer_type": "alien"}, {"photo_urls": ["x"] * 6}):
            with self.subTest(fields=fields):
                self.assertEqual(self._create(self.camper, **fields).status_code, 400)

    def test_requires_login(self):
        r = self.client.post("/api/reviews", json={"campsite_id": self.campsite.id})
        self.assertEqual(r.status_code, 401)

    def test_helpful_toggle(self):
        review = self.make_review(self.campsite, self.camper)
        voter = self.make_user()
        first = self.client.post(f"/api/reviews/{review.id}/helpful", headers=self.auth(voter)).json()["data"]
        self.assertEqual(first, {"voted": True, "helpfulCount": 1})
        listing = self.client.get(f"/api/campsites/{self.campsite.id}/reviews", headers=self.auth(voter)).json()["data"]
        self.assertTrue(listing["reviews"][0]["user_has_voted"])
        second = self.client.post(f"/api/reviews/{review.id}/helpful", headers=self.auth(voter)).json()["data"]
        self.assertEqual(second, {"voted": False, "helpfulCount": 0})

    def test_helpful_on_hidden_review(self):
        review = self.make_review(self.campsite, self.camper, is_hidden=True)
        r = self.client.post(f"/api/reviews/{review.id}/helpful", headers=self.auth(self.make_user()))
        self.assertEqual(r.status_code, 404)

    def test_report_review(self):
        review = self.make_review(self.campsite, self.camper)
        reporter = self.make_user()
        r = self.client.post(f"/api/reviews/{review.id}/report", json={"reason": "spam"}, headers=self.auth(reporter))
        self.assertEqual(r.status_code, 200)
        with SessionLocal() as db:
            stored = db.get(Review, review.id)
            self.assertTrue(stored.is_reported)
            self.assertEqual(stored.report_count, 1)
        again = self.client.post(f"/api/reviews/{review.id}/report", json={"reason": "fake"}, headers=self.auth(reporter))
        self.assertEqual(again.status_code, 400)

    def test_report_rules(self):
        review = self.make_review(self.campsite, self.camper)
        own = self.client.post(f"/api/reviews/{review.id}/report", json={"reason": "spam"}, headers=self.auth(self.camper))
        self.assertEqual(own.status_code, 400)
        bad = self.client.post(
            f"/api/reviews/{review.id}/report", json={"reason": "boring"}, headers=self.auth(self.make_user())
        )
        self.assertEqual(bad.status_code, 400)
        missing = self.client.post("/api/reviews/999999/report", json={"reason": "spam"}, headers=self.auth(self.camper))
        self.assertEqual(missing.status_code, 404)

    def test_owner_response(self):
        review = self.make_review(self.campsite, self.camper)
        body = {"response": "Thank you for staying with us!"}
        r = self.client.post(f"/api/reviews/{review.id}/response", json=body, headers=self.auth(self.owner))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["data"]["owner_response"], body["response"])
        other_owner = self.make_user(ProfileRole.owner)
        denied = self.client.post(f"/api/reviews/{review.id}/response", json=body, headers=self.auth(other_owner))
        self.assertEqual(denied.status_code, 403)
        admin = self.make_user(ProfileRole.admin)
        allowed = self.client.post(f"/api/reviews/{review.id}/response", json=body, headers=self.auth(admin))
        self.assertEqual(allowed.status_code, 200)

    def test_padded_text_is_rejected_and_stored_trimmed(self):
        r = self._create(self.camper, content="Nice" + " " * 40)
        self.assertEqual(r.status_code, 400)
        r = self._create(self.camper, content=f"  {REVIEW_TEXT}\n")
        self.assertEqual(r.status_code, 201, r.text)
        self.assertEqual(r.json()["data"]["content"], REVIEW_TEXT)

        review_id = r.json()["data"]["id"]
        url = f"/api/reviews/{review_id}/response"
        short = self.client.post(url, json={"response": "Thanks" + " " * 20}, headers=self.auth(self.owner))
        self.assertEqual(short.status_code, 400)
        ok = self.client.post(url, json={"response": "  Thank you for staying!  "}, headers=self.auth(self.owner))
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json()["data"]["owner_response"], "Thank you for staying!")


if __name__ == "__main__":
    unittest.main()
