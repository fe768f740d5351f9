import unittest

from campsite_api.database import SessionLocal
from campsite_api.models.analytics_event import AnalyticsEvent, AnalyticsEventType
from campsite_api.models.campsite import CampsiteStatus
from campsite_api.models.profile import ProfileRole
from tests.helpers import ApiTestCase


class WishlistApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        owner = self.make_user(ProfileRole.owner)
        self.user = self.make_user()
        self.headers = self.auth(self.user)
        self.alpha = self.make_campsite(owner, "Alpha Camp")
        self.bravo = self.make_campsite(owner, "Bravo Camp")
        self.pending = self.make_campsite(owner, "Charlie Camp", status=CampsiteStatus.pending)

    def _add(self, campsite_id, **extra):
        return self.client.post("/api/wishlist", json={"campsite_id": campsite_id, **extra}, headers=self.headers)

    def test_add_and_list(self):
        r = self._add(self.bravo.id, notes="Go in December")
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["data"]["campsite"]["name"], "Bravo Camp")
        self._add(self.alpha.id)
        data = self.client.get("/api/wishlist", params={"sort": "name"}, headers=self.headers).json()["data"]
        self.assertEqual([i["campsite"]["name"] for i in data["items"]], ["Alpha Camp", "Bravo Camp"])
        self.assertEqual(data["pagination"]["total"], 2)
        with SessionLocal() as db:
            adds = db.query(AnalyticsEvent).filter(AnalyticsEvent.event_type == AnalyticsEventType.wishlist_add).count()
        self.assertEqual(adds, 2)

    def test_duplicate_and_unknown(self):
        self._add(self.alpha.id)
        self.assertEqual(self._add(self.alpha.id).status_code, 409)
        self.assertEqual(self._add(self.pending.id).status_code, 404)
        self.assertEqual(self._add(999999).status_code, 404)

    def test_count_and_check(self):
        item_id = self._add(self.alpha.id).json()["data"]["id"]
        self.assertEqual(self.client.get("/api/wishlist/count", headers=self.headers).json()["data"], {"count": 1})
        check = self.client.get(f"/api/wishlist/check/{self.alpha.id}", headers=self.headers).json()["data"]
        self.assertEqual(check, {"is_wishlisted": True, "wishlist_id": item_id})
        check = self.client.get(f"/api/wishlist/check/{self.bravo.id}", headers=self.headers).json()["data"]
        self.assertEqual(check, {"is_wishlisted": False, "wishlist_id": None})

    def test_check_batch(self):
        self._add(self.bravo.id)
        r = self.client.post(
            "/api/wishlist/check-batch", json={"campsite_ids": [self.alpha.id, self.bravo.id]}, headers=self.headers
        )
        self.assertEqual(r.json()["data"], {str(self.alpha.id): False, str(self.bravo.id): True})
        empty = self.client.post("/api/wishlist/check-batch", json={"campsite_ids": []}, headers=self.headers)
        self.assertEqual(empty.status_code, 400)

    def test_remove_is_idempotent(self):
        self._add(self.alpha.id)
        for _ in range(2):
            r = self.client.delete(f"/api/wishlist/{self.alpha.id}", headers=self.headers)
            self.assertEqual(r.status_code, 200)
        self.assertEqual(self.client.get("/api/wishlist/count", headers=self.headers).json()["data"]["count"], 0)

    def test_lists_are_per_user(self):
        self._add(self.alpha.id)
        other = self.auth(self.make_user())
        self.assertEqual(self.client.get("/api/wishlist/count", headers=other).json()["data"]["count"], 0)

    def test_requires_login(self):
        self.assertEqual(self.client.get("/api/wishlist").status_code, 401)


if __name__ == "__main__":
    unittest.main()
