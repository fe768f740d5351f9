import unittest

from campsite_api.database import SessionLocal
from campsite_api.models.analytics_event import AnalyticsEvent, AnalyticsEventType
from campsite_api.models.campsite import AccommodationType, CampsitePhoto, CampsiteStatus, NearbyAttraction
from campsite_api.models.profile import ProfileRole
from campsite_api.models.review import ReviewerType
from tests.helpers import ApiTestCase


class CampsiteApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner = self.make_user(ProfileRole.owner, full_name="Camp Owner")
        self.campsite = self.make_campsite(self.owner, "Khao Sok Jungle Camp", amenity_slugs=("wifi",))
        with SessionLocal() as db:
            db.add_all(
                [
                    CampsitePhoto(campsite_id=self.campsite.id, url="/media/a.jpg", sort_order=0),
                    CampsitePhoto(campsite_id=self.campsite.id, url="/media/b.jpg", sort_order=1, is_primary=True),
                    AccommodationType(campsite_id=self.campsite.id, name="Tent", price_per_night=500),
                    AccommodationType(campsite_id=self.campsite.id, name="Old Hut", price_per_night=300, is_active=False),
                    NearbyAttraction(campsite_id=self.campsite.id, name="Cheow Lan Lake", category="viewpoint", distance_km=12),
                ]
            )
            db.commit()

    def _events(self, event_type):
        with SessionLocal() as db:
            return (
                db.query(AnalyticsEvent)
                .filter(AnalyticsEvent.campsite_id == self.campsite.id, AnalyticsEvent.event_type == event_type)
                .count()
            )

    def test_detail_by_id_and_slug(self):
        by_id = self.client.get(f"/api/campsites/{self.campsite.id}")
        self.assertEqual(by_id.status_code, 200)
        data = by_id.json()["data"]
        self.assertEqual(data["slug"], self.campsite.slug)
        self.assertEqual(data["owner"]["full_name"], "Camp Owner")
        self.assertEqual([a["name"] for a in data["accommodation_types"]], ["Tent"])
        self.assertEqual(data["nearby_attractions"][0]["name"], "Cheow Lan Lake")
        self.assertEqual(data["amenities"][0]["slug"], "wifi")
        self.assertEqual(data["review_summary"]["total_count"], 0)

        by_slug = self.client.get(f"/api/campsites/{self.campsite.slug}")
        self.assertEqual(by_slug.json()["data"]["id"], self.campsite.id)
        self.assertEqual(self._events(AnalyticsEventType.profile_view), 2)

    def test_detail_not_found(self):
        for ident in ("999999", "no-such-camp", "bad%20id!"):
            with self.subTest(ident=ident):
                self.assertEqual(self.client.get(f"/api/campsites/{ident}").status_code, 404)

    def test_pending_campsite_hidden(self):
        pending = self.make_campsite(self.owner, "Pending Place", status=CampsiteStatus.pending)
        self.assertEqual(self.client.get(f"/api/campsites/{pending.id}").status_code, 404)

    def test_compare(self):
        other = self.make_campsite(self.owner, "Erawan Falls Camp")
        r = self.client.get("/api/campsites/compare", params={"ids": f"{other.id},{self.campsite.id}"})
        self.assertEqual(r.status_code, 200)
        entries = r.json()["data"]["campsites"]
        self.assertEqual([c["id"] for c in entries], [other.id, self.campsite.id])
        self.assertIn("review_summary", entries[0])

    def test_compare_validation(self):
        for ids in ("1", "1,2,3,4", "1,abc", f"{self.campsite.id},{self.campsite.id}", f"{self.campsite.id},999999"):
            with self.subTest(ids=ids):
                self.assertEqual(self.client.get("/api/campsites/compare", params={"ids": ids}).status_code, 400)

    def test_photos_accommodations_attractions(self):
        photos = self.client.get(f"/api/campsites/{self.campsite.id}/photos").json()["data"]
        self.assertEqual([p["url"] for p in photos], ["/media/a.jpg", "/media/b.jpg"])
        accommodations = self.client.get(f"/api/campsites/{self.campsite.id}/accommodations").json()["data"]
        self.assertEqual(len(accommodations), 1)
        attractions = self.client.get(f"/api/campsites/{self.campsite.id}/attractions").json()["data"]
        self.assertEqual(attractions[0]["distance_km"], 12)

    def test_reviews_listing_and_summary(self):
        a, b, c = self.make_user(), self.make_user(), self.make_user()
        self.make_review(self.campsite, a, rating=5, reviewer_type=ReviewerType.family)
        self.make_review(self.campsite, b, rating=4)
        self.make_review(self.campsite, c, rating=4, is_hidden=True)

        listing = self.client.get(f"/api/campsites/{self.campsite.id}/reviews", params={"sort": "highest"}).json()["data"]
        self.assertEqual([r["rating_overall"] for r in listing["reviews"]], [5, 4])
        self.assertEqual(listing["pagination"]["total"], 2)
        self.assertFalse(listing["reviews"][0]["user_has_voted"])

        family = self.client.get(
            f"/api/campsites/{self.campsite.id}/reviews", params={"reviewer_type": "family"}
        ).json()["data"]
        self.assertEqual(len(family["reviews"]), 1)

        summary = self.client.get(f"/api/campsites/{self.campsite.id}/reviews/summary").json()["data"]
        self.assertEqual(summary["average_rating"], 4.5)
        self.assertEqual(summary["rating_distribution"]["5"], 1)

    def test_track_event(self):
        r = self.client.post(f"/api/campsites/{self.campsite.id}/track", json={"event_type": "phone_click"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self._events(AnalyticsEventType.phone_click), 1)
        bad = self.client.post(f"/api/campsites/{self.campsite.id}/track", json={"event_type": "profile_view"})
        self.assertEqual(bad.status_code, 400)
        missing = self.client.post("/api/campsites/999999/track", json={"event_type": "phone_click"})
        self.assertEqual(missing.status_code, 404)


if __name__ == "__main__":
    unittest.main()
