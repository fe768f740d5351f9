import unittest

from tests.helpers import ApiTestCase


class ProvinceApiTests(ApiTestCase):
    def test_list_all_provinces(self):
        r = self.client.get("/api/provinces")
        self.assertEqual(r.status_code, 200)
        data = r.json()["data"]
        self.assertEqual(len(data), 77)
        names = [p["name_en"] for p in data]
        self.assertEqual(names, sorted(names))

    def test_filter_by_region(self):
        data = self.client.get("/api/provinces", params={"region": "north"}).json()["data"]
        self.assertTrue(data)
        self.assertTrue(all(p["region"] == "north" for p in data))
        self.assertIn("chiang-mai", [p["slug"] for p in data])

    def test_invalid_region(self):
        self.assertEqual(self.client.get("/api/provinces", params={"region": "moon"}).status_code, 400)

    def test_autocomplete_prefix_first(self):
        data = self.client.get("/api/provinces/autocomplete", params={"q": "chiang"}).json()["data"]
        self.assertEqual([p["slug"] for p in data], ["chiang-mai", "chiang-rai"])

    def test_autocomplete_thai(self):
        data = self.client.get("/api/provinces/autocomplete", params={"q": "เชียงใหม่"}).json()["data"]
        self.assertEqual([p["slug"] for p in data], ["chiang-mai"])

    def test_autocomplete_requires_query(self):
        r = self.client.get("/api/provinces/autocomplete", params={"q": "  "})
        self.assertEqual(r.status_code, 400)

    def test_autocomplete_limit(self):
        data = self.client.get("/api/provinces/autocomplete", params={"q": "a", "limit": 3}).json()["data"]
        self.assertEqual(len(data), 3)

    def test_get_by_slug(self):
        r = self.client.get("/api/provinces/Krabi")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["data"]["name_en"], "Krabi")
        self.assertEqual(self.client.get("/api/provinces/atlantis").status_code, 404)


if __name__ == "__main__":
    unittest.main()
