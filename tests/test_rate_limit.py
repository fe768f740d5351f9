import time
import unittest

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from campsite_api.services.rate_limit import WindowRateLimiter, rate_limit_key, too_many_requests


class WindowRateLimiterTests(unittest.TestCase):
    def setUp(self):
        self.limiter = WindowRateLimiter("test", "3/minute")

    def test_allows_up_to_limit_then_blocks(self):
        remaining = [self.limiter.hit("ip:1").remaining for _ in range(3)]
        self.assertEqual(remaining, [2, 1, 0])
        blocked = self.limiter.hit("ip:1")
        self.assertFalse(blocked.allowed)
        self.assertGreater(blocked.retry_after, 0)
        self.assertLessEqual(blocked.retry_after, 60)
        self.assertEqual(blocked.headers()["Retry-After"], str(blocked.retry_after))
        self.assertEqual(blocked.headers()["X-RateLimit-Remaining"], "0")

    def test_keys_are_independent(self):
        for _ in range(3):
            self.limiter.hit("user:1")
        self.assertFalse(self.limiter.hit("user:1").allowed)
        self.assertTrue(self.limiter.hit("user:2").allowed)

    def test_namespaces_are_independent(self):
        other = WindowRateLimiter("other", "3/minute", storage=self.limiter.storage)
        for _ in range(3):
            self.limiter.hit("ip:1")
        self.assertEqual(other.hit("ip:1").remaining, 2)

    def test_peek_does_not_consume(self):
        fresh = self.limiter.peek("ip:1")
        self.assertTrue(fresh.allowed)
        self.assertEqual(fresh.remaining, 3)
        self.limiter.hit("ip:1")
        self.assertEqual(self.limiter.peek("ip:1").remaining, 2)
        self.assertEqual(self.limiter.peek("ip:1").remaining, 2)

    def test_allowed_headers(self):
        before = time.time()
        result = self.limiter.hit("ip:1")
        headers = result.headers()
        self.assertEqual(headers["X-RateLimit-Limit"], "3")
        self.assertEqual(headers["X-RateLimit-Remaining"], "2")
        self.assertNotIn("Retry-After", headers)
        self.assertGreaterEqual(result.reset_at, before)
        self.assertLessEqual(result.reset_at, time.time() + 61)

    def test_reset_one_key_or_all(self):
        for _ in range(3):
            self.limiter.hit("a")
            self.limiter.hit("b")
        self.limiter.reset("a")
        self.assertEqual(self.limiter.peek("a").remaining, 3)
        self.assertEqual(self.limiter.peek("b").remaining, 0)
        self.limiter.reset()
        self.assertEqual(self.limiter.peek("b").remaining, 3)

    def test_max_requests_from_limit_string(self):
        self.assertEqual(WindowRateLimiter("x", "5/24 hours").max_requests, 5)


class RateLimitResponseTests(unittest.TestCase):
    def setUp(self):
        limiter = WindowRateLimiter("route", "1/minute")
        app = FastAPI()

        @app.get("/limited")
        def limited(request: Request):
            result = limiter.hit(rate_limit_key(request))
            if not result.allowed:
                return too_many_requests(result, "Slow down")
            return {"ok": True}

        self.client = TestClient(app)

    def test_second_request_is_rejected_with_retry_after(self):
        self.assertEqual(self.client.get("/limited").status_code, 200)
        r = self.client.get("/limited")
        self.assertEqual(r.status_code, 429)
        body = r.json()
        self.assertEqual(body["success"], False)
        self.assertEqual(body["error"], "Slow down")
        self.assertEqual(str(body["retryAfter"]), r.headers["Retry-After"])
        self.assertEqual(r.headers["X-RateLimit-Limit"], "1")


if __name__ == "__main__":
    unittest.main()
