#  Place Search - Locust Load Test
#
#  HTTP load test using Locust. Simulates map users searching around a few
#  city centers (mostly cache hits) and a health-check poller.
#
#  Usage:
#    locust -f tests/load/locustfile.py --host http://localhost:8787
#
#  Depends on: placesearch/routes (search, health)
#  Used by:    manual load testing

import random
import string

from locust import HttpUser, between, task

CENTERS = [
    {"lat": 35.681236, "lng": 139.767125},   # Tokyo Station
    {"lat": 40.758, "lng": -73.9855},        # Times Square
    {"lat": 51.5072, "lng": -0.1276},        # Trafalgar Square
]
CUISINES = ["ramen", "sushi", "pizza", "tacos", "curry", "vegan"]


def _client_id():
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=8))
    return f"loadtest-{suffix}"


class SearchUser(HttpUser):
    """Searches nearby places under its own client id, so each user has its own bucket."""

    weight = 5
    wait_time = between(1, 3)

    def on_start(self):
        self._headers = {"X-Client-Id": _client_id()}

    def _body(self, jitter: float = 0.0):
        center = random.choice(CENTERS)
        return {
            "location": {"lat": center["lat"] + jitter, "lng": center["lng"] + jitter},
            "radius_m": random.choice([500, 1000, 2000]),
            "cuisine": random.sample(CUISINES, k=random.randint(0, 2)),
            "limit": 5,
        }

    @task(5)
    def popular_search(self):
        with self.client.post(
            "/api/search", json=self._body(), headers=self._headers,
            name="/api/search [popular]", catch_response=True,
        ) as resp:
            # Throttling is expected behavior under load
            if resp.status_code == 429:
                resp.success()

    @task(2)
    def scattered_search(self):
        with self.client.post(
            "/api/search", json=self._body(jitter=random.uniform(-0.05, 0.05)),
            headers=self._headers, name="/api/search [scattered]", catch_response=True,
        ) as resp:
            if resp.status_code == 429:
                resp.success()


class HealthPoller(HttpUser):
    weight = 1
    wait_time = between(2, 5)

    @task
    def health(self):
        self.client.get("/api/health")
