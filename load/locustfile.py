"""
Locust load script for the window-cleaning quote API.

Simulates two kinds of traffic:
- Visitors running the quote wizard: read pricing, read availability for the
  next 30 days, then occasionally submit a booking on a free day
- Admins watching the dashboard: login via /auth/login (OAuth2 form), list
  bookings and stats, and now and then nudge a price

Configure with env vars or Locust UI:
- HOST: pass via `--host http://localhost:8000`
- WQ_ADMIN: `email:password` for the admin profile (default admin@example.com:change-me)
- WQ_BOOKING_RATIO: share of visitors that go on to book (default 0.2)

Run:
  locust -f load/locustfile.py --host http://localhost:8000
"""

from __future__ import annotations

import logging
import os
import random
import time
import uuid
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from locust import HttpUser, between, events, task


# --- Config -------------------------------------------------------------------

def _load_admin() -> Tuple[str, str]:
    raw = os.getenv("WQ_ADMIN", "").strip()
    if ":" in raw:
        email, pwd = raw.split(":", 1)
        if email.strip() and pwd.strip():
            return email.strip(), pwd.strip()
    return "admin@example.com", "change-me"


ADMIN_CREDENTIALS = _load_admin()
BOOKING_RATIO = float(os.getenv("WQ_BOOKING_RATIO", "0.2") or 0.2)
WINDOW_DAYS = 30


# --- Helpers ------------------------------------------------------------------

def _auth_header(token: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


def _safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return {}


def _free_days(booked: List[str]) -> List[date]:
    taken = set(booked)
    start = date.today()
    days = (start + timedelta(days=i) for i in range(1, WINDOW_DAYS + 1))
    return [d for d in days if d.isoformat() not in taken]


# --- Visitor ------------------------------------------------------------------

class QuoteVisitor(HttpUser):
    weight = 10
    wait_time = between(2, 6)

    @task(5)
    def view_pricing(self):
        self.client.get("/api/settings", name="/api/settings")

    @task(3)
    def run_quote(self):
        self.client.get("/api/settings", name="/api/settings")
        today = date.today()
        r = self.client.get(
            "/api/availability",
            params={"start": today.isoformat(), "end": (today + timedelta(days=WINDOW_DAYS)).isoformat()},
            name="/api/availability",
        )
        if r.status_code != 200 or random.random() > BOOKING_RATIO:
            return
        free = _free_days(_safe_json(r) or [])
        if not free:
            return
        tag = uuid.uuid4().hex[:8]
        self.client.post(
            "/api/bookings",
            json={
                "customerName": f"Load Test {tag}",
                "customerEmail": f"load-{tag}@example.com",
                "customerPhone": "8015550100",
                "windowCount": random.randint(5, 40),
                "isCommercial": random.random() < 0.1,
                "exterior": True,
                "interior": random.random() < 0.5,
                "screens": random.random() < 0.3,
                "sills": random.random() < 0.3,
                "gutters": random.random() < 0.1,
                "solar": False,
                "solarPanelCount": 0,
                "scheduledDate": random.choice(free).isoformat(),
            },
            name="/api/bookings [create]",
        )


# --- Admin --------------------------------------------------------------------

class DashboardAdmin(HttpUser):
    wait_time = between(5, 15)
    weight = 1

    token: Optional[str] = None
    auth_failures: int = 0
    login_cooldown_until: float = 0.0

    def on_start(self):
        self._login()

    def _login(self) -> None:
        email, password = ADMIN_CREDENTIALS
        r = self.client.post("/auth/login", data={"username": email, "password": password}, name="/auth/login")
        if r.status_code != 200:
            self.token = None
            self.auth_failures += 1
            # Backoff on repeated failures
            self.login_cooldown_until = time.time() + min(120.0, 2 ** min(self.auth_failures, 5))
            return
        self.token = _safe_json(r).get("access_token")
        self.auth_failures = 0

    def _ensure_auth(self) -> bool:
        if self.token:
            return True
        if time.time() < self.login_cooldown_until:
            return False
        self._login()
        return bool(self.token)

    @task(4)
    def dashboard(self):
        if not self._ensure_auth():
            return
        for path in ("/api/bookings", "/api/bookings/stats"):
            r = self.client.get(path, headers=_auth_header(self.token), name=path)
            if r.status_code == 401:
                self.token = None
                return

    @task(1)
    def tweak_pricing(self):
        if not self._ensure_auth():
            return
        r = self.client.post(
            "/api/settings",
            json={"sillsAddon": random.randint(2, 5)},
            headers=_auth_header(self.token),
            name="/api/settings [update]",
        )
        if r.status_code == 401:
            self.token = None


# --- Optional event hooks -----------------------------------------------------

@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    logging.getLogger("locust").info("Starting test; admin user %s", ADMIN_CREDENTIALS[0])


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    logging.getLogger("locust").info("Test finished")
