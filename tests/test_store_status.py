from datetime import datetime

import pytest

from app.models.store_config import StoreConfig
from app.services.store_service import check_store_status, is_time_in_range, js_weekday

# 2026-10-19 is a Monday
MONDAY = datetime(2026, 10, 19, 12, 0)
TUESDAY = datetime(2026, 10, 20, 12, 0)


def default_config(**overrides) -> StoreConfig:
    values = {
        "is_open": True,
        "opening_time": "08:00",
        "closing_time": "18:00",
        "open_days": "2,3,4,5,6,0",
    }
    values.update(overrides)
    return StoreConfig(**values)


class TestHelpers:
    def test_js_weekday(self):
        assert js_weekday(MONDAY) == 1
        assert js_weekday(datetime(2026, 10, 18)) == 0

    @pytest.mark.parametrize(
        "current, expected",
        [("18:00", True), ("23:59", True), ("02:00", True), ("02:01", False), ("17:59", False)],
    )
    def test_range_wrapping_past_midnight(self, current, expected):
        assert is_time_in_range(current, "18:00", "02:00") is expected


class TestCheckStoreStatus:
    def test_open_during_hours(self):
        assert check_store_status(default_config(), TUESDAY).is_open

    def test_manual_switch_wins(self):
        status = check_store_status(default_config(is_open=False), TUESDAY)
        assert not status.is_open
        assert status.reason == "The store is temporarily closed."

    def test_closed_day_points_to_next_open_day(self):
        status = check_store_status(default_config(), MONDAY)
        assert not status.is_open
        assert status.reason == "The store does not open today."
        assert status.next_open_time == "Next opening: Tuesday at 08:00"

    def test_before_opening(self):
        status = check_store_status(default_config(), TUESDAY.replace(hour=7, minute=30))
        assert status.next_open_time == "Opens today at 08:00"

    def test_after_closing(self):
        status = check_store_status(default_config(), TUESDAY.replace(hour=19))
        assert status.reason == "Outside opening hours (08:00 to 18:00)."
        assert status.next_open_time == "Opens tomorrow at 08:00"


class TestStoreConfigApi:
    def test_status_endpoint(self, client):
        resp = client.get("/api/store-config/status")
        assert resp.status_code == 200
        assert resp.json()["is_open"] is True

    def test_update_requires_admin(self, client, customer_headers):
        resp = client.put(
            "/api/store-config",
            json={"opening_time": "09:00"},
            headers=customer_headers,
        )
        assert resp.status_code == 403

    def test_admin_update(self, client, admin_headers):
        resp = client.put(
            "/api/store-config",
            json={"opening_time": "09:00", "open_days": "1,2,3"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["opening_time"] == "09:00"
        assert client.get("/api/store-config").json()["open_days"] == "1,2,3"

    def test_invalid_time_rejected(self, client, admin_headers):
        resp = client.put(
            "/api/store-config",
            json={"closing_time": "25:00"},
            headers=admin_headers,
        )
        assert resp.status_code == 422
