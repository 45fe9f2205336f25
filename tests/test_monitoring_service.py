"""In-memory request metrics and error buffer."""

from datetime import datetime, timedelta

from campus_crush.services.monitoring_service import MonitoringService


def test_empty_stats():
    stats = MonitoringService().performance_stats()

    assert stats == {
        "total_requests": 0,
        "average_response_time": 0,
        "error_rate": 0.0,
        "slow_requests": 0,
        "time_window": "1 hour"
    }


def test_performance_stats():
    service = MonitoringService(slow_request_ms=1000)
    service.record_request("/api/colleges", "GET", 100, 200)
    service.record_request("/api/colleges", "GET", 300, 200)
    service.record_request("/api/ratings", "POST", 1500, 409)

    stats = service.performance_stats()

    assert stats["total_requests"] == 3
    assert stats["average_response_time"] == 633
    assert stats["error_rate"] == 33.33
    assert stats["slow_requests"] == 1


def test_slow_request_is_logged(caplog):
    service = MonitoringService(slow_request_ms=50)

    service.record_request("/api/leaderboard", "GET", 75, 200)

    assert "Slow request: GET /api/leaderboard" in caplog.text


def test_metrics_older_than_an_hour_are_ignored():
    service = MonitoringService()
    service.record_request("/api/colleges", "GET", 100, 200)
    service.metrics[0].timestamp = datetime.utcnow() - timedelta(hours=2)
    service.record_request("/api/colleges", "GET", 200, 200)

    assert service.performance_stats()["total_requests"] == 1


def test_buffers_are_bounded():
    service = MonitoringService(max_metrics=3, max_errors=2)
    for i in range(5):
        service.record_request(f"/e{i}", "GET", 10, 200)
        service.record_error(RuntimeError(f"boom {i}"), f"/e{i}", "GET")

    assert [m.endpoint for m in service.metrics] == ["/e2", "/e3", "/e4"]
    assert [e["message"] for e in service.recent_errors(limit=10)] == ["boom 4", "boom 3"]


def test_recent_errors_newest_first_with_limit():
    service = MonitoringService()
    for i in range(3):
        service.record_error(ValueError(f"bad {i}"), "/api/ratings", "POST", user_id=7)

    errors = service.recent_errors(limit=2)

    assert [e["message"] for e in errors] == ["bad 2", "bad 1"]
    assert errors[0]["user_id"] == 7
    assert errors[0]["status_code"] == 500


def test_endpoint_stats_sorted_by_volume():
    service = MonitoringService()
    service.record_request("/api/ratings", "POST", 50, 201)
    for _ in range(3):
        service.record_request("/api/colleges", "GET", 20, 200)
    service.record_request("/api/ratings", "POST", 150, 403)

    stats = service.endpoint_stats()

    assert [s["endpoint"] for s in stats] == ["GET /api/colleges", "POST /api/ratings"]
    assert stats[1] == {
        "endpoint": "POST /api/ratings",
        "request_count": 2,
        "average_response_time": 100,
        "error_count": 1,
        "error_rate": 50.0
    }


def test_reset():
    service = MonitoringService()
    service.record_request("/x", "GET", 1, 200)
    service.record_error(RuntimeError("x"), "/x", "GET")

    service.reset()

    assert service.performance_stats()["total_requests"] == 0
    assert service.recent_errors() == []
