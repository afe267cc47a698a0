"""Unit tests for InMemoryMetrics."""

from order_pipeline.infrastructure.in_memory_metrics import InMemoryMetrics


class TestInMemoryMetrics:
    """Test in-memory metrics collection."""

    def test_counters_and_gauges(self):
        """Test counters accumulate and gauges overwrite."""
        metrics = InMemoryMetrics()
        metrics.increment("orders.created")
        metrics.increment("orders.created", 2)
        metrics.gauge("broker.connected", 1)
        metrics.gauge("broker.connected", 0)

        snapshot = metrics.get_all()

        assert snapshot["counters"] == {"orders.created": 3}
        assert snapshot["gauges"] == {"broker.connected": 0}

    def test_timer_records_summary(self):
        """Test the timer context manager records a duration."""
        metrics = InMemoryMetrics()

        with metrics.timer("messages.handle.orders"):
            pass

        summary = metrics.get_all()["summaries"]["messages.handle.orders"]
        assert summary["count"] == 1
        assert summary["min"] >= 0

    def test_reset(self):
        """Test reset clears every metric."""
        metrics = InMemoryMetrics()
        metrics.increment("a")
        metrics.record("b", 1.5)

        metrics.reset()

        snapshot = metrics.get_all()
        assert snapshot["counters"] == {}
        assert snapshot["summaries"] == {}

    def test_queue_breakdown(self):
        """Test message counters are grouped per queue."""
        metrics = InMemoryMetrics()
        metrics.increment("messages.published.orders", 3)
        metrics.increment("messages.acked.orders", 2)
        metrics.increment("messages.failed.orders")
        metrics.increment("messages.published.orders.failed")
        metrics.increment("orders.created")

        assert metrics.get_all()["queues"] == {
            "orders": {"published": 3, "acked": 2, "failed": 1},
            "orders.failed": {"published": 1},
        }
