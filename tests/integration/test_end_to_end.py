"""End-to-end: page extraction through tracking, history and alerts on SQLite."""

from unittest.mock import MagicMock

from shop_tracker.alerts.evaluator import AlertEvaluator
from shop_tracker.alerts.scheduler import AlertScheduler
from shop_tracker.extraction.page import HtmlPage
from shop_tracker.service import TrackerService
from shop_tracker.tracking.backend import SQLiteBackend
from shop_tracker.tracking.store import TrackingStore


def _repriced_page(product_page, price):
    html = str(product_page._soup).replace("$19.99", price)
    return HtmlPage(html, url=product_page.url)


class TestEndToEnd:
    def test_track_reprice_alert(self, sqlite_store, product_page, clock):
        service = TrackerService(sqlite_store)
        assert service.consume_quota() is True

        product_id = service.extract_and_track(product_page)
        product = sqlite_store.get_product(product_id)
        assert product.price == 19.99
        assert product.sales == 12300

        alert = service.set_alert(product_id, 18.0)
        assert alert.type.value == "below"

        clock.advance(days=1)
        record = service.extractor.extract_product(_repriced_page(product_page, "$17.49"))
        sqlite_store.update_product(product_id, price=record.price, sales=record.sales)

        notifier = MagicMock()
        scheduler = AlertScheduler(AlertEvaluator(sqlite_store, notifier), interval_seconds=0.01)
        scheduler.run_forever(max_runs=2)

        notifier.notify.assert_called_once()
        assert "$17.49" in notifier.notify.call_args[0][0].body

        product = sqlite_store.get_product(product_id)
        assert [p.price for p in product.price_history] == [19.99, 17.49]
        assert len(product.sales_history) == 1
        assert sqlite_store.read().price_alerts[0].triggered is True

    def test_state_survives_new_store(self, sqlite_store, temp_config, sample_product_data, clock):
        sqlite_store.add_tracked_product(sample_product_data)
        sqlite_store.add_trend("blender")
        sqlite_store.update_settings(notifications=False)

        reopened = TrackingStore(SQLiteBackend(temp_config), temp_config, clock=clock)
        doc = reopened.read()

        assert doc.tracked_products[0].name == "Mini Portable Blender"
        assert doc.trends[0].keyword == "blender"
        assert doc.settings.notifications is False
