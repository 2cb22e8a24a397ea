import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from app.services.notifications import (
    PHASE_ENTERING,
    PHASE_LEAVING,
    PHASE_SHOWN,
    SEVERITY_ERROR,
    SEVERITY_SUCCESS,
    NotificationPresenter,
)
from tests.fakes import FakeClock


class NotificationPresenterTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.presenter = NotificationPresenter(self.clock, ttl_ms=6000, exit_ms=400, enter_ms=100)

    def test_new_notification_replaces_previous_immediately(self):
        self.presenter.notify("primeira", SEVERITY_ERROR)
        self.clock.advance(50)
        second = self.presenter.notify("segunda", SEVERITY_SUCCESS)

        visible = self.presenter.visible()
        self.assertEqual(len(visible), 1)
        self.assertEqual(visible[0].id, second.id)
        self.assertEqual(visible[0].message, "segunda")
        self.assertEqual(visible[0].severity, SEVERITY_SUCCESS)

    def test_lifecycle_phases_follow_timing(self):
        item = self.presenter.notify("olá")
        self.assertEqual(self.presenter.phase(item), PHASE_ENTERING)

        self.clock.advance(100)
        self.assertEqual(self.presenter.phase(item), PHASE_SHOWN)

        self.clock.advance(5899)
        self.assertEqual(self.presenter.phase(item), PHASE_SHOWN)

        self.clock.advance(1)
        self.assertEqual(self.presenter.phase(item), PHASE_LEAVING)
        self.assertEqual(len(self.presenter.visible()), 1)

        self.clock.advance(400)
        self.assertEqual(self.presenter.visible(), [])
        self.assertIsNone(self.presenter.latest())

    def test_manual_dismiss_starts_exit_early(self):
        item = self.presenter.notify("olá")
        self.clock.advance(1000)
        self.assertTrue(self.presenter.dismiss(item.id))
        self.assertEqual(self.presenter.phase(item), PHASE_LEAVING)

        self.clock.advance(399)
        self.assertEqual(self.presenter.latest().id, item.id)
        self.clock.advance(1)
        self.assertEqual(self.presenter.visible(), [])

    def test_dismiss_unknown_id_returns_false(self):
        self.presenter.notify("olá")
        self.assertFalse(self.presenter.dismiss(999))

    def test_dismiss_all_for_escape_key(self):
        item = self.presenter.notify("olá")
        self.clock.advance(200)
        self.presenter.dismiss_all()
        self.assertEqual(self.presenter.phase(item), PHASE_LEAVING)
        self.clock.advance(400)
        self.assertEqual(self.presenter.visible(), [])

    def test_unknown_severity_is_rejected(self):
        with self.assertRaises(ValueError):
            self.presenter.notify("olá", "warning")

    def test_severity_is_normalized(self):
        item = self.presenter.notify("olá", " Error ")
        self.assertEqual(item.severity, SEVERITY_ERROR)


if __name__ == "__main__":
    unittest.main()
