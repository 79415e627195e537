from __future__ import annotations

from datetime import datetime

from qr_attendance.notifications.broadcaster import AttendanceEventBroadcaster


def test_scan_events_reach_subscribers(container, issued_code):
    q = container.broadcaster.subscribe()

    container.attendance_service.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 0))

    event = q.get_nowait()
    assert event["result"] == "checked_in"
    assert event["employee_id"] == "E1"
    assert event["status"] == "present"


def test_unsubscribed_queue_gets_nothing(container, issued_code):
    q = container.broadcaster.subscribe()
    container.broadcaster.unsubscribe(q)

    container.attendance_service.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 0))

    assert q.empty()
    assert container.broadcaster.subscriber_count == 0


def test_full_subscriber_queue_drops_events(container, issued_code):
    broadcaster = AttendanceEventBroadcaster(max_pending=1)
    q = broadcaster.subscribe()
    svc = container.attendance_service

    out1 = svc.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 0))
    out2 = svc.process_scan("E2", issued_code.code, now=datetime(2024, 1, 2, 8, 1))
    broadcaster.attendance_changed(out1)
    broadcaster.attendance_changed(out2)

    assert q.qsize() == 1
    assert q.get_nowait()["employee_id"] == "E1"
