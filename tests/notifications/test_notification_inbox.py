from __future__ import annotations

from src.staff_ledger.staff_ledger.core.enums import NotificationType
from src.staff_ledger.staff_ledger.notifications.model import NotificationEvent
from src.staff_ledger.staff_ledger.notifications.sink import notify_safely


def event(business_id, recipient_id, title="Hello"):
    return NotificationEvent(
        business_id=business_id,
        recipient_id=recipient_id,
        type=NotificationType.STAFF_CHECKIN,
        title=title,
        message="Staff member has checked in",
        data={"staffId": "s1", "isLate": True},
    )


async def test_create_and_read_back(container, business):
    inbox = container.notifications_repo

    created = await inbox.create(event(business.business_id, "owner"))
    stored = await inbox.get(created.notification_id)

    assert stored.notification_id.startswith("notif_")
    assert stored.type == NotificationType.STAFF_CHECKIN.value
    assert stored.data == {"staffId": "s1", "isLate": True}
    assert stored.read is False


async def test_recipient_filter_includes_broadcasts(container, business):
    inbox = container.notifications_repo
    await inbox.create(event(business.business_id, "owner"))
    await inbox.create(event(business.business_id, "s1"))
    await inbox.create(event(business.business_id, None))

    assert len(await inbox.list_for_business(business.business_id)) == 3
    assert len(await inbox.list_for_business(business.business_id, "owner")) == 2


async def test_mark_read_and_unread_count(container, business):
    inbox = container.notifications_repo
    first = await inbox.create(event(business.business_id, "owner"))
    await inbox.create(event(business.business_id, "owner"))
    await inbox.create(event(business.business_id, "s1"))

    assert await inbox.unread_count(business.business_id, "owner") == 2
    assert await inbox.mark_as_read(first.notification_id) is True
    assert await inbox.unread_count(business.business_id, "owner") == 1
    assert await inbox.mark_all_as_read(business.business_id, "owner") == 1
    assert await inbox.unread_count(business.business_id) == 1


async def test_delete(container, business):
    inbox = container.notifications_repo
    created = await inbox.create(event(business.business_id, "owner"))

    assert await inbox.delete(created.notification_id) is True
    assert await inbox.get(created.notification_id) is None
    assert await inbox.delete(created.notification_id) is False


async def test_notify_safely_swallows_sink_failures(failing_sink, recording_sink):
    assert await notify_safely(failing_sink, event("biz_1", "owner")) is False
    assert await notify_safely(None, event("biz_1", "owner")) is False
    assert await notify_safely(recording_sink, event("biz_1", "owner")) is True
    assert len(recording_sink.events) == 1
