"""
Tests for session lifecycle and notifications.
"""
import pytest
from unittest.mock import MagicMock

from jobtrail.interfaces.notifications import NotificationLevel, Notifier
from jobtrail.interfaces.session import Session
from jobtrail.utils.errors import NotAuthenticated

@pytest.mark.asyncio
async def test_open_builds_store_for_user(repository, token, user):
    session = await Session.open(repository, token)
    
    assert session.user == user
    await session.store.add({"companyName": "Acme", "position": "Engineer", "jobType": "full-time"})
    assert len(session.store.jobs) == 1

@pytest.mark.asyncio
async def test_open_requires_valid_token(repository):
    with pytest.raises(NotAuthenticated):
        await Session.open(repository, "bogus")

@pytest.mark.asyncio
async def test_each_login_gets_a_fresh_store(repository, token):
    first = await Session.open(repository, token)
    await first.store.add({"companyName": "Acme", "position": "Engineer", "jobType": "full-time"})
    first.close()
    
    second = await Session.open(repository, token)
    
    assert first.store is not second.store
    assert first.store.jobs == []
    assert second.store.jobs == []
    await second.store.fetch_all()
    assert len(second.store.jobs) == 1

@pytest.mark.asyncio
async def test_context_manager_closes(repository, token):
    async with await Session.open(repository, token) as session:
        assert not session.closed
    
    assert session.closed
    with pytest.raises(NotAuthenticated):
        await session.store.fetch_all()
    session.close()  # second close is harmless

def test_notifier_history_is_bounded():
    notifier = Notifier(history=2)
    for i in range(3):
        notifier.success(f"ok {i}")
    
    assert [n.message for n in notifier.pending] == ["ok 1", "ok 2"]
    assert len(notifier.drain()) == 2
    assert notifier.pending == []

def test_notifier_listeners():
    notifier = Notifier()
    listener = MagicMock()
    unsubscribe = notifier.subscribe(listener)
    
    sent = notifier.error("Failed to add job")
    unsubscribe()
    notifier.success("quiet")
    
    listener.assert_called_once_with(sent)
    assert sent.level == NotificationLevel.ERROR
