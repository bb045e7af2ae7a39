"""
Tests for reward points and badge lookup.
"""
import pytest

from app.core.errors import NotFound
from app.core.rewards_config import POINTS_PER_ACTIVITY
from services.reward_service import RewardsService
from tests.fixtures import InMemoryLedgerRepository


def test_points_per_activity():
    assert POINTS_PER_ACTIVITY == 10


async def test_on_activity_recorded_adds_flat_amount():
    repo = InMemoryLedgerRepository()
    user = repo.add_user(points=40)
    rewards = RewardsService(repo)

    assert await rewards.on_activity_recorded(user.id) == 50
    assert await rewards.on_activity_recorded(user.id) == 60
    assert repo.users[user.id].points == 60


async def test_on_activity_recorded_unknown_owner():
    rewards = RewardsService(InMemoryLedgerRepository())
    with pytest.raises(NotFound):
        await rewards.on_activity_recorded(42)


async def test_get_rewards_returns_points_and_own_badges():
    repo = InMemoryLedgerRepository()
    ada = repo.add_user(name="Ada", points=120)
    bob = repo.add_user(name="Bob")
    starter = repo.add_badge(ada.id, name="Eco Starter", icon="leaf")
    repo.add_badge(bob.id, name="Green Commuter", icon="bus")

    result = await RewardsService(repo).get_rewards(ada.id)

    assert result.points == 120
    assert result.badges == [starter]


async def test_get_rewards_without_badges():
    repo = InMemoryLedgerRepository()
    user = repo.add_user()

    result = await RewardsService(repo).get_rewards(user.id)

    assert result.points == 0
    assert result.badges == []


async def test_get_rewards_unknown_owner():
    with pytest.raises(NotFound):
        await RewardsService(InMemoryLedgerRepository()).get_rewards(7)
