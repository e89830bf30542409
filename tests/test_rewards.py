"""
Tests for reward redemption
"""
import pytest

from ecolearn import dynamo, dynamo_rewards
from ecolearn.errors import ConflictError, NotFoundError, ValidationError
from ecolearn.logic import rewards as rules
from ecolearn.services.reward_service import reward_service


@pytest.fixture
def reward():
    return {'reward_id': 'r-1', 'name': "Bamboo Bottle", 'pointsRequired': 100, 'stock': 1, 'type': 'product'}


class TestRedeemRules:

    def test_deducts_points_and_stock(self, reward):
        user = {'user_id': 'u-1', 'points': 150, 'weeklyPoints': 40, 'monthlyPoints': 90, 'pointsHistory': []}

        redemption = rules.redeem(user, reward)

        assert user['points'] == 50
        assert user['weeklyPoints'] == 40
        assert user['monthlyPoints'] == 90
        assert user['pointsHistory'] == []
        assert reward['stock'] == 0
        assert redemption['status'] == 'pending'
        assert redemption['pointsSpent'] == 100

    def test_not_enough_points(self, reward):
        user = {'user_id': 'u-1', 'points': 99}
        with pytest.raises(ValidationError):
            rules.redeem(user, reward)
        assert user['points'] == 99
        assert reward['stock'] == 1

    def test_out_of_stock(self, reward):
        reward['stock'] = 0
        with pytest.raises(ConflictError):
            rules.redeem({'user_id': 'u-1', 'points': 500}, reward)

    def test_unlimited_stock(self, reward):
        reward['stock'] = None
        rules.redeem({'user_id': 'u-1', 'points': 500}, reward)
        assert reward['stock'] is None

    def test_prepare_assigns_codes(self):
        product = rules.prepare_reward({'type': 'product'})
        coupon = rules.prepare_reward({'type': 'coupon'})

        assert product['productId'].startswith("PROD_")
        assert len(coupon['couponCode']) == 8

    def test_completed_status_sets_completed_at(self):
        redemption = rules.set_redemption_status({'status': 'pending', 'completedAt': None}, 'completed')
        assert redemption['completedAt'] is not None


class TestRewardService:
    """Redemption against moto tables"""

    async def test_redeem_persists_all_three_writes(self, create_account):
        admin = await create_account(role='admin', school='ADMIN')
        student = await create_account(points=250)
        reward = await reward_service.create_reward(admin, {
            'name': "Bamboo Bottle", 'description': "...", 'pointsRequired': 100,
            'category': "Eco Product", 'type': 'product', 'stock': 2, 'isActive': True,
        })

        result = await reward_service.redeem(student, reward['reward_id'])

        assert result['pointsSpent'] == 100
        assert result['remainingPoints'] == 150
        assert (await dynamo.get_user(student['user_id']))['points'] == 150
        assert (await dynamo_rewards.get_reward(reward['reward_id']))['stock'] == 1
        history = await reward_service.history(student)
        assert [r['redemption_id'] for r in history] == [result['redemptionId']]

    async def test_inactive_reward_not_found(self, create_account):
        admin = await create_account(role='admin', school='ADMIN')
        student = await create_account(points=250)
        reward = await reward_service.create_reward(admin, {
            'name': "Hidden", 'description': "...", 'pointsRequired': 10, 'type': 'coupon', 'isActive': False,
        })

        with pytest.raises(NotFoundError):
            await reward_service.redeem(student, reward['reward_id'])

    async def test_status_update(self, create_account):
        admin = await create_account(role='admin', school='ADMIN')
        student = await create_account(points=250)
        reward = await reward_service.create_reward(admin, {
            'name': "Tote", 'description': "...", 'pointsRequired': 10, 'type': 'product', 'isActive': True,
        })
        result = await reward_service.redeem(student, reward['reward_id'])

        updated = await reward_service.update_redemption_status(result['redemptionId'], 'completed')

        assert updated['status'] == 'completed'
        assert updated['completedAt'] is not None
