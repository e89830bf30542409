"""
Unit tests for the points ledger, badges and login streaks
"""
import pytest
from datetime import datetime, timedelta, timezone

from ecolearn.errors import NotFoundError, ValidationError
from ecolearn.logic import gamification
from ecolearn.services.points_ledger import update_user_points
from ecolearn import dynamo


NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def account():
    return {
        'user_id': 'u-1',
        'points': 0,
        'weeklyPoints': 0,
        'monthlyPoints': 0,
        'lastWeeklyReset': NOW.isoformat(),
        'lastMonthlyReset': NOW.isoformat(),
        'badges': [],
        'pointsHistory': [],
    }


class TestApplyPoints:
    """Ledger arithmetic on an in-memory account"""

    def test_credits_all_counters_and_appends_history(self, account):
        gamification.apply_points(account, 20, 'module_completed', "Completed Recycling 101", 'm-1', now=NOW)

        assert account['points'] == 20
        assert account['weeklyPoints'] == 20
        assert account['monthlyPoints'] == 20
        assert account['pointsHistory'] == [{
            'points': 20,
            'type': 'module_completed',
            'description': "Completed Recycling 101",
            'relatedId': 'm-1',
            'earnedAt': NOW.isoformat(),
        }]

    def test_total_matches_sum_of_deltas(self, account):
        deltas = [10, 25, -5, 40]
        for delta in deltas:
            gamification.apply_points(account, delta, 'other', "adjustment", now=NOW)

        assert account['points'] == sum(deltas)
        assert len(account['pointsHistory']) == len(deltas)
        assert sum(h['points'] for h in account['pointsHistory']) == account['points']

    def test_negative_delta_is_recorded(self, account):
        account['points'] = 30
        gamification.apply_points(account, -10, 'event_registration', "Unregistered from event: Beach Cleanup", now=NOW)

        assert account['points'] == 20
        assert account['pointsHistory'][-1]['points'] == -10

    def test_unknown_type_rejected(self, account):
        with pytest.raises(ValidationError):
            gamification.apply_points(account, 5, 'lottery', "nope", now=NOW)
        assert account['points'] == 0
        assert account['pointsHistory'] == []


class TestRollover:
    """Weekly and monthly counters reset when their window has passed"""

    def test_weekly_reset_after_seven_days(self, account):
        account['weeklyPoints'] = 50
        account['lastWeeklyReset'] = (NOW - timedelta(days=7)).isoformat()

        gamification.apply_points(account, 5, 'other', "bonus", now=NOW)

        assert account['weeklyPoints'] == 5
        assert account['lastWeeklyReset'] == NOW.isoformat()

    def test_no_weekly_reset_within_window(self, account):
        account['weeklyPoints'] = 50
        account['lastWeeklyReset'] = (NOW - timedelta(days=6, hours=23)).isoformat()

        gamification.apply_points(account, 5, 'other', "bonus", now=NOW)

        assert account['weeklyPoints'] == 55

    def test_monthly_reset_on_new_calendar_month(self, account):
        account['monthlyPoints'] = 80
        account['lastMonthlyReset'] = datetime(2024, 4, 30, 23, 0, tzinfo=timezone.utc).isoformat()

        gamification.apply_points(account, 5, 'other', "bonus", now=NOW)

        assert account['monthlyPoints'] == 5

    def test_total_never_reset(self, account):
        account['points'] = 500
        account['lastWeeklyReset'] = (NOW - timedelta(days=30)).isoformat()
        account['lastMonthlyReset'] = (NOW - timedelta(days=60)).isoformat()

        gamification.apply_points(account, 5, 'other', "bonus", now=NOW)

        assert account['points'] == 505

    def test_missing_stamps_are_initialised(self, account):
        account['weeklyPoints'] = 12
        del account['lastWeeklyReset']
        del account['lastMonthlyReset']

        gamification.apply_rollover(account, NOW)

        assert account['weeklyPoints'] == 12
        assert account['lastWeeklyReset'] == NOW.isoformat()
        assert account['lastMonthlyReset'] == NOW.isoformat()


class TestBadges:

    def test_badge_added_once(self, account):
        assert gamification.add_badge(account, "Biodiversity Expert", now=NOW) is True
        assert gamification.add_badge(account, "Biodiversity Expert", now=NOW) is False
        assert [b['name'] for b in account['badges']] == ["Biodiversity Expert"]

    def test_default_description(self, account):
        gamification.add_badge(account, "Early Bird")
        assert account['badges'][0]['description'] == gamification.DEFAULT_BADGE_DESCRIPTION


class TestLoginStreak:

    def test_first_login_starts_streak(self, account):
        assert gamification.update_login_streak(account, NOW) is True
        assert account['streak'] == 1
        assert account['lastLogin'] == NOW.isoformat()

    def test_consecutive_day_increments(self, account):
        account['streak'] = 3
        account['lastLogin'] = (NOW - timedelta(days=1)).isoformat()

        gamification.update_login_streak(account, NOW)

        assert account['streak'] == 4

    def test_same_day_unchanged(self, account):
        account['streak'] = 3
        account['lastLogin'] = (NOW - timedelta(hours=2)).isoformat()

        assert gamification.update_login_streak(account, NOW) is False
        assert account['streak'] == 3

    def test_gap_resets_to_one(self, account):
        account['streak'] = 9
        account['lastLogin'] = (NOW - timedelta(days=3)).isoformat()

        gamification.update_login_streak(account, NOW)

        assert account['streak'] == 1


class TestUpdateUserPoints:
    """Ledger entry point against moto tables"""

    async def test_persists_credit(self, create_account):
        user = await create_account()

        summary = await update_user_points(user['user_id'], 15, 'survey_completed', "Completed survey: Habits", 's-1')

        assert summary == {'totalPoints': 15, 'weeklyPoints': 15, 'monthlyPoints': 15}
        stored = await dynamo.get_user(user['user_id'])
        assert stored['points'] == 15
        assert stored['pointsHistory'][0]['relatedId'] == 's-1'

    async def test_unknown_user(self, dynamodb_tables):
        with pytest.raises(NotFoundError):
            await update_user_points('missing', 5, 'other', "bonus")
