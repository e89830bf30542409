"""
Tests for event registration and survey completion
"""
import pytest
from datetime import timedelta

from ecolearn import dynamo
from ecolearn.errors import ConflictError, NotFoundError, ValidationError
from ecolearn.logic import events as rules
from ecolearn.services.community_service import event_service, survey_service


def future(days):
    return (dynamo.utc_now() + timedelta(days=days)).isoformat()


def past(days):
    return (dynamo.utc_now() - timedelta(days=days)).isoformat()


@pytest.fixture
def event():
    return {
        'event_id': 'e-1',
        'name': "Beach Cleanup",
        'date': future(10),
        'lastDateToRegister': future(5),
        'maxParticipants': 1,
        'currentParticipants': 0,
        'pointsReward': 20,
        'isActive': True,
        'registrations': [],
    }


class TestEventRules:

    def test_register_and_fill(self, event):
        registration = rules.add_registration(event, {'user_id': 'u-1', 'name': "Ana"})

        assert registration['pointsAwarded'] == 20
        assert event['currentParticipants'] == 1
        assert rules.registration_status(event) == 'full'

        with pytest.raises(ValidationError, match="closed"):
            rules.add_registration(event, {'user_id': 'u-2'})

    def test_deadline_passed(self, event):
        event['lastDateToRegister'] = past(1)
        with pytest.raises(ValidationError, match="period has ended"):
            rules.add_registration(event, {'user_id': 'u-1'})

    def test_duplicate_registration(self, event):
        event['maxParticipants'] = 0
        rules.add_registration(event, {'user_id': 'u-1'})
        with pytest.raises(ConflictError):
            rules.add_registration(event, {'user_id': 'u-1'})

    def test_remove_registration(self, event):
        rules.add_registration(event, {'user_id': 'u-1'})
        removed = rules.remove_registration(event, 'u-1')

        assert removed['userId'] == 'u-1'
        assert event['currentParticipants'] == 0
        with pytest.raises(NotFoundError):
            rules.remove_registration(event, 'u-1')

    def test_schedule_validation(self, event):
        event['lastDateToRegister'] = future(11)
        with pytest.raises(ValidationError):
            rules.validate_schedule(event)

    def test_bulk_attendance_skips_unknown(self, event):
        event['maxParticipants'] = 0
        rules.add_registration(event, {'user_id': 'u-1'})

        updated = rules.bulk_mark_attendance(event, [
            {'userId': 'u-1', 'attended': True},
            {'userId': 'ghost', 'attended': True},
        ])

        assert updated == 1
        assert event['registrations'][0]['attended'] is True


class TestEventService:

    async def test_register_then_unregister_nets_zero(self, create_account, event):
        admin = await create_account(role='admin', school='ADMIN')
        student = await create_account()
        data = {k: v for k, v in event.items() if k not in ('event_id', 'registrations', 'currentParticipants')}
        created = await event_service.create(admin, {**data, 'description': "..."})

        result = await event_service.register(student, created['event_id'])
        assert result['pointsAwarded'] == 20
        assert (await dynamo.get_user(student['user_id']))['points'] == 20

        await event_service.unregister(student, created['event_id'])

        stored = await dynamo.get_user(student['user_id'])
        assert stored['points'] == 0
        assert [h['points'] for h in stored['pointsHistory']] == [20, -20]

    async def test_upcoming_hides_past_events(self, create_account, event):
        admin = await create_account(role='admin', school='ADMIN')
        data = {k: v for k, v in event.items() if k not in ('event_id', 'registrations', 'currentParticipants')}
        await event_service.create(admin, {**data, 'name': "Soon"})
        await event_service.create(admin, {**data, 'name': "Over", 'date': past(2), 'lastDateToRegister': past(3)})

        upcoming = await event_service.upcoming()

        assert [e['name'] for e in upcoming] == ["Soon"]
        assert upcoming[0]['registrationOpen'] is True


class TestSurveyService:

    async def test_points_only_on_first_completion(self, create_account):
        admin = await create_account(role='admin', school='ADMIN')
        student = await create_account()
        survey = await survey_service.create(admin, {'title': "Habits", 'description': "...", 'points': 15, 'isActive': True})

        first = await survey_service.submit(student, survey['survey_id'], {'q1': "yes"})
        second = await survey_service.submit(student, survey['survey_id'], {'q1': "no"})

        assert first == {'pointsEarned': 15, 'alreadyCompleted': False}
        assert second == {'pointsEarned': 0, 'alreadyCompleted': True}

        stored = await dynamo.get_user(student['user_id'])
        assert stored['points'] == 15
        assert stored['completedSurveys'] == [survey['survey_id']]
        assert len(await survey_service.submissions(survey['survey_id'])) == 2

        listed = await survey_service.list_active(stored)
        assert listed[0]['completed'] is True
