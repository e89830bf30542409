"""
Tests for the challenge submission and review workflow
"""
import pytest

from ecolearn import dynamo
from ecolearn.config import get_settings
from ecolearn.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ecolearn.logic import challenges as rules
from ecolearn.services.challenge_service import challenge_service


def make_challenge(target=2, reward=100):
    return rules.normalize_challenge({
        'challenge_id': 'c-1',
        'title': "Plastic Free Week",
        'description': "...",
        'category': "waste-reduction",
        'pointsReward': reward,
        'duration': 7,
        'isActive': True,
        'completionCriteria': {'type': 'custom', 'target': target},
    })


class TestChallengeRules:

    def test_normalize_sets_end_date_and_requires_submission(self):
        challenge = make_challenge()
        assert challenge['completionCriteria']['requiresSubmission'] is True
        assert challenge['endDate'] > challenge['startDate']

    def test_join_twice_conflicts(self):
        challenge = make_challenge()
        rules.join_challenge(challenge, 'u-1')
        with pytest.raises(ConflictError):
            rules.join_challenge(challenge, 'u-1')

    def test_submit_creates_participant(self):
        challenge = make_challenge()
        participant, submission = rules.submit_work(challenge, 'u-1', "photo.jpg")

        assert participant['user'] == 'u-1'
        assert submission['status'] == 'pending'
        assert len(challenge['participants']) == 1

    def test_approvals_complete_once(self):
        challenge = make_challenge(target=2)
        participant, first = rules.submit_work(challenge, 'u-1', "day 1")
        _, second = rules.submit_work(challenge, 'u-1', "day 2")
        _, third = rules.submit_work(challenge, 'u-1', "day 3")
        pid = participant['participantId']

        outcome = rules.review_submission(challenge, pid, first['submissionId'], 'approved')
        assert participant['progress'] == 50
        assert outcome['completedNow'] is False

        outcome = rules.review_submission(challenge, pid, second['submissionId'], 'approved')
        assert participant['progress'] == 100
        assert participant['completed'] is True
        assert outcome['completedNow'] is True

        outcome = rules.review_submission(challenge, pid, third['submissionId'], 'approved')
        assert participant['progress'] == 100
        assert participant['approvedSubmissions'] == 3
        assert outcome['completedNow'] is False

    def test_rejection_keeps_progress_but_grants_bonus(self):
        challenge = make_challenge()
        participant, submission = rules.submit_work(challenge, 'u-1', "blurry photo")

        outcome = rules.review_submission(
            challenge, participant['participantId'], submission['submissionId'], 'rejected',
            feedback="Too blurry", points_awarded=5, reviewer_id='t-1'
        )

        assert outcome['bonusPoints'] == 5
        assert participant['approvedSubmissions'] == 0
        assert submission['reviewedBy'] == 't-1'
        assert submission['feedback'] == "Too blurry"

    def test_review_only_once(self):
        challenge = make_challenge()
        participant, submission = rules.submit_work(challenge, 'u-1', "work")
        rules.review_submission(challenge, participant['participantId'], submission['submissionId'], 'approved')

        with pytest.raises(ValidationError):
            rules.review_submission(challenge, participant['participantId'], submission['submissionId'], 'rejected')

    def test_unknown_participant_and_submission(self):
        challenge = make_challenge()
        participant, _ = rules.submit_work(challenge, 'u-1', "work")

        with pytest.raises(NotFoundError):
            rules.review_submission(challenge, 'nobody', 'x', 'approved')
        with pytest.raises(NotFoundError):
            rules.review_submission(challenge, participant['participantId'], 'x', 'approved')

    def test_invalid_status(self):
        challenge = make_challenge()
        participant, submission = rules.submit_work(challenge, 'u-1', "work")
        with pytest.raises(ValidationError):
            rules.review_submission(challenge, participant['participantId'], submission['submissionId'], 'maybe')

    def test_set_progress_clamps(self):
        challenge = make_challenge()
        rules.join_challenge(challenge, 'u-1')

        participant = rules.set_progress(challenge, 'u-1', 140)
        assert participant['progress'] == 100
        assert participant['completed'] is True

        with pytest.raises(NotFoundError):
            rules.set_progress(challenge, 'u-2', 10)


class TestReviewWorkflow:
    """Review credits bonus and completion points to the participant"""

    async def _challenge(self, teacher, target=1):
        return await challenge_service.create(teacher, {
            'title': "Plastic Free Week",
            'description': "...",
            'category': "waste-reduction",
            'pointsReward': 100,
            'duration': 7,
            'isActive': True,
            'completionCriteria': {'type': 'custom', 'target': target, 'submissionType': 'any'},
        })

    async def test_approval_completes_and_awards_reward_once(self, create_account):
        teacher = await create_account(role='teacher')
        student = await create_account()
        challenge = await self._challenge(teacher, target=1)
        cid = challenge['challenge_id']

        first = await challenge_service.submit_work(student, cid, "photo 1")
        second = await challenge_service.submit_work(student, cid, "photo 2")

        result = await challenge_service.review_submission(
            teacher, cid, first['participantId'], first['submission']['submissionId'], 'approved', points_awarded=10
        )
        assert result['participant']['completed'] is True
        assert result['userPoints']['totalPoints'] == 110

        await challenge_service.review_submission(
            teacher, cid, second['participantId'], second['submission']['submissionId'], 'approved'
        )

        stored = await dynamo.get_user(student['user_id'])
        assert stored['points'] == 110
        assert [b['name'] for b in stored['badges']] == ["Challenge Champion: Plastic Free Week"]
        assert sorted(h['type'] for h in stored['pointsHistory']) == ['challenge_completed', 'other']

    async def test_student_cannot_review(self, create_account):
        teacher = await create_account(role='teacher')
        student = await create_account()
        challenge = await self._challenge(teacher)
        submitted = await challenge_service.submit_work(student, challenge['challenge_id'], "photo")

        with pytest.raises(ForbiddenError):
            await challenge_service.review_submission(
                student, challenge['challenge_id'], submitted['participantId'],
                submitted['submission']['submissionId'], 'approved'
            )

    async def test_manual_completion_conflicts_second_time(self, create_account):
        teacher = await create_account(role='teacher')
        student = await create_account()
        challenge = await self._challenge(teacher)
        await challenge_service.join(student, challenge['challenge_id'])

        result = await challenge_service.complete(student, challenge['challenge_id'])
        assert result['pointsEarned'] == 100

        with pytest.raises(ConflictError):
            await challenge_service.complete(student, challenge['challenge_id'])

    async def test_submissions_listing_and_stats(self, create_account):
        teacher = await create_account(role='teacher')
        student = await create_account()
        challenge = await self._challenge(teacher)
        await challenge_service.submit_work(student, challenge['challenge_id'], "photo")

        submissions = await challenge_service.challenge_submissions(teacher, challenge['challenge_id'])
        assert len(submissions) == 1
        assert submissions[0]['user'] == student['user_id']

        mine = await challenge_service.my_submissions(student)
        assert mine[0]['challengeTitle'] == "Plastic Free Week"

        stats = await challenge_service.stats(student)
        assert stats == {'totalChallenges': 1, 'completedChallenges': 0, 'pointsFromChallenges': 0, 'completionRate': 0}

    async def test_missing_participant_account_leaves_submission_pending(self, create_account):
        teacher = await create_account(role='teacher')
        challenge = await self._challenge(teacher, target=1)
        cid = challenge['challenge_id']
        submitted = await challenge_service.submit_work({'user_id': 'deleted-user'}, cid, "photo")

        with pytest.raises(NotFoundError):
            await challenge_service.review_submission(
                teacher, cid, submitted['participantId'], submitted['submission']['submissionId'],
                'approved', points_awarded=10
            )

        stored = await challenge_service.get_challenge(cid)
        participant = stored['participants'][0]
        assert participant['completed'] is False
        assert participant['submissions'][0]['status'] == 'pending'

    async def test_reward_defaults_from_settings(self, create_account):
        teacher = await create_account(role='teacher')
        challenge = await challenge_service.create(teacher, {
            'title': "Lights Out",
            'description': "...",
            'category': "energy-conservation",
            'pointsReward': None,
        })
        assert challenge['pointsReward'] == get_settings().DEFAULT_CHALLENGE_REWARD
