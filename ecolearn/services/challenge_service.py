"""
Challenge Service

Participation, submissions and the teacher review workflow. Ledger
credits for bonus and completion points are applied to the participant's
account here, after the pure review rules have run.
"""
import logging
from typing import Dict, Any, List, Optional

from ecolearn import dynamo, dynamo_challenges
from ecolearn.config import get_settings
from ecolearn.errors import ForbiddenError, NotFoundError
from ecolearn.logic import challenges as rules
from ecolearn.logic.gamification import add_badge, apply_points, points_summary
from ecolearn.services.access import content_school, ensure_can_manage

logger = logging.getLogger(__name__)
settings = get_settings()


class ChallengeService:

    async def get_challenge(self, challenge_id: str) -> Dict[str, Any]:
        challenge = await dynamo_challenges.get_challenge(challenge_id)
        if not challenge:
            raise NotFoundError("Challenge not found")
        return challenge

    async def list_active(self) -> List[Dict[str, Any]]:
        challenges = await dynamo_challenges.list_challenges(active_only=True)
        return sorted(challenges, key=lambda c: c.get('createdAt', ''), reverse=True)

    async def list_all(self) -> List[Dict[str, Any]]:
        return await dynamo_challenges.list_challenges()

    async def list_mine(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Challenges the caller joined, each with their own participant record"""
        results = []
        for challenge in await dynamo_challenges.list_challenges():
            participant = rules.find_participant(challenge, user['user_id'])
            if participant:
                results.append({**challenge, 'myParticipation': participant})
        return results

    async def create(self, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        challenge = rules.normalize_challenge({
            **data,
            'pointsReward': data.get('pointsReward') or settings.DEFAULT_CHALLENGE_REWARD,
            'challenge_id': dynamo.new_id(),
            'school': content_school(user),
            'createdBy': user['user_id'],
            'createdAt': dynamo.utc_now().isoformat(),
            'participants': [],
        })
        await dynamo_challenges.save_challenge(challenge)
        logger.info(f"Challenge {challenge['challenge_id']} created by {user['user_id']}")
        return challenge

    async def update(self, user: Dict[str, Any], challenge_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        challenge = await self.get_challenge(challenge_id)
        ensure_can_manage(user, challenge, "challenge")
        challenge.update(updates)
        rules.normalize_challenge(challenge)
        return await dynamo_challenges.save_challenge(challenge)

    async def delete(self, user: Dict[str, Any], challenge_id: str) -> None:
        challenge = await self.get_challenge(challenge_id)
        ensure_can_manage(user, challenge, "challenge", action="delete")
        await dynamo_challenges.delete_challenge(challenge_id)

    # ========== PARTICIPATION ==========

    async def join(self, user: Dict[str, Any], challenge_id: str) -> Dict[str, Any]:
        challenge = await self.get_challenge(challenge_id)
        participant = rules.join_challenge(challenge, user['user_id'])
        await dynamo_challenges.save_challenge(challenge)
        return participant

    async def update_progress(self, user: Dict[str, Any], challenge_id: str, progress: float) -> Dict[str, Any]:
        challenge = await self.get_challenge(challenge_id)
        participant = rules.set_progress(challenge, user['user_id'], progress)
        await dynamo_challenges.save_challenge(challenge)
        return participant

    async def complete(self, user: Dict[str, Any], challenge_id: str) -> Dict[str, Any]:
        """Manual completion: credits pointsReward and the champion badge once"""
        challenge = await self.get_challenge(challenge_id)
        rules.complete_manually(challenge, user['user_id'])
        await dynamo_challenges.save_challenge(challenge)

        self._award_completion(user, challenge)
        await dynamo.save_user(user)

        return {'pointsEarned': challenge.get('pointsReward', 0), **points_summary(user)}

    def _award_completion(self, user: Dict[str, Any], challenge: Dict[str, Any]) -> None:
        apply_points(
            user,
            challenge.get('pointsReward', 0),
            'challenge_completed',
            f"Completed challenge: {challenge['title']}",
            challenge['challenge_id']
        )
        badge_name, badge_description = rules.challenge_badge(challenge)
        add_badge(user, badge_name, badge_description)

    # ========== SUBMISSIONS ==========

    async def submit_work(
        self,
        user: Dict[str, Any],
        challenge_id: str,
        content: str,
        description: str = ""
    ) -> Dict[str, Any]:
        challenge = await self.get_challenge(challenge_id)
        participant, submission = rules.submit_work(challenge, user['user_id'], content, description)
        await dynamo_challenges.save_challenge(challenge)
        return {'submission': submission, 'participantId': participant['participantId']}

    async def review_submission(
        self,
        reviewer: Dict[str, Any],
        challenge_id: str,
        participant_id: str,
        submission_id: str,
        status: str,
        feedback: Optional[str] = None,
        points_awarded: int = 0
    ) -> Dict[str, Any]:
        """
        Review one submission as a teacher or admin.

        Returns:
            {submission, participant: {progress, approvedSubmissions, completed}, userPoints}
        """
        challenge = await self.get_challenge(challenge_id)
        if reviewer.get('role') not in ('teacher', 'admin'):
            raise ForbiddenError("Only teachers and admins can review submissions")

        outcome = rules.review_submission(
            challenge,
            participant_id,
            submission_id,
            status,
            feedback=feedback,
            points_awarded=points_awarded,
            reviewer_id=reviewer['user_id']
        )
        participant = outcome['participant']
        student = await dynamo.get_user(participant['user'])
        if not student:
            raise NotFoundError("User not found")
        await dynamo_challenges.save_challenge(challenge)

        if outcome['bonusPoints']:
            apply_points(
                student,
                outcome['bonusPoints'],
                'other',
                f"Bonus points for submission in challenge: {challenge['title']}",
                challenge_id
            )
        if outcome['completedNow']:
            self._award_completion(student, challenge)
        if outcome['bonusPoints'] or outcome['completedNow']:
            await dynamo.save_user(student)

        logger.info(
            f"Submission {submission_id} {status} by {reviewer['user_id']} "
            f"(bonus={outcome['bonusPoints']}, completed_now={outcome['completedNow']})"
        )

        return {
            'submission': outcome['submission'],
            'participant': {
                'progress': participant['progress'],
                'approvedSubmissions': participant['approvedSubmissions'],
                'completed': participant['completed'],
            },
            'userPoints': points_summary(student),
        }

    async def challenge_submissions(self, user: Dict[str, Any], challenge_id: str) -> List[Dict[str, Any]]:
        """All submissions for one challenge, newest first"""
        challenge = await self.get_challenge(challenge_id)
        ensure_can_manage(user, challenge, "challenge", action="view submissions for")

        rows = []
        for participant in challenge.get('participants', []):
            for submission in participant.get('submissions', []):
                rows.append({
                    **submission,
                    'participantId': participant['participantId'],
                    'user': participant['user'],
                })
        return sorted(rows, key=lambda s: s.get('submittedAt', ''), reverse=True)

    async def my_submissions(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        rows = []
        for challenge in await dynamo_challenges.list_challenges():
            participant = rules.find_participant(challenge, user['user_id'])
            if not participant:
                continue
            for submission in participant.get('submissions', []):
                rows.append({
                    **submission,
                    'challengeId': challenge['challenge_id'],
                    'challengeTitle': challenge.get('title'),
                })
        return sorted(rows, key=lambda s: s.get('submittedAt', ''), reverse=True)

    async def stats(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return rules.user_challenge_stats(await dynamo_challenges.list_challenges(), user['user_id'])


challenge_service = ChallengeService()
