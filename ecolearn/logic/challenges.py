"""
Challenge participation and submission review

Each submission moves pending -> approved | rejected exactly once. A
participant completes when approved submissions reach the target, and the
completion reward is handed out only on that transition.
"""
from typing import Dict, Any, Optional, Tuple
from datetime import datetime, timedelta
import logging

from ecolearn.dynamo import new_id, parse_time, utc_now
from ecolearn.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CHALLENGE_CATEGORIES = [
    "waste-reduction",
    "energy-conservation",
    "water-preservation",
    "biodiversity",
    "sustainable-living",
]
SUBMISSION_TYPES = ["text", "image", "file", "any"]
REVIEW_STATUSES = ["approved", "rejected"]


def normalize_challenge(challenge: Dict[str, Any]) -> Dict[str, Any]:
    """Fill derived fields: endDate from startDate + duration, custom criteria require submissions"""
    start = parse_time(challenge.get('startDate')) or utc_now()
    duration = challenge.get('duration') or 7
    challenge['startDate'] = start.isoformat()
    challenge['duration'] = duration
    challenge['endDate'] = (start + timedelta(days=duration)).isoformat()

    criteria = challenge.setdefault('completionCriteria', {})
    criteria.setdefault('type', 'custom')
    criteria.setdefault('target', 10)
    criteria.setdefault('submissionType', 'any')
    if criteria['type'] == 'custom':
        criteria['requiresSubmission'] = True

    challenge.setdefault('participants', [])
    return challenge


def find_participant(challenge: Dict[str, Any], user_id: str) -> Optional[Dict[str, Any]]:
    for participant in challenge.get('participants', []):
        if participant.get('user') == user_id:
            return participant
    return None


def new_participant(user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        'participantId': new_id(),
        'user': user_id,
        'joinedAt': (now or utc_now()).isoformat(),
        'progress': 0,
        'completed': False,
        'completedAt': None,
        'submissions': [],
        'approvedSubmissions': 0,
    }


def join_challenge(challenge: Dict[str, Any], user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    if find_participant(challenge, user_id):
        raise ConflictError("You have already joined this challenge")

    participant = new_participant(user_id, now)
    challenge.setdefault('participants', []).append(participant)
    logger.info(f"User {user_id} joined challenge {challenge.get('challenge_id')}")
    return participant


def accepts_submissions(challenge: Dict[str, Any]) -> bool:
    criteria = challenge.get('completionCriteria') or {}
    return criteria.get('type') == 'custom' and bool(criteria.get('requiresSubmission'))


def submit_work(
    challenge: Dict[str, Any],
    user_id: str,
    content: str,
    description: str = "",
    now: Optional[datetime] = None
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Append a pending submission, creating the participant on first submit.

    Returns:
        (participant, submission)
    """
    if not accepts_submissions(challenge):
        raise ValidationError("This challenge does not accept submissions")

    participant = find_participant(challenge, user_id)
    if participant is None:
        participant = new_participant(user_id, now)
        challenge.setdefault('participants', []).append(participant)

    submission = {
        'submissionId': new_id(),
        'submission': content,
        'description': description,
        'submittedAt': (now or utc_now()).isoformat(),
        'status': 'pending',
        'feedback': None,
        'reviewedAt': None,
        'reviewedBy': None,
        'pointsAwarded': 0,
    }
    participant.setdefault('submissions', []).append(submission)

    logger.info(f"User {user_id} submitted work for challenge {challenge.get('challenge_id')}")
    return participant, submission


def review_submission(
    challenge: Dict[str, Any],
    participant_id: str,
    submission_id: str,
    status: str,
    feedback: Optional[str] = None,
    points_awarded: int = 0,
    reviewer_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Apply a teacher/admin review to one pending submission.

    Bonus points (points_awarded > 0) are granted whatever the outcome.
    Approval bumps approvedSubmissions and recomputes progress against the
    target; reaching 100 completes the participant once.

    Returns:
        {participant, submission, bonusPoints, completedNow}
        The caller credits bonusPoints and, when completedNow, the
        challenge reward and badge.
    """
    if status not in REVIEW_STATUSES:
        raise ValidationError(f"Invalid status '{status}'. Must be one of: {', '.join(REVIEW_STATUSES)}")

    participant = next(
        (p for p in challenge.get('participants', []) if p.get('participantId') == participant_id),
        None
    )
    if participant is None:
        raise NotFoundError("Participant not found")

    submission = next(
        (s for s in participant.get('submissions', []) if s.get('submissionId') == submission_id),
        None
    )
    if submission is None:
        raise NotFoundError("Submission not found")

    if submission.get('status') != 'pending':
        raise ValidationError(f"Submission has already been {submission.get('status')}")

    now = now or utc_now()
    submission['status'] = status
    submission['feedback'] = feedback
    submission['reviewedAt'] = now.isoformat()
    submission['reviewedBy'] = reviewer_id

    bonus_points = points_awarded if points_awarded and points_awarded > 0 else 0
    if bonus_points:
        submission['pointsAwarded'] = bonus_points

    completed_now = False
    if status == 'approved':
        target = (challenge.get('completionCriteria') or {}).get('target') or 1
        participant['approvedSubmissions'] = participant.get('approvedSubmissions', 0) + 1
        participant['progress'] = min(100, participant['approvedSubmissions'] * 100 / target)

        if participant['progress'] >= 100 and not participant.get('completed'):
            participant['completed'] = True
            participant['completedAt'] = now.isoformat()
            completed_now = True
            logger.info(f"Participant {participant_id} completed challenge {challenge.get('challenge_id')}")

    return {
        'participant': participant,
        'submission': submission,
        'bonusPoints': bonus_points,
        'completedNow': completed_now,
    }


def complete_manually(challenge: Dict[str, Any], user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Mark the caller's participation completed; a second call is a conflict"""
    participant = find_participant(challenge, user_id)
    if participant and participant.get('completedAt'):
        raise ConflictError("Challenge already completed")

    if participant is None:
        participant = new_participant(user_id, now)
        challenge.setdefault('participants', []).append(participant)

    participant['completed'] = True
    participant['completedAt'] = (now or utc_now()).isoformat()
    participant['progress'] = 100
    return participant


def set_progress(challenge: Dict[str, Any], user_id: str, progress: float) -> Dict[str, Any]:
    participant = find_participant(challenge, user_id)
    if participant is None:
        raise NotFoundError("You are not participating in this challenge")

    participant['progress'] = min(100, max(0, progress))
    if participant['progress'] >= 100:
        participant['completed'] = True
    return participant


def challenge_badge(challenge: Dict[str, Any]) -> Tuple[str, str]:
    title = challenge.get('title')
    return (
        f"Challenge Champion: {title}",
        f"Completed the {title} challenge and earned {challenge.get('pointsReward', 0)} points",
    )


def user_challenge_stats(challenges, user_id: str) -> Dict[str, Any]:
    joined = [c for c in challenges if find_participant(c, user_id)]
    completed = [c for c in joined if find_participant(c, user_id).get('completed')]
    total = len(joined)
    return {
        'totalChallenges': total,
        'completedChallenges': len(completed),
        'pointsFromChallenges': sum(c.get('pointsReward', 0) for c in completed),
        'completionRate': round(len(completed) / total * 100) if total else 0,
    }
