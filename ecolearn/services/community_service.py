"""
Community Service

Events (registration, attendance) and surveys (one-time completion
points) credit and debit through the points ledger. Platform reviews are
moderated by admins before they are shown.
"""
import logging
from typing import Dict, Any, List, Optional

from ecolearn import dynamo, dynamo_community
from ecolearn.errors import NotFoundError
from ecolearn.logic import events as event_rules
from ecolearn.logic import reviews as review_rules
from ecolearn.logic.gamification import apply_points
from ecolearn.logic.leaderboard import paginate
from ecolearn.services.points_ledger import update_user_points

logger = logging.getLogger(__name__)


class EventService:

    async def get_event(self, event_id: str) -> Dict[str, Any]:
        event = await dynamo_community.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def view(self, event: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **event,
            'registrationOpen': event_rules.registration_open(event),
            'registrationStatus': event_rules.registration_status(event),
        }

    async def upcoming(self, limit: int = 10) -> List[Dict[str, Any]]:
        now = dynamo.utc_now()
        events = [
            e for e in await dynamo_community.list_events(active_only=True)
            if (dynamo.parse_time(e.get('date')) or now) >= now
        ]
        events.sort(key=lambda e: e.get('date', ''))
        return [self.view(e) for e in events[:limit]]

    async def list_all(self) -> List[Dict[str, Any]]:
        events = await dynamo_community.list_events()
        return [self.view(e) for e in sorted(events, key=lambda e: e.get('date', ''), reverse=True)]

    async def registered_for(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [
            self.view(e) for e in await dynamo_community.list_events()
            if event_rules.find_registration(e, user['user_id'])
        ]

    async def create(self, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        event = {
            **data,
            'event_id': dynamo.new_id(),
            'currentParticipants': 0,
            'registrations': [],
            'createdBy': user['user_id'],
            'createdAt': dynamo.utc_now().isoformat(),
        }
        event_rules.validate_schedule(event)
        await dynamo_community.save_event(event)
        return event

    async def update(self, event_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        event = await self.get_event(event_id)
        event.update(updates)
        event_rules.validate_schedule(event)
        return await dynamo_community.save_event(event)

    async def delete(self, event_id: str) -> None:
        await self.get_event(event_id)
        await dynamo_community.delete_event(event_id)

    async def register(
        self,
        user: Dict[str, Any],
        event_id: str,
        registration_data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        event = await self.get_event(event_id)
        registration = event_rules.add_registration(event, user, registration_data)
        await dynamo_community.save_event(event)

        points = registration['pointsAwarded']
        if points > 0:
            apply_points(user, points, 'event_registration', f"Registered for event: {event['name']}", event_id)
            await dynamo.save_user(user)

        return {
            'event': event['name'],
            'registrationLink': event.get('registrationLink'),
            'pointsAwarded': points,
        }

    async def unregister(self, user: Dict[str, Any], event_id: str) -> Dict[str, Any]:
        """Remove the registration and take back the points it earned"""
        event = await self.get_event(event_id)
        registration = event_rules.remove_registration(event, user['user_id'])
        await dynamo_community.save_event(event)

        points = registration.get('pointsAwarded') or 0
        if points > 0:
            await update_user_points(
                user['user_id'],
                -points,
                'event_registration',
                f"Unregistered from event: {event['name']}",
                event_id
            )
        return {'pointsDeducted': points}

    async def registrations(self, event_id: str) -> List[Dict[str, Any]]:
        event = await self.get_event(event_id)
        return event.get('registrations', [])

    async def confirm_attendance(self, event_id: str, registration_id: str) -> Dict[str, Any]:
        event = await self.get_event(event_id)
        registration = event_rules.confirm_attendance(event, registration_id)
        await dynamo_community.save_event(event)
        return registration

    async def bulk_attendance(self, event_id: str, attendance: List[Dict[str, Any]]) -> int:
        event = await self.get_event(event_id)
        updated = event_rules.bulk_mark_attendance(event, attendance)
        await dynamo_community.save_event(event)
        return updated

    async def statistics(self) -> Dict[str, Any]:
        now = dynamo.utc_now()
        events = await dynamo_community.list_events(active_only=True)
        upcoming = [e for e in events if (dynamo.parse_time(e.get('date')) or now) >= now]
        return {
            'totalEvents': len(events),
            'upcomingEvents': len(upcoming),
            'pastEvents': len(events) - len(upcoming),
            'eventsWithOpenRegistration': sum(1 for e in events if event_rules.registration_open(e, now)),
            'totalRegistrations': sum(e.get('currentParticipants', 0) for e in events),
        }


class SurveyService:

    async def get_survey(self, survey_id: str) -> Dict[str, Any]:
        survey = await dynamo_community.get_survey(survey_id)
        if not survey:
            raise NotFoundError("Survey not found")
        return survey

    def view(self, survey: Dict[str, Any], user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        data = {k: v for k, v in survey.items() if k != 'submissions'}
        data['submissionCount'] = len(survey.get('submissions', []))
        if user is not None:
            data['completed'] = survey['survey_id'] in user.get('completedSurveys', [])
        return data

    async def list_active(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        surveys = await dynamo_community.list_surveys(active_only=True)
        return [self.view(s, user) for s in surveys]

    async def list_all(self) -> List[Dict[str, Any]]:
        return [self.view(s) for s in await dynamo_community.list_surveys()]

    async def create(self, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        survey = {
            **data,
            'survey_id': dynamo.new_id(),
            'submissions': [],
            'createdBy': user['user_id'],
            'createdAt': dynamo.utc_now().isoformat(),
        }
        await dynamo_community.save_survey(survey)
        return survey

    async def update(self, survey_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        survey = await self.get_survey(survey_id)
        survey.update(updates)
        return await dynamo_community.save_survey(survey)

    async def delete(self, survey_id: str) -> None:
        await self.get_survey(survey_id)
        await dynamo_community.delete_survey(survey_id)

    async def submissions(self, survey_id: str) -> List[Dict[str, Any]]:
        survey = await self.get_survey(survey_id)
        return survey.get('submissions', [])

    async def submit(self, user: Dict[str, Any], survey_id: str, answers: Dict[str, Any]) -> Dict[str, Any]:
        """
        Record a survey response. Points are credited only the first time
        the caller completes this survey.
        """
        survey = await self.get_survey(survey_id)
        survey.setdefault('submissions', []).append({
            'userId': user['user_id'],
            'answers': answers,
            'submittedAt': dynamo.utc_now().isoformat(),
        })
        await dynamo_community.save_survey(survey)

        already_completed = survey_id in user.get('completedSurveys', [])
        points_earned = 0
        if not already_completed:
            points_earned = survey.get('points', 0)
            apply_points(user, points_earned, 'survey_completed', f"Completed survey: {survey['title']}", survey_id)
            user.setdefault('completedSurveys', []).append(survey_id)
            await dynamo.save_user(user)

        return {'pointsEarned': points_earned, 'alreadyCompleted': already_completed}


class PlatformReviewService:

    async def get_review(self, review_id: str) -> Dict[str, Any]:
        review = await dynamo_community.get_review(review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    async def _reviews(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        reviews = await dynamo_community.list_reviews(status)
        return sorted(reviews, key=lambda r: r.get('createdAt', ''), reverse=True)

    async def approved(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        return paginate(await self._reviews('approved'), page, limit, key='reviews')

    async def latest(self, count: int = 3) -> List[Dict[str, Any]]:
        return (await self._reviews('approved'))[:count]

    async def pending(self) -> List[Dict[str, Any]]:
        return await self._reviews('pending')

    async def list_for_admin(self, status: Optional[str] = None, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        if status == 'all':
            status = None
        return paginate(await self._reviews(status), page, limit, key='reviews')

    async def submit(self, user: Dict[str, Any], rating: int, comment: str) -> Dict[str, Any]:
        existing = await dynamo_community.get_user_review(user['user_id'])
        review_rules.ensure_can_submit(existing)
        if existing:
            await dynamo_community.delete_review(existing['review_id'])

        review = review_rules.new_review(user, rating, comment)
        await dynamo_community.save_review(review)
        logger.info(f"Review {review['review_id']} submitted by {user['user_id']}")
        return review

    async def mine(self, user: Dict[str, Any]) -> Dict[str, Any]:
        review = await dynamo_community.get_user_review(user['user_id'])
        if not review:
            raise NotFoundError("You have not submitted any review yet")
        return review

    async def update_mine(self, user: Dict[str, Any], rating: int, comment: str) -> Dict[str, Any]:
        review = await dynamo_community.get_user_review(user['user_id'])
        if not review:
            raise NotFoundError("Review not found")
        review_rules.revise(review, rating, comment)
        return await dynamo_community.save_review(review)

    async def delete_mine(self, user: Dict[str, Any]) -> None:
        review = await dynamo_community.get_user_review(user['user_id'])
        if not review:
            raise NotFoundError("Review not found")
        await dynamo_community.delete_review(review['review_id'])

    async def set_status(self, review_id: str, status: str) -> Dict[str, Any]:
        review = await self.get_review(review_id)
        review_rules.set_status(review, status)
        logger.info(f"Review {review_id} {status}")
        return await dynamo_community.save_review(review)

    async def delete(self, review_id: str) -> None:
        await self.get_review(review_id)
        await dynamo_community.delete_review(review_id)


event_service = EventService()
survey_service = SurveyService()
review_service = PlatformReviewService()
