"""
Tests for platform reviews and their moderation
"""
import pytest

from ecolearn.errors import NotFoundError, ValidationError
from ecolearn.logic import reviews as rules
from ecolearn.services.community_service import review_service


class TestReviewRules:

    def test_only_rejected_review_can_be_replaced(self):
        rules.ensure_can_submit(None)
        rules.ensure_can_submit({'status': 'rejected'})
        for status in ('pending', 'approved'):
            with pytest.raises(ValidationError, match="already submitted"):
                rules.ensure_can_submit({'status': status})

    def test_revise_goes_back_to_moderation(self):
        review = {'rating': 2, 'comment': "meh", 'status': 'approved'}
        rules.revise(review, 5, "Much better now")
        assert review == {'rating': 5, 'comment': "Much better now", 'status': 'pending'}

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            rules.set_status({'status': 'pending'}, 'archived')


class TestReviewService:

    async def test_submit_and_approve(self, create_account):
        student = await create_account(name="Ana")
        review = await review_service.submit(student, 5, "Loved the water module")

        assert review['status'] == 'pending'
        assert review['userName'] == "Ana"
        assert (await review_service.approved())['reviews'] == []

        await review_service.set_status(review['review_id'], 'approved')

        approved = await review_service.approved()
        assert [r['review_id'] for r in approved['reviews']] == [review['review_id']]
        assert approved['pagination']['total'] == 1
        assert len(await review_service.latest()) == 1

    async def test_one_review_per_account(self, create_account):
        student = await create_account()
        await review_service.submit(student, 4, "Good")

        with pytest.raises(ValidationError):
            await review_service.submit(student, 5, "Great")

    async def test_rejected_review_replaced(self, create_account):
        student = await create_account()
        first = await review_service.submit(student, 1, "Spam")
        await review_service.set_status(first['review_id'], 'rejected')

        second = await review_service.submit(student, 4, "Honest take")

        mine = await review_service.mine(student)
        assert mine['review_id'] == second['review_id']
        with pytest.raises(NotFoundError):
            await review_service.get_review(first['review_id'])

    async def test_update_and_delete_mine(self, create_account):
        student = await create_account()
        review = await review_service.submit(student, 3, "Okay")
        await review_service.set_status(review['review_id'], 'approved')

        updated = await review_service.update_mine(student, 4, "Better")
        assert updated['status'] == 'pending'
        assert [r['review_id'] for r in await review_service.pending()] == [review['review_id']]

        await review_service.delete_mine(student)
        with pytest.raises(NotFoundError, match="not submitted"):
            await review_service.mine(student)


class TestReviewApi:

    async def test_moderation_requires_admin(self, client, create_account, auth_headers):
        student = await create_account()
        admin = await create_account(role='admin')

        created = await client.post("/api/reviews", headers=auth_headers(student), json={"rating": 5, "comment": "Great"})
        assert created.status_code == 201
        review_id = created.json()["data"]["review_id"]

        assert (await client.put(f"/api/reviews/admin/approve/{review_id}", headers=auth_headers(student))).status_code == 403

        approved = await client.put(f"/api/reviews/admin/approve/{review_id}", headers=auth_headers(admin))
        assert approved.json()["data"]["status"] == 'approved'

        public = await client.get("/api/reviews")
        assert public.json()["data"]["pagination"]["total"] == 1

    async def test_rating_out_of_range(self, client, create_account, auth_headers):
        student = await create_account()
        response = await client.post("/api/reviews", headers=auth_headers(student), json={"rating": 6, "comment": "Wow"})
        assert response.status_code == 400
