"""
Endpoint tests through the ASGI app
"""
from ecolearn import dynamo
from ecolearn.config import get_settings
from ecolearn.logic.leaderboard import paginate, rank_users


class TestHealth:

    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "ecolearn"

    async def test_health_reports_dynamodb(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "healthy", "dynamodb": "connected"}

    async def test_docs_titled_from_settings(self, client):
        response = await client.get("/openapi.json")
        assert response.json()["info"]["title"] == get_settings().APP_NAME


class TestErrorEnvelope:

    async def test_missing_token(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code in (401, 403)
        assert response.json()["success"] is False

    async def test_invalid_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authorized to access this route"}

    async def test_validation_error(self, client):
        response = await client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_domain_error(self, client, create_account, auth_headers):
        user = await create_account()
        response = await client.get("/api/modules/missing", headers=auth_headers(user))
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Module not found"}


class TestModuleFlow:

    async def test_student_cannot_create(self, client, create_account, auth_headers):
        student = await create_account()
        response = await client.post("/api/modules", headers=auth_headers(student), json={
            "title": "Energy", "description": "...", "category": "Renewable Energy",
        })
        assert response.status_code == 403

    async def test_complete_module_over_http(self, client, create_account, auth_headers):
        teacher = await create_account(role='teacher')
        student = await create_account()

        created = await client.post("/api/modules", headers=auth_headers(teacher), json={
            "title": "Energy",
            "description": "...",
            "category": "Renewable Energy",
            "points": 30,
            "lessons": [{"title": "Sun", "content": "...", "duration": 5, "order": 1}],
        })
        assert created.status_code == 201
        module_id = created.json()["data"]["module_id"]

        early = await client.put(f"/api/modules/{module_id}/complete", headers=auth_headers(student))
        assert early.status_code == 404

        await client.put(f"/api/modules/{module_id}/progress", headers=auth_headers(student), json={"lessonIndex": 0})
        done = await client.put(f"/api/modules/{module_id}/complete", headers=auth_headers(student))
        assert done.status_code == 200
        assert done.json()["data"]["pointsEarned"] == 30

        again = await client.put(f"/api/modules/{module_id}/complete", headers=auth_headers(student))
        assert again.status_code == 409

        me = await client.get("/api/auth/me", headers=auth_headers(student))
        assert me.json()["data"]["points"] == 30
        assert "passwordHash" not in me.json()["data"]

    async def test_incomplete_lessons_reports_counts(self, client, create_account, auth_headers):
        teacher = await create_account(role='teacher')
        student = await create_account()
        created = await client.post("/api/modules", headers=auth_headers(teacher), json={
            "title": "Energy",
            "description": "...",
            "category": "Renewable Energy",
            "lessons": [
                {"title": "Sun", "content": "...", "duration": 5, "order": 1},
                {"title": "Wind", "content": "...", "duration": 5, "order": 2},
            ],
        })
        module_id = created.json()["data"]["module_id"]

        await client.put(f"/api/modules/{module_id}/progress", headers=auth_headers(student), json={"lessonIndex": 0})
        response = await client.put(f"/api/modules/{module_id}/complete", headers=auth_headers(student))

        assert response.status_code == 400
        assert response.json()["completed"] == 1
        assert response.json()["total"] == 2


class TestRedeemFlow:

    async def test_out_of_stock_is_conflict(self, client, create_account, auth_headers):
        admin = await create_account(role='admin', school='ADMIN')
        student = await create_account(points=500)

        created = await client.post("/api/redeem/admin/rewards", headers=auth_headers(admin), json={
            "name": "Seed Kit", "description": "...", "pointsRequired": 100, "stock": 1,
        })
        reward_id = created.json()["data"]["reward_id"]

        first = await client.post(f"/api/redeem/{reward_id}", headers=auth_headers(student))
        assert first.status_code == 200
        assert first.json()["data"]["remainingPoints"] == 400

        second = await client.post(f"/api/redeem/{reward_id}", headers=auth_headers(student))
        assert second.status_code == 409
        assert second.json()["message"] == "This reward is out of stock"

    async def test_not_enough_points(self, client, create_account, auth_headers):
        admin = await create_account(role='admin', school='ADMIN')
        student = await create_account(points=10)
        created = await client.post("/api/redeem/admin/rewards", headers=auth_headers(admin), json={
            "name": "Seed Kit", "description": "...", "pointsRequired": 100,
        })

        response = await client.post(f"/api/redeem/{created.json()['data']['reward_id']}", headers=auth_headers(student))

        assert response.status_code == 400
        assert (await dynamo.get_user(student['user_id']))['points'] == 10


class TestLeaderboard:

    def test_ranking_tiebreaks(self):
        users = [
            {'user_id': 'a', 'points': 50, 'modulesCompleted': 1, 'streak': 0},
            {'user_id': 'b', 'points': 50, 'modulesCompleted': 2, 'streak': 0},
            {'user_id': 'c', 'points': 80, 'modulesCompleted': 0, 'streak': 0},
        ]
        ranked = rank_users(users)
        assert [e['userId'] for e in ranked] == ['c', 'b', 'a']
        assert [e['rank'] for e in ranked] == [1, 2, 3]

    def test_pagination(self):
        entries = [{'userId': str(i)} for i in range(25)]
        page = paginate(entries, page=3, limit=10)
        assert len(page['leaderboard']) == 5
        assert page['pagination'] == {'page': 3, 'limit': 10, 'total': 25, 'pages': 3}

    async def test_weekly_leaderboard_endpoint(self, client, create_account, auth_headers):
        await create_account(weeklyPoints=5, points=100)
        top = await create_account(weeklyPoints=40, points=40)
        await create_account(role='teacher', weeklyPoints=999)

        response = await client.get("/api/leaderboard/users", params={"timeframe": "weekly"})
        board = response.json()["data"]["leaderboard"]

        assert len(board) == 2
        assert board[0]['userId'] == top['user_id']
        assert board[0]['points'] == 40

        rank = await client.get("/api/leaderboard/user-rank", params={"timeframe": "weekly"}, headers=auth_headers(top))
        assert rank.json()["data"]["rank"] == 1

    async def test_invalid_timeframe(self, client):
        response = await client.get("/api/leaderboard/users", params={"timeframe": "yearly"})
        assert response.status_code == 400


class TestDateFields:
    """Malformed dates are rejected as validation errors"""

    async def test_event_with_free_text_date(self, client, create_account, auth_headers):
        admin = await create_account(role='admin', school='ADMIN')
        response = await client.post("/api/events", headers=auth_headers(admin), json={
            "name": "Beach Cleanup", "description": "...", "date": "next friday",
        })
        assert response.status_code == 400
        assert "Invalid date" in response.json()["message"]

    async def test_event_update_with_bad_deadline(self, client, create_account, auth_headers):
        admin = await create_account(role='admin', school='ADMIN')
        created = await client.post("/api/events", headers=auth_headers(admin), json={
            "name": "Beach Cleanup", "description": "...", "date": "2030-06-01T09:00:00Z",
        })
        assert created.status_code == 201
        assert created.json()["data"]["date"] == "2030-06-01T09:00:00+00:00"

        event_id = created.json()["data"]["event_id"]
        response = await client.put(f"/api/events/{event_id}", headers=auth_headers(admin), json={
            "lastDateToRegister": "soon",
        })
        assert response.status_code == 400

    async def test_challenge_with_free_text_start(self, client, create_account, auth_headers):
        teacher = await create_account(role='teacher')
        response = await client.post("/api/challenges", headers=auth_headers(teacher), json={
            "title": "Lights Out", "description": "...", "category": "energy-conservation",
            "startDate": "tomorrow",
        })
        assert response.status_code == 400
        assert response.json()["success"] is False
