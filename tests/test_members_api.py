"""
Tests for family members, shared family calendars and meal plans.
"""


class TestMembers:

    def test_create_and_list(self, client, auth_headers):
        response = client.post("/members", json={"name": "  Mia  ", "ical_url": "https://school.example/mia.ics"}, headers=auth_headers)

        assert response.status_code == 201
        member = response.json()
        assert member["name"] == "Mia"
        assert member["color"] == "#E9D5FF"
        assert member["hidden"] is False

        listed = client.get("/members", headers=auth_headers).json()
        assert [m["id"] for m in listed] == [member["id"]]

    def test_update_and_hide(self, client, auth_headers):
        member_id = client.post("/members", json={"name": "Leo"}, headers=auth_headers).json()["id"]

        response = client.patch(f"/members/{member_id}", json={"hidden": True, "color": "#FBCFE8"}, headers=auth_headers)

        assert response.json()["hidden"] is True
        assert response.json()["color"] == "#FBCFE8"
        assert response.json()["name"] == "Leo"

    def test_delete(self, client, auth_headers):
        member_id = client.post("/members", json={"name": "Leo"}, headers=auth_headers).json()["id"]

        assert client.delete(f"/members/{member_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/members/{member_id}", headers=auth_headers).status_code == 404

    def test_scoped_to_family(self, client, auth_headers, other_family_headers):
        member_id = client.post("/members", json={"name": "Leo"}, headers=auth_headers).json()["id"]

        assert client.get(f"/members/{member_id}", headers=other_family_headers).status_code == 404
        assert client.get("/members", headers=other_family_headers).json() == []

    def test_name_required(self, client, auth_headers):
        assert client.post("/members", json={"name": ""}, headers=auth_headers).status_code == 422


class TestFamilyCalendars:

    def test_create_requires_url(self, client, auth_headers):
        response = client.post("/family-calendars", json={"name": "Holidays", "ical_url": ""}, headers=auth_headers)
        assert response.status_code == 422

    def test_crud(self, client, auth_headers):
        created = client.post("/family-calendars", json={
            "name": "Holidays",
            "ical_url": "https://council.example/terms.ics",
        }, headers=auth_headers)
        assert created.status_code == 201
        calendar_id = created.json()["id"]
        assert created.json()["color"] == "#6366F1"

        updated = client.patch(f"/family-calendars/{calendar_id}", json={"name": "Term dates"}, headers=auth_headers)
        assert updated.json()["name"] == "Term dates"

        assert client.delete(f"/family-calendars/{calendar_id}", headers=auth_headers).status_code == 204
        assert client.get("/family-calendars", headers=auth_headers).json() == []


class TestMealPlans:

    def test_create_and_filter_by_date(self, client, auth_headers):
        client.post("/meal-plans", json={"date": "2024-03-11", "meal_type": "lunch", "food_name": "Soup"}, headers=auth_headers)
        client.post("/meal-plans", json={"date": "2024-03-12", "meal_type": "dinner"}, headers=auth_headers)

        on_day = client.get("/meal-plans", params={"date": "2024-03-11"}, headers=auth_headers).json()
        assert [plan["food_name"] for plan in on_day] == ["Soup"]

        in_range = client.get("/meal-plans", params={"start": "2024-03-11", "end": "2024-03-12"}, headers=auth_headers).json()
        assert len(in_range) == 2

    def test_invalid_meal_type(self, client, auth_headers):
        response = client.post("/meal-plans", json={"date": "2024-03-11", "meal_type": "brunch"}, headers=auth_headers)
        assert response.status_code == 422

    def test_update_and_delete(self, client, auth_headers):
        plan_id = client.post("/meal-plans", json={"date": "2024-03-11", "meal_type": "lunch"}, headers=auth_headers).json()["id"]

        updated = client.patch(f"/meal-plans/{plan_id}", json={"food_name": "Pasta"}, headers=auth_headers)
        assert updated.json()["food_name"] == "Pasta"
        assert updated.json()["meal_type"] == "lunch"

        assert client.delete(f"/meal-plans/{plan_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/meal-plans/{plan_id}", headers=auth_headers).status_code == 404
