def test_students_require_session(client, users):
    assert client.get("/api/students").status_code == 401


def test_list_only_students_sorted_by_name(client, lead_headers):
    body = client.get("/api/students", headers=lead_headers).json()
    assert [s["email"] for s in body] == ["alice@example.com", "bob@example.com", "carol@example.com"]
    assert set(body[0]) == {"user_id", "name", "email", "sec", "year", "role"}


def test_filters(client, lead_headers):
    by_section = client.get("/api/students", params={"section": "A", "year": "all"}, headers=lead_headers).json()
    assert [s["name"] for s in by_section] == ["Alice Kumar", "Carol Singh"]

    by_year = client.get("/api/students", params={"year": "2027"}, headers=lead_headers).json()
    assert [s["name"] for s in by_year] == ["Bob Raj"]

    by_search = client.get("/api/students", params={"search": "SINGH"}, headers=lead_headers).json()
    assert [s["name"] for s in by_search] == ["Carol Singh"]


def test_bad_year_is_400(client, lead_headers):
    assert client.get("/api/students", params={"year": "twenty"}, headers=lead_headers).status_code == 400


def test_counts(client, lead_headers):
    client.post("/api/staybacks", json={"team": "Media", "title": "Shoot", "date": "2024-03-01",
                                        "students": ["alice@example.com", "bob@example.com"]}, headers=lead_headers)
    client.post("/api/staybacks", json={"team": "Media", "title": "Edit", "date": "2024-03-02",
                                        "students": ["alice@example.com"]}, headers=lead_headers)
    client.post("/api/meetings", json={"team": "Media", "title": "Plan", "date": "2024-03-01",
                                       "from_time": "10:00", "to_time": "11:00",
                                       "students": ["alice@example.com"]}, headers=lead_headers)

    counts = {c["email"]: c for c in client.get("/api/counts", headers=lead_headers).json()}
    assert counts["alice@example.com"] == {"email": "alice@example.com", "stayback_cnt": 2, "meeting_cnt": 1}
    assert counts["bob@example.com"]["stayback_cnt"] == 1
    assert counts["carol@example.com"] == {"email": "carol@example.com", "stayback_cnt": 0, "meeting_cnt": 0}


def test_single_student(client, users, lead_headers):
    body = client.get(f"/api/students/{users['bob'].id}", headers=lead_headers).json()
    assert body["name"] == "Bob Raj"
    assert client.get("/api/students/999", headers=lead_headers).status_code == 404
