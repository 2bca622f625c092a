class TestE2E:
    def test_complete_collaboration_journey(self, client):
        # 1. signup and login
        r = client.post("/signup", json={"name": "Alice", "email": "alice@example.com", "password": "alicepw1"})
        assert r.status_code == 201
        r = client.post("/signup", json={"name": "Bob", "email": "bob@example.com", "password": "bobpw123"})
        assert r.status_code == 201
        bob_id = r.json()["id"]

        r = client.post("/login", json={"username": "alice@example.com", "password": "alicepw1"})
        assert r.status_code == 200
        alice = {"Authorization": f"Bearer {r.json()['access_token']}"}
        r = client.post("/login", json={"username": "bob@example.com", "password": "bobpw123"})
        bob = {"Authorization": f"Bearer {r.json()['access_token']}"}

        # 2. alice creates P1 and is its owner
        r = client.post("/projects", json={"name": "P1"}, headers=alice)
        assert r.status_code == 201
        project_id = r.json()["id"]
        members = client.get(f"/projects/{project_id}/members", headers=alice).json()
        assert [(m["user"]["email"], m["role"]) for m in members] == [("alice@example.com", "owner")]

        # 3. alice finds bob and adds him as member
        found = client.get("/users/search", params={"email": "bob@example.com"}, headers=alice).json()
        assert found["id"] == bob_id
        r = client.post(f"/projects/{project_id}/members", json={"user_id": bob_id, "role": "member"}, headers=alice)
        assert r.status_code == 201

        # 4. bob creates a task without an assignee
        r = client.post("/tasks", json={"project_id": project_id, "title": "Design homepage"}, headers=bob)
        assert r.status_code == 201
        task = r.json()
        assert task["assignee_id"] == bob_id

        # 5. alice marks it done; bob may not touch it
        r = client.put(f"/tasks/{task['id']}/update", json={"status": "DONE"}, headers=alice)
        assert r.status_code == 200
        assert r.json()["status"] == "DONE"

        r = client.put(f"/tasks/{task['id']}/update", json={"status": "TODO"}, headers=bob)
        assert r.status_code == 403

        # 6. alice can audit bob's workload
        tasks = client.get(f"/users/{bob_id}/tasks", headers=alice).json()
        assert [(t["id"], t["status"]) for t in tasks] == [(task["id"], "DONE")]

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok"}

    def test_run_serves_app_with_configured_address(self, monkeypatch):
        import app.main as main

        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
        main.run()
        assert calls == [(("app.main:app",), {"host": main.HOST, "port": main.PORT})]
