def _auth_headers(token: str) -> dict:
    return {"x-auth-token": token}


def _login(client, *, email: str, password: str):
    return client.post("/auth", json={"email": email, "password": password})


def _new_post(client, token: str, text: str = "hello") -> dict:
    r = client.post("/posts", json={"text": text}, headers=_auth_headers(token))
    assert r.status_code == 200, r.text
    return r.json()


def test_posts_require_auth(client):
    assert client.get("/posts").status_code == 401
    assert client.post("/posts", json={"text": "x"}).status_code == 401
    assert client.put("/posts/like/1").status_code == 401


def test_post_text_is_required(client, alice_token):
    r = client.post("/posts", json={"text": "   "}, headers=_auth_headers(alice_token))
    assert r.status_code == 400, r.text
    assert r.json()["errors"] == [{"param": "text", "msg": "Text is required"}]


def test_end_to_end_scenario(client):
    r = client.post("/users", json={"name": "Alice", "email": "a@x.com", "password": "secret1"})
    assert r.status_code == 200, r.text
    a = _auth_headers(r.json()["token"])

    r = _login(client, email="a@x.com", password="wrong-password")
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid credentials"

    post = client.post("/posts", json={"text": "hello"}, headers=a).json()
    assert post["likes"] == []
    assert post["comments"] == []
    alice_id = post["user"]

    post = client.put(f"/posts/like/{post['id']}", headers=a).json()
    assert [like["user"] for like in post["likes"]] == [alice_id]

    post = client.put(f"/posts/unlike/{post['id']}", headers=a).json()
    assert post["likes"] == []

    post = client.put(f"/posts/comment/{post['id']}", json={"text": "nice"}, headers=a).json()
    assert len(post["comments"]) == 1
    comment = post["comments"][0]
    assert comment["text"] == "nice"
    assert comment["user"] == alice_id
    assert comment["name"] == "Alice"

    r = client.post("/users", json={"name": "Bob", "email": "b@x.com", "password": "secret2"})
    b = _auth_headers(r.json()["token"])
    r = client.delete(f"/posts/comment/{post['id']}/{comment['id']}", headers=b)
    assert r.status_code == 403, r.text


def test_like_twice_keeps_one_like(client, alice_token, bob_token):
    post = _new_post(client, alice_token)
    headers = _auth_headers(bob_token)

    assert client.put(f"/posts/like/{post['id']}", headers=headers).status_code == 200
    r = client.put(f"/posts/like/{post['id']}", headers=headers)
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "Post already liked"

    post = client.get(f"/posts/{post['id']}", headers=headers).json()
    assert len(post["likes"]) == 1


def test_likes_are_newest_first(client, alice_token, bob_token):
    post = _new_post(client, alice_token)
    client.put(f"/posts/like/{post['id']}", headers=_auth_headers(alice_token))
    post = client.put(f"/posts/like/{post['id']}", headers=_auth_headers(bob_token)).json()
    alice_id = post["user"]
    assert len(post["likes"]) == 2
    assert post["likes"][1]["user"] == alice_id


def test_unlike_before_like_fails(client, alice_token):
    post = _new_post(client, alice_token)
    r = client.put(f"/posts/unlike/{post['id']}", headers=_auth_headers(alice_token))
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "Post has not yet been liked"


def test_unknown_post_is_not_found(client, alice_token):
    headers = _auth_headers(alice_token)
    assert client.get("/posts/999", headers=headers).status_code == 404
    assert client.delete("/posts/999", headers=headers).status_code == 404
    assert client.put("/posts/like/999", headers=headers).status_code == 404
    assert client.put("/posts/unlike/999", headers=headers).status_code == 404
    assert client.put("/posts/comment/999", json={"text": "x"}, headers=headers).status_code == 404
    assert client.delete("/posts/comment/999/1", headers=headers).status_code == 404


def test_only_author_can_delete_post(client, alice_token, bob_token):
    post = _new_post(client, alice_token)

    r = client.delete(f"/posts/{post['id']}", headers=_auth_headers(bob_token))
    assert r.status_code == 403, r.text

    r = client.delete(f"/posts/{post['id']}", headers=_auth_headers(alice_token))
    assert r.status_code == 200, r.text
    assert client.get(f"/posts/{post['id']}", headers=_auth_headers(alice_token)).status_code == 404


def test_delete_comment_removes_only_that_comment(client, alice_token, bob_token):
    post = _new_post(client, alice_token)
    pid = post["id"]
    a, b = _auth_headers(alice_token), _auth_headers(bob_token)

    client.put(f"/posts/comment/{pid}", json={"text": "first"}, headers=a)
    client.put(f"/posts/comment/{pid}", json={"text": "second"}, headers=b)
    post = client.put(f"/posts/comment/{pid}", json={"text": "third"}, headers=a).json()
    assert [c["text"] for c in post["comments"]] == ["third", "second", "first"]

    second = post["comments"][1]
    r = client.delete(f"/posts/comment/{pid}/{second['id']}", headers=a)
    assert r.status_code == 403, r.text

    r = client.delete(f"/posts/comment/{pid}/{second['id']}", headers=b)
    assert r.status_code == 200, r.text
    assert [c["text"] for c in r.json()["comments"]] == ["third", "first"]

    r = client.delete(f"/posts/comment/{pid}/{second['id']}", headers=b)
    assert r.status_code == 404, r.text
    assert r.json()["error"] == "Comment does not exist"


def test_list_posts_newest_first(client, alice_token):
    _new_post(client, alice_token, "one")
    _new_post(client, alice_token, "two")
    r = client.get("/posts", headers=_auth_headers(alice_token))
    assert r.status_code == 200, r.text
    assert [p["text"] for p in r.json()] == ["two", "one"]


def test_author_snapshot_is_not_updated(client, db_session, alice_token):
    from backend.devconnector.models.user import User

    post = _new_post(client, alice_token)
    client.put(f"/posts/comment/{post['id']}", json={"text": "c"}, headers=_auth_headers(alice_token))

    user = db_session.query(User).filter(User.email == "a@x.com").first()
    user.name = "Alice Renamed"
    db_session.commit()

    post = client.get(f"/posts/{post['id']}", headers=_auth_headers(alice_token)).json()
    assert post["name"] == "Alice"
    assert post["comments"][0]["name"] == "Alice"
