def test_create_gig_requires_auth(client):
    response = client.post("/gigs", json={"title": "T", "description": "D", "budget": 100})
    assert response.status_code == 401


def test_create_and_get_gig(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    gig = make_gig(owner, title="Logo design", budget=250)

    assert gig["status"] == "open"
    assert gig["ownerId"] == owner["id"]
    assert gig["owner"]["name"] == "Owner"
    assert gig["hiredBidId"] is None

    # 單筆查詢為公開 API
    response = client.get(f"/gigs/{gig['gigId']}")
    assert response.status_code == 200
    assert response.json()["gig"]["title"] == "Logo design"


def test_get_missing_gig(client):
    response = client.get("/gigs/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Gig not found"}


def test_create_gig_rejects_non_positive_budget(client, make_user):
    owner = make_user("Owner", "owner@example.com")
    response = client.post(
        "/gigs",
        json={"title": "Logo", "description": "A logo", "budget": 0},
        headers=owner["headers"],
    )
    assert response.status_code == 400
    assert any(error.startswith("budget") for error in response.json()["errors"])


def test_search_matches_title_or_description_case_insensitive(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    by_title = make_gig(owner, title="React dashboard", description="Admin panel")
    by_description = make_gig(owner, title="Frontend work", description="Needs REACT hooks")
    make_gig(owner, title="Django API", description="Backend only")

    response = client.get("/gigs", params={"search": "react"})
    assert response.status_code == 200
    body = response.json()
    ids = {gig["gigId"] for gig in body["gigs"]}
    assert ids == {by_title["gigId"], by_description["gigId"]}
    assert body["count"] == 2


def test_search_treats_wildcards_literally(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    make_gig(owner, title="Discount 100% guaranteed")
    make_gig(owner, title="Plain gig")

    response = client.get("/gigs", params={"search": "%"})
    assert response.json()["count"] == 1


def test_list_filters_by_status(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    open_gig = make_gig(owner, title="React widget")
    assigned_gig = make_gig(owner, title="React app")
    bid = make_bid(freelancer, assigned_gig["gigId"])
    client.patch(f"/bids/{bid['bidId']}/hire", headers=owner["headers"])

    default = client.get("/gigs", params={"search": "React"}).json()
    assert [gig["gigId"] for gig in default["gigs"]] == [open_gig["gigId"]]

    assigned = client.get("/gigs", params={"search": "React", "status": "assigned"}).json()
    assert [gig["gigId"] for gig in assigned["gigs"]] == [assigned_gig["gigId"]]


def test_list_rejects_unknown_status(client):
    response = client.get("/gigs", params={"status": "closed"})
    assert response.status_code == 400


def test_my_gigs_lists_only_callers_gigs(client, make_user, make_gig):
    alice = make_user("Alice", "alice@example.com")
    bob = make_user("Bob", "bob@example.com")
    mine = make_gig(alice)
    make_gig(bob)

    response = client.get("/gigs/my/gigs", headers=alice["headers"])
    assert response.status_code == 200
    assert [gig["gigId"] for gig in response.json()["gigs"]] == [mine["gigId"]]


def test_update_gig_only_overwrites_present_fields(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    gig = make_gig(owner, title="Old title", description="Old description", budget=100)

    response = client.put(
        f"/gigs/{gig['gigId']}", json={"budget": 300}, headers=owner["headers"]
    )
    assert response.status_code == 200
    updated = response.json()["gig"]
    assert updated["budget"] == 300
    assert updated["title"] == "Old title"
    assert updated["description"] == "Old description"


def test_update_gig_rejects_empty_and_null_fields(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    gig = make_gig(owner)

    empty = client.put(f"/gigs/{gig['gigId']}", json={"title": ""}, headers=owner["headers"])
    assert empty.status_code == 400

    null = client.put(f"/gigs/{gig['gigId']}", json={"title": None}, headers=owner["headers"])
    assert null.status_code == 400

    unchanged = client.get(f"/gigs/{gig['gigId']}").json()["gig"]
    assert unchanged["title"] == gig["title"]


def test_update_gig_by_non_owner_forbidden(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    other = make_user("Other", "other@example.com")
    gig = make_gig(owner)

    response = client.put(f"/gigs/{gig['gigId']}", json={"title": "Hijack"}, headers=other["headers"])
    assert response.status_code == 403


def test_update_assigned_gig_conflicts(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    gig = make_gig(owner)
    bid = make_bid(freelancer, gig["gigId"])
    assert client.patch(f"/bids/{bid['bidId']}/hire", headers=owner["headers"]).status_code == 200

    response = client.put(f"/gigs/{gig['gigId']}", json={"title": "New"}, headers=owner["headers"])
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot update an assigned gig"


def test_delete_gig_cascades_bids(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    first = make_user("First", "first@example.com")
    second = make_user("Second", "second@example.com")
    gig = make_gig(owner)
    make_bid(first, gig["gigId"])
    make_bid(second, gig["gigId"])

    response = client.delete(f"/gigs/{gig['gigId']}", headers=owner["headers"])
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert client.get(f"/gigs/{gig['gigId']}").status_code == 404
    assert client.get("/bids/my/bids", headers=first["headers"]).json()["count"] == 0
    assert client.get("/bids/my/bids", headers=second["headers"]).json()["count"] == 0


def test_delete_gig_by_non_owner_forbidden(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    other = make_user("Other", "other@example.com")
    gig = make_gig(owner)

    assert client.delete(f"/gigs/{gig['gigId']}", headers=other["headers"]).status_code == 403
    assert client.get(f"/gigs/{gig['gigId']}").status_code == 200


def test_create_gig_rejects_non_finite_and_oversized_budget(client, make_user):
    owner = make_user("Owner", "owner@example.com")

    for budget in ("Infinity", "NaN", 10_000_000_000):
        response = client.post(
            "/gigs",
            json={"title": "Logo", "description": "A logo", "budget": budget},
            headers=owner["headers"],
        )
        assert response.status_code == 400, budget
        assert any(error.startswith("budget") for error in response.json()["errors"])

    assert client.get("/gigs").json()["count"] == 0


def test_update_gig_rejects_non_finite_budget(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    gig = make_gig(owner, budget=100)

    response = client.put(
        f"/gigs/{gig['gigId']}", json={"budget": "Infinity"}, headers=owner["headers"]
    )
    assert response.status_code == 400
    assert client.get(f"/gigs/{gig['gigId']}").json()["gig"]["budget"] == 100


def test_blank_status_filter_defaults_to_open(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    gig = make_gig(owner)

    response = client.get("/gigs", params={"status": ""})
    assert response.status_code == 200
    assert [item["gigId"] for item in response.json()["gigs"]] == [gig["gigId"]]
