import pytest


def test_unauthenticated_bid_is_rejected(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    gig = make_gig(owner)

    response = client.post(
        "/bids", json={"gigId": gig["gigId"], "message": "Let me do it please", "price": 100}
    )
    assert response.status_code == 401
    assert response.json()["success"] is False

    bids = client.get(f"/bids/{gig['gigId']}", headers=owner["headers"]).json()
    assert bids["count"] == 0


def test_create_bid(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    gig = make_gig(owner)

    bid = make_bid(freelancer, gig["gigId"], price=4000)
    assert bid["status"] == "pending"
    assert bid["price"] == 4000
    assert bid["freelancerId"] == freelancer["id"]
    assert bid["freelancer"]["email"] == "free@example.com"
    assert bid["gig"]["title"] == gig["title"]


def test_bid_on_missing_gig(client, make_user):
    freelancer = make_user("Free", "free@example.com")
    response = client.post(
        "/bids",
        json={"gigId": "missing", "message": "I can deliver this quickly", "price": 10},
        headers=freelancer["headers"],
    )
    assert response.status_code == 404


def test_owner_cannot_bid_on_own_gig(client, make_user, make_gig):
    owner = make_user("Owner", "owner@example.com")
    gig = make_gig(owner)

    response = client.post(
        "/bids",
        json={"gigId": gig["gigId"], "message": "Bidding on my own gig", "price": 10},
        headers=owner["headers"],
    )
    assert response.status_code == 403
    assert response.json()["message"] == "You cannot bid on your own gig"


def test_duplicate_bid_conflicts(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    gig = make_gig(owner)
    make_bid(freelancer, gig["gigId"])

    response = client.post(
        "/bids",
        json={"gigId": gig["gigId"], "message": "Second attempt at bidding", "price": 50},
        headers=freelancer["headers"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "You have already submitted a bid for this gig"


def test_bid_on_assigned_gig_conflicts(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    first = make_user("First", "first@example.com")
    late = make_user("Late", "late@example.com")
    gig = make_gig(owner)
    bid = make_bid(first, gig["gigId"])
    client.patch(f"/bids/{bid['bidId']}/hire", headers=owner["headers"])

    response = client.post(
        "/bids",
        json={"gigId": gig["gigId"], "message": "Am I too late for this?", "price": 50},
        headers=late["headers"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "This gig is no longer accepting bids"


@pytest.mark.parametrize(
    "payload",
    [
        {"message": "too short", "price": 100},
        {"message": "x" * 1001, "price": 100},
        {"message": "A perfectly fine message", "price": 0},
        {"message": "A perfectly fine message", "price": 1_000_001},
    ],
)
def test_bid_validation(client, make_user, make_gig, payload):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    gig = make_gig(owner)

    response = client.post(
        "/bids", json={"gigId": gig["gigId"], **payload}, headers=freelancer["headers"]
    )
    assert response.status_code == 400
    assert response.json()["errors"]


def test_only_gig_owner_lists_bids(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    gig = make_gig(owner)
    make_bid(freelancer, gig["gigId"])

    forbidden = client.get(f"/bids/{gig['gigId']}", headers=freelancer["headers"])
    assert forbidden.status_code == 403

    allowed = client.get(f"/bids/{gig['gigId']}", headers=owner["headers"])
    assert allowed.status_code == 200
    assert allowed.json()["count"] == 1
    assert allowed.json()["bids"][0]["freelancer"]["name"] == "Free"


def test_my_bids(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    first = make_gig(owner, title="First gig")
    second = make_gig(owner, title="Second gig")
    make_bid(freelancer, first["gigId"])
    make_bid(freelancer, second["gigId"])

    response = client.get("/bids/my/bids", headers=freelancer["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert {bid["gig"]["title"] for bid in body["bids"]} == {"First gig", "Second gig"}
    assert all(bid["gig"]["status"] == "open" for bid in body["bids"])


def test_update_pending_bid(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    gig = make_gig(owner)
    bid = make_bid(freelancer, gig["gigId"], price=4000)

    response = client.put(
        f"/bids/{bid['bidId']}", json={"price": 3500}, headers=freelancer["headers"]
    )
    assert response.status_code == 200
    updated = response.json()["bid"]
    assert updated["price"] == 3500
    assert updated["message"] == bid["message"]


def test_update_bid_by_other_user_forbidden(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    gig = make_gig(owner)
    bid = make_bid(freelancer, gig["gigId"])

    response = client.put(f"/bids/{bid['bidId']}", json={"price": 1}, headers=owner["headers"])
    assert response.status_code == 403
    assert client.delete(f"/bids/{bid['bidId']}", headers=owner["headers"]).status_code == 403


def test_delete_pending_bid(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    freelancer = make_user("Free", "free@example.com")
    gig = make_gig(owner)
    bid = make_bid(freelancer, gig["gigId"])

    response = client.delete(f"/bids/{bid['bidId']}", headers=freelancer["headers"])
    assert response.status_code == 200
    assert client.get("/bids/my/bids", headers=freelancer["headers"]).json()["count"] == 0

    # 撤回後可重新提案
    make_bid(freelancer, gig["gigId"])


def test_terminal_bids_cannot_be_updated_or_deleted(client, make_user, make_gig, make_bid):
    owner = make_user("Owner", "owner@example.com")
    winner = make_user("Winner", "winner@example.com")
    loser = make_user("Loser", "loser@example.com")
    gig = make_gig(owner)
    hired = make_bid(winner, gig["gigId"])
    rejected = make_bid(loser, gig["gigId"])
    assert client.patch(f"/bids/{hired['bidId']}/hire", headers=owner["headers"]).status_code == 200

    for bid, user in ((hired, winner), (rejected, loser)):
        update = client.put(f"/bids/{bid['bidId']}", json={"price": 10}, headers=user["headers"])
        assert update.status_code == 400
        assert update.json()["message"] == "Cannot update a bid that is not pending"

        delete = client.delete(f"/bids/{bid['bidId']}", headers=user["headers"])
        assert delete.status_code == 400
        assert delete.json()["message"] == "Cannot delete a bid that is not pending"


def test_missing_bid_returns_404(client, make_user):
    freelancer = make_user("Free", "free@example.com")
    assert client.put("/bids/missing", json={"price": 10}, headers=freelancer["headers"]).status_code == 404
    assert client.delete("/bids/missing", headers=freelancer["headers"]).status_code == 404
    assert client.patch("/bids/missing/hire", headers=freelancer["headers"]).status_code == 404
