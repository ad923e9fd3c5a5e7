import uuid

import pytest

from renobid.common.enums import UserRole


@pytest.mark.asyncio
async def test_list_project_bids_is_anonymous(
    client, homeowner_headers, contractor_user, open_project, make_bid
):
    await make_bid(open_project, contractor_user)

    response = await client.get(
        f"/api/v1/homeowner/projects/{open_project.id}/bids", headers=homeowner_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1

    item = data["items"][0]
    assert item["anonymous_name"] == "Contractor A"
    assert item["contractor_rating"] == 4.5
    assert item["contractor_total_projects"] == 12
    assert item["contractor_completed_projects"] == 7
    assert item["status"] == "pending"
    for leaked in ("contractor_id", "contractor", "name", "email", "phone"):
        assert leaked not in item

    body = response.text
    assert contractor_user.email not in body
    assert contractor_user.full_name not in body
    assert str(contractor_user.id) not in body
    assert contractor_user.phone not in body


@pytest.mark.asyncio
async def test_list_project_bids_only_pending(
    client, homeowner_headers, admin_user, make_user, open_project, make_bid, db_session
):
    from renobid.core.bidding.service import BidService

    pending = await make_bid(open_project, await make_user())
    approved = await make_bid(open_project, await make_user())
    withdrawn = await make_bid(open_project, await make_user())
    service = BidService(db_session)
    await service.approve(approved.id, admin_user.id)
    await service.withdraw(withdrawn.id, withdrawn.contractor_id)

    response = await client.get(
        f"/api/v1/homeowner/projects/{open_project.id}/bids", headers=homeowner_headers
    )
    data = response.json()
    assert data["total"] == 1
    assert [item["id"] for item in data["items"]] == [str(pending.id)]
    assert all(item["status"] == "pending" for item in data["items"])


@pytest.mark.asyncio
async def test_list_project_bids_not_owner(client, make_user, headers_for, open_project):
    stranger = await make_user(UserRole.HOMEOWNER)

    response = await client.get(
        f"/api/v1/homeowner/projects/{open_project.id}/bids", headers=headers_for(stranger)
    )
    assert response.status_code == 403
    assert response.json()["code"] == "PROJECT_ACCESS_DENIED"


@pytest.mark.asyncio
async def test_list_project_bids_unknown_project(client, homeowner_headers):
    response = await client.get(
        f"/api/v1/homeowner/projects/{uuid.uuid4()}/bids", headers=homeowner_headers
    )
    assert response.status_code == 404
    assert response.json()["code"] == "PROJECT_NOT_FOUND"


@pytest.mark.asyncio
async def test_list_project_bids_requires_homeowner(client, contractor_headers, open_project):
    response = await client.get(
        f"/api/v1/homeowner/projects/{open_project.id}/bids", headers=contractor_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_sort_by_price(client, homeowner_headers, make_user, open_project, make_bid):
    for price in ("300000", "100000", "200000"):
        await make_bid(open_project, await make_user(), price=price)

    response = await client.get(
        f"/api/v1/homeowner/projects/{open_project.id}/bids",
        headers=homeowner_headers,
        params={"sort_by": "price", "sort_order": "asc"},
    )
    prices = [float(item["price"]) for item in response.json()["items"]]
    assert prices == [100000, 200000, 300000]


@pytest.mark.asyncio
async def test_labels_stable_across_pages(client, homeowner_headers, make_user, open_project, make_bid):
    bids = [await make_bid(open_project, await make_user()) for _ in range(3)]
    expected = {str(b.id): f"Contractor {letter}" for b, letter in zip(bids, "ABC")}

    seen = {}
    for page in (1, 2, 3):
        response = await client.get(
            f"/api/v1/homeowner/projects/{open_project.id}/bids",
            headers=homeowner_headers,
            params={"page": page, "page_size": 1},
        )
        [item] = response.json()["items"]
        seen[item["id"]] = item["anonymous_name"]

    assert seen == expected
