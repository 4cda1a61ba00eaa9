"""HTTP API tests"""

import pytest


@pytest.fixture
def owner_headers(owner, auth_headers):
    return auth_headers(owner.user_id)


async def create_board(client, headers, title="Sprint"):
    response = await client.post("/boards", json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()


async def create_list(client, headers, board_id, title):
    response = await client.post(f"/boards/{board_id}/lists", json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_check(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.get("/boards")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_bad_token(self, test_client):
        response = await test_client.get("/boards", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_user_registered_from_token(self, test_client, container, auth_headers):
        response = await test_client.get("/boards", headers=auth_headers("new-user", "New@Example.com"))

        assert response.status_code == 200
        assert container.users.find_by_id("new-user").email == "new@example.com"


class TestBoards:
    @pytest.mark.asyncio
    async def test_create_and_list(self, test_client, owner_headers):
        board = await create_board(test_client, owner_headers)

        response = await test_client.get("/boards", headers=owner_headers)

        assert response.status_code == 200
        assert [b["board_id"] for b in response.json()] == [board["board_id"]]

    @pytest.mark.asyncio
    async def test_invalid_input(self, test_client, owner_headers):
        response = await test_client.post("/boards", json={"title": "  "}, headers=owner_headers)

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error_code"] == "INVALID_INPUT"
        assert [v["field"] for v in detail["violations"]] == ["title"]

    @pytest.mark.asyncio
    async def test_non_member_forbidden(self, test_client, owner_headers, viewer, auth_headers):
        board = await create_board(test_client, owner_headers)

        response = await test_client.get(f"/boards/{board['board_id']}", headers=auth_headers(viewer.user_id))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_board(self, test_client, owner_headers):
        response = await test_client.get("/boards/does-not-exist", headers=owner_headers)

        assert response.status_code == 404
        assert response.json()["detail"]["error_code"] == "BOARD_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_archived_board_rejects_changes(self, test_client, owner_headers):
        board = await create_board(test_client, owner_headers)
        archived = await test_client.post(f"/boards/{board['board_id']}/archive", headers=owner_headers)
        assert archived.json()["is_archived"] is True

        response = await test_client.patch(
            f"/boards/{board['board_id']}", json={"title": "Renamed"}, headers=owner_headers
        )

        assert response.status_code == 409
        assert response.json()["detail"]["error_code"] == "BOARD_ARCHIVED"

    @pytest.mark.asyncio
    async def test_delete(self, test_client, owner_headers):
        board = await create_board(test_client, owner_headers)

        response = await test_client.delete(f"/boards/{board['board_id']}", headers=owner_headers)
        assert response.status_code == 204

        response = await test_client.get(f"/boards/{board['board_id']}", headers=owner_headers)
        assert response.status_code == 404


class TestMembers:
    @pytest.mark.asyncio
    async def test_added_member_can_read(self, test_client, owner_headers, editor, auth_headers):
        board = await create_board(test_client, owner_headers)

        response = await test_client.post(
            f"/boards/{board['board_id']}/members",
            json={"user_id": editor.user_id, "role": "EDITOR"},
            headers=owner_headers,
        )
        assert response.status_code == 201

        response = await test_client.get(f"/boards/{board['board_id']}", headers=auth_headers(editor.user_id))
        assert response.status_code == 200


class TestLists:
    @pytest.mark.asyncio
    async def test_move_list(self, test_client, owner_headers):
        board = await create_board(test_client, owner_headers)
        first = await create_list(test_client, owner_headers, board["board_id"], "To Do")
        await create_list(test_client, owner_headers, board["board_id"], "Doing")
        await create_list(test_client, owner_headers, board["board_id"], "Done")

        response = await test_client.put(
            f"/lists/{first['list_id']}/position", json={"position": 2}, headers=owner_headers
        )

        assert response.status_code == 200
        assert [(x["title"], x["position"]) for x in response.json()] == [("Doing", 0), ("Done", 1), ("To Do", 2)]

    @pytest.mark.asyncio
    async def test_list_limit(self, test_client, container, owner_headers):
        container.board_list_service.policy.max_lists = 1
        board = await create_board(test_client, owner_headers)
        await create_list(test_client, owner_headers, board["board_id"], "To Do")

        response = await test_client.post(
            f"/boards/{board['board_id']}/lists", json={"title": "Doing"}, headers=owner_headers
        )

        assert response.status_code == 422
        assert response.json()["detail"]["error_code"] == "LIST_CREATION_POLICY_VIOLATION"


class TestCards:
    @pytest.mark.asyncio
    async def test_create_and_move_card(self, test_client, owner_headers):
        board = await create_board(test_client, owner_headers)
        todo = await create_list(test_client, owner_headers, board["board_id"], "To Do")
        done = await create_list(test_client, owner_headers, board["board_id"], "Done")
        created = await test_client.post(
            f"/lists/{todo['list_id']}/cards", json={"title": "Write docs"}, headers=owner_headers
        )
        assert created.status_code == 201
        card = created.json()

        response = await test_client.post(
            f"/cards/{card['card_id']}/move",
            json={"list_id": done["list_id"], "position": 0},
            headers=owner_headers,
        )

        assert response.status_code == 200
        assert response.json()["list_id"] == done["list_id"]
        cards = await test_client.get(f"/lists/{todo['list_id']}/cards", headers=owner_headers)
        assert cards.json() == []


class TestActivity:
    @pytest.mark.asyncio
    async def test_board_activity(self, test_client, owner_headers, viewer, auth_headers):
        board = await create_board(test_client, owner_headers)
        await create_list(test_client, owner_headers, board["board_id"], "To Do")

        response = await test_client.get(f"/boards/{board['board_id']}/activity", headers=owner_headers)

        assert response.status_code == 200
        assert {a["type"] for a in response.json()} == {"LIST_CREATE", "BOARD_CREATE"}

        response = await test_client.get(f"/boards/{board['board_id']}/activity", headers=auth_headers(viewer.user_id))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_renamed_user_shows_new_name(self, test_client):
        from kanban_boards.auth.jwt import create_access_token

        def headers(given_name):
            token = create_access_token(data={
                "sub": "user-9", "email": "ann@example.com", "given_name": given_name, "family_name": "Smith",
            })
            return {"Authorization": f"Bearer {token}"}

        board = await create_board(test_client, headers("Ann"))
        await create_list(test_client, headers("Anne"), board["board_id"], "To Do")

        response = await test_client.get(f"/boards/{board['board_id']}/activity", headers=headers("Anne"))

        names = {a["type"]: a["payload"]["actorName"] for a in response.json()}
        assert names == {"BOARD_CREATE": "Ann Smith", "LIST_CREATE": "Anne Smith"}


class TestComments:
    @pytest.mark.asyncio
    async def test_comment_lifecycle(self, test_client, owner_headers, editor, auth_headers):
        board = await create_board(test_client, owner_headers)
        todo = await create_list(test_client, owner_headers, board["board_id"], "To Do")
        card = (await test_client.post(
            f"/lists/{todo['list_id']}/cards", json={"title": "Write docs"}, headers=owner_headers
        )).json()
        await test_client.post(
            f"/boards/{board['board_id']}/members",
            json={"user_id": editor.user_id, "role": "EDITOR"},
            headers=owner_headers,
        )

        created = await test_client.post(
            f"/cards/{card['card_id']}/comments", json={"content": "First draft is up"}, headers=owner_headers
        )
        assert created.status_code == 201
        comment = created.json()

        response = await test_client.patch(
            f"/comments/{comment['comment_id']}", json={"content": "Hijacked"}, headers=auth_headers(editor.user_id)
        )
        assert response.status_code == 403
        assert response.json()["detail"]["error_code"] == "COMMENT_UPDATE_ACCESS_DENIED"

        response = await test_client.patch(
            f"/comments/{comment['comment_id']}", json={"content": "Second draft is up"}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["edited"] is True

        listed = await test_client.get(f"/cards/{card['card_id']}/comments", headers=auth_headers(editor.user_id))
        assert [c["content"] for c in listed.json()] == ["Second draft is up"]

        response = await test_client.delete(f"/comments/{comment['comment_id']}", headers=owner_headers)
        assert response.status_code == 204
        response = await test_client.get(f"/comments/{comment['comment_id']}", headers=owner_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_empty_comment_rejected(self, test_client, owner_headers):
        board = await create_board(test_client, owner_headers)
        todo = await create_list(test_client, owner_headers, board["board_id"], "To Do")
        card = (await test_client.post(
            f"/lists/{todo['list_id']}/cards", json={"title": "Write docs"}, headers=owner_headers
        )).json()

        response = await test_client.post(f"/cards/{card['card_id']}/comments", json={}, headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["detail"]["violations"][0]["field"] == "content"


class TestBoardDetail:
    @pytest.mark.asyncio
    async def test_board_detail(self, test_client, owner_headers, viewer, auth_headers):
        board = await create_board(test_client, owner_headers)
        todo = await create_list(test_client, owner_headers, board["board_id"], "To Do")
        card = (await test_client.post(
            f"/lists/{todo['list_id']}/cards", json={"title": "Write docs"}, headers=owner_headers
        )).json()
        await test_client.post(f"/cards/{card['card_id']}/comments", json={"content": "On it"}, headers=owner_headers)

        response = await test_client.get(f"/boards/{board['board_id']}/detail", headers=owner_headers)

        assert response.status_code == 200
        detail = response.json()
        assert detail["board"]["board_id"] == board["board_id"]
        assert [x["title"] for x in detail["lists"]] == ["To Do"]
        assert [c["title"] for c in detail["cards"]] == ["Write docs"]
        assert detail["comment_counts"] == {card["card_id"]: 1}

        response = await test_client.get(f"/boards/{board['board_id']}/detail", headers=auth_headers(viewer.user_id))
        assert response.status_code == 403
