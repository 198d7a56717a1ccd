"""Tests for gang endpoints and the one-gang-per-user join flow."""

import threading

import pytest

from core.exceptions import DuplicateMembershipError, InvalidGangPasswordError, NotFoundError
from web.routes.gangs import join_gang


def _join(client, gang_id, username="alice", password="pw"):
    return client.post(f"/api/gangs/{gang_id}/join", json={'username': username, 'password': password})


def _members(client, gang_id):
    gang = client.get(f"/api/gangs/{gang_id}").get_json()
    return [m['username'] for m in gang['members']]


class TestGangCrud:
    def test_create_gang_scenario(self, make_gang):
        gang = make_gang(name="Reds", owner="u1", owner_name="Bob", password="pw", color="#FF0000")

        assert gang['members'] == []
        assert [r['name'] for r in gang['ranks']] == ['Member', 'Officer']
        assert gang['ownerName'] == 'Bob'
        assert gang['color'] == '#FF0000'

    def test_create_gang_posts_notification_and_webhook(self, client, make_gang, notifier):
        make_gang()

        notifications = client.get('/api/notifications').get_json()
        assert notifications[0]['type'] == 'gang_new'
        assert notifications[0]['title'] == 'New Gang Created: Reds'
        notifier.notify.assert_called_once_with('gang_created', {
            'name': 'Reds',
            'owner': 'u1',
            'ownerName': 'Bob',
            'color': '#FF0000',
        })

    def test_create_gang_requires_all_fields(self, client, storage):
        response = client.post('/api/gangs', json={'name': 'Reds', 'owner': 'u1'})

        assert response.status_code == 400
        assert storage.list_gangs() == []

    def test_update_gang(self, client, make_gang):
        gang = make_gang()

        body = client.patch(f"/api/gangs/{gang['id']}", json={'name': 'Blues', 'members': []}).get_json()

        assert body['name'] == 'Blues'
        assert body['ownerName'] == 'Bob'
        assert body['ranks'] == gang['ranks']

    def test_update_rejects_non_string(self, client, make_gang):
        gang = make_gang()

        assert client.patch(f"/api/gangs/{gang['id']}", json={'color': 5}).status_code == 400

    def test_delete_gang(self, client, make_gang):
        gang = make_gang()

        assert client.delete(f"/api/gangs/{gang['id']}").status_code == 204
        assert client.get(f"/api/gangs/{gang['id']}").status_code == 404

    def test_unknown_gang(self, client):
        assert client.get('/api/gangs/missing').status_code == 404
        assert client.patch('/api/gangs/missing', json={'name': 'x'}).status_code == 404
        assert client.delete('/api/gangs/missing').status_code == 404


class TestJoin:
    def test_join_adds_member(self, client, make_gang):
        gang = make_gang()

        response = _join(client, gang['id'])

        assert response.status_code == 201
        member = response.get_json()['members'][0]
        assert member['username'] == 'alice'
        assert member['rank'] == 'Member'
        assert member['isOnline'] is True
        assert member['gangId'] == gang['id']

    def test_wrong_password_is_rejected(self, client, make_gang):
        gang = make_gang(password="secret")

        response = _join(client, gang['id'], password="Secret")

        assert response.status_code == 401
        assert response.get_json() == {'error': 'Invalid password'}
        assert _members(client, gang['id']) == []

    def test_duplicate_join_fails_without_mutation(self, client, make_gang):
        gang = make_gang()
        _join(client, gang['id'])
        before = client.get(f"/api/gangs/{gang['id']}").get_json()

        response = _join(client, gang['id'])

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Already a member of this gang'}
        assert client.get(f"/api/gangs/{gang['id']}").get_json() == before

    def test_joining_moves_user_out_of_other_gangs(self, client, make_gang):
        reds = make_gang(name="Reds")
        blues = make_gang(name="Blues")
        greens = make_gang(name="Greens")
        _join(client, reds['id'])
        _join(client, reds['id'], username="bob")

        assert _join(client, blues['id']).status_code == 201
        assert _join(client, greens['id']).status_code == 201

        assert _members(client, reds['id']) == ['bob']
        assert _members(client, blues['id']) == []
        assert _members(client, greens['id']) == ['alice']

    def test_join_unknown_gang(self, client):
        assert _join(client, 'missing').status_code == 404

    def test_join_requires_username_and_password(self, client, make_gang):
        gang = make_gang()

        response = client.post(f"/api/gangs/{gang['id']}/join", json={'username': 'alice'})

        assert response.status_code == 400

    def test_concurrent_joins_keep_single_membership(self, storage):
        gangs = [storage.create_gang(f"g{i}", "o", "n", "pw", "#000000") for i in range(4)]
        errors = []

        def worker(gang_id):
            for _ in range(25):
                try:
                    join_gang(storage, gang_id, "alice", "pw")
                except DuplicateMembershipError:
                    pass
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=worker, args=(g.id,)) for g in gangs]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        holders = [g for g in storage.list_gangs() if g.find_member("alice")]
        assert len(holders) == 1
        assert len(holders[0].members) == 1


class TestJoinFunction:
    def test_raises_domain_errors(self, storage):
        gang = storage.create_gang("Reds", "o", "n", "pw", "#000000")

        with pytest.raises(NotFoundError):
            join_gang(storage, "missing", "alice", "pw")
        with pytest.raises(InvalidGangPasswordError):
            join_gang(storage, gang.id, "alice", "nope")

        join_gang(storage, gang.id, "alice", "pw")
        with pytest.raises(DuplicateMembershipError):
            join_gang(storage, gang.id, "alice", "pw")


class TestRemoveMember:
    def test_remove_member(self, client, make_gang):
        gang = make_gang()
        member_id = _join(client, gang['id']).get_json()['members'][0]['id']

        response = client.delete(f"/api/gangs/{gang['id']}/members/{member_id}")

        assert response.status_code == 200
        assert response.get_json()['members'] == []

    def test_remove_unknown_member_is_noop(self, client, make_gang):
        gang = make_gang()
        _join(client, gang['id'])

        response = client.delete(f"/api/gangs/{gang['id']}/members/missing")

        assert response.status_code == 200
        assert [m['username'] for m in response.get_json()['members']] == ['alice']

    def test_remove_from_unknown_gang(self, client):
        assert client.delete('/api/gangs/missing/members/x').status_code == 404
