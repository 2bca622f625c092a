import pytest
from sqlalchemy.exc import IntegrityError

from app.errors import Conflict, Forbidden, InvalidRequest
from app.models.project_member import ProjectMember, Role
from app.models.user import User
from app.services import membership as members
from app.services import policy
from app.services.projects import create_project


@pytest.fixture
def users(db):
    people = {}
    for name in ("alice", "bob", "carol", "dave"):
        user = User(name=name.title(), email=f"{name}@example.com", password_hash="x")
        db.add(user)
        people[name] = user
    db.commit()
    return people


def test_create_project_adds_owner(db, users):
    project = create_project(db, users["alice"], "P1")
    rows = members.list_members(db, project.id)
    assert [(m.user_id, m.role) for m in rows] == [(users["alice"].id, Role.OWNER)]
    assert rows[0].is_admin


def test_membership_uniqueness_is_enforced_by_store(db, users):
    project = create_project(db, users["alice"], "P1")
    db.add(ProjectMember(project_id=project.id, user_id=users["alice"].id, role=Role.MEMBER))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_add_membership_duplicate(db, users):
    project = create_project(db, users["alice"], "P1")
    members.add_membership(db, project.id, users["bob"].id, Role.MEMBER)
    with pytest.raises(Conflict):
        members.add_membership(db, project.id, users["bob"].id, Role.ADMIN)


def test_require_member_and_admin(db, users):
    project = create_project(db, users["alice"], "P1")
    members.add_membership(db, project.id, users["bob"].id, Role.MEMBER)

    assert policy.require_member(db, project.id, users["bob"], "view").user_id == users["bob"].id
    with pytest.raises(Forbidden):
        policy.require_member(db, project.id, users["carol"], "view")
    with pytest.raises(Forbidden):
        policy.require_admin(db, project.id, users["bob"], "update")
    assert policy.require_admin(db, project.id, users["alice"], "update").role == Role.OWNER


def test_resolve_assignee(db, users):
    project = create_project(db, users["alice"], "P1")
    bob_membership = members.add_membership(db, project.id, users["bob"].id, Role.MEMBER)
    carol_membership = members.add_membership(db, project.id, users["carol"].id, Role.ADMIN)

    assert policy.resolve_assignee(db, bob_membership, None) == users["bob"].id
    assert policy.resolve_assignee(db, bob_membership, users["bob"].id) == users["bob"].id
    with pytest.raises(Forbidden):
        policy.resolve_assignee(db, bob_membership, users["carol"].id)

    assert policy.resolve_assignee(db, carol_membership, None) == users["carol"].id
    assert policy.resolve_assignee(db, carol_membership, users["bob"].id) == users["bob"].id
    with pytest.raises(InvalidRequest):
        policy.resolve_assignee(db, carol_membership, users["dave"].id)


def test_shared_admin_visibility(db, users):
    alice, bob, carol = users["alice"], users["bob"], users["carol"]
    p1 = create_project(db, alice, "P1")
    p2 = create_project(db, bob, "P2")
    members.add_membership(db, p1.id, bob.id, Role.MEMBER)
    members.add_membership(db, p2.id, carol.id, Role.ADMIN)

    assert policy.shared_admin_project_ids(db, alice, bob.id) == {p1.id}
    assert policy.can_view_user(db, alice, bob.id)
    assert not policy.can_view_user(db, bob, alice.id)
    assert policy.can_view_user(db, carol, bob.id)
    assert policy.can_view_user(db, carol, carol.id)

    assert policy.visible_project_ids(db, bob, bob.id) == {p1.id, p2.id}
    assert policy.visible_project_ids(db, carol, bob.id) == {p2.id}
    assert policy.visible_project_ids(db, users["dave"], bob.id) == set()
