"""Unit tests for OrgRepository and MembershipRepository."""

from uuid import uuid4

from hive.orgs.membership_repo import MembershipRepository, OrgRole
from hive.orgs.org_repo import OrgRepository


async def test_list_org_ids_pages_in_creation_order(session, seed, days_ago):
    newest = await seed.org("C", created_at=days_ago(1))
    oldest = await seed.org("A", created_at=days_ago(30))
    middle = await seed.org("B", created_at=days_ago(10))

    repo = OrgRepository(session, page_size=2)

    assert await repo.list_org_ids() == [oldest, middle, newest]


async def test_list_org_ids_with_exactly_one_full_page(session, seed, days_ago):
    first = await seed.org("A", created_at=days_ago(2))
    second = await seed.org("B", created_at=days_ago(1))

    repo = OrgRepository(session, page_size=2)

    assert await repo.list_org_ids() == [first, second]


async def test_list_org_ids_without_orgs(session):
    assert await OrgRepository(session).list_org_ids() == []


async def test_exists(session, seed):
    org_id = await seed.org()
    repo = OrgRepository(session)

    assert await repo.exists(org_id) is True
    assert await repo.exists(uuid4()) is False


async def test_get_role(session, seed):
    org_id = await seed.org()
    owner_id = await seed.member(org_id, "owner")
    odd_id = await seed.member(org_id, "auditor")
    repo = MembershipRepository(session)

    assert await repo.get_role(org_id, owner_id) is OrgRole.OWNER
    assert await repo.get_role(org_id, odd_id) is OrgRole.MEMBER
    assert await repo.get_role(org_id, uuid4()) is None
    assert await repo.get_role(uuid4(), owner_id) is None
