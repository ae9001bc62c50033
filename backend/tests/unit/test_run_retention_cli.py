from uuid import uuid4

from hive.cli.run_retention import parse_args, run_retention


def test_parse_args():
    org_id = uuid4()

    args = parse_args(["--org-id", str(org_id), "--dry-run"])

    assert args.org_id == org_id
    assert args.dry_run is True
    assert parse_args([]).org_id is None


async def test_run_for_one_org(sessionmanager, seed, days_ago):
    org_id = await seed.org()
    thread_id = await seed.thread(org_id, days_ago(300))
    await seed.messages(org_id, thread_id, days_ago(200), count=2)
    await seed.commit()

    result = await run_retention(sessionmanager, org_id, dry_run=True)

    assert result["dryRun"] is True
    assert result["counts"]["messages"] == 2


async def test_run_for_all_orgs(sessionmanager, seed):
    org_id = await seed.org()
    await seed.commit()

    result = await run_retention(sessionmanager, None, dry_run=False)

    assert result["ok"] is True
    assert str(org_id) in result["results"]
