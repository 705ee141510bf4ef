"""VisibilityResolver integration tests."""

from tasktrail.domain.enums import Priority


async def _seed(services, directory) -> dict[str, str]:
    acme, globex = directory.acme.id, directory.globex.id
    ids = {
        "alice_own": await services.tasks.create_task(acme, directory.alice.id, "Alice own", "Low"),
        "bob_own": await services.tasks.create_task(acme, directory.bob.id, "Bob own", "High"),
        "bob_shared": await services.tasks.create_task(acme, directory.bob.id, "Bob shared", "Medium"),
        "gina_own": await services.tasks.create_task(globex, directory.gina.id, "Gina own", "Low"),
    }
    await services.tasks.share_task(ids["bob_shared"], directory.alice.id, shared_by=directory.bob.id)
    return ids


async def test_employee_sees_owned_and_shared(services, directory) -> None:
    ids = await _seed(services, directory)
    visible = await services.visibility.get_visible_tasks(directory.alice.id)
    assert {t.id for t in visible} == {ids["alice_own"], ids["bob_shared"]}


async def test_employee_without_grants_sees_only_own(services, directory) -> None:
    ids = await _seed(services, directory)
    visible = await services.visibility.get_visible_tasks(directory.bob.id)
    assert {t.id for t in visible} == {ids["bob_own"], ids["bob_shared"]}


async def test_owned_and_shared_task_listed_once(services, directory) -> None:
    ids = await _seed(services, directory)
    await services.tasks.share_task(ids["alice_own"], directory.alice.id)
    visible = await services.visibility.get_visible_tasks(directory.alice.id)
    assert [t.id for t in visible].count(ids["alice_own"]) == 1
    assert len(visible) == 2


async def test_manager_sees_every_task_of_own_tenant_only(services, directory) -> None:
    ids = await _seed(services, directory)
    visible = await services.visibility.get_visible_tasks(directory.manager.id)
    assert {t.id for t in visible} == {ids["alice_own"], ids["bob_own"], ids["bob_shared"]}
    assert ids["gina_own"] not in {t.id for t in visible}


async def test_other_tenant_employee_isolated(services, directory) -> None:
    ids = await _seed(services, directory)
    visible = await services.visibility.get_visible_tasks(directory.gina.id)
    assert [t.id for t in visible] == [ids["gina_own"]]
    assert visible[0].priority is Priority.LOW


async def test_unknown_user_sees_nothing(services, directory) -> None:
    await _seed(services, directory)
    assert await services.visibility.get_visible_tasks("ghost") == []


async def test_visibility_reflects_deletion(services, directory) -> None:
    ids = await _seed(services, directory)
    await services.tasks.delete_task(ids["bob_shared"], directory.bob.id)
    visible = await services.visibility.get_visible_tasks(directory.alice.id)
    assert [t.id for t in visible] == [ids["alice_own"]]
