"""Unit tests for the CategoryHierarchyService domain service."""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from shelf.domain.exceptions import (
    ConcurrencyConflictError,
    CycleDetectedError,
    DomainException,
    DuplicateNameError,
    EntityNotFoundError,
    HasAssociatedItemsError,
    HasChildrenError,
    SelfParentError,
    ValidationError,
)
from shelf.domain.model.category import CategoryNode
from shelf.domain.service.category_hierarchy_service import CategoryHierarchyService
from tests.fakes import FakeCatalogLinkRepository, FakeCategoryRepository


def _setup() -> tuple[CategoryHierarchyService, FakeCategoryRepository, FakeCatalogLinkRepository]:
    repo = FakeCategoryRepository()
    links = FakeCatalogLinkRepository()
    return CategoryHierarchyService(repo, links), repo, links


def _chain(svc: CategoryHierarchyService):
    """Root A -> child B -> grandchild C."""
    a = svc.create("A")
    b = svc.create("B", parent_id=a.id)
    c = svc.create("C", parent_id=b.id)
    return a, b, c


def _assert_symmetric(repo: FakeCategoryRepository) -> None:
    nodes = {n.id: n for n in repo.list_all()}
    for node in nodes.values():
        if node.parent_id is not None:
            assert node.id in nodes[node.parent_id].child_ids
        for child_id in node.child_ids:
            assert nodes[child_id].parent_id == node.id


class RacingCategoryRepository(FakeCategoryRepository):
    """Bumps one node's version right before the next commit, as a concurrent writer would."""

    def __init__(self) -> None:
        super().__init__()
        self.bump_before_commit: str | None = None

    def save_all(self, changes, added=(), removed=()):
        if self.bump_before_commit is not None:
            node = self._store[self.bump_before_commit]
            self._store[node.id] = replace(node, version=node.version + 1)
            self.bump_before_commit = None
        super().save_all(changes, added, removed)


def _race(*calls):
    """Start every call at the same moment; return results or raised domain errors."""
    barrier = threading.Barrier(len(calls))

    def run(call):
        barrier.wait()
        try:
            return call()
        except DomainException as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        return list(pool.map(run, calls))


class TestCreate:

    def test_root_category(self):
        svc, repo, _ = _setup()
        node = svc.create("Science Fiction", description="Space and stuff")
        assert node.slug == "science-fiction"
        assert node.parent_id is None
        assert repo.get_by_id(node.id) == node

    def test_child_is_registered_on_parent(self):
        svc, repo, _ = _setup()
        parent = svc.create("Fiction")
        child = svc.create("Horror", parent_id=parent.id)
        assert child.parent_id == parent.id
        assert repo.get_by_id(parent.id).child_ids == frozenset({child.id})

    def test_sequential_ids(self):
        svc, _, _ = _setup()
        assert [svc.create(n).id for n in ("A", "B", "C")] == ["1", "2", "3"]

    def test_duplicate_name_rejected(self):
        svc, _, _ = _setup()
        svc.create("Poetry")
        with pytest.raises(DuplicateNameError, match="already exists"):
            svc.create("poetry")

    def test_blank_name_rejected(self):
        svc, _, _ = _setup()
        with pytest.raises(ValidationError, match="name is required"):
            svc.create("   ")

    def test_unknown_parent_rejected(self):
        svc, repo, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            svc.create("Orphan", parent_id="99")
        assert repo.list_all() == []

    def test_colliding_slugs_get_suffixes(self):
        svc, _, _ = _setup()
        assert svc.create("Science Fiction").slug == "science-fiction"
        assert svc.create("Science-Fiction!").slug == "science-fiction-1"
        assert svc.create("science  fiction?").slug == "science-fiction-2"

    def test_same_name_after_deactivation_gets_next_slug(self):
        svc, _, _ = _setup()
        first = svc.create("Science Fiction")
        svc.deactivate(first.id)
        second = svc.create("Science Fiction")
        assert first.slug == "science-fiction"
        assert second.slug == "science-fiction-1"


class TestUpdate:

    def test_rename_rederives_slug(self):
        svc, _, _ = _setup()
        node = svc.create("Sci Fi")
        updated = svc.update(node.id, name="Science Fiction")
        assert updated.slug == "science-fiction"
        assert updated.version == node.version + 1

    def test_rename_keeps_own_slug(self):
        svc, _, _ = _setup()
        node = svc.create("science fiction")
        assert svc.update(node.id, name="Science Fiction").slug == "science-fiction"

    def test_rename_avoids_other_slugs(self):
        svc, _, _ = _setup()
        svc.create("Poetry")
        node = svc.create("Verse")
        assert svc.update(node.id, name="Poetry!").slug == "poetry-1"

    def test_rename_to_existing_name_rejected(self):
        svc, _, _ = _setup()
        svc.create("Poetry")
        node = svc.create("Verse")
        with pytest.raises(DuplicateNameError):
            svc.update(node.id, name="Poetry")

    def test_description_only(self):
        svc, _, _ = _setup()
        node = svc.create("Poetry")
        updated = svc.update(node.id, description="Rhymes")
        assert updated.description == "Rhymes"
        assert updated.slug == node.slug

    def test_no_changes_is_a_no_op(self):
        svc, _, _ = _setup()
        node = svc.create("Poetry")
        assert svc.update(node.id, name="Poetry") == node

    def test_empty_description_clears_it(self):
        svc, _, _ = _setup()
        node = svc.create("Poetry", description="Rhymes")
        assert svc.update(node.id, description="").description is None
        assert svc.update(node.id, description=None).description is None


class TestMove:

    def test_move_under_descendant_rejected(self):
        svc, repo, _ = _setup()
        a, b, c = _chain(svc)
        with pytest.raises(CycleDetectedError):
            svc.move(a.id, c.id)
        assert repo.get_by_id(a.id).parent_id is None
        _assert_symmetric(repo)

    def test_move_grandchild_to_root_parent(self):
        svc, repo, _ = _setup()
        a, b, c = _chain(svc)
        moved = svc.move(c.id, a.id)
        assert moved.parent_id == a.id
        assert repo.get_by_id(a.id).child_ids == frozenset({b.id, c.id})
        assert repo.get_by_id(b.id).child_ids == frozenset()
        assert repo.get_by_id(b.id).parent_id == a.id
        _assert_symmetric(repo)

    def test_self_parent_rejected(self):
        svc, _, _ = _setup()
        a = svc.create("A")
        with pytest.raises(SelfParentError):
            svc.move(a.id, a.id)

    def test_move_to_root(self):
        svc, repo, _ = _setup()
        a, b, c = _chain(svc)
        moved = svc.move(b.id, None)
        assert moved.is_root
        assert repo.get_by_id(a.id).child_ids == frozenset()
        assert svc.ancestors(c.id) == [repo.get_by_id(b.id)]
        _assert_symmetric(repo)

    def test_move_to_unknown_parent_rejected(self):
        svc, _, _ = _setup()
        a = svc.create("A")
        with pytest.raises(EntityNotFoundError):
            svc.move(a.id, "42")

    def test_move_to_current_parent_is_a_no_op(self):
        svc, repo, _ = _setup()
        a, b, _ = _chain(svc)
        current = repo.get_by_id(b.id)
        assert svc.move(b.id, a.id) == current

    def test_opposing_moves_cannot_form_a_cycle(self):
        svc, repo, _ = _setup()
        x = svc.create("X")
        y = svc.create("Y")
        svc.move(x.id, y.id)
        with pytest.raises(CycleDetectedError):
            svc.move(y.id, x.id)
        _assert_symmetric(repo)

    def test_stale_parent_write_rejected(self):
        svc, repo, _ = _setup()
        a = svc.create("A")
        b = svc.create("B")
        stale_a = repo.get_by_id(a.id)
        svc.create("A1", parent_id=a.id)
        with pytest.raises(ConcurrencyConflictError):
            repo.save_all([(stale_a.with_child(b.id), stale_a.version)])

    def test_opposing_moves_racing_on_threads(self):
        svc, repo, _ = _setup()
        x = svc.create("X")
        y = svc.create("Y")

        results = _race(lambda: svc.move(x.id, y.id), lambda: svc.move(y.id, x.id))

        moved = [r for r in results if isinstance(r, CategoryNode)]
        assert len(moved) == 1
        assert sum(isinstance(r, CycleDetectedError) for r in results) == 1
        assert len(svc.roots()) == 1
        assert len(list(svc.hierarchy()[0].walk())) == 2
        _assert_symmetric(repo)


class TestIsValidHierarchy:

    def test_predicate(self):
        svc, _, _ = _setup()
        a, b, c = _chain(svc)
        assert svc.is_valid_hierarchy(a.id, None)
        assert svc.is_valid_hierarchy(c.id, a.id)
        assert not svc.is_valid_hierarchy(a.id, c.id)
        assert not svc.is_valid_hierarchy(a.id, b.id)
        assert not svc.is_valid_hierarchy(a.id, a.id)

    def test_unknown_parent(self):
        svc, _, _ = _setup()
        a = svc.create("A")
        with pytest.raises(EntityNotFoundError):
            svc.is_valid_hierarchy(a.id, "99")

    def test_unknown_category(self):
        svc, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            svc.is_valid_hierarchy("99", None)


class TestDelete:

    def test_refused_with_children_then_allowed(self):
        svc, repo, _ = _setup()
        parent = svc.create("Fiction")
        child = svc.create("Horror", parent_id=parent.id)

        with pytest.raises(HasChildrenError):
            svc.delete(parent.id)

        svc.delete(child.id)
        svc.delete(parent.id)
        assert repo.list_all() == []

    def test_deleting_child_detaches_it(self):
        svc, repo, _ = _setup()
        parent = svc.create("Fiction")
        child = svc.create("Horror", parent_id=parent.id)
        svc.delete(child.id)
        assert repo.get_by_id(parent.id).child_ids == frozenset()

    def test_refused_with_linked_items(self):
        svc, repo, links = _setup()
        node = svc.create("Poetry")
        links.link(node.id, "book-7")

        with pytest.raises(HasAssociatedItemsError, match="1 catalog"):
            svc.delete(node.id)
        assert repo.get_by_id(node.id) is not None

        links.unlink(node.id, "book-7")
        svc.delete(node.id)
        assert repo.get_by_id(node.id) is None

    def test_unknown_category(self):
        svc, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            svc.delete("5")


class TestTraversal:

    def test_ancestors_root_first(self):
        svc, _, _ = _setup()
        a, b, c = _chain(svc)
        assert [n.id for n in svc.ancestors(c.id)] == [a.id, b.id]
        assert svc.ancestors(a.id) == []

    def test_descendants_pre_order_by_name(self):
        svc, _, _ = _setup()
        root = svc.create("Root")
        zeta = svc.create("Zeta", parent_id=root.id)
        alpha = svc.create("Alpha", parent_id=root.id)
        alpha_child = svc.create("Alpha Child", parent_id=alpha.id)
        names = [n.name for n in svc.descendants(root.id)]
        assert names == ["Alpha", "Alpha Child", "Zeta"]
        assert svc.descendants(zeta.id) == []
        assert alpha_child.parent_id == alpha.id

    def test_full_hierarchy(self):
        svc, _, _ = _setup()
        a, b, c = _chain(svc)
        other = svc.create("Another Root")
        forest = svc.hierarchy()
        assert [t.node.id for t in forest] == [a.id, other.id]
        assert forest[0].children[0].node.id == b.id
        assert forest[0].children[0].children[0].node.id == c.id
        assert forest[1].children == []

    def test_subtree(self):
        svc, _, _ = _setup()
        _, b, c = _chain(svc)
        tree = svc.hierarchy(b.id)
        assert tree.node.id == b.id
        assert [n.id for n in tree.walk()] == [b.id, c.id]

    def test_roots_and_children(self):
        svc, _, _ = _setup()
        a, b, _ = _chain(svc)
        svc.create("Another Root")
        assert [n.name for n in svc.roots()] == ["A", "Another Root"]
        assert svc.children(a.id) == [svc.get(b.id)]


class TestLookupsAndActivation:

    def test_get_by_slug(self):
        svc, _, _ = _setup()
        node = svc.create("Graphic Novels")
        assert svc.get_by_slug("graphic-novels") == node
        with pytest.raises(EntityNotFoundError):
            svc.get_by_slug("comics")

    def test_deactivate_twice_rejected(self):
        svc, _, _ = _setup()
        node = svc.create("Poetry")
        assert not svc.deactivate(node.id).is_active
        with pytest.raises(ValidationError, match="already inactive"):
            svc.deactivate(node.id)

    def test_reactivate_requires_free_name(self):
        svc, _, _ = _setup()
        old = svc.create("Poetry")
        svc.deactivate(old.id)
        svc.create("Poetry")
        with pytest.raises(DuplicateNameError):
            svc.reactivate(old.id)

    def test_reactivate(self):
        svc, _, _ = _setup()
        node = svc.create("Poetry")
        svc.deactivate(node.id)
        assert svc.reactivate(node.id).is_active

    def test_linked_item_count(self):
        svc, _, links = _setup()
        node = svc.create("Poetry")
        links.link(node.id, "b-1")
        links.link(node.id, "b-2")
        assert svc.linked_item_count(node.id) == 2


class TestAtomicCommits:

    def _racing_setup(self):
        repo = RacingCategoryRepository()
        return CategoryHierarchyService(repo, FakeCatalogLinkRepository()), repo

    def test_create_under_concurrently_changed_parent_stores_nothing(self):
        svc, repo = self._racing_setup()
        parent = svc.create("Fiction")
        repo.bump_before_commit = parent.id

        with pytest.raises(ConcurrencyConflictError):
            svc.create("Horror", parent_id=parent.id)

        assert [n.id for n in repo.list_all()] == [parent.id]
        assert repo.get_by_id(parent.id).child_ids == frozenset()

    def test_delete_with_concurrently_changed_parent_keeps_link(self):
        svc, repo = self._racing_setup()
        parent = svc.create("Fiction")
        child = svc.create("Horror", parent_id=parent.id)
        repo.bump_before_commit = parent.id

        with pytest.raises(ConcurrencyConflictError):
            svc.delete(child.id)

        assert repo.get_by_id(child.id).parent_id == parent.id
        assert child.id in repo.get_by_id(parent.id).child_ids
        _assert_symmetric(repo)

    def test_delete_of_concurrently_changed_node_keeps_parent_intact(self):
        svc, repo = self._racing_setup()
        parent = svc.create("Fiction")
        child = svc.create("Horror", parent_id=parent.id)
        repo.bump_before_commit = child.id

        with pytest.raises(ConcurrencyConflictError):
            svc.delete(child.id)

        assert child.id in repo.get_by_id(parent.id).child_ids
        _assert_symmetric(repo)
