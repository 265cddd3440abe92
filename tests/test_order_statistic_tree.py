import pytest
from OrderStatisticTree import OrderStatisticTree, build_tree, warmup


def test_warmup():
    assert warmup()

def test_scenario_ascending_inserts():
    tree = OrderStatisticTree()
    for key in (10, 20, 30, 40):
        assert tree.add(key)

    assert tree.select(0) == 10
    assert tree.select(3) == 40
    assert tree.rank(30) == 2
    assert tree.size() == 4
    assert tree.is_healthy()

def test_scenario_remove_two_child_root():
    # 20 ends up as the root with two children, so its successor's row is freed
    tree = OrderStatisticTree([10, 20, 30, 40])
    assert tree.remove(20)

    assert tree.size() == 3
    assert not tree.contains(20)
    assert tree.select(1) == 30
    assert tree.rank(40) == 2
    assert tree.is_healthy()

def test_scenario_remove_leftmost_leaf():
    tree = OrderStatisticTree()
    for key in (0, -1, 10, 5, 15, 11, 30, 7):
        tree.add(key)

    tree.remove(-1)
    assert tree.is_healthy()
    assert tree.select(0) == 0
    assert tree.inorder() == [0, 5, 7, 10, 11, 15, 30]

def test_scenario_fill_and_drain_ascending():
    tree = OrderStatisticTree()
    for key in range(1, 1001):
        tree.add(key)
    assert tree.is_healthy()

    for key in range(1, 1001):
        assert tree.remove(key)
        assert tree.is_healthy()

    assert tree.size() == 0
    assert tree.is_empty()
    assert tree.height == -1

def test_add_reports_duplicates():
    tree = OrderStatisticTree()
    assert tree.add(5)
    assert not tree.add(5)
    assert len(tree) == 1

def test_remove_and_contains_absent_keys():
    tree = OrderStatisticTree(range(0, 20, 2))
    assert not tree.remove(3)
    assert not tree.contains(3)
    assert 4 in tree
    assert 5 not in tree
    assert len(tree) == 10

    empty = OrderStatisticTree()
    assert not empty.remove(1)
    assert not empty.contains(1)

def test_none_keys():
    tree = OrderStatisticTree([1, 2, 3])
    with pytest.raises(ValueError):
        tree.add(None)

    assert not tree.contains(None)
    assert not tree.remove(None)
    assert tree.rank(None) == -1
    assert len(tree) == 3

def test_index_of_matches_original_behavior():
    tree = OrderStatisticTree()
    for i in range(100):
        assert tree.add(2 * i)

    for i in range(100):
        assert tree.index_of(2 * i) == i

    for i in range(100, 150):
        assert tree.index_of(2 * i) == -1

    # Keys that fall between stored keys are absent too
    assert tree.rank(7) == -1
    assert tree.rank(-1) == -1

def test_select_on_empty_tree():
    tree = OrderStatisticTree()
    with pytest.raises(IndexError):
        tree.select(0)
    with pytest.raises(IndexError):
        tree.get(-1)
    with pytest.raises(IndexError):
        tree[0]

    assert tree.rank(0) == -1

def test_select_out_of_range():
    tree = OrderStatisticTree(range(5))
    with pytest.raises(IndexError):
        tree.select(-1)
    with pytest.raises(IndexError):
        tree.get(5)
    with pytest.raises(IndexError):
        tree[-1]

    with pytest.raises(TypeError):
        tree.select(1.5)

    assert tree[4] == 4

def test_select_bulk():
    tree = OrderStatisticTree(range(0, 300, 3))
    indices = [99, 0, 50, 50, 1]
    assert tree.select_bulk(indices) == [tree.select(i) for i in indices]
    assert tree.select_bulk([]) == []

    with pytest.raises(IndexError):
        tree.select_bulk([0, 100])
    with pytest.raises(IndexError):
        tree.select_bulk([-1])

    # Same index contract as select: no truncation, no int64 overflow
    with pytest.raises(TypeError):
        tree.select_bulk([1.7, 2.9])
    with pytest.raises(IndexError):
        tree.select_bulk([0, 2**70])

def test_incomparable_keys_leave_tree_untouched():
    tree = OrderStatisticTree([1, 2, 3])
    with pytest.raises(TypeError):
        tree.add("a")

    assert len(tree) == 3
    assert tree.inorder() == [1, 2, 3]
    assert tree.is_healthy()

    with pytest.raises(TypeError):
        tree.rank("a")
    with pytest.raises(TypeError):
        tree.contains("a")
    with pytest.raises(TypeError):
        tree.remove("a")

    assert len(tree) == 3
    assert tree.is_healthy()

def test_add_remove_around_root():
    # Grows and shrinks a one- to three-node tree through every root case
    tree = OrderStatisticTree()
    steps = [
        ("add", 0), ("add", -1), ("remove", -1), ("add", 1),
        ("remove", 1), ("add", -1), ("add", 1), ("remove", 0),
    ]

    for action, key in steps:
        assert getattr(tree, action)(key)
        assert tree.is_healthy(), (action, key)

    assert tree.inorder() == [-1, 1]
    assert tree.rank(1) == 1

def test_first_last():
    tree = OrderStatisticTree([5, 3, 9, 1])
    assert tree.first() == 1
    assert tree.last() == 9

    with pytest.raises(IndexError):
        OrderStatisticTree().first()
    with pytest.raises(IndexError):
        OrderStatisticTree().last()

def test_custom_comparator():
    def descending(a, b):
        return (b > a) - (b < a)

    tree = OrderStatisticTree(range(1, 6), cmp=descending)
    assert list(tree) == [5, 4, 3, 2, 1]
    assert tree.select(0) == 5
    assert tree.rank(1) == 4
    assert tree.is_healthy()

    assert tree.remove(3)
    assert tree.inorder() == [5, 4, 2, 1]

def test_comparator_by_field():
    people = [("carol", 35), ("alice", 30), ("bob", 25), ("dave", 40)]

    def by_age(a, b):
        return a[1] - b[1]

    tree = OrderStatisticTree(people, cmp=by_age)
    assert [name for name, _ in tree] == ["bob", "alice", "carol", "dave"]

    # Equal under the comparator means already present
    assert not tree.add(("erin", 30))
    assert tree.rank(("anyone", 35)) == 2

def test_string_keys():
    tree = OrderStatisticTree("the quick brown fox jumps over the lazy dog".split())
    assert tree.inorder() == sorted(set("the quick brown fox jumps over the lazy dog".split()))
    assert tree.select(0) == "brown"
    assert tree.rank("the") == len(tree) - 1

def test_iteration_is_lazy_and_restartable():
    tree = OrderStatisticTree([4, 2, 6, 1, 3, 5, 7])
    assert list(tree) == [1, 2, 3, 4, 5, 6, 7]
    assert list(tree) == [1, 2, 3, 4, 5, 6, 7]
    assert list(reversed(tree)) == [7, 6, 5, 4, 3, 2, 1]
    assert list(OrderStatisticTree()) == []

def test_mutation_during_iteration_raises():
    tree = OrderStatisticTree(range(10))
    iterator = iter(tree)
    assert next(iterator) == 0

    tree.add(100)
    with pytest.raises(RuntimeError):
        next(iterator)

    iterator = reversed(tree)
    next(iterator)
    tree.remove(5)
    with pytest.raises(RuntimeError):
        next(iterator)

def test_snapshot_survives_mutation():
    tree = OrderStatisticTree(range(10))
    for key in tree.inorder():
        if key % 2:
            tree.remove(key)

    assert list(tree) == [0, 2, 4, 6, 8]
    assert tree.is_healthy()

def test_clear():
    tree = OrderStatisticTree(range(100), capacity=4)
    iterator = iter(tree)
    next(iterator)

    tree.clear()
    assert len(tree) == 0
    assert tree.is_empty()
    assert tree.is_healthy()
    assert tree.capacity == 4
    with pytest.raises(RuntimeError):
        next(iterator)

    assert tree.add(1)
    assert list(tree) == [1]

def test_arena_grows_from_zero_capacity():
    tree = OrderStatisticTree(capacity=0)
    assert tree.capacity == 0

    for key in range(100):
        tree.add(key)

    assert tree.capacity >= 100
    assert tree.inorder() == list(range(100))
    assert tree.is_healthy()

def test_released_rows_are_reused():
    tree = OrderStatisticTree(range(10))
    free = tree._free

    tree.remove(5)
    tree.add(50)
    assert tree._free == free

    tree.remove(3)
    tree.remove(4)
    tree.add(-1)
    tree.add(-2)
    assert tree._free == free
    assert tree.inorder() == [-2, -1, 0, 1, 2, 6, 7, 8, 9, 50]
    assert tree.is_healthy()

def test_invalid_capacity():
    with pytest.raises(ValueError):
        OrderStatisticTree(capacity=-1)
    with pytest.raises(ValueError):
        OrderStatisticTree(capacity="16")
    with pytest.raises(ValueError):
        OrderStatisticTree(capacity=True)

def test_build_tree():
    tree = build_tree([3, 1, 2, 3])
    assert tree.capacity == 4
    assert list(tree) == [1, 2, 3]

    tree = build_tree(x * x for x in range(5))
    assert list(tree) == [0, 1, 4, 9, 16]

    tree = build_tree([1, 2, 3], cmp=lambda a, b: b - a)
    assert list(tree) == [3, 2, 1]

def test_height_and_repr():
    tree = OrderStatisticTree()
    assert tree.height == -1
    assert repr(tree) == "OrderStatisticTree(size=0, root=None, height=-1)"

    tree.add(1)
    assert tree.height == 0

    tree.update([2, 3])
    assert tree.height == 1
    assert repr(tree) == "OrderStatisticTree(size=3, root=2, height=1)"

    tree.discard(2)
    tree.discard(2)
    assert len(tree) == 2
