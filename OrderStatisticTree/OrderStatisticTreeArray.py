import logging
import operator
import numpy as np
from numba import njit, prange
from typing import Any, Callable, Iterable, Iterator, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)



# Arena layout, one int64 row per node:
#     ROW[5]: [left | right | parent | height | count]
#     count  = number of nodes in the LEFT subtree
#     height = -1 for an absent node, 0 for a leaf
#
# Row 0 is the null sentinel (height -1, count 0) and is never written,
# so absent children read back uniform values without branching.
# Keys are arbitrary Python objects and live outside the arena in keys[index].
LEFT   = 0
RIGHT  = 1
PARENT = 2
HEIGHT = 3
COUNT  = 4
FIELDS = 5

NIL              = 0
DEFAULT_CAPACITY = 16
STACK_DEPTH      = 128 # AVL height bound for any int64-addressable tree

# Verifier result codes
HEALTHY    = 0
CYCLE      = 1
BAD_LINK   = 2
BAD_PARENT = 3
BAD_HEIGHT = 4
UNBALANCED = 5
BAD_COUNT  = 6

_VIOLATIONS = {
    CYCLE:      "cycle",
    BAD_LINK:   "link",
    BAD_PARENT: "parent",
    BAD_HEIGHT: "height",
    UNBALANCED: "balance",
    BAD_COUNT:  "count",
}



# ---------- JIT-Compiled Accessors / Updaters for Arena Rows ----------
@njit(inline="always")
def _set_left(
    nodes: np.ndarray,
    index: np.int64,
    child: np.int64

) -> None:

    """
    Link `child` as the left child of `index` and point its parent back.
    """

    nodes[index, LEFT] = child
    if child != NIL:
        nodes[child, PARENT] = index

@njit(inline="always")
def _set_right(
    nodes: np.ndarray,
    index: np.int64,
    child: np.int64

) -> None:

    """
    Link `child` as the right child of `index` and point its parent back.
    """

    nodes[index, RIGHT] = child
    if child != NIL:
        nodes[child, PARENT] = index

@njit(inline="always")
def _replace_child(
    nodes:  np.ndarray,
    parent: np.int64,
    old:    np.int64,
    new:    np.int64

) -> None:

    """
    Put `new` into the slot of `parent` that currently holds `old`.

    When `parent` is NIL, `old` was the root and `new` only loses its parent.
    `new` may be NIL (splicing a leaf out).
    """

    if parent == NIL:
        if new != NIL:
            nodes[new, PARENT] = NIL
    elif nodes[parent, LEFT] == old:
        _set_left(nodes, parent, new)
    else:
        _set_right(nodes, parent, new)

@njit(inline="always")
def _update_height(
    nodes: np.ndarray,
    index: np.int64

) -> None:

    """
    height(index) = max(height(index->left), height(index->right)) + 1
    """

    nodes[index, HEIGHT] = max(
        nodes[nodes[index, LEFT], HEIGHT],
        nodes[nodes[index, RIGHT], HEIGHT]
    ) + 1

@njit(inline="always")
def _add_to_counters(
    nodes: np.ndarray,
    index: np.int64,
    delta: np.int64

) -> None:

    """
    Add `delta` to the left-subtree size of every strict ancestor of `index`
    that is reached by stepping up from its left child.

    Must run while `index` is still linked into the tree.
    """

    child  = index
    parent = nodes[child, PARENT]

    while parent != NIL:
        if nodes[parent, LEFT] == child:
            nodes[parent, COUNT] += delta

        child  = parent
        parent = nodes[child, PARENT]

@njit(inline="always")
def _minimum(
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    while nodes[index, LEFT] != NIL:
        index = nodes[index, LEFT]

    return index

@njit(inline="always")
def _maximum(
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    while nodes[index, RIGHT] != NIL:
        index = nodes[index, RIGHT]

    return index



# ---------- JIT-Compiled Rotations ----------
@njit(inline="always")
def right_rotation( # SRR: Single Right Rotation
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    """
    Perform a single right rotation (SRR) around the node at `index`.

    The left child (pivot) takes the place of `index` under its former
    parent, `index` becomes the pivot's right child, and the pivot's old
    right subtree moves over to become the left subtree of `index`.

    Heights are recomputed bottom-up: first `index`, then the pivot.
    `index` loses the pivot and the pivot's left subtree from its left side,
    so its count drops by count(pivot) + 1. The pivot's left side is untouched.

    :param nodes: Arena of node rows
    :type nodes: np.ndarray
    :param index: Index of the node to rotate
    :type index: np.int64
    :return: Index of the new root of the rotated subtree
    :rtype: np.int64
    """

    pivot  = nodes[index, LEFT]
    parent = nodes[index, PARENT]

    # Rotate
    _set_left(nodes, index, nodes[pivot, RIGHT])
    _replace_child(nodes, parent, index, pivot)
    _set_right(nodes, pivot, index)

    # Update heights
    _update_height(nodes, index)
    _update_height(nodes, pivot)

    # Update counts
    nodes[index, COUNT] -= nodes[pivot, COUNT] + 1

    return pivot # new root

@njit(inline="always")
def left_rotation( # SLR: Single Left Rotation
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    """
    Perform a single left rotation (SLR) around the node at `index`.

    This rotation is applied when a node becomes right-heavy.
    The right child (pivot) becomes the root of the subtree, `index`
    becomes the pivot's left child, and the pivot's old left subtree
    becomes the right subtree of `index`.

    The pivot gains `index` and everything left of it, so its count grows
    by count(index) + 1. The count of `index` does not change.

    :param nodes: Arena of node rows
    :type nodes: np.ndarray
    :param index: Index of the subtree root to rotate
    :type index: np.int64
    :return: Index of the new root after rotation
    :rtype: np.int64
    """

    pivot  = nodes[index, RIGHT]
    parent = nodes[index, PARENT]

    # Rotate
    _set_right(nodes, index, nodes[pivot, LEFT])
    _replace_child(nodes, parent, index, pivot)
    _set_left(nodes, pivot, index)

    # Update heights
    _update_height(nodes, index)
    _update_height(nodes, pivot)

    # Update counts
    nodes[pivot, COUNT] += nodes[index, COUNT] + 1

    return pivot # new root

@njit(inline="always")
def left_right_rotation( # LR
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    """Rotate the left child left, then `index` right."""

    left_rotation(nodes, nodes[index, LEFT])
    return right_rotation(nodes, index)

@njit(inline="always")
def right_left_rotation( # RL
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    """Rotate the right child right, then `index` left."""

    right_rotation(nodes, nodes[index, RIGHT])
    return left_rotation(nodes, index)

@njit
def _rebalance(
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    """
    Restore the AVL condition at `index` if its children differ in height by 2.

    Returns the index now occupying the position of `index`
    (`index` itself when nothing had to be done).
    """

    left  = nodes[index, LEFT]
    right = nodes[index, RIGHT]
    h_l   = nodes[left, HEIGHT]
    h_r   = nodes[right, HEIGHT]

    if h_l > h_r + 1: # L
        if nodes[nodes[left, LEFT], HEIGHT] >= nodes[nodes[left, RIGHT], HEIGHT]: # LL
            return right_rotation(nodes, index)
        return left_right_rotation(nodes, index) # LR

    if h_r > h_l + 1: # R
        if nodes[nodes[right, RIGHT], HEIGHT] >= nodes[nodes[right, LEFT], HEIGHT]: # RR
            return left_rotation(nodes, index)
        return right_left_rotation(nodes, index) # RL

    return index



# ---------- JIT-Compiled Order-Statistic Tree Core Operations ----------
@njit
def fix_after_modification(
    nodes:          np.ndarray,
    root:           np.int64,
    start:          np.int64,
    insertion_mode: bool

) -> np.int64:

    """
    Retrace from `start` up to the root, recomputing heights and rotating
    wherever a node has become unbalanced.

    After an insertion one rotation (single or double) restores the balance
    of the whole path, so insertion mode stops at the first one.
    A deletion can shorten the subtree again after a rotation, so deletion
    mode keeps going all the way up.

    Args:
        nodes (np.ndarray): Arena of node rows.
        root (np.int64): Current root index.
        start (np.int64): First ancestor to examine (NIL does nothing).
        insertion_mode (bool): Stop after the first rotation.

    Returns:
        np.int64: The (possibly new) root index.
    """

    node = start

    while node != NIL:
        sub_root = _rebalance(nodes, node)

        if sub_root != node:
            parent = nodes[sub_root, PARENT]
            if parent == NIL:
                root = sub_root
            else:
                _update_height(nodes, parent)

            if insertion_mode:
                return root

            node = sub_root

        _update_height(nodes, node)
        node = nodes[node, PARENT]

    return root

@njit
def attach(
    nodes:   np.ndarray,
    root:    np.int64,
    parent:  np.int64,
    index:   np.int64,
    go_left: bool

) -> np.int64:

    """
    Link the freshly allocated row `index` as a leaf under `parent`.

    The key comparison that chose `parent` and the side has already been done
    by the caller. Increments the left-subtree counters along the root path,
    then rebalances in insertion mode.

    Parameters
    ----------
    nodes : np.ndarray
        The arena holding all nodes of the tree.
    root : np.int64
        Index of the current root node (NIL if the tree is empty).
    parent : np.int64
        Index of the node that receives the new leaf (NIL for the first node).
    index : np.int64
        Row allocated for the new node.
    go_left : bool
        Whether the leaf becomes the left child of `parent`.

    Returns
    -------
    np.int64
        Updated root index after insertion.
    """

    nodes[index, :] = 0

    # First node
    if parent == NIL:
        return index

    if go_left:
        _set_left(nodes, parent, index)
    else:
        _set_right(nodes, parent, index)

    _add_to_counters(nodes, index, 1)
    return fix_after_modification(nodes, root, parent, True)

@njit
def detach(
    nodes: np.ndarray,
    root:  np.int64,
    index: np.int64

) -> Tuple[np.int64, np.int64]:

    """
    Structurally remove the node at `index` from the tree.

    Cases:
    1. At most one child: `index` itself is spliced out, its child (if any)
    takes its slot.
    2. Two children: the in-order successor (leftmost node of the right
    subtree, which has no left child) is spliced out instead. The caller
    must move the successor's key into `index`.

    In both cases the counters of every strict ancestor reached through a
    left child of the detached row are decremented before it is unlinked,
    the row is cleared, and the path is retraced in deletion mode.

    Args:
        nodes (np.ndarray): Arena of node rows.
        root (np.int64): Current root index.
        index (np.int64): Row holding the key to delete.

    Returns:
        Tuple[np.int64, np.int64]:
            - new_root_index.
            - detached_index: the row that was unlinked and may be recycled.
    """

    removed = index
    if nodes[index, LEFT] != NIL and nodes[index, RIGHT] != NIL:
        removed = _minimum(nodes, nodes[index, RIGHT])

    _add_to_counters(nodes, removed, -1)

    child = nodes[removed, LEFT]
    if child == NIL:
        child = nodes[removed, RIGHT]

    parent = nodes[removed, PARENT]
    _replace_child(nodes, parent, removed, child)
    if parent == NIL:
        root = child

    nodes[removed, :] = 0

    root = fix_after_modification(nodes, root, parent, False)
    return root, removed

@njit(inline="always")
def select_index(
    nodes: np.ndarray,
    root:  np.int64,
    index: np.int64

) -> np.int64:

    """
    Descend by left-subtree sizes to the row holding the `index`-th key.

    The caller guarantees 0 <= index < size. Returns NIL otherwise.
    """

    node = root
    while node != NIL:
        count = nodes[node, COUNT]

        if index > count:
            index -= count + 1
            node   = nodes[node, RIGHT]

        elif index < count:
            node = nodes[node, LEFT]

        else:
            return node

    return NIL

@njit(parallel=True)
def _select_bulk(
    nodes:   np.ndarray,
    root:    np.int64,
    indices: np.ndarray

) -> np.ndarray:

    """
    Resolve many order statistics at once, spreading the read-only descents
    over all cores with `prange`.
    """

    size    = indices.size
    results = np.zeros(size, dtype=np.int64)
    for i in prange(size):
        results[i] = select_index(nodes, root, indices[i])

    return results

@njit
def successor(
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    """Next row in key order, climbing parent links when there is no right subtree."""

    right = nodes[index, RIGHT]
    if right != NIL:
        return _minimum(nodes, right)

    child  = index
    parent = nodes[child, PARENT]
    while parent != NIL and nodes[parent, RIGHT] == child:
        child  = parent
        parent = nodes[child, PARENT]

    return parent

@njit
def predecessor(
    nodes: np.ndarray,
    index: np.int64

) -> np.int64:

    left = nodes[index, LEFT]
    if left != NIL:
        return _maximum(nodes, left)

    child  = index
    parent = nodes[child, PARENT]
    while parent != NIL and nodes[parent, LEFT] == child:
        child  = parent
        parent = nodes[child, PARENT]

    return parent

@njit
def first_index(nodes: np.ndarray, root: np.int64) -> np.int64:
    return _minimum(nodes, root) if root != NIL else NIL

@njit
def last_index(nodes: np.ndarray, root: np.int64) -> np.int64:
    return _maximum(nodes, root) if root != NIL else NIL

@njit
def inorder_traversal( # LVR
    nodes: np.ndarray,
    root:  np.int64,
    size:  np.int64

) -> np.ndarray:

    """
    Extracts all row indices in ascending key order.
    Used for snapshots and by the ordering check of the verifier.
    """

    traverse = np.zeros(size, dtype=np.int64)
    stack    = np.zeros(STACK_DEPTH, dtype=np.int64)

    current_index = root
    stack_idx     = 0
    traverse_idx  = 0

    while traverse_idx < size:

        while current_index != NIL:
            stack[stack_idx] = current_index
            stack_idx += 1
            current_index = nodes[current_index, LEFT]

        if stack_idx > 0:
            stack_idx -= 1
            current_index = stack[stack_idx]

            traverse[traverse_idx] = current_index
            traverse_idx += 1

            current_index = nodes[current_index, RIGHT]

        else:
            break

    return traverse



# ---------- JIT-Compiled Invariant Verifier ----------
@njit
def check_structure(
    nodes: np.ndarray,
    root:  np.int64

) -> Tuple[np.int64, np.int64, np.int64]:

    """
    Independently recompute the shape, heights and subtree sizes of the tree
    and compare them against the metadata stored in the arena.

    Pass 1 walks the links preorder with an explicit stack and a visited mask:
    reaching a node twice is a cycle, a child whose parent link does not name
    the node it hangs from is a broken back-reference.
    Pass 2 replays the preorder backwards (children before parents) computing
    heights and sizes from scratch. Stored heights, counts and the maintained
    balance are only read to be compared, never trusted.

    Args:
        nodes (np.ndarray): Arena of node rows.
        root (np.int64): Root index.

    Returns:
        Tuple[np.int64, np.int64, np.int64]:
            - code: HEALTHY or the first violated property.
            - node: offending row (NIL when healthy).
            - seen: number of nodes reached from the root.
    """

    rows = nodes.shape[0]
    seen = 0

    if root == NIL:
        return HEALTHY, NIL, seen

    if root < 0 or root >= rows:
        return BAD_LINK, NIL, seen

    if nodes[root, PARENT] != NIL:
        return BAD_PARENT, root, seen

    visited = np.zeros(rows, dtype=np.bool_)
    order   = np.zeros(rows, dtype=np.int64)
    stack   = np.zeros(2 * rows + 1, dtype=np.int64)

    stack[0] = root
    top      = 1

    while top > 0:
        top -= 1
        node = stack[top]

        if visited[node]:
            return CYCLE, node, seen

        visited[node] = True
        order[seen]   = node
        seen += 1

        for side in range(LEFT, RIGHT + 1): # LEFT, RIGHT
            child = nodes[node, side]
            if child == NIL:
                continue

            if child < 0 or child >= rows:
                return BAD_LINK, node, seen

            if visited[child]:
                return CYCLE, child, seen

            if nodes[child, PARENT] != node:
                return BAD_PARENT, child, seen

            stack[top] = child
            top += 1

    heights = np.zeros(rows, dtype=np.int64)
    sizes   = np.zeros(rows, dtype=np.int64)
    heights[NIL] = -1

    for i in range(seen - 1, -1, -1):
        node  = order[i]
        left  = nodes[node, LEFT]
        right = nodes[node, RIGHT]
        h_l   = heights[left]
        h_r   = heights[right]
        h     = max(h_l, h_r) + 1

        if nodes[node, HEIGHT] != h:
            return BAD_HEIGHT, node, seen

        if abs(h_l - h_r) > 1:
            return UNBALANCED, node, seen

        if nodes[node, COUNT] != sizes[left]:
            return BAD_COUNT, node, seen

        heights[node] = h
        sizes[node]   = sizes[left] + sizes[right] + 1

    return HEALTHY, NIL, seen



# --------- Utils ---------
def _natural_compare(a: Any, b: Any) -> int:
    if a < b:
        return -1
    if b < a:
        return 1
    return 0

def _new_arena(rows: int) -> np.ndarray:
    nodes = np.zeros((rows, FIELDS), dtype=np.int64)
    nodes[NIL, HEIGHT] = -1
    return nodes

class HealthReport(NamedTuple):
    """
    Verdict of the invariant verifier.

    `violation` names the first failing property: one of "cycle", "link",
    "parent", "height", "balance", "count", "size" or "order".
    `key` is the key stored at the offending node, when there is one.
    """

    healthy:   bool
    violation: Optional[str] = None
    key:       Any           = None



# --------- OrderStatisticTree API ---------
class OrderStatisticTree:
    """
    Sorted set with O(log n) select (k-th smallest) and rank (position of a key).

    An AVL tree stored in a NumPy arena: nodes are rows addressed by integer
    index, parent links are plain indices, and every row carries the size of
    its left subtree. Structural work (linking, rotations, counter walks,
    selection, verification) runs in Numba kernels; key comparisons run in
    Python so any totally ordered key type works.

    Removing a key that sits in a node with two children moves the successor's
    key into that node and frees the successor's row, so rows are not tied to
    keys. Rows are never exposed through this API.

    Not thread-safe. Mutating the tree while a lazy iterator is running makes
    that iterator raise RuntimeError; use `inorder()` for a snapshot.

    Attributes:
        capacity (int): Number of allocated rows, excluding the sentinel.
    """

    def __init__(
        self,
        iterable: Optional[Iterable[Any]]             = None,
        cmp:      Optional[Callable[[Any, Any], int]] = None,
        capacity: int                                 = DEFAULT_CAPACITY

    ) -> None:

        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ValueError(
                f"The capacity must be a non-negative integer, not {capacity!r}"
            )

        self._cmp              = cmp if cmp is not None else _natural_compare
        self._initial_capacity = capacity
        self._reset(capacity)

        if iterable is not None:
            self.update(iterable)

    def _reset(self, capacity: int) -> None:
        self._nodes          = _new_arena(capacity + 1)
        self._keys           = [None] * (capacity + 1)
        self._root           = NIL
        self._size           = 0
        self._free           = 1
        self._free_list      = np.zeros(capacity + 1, dtype=np.int64)
        self._free_list_top  = 0
        self._mod_count      = 0

    @property
    def capacity(self) -> int:
        return self._nodes.shape[0] - 1

    @property
    def height(self) -> int:
        """Height of the tree: -1 when empty, 0 for a single key."""
        return int(self._nodes[self._root, HEIGHT])

    # --------- Arena management ---------
    def _grow(self) -> None:
        rows     = self._nodes.shape[0]
        new_rows = max(2 * rows, 2)

        nodes            = _new_arena(new_rows)
        nodes[:rows]     = self._nodes
        free_list        = np.zeros(new_rows, dtype=np.int64)
        free_list[:rows] = self._free_list

        self._nodes     = nodes
        self._free_list = free_list
        self._keys.extend([None] * (new_rows - rows))

        logger.debug("Grew arena from %d to %d rows", rows, new_rows)

    def _allocate(self) -> int:
        if self._free_list_top > 0:
            self._free_list_top -= 1
            return int(self._free_list[self._free_list_top])

        if self._free == self._nodes.shape[0]:
            self._grow()

        index = self._free
        self._free += 1
        return index

    def _release(self, index: int) -> None:
        self._keys[index] = None
        self._free_list[self._free_list_top] = index
        self._free_list_top += 1

    def _find(self, key: Any) -> int:
        nodes = self._nodes
        keys  = self._keys
        cmp   = self._cmp
        node  = self._root

        while node != NIL:
            c = cmp(key, keys[node])
            if c == 0:
                return node
            node = int(nodes[node, LEFT if c < 0 else RIGHT])

        return NIL

    def _check_index(self, index: int) -> None:
        if index < 0:
            raise IndexError(f"The input index is negative: {index}")

        if index >= self._size:
            raise IndexError(
                f"The input index is too large: {index}, "
                f"the size of this tree is {self._size}"
            )

    # --------- Mutation ---------
    def add(self, key: Any) -> bool:
        """Inserts a key with auto-rebalancing. Returns True if inserted, False if already present."""

        if key is None:
            raise ValueError("The input element is None.")

        keys   = self._keys
        cmp    = self._cmp
        parent = NIL
        c      = 0
        node   = self._root

        while node != NIL:
            c = cmp(key, keys[node])
            if c == 0:
                return False

            parent = node
            node   = int(self._nodes[node, LEFT if c < 0 else RIGHT])

        index = self._allocate()
        self._keys[index] = key
        self._root = attach(self._nodes, self._root, parent, index, c < 0)

        self._size      += 1
        self._mod_count += 1
        return True

    def remove(self, key: Any) -> bool:
        """Deletes a key and stabilizes the tree. Returns True if found and removed, False otherwise."""

        if key is None or self._root == NIL:
            return False

        index = self._find(key)
        if index == NIL:
            return False

        self._root, removed = detach(self._nodes, self._root, index)
        if removed != index:
            self._keys[index] = self._keys[removed]
        self._release(removed)

        self._size      -= 1
        self._mod_count += 1
        return True

    def discard(self, key: Any) -> None:
        self.remove(key)

    def update(self, iterable: Iterable[Any]) -> None:
        for key in iterable:
            self.add(key)

    def clear(self) -> None:
        """Drop every key and start over with a fresh arena of the initial capacity."""

        mod_count = self._mod_count
        self._reset(self._initial_capacity)
        self._mod_count = mod_count + 1

        logger.debug("Cleared tree, arena reset to %d rows", self._initial_capacity + 1)

    # --------- Queries ---------
    def contains(self, key: Any) -> bool:
        if key is None:
            return False
        return self._find(key) != NIL

    def select(self, index: int) -> Any:
        """
        Return the `index`-th smallest key (0-based).

        Raises:
            IndexError: If index < 0 or index >= size. Negative indices
                are not counted from the end.
            TypeError: If index is not an integer.
        """

        index = operator.index(index)
        self._check_index(index)
        return self._keys[select_index(self._nodes, self._root, index)]

    def get(self, index: int) -> Any:
        return self.select(index)

    def select_bulk(self, indices: Iterable[int]) -> List[Any]:
        """
        Resolve several order statistics in one parallel pass.

        Every index is validated before any is resolved.

        Args:
            indices (Iterable[int]): 0-based positions.

        Returns:
            List[Any]: The keys at those positions, in the order given.
        """

        positions = [operator.index(i) for i in indices]
        if not positions:
            return []

        self._check_index(min(positions))
        self._check_index(max(positions))

        indices = np.asarray(positions, dtype=np.int64)
        keys    = self._keys
        return [keys[i] for i in _select_bulk(self._nodes, self._root, indices)]

    def rank(self, key: Any) -> int:
        """
        Return the 0-based position of `key` in sorted order, or -1 if absent.

        The running rank starts as the root's left-subtree size. Stepping left
        removes the nodes between the two positions, stepping right adds the
        current node and the right child's left subtree.
        """

        nodes = self._nodes
        node  = self._root

        if key is None or node == NIL:
            return -1

        keys = self._keys
        cmp  = self._cmp
        rank = int(nodes[node, COUNT])

        while True:
            c = cmp(key, keys[node])

            if c < 0:
                left = int(nodes[node, LEFT])
                if left == NIL:
                    return -1

                rank -= int(nodes[node, COUNT] - nodes[left, COUNT])
                node  = left

            elif c > 0:
                right = int(nodes[node, RIGHT])
                if right == NIL:
                    return -1

                rank += 1 + int(nodes[right, COUNT])
                node  = right

            else:
                return rank

    def index_of(self, key: Any) -> int:
        return self.rank(key)

    def first(self) -> Any:
        if self._root == NIL:
            raise IndexError("first() on an empty tree")
        return self._keys[first_index(self._nodes, self._root)]

    def last(self) -> Any:
        if self._root == NIL:
            raise IndexError("last() on an empty tree")
        return self._keys[last_index(self._nodes, self._root)]

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    # --------- Traversal ---------
    def __iter__(self) -> Iterator[Any]:
        mod_count = self._mod_count
        node      = first_index(self._nodes, self._root)

        while node != NIL:
            yield self._keys[node]

            if self._mod_count != mod_count:
                raise RuntimeError("OrderStatisticTree changed during iteration")

            node = successor(self._nodes, node)

    def __reversed__(self) -> Iterator[Any]:
        mod_count = self._mod_count
        node      = last_index(self._nodes, self._root)

        while node != NIL:
            yield self._keys[node]

            if self._mod_count != mod_count:
                raise RuntimeError("OrderStatisticTree changed during iteration")

            node = predecessor(self._nodes, node)

    def inorder(self) -> List[Any]:
        """
        Snapshot of all keys in ascending order.

        Unlike iterating the tree directly, the returned list is unaffected
        by later mutations.
        """

        keys = self._keys
        return [keys[i] for i in inorder_traversal(self._nodes, self._root, self._size)]

    # --------- Invariant verification ---------
    def _violation(self, violation: str, node: int) -> HealthReport:
        key = self._keys[node] if 0 < node < len(self._keys) else None
        logger.warning("Health check failed: %s violated at key %r", violation, key)
        return HealthReport(False, violation, key)

    def health_report(self) -> HealthReport:
        """
        Recompute every structural invariant from scratch and report the first failure.

        Intended for tests and debugging; nothing in the mutation path calls it.
        The structural pass covers acyclicity, parent links, heights, balance
        and left-subtree counts; afterwards the number of reachable nodes must
        equal the size, and keys must be strictly increasing in order.
        """

        code, node, seen = check_structure(self._nodes, self._root)
        if code != HEALTHY:
            return self._violation(_VIOLATIONS[code], node)

        if seen != self._size:
            return self._violation("size", NIL)

        keys  = self._keys
        cmp   = self._cmp
        order = inorder_traversal(self._nodes, self._root, self._size)
        for previous, current in zip(order[:-1], order[1:]):
            if cmp(keys[previous], keys[current]) >= 0:
                return self._violation("order", current)

        return HealthReport(True)

    def is_healthy(self) -> bool:
        return self.health_report().healthy

    # --------- Python protocol ---------
    def __contains__(self, key: Any) -> bool:
        return self.contains(key)

    def __getitem__(self, index: int) -> Any:
        return self.select(index)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        root = self._keys[self._root] if self._root != NIL else None
        return (
            "OrderStatisticTree(size=" + str(self._size) + ", root=" + repr(root)
            + ", height=" + str(self.height) + ")"
        )



def build_tree(
    iterable: Iterable[Any],
    cmp:      Optional[Callable[[Any, Any], int]] = None

) -> OrderStatisticTree:

    """
    Build a tree from `iterable`, sizing the arena up front when its length is known.

    Args:
        iterable (Iterable[Any]): Keys to insert; duplicates are ignored.
        cmp (Callable, optional): Three-way comparison function.

    Returns:
        OrderStatisticTree: A balanced tree holding the distinct keys.
    """

    try:
        capacity = len(iterable)
    except TypeError:
        capacity = DEFAULT_CAPACITY

    return OrderStatisticTree(iterable, cmp=cmp, capacity=capacity)

def warmup() -> bool:
    """
    Minimally triggers JIT compilation for core tree operations.
    """

    tree = OrderStatisticTree([30, 20, 10, 40, 50, 25], capacity=2)

    tree.select(2)
    tree.rank(25)
    tree.select_bulk([0, 3])
    tree.remove(10)
    tree.remove(30)
    tree.inorder()
    list(tree)
    list(reversed(tree))

    return tree.is_healthy()
