"""Merging of partial compose states."""

from __future__ import annotations

import logging

import numpy as np

from matcompose.core.errors import IncompatibleStatesError

log = logging.getLogger(__name__)


def merge_states(left, right):
    """Combine two partial states into one.

    Every cell is written by at most one assembler, so the merged matrix is
    the element-wise sum of the two operands. Absent (None) and
    uninitialized states are identity elements, which makes the merge
    commutative and associative over any grouping of partitions.

    Parameters
    ----------
    left, right : MatrixComposeState or None
        States to combine. ``left`` is the accumulator and is updated in
        place unless it is read-only, in which case a copy is updated.

    Returns
    -------
    MatrixComposeState or None
        The merged state.

    Raises
    ------
    IncompatibleStatesError
        If both states are initialized with different shapes or buffer
        lengths.
    """
    if left is None:
        return right
    if right is None:
        return left

    if left.num_rows == 0:
        return right
    if right.num_rows == 0:
        return left

    if left.size != right.size or left.shape != right.shape:
        raise IncompatibleStatesError(
            "Internal error: Incompatible transition states: "
            f"{left.num_rows} x {left.num_cols} ({left.size} slots) vs "
            f"{right.num_rows} x {right.num_cols} ({right.size} slots)."
        )

    if not left.writeable:
        left = left.copy()
    accumulator = left.matrix
    np.add(accumulator, right.matrix, out=accumulator)
    return left


def combine_states(left, right):
    """Merge two states into a new one, leaving both operands untouched.

    Used where operands are cached task results that may be read again,
    e.g. futures in a Dask tree reduction.
    """
    if left is not None and left.num_rows != 0 and right is not None and right.num_rows != 0:
        left = left.copy()
    return merge_states(left, right)


def reduce_states(states, split_every=None):
    """Fold any number of partial states into one.

    Parameters
    ----------
    states : iterable of MatrixComposeState or None
        Partition states. Absent entries are skipped by the merge.
    split_every : int or None, default None
        None folds left to right. Otherwise states are merged in groups of
        ``split_every`` per level, the same shape as a distributed tree
        reduction.

    Returns
    -------
    MatrixComposeState or None
        The fully merged state, or None if there was nothing to merge.
    """
    states = list(states)
    if not states:
        return None
    if split_every is None:
        return _reduce_group(merge_states, *states)
    if split_every < 2:
        raise ValueError(f"split_every must be at least 2, got {split_every}.")

    depth = 0
    while len(states) > 1:
        states = [
            _reduce_group(merge_states, *states[i : i + split_every]) for i in range(0, len(states), split_every)
        ]
        depth += 1
    log.debug("reduce_states: merged in %d levels with split_every=%d", depth, split_every)
    return states[0]


def _reduce_group(combine_fn, *items):
    """Reduce a group of items by applying combine_fn pairwise."""
    result = items[0]
    for item in items[1:]:
        result = combine_fn(result, item)
    return result
