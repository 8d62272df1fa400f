"""Topic detector interfaces and the partition post-processing step."""

from __future__ import annotations

from typing import Awaitable, Callable, Iterable, List, Protocol, Sequence, runtime_checkable

from ..transcript import Entry

DetectTopicsFunction = Callable[[List[Entry]], Awaitable[List[List[Entry]]]]


@runtime_checkable
class TopicDetectorProtocol(Protocol):
    """Protocol for topic detectors.

    Implementations must return groups that partition the input: every
    entry appears in exactly one group, and at least one group is
    returned for non-empty input.
    """

    async def detect_topics(self, entries: List[Entry]) -> List[List[Entry]]:
        """Group entries by topic."""
        ...


def group_entries_by_indices(
    index_groups: Iterable[Sequence[int]],
    entries: Sequence[Entry],
) -> List[List[Entry]]:
    """Turn model-proposed index groups into a partition of entries.

    Indices that are out of range or already claimed by an earlier group
    are dropped. Entries no group claimed are collected, in order, into a
    trailing group. When nothing usable remains, all entries form a
    single group.

    Args:
        index_groups: Entry indices per topic, in the order proposed.
        entries: The entries the indices refer to.

    Returns:
        The entry groups.
    """
    groups: List[List[Entry]] = []
    used = set()

    for indices in index_groups:
        group: List[Entry] = []
        for index in indices:
            if not 0 <= index < len(entries) or index in used:
                continue
            used.add(index)
            group.append(entries[index])
        if group:
            groups.append(group)

    unassigned = [entry for index, entry in enumerate(entries) if index not in used]
    if unassigned:
        groups.append(unassigned)

    return groups or [list(entries)]


class CallableTopicDetector:
    """Topic detector that delegates to a caller-supplied coroutine function."""

    def __init__(self, detect_function: DetectTopicsFunction):
        self._detect_function = detect_function

    async def detect_topics(self, entries: List[Entry]) -> List[List[Entry]]:
        return await self._detect_function(list(entries))
