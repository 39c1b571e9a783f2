# utils/roster.py
from collections import namedtuple

RosterMerge = namedtuple("RosterMerge", ["source", "target"])


def merge_rosters(source_roster, target_roster, promote_ids, graduate_ids=frozenset()):
    """
    Compute new rosters for a source class and its promotion target.

    Repeating students stay in the source. The target is None when there is
    no target roster or nobody is promoted.
    """
    leaving = frozenset(promote_ids) | frozenset(graduate_ids)
    source = frozenset(source_roster) - leaving

    target = None
    if target_roster is not None and promote_ids:
        target = frozenset(target_roster) | frozenset(promote_ids)
    return RosterMerge(source, target)
