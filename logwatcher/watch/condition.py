"""ConditionEvaluator — reduce a presence vector to one trigger decision.

Truth table::

    trigger_on_found  require_all   trigger iff
    ----------------  -----------   -------------------
    True              True          every keyword found
    True              False         any keyword found
    False             True          every keyword missing
    False             False         any keyword missing

With a single keyword ``require_all`` makes no difference.
"""

from __future__ import annotations

from collections.abc import Sequence

from logwatcher.models import PresenceVector


def evaluate_condition(
    presence: PresenceVector,
    trigger_on_found: bool,
    require_all: bool,
) -> bool:
    if trigger_on_found:
        return all(presence) if require_all else any(presence)
    if require_all:
        return not any(presence)
    return not all(presence)


def describe_outcome(trigger_on_found: bool, require_all: bool, triggered: bool) -> str:
    """Sentence for one tick: the trigger message, or its verbose complement."""
    if trigger_on_found:
        if require_all:
            return "All keywords are found" if triggered else "One or more keywords were missing"
        return "One or more keywords are found" if triggered else "All keywords were missing"
    if require_all:
        return "All keywords are missing" if triggered else "One or more keywords were found"
    return "One or more keywords are missing" if triggered else "All keywords were found"


def format_keyword_list(keywords: Sequence[str], require_all: bool) -> str:
    """``"a", "b" or "c"`` (``and`` when all keywords are required)."""
    quoted = [f'"{k}"' for k in keywords]
    if len(quoted) == 1:
        return quoted[0]
    joiner = "and" if require_all else "or"
    return f"{', '.join(quoted[:-1])} {joiner} {quoted[-1]}"


def describe_condition(
    keywords: Sequence[str],
    trigger_on_found: bool,
    require_all: bool,
) -> str:
    """Startup banner sentence, e.g. ``If any of "a" or "b" is found.``"""
    listed = format_keyword_list(keywords, require_all)
    state = "found" if trigger_on_found else "missing"
    if len(keywords) == 1:
        return f"If {listed} is {state}."
    if require_all:
        return f"If {listed} are all {state}."
    return f"If any of {listed} is {state}."
