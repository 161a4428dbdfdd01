"""
Bidirectional skill matching.

A candidate is interesting to the current user when it *has* something the
current user wants to learn, or *wants to learn* something the current user
has. Both intersections are computed against normalised skill labels and
summed into a score.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, Set

from skillswap.core.skills import normalize_skills


@dataclass
class MatchCandidate:
    candidate: Any
    common_skills_have: List[str] = field(default_factory=list)
    common_skills_to_learn: List[str] = field(default_factory=list)

    @property
    def match_score(self) -> int:
        return len(self.common_skills_have) + len(self.common_skills_to_learn)


def excluded_user_ids(user_id, matches: Iterable[Any], pending_requests: Iterable[Any] = ()) -> Set:
    """Ids of everyone the user already shares a match or a pending request with."""
    excluded = set()
    for match in matches:
        for other in (match.requester_id, match.target_id):
            if other != user_id:
                excluded.add(other)
    for request in pending_requests:
        for other in (request.requester_id, request.target_id):
            if other != user_id:
                excluded.add(other)
    return excluded


def _common(candidate_skills, wanted: Set[str]) -> List[str]:
    return [skill for skill in normalize_skills(candidate_skills) if skill in wanted]


def find_potential_matches(current_user, all_users: Iterable[Any], excluded_ids: Iterable = ()) -> List[MatchCandidate]:
    skills_have = set(normalize_skills(current_user.skills_have))
    skills_to_learn = set(normalize_skills(current_user.skills_to_learn))
    if not skills_have or not skills_to_learn:
        return []

    excluded = set(excluded_ids)
    excluded.add(current_user.id)

    candidates = []
    for user in all_users:
        if user.id in excluded:
            continue
        match = MatchCandidate(
            candidate=user,
            # то, что кандидат умеет и чему хочет научиться текущий пользователь
            common_skills_have=_common(user.skills_have, skills_to_learn),
            common_skills_to_learn=_common(user.skills_to_learn, skills_have),
        )
        if match.common_skills_have or match.common_skills_to_learn:
            candidates.append(match)

    # equal scores: newest profile first, then highest id
    candidates.sort(key=lambda m: (getattr(m.candidate, "created_at", None) or datetime.min, m.candidate.id or 0), reverse=True)
    candidates.sort(key=lambda m: m.match_score, reverse=True)
    return candidates
