from typing import Iterable, List


def normalize_skills(skills: Iterable[str]) -> List[str]:
    """Strip, lowercase and de-duplicate skill labels, keeping first-seen order."""
    seen = []
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        label = skill.strip().lower()
        if label and label not in seen:
            seen.append(label)
    return seen
