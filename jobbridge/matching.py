"""
Skill matching engine.

Pairs every beneficiary with every active job whose required skills overlap
the beneficiary's skills, and ranks the pairs by how much of the job's
required skill set the beneficiary covers.

The engine is a pure function of its inputs: no I/O, no logging, no caching.
Given identical inputs it always returns the same matches in the same order.
"""

from typing import Iterable, List, Mapping, Optional, Sequence

from .models import Beneficiary, Job, Match, Provider


def match_percentage(matched: int, required: int) -> int:
    """
    Share of required skills covered, as a whole percentage.

    Rounds half up in exact integer arithmetic, so 1 of 8 (12.5%) gives 13.
    Any overlap counts as at least 1%, even against very large skill sets.

    Args:
        matched: Number of required skills the beneficiary has
        required: Number of skills the job requires (must be > 0)
    """
    if matched <= 0:
        return 0
    return max(1, (200 * matched + required) // (2 * required))


def compute_matches(
    beneficiaries: Sequence[Beneficiary],
    jobs: Iterable[Job],
    providers: Optional[Mapping[str, Provider]] = None,
) -> List[Match]:
    """
    Compute ranked beneficiary/job matches.

    Args:
        beneficiaries: Registered beneficiaries, in the order they should be paired
        jobs: Job openings; anything not active is ignored
        providers: Optional provider lookup by id, used to attach the job's
            provider to each match for display

    Returns:
        Matches sorted by match_percentage descending. Matches with equal
        percentage keep the order they were generated in (beneficiaries outer,
        jobs inner).
    """
    active_jobs = [job for job in jobs if job.is_active and len(job.required_skills) > 0]
    lookup = providers or {}

    results: List[Match] = []
    for beneficiary in beneficiaries:
        for job in active_jobs:
            matching = beneficiary.skills.intersection(job.required_skills)
            if not matching:
                continue
            results.append(
                Match(
                    beneficiary=beneficiary,
                    job=job,
                    matching_skills=matching,
                    match_percentage=match_percentage(len(matching), len(job.required_skills)),
                    provider=lookup.get(job.provider_id),
                )
            )

    # list.sort is stable: ties keep generation order
    results.sort(key=lambda m: m.match_percentage, reverse=True)
    return results
