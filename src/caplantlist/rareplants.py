"""CNPS Rare Plant Inventory rank and threat codes.

A California Rare Plant Rank (CRPR) combines a rarity rank with an optional
threat code, separated by a period: ``1B.2`` is rank 1B, threat 2.
"""

from __future__ import annotations

RANK_DESCRIPTIONS = {
    "1A": "Presumed extirpated in California and either rare or extinct elsewhere",
    "1B": "Rare, threatened, or endangered in California and elsewhere",
    "2A": "Presumed extirpated in California, but more common elsewhere",
    "2B": "Rare, threatened, or endangered in California, but more common elsewhere",
    "3": "Plants about which more information is needed - a review list",
    "4": "Plants of limited distribution - a watch list",
}

THREAT_DESCRIPTIONS = {
    "1": "Seriously threatened in California",
    "2": "Moderately threatened in California",
    "3": "Not very threatened in California",
}


def split_rank_and_threat(rank_and_threat: str) -> tuple[str, str | None]:
    """Split ``1B.2`` into ``("1B", "2")``; a bare rank has no threat code."""
    rank, _, threat = rank_and_threat.partition(".")
    return rank, threat or None


def get_rpi_rank_and_threat_descriptions(rank_and_threat: str | None) -> list[str]:
    """Describe a CRPR code in words.

    Unknown codes are returned as-is rather than dropped.
    """
    if not rank_and_threat:
        return []

    rank, threat = split_rank_and_threat(rank_and_threat)
    descriptions = [RANK_DESCRIPTIONS.get(rank, rank)]
    if threat:
        descriptions.append(THREAT_DESCRIPTIONS.get(threat, threat))
    return descriptions
