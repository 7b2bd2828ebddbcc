"""Normalized intelligent-search query."""

from dataclasses import dataclass

QUERY_KINDS = ("movie", "actor", "director", "genre")


@dataclass(frozen=True)
class IntelligentQueryEntity:
    """Result of asking the completion model to interpret a free-text query.

    Attributes:
        raw_query: What the user typed
        kind: One of QUERY_KINDS
        corrected_name: Canonical English form of the title or person
        explanation: Short explanation in the user's language
    """

    raw_query: str
    kind: str
    corrected_name: str
    explanation: str

    @property
    def is_person(self) -> bool:
        return self.kind in ("actor", "director")
