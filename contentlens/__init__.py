"""ContentLens - real-time AI-likelihood scoring for on-page text"""

from __future__ import annotations

__version__ = "1.0.0"


# Lazy imports so `contentlens.scoring` can be used without loading bs4
def __getattr__(name: str):
    """
    Lazy imports to avoid loading the DOM layer when only scoring text.
    """
    if name in ("normalize_text", "hash_text", "content_key"):
        from contentlens.scoring import text

        return getattr(text, name)

    if name in ("CompositeScorer", "score_text", "SCORING_VERSION"):
        from contentlens.scoring import scorer

        return getattr(scorer, name)

    if name in ("PageDocument", "CandidateSelector"):
        from contentlens.dom import document, scanner

        if name == "PageDocument":
            return document.PageDocument
        return scanner.CandidateSelector

    if name in ("Orchestrator", "ContentSession"):
        from contentlens.pipeline import orchestrator, session

        if name == "Orchestrator":
            return orchestrator.Orchestrator
        return session.ContentSession

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "normalize_text",
    "hash_text",
    "content_key",
    "CompositeScorer",
    "score_text",
    "SCORING_VERSION",
    "PageDocument",
    "CandidateSelector",
    "Orchestrator",
    "ContentSession",
]
