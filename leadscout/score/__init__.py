"""Scoring engine for ranking leads."""

from .scorer import LeadScorer

__all__ = ["LeadScorer"]
