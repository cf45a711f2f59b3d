"""
Bots module - Move selection for automated players.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy, FirstLegalPolicy, CapturePolicy: built-in policies
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy, CapturePolicy

POLICIES = {
    "random": RandomPolicy,
    "first": FirstLegalPolicy,
    "capture": CapturePolicy,
}

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "CapturePolicy",
    "POLICIES",
]
