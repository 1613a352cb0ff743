"""
AI Module
=========
Decision making for the hose head.

- select_target: Pick the next cone to fill, with urgent triage
"""

from .targeting import (
    select_target,
    assess_cone,
    ConeAssessment,
    TargetingReport
)

__all__ = [
    'select_target',
    'assess_cone',
    'ConeAssessment',
    'TargetingReport'
]
