"""
Hose Targeting
==============
Choose which cone the hose should fill next.

For every cone work out whether the hose can reach it and fill it up
before the belt carries it out of the hose range. Among the cones that
can be done, take the one that will be finished soonest.

Triage: a fillable cone whose slack (time left minus time needed) is
below the urgent threshold is "urgent". If any urgent cones exist the
soonest-finished urgent cone wins instead, even when some relaxed cone
would be quicker. Otherwise the urgent ones tend to escape while the
hose is busy with easy work.

Ties are broken by spawn order (first cone seen wins).
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, TYPE_CHECKING

from ..entities import Cone, ConeStatus
from ..physics import intercept, vec

if TYPE_CHECKING:
    from ..config import Parameters


logger = logging.getLogger(__name__)


@dataclass
class ConeAssessment:
    """What the targeting pass concluded about one cone this tick"""
    status: ConeStatus
    timelimit: float = float('inf')           # s until cone leaves hose range
    filltime: float = 0.0                     # s to top it off once pouring
    movetime: float = float('inf')            # s for the hose to get there
    totaltime: float = float('inf')           # movetime + filltime
    fillpoint: Optional[np.ndarray] = None    # Intercept point

    @property
    def slack(self) -> float:
        return self.timelimit - self.totaltime

    @property
    def is_candidate(self) -> bool:
        return self.status in (ConeStatus.BORING, ConeStatus.URGENT)


@dataclass
class TargetingReport:
    """Output of one targeting pass"""
    assessments: Dict[int, ConeAssessment] = field(default_factory=dict)
    target_id: Optional[int] = None
    destination: Optional[np.ndarray] = None
    urgent_ids: List[int] = field(default_factory=list)
    urgent_mode: bool = False

    @property
    def candidates(self) -> int:
        return sum(1 for a in self.assessments.values() if a.is_candidate)

    def status_of(self, cone_id: int) -> ConeStatus:
        assessment = self.assessments.get(cone_id)
        return assessment.status if assessment else ConeStatus.BORING


def assess_cone(cone: Cone, hose_position: np.ndarray, params: 'Parameters') -> ConeAssessment:
    """
    Can the hose get to this cone and fill it before it escapes?

    Returns:
        ConeAssessment. BORING/URGENT cones are candidates, the rest
        are skipped by select_target.
    """
    if cone.fill >= 1.0:
        return ConeAssessment(status=ConeStatus.ALREADY_FULL)

    # Time before the cone moves out of range
    timelimit = (params.hose_range.right - cone.x) / params.belt_speed
    # Time it needs under the hose
    filltime = (1.0 - cone.fill) / params.hose_fill_rate
    if filltime > timelimit:
        return ConeAssessment(status=ConeStatus.CANT_FILL, timelimit=timelimit, filltime=filltime)

    # Where the hose can meet the cone, predicting where it will be by then
    solution = intercept(cone.position, vec(params.belt_speed, 0.0),
                         hose_position, params.hose_speed)
    if solution is None or not params.hose_range.contains(solution.point):
        return ConeAssessment(status=ConeStatus.CANT_FILL, timelimit=timelimit, filltime=filltime)

    totaltime = filltime + solution.time
    assessment = ConeAssessment(
        status=ConeStatus.BORING,
        timelimit=timelimit,
        filltime=filltime,
        movetime=solution.time,
        totaltime=totaltime,
        fillpoint=solution.point
    )
    if totaltime > timelimit:
        assessment.status = ConeStatus.CANT_FILL
    elif timelimit - totaltime < params.urgent_time:
        assessment.status = ConeStatus.URGENT
    return assessment


def _soonest(cone_ids: Sequence[int], assessments: Dict[int, ConeAssessment]) -> Optional[int]:
    """Smallest totaltime; strict comparison keeps the first one seen on ties."""
    best_id = None
    best_time = 0.0
    for cone_id in cone_ids:
        totaltime = assessments[cone_id].totaltime
        if best_id is None or totaltime < best_time:
            best_id = cone_id
            best_time = totaltime
    return best_id


def select_target(cones: Sequence[Cone],
                  hose_position: np.ndarray,
                  params: 'Parameters') -> TargetingReport:
    """
    Run one targeting pass.

    Args:
        cones: Live cones in spawn order
        hose_position: Where the hose head is now
        params: Current simulation parameters

    Returns:
        TargetingReport with a verdict for every cone and the chosen
        target (None if nothing can be filled in time).
    """
    report = TargetingReport()
    candidates: List[int] = []

    for cone in cones:
        assessment = assess_cone(cone, hose_position, params)
        report.assessments[cone.cone_id] = assessment
        if not assessment.is_candidate:
            continue
        candidates.append(cone.cone_id)
        if assessment.status == ConeStatus.URGENT:
            report.urgent_ids.append(cone.cone_id)

    if report.urgent_ids:
        report.target_id = _soonest(report.urgent_ids, report.assessments)
        report.urgent_mode = True
        logger.debug("Triage: %d urgent cones, picked #%d",
                     len(report.urgent_ids), report.target_id)
    else:
        report.target_id = _soonest(candidates, report.assessments)

    if report.target_id is not None:
        report.destination = report.assessments[report.target_id].fillpoint.copy()

    return report
