"""
FPL Analyzer Services Layer

Stateless accounting over FPL history plus the recorder that owns run output.

Services:
    - FreeTransferTracker: Free-transfer entitlement from transfer history
    - ChipPolicy: Which chips remain playable this season
    - DecisionRecorder: Reasoning log and decision store writes/queries

Any caller that needs the entitlement can simply:
    from services import FreeTransferTracker
    tracker = FreeTransferTracker()
    result = tracker.calculate(history, target_gw=gameweek)
"""

from .free_transfer_tracker import FreeTransferTracker, compute_entitlement
from .chip_availability import ChipPolicy
from .decision_recorder import DecisionRecorder

__all__ = ['FreeTransferTracker', 'compute_entitlement', 'ChipPolicy', 'DecisionRecorder']
