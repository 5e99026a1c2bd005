"""Offer monitor package exposing the scan cycle and its building blocks."""
from .config import MonitorConfig, create_config, create_config_from_env
from .identity import resolve_id
from .models import Offer, RawCandidate
from .parsing import parse_date_from_location
from .processor import validate_candidates
from .tracker import TrackerState, compute_new_offers
from .workflow import CycleResult, run_cycle

__all__ = [
    "CycleResult",
    "MonitorConfig",
    "Offer",
    "RawCandidate",
    "TrackerState",
    "compute_new_offers",
    "create_config",
    "create_config_from_env",
    "parse_date_from_location",
    "resolve_id",
    "run_cycle",
    "validate_candidates",
]
