"""Batch simulation, statistics and weapon-vs-baseline comparison."""

from .baseline import BASELINE_WEAPONS, baselines_for_level
from .comparison import WeaponComparison, compare_analyses
from .simulation import SimulationConfig, SimulationEngine, SimulationResult
from .statistics import StatisticalAnalysis, StatisticalAnalyzer

__all__ = [
    "BASELINE_WEAPONS",
    "SimulationConfig",
    "SimulationEngine",
    "SimulationResult",
    "StatisticalAnalysis",
    "StatisticalAnalyzer",
    "WeaponComparison",
    "baselines_for_level",
    "compare_analyses",
]
