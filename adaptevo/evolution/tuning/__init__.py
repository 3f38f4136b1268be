from adaptevo.evolution.tuning.tuner import (
    StrategyAdjustment,
    StrategyAutoTuner,
    TunerConfig,
    TuningAction,
    TuningReport,
    recent_improvement,
)

__all__ = [
    "StrategyAdjustment",
    "StrategyAutoTuner",
    "TunerConfig",
    "TuningAction",
    "TuningReport",
    "recent_improvement",
]
