from eqplan_core.domain.models import (  # noqa: F401
    AssetBucket,
    BucketName,
    BucketProjection,
    Constraint,
    EquityComposition,
    EquityRules,
    Hardness,
    PlanInputs,
    PlanResult,
    RequirementState,
    TargetMonth,
    TimelinePoint,
    default_buckets,
)

__all__ = [
    "AssetBucket",
    "BucketName",
    "BucketProjection",
    "Constraint",
    "EquityComposition",
    "EquityRules",
    "Hardness",
    "PlanInputs",
    "PlanResult",
    "RequirementState",
    "TargetMonth",
    "TimelinePoint",
    "default_buckets",
]
