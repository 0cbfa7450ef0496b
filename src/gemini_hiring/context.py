"""Slices of one operation's output used as input context for the next.

The dashboard chains operations: a hiring strategy informs the job
description, and both inform interview stage design. These helpers pick the
few fields downstream prompts actually use.
"""

from __future__ import annotations

from .schemas.inputs import (
    CoverageRequirements,
    JDContextForStages,
    JDRequirementsContext,
    MoneyRange,
    ProcessSpeedContext,
    SalaryPositioningContext,
    SkillsPriorityContext,
    StageSkillsContext,
    StrategyContextForJD,
    StrategyContextForStages,
    StrategySkillsContext,
)
from .schemas.outputs import HiringStrategy, JobDescription


def jd_context_for_stages(jd: JobDescription) -> JDContextForStages:
    return JDContextForStages(
        responsibilities=jd.responsibilities[:5],
        requirements=jd.requirements.required[:5],
        seniority_signals=(jd.seniority_signals or [])[:5],
    )


def jd_requirements_for_profile(jd: JobDescription) -> JDRequirementsContext:
    return JDRequirementsContext(
        required=jd.requirements.required[:20],
        preferred=jd.requirements.preferred[:20],
    )


def jd_requirements_for_coverage(jd: JobDescription) -> CoverageRequirements:
    return CoverageRequirements(
        required=jd.requirements.required,
        preferred=jd.requirements.preferred,
        responsibilities=jd.responsibilities,
    )


def strategy_context_for_jd(strategy: HiringStrategy) -> StrategyContextForJD:
    positioning = strategy.salary_positioning
    return StrategyContextForJD(
        salary_positioning=SalaryPositioningContext(
            strategy=positioning.strategy,
            recommended_range=MoneyRange(
                min=positioning.recommended_range.min,
                max=positioning.recommended_range.max,
                currency=positioning.recommended_range.currency,
            ),
        ),
        competitive_differentiators=strategy.competitive_differentiators[:3],
        skills_priority=SkillsPriorityContext(
            must_have=strategy.skills_priority.must_have[:5],
            nice_to_have=strategy.skills_priority.nice_to_have[:3],
        ),
    )


def strategy_context_for_stages(strategy: HiringStrategy) -> StrategyContextForStages:
    speed = strategy.process_speed
    return StrategyContextForStages(
        market_classification=strategy.market_classification,
        process_speed=ProcessSpeedContext(
            recommendation=speed.recommendation,
            max_stages=speed.max_stages,
            target_days=speed.target_days,
        ),
        skills_priority=StageSkillsContext(
            must_have=strategy.skills_priority.must_have[:5],
            nice_to_have=strategy.skills_priority.nice_to_have[:5],
        ),
        competitive_differentiators=strategy.competitive_differentiators[:3],
    )


def strategy_skills_for_profile(strategy: HiringStrategy) -> StrategySkillsContext:
    return StrategySkillsContext(
        must_have=strategy.skills_priority.must_have,
        nice_to_have=strategy.skills_priority.nice_to_have,
    )
