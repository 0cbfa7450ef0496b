"""Request schemas, one per operation.

These validate caller payloads before anything reaches a prompt. Unknown keys
are ignored; length limits mirror what the dashboard forms allow.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

ShortText = Annotated[str, Field(min_length=1, max_length=200)]
LevelText = Annotated[str, Field(min_length=1, max_length=100)]


class InputModel(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class MoneyRange(InputModel):
    min: float
    max: float
    currency: str = Field(max_length=10)


# --- generate-jd ---


class MarketContext(InputModel):
    salary_range: MoneyRange | None = None
    key_skills: list[str] | None = None
    demand_level: str | None = None
    competitors: list[str] | None = None


class SalaryPositioningContext(InputModel):
    strategy: str = Field(max_length=20)
    recommended_range: MoneyRange | None = None


class SkillsPriorityContext(InputModel):
    must_have: list[Annotated[str, Field(max_length=100)]] = Field(max_length=10)
    nice_to_have: list[Annotated[str, Field(max_length=100)]] = Field(max_length=10)


class StrategyContextForJD(InputModel):
    salary_positioning: SalaryPositioningContext | None = None
    competitive_differentiators: (
        list[Annotated[str, Field(max_length=200)]] | None
    ) = Field(default=None, max_length=5)
    skills_priority: SkillsPriorityContext | None = None


class JobDescriptionRequest(InputModel):
    role: ShortText
    level: LevelText
    industry: ShortText
    company_context: str | None = Field(default=None, max_length=2000)
    style: Literal["formal", "creative", "concise"]
    currency: str | None = Field(default=None, max_length=10)
    market_context: MarketContext | None = None
    strategy_context: StrategyContextForJD | None = None


# --- generate-strategy ---


class SalaryInsight(InputModel):
    min: float
    max: float
    median: float
    currency: str = Field(max_length=10)
    confidence: float


class CompetitionInsight(InputModel):
    companies_hiring: list[Annotated[str, Field(max_length=200)]]
    job_postings_count: int | None = None
    market_saturation: str = Field(max_length=50)


class DayRange(InputModel):
    min: float
    max: float


class TimeToHireInsight(InputModel):
    average_days: float
    range: DayRange


class CandidateAvailabilityInsight(InputModel):
    level: str = Field(max_length=50)
    description: str = Field(max_length=2000)


class KeySkillsInsight(InputModel):
    required: list[Annotated[str, Field(max_length=300)]]
    emerging: list[Annotated[str, Field(max_length=300)]]
    declining: list[Annotated[str, Field(max_length=300)]]


class MarketInsights(InputModel):
    salary: SalaryInsight
    competition: CompetitionInsight
    time_to_hire: TimeToHireInsight
    candidate_availability: CandidateAvailabilityInsight
    key_skills: KeySkillsInsight
    trends: list[Annotated[str, Field(max_length=2000)]]


class HiringStrategyRequest(InputModel):
    role: ShortText
    level: LevelText
    industry: ShortText
    market_insights: MarketInsights


# --- generate-candidate-profile ---


class JDRequirementsContext(InputModel):
    required: list[Annotated[str, Field(max_length=200)]] = Field(max_length=20)
    preferred: list[Annotated[str, Field(max_length=200)]] = Field(max_length=20)


class StrategySkillsContext(InputModel):
    must_have: list[Annotated[str, Field(max_length=100)]] = Field(max_length=15)
    nice_to_have: list[Annotated[str, Field(max_length=100)]] = Field(max_length=15)


class MarketSkillsContext(InputModel):
    required: list[Annotated[str, Field(max_length=100)]] = Field(max_length=15)
    emerging: list[Annotated[str, Field(max_length=100)]] = Field(max_length=10)


class CandidateProfileRequest(InputModel):
    role: ShortText
    level: LevelText
    industry: ShortText
    skills: list[Annotated[str, Field(max_length=100)]] | None = Field(
        default=None, max_length=30
    )
    jd_requirements: JDRequirementsContext | None = None
    strategy_skills_priority: StrategySkillsContext | None = None
    market_key_skills: MarketSkillsContext | None = None


# --- generate-stages ---


class JDContextForStages(InputModel):
    responsibilities: list[str] | None = None
    requirements: list[str] | None = None
    seniority_signals: list[str] | None = None


class ProcessSpeedContext(InputModel):
    recommendation: str
    max_stages: int = Field(ge=1, le=10)
    target_days: int = Field(ge=1, le=120)


class StageSkillsContext(InputModel):
    must_have: list[str]
    nice_to_have: list[str]


class StrategyContextForStages(InputModel):
    market_classification: str | None = None
    process_speed: ProcessSpeedContext | None = None
    skills_priority: StageSkillsContext | None = None
    competitive_differentiators: list[str] | None = None


class InterviewStagesRequest(InputModel):
    role: ShortText
    level: LevelText
    industry: ShortText
    stage_count: int | None = Field(default=None, ge=1, le=10)
    jd_context: JDContextForStages | None = None
    strategy_context: StrategyContextForStages | None = None


# --- generate-questions ---


class QuestionsRequest(InputModel):
    role: ShortText
    level: LevelText
    focus_area: ShortText
    focus_area_description: str = Field(min_length=1, max_length=1000)
    stage_type: LevelText
    existing_questions: list[Annotated[str, Field(max_length=500)]] | None = Field(
        default=None, max_length=20
    )


# --- analyze-coverage ---


class CoverageRequirements(InputModel):
    required: list[str]
    preferred: list[str]
    responsibilities: list[str]


class CoverageFocusArea(InputModel):
    name: str
    description: str


class CoverageStage(InputModel):
    name: str
    type: str
    focus_areas: list[CoverageFocusArea]


class CoverageRequest(InputModel):
    role: ShortText
    level: LevelText
    jd_requirements: CoverageRequirements
    stages: list[CoverageStage]


# --- synthesize-feedback ---


class Rating(InputModel):
    category: ShortText
    score: int = Field(ge=1, le=4)


class FeedbackForm(InputModel):
    interviewer_name: ShortText
    ratings: list[Rating] = Field(max_length=20)
    pros: list[Annotated[str, Field(max_length=500)]] = Field(max_length=20)
    cons: list[Annotated[str, Field(max_length=500)]] = Field(max_length=20)
    notes: str | None = Field(default=None, max_length=5000)


class FeedbackSynthesisRequest(InputModel):
    candidate_name: ShortText
    role: ShortText
    stage_name: ShortText
    feedback_forms: list[FeedbackForm] = Field(min_length=1, max_length=10)
    transcript: str | None = None
