"""Response schemas for model output.

Every model response is validated against one of these before a caller
sees it. Bounds here are the ones the coercion pass understands: list
``min_length``/``max_length`` and numeric ``ge``/``le``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OutputModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SalaryRange(OutputModel):
    min: float
    max: float
    currency: str


# --- generate-jd ---


class JobRequirements(OutputModel):
    required: list[str]
    preferred: list[str]


class JobDescription(OutputModel):
    title: str
    summary: str
    responsibilities: list[str]
    requirements: JobRequirements
    benefits: list[str]
    salary_range: SalaryRange | None = None
    location: str | None = None
    remote_policy: str | None = None
    seniority_signals: list[str] | None = None
    confidence: float = Field(ge=0, le=1)


# --- generate-strategy ---


class SalaryPositioning(OutputModel):
    strategy: Literal["lead", "match", "lag"]
    rationale: str
    recommended_range: SalaryRange


class ProcessSpeed(OutputModel):
    recommendation: Literal["fast_track", "standard", "thorough"]
    rationale: str
    max_stages: int = Field(ge=2, le=8)
    target_days: int = Field(ge=5, le=90)


class SkillsPriority(OutputModel):
    must_have: list[str] = Field(min_length=1, max_length=10)
    nice_to_have: list[str] = Field(max_length=10)
    emerging_premium: list[str] = Field(max_length=5)


class KeyRisk(OutputModel):
    risk: str
    mitigation: str


class HiringStrategy(OutputModel):
    market_classification: Literal["employer_market", "balanced", "candidate_market"]
    market_classification_rationale: str
    salary_positioning: SalaryPositioning
    process_speed: ProcessSpeed
    competitive_differentiators: list[str] = Field(min_length=1, max_length=8)
    skills_priority: SkillsPriority
    key_risks: list[KeyRisk] = Field(min_length=1, max_length=6)
    recommendations: list[str] = Field(min_length=1, max_length=8)
    disclaimer: str


# --- generate-candidate-profile ---


class CandidateProfile(OutputModel):
    ideal_background: str | None = None
    must_have_skills: list[str] | None = Field(default=None, max_length=15)
    nice_to_have_skills: list[str] | None = Field(default=None, max_length=15)
    experience_range: str | None = None
    cultural_fit_indicators: list[str] | None = Field(default=None, max_length=10)
    disclaimer: str


# --- generate-stages ---

StageType = Literal["screening", "technical", "behavioral", "cultural", "final", "custom"]


class FocusArea(OutputModel):
    name: str
    description: str
    weight: int = Field(ge=1, le=4)
    rationale: str | None = None


class SuggestedQuestion(OutputModel):
    question: str
    purpose: str
    look_for: list[str]
    focus_area: str


class InterviewStage(OutputModel):
    name: str
    type: StageType
    duration_minutes: int
    description: str
    focus_areas: list[FocusArea] = Field(min_length=2, max_length=3)
    suggested_questions: list[SuggestedQuestion] = Field(min_length=6, max_length=15)
    rationale: str | None = None


class InterviewStages(OutputModel):
    stages: list[InterviewStage]


# --- generate-questions ---


class InterviewQuestions(OutputModel):
    questions: list[str] = Field(max_length=20)


# --- analyze-coverage ---


class RequirementCoverage(OutputModel):
    requirement: str
    covered_by_stage: str
    covered_by_focus_area: str
    coverage_strength: Literal["strong", "moderate", "weak"]


class CoverageGap(OutputModel):
    requirement: str
    severity: Literal["critical", "important", "minor"]
    suggestion: str


class CoverageRedundancy(OutputModel):
    focus_area: str
    appears_in_stages: list[str]
    recommendation: str


class CoverageAnalysis(OutputModel):
    requirements_covered: list[RequirementCoverage]
    gaps: list[CoverageGap]
    redundancies: list[CoverageRedundancy]
    recommendations: list[str] = Field(min_length=1, max_length=8)
    overall_coverage_score: float = Field(ge=0, le=100)
    disclaimer: str


# --- synthesize-feedback ---


class Consensus(OutputModel):
    areas_of_agreement: list[str]
    areas_of_disagreement: list[str]


class ScoreCount(OutputModel):
    score: int = Field(ge=1, le=4)
    count: int = Field(ge=0)


class RatingOverview(OutputModel):
    average_score: float = Field(ge=0, le=4)
    total_feedback_count: int = Field(ge=0)
    score_distribution: list[ScoreCount]


class FeedbackSynthesis(OutputModel):
    summary: str
    consensus: Consensus
    key_strengths: list[str]
    key_concerns: list[str]
    discussion_points: list[str]
    rating_overview: RatingOverview
    disclaimer: str
