"""Input and output schemas for every generation operation."""

from .inputs import (
    CandidateProfileRequest,
    CoverageRequest,
    FeedbackSynthesisRequest,
    HiringStrategyRequest,
    InterviewStagesRequest,
    JobDescriptionRequest,
    QuestionsRequest,
)
from .outputs import (
    CandidateProfile,
    CoverageAnalysis,
    FeedbackSynthesis,
    HiringStrategy,
    InterviewQuestions,
    InterviewStages,
    JobDescription,
)

__all__ = [  # noqa: RUF022
    # Requests
    "JobDescriptionRequest",
    "HiringStrategyRequest",
    "CandidateProfileRequest",
    "InterviewStagesRequest",
    "QuestionsRequest",
    "CoverageRequest",
    "FeedbackSynthesisRequest",
    # Results
    "JobDescription",
    "HiringStrategy",
    "CandidateProfile",
    "InterviewStages",
    "InterviewQuestions",
    "CoverageAnalysis",
    "FeedbackSynthesis",
]
