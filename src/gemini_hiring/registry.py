"""Operation descriptors and the registry that resolves them by name.

A descriptor is pure data: input schema, output schema, prompt templates and
generation profile. The pipeline engine only ever sees descriptors, so a new
operation is a new registry entry and never an engine change.
"""

from __future__ import annotations

from collections.abc import Iterator
import dataclasses
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from .constants import PROMPT_VERSIONS
from .exceptions import InputValidationError, UnknownOperationError
from .prompts.builder import PromptTemplate
from .response.issues import issues_from_error
from .schemas import inputs, outputs
from .types import GenerationProfile, ModelTier


class Operation(str, Enum):
    """The fixed set of generation operations."""

    GENERATE_JD = "generate-jd"
    GENERATE_STRATEGY = "generate-strategy"
    GENERATE_CANDIDATE_PROFILE = "generate-candidate-profile"
    GENERATE_STAGES = "generate-stages"
    GENERATE_QUESTIONS = "generate-questions"
    ANALYZE_COVERAGE = "analyze-coverage"
    SYNTHESIZE_FEEDBACK = "synthesize-feedback"


@dataclasses.dataclass(frozen=True, slots=True)
class OperationDescriptor:
    """Everything the pipeline needs to run one operation."""

    name: str
    input_schema: type[BaseModel]
    output_schema: type[BaseModel]
    prompt_template: PromptTemplate
    prompt_version: str = "1.0.0"
    profile: GenerationProfile = dataclasses.field(default_factory=GenerationProfile)

    def parse_input(self, payload: Any) -> BaseModel:
        """Validate a raw request body against this operation's input schema.

        Raises:
            InputValidationError: With one issue per offending field.
        """
        if isinstance(payload, self.input_schema):
            return payload
        try:
            return self.input_schema.model_validate(payload)
        except ValidationError as e:
            issues = issues_from_error(e)
            raise InputValidationError(
                f"Invalid input for '{self.name}': {len(issues)} issue(s)",
                issues=issues,
                operation=self.name,
            ) from e


class OperationRegistry:
    """Name-to-descriptor lookup. Entries are registered once and never replaced."""

    def __init__(self, descriptors: tuple[OperationDescriptor, ...] = ()) -> None:
        self._descriptors: dict[str, OperationDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: OperationDescriptor) -> None:
        if descriptor.name in self._descriptors:
            raise ValueError(f"Operation '{descriptor.name}' is already registered")
        self._descriptors[descriptor.name] = descriptor

    def get(self, name: str | Operation) -> OperationDescriptor:
        """Return the descriptor for ``name``.

        Raises:
            UnknownOperationError: If no operation is registered under ``name``.
        """
        key = name.value if isinstance(name, Operation) else name
        descriptor = self._descriptors.get(key)
        if descriptor is None:
            raise UnknownOperationError(key, known=self.names())
        return descriptor

    def names(self) -> tuple[str, ...]:
        return tuple(self._descriptors)

    def __contains__(self, name: object) -> bool:
        key = name.value if isinstance(name, Operation) else name
        return key in self._descriptors

    def __iter__(self) -> Iterator[OperationDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)


def _descriptor(
    operation: Operation,
    input_schema: type[BaseModel],
    output_schema: type[BaseModel],
    profile: GenerationProfile,
) -> OperationDescriptor:
    stem = operation.value.replace("-", "_")
    return OperationDescriptor(
        name=operation.value,
        input_schema=input_schema,
        output_schema=output_schema,
        prompt_template=PromptTemplate(
            system=f"{stem}.system.j2", user=f"{stem}.user.j2"
        ),
        prompt_version=PROMPT_VERSIONS[operation.value],
        profile=profile,
    )


def default_registry() -> OperationRegistry:
    """Build the registry holding the seven dashboard operations."""
    return OperationRegistry(
        (
            _descriptor(
                Operation.GENERATE_JD,
                inputs.JobDescriptionRequest,
                outputs.JobDescription,
                GenerationProfile(temperature=0.4),
            ),
            _descriptor(
                Operation.GENERATE_STRATEGY,
                inputs.HiringStrategyRequest,
                outputs.HiringStrategy,
                GenerationProfile(temperature=0.3),
            ),
            _descriptor(
                Operation.GENERATE_CANDIDATE_PROFILE,
                inputs.CandidateProfileRequest,
                outputs.CandidateProfile,
                GenerationProfile(temperature=0.3),
            ),
            _descriptor(
                Operation.GENERATE_STAGES,
                inputs.InterviewStagesRequest,
                outputs.InterviewStages,
                GenerationProfile(temperature=0.2),
            ),
            _descriptor(
                Operation.GENERATE_QUESTIONS,
                inputs.QuestionsRequest,
                outputs.InterviewQuestions,
                GenerationProfile(temperature=0.3, max_output_tokens=4096),
            ),
            _descriptor(
                Operation.ANALYZE_COVERAGE,
                inputs.CoverageRequest,
                outputs.CoverageAnalysis,
                GenerationProfile(temperature=0.2),
            ),
            _descriptor(
                Operation.SYNTHESIZE_FEEDBACK,
                inputs.FeedbackSynthesisRequest,
                outputs.FeedbackSynthesis,
                GenerationProfile(
                    temperature=0.1,
                    max_output_tokens=16384,
                    tier=ModelTier.PRO,
                    timeout_seconds=120.0,
                ),
            ),
        )
    )


def parse_input(
    operation: str | Operation,
    payload: Any,
    registry: OperationRegistry | None = None,
) -> BaseModel:
    """Validate ``payload`` for ``operation``; never touches the model.

    Raises:
        InputValidationError: For an unknown operation or invalid payload.
    """
    if registry is None:
        registry = default_registry()
    return registry.get(operation).parse_input(payload)
