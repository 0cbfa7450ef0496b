"""End-to-end pipeline behavior against a scripted model client."""

import asyncio

import pytest

from gemini_hiring import (
    HiringSettings,
    InputValidationError,
    OutputTruncatedError,
    OutputValidationError,
    PipelineRequest,
    ProviderAuthError,
    ProviderRateLimitError,
    ProviderTransportError,
    TemplateRenderError,
    UnknownOperationError,
    check_health,
    parse_input,
)
from gemini_hiring.client import ModelClient
from gemini_hiring.response import Coercer
from gemini_hiring.schemas import (
    CandidateProfile,
    CoverageAnalysis,
    FeedbackSynthesis,
    InterviewQuestions,
    InterviewStages,
)
from gemini_hiring.types import ModelResponse
from tests.helpers import (
    COVERAGE_OUTPUT,
    COVERAGE_REQUEST,
    DISCLAIMER,
    FEEDBACK_OUTPUT,
    FEEDBACK_REQUEST,
    JD_OUTPUT,
    JD_REQUEST,
    PROFILE_REQUEST,
    QUESTIONS_OUTPUT,
    QUESTIONS_REQUEST,
    STAGES_REQUEST,
    STRATEGY_OUTPUT,
    STRATEGY_REQUEST,
    as_json,
    stage_output,
)


def _questions():
    return parse_input("generate-questions", QUESTIONS_REQUEST)


@pytest.mark.unit
@pytest.mark.asyncio
class TestSuccessfulRuns:
    async def test_valid_output(self, make_pipeline, call_log):
        pipeline, client = make_pipeline(as_json(QUESTIONS_OUTPUT))

        result = await pipeline.run("generate-questions", _questions())

        assert isinstance(result.data, InterviewQuestions)
        assert result.data.questions == QUESTIONS_OUTPUT["questions"]
        meta = result.metadata
        assert meta.model_used == "gemini-2.5-flash"
        assert (meta.input_tokens, meta.output_tokens) == (120, 80)
        assert meta.latency_ms == 42
        assert meta.coercion_applied is False
        assert meta.prompt_version == "1.0.0"
        assert meta.generated_at
        assert len(client.calls) == 1

        (entry,) = call_log.get_recent_entries()
        assert entry.endpoint == "generate-questions"
        assert entry.validation_passed is True
        assert entry.error is None
        assert entry.stop_reason == "STOP"
        assert entry.prompt_length == client.calls[0][0].length

    async def test_coerced_output_is_flagged(self, make_pipeline, call_log):
        pipeline, _ = make_pipeline(as_json(QUESTIONS_OUTPUT["questions"]))

        result = await pipeline.run("generate-questions", _questions())

        assert result.metadata.coercion_applied is True
        assert len(result.data.questions) == 3
        (entry,) = call_log.get_recent_entries()
        assert entry.coercion_applied is True
        assert call_log.get_stats().coercions == 1

    @pytest.mark.parametrize(
        "operation, request_payload, output, schema",
        [
            ("generate-stages", STAGES_REQUEST, stage_output(3), InterviewStages),
            ("analyze-coverage", COVERAGE_REQUEST, COVERAGE_OUTPUT, CoverageAnalysis),
            ("synthesize-feedback", FEEDBACK_REQUEST, FEEDBACK_OUTPUT, FeedbackSynthesis),
        ],
        ids=["stages", "coverage", "feedback"],
    )
    async def test_operations_return_their_schema(
        self, make_pipeline, operation, request_payload, output, schema
    ):
        pipeline, _ = make_pipeline(f"Here it is:\n```json\n{as_json(output)}\n```")

        result = await pipeline.run(operation, parse_input(operation, request_payload))

        assert isinstance(result.data, schema)

    async def test_execute_accepts_a_request_object(self, make_pipeline):
        pipeline, _ = make_pipeline(as_json(STRATEGY_OUTPUT))
        request = PipelineRequest(
            operation_name="generate-strategy",
            validated_input=parse_input("generate-strategy", STRATEGY_REQUEST),
        )

        result = await pipeline.execute(request)

        assert result.data.process_speed.max_stages == 3

    async def test_result_to_dict(self, make_pipeline):
        pipeline, _ = make_pipeline(as_json(JD_OUTPUT))

        result = await pipeline.run("generate-jd", parse_input("generate-jd", JD_REQUEST))
        body = result.to_dict()

        assert body["data"]["title"] == "Senior Backend Engineer"
        assert body["metadata"]["model_used"] == "gemini-2.5-flash"
        assert body["metadata"]["coercion_applied"] is False


@pytest.mark.unit
@pytest.mark.asyncio
class TestCallConfiguration:
    async def test_operation_profile_is_applied(self, make_pipeline):
        pipeline, client = make_pipeline(as_json(QUESTIONS_OUTPUT))

        await pipeline.run("generate-questions", _questions())

        config = client.calls[0][1]
        assert config.model == "gemini-2.5-flash"
        assert config.temperature == 0.3
        assert config.max_output_tokens == 4096
        assert config.timeout_seconds == 60.0
        assert config.json_mode is True

    async def test_feedback_synthesis_uses_pro_model(self, make_pipeline):
        settings = HiringSettings(api_key="k", pro_model="gemini-pro-custom")
        pipeline, client = make_pipeline(as_json(FEEDBACK_OUTPUT), settings=settings)

        result = await pipeline.run(
            "synthesize-feedback", parse_input("synthesize-feedback", FEEDBACK_REQUEST)
        )

        config = client.calls[0][1]
        assert config.model == "gemini-pro-custom"
        assert config.max_output_tokens == 16384
        assert config.timeout_seconds == 120.0
        assert result.metadata.model_used == "gemini-pro-custom"

    async def test_configured_timeout_is_the_default(self, make_pipeline):
        settings = HiringSettings(api_key="k", timeout_seconds=15)
        pipeline, client = make_pipeline(as_json(QUESTIONS_OUTPUT), settings=settings)

        await pipeline.run("generate-questions", _questions())

        assert client.calls[0][1].timeout_seconds == 15


@pytest.mark.unit
@pytest.mark.asyncio
class TestFailures:
    async def test_invalid_output(self, make_pipeline, call_log):
        payload = {k: v for k, v in COVERAGE_OUTPUT.items() if k != "recommendations"}
        pipeline, _ = make_pipeline(as_json(payload))

        with pytest.raises(OutputValidationError) as exc_info:
            await pipeline.run(
                "analyze-coverage", parse_input("analyze-coverage", COVERAGE_REQUEST)
            )

        assert exc_info.value.retryable is True
        (entry,) = call_log.get_recent_entries()
        assert entry.error == "OutputValidationError"
        assert entry.validation_passed is False
        assert entry.coercion_applied is False
        assert entry.stop_reason == "STOP"
        assert (entry.input_tokens, entry.output_tokens) == (120, 80)
        assert entry.validation_issues[0]["loc"] == ["recommendations"]

    async def test_truncated_output(self, make_pipeline, call_log):
        truncated = ModelResponse(
            raw_text='{"questions": ["Describe a time',
            model="gemini-2.5-flash",
            input_tokens=300,
            output_tokens=4096,
            stop_reason="MAX_TOKENS",
            latency_ms=900,
        )
        pipeline, _ = make_pipeline(truncated)

        with pytest.raises(OutputTruncatedError) as exc_info:
            await pipeline.run("generate-questions", _questions())

        error = exc_info.value
        assert isinstance(error, OutputValidationError)
        assert error.retryable is False
        assert error.max_output_tokens == 4096
        assert error.issues[0]["type"] == "truncated"
        (entry,) = call_log.get_recent_entries()
        assert entry.stop_reason == "MAX_TOKENS"
        assert entry.error == "OutputValidationError"

    async def test_valid_output_at_token_limit_is_accepted(self, make_pipeline):
        response = ModelResponse(
            raw_text=as_json(QUESTIONS_OUTPUT),
            model="gemini-2.5-flash",
            output_tokens=4096,
            stop_reason="MAX_TOKENS",
        )
        pipeline, _ = make_pipeline(response)

        result = await pipeline.run("generate-questions", _questions())

        assert len(result.data.questions) == 3

    @pytest.mark.parametrize(
        "error",
        [
            ProviderRateLimitError(retry_after=5),
            ProviderAuthError("rejected"),
            ProviderTransportError("timed out", reason="timeout"),
        ],
        ids=["rate_limit", "auth", "transport"],
    )
    async def test_provider_errors_propagate_and_are_logged(
        self, make_pipeline, call_log, error
    ):
        pipeline, _ = make_pipeline(error)

        with pytest.raises(type(error)) as exc_info:
            await pipeline.run("generate-questions", _questions())

        assert exc_info.value is error
        (entry,) = call_log.get_recent_entries()
        assert entry.error == error.kind.value
        assert entry.stop_reason == "unknown"
        assert entry.model == "gemini-2.5-flash"
        assert (entry.input_tokens, entry.output_tokens) == (0, 0)

    async def test_unclassified_client_errors_are_wrapped(self, make_pipeline, call_log):
        boom = RuntimeError("client bug")
        pipeline, _ = make_pipeline(boom)

        with pytest.raises(ProviderTransportError) as exc_info:
            await pipeline.run("generate-questions", _questions())

        assert exc_info.value.retryable is False
        assert exc_info.value.__cause__ is boom
        assert call_log.get_stats().failures == 1

    async def test_template_error_is_logged_without_calling_model(
        self, make_pipeline, call_log
    ):
        pipeline, client = make_pipeline()
        wrong_input = parse_input("generate-jd", JD_REQUEST)

        with pytest.raises(TemplateRenderError):
            await pipeline.run("generate-questions", wrong_input)

        assert client.calls == []
        (entry,) = call_log.get_recent_entries()
        assert entry.error == "TemplateRenderError"
        assert entry.stop_reason == "not_sent"
        assert entry.latency_ms == 0

    async def test_unknown_operation_is_not_logged(self, make_pipeline, call_log):
        pipeline, client = make_pipeline()

        with pytest.raises(UnknownOperationError) as exc_info:
            await pipeline.run("generate-poem", _questions())

        assert isinstance(exc_info.value, InputValidationError)
        assert client.calls == []
        assert call_log.get_stats().total_calls == 0

    async def test_cancellation_leaves_no_entry(self, make_pipeline, call_log):
        pipeline, client = make_pipeline(as_json(QUESTIONS_OUTPUT), delay=10)

        task = asyncio.create_task(pipeline.run("generate-questions", _questions()))
        while not client.calls:
            await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert call_log.get_stats().total_calls == 0
        assert call_log.get_recent_entries() == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_every_completed_run_records_exactly_one_entry(make_pipeline, call_log):
    script = [
        as_json(QUESTIONS_OUTPUT),
        "no json here",
        ProviderRateLimitError(),
        as_json(QUESTIONS_OUTPUT["questions"]),
        RuntimeError("bug"),
    ]
    pipeline, _ = make_pipeline(*script)

    outcomes = await asyncio.gather(
        *(pipeline.run("generate-questions", _questions()) for _ in script),
        return_exceptions=True,
    )

    failures = [o for o in outcomes if isinstance(o, Exception)]
    stats = call_log.get_stats()
    assert stats.total_calls == len(script)
    assert stats.failures == len(failures) == 3
    assert stats.coercions == 1
    assert stats.by_endpoint["generate-questions"].calls == len(script)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fenced_bare_array_of_questions_is_wrapped(make_pipeline, call_log):
    payload = {**QUESTIONS_REQUEST, "focus_area": "System Design"}
    pipeline, _ = make_pipeline('Here are the questions:\n```json\n["Q1","Q2"]\n```')

    result = await pipeline.run(
        "generate-questions", parse_input("generate-questions", payload)
    )

    body = result.to_dict()
    assert body["data"] == {"questions": ["Q1", "Q2"]}
    assert body["metadata"]["coercion_applied"] is True
    (entry,) = call_log.get_recent_entries()
    assert entry.validation_passed is True
    assert entry.coercion_applied is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stats_after_mixed_transport_failures(make_pipeline, call_log, settings):
    script = [as_json(QUESTIONS_OUTPUT)] * 6 + [
        ProviderTransportError("network down") for _ in range(4)
    ]
    pipeline, _ = make_pipeline(*script)

    for _ in script:
        try:
            await pipeline.run("generate-questions", _questions())
        except ProviderTransportError:
            pass

    stats = call_log.get_stats()
    assert (stats.total_calls, stats.failures) == (10, 4)
    assert check_health(call_log, settings).status == "healthy"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_candidate_profile_skill_list_is_trimmed(make_pipeline, call_log):
    skills = [f"skill-{i}" for i in range(17)]
    pipeline, client = make_pipeline(
        as_json(
            {
                "ideal_background": "Five years designing B2B products",
                "must_have_skills": skills,
                "nice_to_have_skills": ["Figma plugins"],
                "experience_range": "5-8 years",
                "cultural_fit_indicators": ["Writes things down"],
                "disclaimer": DISCLAIMER,
            }
        )
    )

    result = await pipeline.run(
        "generate-candidate-profile",
        parse_input("generate-candidate-profile", PROFILE_REQUEST),
    )

    assert isinstance(result.data, CandidateProfile)
    assert result.data.must_have_skills == skills[:15]
    assert result.metadata.coercion_applied is True
    assert "Product Designer" in client.calls[0][0].text
    (entry,) = call_log.get_recent_entries()
    assert entry.endpoint == "generate-candidate-profile"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deeply_nested_output_is_a_logged_validation_failure(
    make_pipeline, call_log
):
    pipeline, _ = make_pipeline("Here you go: " + "[" * 100_000)

    with pytest.raises(OutputValidationError) as exc_info:
        await pipeline.run("generate-questions", _questions())

    assert exc_info.value.issues[0]["type"] == "json_invalid"
    (entry,) = call_log.get_recent_entries()
    assert entry.validation_passed is False
    assert entry.error == "OutputValidationError"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failing_custom_rule_is_a_logged_validation_failure(
    make_pipeline, call_log
):
    def broken_rule(data, schema, repairs):
        raise KeyError("questions")

    pipeline, _ = make_pipeline(
        as_json({"questions": 5}), coercer=Coercer(rules=(broken_rule,))
    )

    with pytest.raises(OutputValidationError) as exc_info:
        await pipeline.run("generate-questions", _questions())

    assert isinstance(exc_info.value.__cause__, KeyError)
    assert "KeyError" in exc_info.value.message
    (entry,) = call_log.get_recent_entries()
    assert entry.validation_passed is False
    assert entry.error == "OutputValidationError"
    assert (entry.input_tokens, entry.output_tokens) == (120, 80)
    assert entry.validation_issues[0]["type"] == "validation_error"


@pytest.mark.unit
def test_pipeline_model_client_follows_the_protocol(make_pipeline):
    pipeline, client = make_pipeline()

    assert isinstance(client, ModelClient)
    assert pipeline.model_client is client
