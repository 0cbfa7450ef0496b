"""Shared test doubles and sample payloads."""

from __future__ import annotations

import asyncio
from collections import deque
import copy
import json
from typing import Any

from gemini_hiring.types import ModelCallConfig, ModelResponse, RenderedPrompt


class ScriptedModelClient:
    """Model client that replays a script of responses or exceptions.

    Each script item is either a ``str`` (raw model text), a ``ModelResponse``,
    or an exception instance to raise. Calls are recorded for inspection.
    """

    def __init__(self, *script: Any, delay: float = 0.0) -> None:
        self.script: deque[Any] = deque(script)
        self.delay = delay
        self.calls: list[tuple[RenderedPrompt, ModelCallConfig]] = []

    async def call(self, prompt: RenderedPrompt, config: ModelCallConfig) -> ModelResponse:
        self.calls.append((prompt, config))
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.script:
            raise AssertionError("ScriptedModelClient ran out of scripted responses")
        item = self.script.popleft()
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, ModelResponse):
            return item
        return ModelResponse(
            raw_text=item,
            model=config.model,
            input_tokens=120,
            output_tokens=80,
            stop_reason="STOP",
            latency_ms=42,
        )


def as_json(data: Any) -> str:
    return json.dumps(data)


# --- Sample requests ---

JD_REQUEST: dict[str, Any] = {
    "role": "Backend Engineer",
    "level": "Senior",
    "industry": "Fintech",
    "style": "formal",
}

STRATEGY_REQUEST: dict[str, Any] = {
    "role": "Data Engineer",
    "level": "Mid",
    "industry": "Retail",
    "market_insights": {
        "salary": {
            "min": 55000,
            "max": 80000,
            "median": 67000,
            "currency": "EUR",
            "confidence": 0.7,
        },
        "competition": {
            "companies_hiring": ["Acme", "Globex"],
            "job_postings_count": 140,
            "market_saturation": "medium",
        },
        "time_to_hire": {"average_days": 38, "range": {"min": 25, "max": 60}},
        "candidate_availability": {
            "level": "limited",
            "description": "Few candidates with streaming experience",
        },
        "key_skills": {
            "required": ["Python", "SQL"],
            "emerging": ["dbt"],
            "declining": ["Hadoop"],
        },
        "trends": ["Remote-first hiring"],
    },
}

PROFILE_REQUEST: dict[str, Any] = {
    "role": "Product Designer",
    "level": "Senior",
    "industry": "SaaS",
}

STAGES_REQUEST: dict[str, Any] = {
    "role": "Backend Engineer",
    "level": "Senior",
    "industry": "Fintech",
    "stage_count": 3,
}

QUESTIONS_REQUEST: dict[str, Any] = {
    "role": "Backend Engineer",
    "level": "Senior",
    "focus_area": "System design",
    "focus_area_description": "Designing reliable distributed services",
    "stage_type": "technical",
}

COVERAGE_REQUEST: dict[str, Any] = {
    "role": "Backend Engineer",
    "level": "Senior",
    "jd_requirements": {
        "required": ["Python", "Distributed systems"],
        "preferred": ["Kubernetes"],
        "responsibilities": ["Own the payments API"],
    },
    "stages": [
        {
            "name": "Technical interview",
            "type": "technical",
            "focus_areas": [
                {"name": "System design", "description": "Distributed systems"},
            ],
        }
    ],
}

FEEDBACK_REQUEST: dict[str, Any] = {
    "candidate_name": "Alex Doe",
    "role": "Backend Engineer",
    "stage_name": "Technical interview",
    "feedback_forms": [
        {
            "interviewer_name": "Sam",
            "ratings": [{"category": "Coding", "score": 3}],
            "pros": ["Clear communication"],
            "cons": ["Limited Kubernetes exposure"],
            "notes": "Solid fundamentals",
        },
        {
            "interviewer_name": "Riley",
            "ratings": [{"category": "Coding", "score": 4}],
            "pros": ["Strong testing habits"],
            "cons": [],
        },
    ],
}


# --- Sample valid outputs ---

DISCLAIMER = (
    "This AI-generated content is for informational purposes only. "
    "All hiring decisions must be made by humans."
)

JD_OUTPUT: dict[str, Any] = {
    "title": "Senior Backend Engineer",
    "summary": "Build and run payment services.",
    "responsibilities": ["Design APIs", "Run services", "Mentor engineers"],
    "requirements": {"required": ["Python", "SQL"], "preferred": ["Kubernetes"]},
    "benefits": ["Pension", "Remote days"],
    "seniority_signals": ["Mentor engineers"],
    "confidence": 0.8,
}

STRATEGY_OUTPUT: dict[str, Any] = {
    "market_classification": "candidate_market",
    "market_classification_rationale": "Limited availability",
    "salary_positioning": {
        "strategy": "lead",
        "rationale": "Scarce talent",
        "recommended_range": {"min": 70000, "max": 85000, "currency": "EUR"},
    },
    "process_speed": {
        "recommendation": "fast_track",
        "rationale": "Competitors move quickly",
        "max_stages": 3,
        "target_days": 21,
    },
    "competitive_differentiators": ["Remote-first", "Modern stack", "Learning budget"],
    "skills_priority": {
        "must_have": ["Python", "SQL", "Airflow"],
        "nice_to_have": ["dbt"],
        "emerging_premium": ["Iceberg"],
    },
    "key_risks": [{"risk": "Counter-offers", "mitigation": "Move fast"}],
    "recommendations": ["Shorten the loop"],
    "disclaimer": DISCLAIMER,
}

QUESTIONS_OUTPUT: dict[str, Any] = {
    "questions": [
        "Walk me through a system you designed for high availability.",
        "How do you decide between consistency and availability?",
        "Describe a production incident you led the response to.",
    ]
}

COVERAGE_OUTPUT: dict[str, Any] = {
    "requirements_covered": [
        {
            "requirement": "Distributed systems",
            "covered_by_stage": "Technical interview",
            "covered_by_focus_area": "System design",
            "coverage_strength": "strong",
        }
    ],
    "gaps": [
        {
            "requirement": "Kubernetes",
            "severity": "minor",
            "suggestion": "Add a deployment question",
        }
    ],
    "redundancies": [],
    "recommendations": ["Add a coding exercise"],
    "overall_coverage_score": 72,
    "disclaimer": DISCLAIMER,
}

FEEDBACK_OUTPUT: dict[str, Any] = {
    "summary": "Consistent technical strength with gaps in infrastructure.",
    "consensus": {
        "areas_of_agreement": ["Strong coding"],
        "areas_of_disagreement": [],
    },
    "key_strengths": ["Clear communication", "Testing habits"],
    "key_concerns": ["Limited Kubernetes exposure"],
    "discussion_points": ["Infrastructure depth"],
    "rating_overview": {
        "average_score": 3.5,
        "total_feedback_count": 2,
        "score_distribution": [{"score": 3, "count": 1}, {"score": 4, "count": 1}],
    },
    "disclaimer": DISCLAIMER,
}


def stage_output(stage_count: int = 1) -> dict[str, Any]:
    """A valid ``InterviewStages`` payload with ``stage_count`` stages."""
    stage = {
        "name": "Technical interview",
        "type": "technical",
        "duration_minutes": 60,
        "description": "Hands-on technical discussion",
        "focus_areas": [
            {"name": "System design", "description": "Distributed systems", "weight": 3},
            {"name": "Coding", "description": "Code quality", "weight": 2},
        ],
        "suggested_questions": [
            {
                "question": f"Question {i}",
                "purpose": "Probe depth",
                "look_for": ["Trade-offs"],
                "focus_area": "System design" if i % 2 else "Coding",
            }
            for i in range(6)
        ],
    }
    return {"stages": [copy.deepcopy(stage) for _ in range(stage_count)]}
