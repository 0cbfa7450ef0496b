"""
Project-wide constants for the structured-generation pipeline

This module centralizes the magic numbers and fixed strings used throughout
the project for consistency and maintainability.
"""

# Model defaults
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_PRO_MODEL = "gemini-2.5-pro"
DEFAULT_TIMEOUT_SECONDS = 60.0  # per model call
MAX_TIMEOUT_SECONDS = 600.0
DEFAULT_MAX_OUTPUT_TOKENS = 8192

# Pipeline logger
DEFAULT_LOG_BUFFER_CAPACITY = 100
DEFAULT_RECENT_ENTRIES = 20
HEALTH_RECENT_ENTRIES = 10

# Health thresholds
DEGRADED_FAILURE_RATIO = 0.5

# Stop reasons
STOP_REASON_UNKNOWN = "unknown"
STOP_REASON_NOT_SENT = "not_sent"  # request failed before reaching the provider
STOP_REASON_MAX_TOKENS = "MAX_TOKENS"

# Transcript handling (1 token ~ 4 characters)
CHARS_PER_TOKEN = 4
TRANSCRIPT_TOKEN_LIMIT = 150_000
TRANSCRIPT_HEAD_RATIO = 0.6
TRANSCRIPT_TAIL_RATIO = 0.3

# Mandatory disclaimer for every analysis output
AI_DISCLAIMER = (
    "This AI-generated content is for informational purposes only. "
    "All hiring decisions must be made by humans."
)

# Prompt versions, surfaced in result metadata
PROMPT_VERSIONS = {
    "compliance": "1.0.0",
    "generate-jd": "1.0.0",
    "generate-strategy": "1.0.0",
    "generate-candidate-profile": "1.0.0",
    "generate-stages": "1.0.0",
    "generate-questions": "1.0.0",
    "analyze-coverage": "1.0.0",
    "synthesize-feedback": "1.0.0",
}
