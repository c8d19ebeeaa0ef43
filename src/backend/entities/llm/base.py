"""Backend-independent pieces of SQL generation.

Both providers share the system prompt and the response parser so they
produce identical ``GenerationResult`` values for identical model output.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from entities.shared.errors import GenerationError
from models import GenerationResult
from pydantic import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.1

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def load_prompt() -> str:
    """Load the system prompt template from prompt.md in this folder."""
    return (Path(__file__).parent / "prompt.md").read_text(encoding="utf-8")


def build_system_prompt(
    schema_context: str,
    examples: Sequence[str] = (),
    template: str | None = None,
) -> str:
    """Fill the system prompt template with schema context and examples.

    Args:
        schema_context: Rendered ``DATABASE SCHEMA`` block.
        examples: Example prompt/SQL pairs, appended under ``EXAMPLES:``.
        template: Prompt template; defaults to ``prompt.md``.

    Returns:
        The complete system instruction.
    """
    template = template if template is not None else load_prompt()
    examples_block = "\nEXAMPLES:\n" + "\n\n".join(examples) + "\n" if examples else ""
    return template.replace("{schema_context}", schema_context).replace(
        "{examples}", examples_block
    )


def _extract_json_object(text: str) -> dict[str, Any]:
    """Parse the model's JSON answer.

    Attempts direct JSON parsing, then markdown code-fence extraction,
    and finally the outermost ``{...}`` span in the text.

    Raises:
        GenerationError: If no JSON object can be recovered.
    """
    stripped = text.strip()

    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        parsed = None

    if parsed is None and "```" in stripped:
        fence = re.search(r"```(?:json)?\s*([\s\S]*?)```", stripped)
        if fence:
            try:
                parsed = json.loads(fence.group(1).strip())
            except json.JSONDecodeError:
                parsed = None

    if parsed is None:
        match = _JSON_OBJECT.search(stripped)
        if not match:
            raise GenerationError("No JSON object found in model response")
        try:
            parsed = json.loads(match.group())
        except json.JSONDecodeError as exc:
            raise GenerationError("Model response content was not valid JSON") from exc

    if not isinstance(parsed, dict):
        raise GenerationError("Model response JSON was not an object")
    return parsed


def parse_generation_response(text: str) -> GenerationResult:
    """Normalize raw model text into a ``GenerationResult``.

    Missing ``confidence`` defaults to 0.5, missing ``warnings`` to ``[]``.

    Raises:
        GenerationError: If the text holds no JSON object or the object
            violates the output contract (e.g. no ``sql``).
    """
    payload = _extract_json_object(text)
    try:
        return GenerationResult.model_validate(payload)
    except ValidationError as exc:
        raise GenerationError(f"Model response violated output contract: {exc}") from exc


def build_user_message(prompt: str) -> str:
    return (
        f"Generate a PostgreSQL query for: {prompt}\n\n"
        "Respond with valid JSON containing sql, explanation, confidence (0-1), "
        "and warnings array."
    )
