"""
Task extraction service.

Sends the transcript to the chat model as a single-turn classification and
turns its free-form reply into validated RawCandidateTask objects.

Parsing is lenient. The first complete JSON array of objects in the reply is
used and elements that fail validation are dropped. A reply with no usable array
yields an empty list rather than an error.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from ..clients.openai_client import OpenAIClient
from ..errors import ExtractionError, wrap_openai_error
from ..logging import get_logger
from ..models.task import RawCandidateTask
from ..prompts.extract_tasks import TASK_EXTRACTION_SYSTEM_PROMPT, build_extraction_input

logger = get_logger(__name__)

_decoder = json.JSONDecoder()
_ARRAY_START = re.compile(r'\[')


def find_first_json_array(text: str) -> list[Any] | None:
    """
    Locate the first complete JSON array of objects in ``text``.

    Tries every ``[`` in order and returns the first one that decodes to a
    list holding at least one object, or to an empty list. Bracketed prose
    such as ``[2]`` is skipped. Returns None when nothing qualifies
    (including truncated output).
    """
    for match in _ARRAY_START.finditer(text):
        try:
            value, _ = _decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        if isinstance(value, list) and (
            not value or any(isinstance(element, dict) for element in value)
        ):
            return value
    return None


def validate_candidates(elements: list[Any]) -> list[RawCandidateTask]:
    """Keep the elements that match the RawCandidateTask shape exactly."""
    candidates = []
    for index, element in enumerate(elements):
        try:
            candidates.append(RawCandidateTask.model_validate(element, strict=True))
        except ValidationError as e:
            logger.debug('candidate_dropped', index=index, errors=e.error_count())
    return candidates


def parse_candidates(response_text: str) -> list[RawCandidateTask]:
    """
    Parse the model reply into candidate tasks. Never raises.

    Args:
        response_text: Raw completion text, possibly with prose around the JSON

    Returns:
        Valid candidates in the order the model listed them
    """
    elements = find_first_json_array(response_text)
    if elements is None:
        logger.warning(
            'extraction_response_unparseable',
            response_length=len(response_text),
            response_preview=response_text[:200],
        )
        return []

    candidates = validate_candidates(elements)
    if len(candidates) < len(elements):
        logger.info(
            'extraction_candidates_dropped',
            received=len(elements),
            kept=len(candidates),
        )
    return candidates


class TaskExtractor:
    """
    Extracts candidate tasks from transcript text.

    Uses OpenAI for the classification call.
    """

    def __init__(self, openai_client: OpenAIClient):
        """
        Initialize the extractor.

        Args:
            openai_client: Configured OpenAI client
        """
        self.openai_client = openai_client

    async def extract(self, transcript_text: str) -> list[RawCandidateTask]:
        """
        Extract candidate tasks from a transcript.

        Args:
            transcript_text: Full transcript content

        Returns:
            Candidate tasks (possibly empty)

        Raises:
            ExtractionError: If the model call itself fails
        """
        try:
            response_text = await self.openai_client.classify(
                TASK_EXTRACTION_SYSTEM_PROMPT,
                build_extraction_input(transcript_text),
            )
        except Exception as e:
            wrapped = wrap_openai_error(e)
            raise ExtractionError(
                'Task extraction model call failed',
                context=wrapped.context,
            ) from wrapped

        return parse_candidates(response_text)
