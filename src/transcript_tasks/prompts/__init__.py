"""
LLM prompts for the transcript task pipeline.
"""

from .extract_tasks import TASK_EXTRACTION_SYSTEM_PROMPT, build_extraction_input

__all__ = [
    'TASK_EXTRACTION_SYSTEM_PROMPT',
    'build_extraction_input',
]
