"""
Prompt construction for initial generations and incremental updates
"""
import logging
from typing import Optional

from prompts.app_prompts import (
    INITIAL_CODE_ONLY_DIRECTIVE,
    UPDATE_CODE_ONLY_DIRECTIVE,
    get_template_by_name,
)
from services.errors import ValidationError

logger = logging.getLogger(__name__)


def is_update_request(current_code: Optional[str], update_prompt: Optional[str]) -> bool:
    """An update needs both the prior code and an instruction."""
    return bool(current_code) and bool(update_prompt)


def compose(
    base_description: str,
    prior_code: Optional[str] = None,
    edit_instruction: Optional[str] = None,
) -> str:
    """
    Build the text sent to the generation backend.

    With neither ``prior_code`` nor ``edit_instruction`` this is an initial
    generation prompt. With both it is an update prompt that embeds the prior
    code verbatim. Passing only one of them is a caller error; empty strings
    count as absent, the same as in ``is_update_request``.
    """
    if not isinstance(base_description, str) or not base_description:
        raise ValidationError("Prompt is required and must be a string")

    has_code = bool(prior_code)
    has_instruction = bool(edit_instruction)
    if has_code != has_instruction:
        raise ValidationError("An update needs both the current code and an update prompt")

    if not has_code:
        logger.debug(f"Composing initial prompt ({len(base_description)} chars)")
        return get_template_by_name("initial").format(
            user_prompt=base_description,
            directive=INITIAL_CODE_ONLY_DIRECTIVE,
        ).strip()

    logger.debug(
        f"Composing update prompt (code: {len(prior_code)} chars, instruction: {len(edit_instruction)} chars)"
    )
    return get_template_by_name("update").format(
        user_prompt=base_description,
        current_code=prior_code,
        update_prompt=edit_instruction,
        directive=UPDATE_CODE_ONLY_DIRECTIVE,
    ).strip()
