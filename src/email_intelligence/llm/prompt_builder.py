"""
Prompt builder for the analysis operations.

Responsible for:
- Loading and rendering Jinja2 templates (one system + user pair per analysis)
- Truncating the current email body at a sentence boundary
- Previewing thread history bodies
Rendering is pure: no I/O after the templates are loaded.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from email_intelligence.llm.text_utils import (
    format_email_for_llm,
    preview,
    today_for_llm,
    truncate_at_sentence_boundary,
)
from email_intelligence.models.enums import ColdEmailType, EmailCategory, SuggestedAction
from email_intelligence.models.input_models import EmailFacts, ThreadMessage, UserProfile


logger = structlog.get_logger(__name__)

TEMPLATE_NAMES = (
    "categorize_system.txt",
    "categorize_user.txt",
    "cold_email_system.txt",
    "cold_email_user.txt",
    "context_system.txt",
    "context_user.txt",
)


@dataclass(frozen=True)
class PromptPair:
    """System instruction plus user prompt for one structured call."""

    system_instruction: str
    user_prompt: str


class PromptBuilder:
    """
    Build prompts for the three analyses.

    Example:
        >>> builder = PromptBuilder(Path("prompts"))
        >>> pair = builder.build_categorization_prompt(facts)
    """

    def __init__(
        self,
        templates_dir: Path,
        body_truncation_limit: int = 8000,
        thread_preview_chars: int = 500,
        summary_max_chars: int = 500,
    ):
        """
        Args:
            templates_dir: Directory containing the *.txt prompt templates
            body_truncation_limit: Max characters of the current email body
            thread_preview_chars: Max characters kept per thread history body
            summary_max_chars: Summary length the context prompt asks for
        """
        self.templates_dir = Path(templates_dir)
        self.body_truncation_limit = body_truncation_limit
        self.thread_preview_chars = thread_preview_chars
        self.summary_max_chars = summary_max_chars

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            autoescape=False,  # Prompts, not HTML
        )
        try:
            self.templates = {name: self.jinja_env.get_template(name) for name in TEMPLATE_NAMES}
        except Exception as e:
            logger.error("Failed to load prompt templates", templates_dir=str(self.templates_dir), error=str(e))
            raise
        logger.info("Loaded prompt templates", templates_dir=str(self.templates_dir))

    def _render(self, name: str, **context) -> str:
        return self.templates[name].render(**context).strip()

    def _body(self, body: Optional[str]) -> str:
        return truncate_at_sentence_boundary(body or "", self.body_truncation_limit)

    def build_categorization_prompt(
        self,
        facts: EmailFacts,
        custom_categories: Optional[Sequence[str]] = None,
    ) -> PromptPair:
        """
        Categorization prompt from sender, subject and snippet.

        Custom categories replace the "Available categories" list; the
        output schema still restricts the answer to the built-in set.
        """
        categories = list(custom_categories) if custom_categories else [c.value for c in EmailCategory]
        return PromptPair(
            system_instruction=self._render("categorize_system.txt", categories=categories),
            user_prompt=self._render(
                "categorize_user.txt",
                from_addr=facts.from_,
                subject=facts.subject,
                snippet=facts.snippet,
            ),
        )

    def build_cold_email_prompt(
        self,
        facts: EmailFacts,
        user_profile: Optional[UserProfile] = None,
    ) -> PromptPair:
        """Cold detection prompt from sender, subject and body."""
        return PromptPair(
            system_instruction=self._render("cold_email_system.txt"),
            user_prompt=self._render(
                "cold_email_user.txt",
                user_profile=user_profile,
                from_addr=facts.from_,
                subject=facts.subject,
                body=self._body(facts.body),
                cold_email_types=[t.value for t in ColdEmailType],
                suggested_actions=[a.value for a in SuggestedAction],
            ),
        )

    def build_context_extraction_prompt(
        self,
        facts: EmailFacts,
        thread_history: Optional[Sequence[ThreadMessage]] = None,
        today: Optional[date] = None,
    ) -> PromptPair:
        """
        Context extraction prompt for the current email plus optional history.

        History bodies are cut to thread_preview_chars with a trailing "...".
        """
        history = [
            {
                "from_addr": message.from_,
                "subject": message.subject,
                "body": preview(message.body, self.thread_preview_chars),
            }
            for message in thread_history or []
        ]
        current_email = format_email_for_llm(
            from_addr=facts.from_,
            subject=facts.subject,
            body=self._body(facts.body),
        )

        pair = PromptPair(
            system_instruction=self._render(
                "context_system.txt",
                summary_max_chars=self.summary_max_chars,
                today=today_for_llm(today),
            ),
            user_prompt=self._render(
                "context_user.txt",
                thread_history=history,
                current_email=current_email,
            ),
        )
        logger.debug(
            "Context prompt built",
            history_messages=len(history),
            prompt_length=len(pair.user_prompt),
        )
        return pair
