"""
Optional narrative summary of an analysis, produced by an OpenAI chat model.
"""

import logging
from typing import Optional, Sequence

from openai import OpenAI

from ..config import Settings
from ..models import Diagnostic
from ..utils.error_handling import handle_exceptions
from ..utils.logger import get_logger

EXCERPT_LIMIT = 2000

PROMPT_TEMPLATE = """
Analyze this Solidity smart contract and provide a comprehensive summary:

Contract Code:
{excerpt}...

Security Issues Found:
{security}

Linting Issues:
{style}

Please provide:
1. A brief overview of what this contract does
2. Key security concerns and their implications
3. Recommendations for improvement
4. Overall risk assessment

Keep the response concise and technical but accessible.
"""


def build_prompt(excerpt: str, security: Sequence[Diagnostic], style: Sequence[Diagnostic],
                 limit: int = EXCERPT_LIMIT) -> str:
    security_lines = '\n'.join(f"- {bug.name}: {bug.description} ({bug.severity})" for bug in security)
    style_lines = '\n'.join(f"- {issue.rule}: {issue.message}" for issue in style)
    return PROMPT_TEMPLATE.format(
        excerpt=(excerpt or '')[:limit],
        security=security_lines or '- none',
        style=style_lines or '- none',
    )


class OpenAISummarizer:
    """Summarizer collaborator backed by the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = 'gpt-3.5-turbo',
        max_tokens: int = 500,
        temperature: float = 0.3,
        excerpt_limit: int = EXCERPT_LIMIT,
        client: Optional[OpenAI] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.excerpt_limit = excerpt_limit
        self.client = client or OpenAI(api_key=api_key)
        self.logger = logger or get_logger('summarizer')

    @handle_exceptions(log_traceback=False, default_return=None)
    def summarize(self, excerpt: str, security: Sequence[Diagnostic],
                  style: Sequence[Diagnostic]) -> Optional[str]:
        """Return a narrative summary, or ``None`` if the model call fails."""
        prompt = build_prompt(excerpt, security, style, self.excerpt_limit)
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[{'role': 'user', 'content': prompt}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        content = completion.choices[0].message.content
        if not content:
            self.logger.warning("Summarizer returned an empty response")
            return None
        return content.strip()


def build_summarizer(settings: Settings) -> Optional[OpenAISummarizer]:
    """Create the summarizer when an API key is configured, else ``None``."""
    if not settings.openai_api_key:
        return None
    return OpenAISummarizer(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        excerpt_limit=settings.summary_excerpt_chars,
    )
