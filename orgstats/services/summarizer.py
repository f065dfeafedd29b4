"""Blog and social post drafts from the summary block using OpenAI"""

from typing import Any, List, Optional
import logging

from openai import AsyncOpenAI, OpenAIError

from orgstats.config.settings import settings

logger = logging.getLogger(__name__)

SKIP_NOTICE = "Skipping OpenAI API call until OPENAI_API_KEY is set"


class NarrativeService:
    """Turns the summary statistics block into prose drafts.

    Without an API key every call is skipped with a notice; API failures are
    logged and skipped too, so this stage never fails a command.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        changelog_url: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = model or settings.NARRATIVE_MODEL
        self.changelog_url = changelog_url or settings.CHANGELOG_URL
        self.openai_client = client
        if self.openai_client is None and self.api_key:
            self.openai_client = AsyncOpenAI(api_key=self.api_key)

    @property
    def enabled(self) -> bool:
        return self.openai_client is not None

    def build_prompts(self, summary: str) -> List[tuple]:
        """(heading, prompt) pairs in print order"""
        return [
            (
                "**Summary idea:**",
                f"Write a short paragraph summarizing this data for the intro of a blog post: {summary}",
            ),
            (
                "**Tweet ideas:**",
                "Write 5 ideas for Twitter posts about this summary. "
                f"Do not use emojis or hash tags. {summary}",
            ),
            (
                "**Feed ideas:**",
                "Write 5 ideas for short blurbs about this summary. Do not use emojis or hash tags. "
                f"Include a markdown link for reading more to {self.changelog_url} : {summary}",
            ),
        ]

    async def complete(self, prompt: str) -> List[str]:
        """Single chat completion, returned line by line"""
        response = await self.openai_client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
        )

        lines: List[str] = []
        for choice in response.choices:
            content = choice.message.content or ""
            lines.extend(content.split("\n"))
        return lines

    async def print_narratives(self, summary: str) -> None:
        for index, (heading, prompt) in enumerate(self.build_prompts(summary)):
            if index:
                print("")
            print(heading)

            if not self.enabled:
                print(SKIP_NOTICE)
                continue

            try:
                lines = await self.complete(prompt)
            except OpenAIError as e:
                logger.error(f"OpenAI request failed: {e}")
                print(f"Skipping OpenAI API call after error: {e}")
                continue

            for line in lines:
                print(line)
