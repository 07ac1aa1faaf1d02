"""Query-focused progressive summarization of file content."""

import json
import logging
import re
from dataclasses import dataclass

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

# Default model for summarization (fast and cheap)
SUMMARIZER_MODEL = "gpt-4o-mini"

# Maximum content length to send for summarization (chars)
MAX_CONTENT_LENGTH = 60000

# Maximum preview length used when summarization fails (chars)
FALLBACK_PREVIEW_LENGTH = 2000

FALLBACK_MARKER = "[Summary generation failed]"

SYSTEM_PROMPT = (
    "You are a research assistant reading files one at a time on behalf of a user. "
    "Always respond with valid JSON."
)

SUMMARIZE_PROMPT = """\
The user is looking for: {search_context}

Previous findings from files already read:
{cumulative_findings}

Read the file below and:
1. Summarize everything in this file that relates to what the user is looking for.
   Keep facts, figures, names and dates. Skip anything already covered by the previous findings.
2. Merge the new findings from this file into the previous findings to produce an updated
   cumulative summary covering all files read so far.
3. Decide whether reading more files is worthwhile: true if important gaps remain,
   false if the findings already answer what the user is looking for.

Respond in JSON format:
{{"summary": "...", "cumulativeSummary": "...", "shouldContinueReading": true}}

File: {file_name}
Content:
"""

_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


@dataclass
class ReadSummary:
    """Outcome of summarizing one file in a read sequence."""

    summary: str
    cumulative_summary: str
    should_continue_reading: bool = True

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "cumulativeSummary": self.cumulative_summary,
            "shouldContinueReading": self.should_continue_reading,
        }


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in {"false", "no", "0", "stop"}
    if value is None:
        return True
    return bool(value)


def _summary_from_data(data: object) -> ReadSummary | None:
    if not isinstance(data, dict):
        return None
    summary = data.get("summary")
    if not isinstance(summary, str):
        return None
    cumulative = data.get("cumulativeSummary")
    if not isinstance(cumulative, str) or not cumulative.strip():
        cumulative = summary
    return ReadSummary(
        summary=summary,
        cumulative_summary=cumulative,
        should_continue_reading=_as_bool(data.get("shouldContinueReading", True)),
    )


def parse_summary_reply(text: str | None) -> ReadSummary | None:
    """Parse the model's reply, tolerating code fences and surrounding prose."""
    if not text or not text.strip():
        return None

    fenced = _FENCE.match(text)
    candidate = fenced.group(1) if fenced else text.strip()

    try:
        return _summary_from_data(json.loads(candidate))
    except json.JSONDecodeError:
        pass

    # Fall back to the first well-formed JSON object anywhere in the reply
    decoder = json.JSONDecoder()
    for match in re.finditer(r"\{", text):
        try:
            data, _ = decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        result = _summary_from_data(data)
        if result is not None:
            return result

    return None


def fallback_summary(content: str, cumulative_findings: str | None = None) -> ReadSummary:
    """Deterministic result used whenever the model reply is unusable."""
    preview = content[:FALLBACK_PREVIEW_LENGTH]
    if len(content) > FALLBACK_PREVIEW_LENGTH:
        preview += "..."
    summary = f"{FALLBACK_MARKER} Content preview:\n{preview}"

    if cumulative_findings:
        cumulative = f"{cumulative_findings}\n\n---\n\n{summary}"
    else:
        cumulative = summary

    return ReadSummary(summary=summary, cumulative_summary=cumulative, should_continue_reading=True)


class ProgressiveSummarizer:
    """Folds one file at a time into a running, query-focused summary.

    Holds no state between calls: the caller passes back the cumulative
    summary it received last time.
    """

    def __init__(self, client: AsyncOpenAI, model: str = SUMMARIZER_MODEL) -> None:
        self.client = client
        self.model = model

    async def summarize(
        self,
        content: str,
        file_name: str,
        search_context: str,
        cumulative_findings: str | None = None,
    ) -> ReadSummary:
        """Summarize a file against the search context. Never raises.

        Args:
            content: Extracted file text, truncated before it is sent
            file_name: Name shown to the model
            search_context: What the caller is looking for
            cumulative_findings: Summary carried over from earlier reads, if any

        Returns:
            ReadSummary with this file's summary, the updated cumulative summary,
            and whether more files should be read
        """
        if len(content) > MAX_CONTENT_LENGTH:
            prompt_content = content[:MAX_CONTENT_LENGTH] + "\n\n[content truncated...]"
        else:
            prompt_content = content

        prompt = SUMMARIZE_PROMPT.format(
            search_context=search_context,
            cumulative_findings=cumulative_findings or "(none yet - this is the first file)",
            file_name=file_name,
        )

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt + prompt_content},
                ],
                response_format={"type": "json_object"},
            )
            reply = response.choices[0].message.content
        except Exception as e:
            logger.warning(f"Failed to summarize {file_name}: {e}")
            return fallback_summary(content, cumulative_findings)

        result = parse_summary_reply(reply)
        if result is None:
            logger.warning(f"Failed to parse summary JSON for {file_name}")
            return fallback_summary(content, cumulative_findings)

        logger.debug(f"Summarized {file_name} (continue={result.should_continue_reading})")
        return result
