"""Tests for progressive summarization."""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from driveseek.reader import FALLBACK_MARKER, ProgressiveSummarizer, fallback_summary, parse_summary_reply
from driveseek.reader.summarizer import MAX_CONTENT_LENGTH


def mock_openai(reply: str | None = None, error: Exception | None = None) -> Mock:
    client = Mock()
    if error:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        response = Mock()
        response.choices = [Mock(message=Mock(content=reply))]
        client.chat.completions.create = AsyncMock(return_value=response)
    return client


REPLY = {
    "summary": "Revenue grew 12% in Q3.",
    "cumulativeSummary": "Q2 flat. Revenue grew 12% in Q3.",
    "shouldContinueReading": False,
}


class TestParseSummaryReply:
    """Tests for model reply parsing."""

    def test_plain_json(self):
        result = parse_summary_reply(json.dumps(REPLY))

        assert result.summary == REPLY["summary"]
        assert result.cumulative_summary == REPLY["cumulativeSummary"]
        assert result.should_continue_reading is False

    def test_code_fence(self):
        result = parse_summary_reply(f"```json\n{json.dumps(REPLY)}\n```")
        assert result.summary == REPLY["summary"]

    def test_json_inside_prose(self):
        text = f"Here is the result: {json.dumps(REPLY)} Let me know if you need more."
        result = parse_summary_reply(text)
        assert result.cumulative_summary == REPLY["cumulativeSummary"]

    def test_missing_cumulative_uses_summary(self):
        result = parse_summary_reply('{"summary": "Only this"}')

        assert result.cumulative_summary == "Only this"
        assert result.should_continue_reading is True

    def test_string_flag(self):
        result = parse_summary_reply('{"summary": "s", "shouldContinueReading": "false"}')
        assert result.should_continue_reading is False

    def test_unusable_replies(self):
        assert parse_summary_reply(None) is None
        assert parse_summary_reply("   ") is None
        assert parse_summary_reply("not json at all") is None
        assert parse_summary_reply('{"cumulativeSummary": "no summary"}') is None
        assert parse_summary_reply('["summary"]') is None


class TestFallbackSummary:
    """Tests for the deterministic fallback."""

    def test_short_content(self):
        result = fallback_summary("Short text")

        assert result.summary == f"{FALLBACK_MARKER} Content preview:\nShort text"
        assert result.cumulative_summary == result.summary
        assert result.should_continue_reading is True

    def test_long_content_is_truncated(self):
        result = fallback_summary("x" * 5000)
        assert result.summary.endswith("x" * 2000 + "...")

    def test_appends_to_prior_findings(self):
        result = fallback_summary("Body", "Earlier findings")
        assert result.cumulative_summary == f"Earlier findings\n\n---\n\n{result.summary}"

    def test_is_deterministic(self):
        assert fallback_summary("Same", "Prior") == fallback_summary("Same", "Prior")


class TestProgressiveSummarizer:
    """Tests for ProgressiveSummarizer."""

    @pytest.mark.asyncio
    async def test_summarize(self):
        client = mock_openai(json.dumps(REPLY))
        summarizer = ProgressiveSummarizer(client, model="test-model")

        result = await summarizer.summarize("File body", "q3.pdf", "Q3 revenue", "Q2 flat.")

        assert result.to_dict() == REPLY
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}
        prompt = kwargs["messages"][1]["content"]
        assert "Q3 revenue" in prompt
        assert "Q2 flat." in prompt
        assert "q3.pdf" in prompt
        assert prompt.endswith("File body")

    @pytest.mark.asyncio
    async def test_first_file_prompt(self):
        client = mock_openai(json.dumps(REPLY))

        await ProgressiveSummarizer(client).summarize("Body", "a.txt", "topic")

        prompt = client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "(none yet - this is the first file)" in prompt

    @pytest.mark.asyncio
    async def test_long_content_is_truncated(self):
        client = mock_openai(json.dumps(REPLY))
        content = "y" * (MAX_CONTENT_LENGTH + 100)

        await ProgressiveSummarizer(client).summarize(content, "big.txt", "topic")

        prompt = client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert prompt.endswith("[content truncated...]")
        assert "y" * (MAX_CONTENT_LENGTH + 1) not in prompt

    @pytest.mark.asyncio
    async def test_api_error_falls_back(self):
        client = mock_openai(error=RuntimeError("rate limited"))

        result = await ProgressiveSummarizer(client).summarize("Body text", "a.txt", "topic", "Prior")

        assert result == fallback_summary("Body text", "Prior")

    @pytest.mark.asyncio
    async def test_bad_reply_falls_back(self):
        client = mock_openai("I could not produce JSON, sorry.")

        result = await ProgressiveSummarizer(client).summarize("Body text", "a.txt", "topic")

        assert result.summary.startswith(FALLBACK_MARKER)
        assert result.should_continue_reading is True

    @pytest.mark.asyncio
    async def test_empty_reply_falls_back(self):
        client = mock_openai(None)

        result = await ProgressiveSummarizer(client).summarize("Body text", "a.txt", "topic")

        assert result == fallback_summary("Body text")
