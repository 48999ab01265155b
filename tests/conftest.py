from __future__ import annotations

from typing import Any

import pytest

TRANSCRIPTION_REPLY = """\
TRANSCRIPT:
[00:00] Good morning everyone [00:12] let's review the launch plan

STRUCTURED_TIMESTAMPS:
[00:00] Alice: Good morning everyone
[00:12] Bob: let's review the launch plan

METADATA:
Duration: 1 minute
Language: English
Speakers: 2
Quality: clear
"""

SUMMARY_REPLY = """\
SUMMARY:
Alice and Bob open a meeting to review the launch plan.

KEY_POINTS:
• Meeting opened by Alice
• Launch plan is on the agenda

MAIN_TOPICS:
• Launch plan
"""

FORMATTED_REPLY = """\
*Opening*
[00:00] Good morning everyone
[00:12] let's review the launch plan
"""


class FakeGemini:
    """Stands in for GeminiClient; replies are chosen by which prompt is sent.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(
        self,
        transcribe: Any = TRANSCRIPTION_REPLY,
        summary: Any = SUMMARY_REPLY,
        format: Any = FORMATTED_REPLY,
    ) -> None:
        self.replies = {"transcribe": transcribe, "summary": summary, "format": format}
        self.calls: list[tuple[str, list[dict], dict]] = []

    @staticmethod
    def step_for(parts: list[dict]) -> str:
        if any("inlineData" in p for p in parts):
            return "transcribe"
        text = parts[0].get("text", "")
        if "content summarizer" in text:
            return "summary"
        return "format"

    async def generate_content(self, parts: list[dict], config: dict) -> str:
        step = self.step_for(parts)
        self.calls.append((step, parts, config))
        reply = self.replies[step]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def steps(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def transcription_reply():
    return TRANSCRIPTION_REPLY


@pytest.fixture
def summary_reply():
    return SUMMARY_REPLY


@pytest.fixture
def make_gemini():
    return FakeGemini


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def wav_file(tmp_path):
    path = tmp_path / "meeting.wav"
    path.write_bytes(b"RIFF\x00\x00\x00\x00WAVEfmt ")
    return path
