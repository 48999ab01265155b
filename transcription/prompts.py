from __future__ import annotations

from common.schemas import TimestampedSegment

TRANSCRIBE_PROMPT = """\
Please transcribe this audio file with timestamps.

REQUIREMENTS:
- Include timestamps every 10-15 seconds and at speaker changes in MM:SS format
- Preserve exact words spoken - no paraphrasing
- Format: [00:05] exact words spoken [00:15] more exact words
- Detect language and speaker changes
- Also provide structured timestamps with speaker identification

Return in this format:

TRANSCRIPT:
[00:00] exact words spoken [00:15] more words [00:30] etc...

STRUCTURED_TIMESTAMPS:
[00:00] Speaker 1: exact words spoken
[00:15] Speaker 1: more words
[00:30] Speaker 2: etc...

METADATA:
Duration: X minutes
Language: detected language
Speakers: number detected
Quality: assessment"""

SUMMARY_SYSTEM_PROMPT = """\
You are an expert content summarizer. Create a comprehensive summary that helps readers quickly understand the key information.

REQUIREMENTS:
- Extract critical points and important context
- Identify main topics and themes
- Highlight key decisions, actions, or conclusions
- Make it easy for readers to understand the core message
- Use clear, concise language
- Include specific details that matter

Return the response in this format:

SUMMARY:
[Your comprehensive summary here]

KEY_POINTS:
• [Critical point 1]
• [Critical point 2]
• [Critical point 3]
[etc...]

MAIN_TOPICS:
• [Topic 1]
• [Topic 2]
[etc...]"""

FORMAT_SYSTEM_PROMPT = """\
You are a transcript formatter. Make the content in beautiful format. The text is transcript text I want you to help arrange it to make it easier to read. in format like this:

*Summary content when it got topic to make it easier to understand*
[00:00] message
[00:50] message ....................
*Summary 2*
[05:00] message 2
[08:50] message 2

You need to follow the coming language if most of it is "Thai" use thai as main language else use english.
Don't adjust the word or try to minimize it. We use it in real serious situation everything must be word by word except we separate the timestamp into new line always.

Just return the formatted text directly without any explanation."""

NO_TIMESTAMPS = "No detailed timestamps available"


def format_segments(segments: list[TimestampedSegment]) -> str:
    if not segments:
        return NO_TIMESTAMPS
    return "\n".join(f"[{s.timestamp}] {s.speaker}: {s.text}" for s in segments)


def build_summary_prompt(transcript: str) -> str:
    return f"""\
{SUMMARY_SYSTEM_PROMPT}

Please summarize this transcript:

{transcript}

Focus on extracting the most important information and context to help readers understand the content quickly."""


def build_format_prompt(transcript: str, segments: list[TimestampedSegment]) -> str:
    return f"""\
{FORMAT_SYSTEM_PROMPT}

Here is the transcript to format:

TRANSCRIPT:
{transcript}

TIMESTAMPS:
{format_segments(segments)}

FORMAT IT BEAUTIFULLY WITH TOPIC SUMMARIES AND CLEAR TIMESTAMP SEPARATION."""
