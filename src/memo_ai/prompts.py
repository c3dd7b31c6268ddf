"""Prompt builders for the voice-note analysis stages.

Two stages talk to the language model:

- **Event detection** -- :func:`build_event_detection_prompt` asks for a
  strict ``{"hasCalendarEvents": bool, "events": [...]}`` verdict.
- **Summary** -- :func:`build_summary_prompt` asks for a strict
  ``{"title", "keyPoints", "actions", "tags"}`` object and, when events were
  created, mentions them so the summary does not repeat them as open tasks.
"""

from __future__ import annotations

from datetime import datetime

from memo_ai.config import EventDefaults


def build_event_detection_prompt(
    current_datetime: datetime,
    defaults: EventDefaults | None = None,
) -> str:
    """Build the system prompt for calendar-event detection.

    Args:
        current_datetime: "Now" in the user's timezone, used by the model to
            turn weekday names into ISO dates.
        defaults: Fallbacks the model is told to use for missing fields.

    Returns:
        The complete system prompt string.
    """
    defaults = defaults or EventDefaults()
    today = current_datetime.strftime("%A %Y-%m-%d")

    return f"""\
You are an assistant that detects calendar events in voice-note transcriptions.

Today is {today} and the current local time is {current_datetime.strftime("%H:%M")}.

## What counts as a calendar event

- A meeting, appointment, call, deadline or reminder that is tied to a
  specific day or time ("tomorrow at 10", "Friday 3pm", "on the 21st").
- Tasks without a scheduled day or time are NOT calendar events
  ("remember to send the invoice", "I should call mom sometime").
- Past events that are only being described are NOT calendar events.

## Field rules

- "title": short and specific, capitalised like a calendar entry
  (e.g. "Budget review"). Required.
- "date": "today", "tomorrow", or an ISO date (YYYY-MM-DD) for any other day.
  Resolve weekday names relative to today. Default: "{defaults.date}".
- "time": 24-hour HH:MM. Convert "3pm" to "15:00" and "at 10" to "10:00".
  Default: "{defaults.time}".
- "durationMinutes": integer minutes. Default: {defaults.duration_minutes}.
- "location" and "notes": include only when mentioned.

## Output format

Respond with a single JSON object and nothing else. No comments, no trailing
commas, no markdown fences:

{{
  "hasCalendarEvents": true,
  "events": [
    {{
      "title": "Budget review",
      "date": "tomorrow",
      "time": "10:00",
      "durationMinutes": 60,
      "location": "Room 4",
      "notes": "Bring Q3 numbers"
    }}
  ]
}}

When there are no calendar events respond with:

{{"hasCalendarEvents": false, "events": []}}
"""


def build_event_detection_user_prompt(transcript: str) -> str:
    """Wrap the transcript for the event-detection call."""
    return f"Find calendar events in this voice note transcription:\n\n{transcript}"


def build_summary_prompt(created_event_titles: list[str] | None = None) -> str:
    """Build the system prompt for the summary stage.

    Args:
        created_event_titles: Titles of events already added to the
            calendar.  When non-empty a note listing them is appended.

    Returns:
        The complete system prompt string.
    """
    prompt = """\
You are an AI assistant specialized in analyzing voice note transcriptions and
converting them into structured summaries.

Read the transcription carefully and return a JSON object with:

1. Title - a concise, informative title for the main topic (max 50 characters).
2. Key Points - the main ideas, insights or topics, as short bullet points.
3. Actions - every actionable item or next step, stated concretely.
4. Tags - relevant keywords or categories describing the content.

Rules:
- No extra explanation or commentary.
- All fields must be present, even if some arrays are empty.

Respond with JSON in this exact format:
{
  "title": "Brief descriptive title",
  "keyPoints": ["Key point 1", "Key point 2", "Key point 3"],
  "actions": ["Action item 1", "Action item 2"],
  "tags": ["tag1", "tag2"]
}"""

    if created_event_titles:
        titles = ", ".join(f'"{title}"' for title in created_event_titles)
        prompt += (
            f"\n\nNote: these calendar events were already created from this "
            f"recording: {titles}."
        )

    return prompt


def build_summary_user_prompt(transcript: str) -> str:
    """Wrap the transcript for the summary call."""
    return f"Analyze this transcription and extract key points:\n\n{transcript}"
