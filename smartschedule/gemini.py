"""
Gemini scheduling service.

The actual timetable construction happens in the model. This module only:
- turns courses + preferences into a prompt
- asks the generateContent endpoint for JSON matching RESPONSE_SCHEMA
- turns the answer back into a GenerationResult

The HTTP call is blocking (requests), so the async entry point runs it in a
worker thread.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Sequence

import requests

from smartschedule.config import Settings, load_settings
from smartschedule.errors import ConfigurationError, InvalidResponseError, ServiceRequestError
from smartschedule.model import ClassSession, Course, GenerationResult, SchedulePreferences

logger = logging.getLogger(__name__)

SCHEDULE_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri"]

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "sessions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "courseId": {"type": "STRING"},
                    "day": {"type": "STRING", "enum": SCHEDULE_DAYS},
                    "startTime": {"type": "STRING", "description": "HH:MM, 24h"},
                    "endTime": {"type": "STRING", "description": "HH:MM, 24h"},
                    "type": {"type": "STRING", "enum": ["lecture", "study", "break"]},
                },
                "required": ["courseId", "day", "startTime", "endTime"],
            },
        },
        "summary": {"type": "STRING"},
    },
    "required": ["sessions", "summary"],
}


def build_prompt(courses: Sequence[Course], preferences: SchedulePreferences) -> str:
    lines: list[str] = []
    lines.append("You are an expert academic timetable planner.")
    lines.append(
        f"Build a weekly class schedule from Monday to Friday. Every session must lie between "
        f"{preferences.start_time} and {preferences.end_time}."
    )
    if preferences.lunch_duration > 0:
        lines.append(
            f"Reserve a lunch break of {preferences.lunch_duration} minutes around midday on every day "
            f"that has sessions before and after noon."
        )
    else:
        lines.append("No lunch break is required.")
    if preferences.include_breaks:
        lines.append("Leave short breaks (10-15 minutes) between consecutive sessions.")
    else:
        lines.append("Sessions may be scheduled back to back.")
    lines.append("Sessions must never overlap. Spread harder courses across the week.")
    lines.append("")
    lines.append("Courses (use the id as courseId):")
    for c in courses:
        lines.append(
            f"- id={c.course_id} name={c.name!r} credits={c.credits} difficulty={c.difficulty} "
            f"sessions_per_week={c.sessions_per_week} minutes_per_session={c.session_minutes}"
        )
    lines.append("")
    lines.append("Input as JSON:")
    lines.append(
        json.dumps(
            {"courses": [c.to_payload() for c in courses], "preferences": preferences.to_payload()},
            ensure_ascii=False,
        )
    )
    lines.append("")
    lines.append(
        "Answer with JSON only: a 'sessions' list and a 'summary' of two or three sentences "
        "explaining how the week is balanced."
    )
    return "\n".join(lines)


def _strip_fences(text: str) -> str:
    """
    Some answers come wrapped in ```json ... ``` even in JSON mode.
    """
    t = text.strip()
    if t.startswith("```"):
        t = t.split("\n", 1)[1] if "\n" in t else ""
        if t.rstrip().endswith("```"):
            t = t.rstrip()[:-3]
    return t.strip()


def _response_text(payload: Any) -> str:
    if not isinstance(payload, dict):
        raise InvalidResponseError("Unexpected response from the AI service.")

    candidates = payload.get("candidates") or []
    if not isinstance(candidates, list):
        raise InvalidResponseError("Unexpected response from the AI service.")
    if not candidates:
        feedback = payload.get("promptFeedback") or {}
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if reason:
            raise InvalidResponseError(f"The AI service refused the request ({reason}).")
        raise InvalidResponseError("The AI service returned no schedule.")

    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content") or {}
    if not isinstance(content, dict):
        content = {}
    parts = content.get("parts") or []
    text = "".join(_safe_part_text(p) for p in parts)
    if not text.strip():
        raise InvalidResponseError("The AI service returned an empty answer.")
    return text


def _safe_part_text(part: Any) -> str:
    if isinstance(part, dict):
        t = part.get("text")
        return t if isinstance(t, str) else ""
    return ""


def parse_generation_response(payload: Any) -> GenerationResult:
    """
    Convert a generateContent response body into a GenerationResult.

    Raises InvalidResponseError if the model output is not the JSON object
    we asked for.
    """
    text = _response_text(payload)
    cleaned = _strip_fences(text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise InvalidResponseError("The AI service returned malformed schedule data.", raw=text) from exc

    if not isinstance(data, dict):
        raise InvalidResponseError("The AI service returned malformed schedule data.", raw=text)

    raw_sessions = data.get("sessions")
    if not isinstance(raw_sessions, list):
        raise InvalidResponseError("The AI service response has no session list.", raw=text)

    sessions: list[ClassSession] = []
    for item in raw_sessions:
        if not isinstance(item, dict):
            raise InvalidResponseError("The AI service returned a malformed session.", raw=text)
        sessions.append(ClassSession.from_payload(item))

    summary = data.get("summary")
    return GenerationResult(sessions=tuple(sessions), summary=summary.strip() if isinstance(summary, str) else "")


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
        msg = body.get("error", {}).get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    except (ValueError, AttributeError):
        pass
    return f"The AI service returned HTTP {resp.status_code}."


class GeminiScheduleService:
    """
    Awaitable scheduling service backed by the Gemini REST API:

        service = GeminiScheduleService()
        result = await service(courses, preferences)
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings if settings is not None else load_settings()
        self._http = session

    @property
    def endpoint(self) -> str:
        return f"{self.settings.base_url}/models/{self.settings.model}:generateContent"

    def build_request(self, courses: Sequence[Course], preferences: SchedulePreferences) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": build_prompt(courses, preferences)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    def generate_schedule(self, courses: Sequence[Course], preferences: SchedulePreferences) -> GenerationResult:
        """
        Blocking request/response cycle. Raises a ServiceError subclass or
        ConfigurationError on failure.
        """
        if not self.settings.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set. Add it to your environment or .env file.")

        body = self.build_request(courses, preferences)
        post = self._http.post if self._http is not None else requests.post

        logger.info("Requesting schedule from %s for %d course(s)", self.settings.model, len(courses))
        try:
            resp = post(
                self.endpoint,
                params={"key": self.settings.api_key},
                json=body,
                timeout=self.settings.timeout,
            )
        except requests.Timeout as exc:
            raise ServiceRequestError("The AI service did not answer in time.") from exc
        except requests.RequestException as exc:
            raise ServiceRequestError(f"Could not reach the AI service: {exc}") from exc

        if not resp.ok:
            raise ServiceRequestError(_error_message(resp), status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise InvalidResponseError("The AI service returned a non-JSON body.", raw=resp.text) from exc

        result = parse_generation_response(payload)
        logger.info("Received %d session(s)", len(result.sessions))
        return result

    async def __call__(self, courses: Sequence[Course], preferences: SchedulePreferences) -> GenerationResult:
        return await asyncio.to_thread(self.generate_schedule, courses, preferences)
