"""
AI specialty suggestion through the OpenRouter chat completions API.

The suggestion is a hint only: callers catch ``SpecialtySuggestionError`` and
fall back to manual specialty selection.
"""

import json
import logging
import re

import httpx

from clinic_portal.core import config

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    'You are a medical triage assistant. Based on the symptoms a patient describes, '
    'suggest the medical specialties that should examine them. Choose at most {limit} '
    'specialties from the supplied list only and answer with JSON exactly in the form '
    '{{"specialty_ids": [<id1>, <id2>, ...]}}.'
)

_JSON_FRAGMENT = re.compile(r'\{[\s\S]*\}|\[[\s\S]*\]')


class SpecialtySuggestionError(RuntimeError):
    """Raised when the upstream model cannot produce a suggestion."""


def build_user_prompt(symptoms: str, specialties: list[tuple[int, str]], limit: int) -> str:
    listing = '\n'.join(f'- {specialty_id}: {name}' for specialty_id, name in specialties)
    return (
        f'Symptoms: "{symptoms}"\n\n'
        f'Specialties (id, name):\n{listing}\n\n'
        f"Reply with JSON whose 'specialty_ids' key holds at most {limit} matching ids."
    )


def extract_json(content: str):
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        match = _JSON_FRAGMENT.search(content)
        if not match:
            return None
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            return None


def filter_suggested_ids(parsed, allowed_ids: set[int], limit: int) -> list[int]:
    if not isinstance(parsed, dict) or not isinstance(parsed.get('specialty_ids'), list):
        return []

    suggested: list[int] = []
    for specialty_id in parsed['specialty_ids'][:limit]:
        if isinstance(specialty_id, float) and specialty_id.is_integer():
            specialty_id = int(specialty_id)
        # Only exact integer ids; bools and strings are not ids.
        if isinstance(specialty_id, bool) or not isinstance(specialty_id, int):
            continue
        if specialty_id in allowed_ids and specialty_id not in suggested:
            suggested.append(specialty_id)
    return suggested


def suggest_specialties(
    symptoms: str,
    specialties: list[tuple[int, str]],
    client: httpx.Client | None = None,
    limit: int | None = None,
) -> list[int]:
    limit = limit or config.MAX_SPECIALTY_SUGGESTIONS

    if not config.OPENROUTER_API_KEY:
        raise SpecialtySuggestionError('OPENROUTER_API_KEY is not configured.')

    payload = {
        'model': config.OPENROUTER_MODEL,
        'messages': [
            {'role': 'system', 'content': SYSTEM_PROMPT.format(limit=limit)},
            {'role': 'user', 'content': build_user_prompt(symptoms, specialties, limit)},
        ],
        'temperature': 0.2,
    }
    headers = {'Authorization': f'Bearer {config.OPENROUTER_API_KEY}'}

    owns_client = client is None
    http_client = client or httpx.Client(timeout=config.AI_SUGGESTION_TIMEOUT_SECONDS)
    try:
        response = http_client.post(config.OPENROUTER_API_URL, json=payload, headers=headers)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.exception('Specialty suggestion request failed')
        raise SpecialtySuggestionError('Specialty suggestion service failed.') from exc
    finally:
        if owns_client:
            http_client.close()

    try:
        content = data['choices'][0]['message']['content'] or ''
    except (KeyError, IndexError, TypeError):
        content = ''

    allowed_ids = {specialty_id for specialty_id, _ in specialties}
    suggested = filter_suggested_ids(extract_json(content), allowed_ids, limit)
    logger.info('Suggested %d specialties for symptom description', len(suggested))
    return suggested
