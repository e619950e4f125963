from __future__ import annotations
import logging
from typing import Any, Optional
import httpx
from .models import Observation
from .advice import classify, validate_observation
from .config import Settings

logger = logging.getLogger(__name__)


class CoachProtocol:
    async def advise(self, observation: Observation) -> str: ...


class RuleBasedCoach:
    """Deterministic coach: the classifier's message, no network."""
    async def advise(self, observation: Observation) -> str:
        return classify(observation).message


class LLMClient:
    """
    Short coaching line from an OpenRouter-compatible chat-completions API.
    Returns "" on any upstream failure so callers can fall back to the rules.
    """
    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or Settings.from_env()
        self.token = self.settings.api_key
        self.model = self.settings.model
        self.base_url = self.settings.base_url.rstrip("/")
        self.transport = transport

    def build_prompt(self, obs: Observation) -> str:
        return (
            "You are a sleep coach who is encouraging but a little strict. "
            "For a student who tends to get sleepy during the day, reply in English "
            "with a single piece of advice of at most 40 words. "
            "Do not lecture too much, make the point to improve clear, and keep it positive. "
            "Do not use emojis.\n"
            f"Input: sleep duration={obs.sleep_duration_hours}h, "
            f"daytime sleepiness score (1-5, higher is more alert)={obs.sleep_quality_score}, "
            f"concentration (1-5)={obs.concentration_score}"
        )

    async def advise(self, observation: Observation) -> str:
        if not self.token:
            return ""

        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "user", "content": self.build_prompt(observation)}
            ],
            "temperature": 0.2,
            "max_tokens": 120,
        }

        try:
            async with httpx.AsyncClient(timeout=self.settings.timeout, transport=self.transport) as c:
                r = await c.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=payload
                )
                r.raise_for_status()
                data = r.json()

                choices = data.get("choices") if isinstance(data, dict) else None
                if isinstance(choices, list) and choices:
                    choice = choices[0]
                    message = choice.get("message") if isinstance(choice, dict) else None
                    content = message.get("content") if isinstance(message, dict) else None
                    if isinstance(content, str):
                        return content.strip()
                logger.warning("Coach API returned an unexpected payload")
        except httpx.HTTPStatusError as e:
            logger.warning("Coach API error: %s - %s", e.response.status_code, e.response.text)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Coach API exception: %s", e)

        return ""


def default_coach(settings: Optional[Settings] = None) -> CoachProtocol:
    settings = settings or Settings.from_env()
    return LLMClient(settings) if settings.api_key else RuleBasedCoach()


async def coach_message(observation: Any, coach: Optional[CoachProtocol] = None) -> str:
    obs = validate_observation(observation)
    text = await (coach or RuleBasedCoach()).advise(obs)
    return text or classify(obs).message
