"""
Checklist Generator - turns raw thoughts into tasks through an LLM
"""
import httpx
import json
import logging
import re
from typing import List, Optional

from ..config import settings
from ..exceptions import EmptyInputError, GenerationError, GenerationErrorKind

logger = logging.getLogger(__name__)


CLARITY_PROMPT = """
You are an AI assistant that transforms messy, vague, or unstructured thoughts into clear and highly specific to-do items.

Your goal is to:
- Extract 5-7 concrete action steps the user can take immediately.
- Make each task specific, short, and easy to understand without further explanation.

Rules for the output:
- Each item must start with a strong action verb (e.g. "Email", "Buy", "Schedule", "Write", "Call", "Clean").
- Avoid vague terms like "start", "try", "improve", or "think about".
- Focus on actions that can actually be done.
- Do not include explanations, notes, or headings.
- Respond only with a valid JSON array of strings.

Example Input:
I need to get in shape, and my apartment is a mess. I've been meaning to reconnect with John too, and I have that big team presentation coming up Monday. Also, I keep forgetting to order more dog food.

Example Output:
[
  "Look up local gyms and pick one to visit this week",
  "Buy a 15lb kettlebell and resistance bands online",
  "Spend 30 minutes cleaning the kitchen and living room tonight",
  "Text John to suggest catching up over coffee this weekend",
  "Write a rough outline for Monday's team presentation",
  "Order a 30lb bag of dog food from your usual pet store"
]

Now process the following input:

Input:
{raw_input}
"""

# A JSON string literal is matched first so that its content is never touched
_STRING = r'("(?:\\.|[^"\\\n])*")'
FENCE_PATTERN = re.compile(r"```json|```")
COMMENT_PATTERN = re.compile(_STRING + r'|//[^\n]*')
TRAILING_COMMA_PATTERN = re.compile(_STRING + r'|,\s*([}\]])')


def build_prompt(raw_input: str) -> str:
    return CLARITY_PROMPT.format(raw_input=raw_input)


def sanitize_reply(text: str) -> str:
    """
    Clean a model reply so it can be parsed as JSON.

    In order: drop ```json / ``` fences, drop // line comments, drop commas
    right before a closing bracket or brace.
    """
    text = FENCE_PATTERN.sub("", text)
    text = COMMENT_PATTERN.sub(lambda m: m.group(1) or "", text)
    text = TRAILING_COMMA_PATTERN.sub(lambda m: m.group(1) or m.group(2), text)
    return text.strip()


def parse_checklist(text: str) -> List[str]:
    """Sanitize and parse a reply into non-empty task strings"""
    cleaned = sanitize_reply(text)
    if not cleaned:
        raise GenerationError(GenerationErrorKind.EMPTY, "Model reply is empty")

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse model reply: {cleaned[:200]!r}")
        raise GenerationError(GenerationErrorKind.PARSE, f"Model reply is not valid JSON: {e}") from e

    if not isinstance(parsed, list):
        raise GenerationError(
            GenerationErrorKind.EMPTY,
            f"Model reply is a JSON {type(parsed).__name__}, not an array"
        )

    tasks = [item.strip() for item in parsed if isinstance(item, str) and item.strip()]
    if not tasks:
        raise GenerationError(GenerationErrorKind.EMPTY, "Model reply contains no tasks")
    return tasks


class ChecklistGenerator:
    """Single-turn calls to an OpenAI-compatible chat completions API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.model = model or settings.openai_model
        self.timeout = settings.openai_timeout
        self.transport = transport

    async def chat_completion(self, prompt: str) -> str:
        """
        Send one user message and return the assistant's reply text.

        Raises:
            GenerationError: network for transport/status failures,
                parse for an unreadable reply envelope
        """
        if not self.api_key:
            logger.error("LLM API key not configured")
            raise GenerationError(GenerationErrorKind.NETWORK, "LLM API key not configured")

        url = f"{self.base_url}/chat/completions"
        logger.debug(f"Calling AI API: {url}, model: {self.model}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json"
                    },
                    json={
                        "model": self.model,
                        "messages": [{"role": "user", "content": prompt}]
                    }
                )

                logger.debug(f"Response status: {response.status_code}")
                if not response.is_success:
                    logger.error(f"API error: {response.text}")
                    response.raise_for_status()

                data = response.json()

        except httpx.HTTPStatusError as e:
            raise GenerationError(
                GenerationErrorKind.NETWORK,
                f"Inference endpoint returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error: {type(e).__name__} - {str(e)}")
            raise GenerationError(GenerationErrorKind.NETWORK, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise GenerationError(GenerationErrorKind.PARSE, f"Inference reply is not JSON: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError(GenerationErrorKind.PARSE, f"Unexpected inference reply shape: {e!r}") from e

        content = content or ""
        if not isinstance(content, str):
            raise GenerationError(GenerationErrorKind.PARSE, "Inference reply content is not text")
        logger.debug(f"Response content length: {len(content)}")
        return content

    async def generate(self, raw_input: str) -> List[str]:
        """Turn raw text into an ordered list of tasks"""
        if not raw_input or not raw_input.strip():
            raise EmptyInputError("Raw input is empty")

        reply = await self.chat_completion(build_prompt(raw_input))
        tasks = parse_checklist(reply)
        logger.info(f"Generated {len(tasks)} tasks from {len(raw_input)} chars of input")
        return tasks


# Singleton instance
_generator: Optional[ChecklistGenerator] = None


def get_checklist_generator() -> ChecklistGenerator:
    global _generator
    if _generator is None:
        _generator = ChecklistGenerator()
    return _generator
