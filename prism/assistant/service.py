"""
Assistant flow:
1. Match the question to an approved template (for the UI to offer running it)
2. Build the privacy-first system prompt
3. Replay the caller's conversation history
4. Ask the chat completion endpoint and return its prose

The assistant never touches the database and never runs SQL.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from prism.core.clean_room.templates import list_templates
from prism.core.config import settings
from prism.core.exceptions import LLMError

logger = logging.getLogger(__name__)

NO_ANSWER = "No response generated"

SYSTEM_PROMPT = """You are PRISM-X AI, a privacy-preserving analytics assistant for a secure data clean room system.

Context: You have access to three data sources - Bank transactions, Insurance claims, and Government subsidies. All data is anonymized and privacy-controlled.

Your role:
1. Analyze questions about cross-organizational data patterns
2. Provide insights about risk analysis, fraud detection, and social welfare optimization
3. Be factual, precise, and data-driven in your responses
4. Always emphasize privacy protection and data security
5. If asked about specific individuals, explain that the system only allows aggregate analysis

Approved clean room analyses:
{templates}
{context}
Provide a detailed, data-driven answer in 2-4 paragraphs. Include specific insights about patterns, correlations, and actionable recommendations."""


def build_system_prompt(context: Optional[str] = None) -> str:
    templates = "\n".join(f"- {t.name}: {t.question}" for t in list_templates())
    extra = f"\nAdditional context: {context}\n" if context else ""
    return SYSTEM_PROMPT.format(templates=templates, context=extra)


def build_messages(
    question: str,
    context: Optional[str] = None,
    history: Optional[List[Dict[str, str]]] = None,
) -> List[Dict[str, str]]:
    messages = [{"role": "system", "content": build_system_prompt(context)}]
    for message in history or []:
        messages.append({"role": message["role"], "content": message["content"]})
    messages.append({"role": "user", "content": question})
    return messages


def _error_from_response(response: httpx.Response) -> LLMError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    detail = ""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            error = error.get("message")
        detail = str(body.get("message") or error or "")
    detail = detail or f"API request failed with status {response.status_code}"

    if response.status_code == 429 or "quota" in detail.lower():
        return LLMError(
            "API quota exceeded. Please check your LLM provider subscription.",
            status_code=429,
            details=detail,
        )
    if response.status_code in (401, 403):
        return LLMError(
            "Invalid API key. Please check your LLM provider credentials.",
            status_code=401,
            details=detail,
        )
    return LLMError("Failed to generate response", status_code=500, details=detail)


def extract_answer(data: Any) -> str:
    if not isinstance(data, dict):
        return NO_ANSWER
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return NO_ANSWER
    message = choices[0].get("message") or {}
    return message.get("content") or NO_ANSWER


async def ask(
    question: str,
    context: Optional[str] = None,
    history: Optional[List[Dict[str, str]]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Send one question (plus prior turns) to the chat completion endpoint.

    Args:
        question: The user's question, already checked to be non-empty.
        context: Optional extra text appended to the system prompt.
        history: Earlier turns as {"role", "content"} dicts, oldest first.
        transport: httpx transport override, None for the real network.

    Returns:
        The model's answer text.

    Raises:
        LLMError: with status_code 429, 401 or 500 for the caller to relay.
    """
    payload = {
        "model": settings.LLM_MODEL,
        "messages": build_messages(question, context, history),
        "max_tokens": settings.LLM_MAX_TOKENS,
        "temperature": settings.LLM_TEMPERATURE,
    }
    headers = {
        "Authorization": f"Bearer {settings.LLM_API_KEY}",
        "Content-Type": "application/json",
    }

    try:
        async with httpx.AsyncClient(
            timeout=settings.LLM_TIMEOUT, transport=transport
        ) as client:
            response = await client.post(settings.LLM_API_URL, json=payload, headers=headers)
    except httpx.HTTPError as error:
        logger.error(f"LLM request failed: {error}")
        raise LLMError("Failed to generate response", details=str(error)) from error

    if response.is_error:
        error = _error_from_response(response)
        logger.error(f"LLM API error {response.status_code}: {error.details}")
        raise error

    try:
        data = response.json()
    except ValueError as error:
        raise LLMError("Failed to generate response", details="LLM returned invalid JSON") from error

    return extract_answer(data)
