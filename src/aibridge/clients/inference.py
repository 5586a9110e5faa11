from __future__ import annotations

from typing import Any, TypedDict

import httpx

from aibridge.core.config import Settings, get_settings


class ChatTurn(TypedDict):
    role: str
    content: str


class InferenceError(RuntimeError):
    """The inference backend could not produce a completion."""


INFERENCE_EXCEPTIONS = (httpx.HTTPError, InferenceError, ValueError)


def build_messages(system_prompt: str, user_text: str) -> list[ChatTurn]:
    """One fixed system turn followed by the user's text as the only turn."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_text},
    ]


class InferenceClient:
    """Single-shot chat completion against Workers AI or an OpenAI-compatible API."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def backend(self) -> str:
        return self.settings.inference_backend

    def _headers(self) -> dict[str, str]:
        api_key = self.settings.inference_api_key
        if api_key is None:
            raise InferenceError("INFERENCE_API_KEY is not configured")
        return {
            "Authorization": f"Bearer {api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }

    def _request(self, messages: list[ChatTurn]) -> tuple[str, dict[str, Any]]:
        base_url = self.settings.effective_inference_base_url
        if self.backend == "workers_ai":
            account_id = self.settings.inference_account_id
            if not account_id:
                raise InferenceError("INFERENCE_ACCOUNT_ID is not configured")
            url = f"{base_url}/accounts/{account_id}/ai/run/{self.settings.inference_model}"
            return url, {"messages": messages}
        return f"{base_url}/chat/completions", {
            "model": self.settings.inference_model,
            "messages": messages,
        }

    async def _post_completion(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        headers = self._headers()
        async with httpx.AsyncClient(timeout=self.settings.inference_timeout_seconds) as client:
            resp = await client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        if not isinstance(data, dict):
            raise InferenceError("Inference backend returned a non-object payload")
        return data

    async def complete(self, messages: list[ChatTurn]) -> str:
        """Run one completion and return the response text."""
        url, payload = self._request(messages)
        data = await self._post_completion(url, payload)
        if self.backend == "workers_ai":
            return self._extract_workers_ai_text(data)
        return self._extract_openai_text(data)

    @staticmethod
    def _extract_workers_ai_text(data: dict[str, Any]) -> str:
        if data.get("success") is False:
            raise InferenceError(f"Workers AI run failed: {data.get('errors')}")
        result = data.get("result")
        text = result.get("response") if isinstance(result, dict) else None
        if not isinstance(text, str):
            raise InferenceError("Workers AI response did not include result.response")
        return text

    @staticmethod
    def _extract_openai_text(data: dict[str, Any]) -> str:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise InferenceError("Chat completion response did not include choices")
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if isinstance(content, list):
            parts = [
                item["text"]
                for item in content
                if isinstance(item, dict) and isinstance(item.get("text"), str)
            ]
            content = "\n".join(parts)
        if not isinstance(content, str):
            raise InferenceError("Chat completion response did not include message content")
        return content
