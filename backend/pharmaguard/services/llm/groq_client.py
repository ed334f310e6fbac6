import logging
import httpx
import backoff
from typing import Optional

logger = logging.getLogger(__name__)

GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"


def _is_client_error(e: Exception) -> bool:
    return isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500


class GroqClient:
    """
    Client for Groq's hosted Llama API (OpenAI-compatible).
    Drop-in replacement for OllamaClient.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "llama-3.1-8b-instant",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._http_client = http_client

    @backoff.on_exception(
        backoff.expo,
        (httpx.RequestError, httpx.HTTPStatusError),
        max_tries=2,
        giveup=_is_client_error,
    )
    async def _post(self, payload: dict) -> dict:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self._http_client is not None:
            response = await self._http_client.post(GROQ_API_URL, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(GROQ_API_URL, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()

    async def generate_text(self, prompt: str, system: Optional[str] = None) -> Optional[str]:
        """Deterministic JSON-mode completion. Returns None on any API failure."""
        if not self.api_key:
            logger.warning("GROQ_API_KEY not set; skipping Groq request")
            return None

        logger.info("Sending request to Groq", extra={"model": self.model})

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": 600,
            "temperature": 0.1,
            "top_p": 0.85,
            "response_format": {"type": "json_object"},
        }

        try:
            data = await self._post(payload)
            generated_text = data["choices"][0]["message"]["content"]
            logger.info("Groq request successful", extra={"response_length": len(generated_text)})
            return generated_text
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error(f"Error communicating with Groq: {str(e)}")
            return None
        except (KeyError, IndexError, ValueError) as e:
            logger.error(f"Unexpected Groq response shape: {str(e)}")
            return None
