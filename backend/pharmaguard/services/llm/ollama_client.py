import logging
import httpx
import backoff
from typing import Optional

logger = logging.getLogger(__name__)


def _is_client_error(e: Exception) -> bool:
    return isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500


class OllamaClient:
    """
    Client for a local Ollama instance.
    Asks for JSON output so the rationale can be parsed field by field.
    """
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:11434",
        model: str = "llama3",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.generate_endpoint = f"{self.base_url}/api/generate"
        self._http_client = http_client

    @backoff.on_exception(
        backoff.expo,
        (httpx.RequestError, httpx.HTTPStatusError),
        max_tries=2,
        giveup=_is_client_error,
    )
    async def _post(self, payload: dict) -> dict:
        if self._http_client is not None:
            response = await self._http_client.post(self.generate_endpoint, json=payload)
            response.raise_for_status()
            return response.json()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.generate_endpoint, json=payload)
            response.raise_for_status()
            return response.json()

    async def generate_text(self, prompt: str, system: Optional[str] = None) -> Optional[str]:
        """
        Deterministic generation (low temperature). Returns None when Ollama
        can't be reached or answers with an error.
        """
        logger.info("Sending request to Ollama", extra={"model": self.model})

        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "format": "json",
            "keep_alive": "15m",
            "options": {
                "num_predict": 400,
                "temperature": 0.1,
                "top_p": 0.85,
                "repeat_penalty": 1.1,
            },
        }
        if system:
            payload["system"] = system

        try:
            data = await self._post(payload)
            generated_text = data.get("response", "")
            logger.info("Ollama request successful", extra={"response_length": len(generated_text)})
            return generated_text
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error(f"Error communicating with Ollama: {str(e)}")
            return None
        except ValueError as e:
            logger.error(f"Ollama returned a non-JSON body: {str(e)}")
            return None
