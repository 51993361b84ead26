import base64
from abc import ABC, abstractmethod

import requests

from storyboard.core.config import Settings
from storyboard.core.exceptions import (
    ImageAuthError,
    ImageGenerationError,
    ImageHTTPError,
    ImageNetworkError,
    ImageQuotaError,
    ImageRateLimitError,
)
from storyboard.core.logging import get_logger

logger = get_logger(__name__)

MOCK_IMAGE_URL = "https://placehold.co/600x400/png?text=AI+Generated+Image+Effect"


class ImageGenerator(ABC):

    @abstractmethod
    def generate_image(self, prompt: str) -> str:
        """
        Returns: an image reference (data URL or remote URL)
        """
        pass


class HuggingFaceImageGenerator(ImageGenerator):
    """
    Text-to-image via the Hugging Face inference router (Stable Diffusion XL).

    The binary response is re-encoded as an inline base64 data URL.
    """

    def __init__(self, api_key: str, model_url: str, timeout: float = 120.0):
        self.api_key = api_key
        self.model_url = model_url
        self.timeout = timeout

    def generate_image(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            raise ImageGenerationError("Image prompt is empty")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "image/png",
        }

        logger.info(f"Requesting image | prompt={prompt[:40]!r}")

        try:
            resp = requests.post(
                self.model_url,
                headers=headers,
                json={"inputs": prompt},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise ImageNetworkError(f"Image request timed out after {self.timeout}s", original_error=e)
        except requests.exceptions.RequestException as e:
            raise ImageNetworkError(f"Image service unreachable: {e}", original_error=e)

        if resp.status_code != 200:
            raise self._error_for_status(resp)

        content_type = resp.headers.get("Content-Type", "image/png").split(";")[0].strip()
        if not content_type.startswith("image/"):
            raise ImageHTTPError(
                f"Unexpected content type from image service: {content_type}",
                status_code=resp.status_code,
            )

        logger.info(f"Image received | bytes={len(resp.content)} | type={content_type}")
        encoded = base64.b64encode(resp.content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"

    @staticmethod
    def _error_for_status(resp: requests.Response) -> ImageGenerationError:
        status = resp.status_code
        body = (resp.text or "")[:200]

        if status == 402:
            return ImageQuotaError(f"Image quota exceeded or payment required: {body}", status_code=status)
        if status in (401, 403):
            return ImageAuthError(f"Image API key rejected ({status}): {body}", status_code=status)
        if status == 429:
            return ImageRateLimitError(f"Image service rate limited: {body}", status_code=status)
        return ImageHTTPError(f"Image service error {status}: {body}", status_code=status)


class MockImageGenerator(ImageGenerator):
    """Placeholder image used when no image API key is configured."""

    def generate_image(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            raise ImageGenerationError("Image prompt is empty")
        return MOCK_IMAGE_URL


def create_image_generator(settings: Settings) -> ImageGenerator:
    if not settings.HF_API_KEY:
        logger.warning("HF_API_KEY not set - image generation uses a placeholder image")
        return MockImageGenerator()
    return HuggingFaceImageGenerator(
        api_key=settings.HF_API_KEY,
        model_url=settings.HF_IMAGE_MODEL_URL,
        timeout=settings.IMAGE_TIMEOUT_SECONDS,
    )
