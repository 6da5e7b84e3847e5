"""
Cloud Translation API client.

Translates header texts with the Cloud Translation v2 REST API, using the
authorized HTTP session of a gspread client. The client must have been authorized
with the cloud-translation scope (see sheetcraft.config.Config.authorize).
"""

import logging
from typing import List, Sequence

import gspread
import requests
from gspread.exceptions import APIError

from sheetcraft.exceptions import TranslationAPIError


logger = logging.getLogger(__name__)

TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"


class TranslationClient:
    """Batch text translator.

    Attributes:
        gc: The authenticated gspread client whose session is used
        endpoint: Translation API URL
    """

    def __init__(self, gc: gspread.Client, endpoint: str = TRANSLATE_URL) -> None:
        self.gc = gc
        self.endpoint = endpoint

    def translate(self, texts: Sequence[str], source: str, target: str) -> List[str]:
        """Translate texts in one call.

        Args:
            texts: Texts to translate
            source: Source language code (e.g. "ja")
            target: Target language code (e.g. "en")

        Returns:
            One translated text per returned translation, in input order. The list
            may be shorter than texts or contain empty strings.

        Raises:
            TranslationAPIError: If the call fails or the response is malformed
        """
        if not texts:
            return []

        payload = {"q": list(texts), "source": source, "target": target, "format": "text"}
        logger.debug("Translating %d texts from %s to %s", len(texts), source, target)
        try:
            response = self.gc.http_client.request("post", self.endpoint, json=payload)
            data = response.json()
        except (APIError, requests.RequestException, ValueError) as e:
            raise TranslationAPIError(f"Translation request failed: {e}") from e

        try:
            translations = data["data"]["translations"]
            if not isinstance(translations, list):
                raise TypeError(f"translations is {type(translations).__name__}")
            return [str(t.get("translatedText") or "") for t in translations]
        except (KeyError, TypeError, AttributeError) as e:
            raise TranslationAPIError(f"Unexpected translation response: {data!r}") from e
