"""HTTP client for reading delivery and return notes with a vision model."""

from __future__ import annotations

import base64
import json
import logging
import re
from dataclasses import dataclass

import httpx

from ...config import settings
from ...models.domain import Flux

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """Tu es un expert en logistique IKEA / XPO Logistics. Analyse l'image de ce document (Bon de Livraison ou Bon de Retour).

RÈGLES D'EXTRACTION :
1. 'orderNumber' : repère le texte "Order number :".
   - Bon de Livraison : le numéro commence par 15, 16, 17 ou 18.
   - Bon de Retour : recopie le numéro tel quel (souvent alphanumérique, ex. 8QAL-4MQ8).
2. 'clientName' : nom du champ "Destinataire" ou "Adresse d'enlèvement".
3. 'flux' :
   - Document intitulé "Bon de Retour" : "RET".
   - Bon de Livraison avec "CC1", "CU1" ou "CU2" : "CDC".
   - Bon de Livraison avec "LC1", "LU1" ou "LU2" : "LCD".
   - Sinon : chaîne vide.

Réponds UNIQUEMENT en JSON : {"orderNumber": "string", "clientName": "string", "flux": "string"}"""

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class ClassificationError(RuntimeError):
    """The classification service failed or answered something unusable."""


class NothingExtractedError(ClassificationError):
    """The service answered but found neither an order number nor a client."""


@dataclass(slots=True)
class ClassificationResult:
    order_number: str
    client_name: str
    flux: Flux

    @property
    def is_complete(self) -> bool:
        return bool(self.order_number and self.client_name)


def parse_extraction(text: str) -> ClassificationResult:
    """Decode the model's JSON answer, tolerating markdown code fences."""
    cleaned = _CODE_FENCE.sub("", text or "").strip() or "{}"
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ClassificationError(f"Classification answer is not JSON: {cleaned[:80]!r}") from exc
    if not isinstance(payload, dict):
        raise ClassificationError("Classification answer is not a JSON object.")
    order_number = str(payload.get("orderNumber") or "").strip()
    client_name = str(payload.get("clientName") or "").strip()
    if not order_number and not client_name:
        raise NothingExtractedError("No order number or client name found in the document.")
    return ClassificationResult(
        order_number=order_number,
        client_name=client_name,
        flux=Flux.parse(payload.get("flux")),
    )


class DocumentClassifier:
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.classifier_api_key
        if not self.api_key:
            raise ValueError("Classification API key is not configured.")
        self.model = model or settings.classifier_model
        self.base_url = (base_url or settings.classifier_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.classifier_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _request_body(self, image: bytes, mime_type: str) -> dict:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": EXTRACTION_PROMPT},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(image).decode("ascii"),
                            }
                        },
                    ]
                }
            ]
        }

    @staticmethod
    def _answer_text(payload: dict) -> str:
        candidates = payload.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    def classify(self, image: bytes, mime_type: str = "image/jpeg") -> ClassificationResult:
        if not image:
            raise ClassificationError("Empty image.")
        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            with self._get_client() as client:
                response = client.post(
                    url,
                    params={"key": self.api_key},
                    json=self._request_body(image, mime_type),
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(f"Classification request failed with status {exc.response.status_code}")
            raise ClassificationError(f"Classification service returned {exc.response.status_code}.") from exc
        except httpx.HTTPError as exc:
            logger.error(f"Classification request failed: {exc}")
            raise ClassificationError("Classification service is unreachable.") from exc
        except ValueError as exc:
            raise ClassificationError("Classification service returned invalid JSON.") from exc

        result = parse_extraction(self._answer_text(payload))
        logger.info(f"Classified document as {result.flux.value or 'no flux'} order {result.order_number or '?'}")
        return result
