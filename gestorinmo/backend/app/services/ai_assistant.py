# backend/app/services/ai_assistant.py
from __future__ import annotations

import logging
from typing import Optional

from ..domain.receipts import (
    RECEIPT_PROMPT,
    ReceiptExtraction,
    ReceiptParseError,
    parse_receipt_text,
    split_data_url,
)
from ..integrations.gemini_client import GeminiClient, GeminiError, GeminiNotConfigured

log = logging.getLogger(__name__)

MSG_NOT_CONFIGURED = "Error: API Key de Google no configurada o inválida. Verifica tus variables de entorno."
MSG_EMPTY_REPLY = "No se pudo generar el texto."
MSG_AI_FAILED = "Ocurrió un error al contactar con la IA. Por favor intenta más tarde."

MSG_RECEIPT_OK = "¡Datos extraídos con éxito! Por favor verifica que sean correctos."
MSG_RECEIPT_FAILED = "No se pudo leer la factura. Por favor introduce los datos manualmente."


class ReceiptExtractionError(RuntimeError):
    pass


def email_prompt(tenant_name: str, topic: str, context: str) -> str:
    return (
        "Actúa como un gestor inmobiliario profesional y educado.\n"
        f"Redacta un correo electrónico formal dirigido al inquilino: {tenant_name}.\n\n"
        f"Tema principal: {topic}\n"
        f"Contexto adicional: {context}\n\n"
        "El tono debe ser firme pero cordial. Estructura el correo con Asunto y Cuerpo.\n"
        "No uses marcadores de posición, genera el texto completo."
    )


def draft_email(tenant_name: str, topic: str, context: str, *, client: Optional[GeminiClient] = None) -> str:
    """
    Never raises: every failure comes back as a user-facing message.
    """
    client = client or GeminiClient()
    if not client.enabled():
        log.warning("email draft requested but gemini_api_key is not set")
        return MSG_NOT_CONFIGURED

    try:
        text = client.generate_text(email_prompt(tenant_name, topic, context))
    except GeminiError:
        log.exception("email draft failed")
        return MSG_AI_FAILED

    return text.strip() or MSG_EMPTY_REPLY


def extract_receipt(image: str, *, client: Optional[GeminiClient] = None) -> ReceiptExtraction:
    """
    Receipt image (base64 or data URL) -> best-effort expense fields.

    Raises ReceiptExtractionError on any failure; callers turn it into a
    "fill it in manually" message.
    """
    client = client or GeminiClient()
    mime, b64 = split_data_url(image)
    if not b64:
        raise ReceiptExtractionError("empty image")

    try:
        text = client.generate_with_image(RECEIPT_PROMPT, image_b64=b64, mime_type=mime)
    except GeminiNotConfigured as e:
        raise ReceiptExtractionError("API Key no configurada") from e
    except GeminiError as e:
        log.exception("receipt extraction call failed")
        raise ReceiptExtractionError(str(e)) from e

    try:
        return parse_receipt_text(text)
    except ReceiptParseError as e:
        log.warning("receipt extraction reply unusable: %s", e)
        raise ReceiptExtractionError(str(e)) from e
