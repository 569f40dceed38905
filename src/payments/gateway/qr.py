"""QR encoder: renders a gateway QR payload as a data-URI image."""

import base64
import io
from typing import Protocol

import qrcode
import qrcode.image.svg

from shared.errors import ValidationError


class QrEncoder(Protocol):
    def encode(self, payload: str) -> str: ...


class SvgQrEncoder:
    """Encodes payloads as ``data:image/svg+xml;base64,...`` URIs."""

    media_type = "image/svg+xml"

    def encode(self, payload: str) -> str:
        if not payload:
            raise ValidationError({"qr_payload": ["Cannot encode an empty QR payload"]})
        image = qrcode.make(payload, image_factory=qrcode.image.svg.SvgPathImage)
        buffer = io.BytesIO()
        image.save(buffer)
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"
