"""QR image rendering for check-in URLs."""

from dataclasses import dataclass
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_H

from seminar_attendance.services.codes import QrRenderer


@dataclass
class QrcodePngRenderer(QrRenderer):
    """Renders PNG QR codes with the ``qrcode`` library."""

    box_size: int = 10
    border: int = 4

    def render_png(self, data: str) -> bytes:
        """Return a PNG image encoding the data at high error correction."""
        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECT_H,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(data)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white")
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
