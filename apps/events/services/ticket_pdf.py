"""
Printable ticket with its admission QR code.
"""
import io
import json

import qrcode
from reportlab.lib.pagesizes import A6
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer

from apps.events.models import Ticket


def qr_png(data: str, box_size: int = 8, border: int = 2) -> bytes:
    """Render text as a PNG QR code."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    img_io = io.BytesIO()
    img.save(img_io, format='PNG')
    return img_io.getvalue()


class TicketPDFService:
    @staticmethod
    def payload(ticket: Ticket) -> str:
        return json.dumps(ticket.qr_payload, separators=(',', ':'))

    @staticmethod
    def create_ticket_pdf(ticket: Ticket) -> bytes:
        event = ticket.event
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=A6,
            leftMargin=8*mm, rightMargin=8*mm, topMargin=8*mm, bottomMargin=8*mm,
            title=f"Billet {event.title}"
        )
        styles = getSampleStyleSheet()
        story = []
        story.append(Paragraph(event.title, styles['Title']))
        story.append(Paragraph(f"{event.date:%d/%m/%Y} à {event.time:%H:%M}", styles['Normal']))
        story.append(Paragraph(event.location, styles['Normal']))
        story.append(Spacer(1, 6))
        story.append(Image(io.BytesIO(qr_png(TicketPDFService.payload(ticket))), width=50*mm, height=50*mm))
        story.append(Spacer(1, 6))
        story.append(Paragraph(f"Client: {ticket.customer_name}", styles['Normal']))
        story.append(Paragraph(f"Quantité: {ticket.quantity}", styles['Normal']))
        story.append(Paragraph(f"Total: {ticket.total_amount:,} {event.currency}".replace(',', ' '), styles['Normal']))
        story.append(Paragraph(f"Billet: {ticket.id}", styles['Code']))
        doc.build(story)
        buffer.seek(0)
        return buffer.getvalue()
