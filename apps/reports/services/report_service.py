"""
Sales reporting for NACK POS.

Reports cover bar and restaurant takings only: ticket sales are kept out.
"""
import csv
import io
from datetime import datetime, time, timedelta
from typing import Any, Dict, List

from django.contrib.auth.models import User
from django.db.models import F, Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from apps.inventory.models import Loss
from apps.orders.models import Sale

PERIODS = ('today', 'week', 'month')
RECENT_LIMITS = {'today': 50, 'week': 100, 'month': 200}
CSV_HEADER = ['Date', 'Heure', 'Produits', 'Total (XAF)', 'Agent']


class ReportServiceError(Exception):
    pass


def period_start(period: str, now=None) -> datetime:
    """Start of today, of the last seven days (today included) or of the month."""
    now = timezone.localtime(now or timezone.now())
    today = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    if period == 'today':
        return today
    if period == 'week':
        return today - timedelta(days=6)
    if period == 'month':
        return today.replace(day=1)
    raise ReportServiceError(_("Unknown period"))


class ReportService:
    """Service class for sales statistics and exports."""

    @staticmethod
    def _sales_since(owner: User, start) -> List[Sale]:
        sales = Sale.objects.filter(owner=owner, event__isnull=True, created_at__gte=start).order_by('-created_at')
        return [sale for sale in sales if not sale.is_event_sale]

    @staticmethod
    def period_stats(owner: User, period: str, now=None) -> Dict[str, int]:
        """
        ventes: sales total, commandes: number of sales,
        pertes: losses valued at product cost, benefice: ventes - pertes.
        """
        start = period_start(period, now)
        sales = ReportService._sales_since(owner, start)
        ventes = sum(sale.total for sale in sales)
        pertes = Loss.objects.filter(owner=owner, date__gte=start).aggregate(
            value=Sum(F('quantity') * F('product__cost'))
        )['value'] or 0
        return {
            'ventes': ventes,
            'commandes': len(sales),
            'pertes': pertes,
            'benefice': ventes - pertes,
        }

    @staticmethod
    def dashboard(owner: User, now=None) -> Dict[str, Any]:
        data = {period: ReportService.period_stats(owner, period, now) for period in PERIODS}
        data['top_products'] = ReportService.top_products(owner, now=now)
        return data

    @staticmethod
    def recent_sales(owner: User, period: str, now=None) -> List[Sale]:
        """Most recent sales of the period, capped per period."""
        start = period_start(period, now)
        return ReportService._sales_since(owner, start)[:RECENT_LIMITS[period]]

    @staticmethod
    def top_products(owner: User, limit: int = 5, now=None) -> List[Dict[str, Any]]:
        """Best sellers of the month by revenue."""
        by_product: Dict[str, Dict[str, Any]] = {}
        for sale in ReportService._sales_since(owner, period_start('month', now)):
            for item in sale.items:
                key = item.get('product_id') or item.get('name')
                entry = by_product.setdefault(key, {'name': item.get('name', ''), 'sales': 0, 'revenue': 0})
                quantity = int(item.get('quantity') or 0)
                entry['sales'] += quantity
                entry['revenue'] += int(item.get('price') or 0) * quantity
        return sorted(by_product.values(), key=lambda entry: entry['revenue'], reverse=True)[:limit]

    @staticmethod
    def sale_row(sale: Sale) -> List[str]:
        created = timezone.localtime(sale.created_at)
        products = '; '.join(f"{item.get('name', '')} x{item.get('quantity', 0)}" for item in sale.items)
        return [
            created.strftime('%d/%m/%Y'),
            created.strftime('%H:%M'),
            products,
            str(sale.total),
            sale.agent_code or '',
        ]

    @staticmethod
    def export_csv(sales: List[Sale]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_HEADER)
        for sale in sales:
            writer.writerow(ReportService.sale_row(sale))
        return buffer.getvalue()

    @staticmethod
    def export_pdf(owner: User, now=None) -> bytes:
        """Monthly report: figures per period, best sellers, sales of the day."""
        establishment = getattr(owner, 'establishment', None)
        title = f"Rapport - {establishment.name}" if establishment else "Rapport"

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=15*mm, rightMargin=15*mm, topMargin=15*mm, bottomMargin=15*mm)
        styles = getSampleStyleSheet()
        story = [Paragraph(title, styles['Title']), Spacer(1, 12)]

        stats_rows = [['', 'Ventes', 'Commandes', 'Pertes', 'Bénéfice']]
        labels = {'today': "Aujourd'hui", 'week': '7 derniers jours', 'month': 'Mois'}
        for period in PERIODS:
            stats = ReportService.period_stats(owner, period, now)
            stats_rows.append([
                labels[period], f"{stats['ventes']} XAF", str(stats['commandes']),
                f"{stats['pertes']} XAF", f"{stats['benefice']} XAF",
            ])
        story.append(ReportService._table(stats_rows))
        story.append(Spacer(1, 12))

        story.append(Paragraph('Top produits du mois', styles['Heading2']))
        top = ReportService.top_products(owner, now=now)
        if top:
            story.append(ReportService._table(
                [['#', 'Produit', 'Quantité', 'Revenu']] +
                [[str(i + 1), p['name'], str(p['sales']), f"{p['revenue']} XAF"] for i, p in enumerate(top)]
            ))
        else:
            story.append(Paragraph('Aucun produit vendu ce mois-ci', styles['Normal']))
        story.append(Spacer(1, 12))

        story.append(Paragraph('Ventes du jour', styles['Heading2']))
        rows = [ReportService.sale_row(sale) for sale in ReportService.recent_sales(owner, 'today', now)]
        story.append(ReportService._table([CSV_HEADER] + rows))

        doc.build(story)
        buffer.seek(0)
        return buffer.getvalue()

    @staticmethod
    def _table(rows) -> Table:
        table = Table(rows, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#b91c1c')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
        ]))
        return table
