"""
Reports API views for NACK POS.
"""
from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.api.permissions import IsOwner
from apps.api.serializers import SaleSerializer
from apps.reports.services.report_service import PERIODS, ReportService, ReportServiceError


def _period(request):
    period = request.query_params.get('period', 'today')
    if period not in PERIODS:
        raise ReportServiceError(f"Période inconnue: {period}")
    return period


@api_view(['GET'])
@permission_classes([IsOwner])
def dashboard(request):
    """
    Takings, order count, losses and margin for today, the week and the month.
    """
    return Response(ReportService.dashboard(request.user))


@api_view(['GET'])
@permission_classes([IsOwner])
def recent_sales(request):
    try:
        period = _period(request)
    except ReportServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    sales = ReportService.recent_sales(request.user, period)
    return Response({
        'period': period,
        'stats': ReportService.period_stats(request.user, period),
        'sales': SaleSerializer(sales, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsOwner])
def top_products(request):
    try:
        limit = int(request.query_params.get('limit', 5))
    except ValueError:
        return Response({'error': 'limit must be an integer'}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ReportService.top_products(request.user, limit=max(1, limit)))


@api_view(['GET'])
@permission_classes([IsOwner])
def export_csv(request):
    """
    Sales of the period as CSV.
    """
    try:
        period = _period(request)
    except ReportServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    content = ReportService.export_csv(ReportService.recent_sales(request.user, period))

    response = HttpResponse(content, content_type='text/csv; charset=utf-8')
    filename = f"ventes_{period}_{timezone.localdate():%Y-%m-%d}.csv"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@api_view(['GET'])
@permission_classes([IsOwner])
def export_pdf(request):
    """
    Monthly report as PDF.
    """
    pdf_content = ReportService.export_pdf(request.user)

    response = HttpResponse(pdf_content, content_type='application/pdf')
    filename = f"rapport_{timezone.localdate():%Y-%m}.pdf"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    response['Content-Length'] = len(pdf_content)
    return response
