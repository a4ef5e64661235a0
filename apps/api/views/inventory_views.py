"""
Inventory API views for NACK POS.
"""
from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.api.permissions import IsOwner, IsOwnerOrPOSStaff, agent_code_of
from apps.api.serializers import LossSerializer, ProductSerializer, RestockSerializer
from apps.audit.services.audit_service import AuditService
from apps.inventory.models import Loss, Product
from apps.inventory.services.stock_service import StockService, StockServiceError


class ProductListCreateView(generics.ListCreateAPIView):
    """
    List products with search and filtering.
    Staff see the active menu; the owner sees and creates everything.
    """
    serializer_class = ProductSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'is_active']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'price', 'quantity', 'created_at']
    ordering = ['name']

    def get_permissions(self):
        if self.request.method == 'GET':
            return [IsOwnerOrPOSStaff()]
        return [IsOwner()]

    def get_queryset(self):
        queryset = Product.objects.filter(owner=self.request.user)
        if agent_code_of(self.request):
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_create(self, serializer):
        product = serializer.save(owner=self.request.user)
        AuditService.log_event(
            actor_user=self.request.user,
            entity_type='Product',
            entity_id=str(product.id),
            action='create_product',
            after_data={'name': product.name, 'price': product.price, 'quantity': product.quantity}
        )


class ProductDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    Retrieve, update or delete a product.
    """
    serializer_class = ProductSerializer
    permission_classes = [IsOwner]

    def get_queryset(self):
        return Product.objects.filter(owner=self.request.user)

    def perform_update(self, serializer):
        before = {'price': serializer.instance.price, 'quantity': serializer.instance.quantity}
        product = serializer.save()
        AuditService.log_event(
            actor_user=self.request.user,
            entity_type='Product',
            entity_id=str(product.id),
            action='update_product',
            before_data=before,
            after_data={'price': product.price, 'quantity': product.quantity}
        )

    def perform_destroy(self, instance):
        AuditService.log_event(
            actor_user=self.request.user,
            entity_type='Product',
            entity_id=str(instance.id),
            action='delete_product',
            before_data={'name': instance.name}
        )
        instance.delete()


@api_view(['POST'])
@permission_classes([IsOwner])
def restock(request, product_id):
    """
    Add units to a product's stock.
    """
    serializer = RestockSerializer(data=request.data)
    if serializer.is_valid():
        try:
            product = StockService.restock(
                owner=request.user,
                product_id=product_id,
                quantity=serializer.validated_data['quantity']
            )
            return Response(ProductSerializer(product).data)
        except StockServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsOwner])
def losses(request):
    """
    List losses, or write off units of a product.
    """
    if request.method == 'GET':
        queryset = Loss.objects.filter(owner=request.user).select_related('product')[:200]
        return Response(LossSerializer(queryset, many=True).data)

    serializer = LossSerializer(data=request.data)
    if serializer.is_valid():
        data = serializer.validated_data
        try:
            loss = StockService.record_loss(
                owner=request.user,
                product_id=data['product_id'],
                quantity=data['quantity'],
                reason=data.get('reason', ''),
                date=data.get('date')
            )
            return Response(LossSerializer(loss).data, status=status.HTTP_201_CREATED)
        except StockServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsOwner])
def low_stock(request):
    """
    Active products at or below their threshold.
    """
    products = StockService.low_stock(request.user)
    return Response(ProductSerializer(products, many=True).data)
