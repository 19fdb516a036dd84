from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import Apartment
from .serializers import (
    ApartmentSerializer,
    ApartmentListSerializer,
    RoomSerializer,
    ExpenseSerializer,
    ExpenseCreateSerializer,
    ExpenseFilterSerializer,
)
from .services import record_expense, get_expenses
from .exceptions import ApartmentServiceError


class ExpensePagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class ApartmentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only access to apartments.

    list: All apartments
    retrieve: One apartment with rooms, partners and recurring expenses
    rooms: Rooms of one apartment
    """

    queryset = Apartment.objects.prefetch_related(
        'rooms',
        'partner_agreements__partner',
        'recurring_expenses',
    )
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.action == 'list':
            return ApartmentListSerializer
        return ApartmentSerializer

    @extend_schema(responses={200: RoomSerializer(many=True)}, tags=['apartments'])
    @action(detail=True, methods=['get'])
    def rooms(self, request, pk=None):
        """
        Ordered rooms of an apartment.

        GET /api/apartments/{id}/rooms/
        """
        apartment = self.get_object()
        serializer = RoomSerializer(apartment.rooms.all(), many=True)
        return Response(serializer.data)


class ExpenseViewSet(mixins.ListModelMixin,
                     mixins.CreateModelMixin,
                     viewsets.GenericViewSet):
    """
    Operating expenses.

    list: Expenses filterable by apartment and date range
    create: Record a manual expense
    """

    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ExpensePagination

    def get_queryset(self):
        filter_serializer = ExpenseFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return get_expenses(
            start_date=params.get('date_from'),
            end_date=params.get('date_to'),
            apartment_id=params.get('apartment'),
        )

    @extend_schema(request=ExpenseCreateSerializer, responses={201: ExpenseSerializer}, tags=['apartments'])
    def create(self, request, *args, **kwargs):
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            expense = record_expense(**serializer.validated_data)
        except ApartmentServiceError as e:
            raise ValidationError(str(e))

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)
