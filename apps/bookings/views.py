from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.db.models import Q
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .models import Booking
from .serializers import (
    BookingSerializer,
    BookingListSerializer,
    BookingConflictSerializer,
    DistributionSerializer,
    PaymentSummarySerializer,
    AvailabilityResponseSerializer,
    # Input serializers
    BookingFilterSerializer,
    BookingCreateSerializer,
    BookingUpdateSerializer,
    ExtendInputSerializer,
    EndEarlyInputSerializer,
    AvailabilityQuerySerializer,
    TransferOriginQuerySerializer,
)
from .services import (
    create_booking,
    update_booking,
    extend_booking,
    end_booking_early,
    cancel_booking,
    delete_booking,
    distribute,
    booking_payment_summary,
    find_conflicts,
    find_transfer_origin,
    get_booking_by_id,
)
from .services.exceptions import (
    BookingServiceError,
    BookingConflictError,
    BookingNotFoundError,
)
from .permissions import CanDeleteBooking


def service_error_response(error: BookingServiceError) -> Response:
    """Translate a booking service error into an HTTP response."""
    if isinstance(error, BookingConflictError):
        return Response(
            {
                'error': str(error),
                'conflicting_booking': BookingConflictSerializer(error.conflicting_booking).data,
            },
            status=status.HTTP_409_CONFLICT
        )
    if isinstance(error, BookingNotFoundError):
        return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)
    return Response({'error': str(error)}, status=status.HTTP_400_BAD_REQUEST)


class BookingPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class BookingViewSet(viewsets.ModelViewSet):
    """
    ViewSet for bookings.

    list: Bookings filterable by apartment, room, status, check-in range, guest
    create: Create a booking (409 on room conflict)
    retrieve: Booking with payments and extensions
    update / partial_update: Edit a booking (409 on room conflict)
    destroy: Permanently delete a booking (staff only)
    """

    queryset = Booking.objects.select_related('apartment', 'room').prefetch_related('payments', 'extensions')
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = BookingPagination

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsAuthenticated(), CanDeleteBooking()]
        return super().get_permissions()

    def get_queryset(self):
        """Filter bookings using input serializer validation."""
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = BookingFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'apartment' in params:
            queryset = queryset.filter(apartment_id=params['apartment'])
        if 'room' in params:
            queryset = queryset.filter(room_id=params['room'])
        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if 'date_from' in params:
            queryset = queryset.filter(check_in__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(check_in__lt=params['date_to'])
        if 'guest' in params:
            queryset = queryset.filter(
                Q(guest_name__icontains=params['guest']) |
                Q(guest_phone__icontains=params['guest'])
            )
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return BookingListSerializer
        return BookingSerializer

    def _detail_response(self, booking, status_code=status.HTTP_200_OK):
        booking = get_booking_by_id(booking_id=booking.id)
        return Response(BookingSerializer(booking).data, status=status_code)

    @extend_schema(request=BookingCreateSerializer, responses={201: BookingSerializer})
    def create(self, request, *args, **kwargs):
        input_serializer = BookingCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            booking = create_booking(**input_serializer.to_service_kwargs())
        except BookingServiceError as e:
            return service_error_response(e)

        return self._detail_response(booking, status.HTTP_201_CREATED)

    @extend_schema(request=BookingUpdateSerializer, responses={200: BookingSerializer})
    def update(self, request, *args, **kwargs):
        booking = self.get_object()
        input_serializer = BookingUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            booking = update_booking(booking_id=booking.id, **input_serializer.to_service_kwargs())
        except BookingServiceError as e:
            return service_error_response(e)

        return self._detail_response(booking)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        booking = self.get_object()
        try:
            delete_booking(booking_id=booking.id)
        except BookingServiceError as e:
            return service_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ExtendInputSerializer, responses={200: BookingSerializer})
    @action(detail=True, methods=['post'])
    def extend(self, request, pk=None):
        """
        Extend a stay.

        POST /api/bookings/{id}/extend/
        Body: {"extension_days": 3, "extension_amount": "90.00"}
        """
        booking = self.get_object()
        input_serializer = ExtendInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            booking = extend_booking(
                booking_id=booking.id,
                extra_days=input_serializer.validated_data['extension_days'],
                extra_amount=input_serializer.validated_data['extension_amount'],
            )
        except BookingServiceError as e:
            return service_error_response(e)

        return self._detail_response(booking)

    @extend_schema(request=EndEarlyInputSerializer, responses={200: BookingSerializer})
    @action(detail=True, methods=['post'])
    def end_early(self, request, pk=None):
        """
        End a stay before its planned check-out.

        POST /api/bookings/{id}/end_early/
        Body: {"actual_check_out": "2025-03-06"}  (defaults to today)
        """
        booking = self.get_object()
        input_serializer = EndEarlyInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            booking = end_booking_early(
                booking_id=booking.id,
                actual_check_out=input_serializer.validated_data.get('actual_check_out'),
            )
        except BookingServiceError as e:
            return service_error_response(e)

        return self._detail_response(booking)

    @extend_schema(request=None, responses={200: BookingSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """
        Cancel a booking.

        POST /api/bookings/{id}/cancel/
        """
        booking = self.get_object()
        try:
            booking = cancel_booking(booking_id=booking.id)
        except BookingServiceError as e:
            return service_error_response(e)

        return self._detail_response(booking)

    @extend_schema(responses={200: DistributionSerializer})
    @action(detail=True, methods=['get'])
    def distribution(self, request, pk=None):
        """
        Revenue split of a booking.

        GET /api/bookings/{id}/distribution/
        """
        booking = self.get_object()
        return Response(DistributionSerializer(distribute(booking)).data)

    @extend_schema(responses={200: PaymentSummarySerializer})
    @action(detail=True, methods=['get'])
    def payment_summary(self, request, pk=None):
        """
        Paid and outstanding amounts in base currency.

        GET /api/bookings/{id}/payment_summary/
        """
        booking = self.get_object()
        return Response(PaymentSummarySerializer(booking_payment_summary(booking)).data)


@extend_schema(
    request=AvailabilityQuerySerializer,
    responses={200: AvailabilityResponseSerializer},
    description="Check whether a room is free for a date range.",
    tags=['bookings'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def check_availability(request):
    """Check room availability - thin HTTP handler."""
    input_serializer = AvailabilityQuerySerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)
    params = input_serializer.validated_data

    conflicts = find_conflicts(
        room_id=params['room'],
        check_in=params['check_in'],
        check_out=params['check_out'],
        exclude_booking_id=params.get('exclude_booking'),
    )
    return Response({
        'available': not conflicts,
        'conflicts': BookingConflictSerializer(conflicts, many=True).data,
    })


@extend_schema(
    parameters=[
        OpenApiParameter('origin_room', OpenApiTypes.UUID, required=True),
        OpenApiParameter('origin_apartment', OpenApiTypes.UUID),
        OpenApiParameter('guest_name', OpenApiTypes.STR, required=True),
    ],
    responses={200: BookingConflictSerializer},
    description="Find the booking a guest is transferring from.",
    tags=['bookings'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transfer_origin(request):
    """Look up a transfer origin booking - thin HTTP handler."""
    query_serializer = TransferOriginQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    origin = find_transfer_origin(
        origin_apartment_id=params.get('origin_apartment'),
        origin_room_id=params['origin_room'],
        guest_name=params['guest_name'],
    )
    if origin is None:
        return Response({'error': 'No matching booking found'}, status=status.HTTP_404_NOT_FOUND)

    data = BookingConflictSerializer(origin).data
    data['platform_commission'] = str(origin.platform_commission)
    data['source'] = origin.source
    return Response(data)
