from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from django.conf import settings
from drf_spectacular.utils import extend_schema

from .models import CurrencyRate
from .serializers import (
    RateUpdateInputSerializer,
    ReferenceRatesInputSerializer,
    CurrencyRateSerializer,
    RateTableResponseSerializer,
)
from .services import set_rate, import_reference_rates
from .exceptions import CurrencyServiceError


def _rate_table_response():
    return Response({
        'base_currency': settings.BASE_CURRENCY,
        'rates': CurrencyRateSerializer(CurrencyRate.objects.all(), many=True).data,
    })


@extend_schema(
    responses={200: RateTableResponseSerializer},
    description="List stored exchange rates against the base currency.",
    tags=['currency'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def rate_list(request):
    """List stored rates - thin HTTP handler."""
    return _rate_table_response()


@extend_schema(
    request=RateUpdateInputSerializer,
    responses={200: CurrencyRateSerializer},
    description="Set the rate for a single currency (admin only).",
    tags=['currency'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminUser])
def rate_update(request, currency):
    """Set one rate - thin HTTP handler."""
    serializer = RateUpdateInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        rate = set_rate(
            currency=currency,
            units_per_base=serializer.validated_data['units_per_base'],
            source=serializer.validated_data['source'],
        )
    except CurrencyServiceError as e:
        raise ValidationError(str(e))

    return Response(CurrencyRateSerializer(rate).data)


@extend_schema(
    request=ReferenceRatesInputSerializer,
    responses={200: RateTableResponseSerializer},
    description="Import a rate feed quoted against a reference currency (admin only).",
    tags=['currency'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def rate_refresh(request):
    """Import reference-quoted rates - thin HTTP handler."""
    serializer = ReferenceRatesInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        import_reference_rates(
            rates=serializer.validated_data['rates'],
            reference_currency=serializer.validated_data['reference_currency'],
            source=serializer.validated_data['source'],
        )
    except CurrencyServiceError as e:
        raise ValidationError(str(e))

    return _rate_table_response()
