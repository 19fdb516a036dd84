from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.apartments.exceptions import ApartmentNotFoundError
from .analytics import AnalyticsQueries
from .serializers import (
    # Input serializers
    MonthlySummaryQuerySerializer,
    LeaderboardQuerySerializer,
    # Response serializers
    ROISummarySerializer,
    NoInvestmentSerializer,
    MonthlySummarySerializer,
    ErrorSerializer,
)
from .exceptions import AnalyticsServiceError


@extend_schema(
    responses={
        200: ROISummarySerializer,
        404: ErrorSerializer,
    },
    description="Investment recovery of one apartment. "
                "Returns {\"has_investment\": false} when no target is set.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def roi_detail(request, apartment_id):
    """Get an apartment's ROI - thin HTTP handler."""
    try:
        data = AnalyticsQueries.apartment_roi(apartment_id)
    except ApartmentNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    if data is None:
        return Response(NoInvestmentSerializer({'has_investment': False}).data)
    return Response(ROISummarySerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of apartments (max 100)'),
    ],
    responses={200: ROISummarySerializer(many=True)},
    description="ROI of every apartment with an investment target, best recovery first.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def roi_list(request):
    """ROI leaderboard - thin HTTP handler."""
    query_serializer = LeaderboardQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = AnalyticsQueries.roi_leaderboard(limit=query_serializer.validated_data.get('limit'))
    return Response(ROISummarySerializer(data, many=True).data)


@extend_schema(
    parameters=[
        OpenApiParameter('year', OpenApiTypes.INT, description='Calendar year (default: current)'),
        OpenApiParameter('month', OpenApiTypes.INT, description='Calendar month 1-12 (default: current)'),
        OpenApiParameter('apartment_id', OpenApiTypes.UUID, description='Restrict to one apartment'),
    ],
    responses={
        200: MonthlySummarySerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Monthly dashboard: revenue, payments, profit, partner shares, fund and expenses.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def monthly_summary(request):
    """Monthly summary - thin HTTP handler."""
    query_serializer = MonthlySummaryQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = AnalyticsQueries.monthly_summary(
            year=params['year'],
            month=params['month'],
            apartment_id=params.get('apartment_id'),
        )
    except ApartmentNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(MonthlySummarySerializer(data).data)
