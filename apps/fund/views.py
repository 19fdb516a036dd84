from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.apartments.services import get_apartment_by_id
from apps.apartments.exceptions import ApartmentNotFoundError
from .serializers import (
    FundTransactionFilterSerializer,
    DepositInputSerializer,
    WithdrawInputSerializer,
    FundTransactionSerializer,
    FundBalanceSerializer,
    WithdrawResponseSerializer,
)
from .services import deposit, withdraw, get_balance, list_transactions
from .exceptions import FundServiceError


class FundTransactionPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


def _resolve_apartment(apartment_id):
    if not apartment_id:
        return None
    return get_apartment_by_id(apartment_id=apartment_id)


@extend_schema(
    responses={200: FundBalanceSerializer},
    description="Current development fund balance in base and secondary currency.",
    tags=['fund'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fund_balance(request):
    """Fund balance - thin HTTP handler."""
    return Response(FundBalanceSerializer(get_balance()).data)


@extend_schema(
    parameters=[
        OpenApiParameter('apartment', OpenApiTypes.UUID),
        OpenApiParameter('type', OpenApiTypes.STR, enum=['deposit', 'withdrawal']),
        OpenApiParameter('date_from', OpenApiTypes.DATE),
        OpenApiParameter('date_to', OpenApiTypes.DATE),
    ],
    responses={200: FundTransactionSerializer(many=True)},
    description="Fund transaction history, newest first.",
    tags=['fund'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fund_transactions(request):
    """Transaction history - thin HTTP handler."""
    filter_serializer = FundTransactionFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)
    params = filter_serializer.validated_data

    queryset = list_transactions(
        apartment_id=params.get('apartment'),
        start_date=params.get('date_from'),
        end_date=params.get('date_to'),
        transaction_type=params.get('type'),
    )

    paginator = FundTransactionPagination()
    page = paginator.paginate_queryset(queryset, request)
    return paginator.get_paginated_response(FundTransactionSerializer(page, many=True).data)


@extend_schema(
    request=DepositInputSerializer,
    responses={201: FundTransactionSerializer},
    description="Add money to the development fund.",
    tags=['fund'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def fund_deposit(request):
    """Manual deposit - thin HTTP handler."""
    serializer = DepositInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        txn = deposit(
            amount=data['amount'],
            currency=data['currency'],
            source=data['source'],
            description=data['description'],
            apartment=_resolve_apartment(data.get('apartment')),
            transaction_date=data.get('transaction_date'),
        )
    except ApartmentNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except FundServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(FundTransactionSerializer(txn).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=WithdrawInputSerializer,
    responses={201: WithdrawResponseSerializer},
    description="Take money out of the fund. Succeeds even when the balance "
                "goes negative; the response then carries a warning.",
    tags=['fund'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def fund_withdraw(request):
    """Withdrawal - thin HTTP handler."""
    serializer = WithdrawInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        txn, went_negative = withdraw(
            amount=data['amount'],
            currency=data['currency'],
            description=data['description'],
            apartment=_resolve_apartment(data.get('apartment')),
            transaction_date=data.get('transaction_date'),
        )
    except ApartmentNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except FundServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    balance = get_balance()
    warning = None
    if went_negative:
        warning = f"Fund balance is negative: debt of {balance['debt']} {balance['base_currency']}"

    return Response(
        WithdrawResponseSerializer({
            'transaction': txn,
            'went_negative': went_negative,
            'warning': warning,
            'balance': balance,
        }).data,
        status=status.HTTP_201_CREATED
    )
