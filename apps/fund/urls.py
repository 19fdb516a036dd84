from django.urls import path
from . import views

app_name = 'fund'

urlpatterns = [
    path('balance/', views.fund_balance, name='balance'),
    path('transactions/', views.fund_transactions, name='transactions'),
    path('deposit/', views.fund_deposit, name='deposit'),
    path('withdraw/', views.fund_withdraw, name='withdraw'),
]
