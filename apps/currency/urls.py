from django.urls import path
from . import views

app_name = 'currency'

urlpatterns = [
    # GET  /api/currency/rates/            - List rates
    # POST /api/currency/rates/refresh/    - Import reference feed (admin)
    # PUT  /api/currency/rates/{code}/     - Set one rate (admin)
    path('rates/', views.rate_list, name='rate-list'),
    path('rates/refresh/', views.rate_refresh, name='rate-refresh'),
    path('rates/<str:currency>/', views.rate_update, name='rate-update'),
]
