from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Investment recovery
    path('roi/', views.roi_list, name='roi-list'),
    path('roi/<uuid:apartment_id>/', views.roi_detail, name='roi-detail'),

    # Dashboard
    path('monthly/summary/', views.monthly_summary, name='monthly-summary'),
]
