from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'apartments'

# expenses must be registered BEFORE the empty prefix
router = DefaultRouter()
router.register(r'expenses', views.ExpenseViewSet, basename='expense')
router.register(r'', views.ApartmentViewSet, basename='apartment')

urlpatterns = [
    # GET  /api/apartments/               - List apartments
    # GET  /api/apartments/{id}/          - Apartment details
    # GET  /api/apartments/{id}/rooms/    - Ordered rooms
    # GET  /api/apartments/expenses/      - List expenses
    # POST /api/apartments/expenses/      - Record expense
    path('', include(router.urls)),
]
