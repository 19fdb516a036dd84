from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'bookings'

router = DefaultRouter()
router.register(r'', views.BookingViewSet, basename='booking')

urlpatterns = [
    # Booking ViewSet routes
    # GET    /api/bookings/                        - List bookings
    # POST   /api/bookings/                        - Create booking (409 on conflict)
    # GET    /api/bookings/{id}/                   - Booking details
    # PUT    /api/bookings/{id}/                   - Edit booking
    # PATCH  /api/bookings/{id}/                   - Edit booking
    # DELETE /api/bookings/{id}/                   - Delete booking (staff)

    # Custom booking actions
    # POST   /api/bookings/{id}/extend/            - Extend stay
    # POST   /api/bookings/{id}/end_early/         - End stay early
    # POST   /api/bookings/{id}/cancel/            - Cancel booking
    # GET    /api/bookings/{id}/distribution/      - Revenue split
    # GET    /api/bookings/{id}/payment_summary/   - Paid / remaining

    # Additional endpoints (before router so they are not read as ids)
    path('check-availability/', views.check_availability, name='check-availability'),
    path('transfer-origin/', views.transfer_origin, name='transfer-origin'),

    path('', include(router.urls)),
]
