"""
URL configuration for the Hostel Manager API.

All API routes live under /api/. Bookings, apartments, currency rates and
the development fund each have their own prefix; the ROI and monthly
reports are mounted directly under /api/ (api/roi/, api/monthly/summary/).
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API endpoints
    path('api/bookings/', include('apps.bookings.urls')),
    path('api/apartments/', include('apps.apartments.urls')),
    path('api/currency/', include('apps.currency.urls')),
    path('api/fund/', include('apps.fund.urls')),
    path('api/', include('apps.analytics.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
