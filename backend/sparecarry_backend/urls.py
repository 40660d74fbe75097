from django.contrib import admin
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from users.views import RegisterView, UserDetailView
from marketplace.views import (
    DeliveryRequestViewSet,
    MatchViewSet,
    PlaneCheckView,
    SavedRouteViewSet,
    ShippingEstimateView,
    TripViewSet,
)

router = DefaultRouter()
router.register(r'trips', TripViewSet)
router.register(r'requests', DeliveryRequestViewSet)
router.register(r'matches', MatchViewSet, basename='match')
router.register(r'saved-routes', SavedRouteViewSet, basename='saved-route')

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include(router.urls)),
    path('api/v1/shipping-estimate/', ShippingEstimateView.as_view(), name='shipping-estimate'),
    path('api/v1/plane-check/', PlaneCheckView.as_view(), name='plane-check'),
    path('api/v1/auth/register/', RegisterView.as_view(), name='register'),
    path('api/v1/auth/me/', UserDetailView.as_view(), name='user-detail'),
]
