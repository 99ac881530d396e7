from django.urls import path

from .views import DurationEstimateView, MapDefaultsView, RoutePlanView

urlpatterns = [
    path('route/', RoutePlanView.as_view(), name='route-plan'),
    path('estimate/', DurationEstimateView.as_view(), name='duration-estimate'),
    path('map/', MapDefaultsView.as_view(), name='map-defaults'),
]
