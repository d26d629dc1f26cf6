from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    path('checkout/', views.CheckoutView.as_view(), name='checkout'),
    path('coupons/validate/', views.validate_coupon, name='validate-coupon'),
    path('orders/track/<str:token>/', views.track_order, name='track-order'),
]
