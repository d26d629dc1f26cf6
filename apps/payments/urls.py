from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    # Gateway callbacks
    path('webhook/', views.payment_webhook, name='payment_webhook'),

    # Payments
    path('initiate/', views.initiate_payment, name='initiate_payment'),
    path('confirm/', views.confirm_payment, name='confirm_payment'),
    path('<int:payment_id>/', views.payment_detail, name='payment_detail'),

    # Seller dashboard
    path('revenue/', views.revenue_summary, name='revenue_summary'),
    path('seller/', views.seller_payments, name='seller_payments'),
    path('instructions/', views.payment_instructions, name='payment_instructions'),
]
