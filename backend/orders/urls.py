from django.urls import path

from .views import CheckoutView, InvoiceView, OrderDeliveryView, OrderDetailView, PaymentConfirmView

urlpatterns = [
    path('orders', CheckoutView.as_view(), name='orders'),
    path('orders/<int:id>', OrderDetailView.as_view(), name='order-detail'),
    path('orders/<int:id>/delivery', OrderDeliveryView.as_view(), name='order-delivery'),
    path('orders/<int:id>/confirm-payment', PaymentConfirmView.as_view(), name='order-confirm-payment'),
    path('invoices/<int:order_id>', InvoiceView.as_view(), name='invoice-detail'),
]
