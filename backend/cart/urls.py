from django.urls import re_path
from .views import CartCheckoutView, CartQuoteView

app_name = "cart"

urlpatterns = [
    re_path(r"^cart/quote/?$", CartQuoteView.as_view(), name="cart-quote"),
    re_path(r"^cart/checkout/?$", CartCheckoutView.as_view(), name="cart-checkout"),
]
