"""
URL configuration for the wallet backend.

The wallet is used from application code, so the only routes are the
admin site.

URL Structure:
    /admin/                        - Django admin interface (customers, subscriptions)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path("admin/", admin.site.urls),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Wallet Admin"
admin.site.site_title = "Wallet Admin Portal"
admin.site.index_title = "Customers and subscriptions"
