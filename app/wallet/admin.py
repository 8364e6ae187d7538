"""
Wallet admin configuration.

The Stripe mirror fields are read-only: they change only through the
wallet services.
"""

from django.contrib import admin

from wallet.models import Customer, Subscription

__all__ = [
    "CustomerAdmin",
    "SubscriptionAdmin",
]


class SubscriptionInline(admin.TabularInline):
    model = Subscription
    extra = 0
    can_delete = False
    fields = ["name", "stripe_id", "stripe_plan", "quantity", "trial_ends_at", "ends_at"]
    readonly_fields = fields


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """
    Admin configuration for Customer.

    Shows the local mirror of the Stripe customer and default card.
    """

    list_display = [
        "id",
        "email",
        "stripe_id",
        "card_brand",
        "card_last_four",
        "currency",
        "created_at",
    ]
    list_filter = ["card_brand", "currency"]
    search_fields = ["id", "email", "stripe_id"]
    readonly_fields = [
        "id",
        "stripe_id",
        "card_brand",
        "card_last_four",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]
    inlines = [SubscriptionInline]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "email", "name", "currency"),
            },
        ),
        (
            "Stripe",
            {
                "fields": ("stripe_id", "card_brand", "card_last_four"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    """Admin configuration for Subscription."""

    list_display = [
        "id",
        "customer",
        "name",
        "stripe_plan",
        "quantity",
        "trial_ends_at",
        "ends_at",
        "created_at",
    ]
    list_filter = ["stripe_plan", "created_at"]
    search_fields = ["id", "stripe_id", "customer__email", "name"]
    readonly_fields = ["id", "stripe_id", "created_at", "updated_at"]
    raw_id_fields = ["customer"]
    ordering = ["-created_at"]
