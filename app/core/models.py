"""
Abstract timestamped base model.

Every wallet table (customers, subscriptions) records when a row was
created and when it last changed. The Stripe mirror fields on Customer are
saved with ``update_fields``, so ``updated_at`` has to be listed there too
for the timestamp to move (see Billable._persist).

Usage:
    from core.model_mixins import UUIDPrimaryKeyMixin
    from core.models import BaseModel

    class Subscription(UUIDPrimaryKeyMixin, BaseModel):
        name = models.CharField(max_length=255)

Note:
    List mixins before BaseModel so their fields and Meta win.
"""

from __future__ import annotations

from django.db import models


class BaseModel(models.Model):
    """
    created_at / updated_at for every concrete model.

    Fields:
        created_at: Set once on insert (indexed for time-range queries)
        updated_at: Refreshed on every save()
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when this record was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when this record was last modified",
    )

    class Meta:
        abstract = True
        # Newest first
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self.pk})"
