import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class DocumentKind(models.TextChoices):
    DOCUMENT = 'Document', _('Document')
    INVOICE = 'Invoice', _('Invoice')


class Artifact(models.Model):
    """
    A generated PDF and the metadata it was generated with.

    Artifacts are write-once: they are created by the generate path and
    afterwards only read (download, listing).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    filename = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100, default='application/pdf')
    kind = models.CharField(max_length=20, choices=DocumentKind.choices, default=DocumentKind.DOCUMENT)
    data = models.BinaryField()
    size_bytes = models.BigIntegerField(default=0)
    sha256 = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    source_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    invoice_number = models.CharField(max_length=100, blank=True, db_index=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.filename} (ID: {self.id})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Artifacts are immutable once stored")
        super().save(*args, **kwargs)
