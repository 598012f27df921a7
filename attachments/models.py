import os

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.template.defaultfilters import filesizeformat

from common.enums import AttachmentType
from core.models import BaseModel

DOCUMENT_TYPES = (
    AttachmentType.DOCUMENT,
    AttachmentType.GENERATED_DOCUMENT,
    AttachmentType.CUSTOM_DOCUMENT,
)


def attachment_upload_to(instance, filename):
    folder = {
        AttachmentType.PROFILE_PHOTO: 'profile_photos',
        AttachmentType.PAYMENT_EVIDENCE: 'payment_evidences',
    }.get(instance.type, 'documents')
    owner = f"{instance.content_type.model}_{instance.object_id}"
    return os.path.join(folder, owner, filename)


class Attachment(BaseModel):
    """A stored file attached to a client, payment or any other record."""

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField()
    content_object = GenericForeignKey('content_type', 'object_id')

    name = models.CharField(max_length=255)
    file = models.FileField(upload_to=attachment_upload_to, max_length=500)
    mime_type = models.CharField(max_length=100, blank=True)
    size = models.PositiveBigIntegerField(default=0)
    type = models.CharField(max_length=30, choices=AttachmentType.choices, default=AttachmentType.DOCUMENT)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='uploaded_attachments',
    )

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['content_type', 'object_id', 'type'], name='attachments_owner_type_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def size_formatted(self):
        return filesizeformat(self.size)

    @property
    def is_document(self):
        return self.type in DOCUMENT_TYPES
