from django.db.models.signals import post_delete
from django.dispatch import receiver

from attachments.models import Attachment


@receiver(post_delete, sender=Attachment)
def remove_stored_file(sender, instance, **kwargs):
    if instance.file:
        instance.file.delete(save=False)
