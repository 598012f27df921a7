from django.contrib import admin

from attachments.models import Attachment


@admin.register(Attachment)
class AttachmentAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'content_type', 'object_id', 'size', 'created_at')
    search_fields = ('name',)
    list_filter = ('type', 'content_type')
