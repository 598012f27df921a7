from rest_framework import serializers

from attachments.models import DOCUMENT_TYPES, Attachment


class AttachmentSerializer(serializers.ModelSerializer):
    size_formatted = serializers.CharField(read_only=True)
    is_document = serializers.BooleanField(read_only=True)
    url = serializers.SerializerMethodField()
    owner_type = serializers.CharField(source='content_type.model', read_only=True)

    class Meta:
        model = Attachment
        fields = (
            'id', 'uuid', 'name', 'type', 'mime_type', 'size', 'size_formatted', 'url',
            'owner_type', 'object_id', 'is_document', 'uploaded_by', 'created_at',
        )
        read_only_fields = fields

    def get_url(self, obj):
        if not obj.file:
            return None
        request = self.context.get('request')
        url = obj.file.url
        return request.build_absolute_uri(url) if request else url


class DocumentUploadSerializer(serializers.Serializer):
    document = serializers.FileField()
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    type = serializers.ChoiceField(
        choices=list(DOCUMENT_TYPES), required=False,
    )


class PhotoUploadSerializer(serializers.Serializer):
    photo = serializers.FileField()


class EvidenceUploadSerializer(serializers.Serializer):
    evidence = serializers.FileField()
