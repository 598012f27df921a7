import re

from rest_framework import serializers

from clients.models import Client
from documents.models import DocumentTemplate, TemplateKey

PLACEHOLDER = re.compile(r'\[\[([A-Za-z0-9_]+)\]\]')


class TemplateKeySerializer(serializers.ModelSerializer):
    placeholder = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)

    class Meta:
        model = TemplateKey
        fields = ('id', 'name', 'query_method', 'placeholder', 'description')


class DocumentTemplateSerializer(serializers.ModelSerializer):
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = DocumentTemplate
        fields = (
            'id', 'uuid', 'name', 'description', 'content', 'variables', 'status',
            'created_by', 'created_by_name', 'created_at', 'updated_at',
        )
        read_only_fields = ('uuid', 'variables', 'created_by', 'created_at', 'updated_at')

    def get_created_by_name(self, obj):
        return obj.created_by.display_name if obj.created_by else None

    def validate(self, attrs):
        content = attrs.get('content')
        if content is not None:
            # Keep the declared variables in sync with the placeholders used.
            attrs['variables'] = list(dict.fromkeys(PLACEHOLDER.findall(content)))
        return attrs


class GenerateDocumentSerializer(serializers.Serializer):
    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all())
