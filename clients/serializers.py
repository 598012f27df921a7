from django.db import transaction
from rest_framework import serializers

from attachments.serializers import AttachmentSerializer
from clients.models import Client, ClientPathology, Pathology
from clients.services import ClientService


class PathologySerializer(serializers.ModelSerializer):
    clients_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Pathology
        fields = ('id', 'uuid', 'name', 'description', 'clients_count', 'created_at', 'updated_at')
        read_only_fields = ('uuid', 'created_at', 'updated_at')


class ClientPathologySerializer(serializers.ModelSerializer):
    pathology = serializers.PrimaryKeyRelatedField(queryset=Pathology.objects.all())
    pathology_name = serializers.CharField(source='pathology.name', read_only=True)

    class Meta:
        model = ClientPathology
        fields = ('pathology', 'pathology_name', 'notes')


class ActiveMembershipSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    plan = serializers.CharField(source='plan.name')
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    effective_end_date = serializers.DateField()
    status = serializers.CharField()


class ClientSerializer(serializers.ModelSerializer):
    pathologies = ClientPathologySerializer(source='client_pathologies', many=True, required=False)
    age = serializers.SerializerMethodField()
    membership_status = serializers.SerializerMethodField()
    active_membership = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = (
            'id', 'uuid', 'name', 'email', 'phone', 'address', 'identification_number',
            'birth_date', 'gender', 'status', 'notes', 'age', 'membership_status',
            'active_membership', 'pathologies', 'created_at', 'updated_at',
        )
        read_only_fields = ('uuid', 'created_at', 'updated_at')

    def get_age(self, obj):
        return obj.age()

    def get_membership_status(self, obj):
        return obj.membership_status()

    def get_active_membership(self, obj):
        membership = obj.active_membership()
        if membership is None:
            return None
        return ActiveMembershipSummarySerializer(membership).data

    def create(self, validated_data):
        return ClientService.create_client(validated_data)

    @transaction.atomic
    def update(self, instance, validated_data):
        pathologies = validated_data.pop('client_pathologies', None)
        instance = super().update(instance, validated_data)
        if pathologies is not None:
            ClientService.sync_pathologies(instance, pathologies)
        return instance


class ClientListSerializer(serializers.ModelSerializer):
    membership_status = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = ('id', 'name', 'email', 'phone', 'identification_number', 'status', 'membership_status')

    def get_membership_status(self, obj):
        return obj.membership_status()


class ClientDetailSerializer(ClientSerializer):
    documents = serializers.SerializerMethodField()
    profile_photo = serializers.SerializerMethodField()

    class Meta(ClientSerializer.Meta):
        fields = ClientSerializer.Meta.fields + ('documents', 'profile_photo')

    def get_documents(self, obj):
        return AttachmentSerializer(obj.documents(), many=True, context=self.context).data

    def get_profile_photo(self, obj):
        photo = obj.profile_photo()
        return AttachmentSerializer(photo, context=self.context).data if photo else None
