# tests/test_clients.py
from datetime import date, timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone

from clients.models import Client, ClientPathology
from common.enums import AttachmentType, ClientMembershipState
from tests.factories import (
    ClientFactory,
    MembershipFactory,
    MembershipRenewalFactory,
    PathologyFactory,
    PlanFactory,
)


def pdf_upload(name="contract.pdf"):
    return SimpleUploadedFile(name, b"%PDF-1.4 test", content_type="application/pdf")


class TestClientModel:
    def test_age_on_date(self):
        client = ClientFactory(birth_date=date(1990, 6, 15))
        assert client.age(date(2020, 6, 14)) == 29
        assert client.age(date(2020, 6, 15)) == 30
        assert ClientFactory(birth_date=None).age() is None

    def test_membership_status_uses_effective_end_date(self):
        today = timezone.localdate()
        plan = PlanFactory(renewal_period_days=30)
        client = ClientFactory()
        assert client.membership_status(today) == ClientMembershipState.NO_MEMBERSHIP

        membership = MembershipFactory(client=client, plan=plan, start_date=today - timedelta(days=31),
                                       end_date=today - timedelta(days=1))
        assert client.membership_status(today) == ClientMembershipState.EXPIRED

        MembershipRenewalFactory(membership=membership, new_end_date=today + timedelta(days=2))
        assert client.membership_status(today) == ClientMembershipState.EXPIRING_SOON

        MembershipRenewalFactory(membership=membership, previous_end_date=today + timedelta(days=2),
                                 new_end_date=today + timedelta(days=32))
        assert client.membership_status(today) == ClientMembershipState.ACTIVE
        assert client.has_active_membership(today) is True


class TestClientEndpoints:
    def test_create_client_with_pathologies(self, api_client):
        asthma = PathologyFactory(name="Asthma")
        response = api_client.post(reverse('clients-list'), {
            "name": "Ana Perez",
            "email": "ana@example.com",
            "phone": "555-1234",
            "identification_number": "V12345678",
            "pathologies": [{"pathology": asthma.id, "notes": "mild"}],
        }, format='json')
        assert response.status_code == 201
        client = Client.objects.get(email="ana@example.com")
        assert ClientPathology.objects.get(client=client).notes == "mild"
        assert response.data["membership_status"] == ClientMembershipState.NO_MEMBERSHIP

    def test_update_replaces_pathologies(self, api_client):
        client = ClientFactory()
        old, new = PathologyFactory(), PathologyFactory()
        ClientPathology.objects.create(client=client, pathology=old)
        response = api_client.patch(reverse('clients-detail', args=[client.id]), {
            "pathologies": [{"pathology": new.id}],
        }, format='json')
        assert response.status_code == 200
        assert list(client.pathologies.all()) == [new]

    def test_duplicate_email_is_rejected(self, api_client):
        ClientFactory(email="taken@example.com")
        response = api_client.post(reverse('clients-list'), {
            "name": "Other", "email": "taken@example.com",
        }, format='json')
        assert response.status_code == 400
        assert "email" in response.data["errors"]

    def test_quick_search(self, api_client):
        ClientFactory(name="Maria Lopez", identification_number="V999")
        ClientFactory(name="Jose Diaz")
        response = api_client.get(reverse('clients-search'), {"q": "V999"})
        assert response.status_code == 200
        assert [c["name"] for c in response.data] == ["Maria Lopez"]

        empty = api_client.get(reverse('clients-search'), {"q": " "})
        assert empty.data == []

    def test_filter_by_membership_status(self, api_client):
        today = timezone.localdate()
        expired = MembershipFactory(start_date=today - timedelta(days=40), end_date=today - timedelta(days=10))
        active = MembershipFactory(start_date=today, end_date=today + timedelta(days=30))
        response = api_client.get(reverse('clients-list'), {"membership_status": "expired"})
        assert [c["id"] for c in response.data["results"]] == [expired.client_id]
        response = api_client.get(reverse('clients-list'), {"membership_status": "active"})
        assert [c["id"] for c in response.data["results"]] == [active.client_id]

    def test_client_memberships_action(self, api_client):
        membership = MembershipFactory()
        response = api_client.get(reverse('clients-memberships', args=[membership.client_id]))
        assert response.status_code == 200
        assert response.data[0]["id"] == membership.id
        assert response.data[0]["effective_end_date"] == membership.end_date.isoformat()

    def test_requires_authentication(self, client):
        response = client.get(reverse('clients-list'))
        assert response.status_code == 401


class TestPathologies:
    def test_cannot_delete_pathology_in_use(self, api_client):
        pathology = PathologyFactory()
        ClientPathology.objects.create(client=ClientFactory(), pathology=pathology)
        response = api_client.delete(reverse('pathologies-detail', args=[pathology.id]))
        assert response.status_code == 400
        assert "pathology" in response.data["errors"]

    def test_delete_unused_pathology(self, api_client):
        pathology = PathologyFactory()
        response = api_client.delete(reverse('pathologies-detail', args=[pathology.id]))
        assert response.status_code == 204

    def test_clients_count(self, api_client):
        pathology = PathologyFactory()
        ClientPathology.objects.create(client=ClientFactory(), pathology=pathology)
        response = api_client.get(reverse('pathologies-detail', args=[pathology.id]))
        assert response.data["clients_count"] == 1


class TestClientDocuments:
    def test_upload_and_list_documents(self, api_client):
        client = ClientFactory()
        response = api_client.post(reverse('clients-documents', args=[client.id]),
                                   {"document": pdf_upload(), "name": "Contract"}, format='multipart')
        assert response.status_code == 201
        assert response.data["type"] == AttachmentType.DOCUMENT
        assert response.data["size_formatted"] == "13\xa0bytes"

        listing = api_client.get(reverse('clients-documents', args=[client.id]))
        assert [d["name"] for d in listing.data] == ["Contract"]

    def test_document_limit(self, api_client, settings):
        settings.CLIENT_DOCUMENT_LIMIT = 2
        client = ClientFactory()
        url = reverse('clients-documents', args=[client.id])
        for i in range(2):
            assert api_client.post(url, {"document": pdf_upload(f"d{i}.pdf")}, format='multipart').status_code == 201
        response = api_client.post(url, {"document": pdf_upload("d3.pdf")}, format='multipart')
        assert response.status_code == 400
        assert "document" in response.data["errors"]
        assert client.documents().count() == 2

    def test_rejects_unsupported_extension(self, api_client):
        client = ClientFactory()
        upload = SimpleUploadedFile("script.exe", b"MZ", content_type="application/octet-stream")
        response = api_client.post(reverse('clients-documents', args=[client.id]),
                                   {"document": upload}, format='multipart')
        assert response.status_code == 400

    def test_rejects_oversized_upload(self, api_client, settings):
        settings.ATTACHMENT_MAX_UPLOAD_SIZE = 10
        client = ClientFactory()
        response = api_client.post(reverse('clients-documents', args=[client.id]),
                                   {"document": pdf_upload()}, format='multipart')
        assert response.status_code == 400
        assert response.data["errors"]["document"] == ["File exceeds the maximum size of 10\xa0bytes"]
        assert client.documents().count() == 0

    def test_profile_photo_is_replaced(self, api_client):
        client = ClientFactory()
        url = reverse('clients-profile-photo', args=[client.id])
        for name in ("a.png", "b.png"):
            photo = SimpleUploadedFile(name, b"\x89PNG", content_type="image/png")
            assert api_client.post(url, {"photo": photo}, format='multipart').status_code == 201
        assert client.attachments.filter(type=AttachmentType.PROFILE_PHOTO).count() == 1
        assert client.profile_photo().name == "b.png"

        assert api_client.delete(url).status_code == 204
        assert client.profile_photo() is None
