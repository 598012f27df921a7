# tests/test_documents.py
from datetime import date, datetime, timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from attachments.models import Attachment
from clients.models import ClientPathology
from common.enums import AttachmentType
from documents.models import DocumentTemplate, TemplateKey
from documents.services import TemplateRenderer, html_to_paragraphs
from tests.factories import (
    ClientFactory,
    DocumentTemplateFactory,
    MembershipFactory,
    MembershipRenewalFactory,
    PathologyFactory,
)


class TestTemplateRenderer:
    def test_default_keys_are_seeded(self):
        assert TemplateKey.objects.filter(name="CLIENT_NAME", query_method="name").exists()
        assert TemplateKey.objects.get(name="GYM_NAME").placeholder == "[[GYM_NAME]]"

    def test_renders_client_fields(self):
        client = ClientFactory(name="Luis Mora", birth_date=date(1990, 1, 31), identification_number="V42")
        now = timezone.make_aware(datetime(2025, 3, 1, 9, 30, 0))
        content = "[[CLIENT_NAME]] ([[CLIENT_ID_NUMBER]]) born [[CLIENT_BIRTH_DATE]], [[CLIENT_AGE]] years, [[CURRENT_DATE]] at [[GYM_NAME]]"
        rendered = TemplateRenderer(client, now=now).render(content)
        assert rendered == "Luis Mora (V42) born 31/01/1990, 35 years, 01/03/2025 at Test Gym"

    def test_unknown_placeholders_are_left_untouched(self):
        rendered = TemplateRenderer(ClientFactory()).render("Hello [[NOT_A_KEY]]")
        assert rendered == "Hello [[NOT_A_KEY]]"

    def test_membership_end_date_uses_latest_renewal(self):
        today = timezone.localdate()
        membership = MembershipFactory(start_date=today, end_date=today + timedelta(days=30))
        MembershipRenewalFactory(membership=membership, new_end_date=today + timedelta(days=60))
        rendered = TemplateRenderer(membership.client).render("[[MEMBERSHIP_END_DATE]] [[MEMBERSHIP_PLAN]]")
        assert rendered == f"{(today + timedelta(days=60)).strftime('%d/%m/%Y')} {membership.plan.name}"

    def test_no_membership_and_pathologies(self):
        client = ClientFactory()
        renderer = TemplateRenderer(client)
        assert renderer.render("[[MEMBERSHIP_END_DATE]]") == "No active membership"
        assert renderer.render("[[PATHOLOGIES]]") == "No pathologies registered"

        ClientPathology.objects.create(client=client, pathology=PathologyFactory(name="Asthma"), notes="mild")
        ClientPathology.objects.create(client=client, pathology=PathologyFactory(name="Diabetes"))
        assert renderer.render("[[PATHOLOGIES]] / [[PATHOLOGIES_COUNT]]") == "Asthma (mild), Diabetes / 2"

    def test_html_to_paragraphs(self):
        assert html_to_paragraphs("<p>One &amp; two</p><p>Three<br>Four</p>") == ["One & two", "Three", "Four"]


class TestTemplateEndpoints:
    def test_admin_creates_template_and_variables_are_extracted(self, admin_client):
        response = admin_client.post(reverse('document-templates-list'), {
            "name": "Waiver",
            "content": "<p>I, [[CLIENT_NAME]], accept. [[CURRENT_DATE]] [[CLIENT_NAME]]</p>",
        }, format='json')
        assert response.status_code == 201
        template = DocumentTemplate.objects.get(name="Waiver")
        assert template.variables == ["CLIENT_NAME", "CURRENT_DATE"]
        assert template.created_by is not None

    def test_staff_cannot_create_templates(self, api_client):
        response = api_client.post(reverse('document-templates-list'), {"name": "x", "content": "y"}, format='json')
        assert response.status_code == 403

    def test_keys_listing(self, api_client):
        response = api_client.get(reverse('document-templates-keys'))
        assert response.status_code == 200
        keys = {row["name"]: row for row in response.data}
        assert keys["CLIENT_NAME"]["placeholder"] == "[[CLIENT_NAME]]"
        assert keys["CLIENT_NAME"]["description"] == "Client full name"

    def test_generate_document_stores_pdf(self, api_client):
        client = ClientFactory(name="Rosa Vega")
        template = DocumentTemplateFactory(name="Welcome letter", content="<p>Welcome [[CLIENT_NAME]]</p>")
        response = api_client.post(reverse('document-templates-generate', args=[template.id]),
                                   {"client": client.id}, format='json')
        assert response.status_code == 201
        attachment = Attachment.objects.get(pk=response.data["id"])
        assert attachment.type == AttachmentType.GENERATED_DOCUMENT
        assert attachment.mime_type == "application/pdf"
        assert attachment.name == "Welcome letter - Rosa Vega"
        with attachment.file.open('rb') as fh:
            assert fh.read(5) == b"%PDF-"
        assert client.documents().count() == 1

    def test_generate_requires_existing_client(self, api_client):
        template = DocumentTemplateFactory()
        response = api_client.post(reverse('document-templates-generate', args=[template.id]),
                                   {"client": 999999}, format='json')
        assert response.status_code == 400
