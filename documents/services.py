import html
import logging
import re
from io import BytesIO

from django.conf import settings
from django.utils import timezone
from django.utils.html import strip_tags
from django.utils.text import slugify
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from attachments.services import AttachmentService
from documents.models import TemplateKey

logger = logging.getLogger(__name__)

DATE_FORMAT = '%d/%m/%Y'
NO_PATHOLOGIES = 'No pathologies registered'

BLOCK_BREAKS = re.compile(r'<\s*(br\s*/?|/p|/div|/h[1-6]|/li)\s*>', re.IGNORECASE)


def format_date(value):
    return value.strftime(DATE_FORMAT) if value else ''


class TemplateRenderer:
    """Substitute ``[[KEY]]`` placeholders with values taken from a client."""

    def __init__(self, client, now=None):
        self.client = client
        self.now = timezone.localtime(now) if now else timezone.localtime()
        self._membership = None
        self._membership_loaded = False

    @property
    def membership(self):
        if not self._membership_loaded:
            self._membership = self.client.active_membership()
            self._membership_loaded = True
        return self._membership

    def pathologies_list(self):
        rows = self.client.client_pathologies.select_related('pathology').order_by('pathology__name')
        items = [
            f"{row.pathology.name} ({row.notes})" if row.notes else row.pathology.name
            for row in rows
        ]
        return ', '.join(items) if items else NO_PATHOLOGIES

    def resolve(self, query_method):
        client = self.client
        membership = self.membership
        resolvers = {
            'name': lambda: client.name,
            'email': lambda: client.email or '',
            'phone': lambda: client.phone,
            'address': lambda: client.address,
            'birth_date': lambda: format_date(client.birth_date),
            'gender': lambda: client.get_gender_display() if client.gender else '',
            'age': lambda: client.age(self.now.date()),
            'notes': lambda: client.notes,
            'client_identification': lambda: client.identification_number,
            'membership_status': lambda: client.membership_status(self.now.date()).label,
            'active_membership_end_date': lambda: (
                format_date(membership.effective_end_date) if membership else 'No active membership'
            ),
            'active_membership_plan_name': lambda: membership.plan.name if membership else 'No active plan',
            'active_membership_plan_price': lambda: f"{membership.plan.price:.2f}" if membership else 'N/A',
            'active_membership_start_date': lambda: format_date(membership.start_date) if membership else 'N/A',
            'pathologies_list': self.pathologies_list,
            'pathologies_count': lambda: client.pathologies.count(),
            'gym_name': lambda: settings.GYM_NAME,
            'gym_address': lambda: settings.GYM_ADDRESS,
            'gym_phone': lambda: settings.GYM_PHONE,
            'gym_email': lambda: settings.GYM_EMAIL,
            'current_date': lambda: self.now.strftime(DATE_FORMAT),
            'current_time': lambda: self.now.strftime('%H:%M:%S'),
            'current_datetime': lambda: self.now.strftime(f'{DATE_FORMAT} %H:%M:%S'),
        }
        resolver = resolvers.get(query_method)
        if resolver is None:
            return ''
        value = resolver()
        return '' if value is None else str(value)

    def render(self, content):
        for key in TemplateKey.objects.all():
            if key.placeholder in content:
                content = content.replace(key.placeholder, self.resolve(key.query_method))
        return content


def html_to_paragraphs(content):
    text = BLOCK_BREAKS.sub('\n', content)
    text = html.unescape(strip_tags(text))
    return [line.strip() for line in text.splitlines()]


def render_pdf(title, paragraphs) -> bytes:
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    margin = 50
    line_height = 15
    max_width = width - 2 * margin

    pdf.setTitle(title)
    y = height - margin
    pdf.setFont('Helvetica', 11)
    for paragraph in paragraphs:
        lines = simpleSplit(paragraph, 'Helvetica', 11, max_width) if paragraph else ['']
        for line in lines:
            if y < margin:
                pdf.showPage()
                pdf.setFont('Helvetica', 11)
                y = height - margin
            pdf.drawString(margin, y, line)
            y -= line_height
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


class DocumentGenerator:
    @staticmethod
    def generate(template, client, generated_by=None):
        """Render ``template`` for ``client`` and store the PDF as a generated document."""
        content = TemplateRenderer(client).render(template.content)
        pdf = render_pdf(template.name, html_to_paragraphs(content))
        stamp = timezone.localtime().strftime('%Y%m%d%H%M%S')
        filename = f"{slugify(template.name) or 'document'}_{client.id}_{stamp}.pdf"
        attachment = AttachmentService.store_generated(
            client, pdf, filename, name=f"{template.name} - {client.name}", uploaded_by=generated_by,
        )
        logger.info(
            "Document generated",
            extra={'template_id': template.id, 'client_id': client.id, 'attachment_id': attachment.id},
        )
        return attachment
