import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from clients.models import Client, ClientPathology, Pathology

logger = logging.getLogger(__name__)

QUICK_SEARCH_LIMIT = 10


class ClientService:
    @staticmethod
    @transaction.atomic
    def create_client(data) -> Client:
        """Create a client from validated serializer data, including its pathologies."""
        data = dict(data)
        pathologies = data.pop('client_pathologies', [])
        client = Client.objects.create(**data)
        ClientService.sync_pathologies(client, pathologies)
        logger.info("Client created", extra={'client_id': client.id})
        return client

    @staticmethod
    @transaction.atomic
    def sync_pathologies(client: Client, items) -> Client:
        """Replace the client's pathologies with ``items``.

        Each item is ``{'pathology': Pathology, 'notes': str}``; rows for
        pathologies that are kept get their notes updated.
        """
        wanted = {}
        for item in items:
            pathology = item['pathology']
            if pathology.pk in wanted:
                raise ValidationError({'pathologies': f'Pathology "{pathology}" is listed twice'})
            wanted[pathology.pk] = item.get('notes') or ''

        ClientPathology.objects.filter(client=client).exclude(pathology_id__in=list(wanted)).delete()
        for pathology_id, notes in wanted.items():
            ClientPathology.objects.update_or_create(
                client=client, pathology_id=pathology_id, defaults={'notes': notes},
            )
        return client

    @staticmethod
    def delete_pathology(pathology: Pathology):
        in_use = pathology.clients.count()
        if in_use:
            raise ValidationError({
                'pathology': f'Cannot delete "{pathology.name}": it is assigned to {in_use} client(s)'
            })
        logger.info("Pathology deleted", extra={'pathology_id': pathology.id})
        pathology.delete()

    @staticmethod
    def quick_search(term, limit=QUICK_SEARCH_LIMIT):
        term = (term or '').strip()
        if not term:
            return Client.objects.none()
        return Client.objects.search(term).order_by('name')[:limit]
