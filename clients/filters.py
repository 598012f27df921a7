from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from django_filters import rest_framework as df_filters

from clients.models import Client
from common.enums import ActiveStatus, ClientMembershipState, MembershipStatus
from memberships.models import Membership


class ClientFilter(df_filters.FilterSet):
    status = df_filters.ChoiceFilter(choices=ActiveStatus.choices)
    membership_status = df_filters.ChoiceFilter(
        choices=ClientMembershipState.choices, method='filter_membership_status',
    )
    pathology = df_filters.NumberFilter(field_name='pathologies')

    class Meta:
        model = Client
        fields = ['status', 'gender', 'membership_status', 'pathology']

    def filter_membership_status(self, queryset, name, value):
        today = timezone.localdate()
        if value == ClientMembershipState.NO_MEMBERSHIP:
            return queryset.exclude(memberships__status=MembershipStatus.ACTIVE)
        if value == ClientMembershipState.EXPIRED:
            ids = (
                Membership.objects.with_effective_end_date()
                .filter(status=MembershipStatus.ACTIVE, effective_end__lt=today)
                .values('client_id')
            )
        elif value == ClientMembershipState.EXPIRING_SOON:
            ids = Membership.objects.expiring_soon(as_of=today).values('client_id')
        else:
            horizon = today + timedelta(days=settings.MEMBERSHIP_EXPIRING_SOON_DAYS)
            ids = (
                Membership.objects.effectively_active(as_of=today)
                .filter(effective_end__gt=horizon)
                .values('client_id')
            )
        return queryset.filter(id__in=ids)
