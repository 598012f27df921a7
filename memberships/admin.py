from django.contrib import admin

from memberships.models import Membership, MembershipRenewal


class MembershipRenewalInline(admin.TabularInline):
    model = MembershipRenewal
    extra = 0
    fields = ('previous_end_date', 'new_end_date', 'plan', 'amount_paid', 'currency', 'processed_by', 'created_at')
    readonly_fields = fields
    can_delete = False


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    list_display = ('client', 'plan', 'start_date', 'end_date', 'status', 'amount_paid', 'currency')
    list_filter = ('status', 'plan', 'currency')
    search_fields = ('client__name', 'plan__name')
    readonly_fields = ('start_date', 'end_date', 'amount_paid', 'plan_price_paid', 'subscription_price_paid')
    inlines = [MembershipRenewalInline]

    def has_add_permission(self, request):
        return False
