from django.contrib import admin

from payments.models import Payment, PaymentMethod


class PaymentMethodInline(admin.TabularInline):
    model = PaymentMethod
    extra = 0
    fields = ('position', 'method', 'amount', 'currency', 'exchange_rate', 'reference')
    readonly_fields = fields
    can_delete = False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'payment_date', 'amount', 'currency', 'payment_method', 'content_type', 'object_id')
    list_filter = ('currency', 'payment_method', 'payment_date')
    search_fields = ('reference', 'notes')
    readonly_fields = ('content_type', 'object_id', 'amount', 'currency', 'exchange_rate')
    inlines = [PaymentMethodInline]
