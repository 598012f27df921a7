from django.contrib import admin

from plans.models import Plan


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ('name', 'price', 'price_usd', 'renewal_period_days', 'status')
    search_fields = ('name',)
    list_filter = ('status',)
