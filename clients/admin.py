from django.contrib import admin

from clients.models import Client, ClientPathology, Pathology


class ClientPathologyInline(admin.TabularInline):
    model = ClientPathology
    extra = 1


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'phone', 'identification_number', 'status')
    search_fields = ('name', 'email', 'phone', 'identification_number')
    list_filter = ('status', 'gender')
    inlines = [ClientPathologyInline]


@admin.register(Pathology)
class PathologyAdmin(admin.ModelAdmin):
    list_display = ('name', 'description')
    search_fields = ('name',)
