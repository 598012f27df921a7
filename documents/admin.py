from django.contrib import admin

from documents.models import DocumentTemplate, TemplateKey


@admin.register(DocumentTemplate)
class DocumentTemplateAdmin(admin.ModelAdmin):
    list_display = ('name', 'status', 'created_by', 'created_at')
    list_filter = ('status',)
    search_fields = ('name', 'description')


@admin.register(TemplateKey)
class TemplateKeyAdmin(admin.ModelAdmin):
    list_display = ('name', 'query_method')
    search_fields = ('name', 'query_method')
