from django.contrib import admin
from .models import ContractorProfile, CompletedJob


@admin.register(ContractorProfile)
class ContractorProfileAdmin(admin.ModelAdmin):
    list_display = ('display_name', 'user', 'contact_email', 'updated_at')
    search_fields = ('display_name', 'user__email')


@admin.register(CompletedJob)
class CompletedJobAdmin(admin.ModelAdmin):
    list_display = ('title', 'contractor', 'category', 'completed_date')
    list_filter = ('category',)
    search_fields = ('title', 'client_name', 'contractor__email')
