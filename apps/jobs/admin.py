from django.contrib import admin
from .models import Job, Offer


class OfferInline(admin.TabularInline):
    model = Offer
    extra = 0
    readonly_fields = ('contractor', 'price', 'message', 'status', 'created_at')
    can_delete = False


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('title', 'created_by', 'location', 'category', 'status', 'date_posted')
    list_filter = ('status', 'category')
    search_fields = ('title', 'description', 'location', 'created_by__email')
    readonly_fields = ('status', 'assigned_contractor')
    inlines = [OfferInline]


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ('job', 'contractor', 'price', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('job__title', 'contractor__email')
    readonly_fields = ('status',)
