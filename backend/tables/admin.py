from django.contrib import admin
from .models import ServiceCall, Table


class ServiceCallInline(admin.TabularInline):
    model = ServiceCall
    extra = 0
    fields = ("message", "created_at", "resolved", "resolved_at")
    readonly_fields = ("created_at", "resolved_at")


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("number", "capacity", "status", "location", "current_order")
    list_filter = ("status", "location")
    readonly_fields = ("qr_code", "current_order")
    inlines = [ServiceCallInline]
