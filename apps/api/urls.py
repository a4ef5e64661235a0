"""
API URLs for NACK POS.
"""
from django.urls import path, include
from apps.api.views import (
    auth_views, billing_views, establishment_views, events_views, inventory_views,
    orders_views, reports_views, sync_views, team_views
)

app_name = 'api'

# Authentication URLs
auth_urlpatterns = [
    path('login/', auth_views.login, name='login'),
    path('register/', auth_views.register, name='register'),
    path('refresh/', auth_views.refresh_token, name='refresh_token'),
    path('agent/', auth_views.agent_login, name='agent_login'),
    path('me/', auth_views.me, name='me'),
    path('logout/', auth_views.logout, name='logout'),
]

# Establishment settings URLs
settings_urlpatterns = [
    path('establishment/', establishment_views.establishment, name='establishment'),
    path('settings/reset/', establishment_views.reset_data, name='reset_data'),
]

# Billing URLs
billing_urlpatterns = [
    path('billing/', billing_views.billing_state, name='billing_state'),
    path('billing/payments/', billing_views.payments, name='payments'),
    path('billing/payments/<uuid:intent_id>/confirm/', billing_views.confirm_payment, name='confirm_payment'),
    path('billing/payments/<uuid:intent_id>/fail/', billing_views.fail_payment, name='fail_payment'),
]

# Inventory URLs
inventory_urlpatterns = [
    path('products/', inventory_views.ProductListCreateView.as_view(), name='product_list'),
    path('products/low-stock/', inventory_views.low_stock, name='low_stock'),
    path('products/<uuid:pk>/', inventory_views.ProductDetailView.as_view(), name='product_detail'),
    path('products/<uuid:product_id>/restock/', inventory_views.restock, name='restock'),
    path('losses/', inventory_views.losses, name='losses'),
]

# Orders URLs
orders_urlpatterns = [
    path('orders/', orders_views.OrderListView.as_view(), name='order_list'),
    path('orders/create/', orders_views.create_order, name='create_order'),
    path('orders/open/', orders_views.open_orders, name='open_orders'),
    path('orders/<uuid:order_id>/', orders_views.order_detail, name='order_detail'),
    path('orders/<uuid:order_id>/status/', orders_views.update_order_status, name='update_order_status'),
    path('orders/<uuid:order_id>/pay/', orders_views.pay_order, name='pay_order'),
    path('sales/', orders_views.counter_sale, name='counter_sale'),
    path('sales/today/', orders_views.daily_total, name='daily_total'),
    path('notifications/', orders_views.notifications, name='notifications'),
]

# Events URLs
events_urlpatterns = [
    path('events/', events_views.EventListCreateView.as_view(), name='event_list'),
    path('events/<uuid:pk>/', events_views.EventDetailView.as_view(), name='event_detail'),
    path('events/<uuid:event_id>/sell/', events_views.sell_ticket, name='sell_ticket'),
    path('events/<uuid:event_id>/participants/', events_views.participants, name='participants'),
    path('tickets/<uuid:ticket_id>/pdf/', events_views.ticket_pdf, name='ticket_pdf'),
    path('tickets/<uuid:ticket_id>/confirm/', events_views.confirm_reservation, name='confirm_reservation'),
    path('public/events/<uuid:event_id>/', events_views.public_event, name='public_event'),
    path('public/events/<uuid:event_id>/reserve/', events_views.public_reserve, name='public_reserve'),
    path('checkin/event/', events_views.agent_event, name='agent_event'),
    path('checkin/scan/', events_views.check_in, name='check_in'),
    path('checkin/history/', events_views.scan_history, name='scan_history'),
]

# Team URLs
team_urlpatterns = [
    path('team/', team_views.members, name='team_members'),
    path('team/<uuid:member_id>/', team_views.remove_member, name='remove_member'),
    path('team/<uuid:member_id>/toggle/', team_views.toggle_member, name='toggle_member'),
    path('team/<uuid:member_id>/assign/', team_views.assign_event, name='assign_event'),
]

# Reports URLs
reports_urlpatterns = [
    path('reports/dashboard/', reports_views.dashboard, name='report_dashboard'),
    path('reports/sales/', reports_views.recent_sales, name='report_sales'),
    path('reports/top-products/', reports_views.top_products, name='report_top_products'),
    path('reports/export.csv', reports_views.export_csv, name='report_csv'),
    path('reports/export.pdf', reports_views.export_pdf, name='report_pdf'),
]

# Offline sync URLs
sync_urlpatterns = [
    path('sync/', sync_views.queue_status, name='sync_status'),
    path('sync/upload/', sync_views.upload, name='sync_upload'),
    path('sync/flush/', sync_views.flush, name='sync_flush'),
    path('sync/failed/', sync_views.discard_failed, name='sync_discard_failed'),
]

# Main URL patterns
urlpatterns = [
    path('auth/', include(auth_urlpatterns)),
    path('', include(settings_urlpatterns)),
    path('', include(billing_urlpatterns)),
    path('', include(inventory_urlpatterns)),
    path('', include(orders_urlpatterns)),
    path('', include(events_urlpatterns)),
    path('', include(team_urlpatterns)),
    path('', include(reports_urlpatterns)),
    path('', include(sync_urlpatterns)),
]
