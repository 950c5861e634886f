from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'bills'

# Router for ViewSets
router = DefaultRouter()
router.register(r'transactions', views.TransactionViewSet, basename='transaction')

urlpatterns = [
    # Draft editing (stored in the session)
    # GET    /api/bills/draft/                         - Current draft with live split
    # PATCH  /api/bills/draft/                         - Update title/description
    # DELETE /api/bills/draft/                         - Start a new draft
    # POST   /api/bills/draft/items/                   - Add item
    # DELETE /api/bills/draft/items/{id}/              - Remove item
    # POST   /api/bills/draft/participants/            - Add participant
    # DELETE /api/bills/draft/participants/{id}/       - Remove participant
    # POST   /api/bills/draft/assignments/toggle/      - Toggle item assignment
    # PATCH  /api/bills/draft/surcharges/              - Set tax/service/tip
    # POST   /api/bills/draft/scan/                    - Add items from a receipt image
    # POST   /api/bills/draft/save/                    - Save the draft
    path('draft/', views.draft_detail, name='draft'),
    path('draft/items/', views.draft_items, name='draft-items'),
    path('draft/items/<str:item_id>/', views.draft_item_detail, name='draft-item-detail'),
    path('draft/participants/', views.draft_participants, name='draft-participants'),
    path(
        'draft/participants/<str:participant_id>/',
        views.draft_participant_detail,
        name='draft-participant-detail'
    ),
    path('draft/assignments/toggle/', views.draft_toggle_assignment, name='draft-toggle-assignment'),
    path('draft/surcharges/', views.draft_surcharges, name='draft-surcharges'),
    path('draft/scan/', views.draft_scan_receipt, name='draft-scan'),
    path('draft/save/', views.draft_save, name='draft-save'),

    # Saved transactions
    # GET    /api/bills/transactions/                  - List user's transactions
    # GET    /api/bills/transactions/{id}/             - Transaction details
    path('', include(router.urls)),
]
