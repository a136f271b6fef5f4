from django.urls import path

from .views import (
    DashboardStatsView,
    RegistrationActionsView,
    RegistrationListView,
    RegistrationLookupView,
    RegistrationStatusUpdateView,
    SlotAvailabilityView,
    TournamentDetailView,
    TournamentListView,
    TournamentRegistrationCreateView,
    TournamentStatsView,
)

urlpatterns = [
    # Tournament endpoints
    path("", TournamentListView.as_view(), name="tournament-list"),
    path("stats/", DashboardStatsView.as_view(), name="dashboard-stats"),
    path("<int:pk>/", TournamentDetailView.as_view(), name="tournament-detail"),
    path("<int:tournament_id>/slots/", SlotAvailabilityView.as_view(), name="tournament-slots"),
    path("<int:tournament_id>/stats/", TournamentStatsView.as_view(), name="tournament-stats"),
    # Registration
    path("<int:tournament_id>/register/", TournamentRegistrationCreateView.as_view(), name="tournament-register"),
    path("registrations/", RegistrationListView.as_view(), name="registration-list"),
    path("registrations/lookup/", RegistrationLookupView.as_view(), name="registration-lookup"),
    path(
        "registrations/<int:registration_id>/status/",
        RegistrationStatusUpdateView.as_view(),
        name="registration-status",
    ),
    path(
        "registrations/<int:registration_id>/actions/",
        RegistrationActionsView.as_view(),
        name="registration-actions",
    ),
]
