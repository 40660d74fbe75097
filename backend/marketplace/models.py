from django.db import models
from django.conf import settings

from listings.models import DeliveryRequest as DomainRequest, Trip as DomainTrip
from matching.state_machines.match_state import Match as DomainMatch, MatchStatus
from routing.route_matching import SavedRoute as DomainSavedRoute


class Trip(models.Model):
    """
    A traveler's posted journey.
    Plane trips have a departure date + spare kg, boat trips an ETA window + tonnage.
    """
    class Type(models.TextChoices):
        PLANE = "plane", "Plane"
        BOAT = "boat", "Boat"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='trips')
    type = models.CharField(max_length=10, choices=Type.choices)
    from_location = models.CharField(max_length=255)
    to_location = models.CharField(max_length=255)

    departure_date = models.DateField(blank=True, null=True)
    eta_window_start = models.DateField(blank=True, null=True)
    eta_window_end = models.DateField(blank=True, null=True)

    # Plane capacity
    spare_kg = models.FloatField(blank=True, null=True)
    spare_volume_liters = models.FloatField(blank=True, null=True)
    # Structure: {"length": 55, "width": 40, "height": 23} (cm)
    max_dimensions = models.JSONField(blank=True, null=True)

    # Boat capacity
    max_tonnage = models.FloatField(blank=True, null=True)
    spare_cubic_meters = models.FloatField(blank=True, null=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Trip #{self.id} {self.from_location} -> {self.to_location} ({self.type})"

    def to_domain(self):
        return DomainTrip(
            id=str(self.pk),
            user_id=str(self.user_id),
            type=self.type,
            from_location=self.from_location,
            to_location=self.to_location,
            departure_date=self.departure_date,
            eta_window_start=self.eta_window_start,
            eta_window_end=self.eta_window_end,
            spare_kg=self.spare_kg,
            spare_volume_liters=self.spare_volume_liters,
            max_dimensions=self.max_dimensions,
            max_tonnage=self.max_tonnage,
            spare_cubic_meters=self.spare_cubic_meters,
            status=self.status,
            created_at=self.created_at,
        )


class DeliveryRequest(models.Model):
    """
    An item a requester needs carried.
    """
    class PreferredMethod(models.TextChoices):
        PLANE = "plane", "Plane"
        BOAT = "boat", "Boat"
        ANY = "any", "Any"

    class Status(models.TextChoices):
        OPEN = "open", "Open"
        MATCHED = "matched", "Matched"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='delivery_requests')
    title = models.CharField(max_length=255)
    from_location = models.CharField(max_length=255)
    to_location = models.CharField(max_length=255)
    # ISO2 codes, used for customs + country restrictions
    origin_country = models.CharField(max_length=2, blank=True)
    destination_country = models.CharField(max_length=2, blank=True)

    deadline_earliest = models.DateField(blank=True, null=True)
    deadline_latest = models.DateField()

    weight_kg = models.FloatField()
    # Structure: {"length": 50, "width": 35, "height": 20} (cm)
    dimensions = models.JSONField(default=dict)
    value_usd = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    max_reward = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    preferred_method = models.CharField(max_length=10, choices=PreferredMethod.choices, default=PreferredMethod.ANY)
    category = models.CharField(max_length=50, blank=True, null=True)
    # Lithium batteries, flammables, ... (never flies)
    restricted_items = models.BooleanField(default=False)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Request #{self.id} {self.title}"

    def to_domain(self):
        return DomainRequest(
            id=str(self.pk),
            user_id=str(self.user_id),
            title=self.title,
            from_location=self.from_location,
            to_location=self.to_location,
            deadline_earliest=self.deadline_earliest,
            deadline_latest=self.deadline_latest,
            weight_kg=self.weight_kg,
            dimensions=self.dimensions or None,
            value_usd=float(self.value_usd or 0),
            max_reward=float(self.max_reward or 0),
            preferred_method=self.preferred_method,
            category=self.category,
            restricted_items=self.restricted_items,
            origin_country=self.origin_country,
            destination_country=self.destination_country,
            status=self.status,
            created_at=self.created_at,
        )


class Match(models.Model):
    """
    A trip/request pairing.
    Tracks lifecycle: pending -> chatting -> escrow_paid -> delivered -> completed
    (or cancelled / disputed). Transitions go through matching.state_machines.
    """
    class Status(models.TextChoices):
        PENDING = MatchStatus.PENDING.value, "Pending"
        CHATTING = MatchStatus.CHATTING.value, "Chatting"
        ESCROW_PAID = MatchStatus.ESCROW_PAID.value, "Escrow Paid"
        DELIVERED = MatchStatus.DELIVERED.value, "Delivered"
        COMPLETED = MatchStatus.COMPLETED.value, "Completed"
        CANCELLED = MatchStatus.CANCELLED.value, "Cancelled"
        DISPUTED = MatchStatus.DISPUTED.value, "Disputed"

    trip = models.ForeignKey(Trip, on_delete=models.CASCADE, related_name='matches')
    request = models.ForeignKey(DeliveryRequest, on_delete=models.CASCADE, related_name='matches')
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    reward_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    match_score = models.PositiveSmallIntegerField(default=0)

    # Paynow poll URL once the escrow payment was initiated
    escrow_poll_url = models.URLField(max_length=500, blank=True, null=True)
    escrow_reference = models.CharField(max_length=255, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('trip', 'request')

    def __str__(self):
        return f"Match #{self.id} - {self.status}"

    def to_domain(self):
        delivery = getattr(self, 'delivery', None)
        return DomainMatch(
            id=str(self.pk),
            trip_id=str(self.trip_id),
            request_id=str(self.request_id),
            status=self.status,
            reward_amount=float(self.reward_amount or 0),
            escrow_reference=self.escrow_reference,
            delivered_at=delivery.delivered_at if delivery else None,
            confirmed_at=delivery.confirmed_at if delivery else None,
            dispute_opened_at=delivery.dispute_opened_at if delivery else None,
        )

    def apply_domain(self, domain_match):
        """Copy state back from a transitioned domain match."""
        self.status = domain_match.status.value
        self.escrow_reference = domain_match.escrow_reference


class Delivery(models.Model):
    """
    Hand-over record for a match. Escrow auto-releases 24h after delivered_at
    unless confirmed or disputed.
    """
    match = models.OneToOneField(Match, on_delete=models.CASCADE, related_name='delivery')
    delivered_at = models.DateTimeField(blank=True, null=True)
    confirmed_at = models.DateTimeField(blank=True, null=True)
    dispute_opened_at = models.DateTimeField(blank=True, null=True)
    auto_release_at = models.DateTimeField(blank=True, null=True)
    proof_photo_url = models.URLField(blank=True, null=True)

    def __str__(self):
        return f"Delivery for match #{self.match_id}"


class SavedRoute(models.Model):
    """
    A traveler's recurring multi-stop route. New requests are matched against
    its segments and the traveler is notified.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='saved_routes')
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=10, choices=Trip.Type.choices)
    # Structure: [{"location": "Brisbane", "order": 0, "lat": -27.47, "lng": 153.02}, ...]
    destinations = models.JSONField(default=list)
    is_active = models.BooleanField(default=True)
    # Structure: {"enabled": true, "min_reward": 50, "max_weight": 10, "categories": ["electronics"]}
    notification_preferences = models.JSONField(default=dict)
    next_occurrence_date = models.DateField(blank=True, null=True)
    flexibility_days = models.PositiveSmallIntegerField(blank=True, null=True)

    def __str__(self):
        return self.name

    def to_domain(self):
        return DomainSavedRoute(
            id=str(self.pk),
            user_id=str(self.user_id),
            name=self.name,
            type=self.type,
            destinations=list(self.destinations or []),
            is_active=self.is_active,
            notification_preferences=self.notification_preferences or {},
            next_occurrence_date=self.next_occurrence_date,
            flexibility_days=self.flexibility_days,
        )


class RouteNotification(models.Model):
    saved_route = models.ForeignKey(SavedRoute, on_delete=models.CASCADE, related_name='notifications')
    request = models.ForeignKey(DeliveryRequest, on_delete=models.CASCADE, related_name='route_notifications')
    segment_index = models.PositiveSmallIntegerField()
    segment_from = models.CharField(max_length=255)
    segment_to = models.CharField(max_length=255)
    match_score = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('saved_route', 'request')

    def __str__(self):
        return f"{self.saved_route} <- request #{self.request_id} ({self.match_score})"
