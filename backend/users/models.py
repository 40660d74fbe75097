from django.contrib.auth.models import AbstractUser
from django.db import models
from phonenumber_field.modelfields import PhoneNumberField

from listings.models import Traveler
from trust.reliability import ReliabilityFactors, calculate_reliability_score


class User(AbstractUser):
    class Roles(models.TextChoices):
        TRAVELER = "TRAVELER", "Traveler"
        REQUESTER = "REQUESTER", "Requester"
        ADMIN = "ADMIN", "Admin"

    # Role fields define what the app shows first
    # TRAVELER: Posts trips and carries items
    # REQUESTER: Posts delivery requests
    # ADMIN: Moderation + superuser access
    # A user can do both in practice; role is the default home screen.
    role = models.CharField(max_length=20, choices=Roles.choices, default=Roles.REQUESTER)

    # International numbers (+61..., +1...), region only used for numbers typed without a prefix
    phone_number = PhoneNumberField(blank=True, null=True, unique=True)

    # Trust fields used by match scoring
    id_verified = models.BooleanField(default=False)
    verified_sailor = models.BooleanField(default=False)
    average_rating = models.FloatField(blank=True, null=True)
    completed_deliveries = models.PositiveIntegerField(default=0)
    cancellation_count = models.PositiveIntegerField(default=0)
    reliability_score = models.FloatField(default=0)

    # Premium subscription halves the platform fee
    subscribed = models.BooleanField(default=False)

    karma_points = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def completion_rate(self):
        total = self.completed_deliveries + self.cancellation_count
        if total == 0:
            return 0.0
        return self.completed_deliveries / total * 100

    def refresh_reliability_score(self):
        self.reliability_score = calculate_reliability_score(
            ReliabilityFactors(
                completed_deliveries=self.completed_deliveries,
                average_rating=self.average_rating,
                cancellation_count=self.cancellation_count,
                completion_rate=self.completion_rate,
            )
        )
        return self.reliability_score

    def to_traveler(self):
        return Traveler(
            id=str(self.pk),
            id_verified=self.id_verified,
            verified_sailor=self.verified_sailor,
            average_rating=self.average_rating,
            completed_deliveries=self.completed_deliveries,
            subscribed=self.subscribed,
            reliability_score=self.reliability_score,
        )
