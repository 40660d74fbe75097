from rest_framework import serializers

from pricing.couriers import available_couriers
from .models import Delivery, DeliveryRequest, Match, RouteNotification, SavedRoute, Trip


class TripSerializer(serializers.ModelSerializer):
    class Meta:
        model = Trip
        fields = '__all__'
        read_only_fields = ['user', 'status', 'created_at']

    def validate(self, attrs):
        trip_type = attrs.get('type', getattr(self.instance, 'type', None))
        if trip_type == Trip.Type.PLANE and not attrs.get('departure_date', getattr(self.instance, 'departure_date', None)):
            raise serializers.ValidationError({'departure_date': 'Plane trips need a departure date.'})
        if trip_type == Trip.Type.BOAT:
            start = attrs.get('eta_window_start', getattr(self.instance, 'eta_window_start', None))
            end = attrs.get('eta_window_end', getattr(self.instance, 'eta_window_end', None))
            if start and end and start > end:
                raise serializers.ValidationError({'eta_window_end': 'ETA window ends before it starts.'})
        return attrs


class DeliveryRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryRequest
        fields = '__all__'
        read_only_fields = ['user', 'status', 'created_at']

    def validate(self, attrs):
        earliest = attrs.get('deadline_earliest')
        latest = attrs.get('deadline_latest')
        if earliest and latest and earliest > latest:
            raise serializers.ValidationError({'deadline_earliest': 'Earliest deadline is after the latest deadline.'})
        return attrs


class DeliverySerializer(serializers.ModelSerializer):
    class Meta:
        model = Delivery
        fields = '__all__'
        read_only_fields = ['match', 'confirmed_at', 'auto_release_at']


class MatchSerializer(serializers.ModelSerializer):
    delivery = DeliverySerializer(read_only=True)

    class Meta:
        model = Match
        fields = '__all__'
        read_only_fields = ['status', 'match_score', 'escrow_poll_url', 'escrow_reference']


class SavedRouteSerializer(serializers.ModelSerializer):
    class Meta:
        model = SavedRoute
        fields = '__all__'
        read_only_fields = ['user']


class RouteNotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = RouteNotification
        fields = '__all__'


class ShippingEstimateInputSerializer(serializers.Serializer):
    origin_country = serializers.CharField(max_length=2)
    destination_country = serializers.CharField(max_length=2)
    length = serializers.FloatField(min_value=0)
    width = serializers.FloatField(min_value=0)
    height = serializers.FloatField(min_value=0)
    weight = serializers.FloatField(min_value=0)
    declared_value = serializers.FloatField(min_value=0, default=0)
    selected_courier = serializers.ChoiceField(choices=available_couriers())
    restricted_items = serializers.BooleanField(default=False)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    distance_km = serializers.FloatField(required=False, allow_null=True, min_value=0)


class PlaneCheckInputSerializer(serializers.Serializer):
    weight = serializers.FloatField(min_value=0)
    length = serializers.FloatField(min_value=0, default=0)
    width = serializers.FloatField(min_value=0, default=0)
    height = serializers.FloatField(min_value=0, default=0)
    restricted_items = serializers.BooleanField(default=False)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    origin_country = serializers.CharField(max_length=2, required=False, allow_blank=True)
    destination_country = serializers.CharField(max_length=2, required=False, allow_blank=True)
