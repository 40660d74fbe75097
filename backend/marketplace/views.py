import logging

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from matching.match_score import MatchScoreParams, calculate_match_score
from matching.smart_matching import find_matches_for_request, find_matches_for_trip
from matching.state_machines import match_state
from matching.state_machines.match_state import MatchStateException, MatchStatus
from pricing.karma import karma_for_delivery
from pricing.shipping import ShippingEstimateInput, calculate_shipping_estimate
from restrictions.plane import ItemSpecs, check_plane_restrictions, plane_restriction_details
from routing.route_matching import find_route_matches, new_route_notifications
from .models import Delivery, DeliveryRequest, Match, RouteNotification, SavedRoute, Trip
from .serializers import (
    DeliveryRequestSerializer,
    MatchSerializer,
    PlaneCheckInputSerializer,
    RouteNotificationSerializer,
    SavedRouteSerializer,
    ShippingEstimateInputSerializer,
    TripSerializer,
)

logger = logging.getLogger(__name__)


class IsOwnerOrReadOnly(permissions.BasePermission):
    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.user == request.user


def _travelers_for(trips):
    return {str(t.user_id): t.user.to_traveler() for t in trips}


def _suggestion_payload(suggestion):
    return {
        'trip_id': suggestion.trip.id,
        'request_id': suggestion.request.id,
        'traveler_id': suggestion.traveler.id,
        'score': suggestion.score,
        'confidence': suggestion.confidence.value,
        'label': suggestion.label,
        'breakdown': suggestion.breakdown.as_dict(),
    }


class TripViewSet(viewsets.ModelViewSet):
    """
    Standard ViewSet for Trips.
    - Public: List/Retrieve
    - Owner: Create/Update/Delete
    """
    queryset = Trip.objects.select_related('user').all()
    serializer_class = TripSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsOwnerOrReadOnly]

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)

    @action(detail=True, methods=['get'])
    def matches(self, request, pk=None):
        """
        Open requests this trip could carry, best first.
        """
        trip = self.get_object()
        open_requests = DeliveryRequest.objects.filter(status=DeliveryRequest.Status.OPEN).exclude(user=trip.user)

        suggestions = find_matches_for_trip(
            trip.to_domain(),
            [r.to_domain() for r in open_requests],
            {str(trip.user_id): trip.user.to_traveler()},
        )
        return Response([_suggestion_payload(s) for s in suggestions])


class DeliveryRequestViewSet(viewsets.ModelViewSet):
    """
    Handles request creation. New requests are matched against saved routes
    and the route owners get a notification row.
    """
    queryset = DeliveryRequest.objects.all()
    serializer_class = DeliveryRequestSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsOwnerOrReadOnly]

    def perform_create(self, serializer):
        delivery_request = serializer.save(user=self.request.user)
        try:
            self._notify_saved_routes(delivery_request)
        except Exception as e:
            # notifications never block posting the request
            logger.warning("Route matching failed for request %s: %s", delivery_request.id, e)

    def _notify_saved_routes(self, delivery_request):
        routes = SavedRoute.objects.filter(is_active=True).exclude(user=delivery_request.user)
        matches = find_route_matches(delivery_request.to_domain(), [r.to_domain() for r in routes])
        existing = RouteNotification.objects.filter(request=delivery_request).values_list('saved_route_id', 'request_id')
        fresh = new_route_notifications(matches, existing=[(str(a), str(b)) for a, b in existing])

        RouteNotification.objects.bulk_create([
            RouteNotification(
                saved_route_id=int(m.saved_route_id),
                request=delivery_request,
                segment_index=m.segment_index,
                segment_from=m.segment_from,
                segment_to=m.segment_to,
                match_score=m.match_score,
            )
            for m in fresh
        ])
        logger.info("Created %d route notifications for request %s", len(fresh), delivery_request.id)

    @action(detail=True, methods=['get'])
    def matches(self, request, pk=None):
        """
        Active trips that could carry this request, best first.
        """
        delivery_request = self.get_object()
        trips = list(
            Trip.objects.select_related('user')
            .filter(status=Trip.Status.ACTIVE)
            .exclude(user=delivery_request.user)
        )
        suggestions = find_matches_for_request(
            delivery_request.to_domain(),
            [t.to_domain() for t in trips],
            _travelers_for(trips),
        )
        return Response([_suggestion_payload(s) for s in suggestions])


class MatchViewSet(viewsets.ModelViewSet):
    """
    Handles the match lifecycle: chat, escrow payment, delivery, confirmation, dispute.
    Both sides of the match (traveler + requester) can see it.
    """
    serializer_class = MatchSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        user = self.request.user
        return Match.objects.select_related('trip', 'request', 'trip__user').filter(
            Q(trip__user=user) | Q(request__user=user)
        )

    def perform_create(self, serializer):
        trip = serializer.validated_data['trip']
        delivery_request = serializer.validated_data['request']
        breakdown = calculate_match_score(
            MatchScoreParams.from_listings(trip.to_domain(), delivery_request.to_domain(), trip.user.to_traveler())
        )
        serializer.save(match_score=breakdown.total_score)

    def _transition(self, match, fn, *args, **kwargs):
        domain = fn(match.to_domain(), *args, **kwargs)
        match.apply_domain(domain)
        match.save(update_fields=['status', 'escrow_reference', 'updated_at'])
        return domain

    @action(detail=True, methods=['post'])
    def chat(self, request, pk=None):
        match = self.get_object()
        try:
            self._transition(match, match_state.start_chat)
        except MatchStateException as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": match.status})

    @action(detail=True, methods=['post'])
    def pay(self, request, pk=None):
        """
        Initiate the Paynow escrow payment (requester only).
        """
        match = self.get_object()
        if match.request.user != request.user:
            return Response({"error": "Not authorized"}, status=status.HTTP_403_FORBIDDEN)
        if match.status != MatchStatus.CHATTING.value:
            return Response({"error": f"Cannot pay for a match in status {match.status}"}, status=status.HTTP_400_BAD_REQUEST)

        email = request.user.email or "requester@sparecarry.app"

        from .paynow_service import PaynowService
        service = PaynowService()
        result = service.initiate_escrow(match, email, is_premium=request.user.subscribed)

        if not result['success']:
            return Response(result, status=status.HTTP_502_BAD_GATEWAY)

        match.escrow_poll_url = result['poll_url']
        match.save(update_fields=['escrow_poll_url', 'updated_at'])
        return Response(result)

    @action(detail=True, methods=['post'], url_path='payment-status')
    def payment_status(self, request, pk=None):
        """
        Poll Paynow; once paid the match moves to escrow_paid.
        """
        match = self.get_object()
        if not match.escrow_poll_url:
            return Response({"error": "No payment initiated"}, status=status.HTTP_400_BAD_REQUEST)

        from .paynow_service import PaynowService
        service = PaynowService()
        result = service.check_status(match.escrow_poll_url)
        if not result['success']:
            return Response(result, status=status.HTTP_502_BAD_GATEWAY)
        if not result['paid']:
            return Response({"paid": False, "status": match.status})

        try:
            self._transition(match, match_state.mark_escrow_paid, match.escrow_poll_url)
        except MatchStateException as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"paid": True, "status": match.status})

    @action(detail=True, methods=['post'], url_path='mark-delivered')
    def mark_delivered(self, request, pk=None):
        """
        Traveler reports hand-over. Starts the 24h auto-release clock.
        """
        match = self.get_object()
        if match.trip.user != request.user:
            return Response({"error": "Not authorized"}, status=status.HTTP_403_FORBIDDEN)

        delivered_at = timezone.now()
        try:
            with transaction.atomic():
                self._transition(match, match_state.mark_delivered, delivered_at)
                Delivery.objects.update_or_create(
                    match=match,
                    defaults={
                        'delivered_at': delivered_at,
                        'auto_release_at': match_state.auto_release_due_at(delivered_at),
                    },
                )
        except MatchStateException as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": match.status})

    @action(detail=True, methods=['post'], url_path='confirm-delivery')
    def confirm_delivery(self, request, pk=None):
        """
        Requester confirms receipt: escrow released, traveler earns karma.
        """
        match = self.get_object()
        if match.request.user != request.user:
            return Response({"error": "Not authorized"}, status=status.HTTP_403_FORBIDDEN)

        confirmed_at = timezone.now()
        try:
            with transaction.atomic():
                self._transition(match, match_state.confirm_delivery, confirmed_at)
                Delivery.objects.update_or_create(match=match, defaults={'confirmed_at': confirmed_at})
                DeliveryRequest.objects.filter(pk=match.request_id).update(status=DeliveryRequest.Status.COMPLETED)
        except MatchStateException as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        karma = self._award_karma(match)
        return Response({"status": match.status, "karma_awarded": karma})

    def _award_karma(self, match):
        try:
            karma = karma_for_delivery(match.request.weight_kg, float(match.reward_amount))
            traveler = match.trip.user
            type(traveler).objects.filter(pk=traveler.pk).update(
                karma_points=F('karma_points') + karma,
                completed_deliveries=F('completed_deliveries') + 1,
            )
            traveler.refresh_from_db()
            traveler.refresh_reliability_score()
            traveler.save(update_fields=['reliability_score'])
        except Exception as e:
            # karma is a bonus; confirmation already went through
            logger.warning("Karma award failed for match %s: %s", match.id, e)
            return 0
        return karma

    @action(detail=False, methods=['post'], url_path='auto-release', permission_classes=[permissions.IsAdminUser])
    def auto_release(self, request):
        """
        Release escrow for deliveries left unconfirmed for 24h. Run on a schedule.
        """
        now = timezone.now()
        due = Match.objects.select_related('delivery', 'request', 'trip__user').filter(
            status=MatchStatus.DELIVERED.value,
            delivery__auto_release_at__lte=now,
            delivery__confirmed_at__isnull=True,
            delivery__dispute_opened_at__isnull=True,
        )

        released = []
        for match in due:
            if not match_state.should_auto_release(match.to_domain(), now):
                continue
            try:
                with transaction.atomic():
                    self._transition(match, match_state.auto_release, now)
                    Delivery.objects.filter(match=match).update(confirmed_at=now)
                    DeliveryRequest.objects.filter(pk=match.request_id).update(status=DeliveryRequest.Status.COMPLETED)
            except MatchStateException as e:
                logger.warning("Auto-release skipped for match %s: %s", match.id, e)
                continue
            released.append({"match": match.id, "karma_awarded": self._award_karma(match)})

        logger.info("Auto-released %d matches", len(released))
        return Response({"released": released})

    @action(detail=True, methods=['post'])
    def dispute(self, request, pk=None):
        match = self.get_object()
        opened_at = timezone.now()
        try:
            with transaction.atomic():
                self._transition(match, match_state.open_dispute, opened_at)
                Delivery.objects.update_or_create(match=match, defaults={'dispute_opened_at': opened_at})
        except MatchStateException as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": match.status})

    @action(detail=False, methods=['get'], url_path='eligible-for-dispute')
    def eligible_for_dispute(self, request):
        matches = self.get_queryset().exclude(delivery__dispute_opened_at__isnull=False)
        eligible = [m for m in matches if match_state.is_eligible_for_dispute(m.to_domain())]
        return Response(MatchSerializer(eligible, many=True).data)


class SavedRouteViewSet(viewsets.ModelViewSet):
    serializer_class = SavedRouteSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return SavedRoute.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)

    @action(detail=True, methods=['get'])
    def notifications(self, request, pk=None):
        route = self.get_object()
        return Response(RouteNotificationSerializer(route.notifications.order_by('-created_at'), many=True).data)


class ShippingEstimateView(APIView):
    """
    Courier vs SpareCarry price comparison. Public.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = ShippingEstimateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        is_premium = bool(getattr(request.user, 'subscribed', False))
        estimate = calculate_shipping_estimate(
            ShippingEstimateInput(is_premium=is_premium, **serializer.validated_data)
        )
        if estimate is None:
            return Response({"error": "Unknown courier"}, status=status.HTTP_400_BAD_REQUEST)

        data = estimate.as_dict()
        # internal accounting stays server-side
        for key in ('platform_fee_plane', 'platform_fee_boat', 'stripe_fee_plane', 'stripe_fee_boat',
                    'net_revenue_plane', 'net_revenue_boat'):
            data.pop(key, None)
        return Response(data)


class PlaneCheckView(APIView):
    """
    Can this item fly? Public.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = PlaneCheckInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        specs = ItemSpecs(**serializer.validated_data)
        check = check_plane_restrictions(specs)
        details = plane_restriction_details(specs)
        return Response({
            'can_transport_by_plane': check.can_transport_by_plane,
            'reason': check.reason,
            'restriction_type': check.restriction_type.value if check.restriction_type else None,
            'suggested_method': check.suggested_method,
            'fits_carry_on': details.fits_carry_on,
            'fits_checked_baggage': details.fits_checked_baggage,
            'fits_oversized': details.fits_oversized,
        })
