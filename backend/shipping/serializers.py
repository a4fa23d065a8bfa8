from rest_framework import serializers

from orders.models import DeliveryStatus


class CarrierRateSerializer(serializers.Serializer):
    courier_id = serializers.IntegerField()
    courier_name = serializers.CharField()
    rate = serializers.DecimalField(max_digits=12, decimal_places=2)
    estimated_days = serializers.CharField(allow_null=True)


class TrackingScanSerializer(serializers.Serializer):
    date = serializers.CharField()
    status = serializers.CharField()
    activity = serializers.CharField()
    location = serializers.CharField()


class TrackingSnapshotSerializer(serializers.Serializer):
    awb_code = serializers.CharField()
    shipment_status = serializers.CharField()
    current_status = serializers.CharField()
    scans = TrackingScanSerializer(many=True)


class ShipRequestSerializer(serializers.Serializer):
    courier_id = serializers.IntegerField(min_value=1)
    pickup_date = serializers.DateField(required=False)


class ServiceabilityRequestSerializer(serializers.Serializer):
    pincode = serializers.RegexField(r"^\d{5,6}$")

    def validate_pincode(self, value):
        return value.zfill(6)


class ManualDeliveryUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DeliveryStatus.choices, required=False)
    carrier = serializers.CharField(max_length=128, required=False)
    tracking_number = serializers.CharField(max_length=64, required=False)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    estimated_delivery_date = serializers.DateTimeField(required=False)
    actual_delivery_date = serializers.DateTimeField(required=False, allow_null=True)
    carrier_awb = serializers.CharField(max_length=64, required=False, allow_null=True)
