from rest_framework import serializers
from .models import User

class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'phone_number', 'role',
            'id_verified', 'verified_sailor', 'average_rating', 'completed_deliveries',
            'reliability_score', 'subscribed', 'karma_points',
        ]
        read_only_fields = [
            'id', 'id_verified', 'verified_sailor', 'average_rating', 'completed_deliveries',
            'reliability_score', 'karma_points',
        ]

class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'phone_number', 'role']

    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data['username'],
            email=validated_data.get('email', ''),
            password=validated_data['password'],
            phone_number=validated_data.get('phone_number'),
            role=validated_data.get('role', User.Roles.REQUESTER)
        )
        return user
