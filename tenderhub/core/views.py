import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from .models import AuditLog
from .filters import AuditLogFilter
from .serializers import UserSerializer, UserCreateSerializer, AuditLogSerializer

logger = logging.getLogger('tenderhub.core')


class TenderHubTokenObtainPairSerializer(TokenObtainPairSerializer):
    """JWT pair plus the user profile, with the role carried in the token"""
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        return token


class TenderHubTokenObtainPairView(TokenObtainPairView):
    serializer_class = TenderHubTokenObtainPairSerializer


class TenderHubTokenRefreshSerializer(TokenRefreshSerializer):
    """Refresh that answers 401 rather than 500 when the token's user was deleted"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class TenderHubTokenRefreshView(TokenRefreshView):
    serializer_class = TenderHubTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Create an account and sign it in"""
    serializer = UserCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.save()
    refresh = TenderHubTokenObtainPairSerializer.get_token(user)
    logger.info(f"User {user.username} registered")
    return Response({
        'user': UserSerializer(user).data,
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Profile of the signed-in user"""
    return Response(UserSerializer(request.user).data)


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """Audit trail, newest first (filters: action, model, object_id, date_from, date_to)"""
    queryset = AuditLog.objects.select_related('user')
    if not request.user.is_admin:
        queryset = queryset.filter(user=request.user)

    filterset = AuditLogFilter(request.query_params, queryset=queryset)
    serializer = AuditLogSerializer(filterset.qs.order_by('-created_at', '-id'), many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """One audit entry; non-admins may only read their own"""
    audit_log = get_object_or_404(AuditLog.objects.select_related('user'), pk=pk)
    if not request.user.is_admin and audit_log.user_id != request.user.id:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    return Response(AuditLogSerializer(audit_log).data)
