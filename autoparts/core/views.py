from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.views import TokenObtainPairView
from django.db.models import F
from autoparts.catalog.models import Part
from autoparts.parties.models import Customer, Supplier
from autoparts.inventory.models import LowStockAlert
from .models import AuditLog
from .serializers import UserSerializer, AuditLogSerializer
from .utils import paginated_response


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user"""
    return Response(UserSerializer(request.user).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = AuditLog.objects.all()

    # Non-admin users only see their own actions
    if not (request.user.is_staff or request.user.role == 'admin'):
        queryset = queryset.filter(user=request.user)

    user_filter = request.query_params.get('user', None)
    action_filter = request.query_params.get('action', None)
    entity_type = request.query_params.get('entity_type', None)
    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)

    if user_filter:
        queryset = queryset.filter(user_id=user_filter)
    if action_filter:
        queryset = queryset.filter(action=action_filter)
    if entity_type:
        queryset = queryset.filter(entity_type=entity_type)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    queryset = queryset.order_by('-created_at', '-id')
    return paginated_response(request, queryset, AuditLogSerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_entity(request, entity_type, entity_id):
    """Audit trail of a single entity"""
    queryset = AuditLog.objects.filter(entity_type=entity_type, entity_id=entity_id).order_by('-created_at', '-id')
    return Response(AuditLogSerializer(queryset, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Headline counts for the dashboard"""
    return Response({
        'total_parts': Part.objects.filter(is_archived=False).count(),
        'total_suppliers': Supplier.objects.count(),
        'total_customers': Customer.objects.count(),
        'low_stock_count': Part.objects.filter(
            is_archived=False,
            stock_quantity__lt=F('min_stock_threshold'),
        ).count(),
        'open_alerts': LowStockAlert.objects.filter(is_resolved=False).count(),
    }, status=status.HTTP_200_OK)
